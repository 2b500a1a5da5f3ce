from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from ala_data.api.deps import get_query_pool_analytics_use_case
from ala_data.api.schemas.analytics import (
    ProcessedDataMetadataResponse,
    ProcessedDataRequest,
    ProcessedDataResponse,
)
from ala_data.api.schemas.pool_info import pool_info_response
from ala_data.application.dto.analytics import QueryPoolAnalyticsInput
from ala_data.application.use_cases.query_pool_analytics import QueryPoolAnalyticsUseCase
from ala_data.domain.exceptions import NotFoundError, UpstreamQueryError, ValidationError
from ala_data.domain.services.normalization import format_datetime

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/api/processed-data", response_model=ProcessedDataResponse)
async def post_processed_data(
    req: ProcessedDataRequest,
    use_case: QueryPoolAnalyticsUseCase = Depends(get_query_pool_analytics_use_case),
):
    try:
        output = await use_case.execute(
            QueryPoolAnalyticsInput(
                token_address=req.token_address or "",
                query=req.query or "",
            )
        )
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except UpstreamQueryError as exc:
        logger.error("analytics: query_failed token=%s error=%s", req.token_address, exc)
        raise HTTPException(status_code=500, detail=f"Failed to process query: {exc}") from exc

    return ProcessedDataResponse(
        success=True,
        token_address=output.token_address,
        token_symbol=output.pool.token.symbol,
        pool_address=output.pool.pool_id.lower(),
        pool_info=pool_info_response(output.pool),
        user_query=output.user_query,
        generated_sql=output.generated_sql,
        row_count=len(output.rows),
        truncated=output.truncated,
        data=output.rows,
        metadata=ProcessedDataMetadataResponse(
            timestamp=format_datetime(output.executed_at),
            model_used=output.model_used,
            amp_url=output.engine_url,
            max_rows=output.max_rows,
            note="Pool address obtained from subgraph query",
        ),
    )

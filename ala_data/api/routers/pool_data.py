from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response, StreamingResponse

from ala_data.api.deps import get_export_pool_history_use_case
from ala_data.application.dto.pool_history import AggregatePoolHistoryInput, ExportPoolHistoryOutput
from ala_data.application.use_cases.export_pool_history import ExportPoolHistoryUseCase
from ala_data.domain.exceptions import NotFoundError, UpstreamQueryError, ValidationError
from ala_data.infrastructure.export.zip_bundle import (
    build_bundle_filename,
    build_table_filename,
    iter_zip_bundle,
)

router = APIRouter()
logger = logging.getLogger(__name__)

CSV_TABLES = {
    "swaps": "swaps",
    "lp-actions": "lp_actions",
    "pool-stats": "pool_stats",
    "positions": "positions",
    "collects": "collects",
    "ticks": "ticks",
}


def _attachment(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


async def _export(
    use_case: ExportPoolHistoryUseCase,
    *,
    token_address: str | None,
    days: str,
) -> ExportPoolHistoryOutput:
    try:
        return await use_case.execute(
            AggregatePoolHistoryInput(token_address=token_address or "", days=days)
        )
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except UpstreamQueryError as exc:
        logger.error("pool_data: export_failed token=%s error=%s", token_address, exc)
        raise HTTPException(status_code=500, detail=f"Failed to fetch pool data: {exc}") from exc


@router.get("/api/pool-data")
async def get_pool_data(
    token_address: str | None = Query(default=None, alias="tokenAddress"),
    days: str = Query(default="1"),
    use_case: ExportPoolHistoryUseCase = Depends(get_export_pool_history_use_case),
):
    output = await _export(use_case, token_address=token_address, days=days)
    filename = build_bundle_filename(
        symbol=output.pool.token.symbol,
        days=output.window_days,
        generated_at=output.generated_at,
    )
    return StreamingResponse(
        iter_zip_bundle(output.tables),
        media_type="application/zip",
        headers=_attachment(filename),
    )


@router.get("/api/csv/{table}")
async def get_pool_table_csv(
    table: str,
    token_address: str | None = Query(default=None, alias="tokenAddress"),
    days: str = Query(default="1"),
    use_case: ExportPoolHistoryUseCase = Depends(get_export_pool_history_use_case),
):
    table_name = CSV_TABLES.get(table)
    if table_name is None:
        raise HTTPException(status_code=404, detail=f"Unknown table: {table}.")

    output = await _export(use_case, token_address=token_address, days=days)
    filename = build_table_filename(
        table=table_name,
        symbol=output.pool.token.symbol,
        days=output.window_days,
        generated_at=output.generated_at,
    )
    return Response(
        content=output.table(table_name).render(),
        media_type="text/csv",
        headers=_attachment(filename),
    )

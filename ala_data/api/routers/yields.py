from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ala_data.api.deps import get_yield_rates_use_case
from ala_data.api.schemas.yields import (
    CurrentYieldResponse,
    CurrentYieldValuesResponse,
    SeriesStatsResponse,
    YieldHistoryPointResponse,
    YieldHistoryResponse,
    YieldHistoryStatsResponse,
    YieldHistoryValuesResponse,
    YieldMetadataResponse,
    YieldPoolInfoResponse,
)
from ala_data.application.dto.yields import SeriesStatsOutput
from ala_data.application.use_cases.get_yield_rates import GetYieldRatesUseCase
from ala_data.domain.exceptions import NotFoundError, UpstreamQueryError
from ala_data.domain.services.normalization import format_datetime

router = APIRouter()

YIELDS_SOURCE = "DefiLlama Yields API"


def _stats(stats: SeriesStatsOutput) -> SeriesStatsResponse:
    return SeriesStatsResponse(
        min=stats.min,
        max=stats.max,
        avg=stats.avg,
        first=stats.first,
        latest=stats.latest,
    )


@router.get("/api/aave-apy/current", response_model=CurrentYieldResponse)
async def get_current_apy(
    use_case: GetYieldRatesUseCase = Depends(get_yield_rates_use_case),
):
    try:
        output = await use_case.current()
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except UpstreamQueryError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    snapshot = output.snapshot
    fetched_at = format_datetime(output.fetched_at)
    return CurrentYieldResponse(
        success=True,
        pool_info=YieldPoolInfoResponse(
            pool_id=snapshot.pool_id,
            protocol=snapshot.project,
            chain=snapshot.chain,
            asset=snapshot.symbol,
            underlying_token=snapshot.underlying_token,
        ),
        current=CurrentYieldValuesResponse(
            timestamp=fetched_at,
            apy=snapshot.apy,
            apy_base=snapshot.apy_base,
            apy_reward=snapshot.apy_reward,
            tvl_usd=snapshot.tvl_usd,
            apy_change_1d=snapshot.apy_change_1d,
            apy_change_7d=snapshot.apy_change_7d,
            apy_change_30d=snapshot.apy_change_30d,
            apy_mean_30d=snapshot.apy_mean_30d,
            stablecoin=snapshot.stablecoin,
            il_risk=snapshot.il_risk,
            exposure=snapshot.exposure,
            predictions=snapshot.predictions,
        ),
        metadata=YieldMetadataResponse(
            source=YIELDS_SOURCE,
            fetched_at=fetched_at,
            note="Use /api/aave-apy/history for historical data",
        ),
    )


@router.get("/api/aave-apy/history", response_model=YieldHistoryResponse)
async def get_apy_history(
    use_case: GetYieldRatesUseCase = Depends(get_yield_rates_use_case),
):
    try:
        output = await use_case.history()
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except UpstreamQueryError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    points = output.points
    return YieldHistoryResponse(
        success=True,
        pool_info=YieldPoolInfoResponse(pool_id=output.pool_id),
        historical=YieldHistoryValuesResponse(
            count=len(points),
            first_date=points[0].timestamp,
            last_date=points[-1].timestamp,
            statistics=YieldHistoryStatsResponse(
                apy=_stats(output.apy),
                tvl=_stats(output.tvl),
                data_points=output.data_points,
            ),
            data=[
                YieldHistoryPointResponse(
                    timestamp=point.timestamp,
                    apy=point.apy,
                    apy_base=point.apy_base,
                    apy_reward=point.apy_reward,
                    tvl_usd=point.tvl_usd,
                )
                for point in points
            ],
        ),
        metadata=YieldMetadataResponse(
            source=YIELDS_SOURCE,
            fetched_at=format_datetime(output.fetched_at),
            note="Use /api/aave-apy/current for real-time data",
        ),
    )

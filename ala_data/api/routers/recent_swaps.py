from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ala_data.api.deps import get_recent_swaps_use_case
from ala_data.api.schemas.pool_info import pool_info_response
from ala_data.api.schemas.recent_swaps import (
    LatestPriceResponse,
    RecentSwapResponse,
    RecentSwapsResponse,
    SwapSummaryResponse,
)
from ala_data.application.dto.recent_swaps import GetRecentSwapsInput, GetRecentSwapsOutput
from ala_data.application.use_cases.get_recent_swaps import (
    LATEST_WINDOW_SECONDS,
    RECENT_WINDOW_SECONDS,
    GetRecentSwapsUseCase,
)
from ala_data.domain.exceptions import NotFoundError, UpstreamQueryError, ValidationError
from ala_data.domain.services.normalization import format_datetime

router = APIRouter()


async def _run(
    use_case: GetRecentSwapsUseCase,
    *,
    token_address: str | None,
    window_seconds: int,
    time_range: str,
) -> GetRecentSwapsOutput:
    try:
        return await use_case.execute(
            GetRecentSwapsInput(
                token_address=token_address or "",
                window_seconds=window_seconds,
                time_range=time_range,
            )
        )
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except UpstreamQueryError as exc:
        raise HTTPException(status_code=500, detail=f"Failed to fetch swaps: {exc}") from exc


def _to_response(output: GetRecentSwapsOutput, *, include_latest_price: bool) -> RecentSwapsResponse:
    summary = None
    if output.summary is not None:
        summary = SwapSummaryResponse(
            total_volume_usd=output.summary.total_volume_usd,
            swap_count=output.summary.swap_count,
            avg_swap_size_usd=output.summary.avg_swap_size_usd,
            min_swap_usd=output.summary.min_swap_usd,
            max_swap_usd=output.summary.max_swap_usd,
            unique_traders=output.summary.unique_traders,
        )
    latest_price = None
    if include_latest_price and output.latest_price is not None:
        latest_price = LatestPriceResponse(
            sqrt_price_x96=output.latest_price.sqrt_price_x96,
            tick=output.latest_price.tick,
            timestamp=output.latest_price.timestamp,
            amount_usd=output.latest_price.amount_usd,
        )

    return RecentSwapsResponse(
        token_address=output.token_address,
        token_symbol=output.pool.token.symbol,
        pool_address=output.pool.pool_id,
        pool_info=pool_info_response(output.pool),
        time_range=output.time_range,
        from_timestamp=int(output.from_time.timestamp()),
        to_timestamp=int(output.to_time.timestamp()),
        from_time=format_datetime(output.from_time),
        to_time=format_datetime(output.to_time),
        swap_count=len(output.swaps),
        swaps=[RecentSwapResponse(**vars(swap)) for swap in output.swaps],
        summary=summary,
        latest_price=latest_price,
    )


@router.get("/api/recent-swaps", response_model=RecentSwapsResponse)
async def get_recent_swaps(
    token_address: str | None = Query(default=None, alias="tokenAddress"),
    use_case: GetRecentSwapsUseCase = Depends(get_recent_swaps_use_case),
):
    output = await _run(
        use_case,
        token_address=token_address,
        window_seconds=RECENT_WINDOW_SECONDS,
        time_range="last_10_minutes",
    )
    return _to_response(output, include_latest_price=False)


@router.get("/api/latest-swaps", response_model=RecentSwapsResponse)
async def get_latest_swaps(
    token_address: str | None = Query(default=None, alias="tokenAddress"),
    use_case: GetRecentSwapsUseCase = Depends(get_recent_swaps_use_case),
):
    output = await _run(
        use_case,
        token_address=token_address,
        window_seconds=LATEST_WINDOW_SECONDS,
        time_range="last_5_seconds",
    )
    return _to_response(output, include_latest_price=True)

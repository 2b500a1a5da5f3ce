from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from ala_data.application.dto.recent_swaps import (
    GetRecentSwapsInput,
    GetRecentSwapsOutput,
    LatestPriceOutput,
    RecentSwapOutput,
)
from ala_data.application.ports.pool_history_port import PoolHistoryPort
from ala_data.application.use_cases.resolve_pool import resolve_pool_for_token
from ala_data.domain.entities.pool_history import SwapRecord
from ala_data.domain.exceptions import ValidationError
from ala_data.domain.services.normalization import format_timestamp, gas_cost_native
from ala_data.domain.services.pagination import PAGE_SIZE, paginate_by_timestamp
from ala_data.domain.services.swap_summary import summarize_swaps


RECENT_WINDOW_SECONDS = 10 * 60
LATEST_WINDOW_SECONDS = 5
logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _to_output(swap: SwapRecord) -> RecentSwapOutput:
    return RecentSwapOutput(
        swap_id=swap.id,
        block_number=swap.block_number,
        timestamp=swap.timestamp,
        timestamp_readable=format_timestamp(swap.timestamp),
        tx_hash=swap.tx_hash,
        log_index=swap.log_index,
        sender=swap.sender,
        recipient=swap.recipient,
        origin=swap.origin,
        amount0=swap.amount0,
        amount1=swap.amount1,
        amount_usd=swap.amount_usd,
        sqrt_price_x96=swap.sqrt_price_x96,
        tick=swap.tick,
        gas_used=swap.gas_used,
        gas_price=swap.gas_price,
        gas_cost_eth=gas_cost_native(swap.gas_used, swap.gas_price),
    )


class GetRecentSwapsUseCase:
    def __init__(
        self,
        *,
        pool_history_port: PoolHistoryPort,
        page_size: int = PAGE_SIZE,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._port = pool_history_port
        self._page_size = page_size
        self._clock = clock

    async def execute(self, command: GetRecentSwapsInput) -> GetRecentSwapsOutput:
        if command.window_seconds <= 0:
            raise ValidationError("window_seconds must be positive.")

        pool = await resolve_pool_for_token(
            pool_history_port=self._port,
            token_address=command.token_address,
        )
        pool_id = pool.pool_id.lower()
        to_time = self._clock()
        from_time = to_time - timedelta(seconds=command.window_seconds)
        min_timestamp = int(from_time.timestamp())

        logger.info(
            "get_recent_swaps: fetching pool=%s range=%s min_timestamp=%s",
            pool_id,
            command.time_range,
            min_timestamp,
        )

        async def fetch_page(cursor: int) -> list[SwapRecord]:
            return await self._port.fetch_swaps_page(pool_id=pool_id, min_timestamp=cursor)

        swaps = await paginate_by_timestamp(
            fetch_page,
            start_timestamp=min_timestamp,
            timestamp_of=lambda swap: swap.timestamp,
            page_size=self._page_size,
            entity="swaps",
        )

        latest_price: LatestPriceOutput | None = None
        if swaps:
            last = swaps[-1]
            latest_price = LatestPriceOutput(
                sqrt_price_x96=last.sqrt_price_x96,
                tick=last.tick,
                timestamp=last.timestamp,
                amount_usd=last.amount_usd,
            )

        logger.info("get_recent_swaps: returning pool=%s swaps=%s", pool_id, len(swaps))
        return GetRecentSwapsOutput(
            token_address=command.token_address,
            pool=pool,
            time_range=command.time_range,
            from_time=from_time,
            to_time=to_time,
            swaps=[_to_output(swap) for swap in swaps],
            summary=summarize_swaps(swaps),
            latest_price=latest_price,
        )

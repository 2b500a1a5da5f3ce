from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from ala_data.application.dto.pool_history import AggregatePoolHistoryInput
from ala_data.application.ports.pool_history_port import PoolHistoryPort
from ala_data.application.use_cases.resolve_pool import resolve_pool_for_token
from ala_data.domain.entities.pool_history import PoolHistoryBundle
from ala_data.domain.exceptions import ValidationError
from ala_data.domain.services.pagination import PAGE_SIZE, paginate_by_timestamp


SECONDS_PER_DAY = 86400
logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_days(value: int | str) -> int | None:
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


class AggregatePoolHistoryUseCase:
    def __init__(
        self,
        *,
        pool_history_port: PoolHistoryPort,
        max_days: int = 30,
        page_size: int = PAGE_SIZE,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._port = pool_history_port
        self._max_days = max_days
        self._page_size = page_size
        self._clock = clock

    async def execute(self, command: AggregatePoolHistoryInput) -> PoolHistoryBundle:
        days = _parse_days(command.days)
        if days is None or days < 1 or days > self._max_days:
            raise ValidationError(f"days must be between 1 and {self._max_days}.")

        pool = await resolve_pool_for_token(
            pool_history_port=self._port,
            token_address=command.token_address,
        )
        pool_id = pool.pool_id.lower()
        min_timestamp = int(self._clock().timestamp()) - days * SECONDS_PER_DAY

        logger.info(
            "aggregate_pool_history: start pool=%s days=%s min_timestamp=%s",
            pool_id,
            days,
            min_timestamp,
        )

        # gather() raises the first failure; siblings still in flight are not cancelled
        # and their results are dropped with this call's frame.
        swaps, mints, burns, pool_states, positions, collects, ticks = await asyncio.gather(
            self._paginate("swaps", self._port.fetch_swaps_page, pool_id, min_timestamp),
            self._paginate("mints", self._port.fetch_mints_page, pool_id, min_timestamp),
            self._paginate("burns", self._port.fetch_burns_page, pool_id, min_timestamp),
            self._paginate("pool_states", self._port.fetch_pool_states_page, pool_id, min_timestamp),
            self._port.fetch_positions(pool_id=pool_id),
            self._paginate("collects", self._port.fetch_collects_page, pool_id, min_timestamp),
            self._port.fetch_ticks(pool_id=pool_id),
        )

        logger.info(
            "aggregate_pool_history: done pool=%s swaps=%s mints=%s burns=%s pool_states=%s "
            "positions=%s collects=%s ticks=%s",
            pool_id,
            len(swaps),
            len(mints),
            len(burns),
            len(pool_states),
            len(positions),
            len(collects),
            len(ticks),
        )
        return PoolHistoryBundle(
            pool=pool,
            window_days=days,
            min_timestamp=min_timestamp,
            swaps=swaps,
            mints=mints,
            burns=burns,
            pool_states=pool_states,
            positions=positions,
            collects=collects,
            ticks=ticks,
        )

    async def _paginate(self, entity: str, fetch, pool_id: str, min_timestamp: int) -> list:
        async def fetch_page(cursor: int):
            return await fetch(pool_id=pool_id, min_timestamp=cursor)

        return await paginate_by_timestamp(
            fetch_page,
            start_timestamp=min_timestamp,
            timestamp_of=lambda record: record.timestamp,
            page_size=self._page_size,
            entity=entity,
        )

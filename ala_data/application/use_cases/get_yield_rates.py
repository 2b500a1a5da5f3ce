from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from ala_data.application.dto.yields import CurrentYieldOutput, SeriesStatsOutput, YieldHistoryOutput
from ala_data.application.ports.yield_data_port import YieldDataPort
from ala_data.domain.exceptions import NotFoundError
from ala_data.domain.services.series_stats import summarize_series


logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _stats(values) -> SeriesStatsOutput:
    low, high, avg, first, latest = summarize_series(values)
    return SeriesStatsOutput(min=low, max=high, avg=avg, first=first, latest=latest)


class GetYieldRatesUseCase:
    def __init__(
        self,
        *,
        yield_data_port: YieldDataPort,
        pool_id: str,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._port = yield_data_port
        self._pool_id = pool_id
        self._clock = clock

    @property
    def pool_id(self) -> str:
        return self._pool_id

    async def current(self) -> CurrentYieldOutput:
        logger.info("get_yield_rates: fetching_current pool_id=%s", self._pool_id)
        snapshot = await self._port.get_pool_snapshot(pool_id=self._pool_id)
        if snapshot is None:
            raise NotFoundError(f"Yield pool {self._pool_id} not found.")
        return CurrentYieldOutput(snapshot=snapshot, fetched_at=self._clock())

    async def history(self) -> YieldHistoryOutput:
        logger.info("get_yield_rates: fetching_history pool_id=%s", self._pool_id)
        points = await self._port.get_pool_history(pool_id=self._pool_id)
        if not points:
            raise NotFoundError(f"No historical data found for yield pool {self._pool_id}.")

        apy_values = [point.apy for point in points]
        logger.info(
            "get_yield_rates: fetched_history pool_id=%s points=%s",
            self._pool_id,
            len(points),
        )
        return YieldHistoryOutput(
            pool_id=self._pool_id,
            points=points,
            apy=_stats(apy_values),
            tvl=_stats(point.tvl_usd for point in points),
            data_points=sum(1 for value in apy_values if value is not None),
            fetched_at=self._clock(),
        )

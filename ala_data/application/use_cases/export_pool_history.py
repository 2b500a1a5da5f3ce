from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from ala_data.application.dto.pool_history import (
    AggregatePoolHistoryInput,
    ExportPoolHistoryOutput,
)
from ala_data.application.use_cases.aggregate_pool_history import AggregatePoolHistoryUseCase
from ala_data.domain.services.normalization import normalize_bundle


logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ExportPoolHistoryUseCase:
    def __init__(
        self,
        *,
        aggregate_use_case: AggregatePoolHistoryUseCase,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._aggregate_use_case = aggregate_use_case
        self._clock = clock

    async def execute(self, command: AggregatePoolHistoryInput) -> ExportPoolHistoryOutput:
        bundle = await self._aggregate_use_case.execute(command)
        tables = normalize_bundle(bundle)
        logger.info(
            "export_pool_history: normalized pool=%s %s",
            bundle.pool.pool_id,
            " ".join(f"{table.name}={len(table.rows)}" for table in tables),
        )
        return ExportPoolHistoryOutput(
            pool=bundle.pool,
            window_days=bundle.window_days,
            generated_at=self._clock(),
            tables=tables,
        )

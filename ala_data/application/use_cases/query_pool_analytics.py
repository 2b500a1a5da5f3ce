from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import aclosing
from datetime import datetime, timezone
from typing import Any

from ala_data.application.dto.analytics import QueryPoolAnalyticsInput, QueryPoolAnalyticsOutput
from ala_data.application.ports.analytics_query_port import AnalyticsQueryPort
from ala_data.application.ports.pool_history_port import PoolHistoryPort
from ala_data.application.ports.sql_generation_port import SqlGenerationPort
from ala_data.application.use_cases.resolve_pool import resolve_pool_for_token
from ala_data.domain.exceptions import ServiceUnavailableError, ValidationError


logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class QueryPoolAnalyticsUseCase:
    """Natural language question about a pool -> generated SQL -> rows from the analytics engine.

    The generated SQL is not inspected locally. Row batches are consumed until the
    engine is exhausted or ``max_rows`` rows were collected, whichever comes first;
    the limit is enforced on the client side only.
    """

    def __init__(
        self,
        *,
        pool_history_port: PoolHistoryPort,
        sql_generation_port: SqlGenerationPort | None,
        analytics_query_port: AnalyticsQueryPort | None,
        max_rows: int,
        clock: Callable[[], datetime] = _utc_now,
    ):
        if analytics_query_port is None:
            raise ServiceUnavailableError(
                "AMP service not configured. Please set AMP_QUERY_TOKEN in environment variables."
            )
        if sql_generation_port is None:
            raise ServiceUnavailableError(
                "OpenAI service not configured. Please set OPENAI_API_KEY in environment variables."
            )
        self._pool_history_port = pool_history_port
        self._sql_generation_port = sql_generation_port
        self._analytics_query_port = analytics_query_port
        self._max_rows = max_rows
        self._clock = clock

    async def execute(self, command: QueryPoolAnalyticsInput) -> QueryPoolAnalyticsOutput:
        if not command.query or not command.query.strip():
            raise ValidationError("query is required (natural language description).")

        pool = await resolve_pool_for_token(
            pool_history_port=self._pool_history_port,
            token_address=command.token_address,
        )
        pool_address = pool.pool_id.lower()
        logger.info(
            "query_pool_analytics: generating_sql pool=%s query=%r",
            pool_address,
            command.query,
        )
        sql = await self._sql_generation_port.generate_sql(
            instruction=command.query,
            pool_address=pool_address,
        )

        rows, truncated = await self._collect_rows(sql)
        logger.info(
            "query_pool_analytics: done pool=%s rows=%s truncated=%s",
            pool_address,
            len(rows),
            truncated,
        )
        return QueryPoolAnalyticsOutput(
            token_address=command.token_address,
            pool=pool,
            user_query=command.query,
            generated_sql=sql,
            rows=rows,
            truncated=truncated,
            max_rows=self._max_rows,
            model_used=self._sql_generation_port.model,
            engine_url=self._analytics_query_port.endpoint,
            executed_at=self._clock(),
        )

    async def _collect_rows(self, sql: str) -> tuple[list[dict[str, Any]], bool]:
        rows: list[dict[str, Any]] = []
        async with aclosing(self._analytics_query_port.stream_batches(sql)) as batches:
            async for batch in batches:
                rows.extend(batch)
                if len(rows) >= self._max_rows:
                    logger.info(
                        "query_pool_analytics: max_rows_reached limit=%s, stopping",
                        self._max_rows,
                    )
                    return rows[: self._max_rows], True
        return rows, False

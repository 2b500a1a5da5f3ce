from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ala_data.domain.entities.pool import PoolDescriptor


@dataclass(frozen=True)
class QueryPoolAnalyticsInput:
    token_address: str
    query: str


@dataclass(frozen=True)
class QueryPoolAnalyticsOutput:
    token_address: str
    pool: PoolDescriptor
    user_query: str
    generated_sql: str
    rows: list[dict[str, Any]]
    truncated: bool
    max_rows: int
    model_used: str
    engine_url: str
    executed_at: datetime

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any, Protocol


class AnalyticsQueryPort(Protocol):
    endpoint: str

    def stream_batches(self, sql: str) -> AsyncIterator[list[dict[str, Any]]]:
        ...

from __future__ import annotations

from typing import Protocol


class SqlGenerationPort(Protocol):
    model: str

    async def generate_sql(self, *, instruction: str, pool_address: str) -> str:
        ...

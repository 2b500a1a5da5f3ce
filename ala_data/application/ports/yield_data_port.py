from __future__ import annotations

from typing import Protocol

from ala_data.domain.entities.yields import YieldHistoryPoint, YieldPoolSnapshot


class YieldDataPort(Protocol):
    async def get_pool_snapshot(self, *, pool_id: str) -> YieldPoolSnapshot | None:
        ...

    async def get_pool_history(self, *, pool_id: str) -> list[YieldHistoryPoint]:
        ...

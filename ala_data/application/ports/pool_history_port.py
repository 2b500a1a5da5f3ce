from __future__ import annotations

from typing import Protocol

from ala_data.domain.entities.pool import TokenPoolLookup
from ala_data.domain.entities.pool_history import (
    CollectRecord,
    LiquidityRecord,
    PoolStateSnapshot,
    PositionRecord,
    SwapRecord,
    TickRecord,
)


class PoolHistoryPort(Protocol):
    async def find_top_pool_for_token(self, *, token_address: str) -> TokenPoolLookup | None:
        ...

    async def fetch_swaps_page(self, *, pool_id: str, min_timestamp: int) -> list[SwapRecord]:
        ...

    async def fetch_mints_page(self, *, pool_id: str, min_timestamp: int) -> list[LiquidityRecord]:
        ...

    async def fetch_burns_page(self, *, pool_id: str, min_timestamp: int) -> list[LiquidityRecord]:
        ...

    async def fetch_pool_states_page(
        self,
        *,
        pool_id: str,
        min_timestamp: int,
    ) -> list[PoolStateSnapshot]:
        ...

    async def fetch_collects_page(self, *, pool_id: str, min_timestamp: int) -> list[CollectRecord]:
        ...

    async def fetch_positions(self, *, pool_id: str) -> list[PositionRecord]:
        ...

    async def fetch_ticks(self, *, pool_id: str) -> list[TickRecord]:
        ...

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class TokenDescriptor:
    address: str
    symbol: str
    name: str
    decimals: int | None = None


@dataclass(frozen=True)
class PoolDescriptor:
    pool_id: str
    fee_tier: int
    tvl_usd: Decimal
    token: TokenDescriptor
    token0: TokenDescriptor
    token1: TokenDescriptor

    @property
    def pair(self) -> str:
        return f"{self.token0.symbol}/{self.token1.symbol}"

    @property
    def fee_tier_pct(self) -> Decimal:
        return Decimal(self.fee_tier) / Decimal("10000")


@dataclass(frozen=True)
class TokenPoolLookup:
    token: TokenDescriptor
    top_pool: PoolDescriptor | None

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class YieldPoolSnapshot:
    pool_id: str
    project: str
    chain: str
    symbol: str
    underlying_token: str | None
    apy: Decimal | None
    apy_base: Decimal | None
    apy_reward: Decimal | None
    tvl_usd: Decimal | None
    apy_change_1d: Decimal | None
    apy_change_7d: Decimal | None
    apy_change_30d: Decimal | None
    apy_mean_30d: Decimal | None
    stablecoin: bool | None
    il_risk: str | None
    exposure: str | None
    predictions: dict[str, Any] | None


@dataclass(frozen=True)
class YieldHistoryPoint:
    timestamp: str
    apy: Decimal | None
    apy_base: Decimal | None
    apy_reward: Decimal | None
    tvl_usd: Decimal | None

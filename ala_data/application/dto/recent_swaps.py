from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from ala_data.domain.entities.pool import PoolDescriptor
from ala_data.domain.services.swap_summary import SwapActivitySummary


@dataclass(frozen=True)
class GetRecentSwapsInput:
    token_address: str
    window_seconds: int
    time_range: str


@dataclass(frozen=True)
class RecentSwapOutput:
    swap_id: str
    block_number: int
    timestamp: int
    timestamp_readable: str
    tx_hash: str
    log_index: int
    sender: str
    recipient: str
    origin: str
    amount0: Decimal
    amount1: Decimal
    amount_usd: Decimal
    sqrt_price_x96: str
    tick: int
    gas_used: int
    gas_price: int
    gas_cost_eth: Decimal


@dataclass(frozen=True)
class LatestPriceOutput:
    sqrt_price_x96: str
    tick: int
    timestamp: int
    amount_usd: Decimal


@dataclass(frozen=True)
class GetRecentSwapsOutput:
    token_address: str
    pool: PoolDescriptor
    time_range: str
    from_time: datetime
    to_time: datetime
    swaps: list[RecentSwapOutput]
    summary: SwapActivitySummary | None
    latest_price: LatestPriceOutput | None

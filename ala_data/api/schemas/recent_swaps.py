from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel

from ala_data.api.schemas.pool_info import PoolInfoResponse


class RecentSwapResponse(BaseModel):
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


class SwapSummaryResponse(BaseModel):
    total_volume_usd: Decimal
    swap_count: int
    avg_swap_size_usd: Decimal
    min_swap_usd: Decimal
    max_swap_usd: Decimal
    unique_traders: int


class LatestPriceResponse(BaseModel):
    sqrt_price_x96: str
    tick: int
    timestamp: int
    amount_usd: Decimal


class RecentSwapsResponse(BaseModel):
    token_address: str
    token_symbol: str
    pool_address: str
    pool_info: PoolInfoResponse
    time_range: str
    from_timestamp: int
    to_timestamp: int
    from_time: str
    to_time: str
    swap_count: int
    swaps: list[RecentSwapResponse]
    summary: SwapSummaryResponse | None = None
    latest_price: LatestPriceResponse | None = None

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Literal

from ala_data.domain.entities.pool import PoolDescriptor


LiquidityKind = Literal["MINT", "BURN"]


@dataclass(frozen=True)
class SwapRecord:
    id: str
    block_number: int
    timestamp: int
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


@dataclass(frozen=True)
class LiquidityRecord:
    kind: LiquidityKind
    id: str
    block_number: int
    timestamp: int
    tx_hash: str
    log_index: int
    owner: str
    sender: str
    origin: str
    tick_lower: int
    tick_upper: int
    amount: int
    amount0: Decimal
    amount1: Decimal
    amount_usd: Decimal
    gas_used: int
    gas_price: int


@dataclass(frozen=True)
class PoolStateSnapshot:
    block_number: int
    timestamp: int
    tick: int
    liquidity: int
    sqrt_price: int
    token0_price: Decimal
    token1_price: Decimal
    tvl_usd: Decimal
    tvl_token0: Decimal
    tvl_token1: Decimal
    volume_usd: Decimal
    volume_token0: Decimal
    volume_token1: Decimal
    fees_usd: Decimal
    collected_fees_token0: Decimal
    collected_fees_token1: Decimal
    fee_tier: int
    tx_count: int
    token0_symbol: str
    token0_decimals: int
    token1_symbol: str
    token1_decimals: int


@dataclass(frozen=True)
class PositionRecord:
    id: str
    owner: str
    tick_lower: int
    tick_upper: int
    liquidity: int
    deposited_token0: Decimal
    deposited_token1: Decimal
    withdrawn_token0: Decimal
    withdrawn_token1: Decimal
    collected_fees_token0: Decimal
    collected_fees_token1: Decimal
    fee_growth_inside0_last_x128: str
    fee_growth_inside1_last_x128: str
    created_timestamp: int | None


@dataclass(frozen=True)
class CollectRecord:
    id: str
    timestamp: int
    tx_hash: str
    log_index: int
    owner: str
    tick_lower: int
    tick_upper: int
    amount0: Decimal
    amount1: Decimal
    amount_usd: Decimal


@dataclass(frozen=True)
class TickRecord:
    tick_idx: int
    liquidity_gross: int
    liquidity_net: int
    price0: Decimal
    price1: Decimal
    volume_token0: Decimal
    volume_token1: Decimal
    volume_usd: Decimal
    fees_usd: Decimal
    collected_fees_token0: Decimal
    collected_fees_token1: Decimal
    collected_fees_usd: Decimal
    fee_growth_outside0_x128: str
    fee_growth_outside1_x128: str
    created_timestamp: int
    created_block: int


@dataclass(frozen=True)
class PoolHistoryBundle:
    pool: PoolDescriptor
    window_days: int
    min_timestamp: int
    swaps: list[SwapRecord] = field(default_factory=list)
    mints: list[LiquidityRecord] = field(default_factory=list)
    burns: list[LiquidityRecord] = field(default_factory=list)
    pool_states: list[PoolStateSnapshot] = field(default_factory=list)
    positions: list[PositionRecord] = field(default_factory=list)
    collects: list[CollectRecord] = field(default_factory=list)
    ticks: list[TickRecord] = field(default_factory=list)

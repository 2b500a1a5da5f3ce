from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from ala_data.domain.entities.pool import PoolDescriptor, TokenDescriptor, TokenPoolLookup
from ala_data.domain.entities.pool_history import (
    CollectRecord,
    LiquidityKind,
    LiquidityRecord,
    PoolStateSnapshot,
    PositionRecord,
    SwapRecord,
    TickRecord,
)


def _dec(value: Any) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


def _int(value: Any) -> int:
    return int(value) if value is not None else 0


def _str(value: Any) -> str:
    return str(value) if value is not None else ""


def _tx(row: Mapping[str, Any]) -> Mapping[str, Any]:
    return row.get("transaction") or {}


def map_row_to_token(row: Mapping[str, Any]) -> TokenDescriptor:
    decimals = row.get("decimals")
    return TokenDescriptor(
        address=_str(row.get("id")).lower(),
        symbol=_str(row.get("symbol")),
        name=_str(row.get("name")),
        decimals=int(decimals) if decimals is not None else None,
    )


def map_row_to_token_pool_lookup(row: Mapping[str, Any]) -> TokenPoolLookup:
    token = map_row_to_token(row)
    pools = row.get("whitelistPools") or []
    if not pools:
        return TokenPoolLookup(token=token, top_pool=None)
    pool = pools[0]
    return TokenPoolLookup(
        token=token,
        top_pool=PoolDescriptor(
            pool_id=_str(pool.get("id")).lower(),
            fee_tier=_int(pool.get("feeTier")),
            tvl_usd=_dec(pool.get("totalValueLockedUSD")),
            token=token,
            token0=map_row_to_token(pool.get("token0") or {}),
            token1=map_row_to_token(pool.get("token1") or {}),
        ),
    )


def map_row_to_swap(row: Mapping[str, Any]) -> SwapRecord:
    tx = _tx(row)
    return SwapRecord(
        id=_str(row.get("id")),
        block_number=_int(tx.get("blockNumber")),
        timestamp=int(row["timestamp"]),
        tx_hash=_str(tx.get("id")),
        log_index=_int(row.get("logIndex")),
        sender=_str(row.get("sender")),
        recipient=_str(row.get("recipient")),
        origin=_str(row.get("origin")),
        amount0=_dec(row.get("amount0")),
        amount1=_dec(row.get("amount1")),
        amount_usd=_dec(row.get("amountUSD")),
        sqrt_price_x96=_str(row.get("sqrtPriceX96")),
        tick=_int(row.get("tick")),
        gas_used=_int(tx.get("gasUsed")),
        gas_price=_int(tx.get("gasPrice")),
    )


def map_row_to_liquidity(row: Mapping[str, Any], *, kind: LiquidityKind) -> LiquidityRecord:
    tx = _tx(row)
    return LiquidityRecord(
        kind=kind,
        id=_str(row.get("id")),
        block_number=_int(tx.get("blockNumber")),
        timestamp=int(row["timestamp"]),
        tx_hash=_str(tx.get("id")),
        log_index=_int(row.get("logIndex")),
        owner=_str(row.get("owner")),
        # Burn events carry no sender.
        sender=_str(row.get("sender")) if kind == "MINT" else "",
        origin=_str(row.get("origin")),
        tick_lower=_int(row.get("tickLower")),
        tick_upper=_int(row.get("tickUpper")),
        amount=_int(row.get("amount")),
        amount0=_dec(row.get("amount0")),
        amount1=_dec(row.get("amount1")),
        amount_usd=_dec(row.get("amountUSD")),
        gas_used=_int(tx.get("gasUsed")),
        gas_price=_int(tx.get("gasPrice")),
    )


def map_row_to_pool_state(row: Mapping[str, Any]) -> PoolStateSnapshot:
    pool = row.get("pool") or {}
    token0 = pool.get("token0") or {}
    token1 = pool.get("token1") or {}
    return PoolStateSnapshot(
        block_number=_int(_tx(row).get("blockNumber")),
        timestamp=int(row["timestamp"]),
        tick=_int(row.get("tick")),
        liquidity=_int(pool.get("liquidity")),
        sqrt_price=_int(pool.get("sqrtPrice")),
        token0_price=_dec(pool.get("token0Price")),
        token1_price=_dec(pool.get("token1Price")),
        tvl_usd=_dec(pool.get("totalValueLockedUSD")),
        tvl_token0=_dec(pool.get("totalValueLockedToken0")),
        tvl_token1=_dec(pool.get("totalValueLockedToken1")),
        volume_usd=_dec(pool.get("volumeUSD")),
        volume_token0=_dec(pool.get("volumeToken0")),
        volume_token1=_dec(pool.get("volumeToken1")),
        fees_usd=_dec(pool.get("feesUSD")),
        collected_fees_token0=_dec(pool.get("collectedFeesToken0")),
        collected_fees_token1=_dec(pool.get("collectedFeesToken1")),
        fee_tier=_int(pool.get("feeTier")),
        tx_count=_int(pool.get("txCount")),
        token0_symbol=_str(token0.get("symbol")),
        token0_decimals=_int(token0.get("decimals")),
        token1_symbol=_str(token1.get("symbol")),
        token1_decimals=_int(token1.get("decimals")),
    )


def map_row_to_position(row: Mapping[str, Any]) -> PositionRecord:
    created = _tx(row).get("timestamp")
    return PositionRecord(
        id=_str(row.get("id")),
        owner=_str(row.get("owner")),
        tick_lower=_int(row.get("tickLower")),
        tick_upper=_int(row.get("tickUpper")),
        liquidity=_int(row.get("liquidity")),
        deposited_token0=_dec(row.get("depositedToken0")),
        deposited_token1=_dec(row.get("depositedToken1")),
        withdrawn_token0=_dec(row.get("withdrawnToken0")),
        withdrawn_token1=_dec(row.get("withdrawnToken1")),
        collected_fees_token0=_dec(row.get("collectedFeesToken0")),
        collected_fees_token1=_dec(row.get("collectedFeesToken1")),
        fee_growth_inside0_last_x128=_str(row.get("feeGrowthInside0LastX128") or "0"),
        fee_growth_inside1_last_x128=_str(row.get("feeGrowthInside1LastX128") or "0"),
        created_timestamp=int(created) if created is not None else None,
    )


def map_row_to_collect(row: Mapping[str, Any]) -> CollectRecord:
    tx = _tx(row)
    timestamp = row.get("timestamp")
    if timestamp is None:
        timestamp = tx["timestamp"]
    return CollectRecord(
        id=_str(row.get("id")),
        timestamp=int(timestamp),
        tx_hash=_str(tx.get("id")),
        log_index=_int(row.get("logIndex")),
        owner=_str(row.get("owner")),
        tick_lower=_int(row.get("tickLower")),
        tick_upper=_int(row.get("tickUpper")),
        amount0=_dec(row.get("amount0")),
        amount1=_dec(row.get("amount1")),
        amount_usd=_dec(row.get("amountUSD")),
    )


def map_row_to_tick(row: Mapping[str, Any]) -> TickRecord:
    return TickRecord(
        tick_idx=int(row["tickIdx"]),
        liquidity_gross=_int(row.get("liquidityGross")),
        liquidity_net=_int(row.get("liquidityNet")),
        price0=_dec(row.get("price0")),
        price1=_dec(row.get("price1")),
        volume_token0=_dec(row.get("volumeToken0")),
        volume_token1=_dec(row.get("volumeToken1")),
        volume_usd=_dec(row.get("volumeUSD")),
        fees_usd=_dec(row.get("feesUSD")),
        collected_fees_token0=_dec(row.get("collectedFeesToken0")),
        collected_fees_token1=_dec(row.get("collectedFeesToken1")),
        collected_fees_usd=_dec(row.get("collectedFeesUSD")),
        fee_growth_outside0_x128=_str(row.get("feeGrowthOutside0X128") or "0"),
        fee_growth_outside1_x128=_str(row.get("feeGrowthOutside1X128") or "0"),
        created_timestamp=_int(row.get("createdAtTimestamp")),
        created_block=_int(row.get("createdAtBlockNumber")),
    )

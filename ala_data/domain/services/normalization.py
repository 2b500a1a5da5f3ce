from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from ala_data.domain.entities.pool_history import (
    CollectRecord,
    LiquidityRecord,
    PoolHistoryBundle,
    PoolStateSnapshot,
    PositionRecord,
    SwapRecord,
    TickRecord,
)


WEI_PER_ETH = Decimal(10) ** 18


@dataclass(frozen=True)
class Column:
    name: str
    quoted: bool = False


def _columns(layout: str) -> tuple[Column, ...]:
    # "*" suffix marks a quoted (identifier/text) column.
    return tuple(
        Column(name=item.rstrip("*"), quoted=item.endswith("*"))
        for item in layout.split()
    )


SWAP_COLUMNS = _columns(
    "swap_id* block_number timestamp timestamp_readable* tx_hash* log_index "
    "sender* recipient* origin* amount0 amount1 amount_usd sqrt_price_x96* tick "
    "gas_used gas_price gas_cost_eth"
)
LP_ACTION_COLUMNS = _columns(
    "event_id* event_type* block_number timestamp timestamp_readable* tx_hash* "
    "log_index owner* sender* origin* tick_lower tick_upper tick_range amount "
    "amount0 amount1 amount_usd gas_used gas_price gas_cost_eth"
)
POOL_STATS_COLUMNS = _columns(
    "block_number timestamp timestamp_readable* liquidity sqrt_price tick "
    "token0_price token1_price tvl_usd tvl_token0 tvl_token1 volume_usd "
    "volume_token0 volume_token1 fees_usd collected_fees_token0 "
    "collected_fees_token1 fee_tier tx_count token0_symbol* token0_decimals "
    "token1_symbol* token1_decimals"
)
POSITION_COLUMNS = _columns(
    "position_id* owner* tick_lower tick_upper liquidity deposited_token0 "
    "deposited_token1 withdrawn_token0 withdrawn_token1 collected_fees_token0 "
    "collected_fees_token1 fee_growth_inside_0* fee_growth_inside_1* "
    "created_timestamp created_timestamp_readable*"
)
COLLECT_COLUMNS = _columns(
    "collect_id* timestamp timestamp_readable* tx_hash* log_index owner* "
    "tick_lower tick_upper amount0 amount1 amount_usd"
)
TICK_COLUMNS = _columns(
    "tick_idx liquidity_gross liquidity_net price0 price1 volume_token0 "
    "volume_token1 volume_usd fees_usd collected_fees_token0 "
    "collected_fees_token1 collected_fees_usd fee_growth_outside_0* "
    "fee_growth_outside_1* created_timestamp created_block"
)


@dataclass(frozen=True)
class Table:
    name: str
    columns: tuple[Column, ...]
    rows: list[tuple[Any, ...]]

    @property
    def filename(self) -> str:
        return f"{self.name}.csv"

    @property
    def header(self) -> str:
        return ",".join(column.name for column in self.columns)

    def render(self) -> str:
        lines = [
            ",".join(
                _format_field(value, quoted=column.quoted)
                for column, value in zip(self.columns, row, strict=True)
            )
            for row in self.rows
        ]
        if not lines:
            return self.header + "\n"
        return self.header + "\n" + "\n".join(lines)


def _format_field(value: Any, *, quoted: bool) -> str:
    if quoted:
        text = "" if value is None else str(value)
        return '"' + text.replace('"', '""') + '"'
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def gas_cost_native(gas_used: int, gas_price: int) -> Decimal:
    return Decimal(gas_used) * Decimal(gas_price) / WEI_PER_ETH


def tick_range(tick_lower: int, tick_upper: int) -> int:
    return tick_upper - tick_lower


def format_datetime(moment: datetime) -> str:
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def format_timestamp(timestamp: int) -> str:
    return format_datetime(datetime.fromtimestamp(timestamp, tz=timezone.utc))


def normalize_swaps(swaps: list[SwapRecord]) -> Table:
    rows = [
        (
            swap.id,
            swap.block_number,
            swap.timestamp,
            format_timestamp(swap.timestamp),
            swap.tx_hash,
            swap.log_index,
            swap.sender,
            swap.recipient,
            swap.origin,
            swap.amount0,
            swap.amount1,
            swap.amount_usd,
            swap.sqrt_price_x96,
            swap.tick,
            swap.gas_used,
            swap.gas_price,
            gas_cost_native(swap.gas_used, swap.gas_price),
        )
        for swap in swaps
    ]
    return Table(name="swaps", columns=SWAP_COLUMNS, rows=rows)


def merge_liquidity_actions(
    mints: list[LiquidityRecord],
    burns: list[LiquidityRecord],
) -> list[LiquidityRecord]:
    # sorted() is stable: on equal timestamps mints keep precedence over burns.
    return sorted([*mints, *burns], key=lambda record: record.timestamp)


def normalize_liquidity_actions(
    mints: list[LiquidityRecord],
    burns: list[LiquidityRecord],
) -> Table:
    rows = [
        (
            action.id,
            action.kind,
            action.block_number,
            action.timestamp,
            format_timestamp(action.timestamp),
            action.tx_hash,
            action.log_index,
            action.owner,
            action.sender,
            action.origin,
            action.tick_lower,
            action.tick_upper,
            tick_range(action.tick_lower, action.tick_upper),
            action.amount,
            action.amount0,
            action.amount1,
            action.amount_usd,
            action.gas_used,
            action.gas_price,
            gas_cost_native(action.gas_used, action.gas_price),
        )
        for action in merge_liquidity_actions(mints, burns)
    ]
    return Table(name="lp_actions", columns=LP_ACTION_COLUMNS, rows=rows)


def normalize_pool_states(states: list[PoolStateSnapshot]) -> Table:
    rows = [
        (
            state.block_number,
            state.timestamp,
            format_timestamp(state.timestamp),
            state.liquidity,
            state.sqrt_price,
            state.tick,
            state.token0_price,
            state.token1_price,
            state.tvl_usd,
            state.tvl_token0,
            state.tvl_token1,
            state.volume_usd,
            state.volume_token0,
            state.volume_token1,
            state.fees_usd,
            state.collected_fees_token0,
            state.collected_fees_token1,
            state.fee_tier,
            state.tx_count,
            state.token0_symbol,
            state.token0_decimals,
            state.token1_symbol,
            state.token1_decimals,
        )
        for state in states
    ]
    return Table(name="pool_stats", columns=POOL_STATS_COLUMNS, rows=rows)


def normalize_positions(positions: list[PositionRecord]) -> Table:
    rows = []
    for position in positions:
        created = position.created_timestamp
        rows.append(
            (
                position.id,
                position.owner,
                position.tick_lower,
                position.tick_upper,
                position.liquidity,
                position.deposited_token0,
                position.deposited_token1,
                position.withdrawn_token0,
                position.withdrawn_token1,
                position.collected_fees_token0,
                position.collected_fees_token1,
                position.fee_growth_inside0_last_x128,
                position.fee_growth_inside1_last_x128,
                created or 0,
                format_timestamp(created) if created else "",
            )
        )
    return Table(name="positions", columns=POSITION_COLUMNS, rows=rows)


def normalize_collects(collects: list[CollectRecord]) -> Table:
    rows = [
        (
            collect.id,
            collect.timestamp,
            format_timestamp(collect.timestamp),
            collect.tx_hash,
            collect.log_index,
            collect.owner,
            collect.tick_lower,
            collect.tick_upper,
            collect.amount0,
            collect.amount1,
            collect.amount_usd,
        )
        for collect in collects
    ]
    return Table(name="collects", columns=COLLECT_COLUMNS, rows=rows)


def normalize_ticks(ticks: list[TickRecord]) -> Table:
    rows = [
        (
            tick.tick_idx,
            tick.liquidity_gross,
            tick.liquidity_net,
            tick.price0,
            tick.price1,
            tick.volume_token0,
            tick.volume_token1,
            tick.volume_usd,
            tick.fees_usd,
            tick.collected_fees_token0,
            tick.collected_fees_token1,
            tick.collected_fees_usd,
            tick.fee_growth_outside0_x128,
            tick.fee_growth_outside1_x128,
            tick.created_timestamp,
            tick.created_block,
        )
        for tick in ticks
    ]
    return Table(name="ticks", columns=TICK_COLUMNS, rows=rows)


def normalize_bundle(bundle: PoolHistoryBundle) -> list[Table]:
    """Build the six export tables in archive order."""
    return [
        normalize_swaps(bundle.swaps),
        normalize_liquidity_actions(bundle.mints, bundle.burns),
        normalize_pool_states(bundle.pool_states),
        normalize_positions(bundle.positions),
        normalize_collects(bundle.collects),
        normalize_ticks(bundle.ticks),
    ]

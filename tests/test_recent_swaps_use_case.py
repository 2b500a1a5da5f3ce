from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from ala_data.application.dto.recent_swaps import GetRecentSwapsInput
from ala_data.application.use_cases.get_recent_swaps import (
    LATEST_WINDOW_SECONDS,
    RECENT_WINDOW_SECONDS,
    GetRecentSwapsUseCase,
)
from ala_data.domain.entities.pool import PoolDescriptor, TokenDescriptor, TokenPoolLookup
from ala_data.domain.entities.pool_history import SwapRecord
from ala_data.domain.exceptions import ValidationError
from ala_data.domain.services.swap_summary import summarize_swaps


NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
NOW_TS = int(NOW.timestamp())


def _swap(timestamp: int, amount_usd: str, origin: str) -> SwapRecord:
    return SwapRecord(
        id=f"0x{timestamp}#0",
        block_number=1,
        timestamp=timestamp,
        tx_hash=f"0x{timestamp}",
        log_index=0,
        sender="0xrouter",
        recipient="0xrecipient",
        origin=origin,
        amount0=Decimal("1"),
        amount1=Decimal("-1"),
        amount_usd=Decimal(amount_usd),
        sqrt_price_x96=str(timestamp),
        tick=timestamp % 100,
        gas_used=200000,
        gas_price=10000000000,
    )


class FakeSwapsPort:
    def __init__(self, swaps: list[SwapRecord]):
        self.swaps = swaps
        self.min_timestamps: list[int] = []

    async def find_top_pool_for_token(self, *, token_address: str):
        token = TokenDescriptor(address=token_address, symbol="WETH", name="Wrapped Ether")
        usdc = TokenDescriptor(address="0xusdc", symbol="USDC", name="USD Coin")
        return TokenPoolLookup(
            token=token,
            top_pool=PoolDescriptor(
                pool_id="0xPool",
                fee_tier=500,
                tvl_usd=Decimal("5"),
                token=token,
                token0=usdc,
                token1=token,
            ),
        )

    async def fetch_swaps_page(self, *, pool_id: str, min_timestamp: int):
        _ = pool_id
        self.min_timestamps.append(min_timestamp)
        return [swap for swap in self.swaps if swap.timestamp >= min_timestamp]


def _execute(port: FakeSwapsPort, window_seconds: int, time_range: str = "last_10_minutes"):
    use_case = GetRecentSwapsUseCase(pool_history_port=port, clock=lambda: NOW)
    return asyncio.run(
        use_case.execute(
            GetRecentSwapsInput(
                token_address="0xweth",
                window_seconds=window_seconds,
                time_range=time_range,
            )
        )
    )


def test_recent_window_starts_ten_minutes_back():
    port = FakeSwapsPort(
        [
            _swap(NOW_TS - 900, "1", "0xa"),
            _swap(NOW_TS - 300, "100", "0xa"),
            _swap(NOW_TS - 60, "300", "0xb"),
        ]
    )

    output = _execute(port, RECENT_WINDOW_SECONDS)

    assert port.min_timestamps == [NOW_TS - 600]
    assert [swap.timestamp for swap in output.swaps] == [NOW_TS - 300, NOW_TS - 60]
    assert output.from_time == datetime(2024, 3, 1, 11, 50, tzinfo=timezone.utc)
    assert output.to_time == NOW
    assert output.summary.total_volume_usd == Decimal("400")
    assert output.summary.avg_swap_size_usd == Decimal("200")
    assert output.summary.min_swap_usd == Decimal("100")
    assert output.summary.max_swap_usd == Decimal("300")
    assert output.summary.unique_traders == 2
    assert output.swaps[0].gas_cost_eth == Decimal("0.002")
    assert output.swaps[0].timestamp_readable == "2024-03-01T11:55:00.000Z"


def test_latest_price_comes_from_last_swap():
    port = FakeSwapsPort([_swap(NOW_TS - 4, "10", "0xa"), _swap(NOW_TS - 1, "20", "0xb")])

    output = _execute(port, LATEST_WINDOW_SECONDS, "last_5_seconds")

    assert port.min_timestamps == [NOW_TS - 5]
    assert output.time_range == "last_5_seconds"
    assert output.latest_price.timestamp == NOW_TS - 1
    assert output.latest_price.sqrt_price_x96 == str(NOW_TS - 1)
    assert output.latest_price.amount_usd == Decimal("20")


def test_quiet_pool_has_no_summary_or_price():
    output = _execute(FakeSwapsPort([]), RECENT_WINDOW_SECONDS)

    assert output.swaps == []
    assert output.summary is None
    assert output.latest_price is None


def test_window_must_be_positive():
    with pytest.raises(ValidationError):
        _execute(FakeSwapsPort([]), 0)


def test_summarize_swaps_empty():
    assert summarize_swaps([]) is None

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ala_data.domain.entities.pool_history import SwapRecord


@dataclass(frozen=True)
class SwapActivitySummary:
    total_volume_usd: Decimal
    swap_count: int
    avg_swap_size_usd: Decimal
    min_swap_usd: Decimal
    max_swap_usd: Decimal
    unique_traders: int


def summarize_swaps(swaps: list[SwapRecord]) -> SwapActivitySummary | None:
    if not swaps:
        return None
    amounts = [swap.amount_usd for swap in swaps]
    total = sum(amounts, Decimal("0"))
    return SwapActivitySummary(
        total_volume_usd=total,
        swap_count=len(swaps),
        avg_swap_size_usd=total / Decimal(len(amounts)),
        min_swap_usd=min(amounts),
        max_swap_usd=max(amounts),
        unique_traders=len({swap.origin for swap in swaps}),
    )

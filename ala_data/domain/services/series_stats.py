from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal


def summarize_series(
    values: Iterable[Decimal | None],
) -> tuple[Decimal | None, Decimal | None, Decimal | None, Decimal | None, Decimal | None]:
    """Return (min, max, avg, first, latest) over the non-null values, in input order."""
    present = [value for value in values if value is not None]
    if not present:
        return None, None, None, None, None
    avg = sum(present, Decimal("0")) / Decimal(len(present))
    return min(present), max(present), avg, present[0], present[-1]

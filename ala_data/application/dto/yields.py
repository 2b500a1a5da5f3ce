from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from ala_data.domain.entities.yields import YieldHistoryPoint, YieldPoolSnapshot


@dataclass(frozen=True)
class CurrentYieldOutput:
    snapshot: YieldPoolSnapshot
    fetched_at: datetime


@dataclass(frozen=True)
class SeriesStatsOutput:
    min: Decimal | None
    max: Decimal | None
    avg: Decimal | None
    first: Decimal | None
    latest: Decimal | None


@dataclass(frozen=True)
class YieldHistoryOutput:
    pool_id: str
    points: list[YieldHistoryPoint]
    apy: SeriesStatsOutput
    tvl: SeriesStatsOutput
    data_points: int
    fetched_at: datetime

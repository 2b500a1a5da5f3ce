from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel


class YieldPoolInfoResponse(BaseModel):
    pool_id: str
    protocol: str | None = None
    chain: str | None = None
    asset: str | None = None
    underlying_token: str | None = None


class YieldMetadataResponse(BaseModel):
    source: str
    fetched_at: str
    note: str


class CurrentYieldValuesResponse(BaseModel):
    timestamp: str
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


class CurrentYieldResponse(BaseModel):
    success: bool
    pool_info: YieldPoolInfoResponse
    current: CurrentYieldValuesResponse
    metadata: YieldMetadataResponse


class YieldHistoryPointResponse(BaseModel):
    timestamp: str
    apy: Decimal | None
    apy_base: Decimal | None
    apy_reward: Decimal | None
    tvl_usd: Decimal | None


class SeriesStatsResponse(BaseModel):
    min: Decimal | None
    max: Decimal | None
    avg: Decimal | None
    first: Decimal | None
    latest: Decimal | None


class YieldHistoryStatsResponse(BaseModel):
    apy: SeriesStatsResponse
    tvl: SeriesStatsResponse
    data_points: int


class YieldHistoryValuesResponse(BaseModel):
    count: int
    first_date: str | None
    last_date: str | None
    statistics: YieldHistoryStatsResponse
    data: list[YieldHistoryPointResponse]


class YieldHistoryResponse(BaseModel):
    success: bool
    pool_info: YieldPoolInfoResponse
    historical: YieldHistoryValuesResponse
    metadata: YieldMetadataResponse

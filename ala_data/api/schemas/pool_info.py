from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel

from ala_data.domain.entities.pool import PoolDescriptor


class PoolInfoResponse(BaseModel):
    pair: str
    fee_tier: str
    tvl_usd: Decimal


def pool_info_response(pool: PoolDescriptor) -> PoolInfoResponse:
    return PoolInfoResponse(
        pair=pool.pair,
        fee_tier=f"{pool.fee_tier_pct}%",
        tvl_usd=pool.tvl_usd,
    )

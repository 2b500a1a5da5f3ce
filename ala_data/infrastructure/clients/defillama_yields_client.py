from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
import logging
from typing import Any

import httpx

from ala_data.domain.entities.yields import YieldHistoryPoint, YieldPoolSnapshot
from ala_data.domain.exceptions import UpstreamQueryError


logger = logging.getLogger(__name__)


def _dec_or_none(value: Any) -> Decimal | None:
    return Decimal(str(value)) if value is not None else None


def map_row_to_yield_snapshot(row: Mapping[str, Any]) -> YieldPoolSnapshot:
    underlying = row.get("underlyingTokens") or []
    return YieldPoolSnapshot(
        pool_id=str(row.get("pool")),
        project=str(row.get("project") or ""),
        chain=str(row.get("chain") or ""),
        symbol=str(row.get("symbol") or ""),
        underlying_token=underlying[0] if underlying else None,
        apy=_dec_or_none(row.get("apy")),
        apy_base=_dec_or_none(row.get("apyBase")),
        apy_reward=_dec_or_none(row.get("apyReward")),
        tvl_usd=_dec_or_none(row.get("tvlUsd")),
        apy_change_1d=_dec_or_none(row.get("apyPct1D")),
        apy_change_7d=_dec_or_none(row.get("apyPct7D")),
        apy_change_30d=_dec_or_none(row.get("apyPct30D")),
        apy_mean_30d=_dec_or_none(row.get("apyMean30d")),
        stablecoin=row.get("stablecoin"),
        il_risk=row.get("ilRisk"),
        exposure=row.get("exposure"),
        predictions=row.get("predictions") or None,
    )


def map_row_to_yield_point(row: Mapping[str, Any]) -> YieldHistoryPoint:
    return YieldHistoryPoint(
        timestamp=str(row.get("timestamp") or ""),
        apy=_dec_or_none(row.get("apy")),
        apy_base=_dec_or_none(row.get("apyBase")),
        apy_reward=_dec_or_none(row.get("apyReward")),
        tvl_usd=_dec_or_none(row.get("tvlUsd")),
    )


class DefiLlamaYieldsClient:
    def __init__(
        self,
        *,
        api_base: str,
        timeout_seconds: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout_seconds
        self._transport = transport

    async def get_pool_snapshot(self, *, pool_id: str) -> YieldPoolSnapshot | None:
        payload = await self._get_json(f"{self.api_base}/pools")
        for row in payload.get("data") or []:
            if row.get("pool") == pool_id:
                return map_row_to_yield_snapshot(row)
        return None

    async def get_pool_history(self, *, pool_id: str) -> list[YieldHistoryPoint]:
        payload = await self._get_json(f"{self.api_base}/chart/{pool_id}")
        return [map_row_to_yield_point(row) for row in payload.get("data") or []]

    async def _get_json(self, url: str) -> dict:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("defillama_yields_client: request_failed url=%s error=%s", url, exc)
            raise UpstreamQueryError(f"Failed to fetch yield data: {exc}") from exc

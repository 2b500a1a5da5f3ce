from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
import json
import logging
from typing import Any, TypeVar

import httpx

from ala_data.domain.entities.pool import TokenPoolLookup
from ala_data.domain.entities.pool_history import (
    CollectRecord,
    LiquidityRecord,
    PoolStateSnapshot,
    PositionRecord,
    SwapRecord,
    TickRecord,
)
from ala_data.domain.exceptions import UpstreamQueryError
from ala_data.infrastructure.mappers.pool_history_mapper import (
    map_row_to_collect,
    map_row_to_liquidity,
    map_row_to_pool_state,
    map_row_to_position,
    map_row_to_swap,
    map_row_to_tick,
    map_row_to_token_pool_lookup,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")


def _map_rows(
    entity: str,
    rows: list[Mapping[str, Any]],
    mapper: Callable[[Mapping[str, Any]], T],
) -> list[T]:
    try:
        return [mapper(row) for row in rows]
    except (KeyError, TypeError, ArithmeticError, ValueError) as exc:
        logger.error("univ3_subgraph_client: malformed_row entity=%s error=%r", entity, exc)
        raise UpstreamQueryError(f"Malformed {entity} row from subgraph: {exc}") from exc


TOKEN_TOP_POOL_QUERY = """
query GetPoolForToken($tokenId: ID!) {
  token(id: $tokenId) {
    id
    symbol
    name
    decimals
    whitelistPools(first: 1, orderBy: totalValueLockedUSD, orderDirection: desc) {
      id
      feeTier
      totalValueLockedUSD
      token0 { id symbol name decimals }
      token1 { id symbol name decimals }
    }
  }
}
"""

SWAPS_QUERY = """
query GetSwaps($pool: String!, $lastTimestamp: Int!, $pageSize: Int!) {
  swaps(
    first: $pageSize
    orderBy: timestamp
    orderDirection: asc
    where: { pool: $pool, timestamp_gte: $lastTimestamp }
  ) {
    id
    transaction { id blockNumber gasUsed gasPrice }
    timestamp
    logIndex
    sender
    recipient
    origin
    amount0
    amount1
    amountUSD
    sqrtPriceX96
    tick
  }
}
"""

MINTS_QUERY = """
query GetMints($pool: String!, $lastTimestamp: Int!, $pageSize: Int!) {
  mints(
    first: $pageSize
    orderBy: timestamp
    orderDirection: asc
    where: { pool: $pool, timestamp_gte: $lastTimestamp }
  ) {
    id
    transaction { id blockNumber gasUsed gasPrice }
    timestamp
    owner
    sender
    origin
    tickLower
    tickUpper
    amount
    amount0
    amount1
    amountUSD
    logIndex
  }
}
"""

BURNS_QUERY = """
query GetBurns($pool: String!, $lastTimestamp: Int!, $pageSize: Int!) {
  burns(
    first: $pageSize
    orderBy: timestamp
    orderDirection: asc
    where: { pool: $pool, timestamp_gte: $lastTimestamp }
  ) {
    id
    transaction { id blockNumber gasUsed gasPrice }
    timestamp
    owner
    origin
    tickLower
    tickUpper
    amount
    amount0
    amount1
    amountUSD
    logIndex
  }
}
"""

POOL_STATES_QUERY = """
query GetPoolStateBySwap($pool: String!, $lastTimestamp: Int!, $pageSize: Int!) {
  swaps(
    first: $pageSize
    orderBy: timestamp
    orderDirection: asc
    where: { pool: $pool, timestamp_gte: $lastTimestamp }
  ) {
    transaction { blockNumber }
    timestamp
    tick
    pool {
      liquidity
      sqrtPrice
      token0Price
      token1Price
      totalValueLockedUSD
      totalValueLockedToken0
      totalValueLockedToken1
      volumeUSD
      volumeToken0
      volumeToken1
      feesUSD
      txCount
      collectedFeesToken0
      collectedFeesToken1
      feeTier
      token0 { id symbol name decimals }
      token1 { id symbol name decimals }
    }
  }
}
"""

COLLECTS_QUERY = """
query GetCollects($pool: String!, $lastTimestamp: Int!, $pageSize: Int!) {
  collects(
    first: $pageSize
    orderBy: timestamp
    orderDirection: asc
    where: { pool: $pool, timestamp_gte: $lastTimestamp }
  ) {
    id
    transaction { id timestamp }
    timestamp
    owner
    tickLower
    tickUpper
    amount0
    amount1
    amountUSD
    logIndex
  }
}
"""

POSITIONS_QUERY = """
query GetPositions($pool: String!, $pageSize: Int!) {
  positions(first: $pageSize, where: { pool: $pool }, orderBy: id) {
    id
    owner
    tickLower
    tickUpper
    liquidity
    depositedToken0
    depositedToken1
    withdrawnToken0
    withdrawnToken1
    collectedFeesToken0
    collectedFeesToken1
    feeGrowthInside0LastX128
    feeGrowthInside1LastX128
    transaction { timestamp }
  }
}
"""

TICKS_QUERY = """
query GetTicks($pool: String!, $pageSize: Int!) {
  ticks(first: $pageSize, where: { poolAddress: $pool }, orderBy: tickIdx, orderDirection: asc) {
    tickIdx
    liquidityGross
    liquidityNet
    price0
    price1
    volumeToken0
    volumeToken1
    volumeUSD
    untrackedVolumeUSD
    feesUSD
    collectedFeesToken0
    collectedFeesToken1
    collectedFeesUSD
    createdAtTimestamp
    createdAtBlockNumber
    feeGrowthOutside0X128
    feeGrowthOutside1X128
  }
}
"""


@dataclass(frozen=True)
class Univ3SubgraphClientSettings:
    subgraph_url: str
    graph_api_key: str
    timeout_seconds: float
    page_size: int = 1000


class Univ3SubgraphClient:
    """Async GraphQL client for the Uniswap v3 subgraph.

    Every call is attempted exactly once with its own HTTP client; transport errors
    and GraphQL ``errors`` payloads surface as ``UpstreamQueryError``.
    """

    def __init__(
        self,
        settings: Univ3SubgraphClientSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings
        self._transport = transport

    async def find_top_pool_for_token(self, *, token_address: str) -> TokenPoolLookup | None:
        data = await self._post_graphql(
            query=TOKEN_TOP_POOL_QUERY,
            variables={"tokenId": token_address.lower()},
        )
        token = data.get("token")
        if not token:
            return None
        return _map_rows("token", [token], map_row_to_token_pool_lookup)[0]

    async def fetch_swaps_page(self, *, pool_id: str, min_timestamp: int) -> list[SwapRecord]:
        return await self._fetch_windowed_page(
            entity="swaps",
            query=SWAPS_QUERY,
            pool_id=pool_id,
            min_timestamp=min_timestamp,
            mapper=map_row_to_swap,
        )

    async def fetch_mints_page(self, *, pool_id: str, min_timestamp: int) -> list[LiquidityRecord]:
        return await self._fetch_windowed_page(
            entity="mints",
            query=MINTS_QUERY,
            pool_id=pool_id,
            min_timestamp=min_timestamp,
            mapper=lambda row: map_row_to_liquidity(row, kind="MINT"),
        )

    async def fetch_burns_page(self, *, pool_id: str, min_timestamp: int) -> list[LiquidityRecord]:
        return await self._fetch_windowed_page(
            entity="burns",
            query=BURNS_QUERY,
            pool_id=pool_id,
            min_timestamp=min_timestamp,
            mapper=lambda row: map_row_to_liquidity(row, kind="BURN"),
        )

    async def fetch_pool_states_page(
        self,
        *,
        pool_id: str,
        min_timestamp: int,
    ) -> list[PoolStateSnapshot]:
        return await self._fetch_windowed_page(
            entity="swaps",
            query=POOL_STATES_QUERY,
            pool_id=pool_id,
            min_timestamp=min_timestamp,
            mapper=map_row_to_pool_state,
        )

    async def fetch_collects_page(self, *, pool_id: str, min_timestamp: int) -> list[CollectRecord]:
        return await self._fetch_windowed_page(
            entity="collects",
            query=COLLECTS_QUERY,
            pool_id=pool_id,
            min_timestamp=min_timestamp,
            mapper=map_row_to_collect,
        )

    async def fetch_positions(self, *, pool_id: str) -> list[PositionRecord]:
        return await self._fetch_full_state(
            entity="positions",
            query=POSITIONS_QUERY,
            pool_id=pool_id,
            mapper=map_row_to_position,
        )

    async def fetch_ticks(self, *, pool_id: str) -> list[TickRecord]:
        return await self._fetch_full_state(
            entity="ticks",
            query=TICKS_QUERY,
            pool_id=pool_id,
            mapper=map_row_to_tick,
        )

    async def _fetch_windowed_page(
        self,
        *,
        entity: str,
        query: str,
        pool_id: str,
        min_timestamp: int,
        mapper: Callable[[Mapping[str, Any]], T],
    ) -> list[T]:
        data = await self._post_graphql(
            query=query,
            variables={
                "pool": pool_id.lower(),
                "lastTimestamp": int(min_timestamp),
                "pageSize": self._settings.page_size,
            },
        )
        rows = data.get(entity) or []
        return _map_rows(entity, rows, mapper)

    async def _fetch_full_state(
        self,
        *,
        entity: str,
        query: str,
        pool_id: str,
        mapper: Callable[[Mapping[str, Any]], T],
    ) -> list[T]:
        data = await self._post_graphql(
            query=query,
            variables={"pool": pool_id.lower(), "pageSize": self._settings.page_size},
        )
        rows = data.get(entity) or []
        if len(rows) >= self._settings.page_size:
            logger.warning(
                "univ3_subgraph_client: full_state_page_filled entity=%s pool=%s rows=%s "
                "remaining rows are not requested",
                entity,
                pool_id,
                len(rows),
            )
        logger.info(
            "univ3_subgraph_client: fetched_full_state entity=%s pool=%s rows=%s",
            entity,
            pool_id,
            len(rows),
        )
        return _map_rows(entity, rows, mapper)

    async def _post_graphql(self, *, query: str, variables: dict) -> dict:
        headers = {"Content-Type": "application/json"}
        api_key = self._settings.graph_api_key.strip()
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        try:
            async with httpx.AsyncClient(
                timeout=self._settings.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self._settings.subgraph_url,
                    json={"query": query, "variables": variables},
                    headers=headers,
                )
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("univ3_subgraph_client: request_failed error=%s", exc)
            raise UpstreamQueryError(f"Failed to query subgraph: {exc}") from exc

        errors = payload.get("errors") or []
        if errors:
            detail = json.dumps(errors)
            logger.error("univ3_subgraph_client: graphql_errors errors=%s", detail)
            raise UpstreamQueryError(f"GraphQL query failed: {detail}")

        return payload.get("data") or {}

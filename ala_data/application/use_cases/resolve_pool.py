from __future__ import annotations

import logging

from ala_data.application.ports.pool_history_port import PoolHistoryPort
from ala_data.domain.entities.pool import PoolDescriptor
from ala_data.domain.exceptions import NotFoundError, ValidationError


logger = logging.getLogger(__name__)


async def resolve_pool_for_token(
    *,
    pool_history_port: PoolHistoryPort,
    token_address: str,
) -> PoolDescriptor:
    token_id = (token_address or "").strip().lower()
    if not token_id:
        raise ValidationError("tokenAddress is required.")

    logger.info("resolve_pool: lookup token=%s", token_id)
    lookup = await pool_history_port.find_top_pool_for_token(token_address=token_id)
    if lookup is None:
        raise NotFoundError(f"Token {token_address} not found in subgraph.")
    if lookup.top_pool is None:
        raise NotFoundError(f"No pools found for token {token_address}.")

    pool = lookup.top_pool
    logger.info(
        "resolve_pool: found pool=%s token=%s pair=%s fee_pct=%s tvl_usd=%s",
        pool.pool_id,
        lookup.token.symbol,
        pool.pair,
        pool.fee_tier_pct,
        pool.tvl_usd,
    )
    return pool


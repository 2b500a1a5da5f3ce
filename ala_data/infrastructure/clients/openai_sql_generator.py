from __future__ import annotations

import logging

from openai import AsyncOpenAI, OpenAIError

from ala_data.domain.exceptions import UpstreamQueryError


logger = logging.getLogger(__name__)


AMP_DATASET = '"edgeandnode/uniswap_v3_ethereum@0.0.1"'

SYSTEM_PROMPT = f"""You write SQL for The Graph AMP query engine.
Given a natural language request, answer with ONE valid SQL query over the dataset {AMP_DATASET}.

Style
- Output only the SQL. No prose, no comments, no markdown fences.
- Postgres/Arrow-SQL dialect. Quote the dataset name, e.g. {AMP_DATASET}.event__swap.

Tables
- {AMP_DATASET}.event__swap AS s
  s.timestamp (timestamp), s.tx_hash, s.pool_address (FixedSizeBinary(20)), s.event (struct)
  s.event['recipient'], s.event['sender'], s.event['amount0'], s.event['amount1'],
  s.event['sqrtPriceX96'], s.event['liquidity'], s.event['tick'] are strings.
- {AMP_DATASET}.event__factory_pool_created AS p
  p.event['pool'], p.event['token0'], p.event['token1'], p.event['fee']

Addresses
- Never compare a FixedSizeBinary(20) column with a '0x...' string literal.
- Drop the 0x prefix, lowercase, and cast a hex literal:
  s.pool_address = arrow_cast(x'ae4045ffedf61d570e6d1fe2d71ded1a2e85a88', 'FixedSizeBinary(20)')

Numbers
- Event values are strings: arrow_cast(s.event['amount0'], 'Float64').
- Wrap with ABS() for volumes; keep the sign when trade direction matters.

Time
- Filter with s.timestamp, e.g. s.timestamp >= now() - INTERVAL '24 hours'.
- Daily buckets: DATE_TRUNC('day', s.timestamp) AS date.

Example: top traders by volume in a pool over the last 24 hours
WITH swaps AS (
    SELECT
        s.event['recipient'] AS trader,
        ABS(arrow_cast(s.event['amount0'], 'Float64')) AS amount0,
        ABS(arrow_cast(s.event['amount1'], 'Float64')) AS amount1
    FROM {AMP_DATASET}.event__swap s
    WHERE s.pool_address = arrow_cast(x'<POOL_HEX_WITHOUT_0X>', 'FixedSizeBinary(20)')
      AND s.timestamp >= now() - INTERVAL '24 hours'
)
SELECT trader, COUNT(*) AS swap_count,
       SUM(amount0) AS total_volume_amount0,
       SUM(amount1) AS total_volume_amount1,
       (SUM(amount0) + SUM(amount1)) AS total_volume
FROM swaps
GROUP BY trader
ORDER BY total_volume DESC
LIMIT 30;
"""


def build_user_prompt(*, instruction: str, pool_address: str) -> str:
    return (
        f"Generate a SQL query for pool address {pool_address}.\n"
        f"User request: {instruction}\n\n"
        "Remember to:\n"
        '1. Remove "0x" from the pool address and use lowercase\n'
        "2. Use arrow_cast(x'hex', 'FixedSizeBinary(20)') for the pool address\n"
        "3. Cast numeric fields with arrow_cast(..., 'Float64')\n"
        "4. Return ONLY the SQL query, no explanations"
    )


class OpenAISqlGenerator:
    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        max_completion_tokens: int = 20000,
        client: AsyncOpenAI | None = None,
    ):
        self.model = model
        self._max_completion_tokens = max_completion_tokens
        self._client = client or AsyncOpenAI(api_key=api_key)

    async def generate_sql(self, *, instruction: str, pool_address: str) -> str:
        logger.info("openai_sql_generator: request model=%s instruction=%r", self.model, instruction)
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": build_user_prompt(
                            instruction=instruction,
                            pool_address=pool_address,
                        ),
                    },
                ],
                temperature=1,
                max_completion_tokens=self._max_completion_tokens,
            )
        except OpenAIError as exc:
            logger.error("openai_sql_generator: request_failed error=%s", exc)
            raise UpstreamQueryError(f"Failed to generate SQL query: {exc}") from exc

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise UpstreamQueryError("Failed to generate SQL query: empty completion.")
        sql = content.strip()
        logger.debug("openai_sql_generator: generated sql=%s", sql[:200])
        return sql

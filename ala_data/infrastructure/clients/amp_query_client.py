from __future__ import annotations

from collections.abc import AsyncIterator
import json
import logging
from typing import Any

import httpx

from ala_data.domain.exceptions import UpstreamQueryError


logger = logging.getLogger(__name__)


class AmpQueryClient:
    """Runs SQL on an Amp query gateway through its JSON Lines endpoint.

    The response body is one JSON object per line; rows are regrouped into batches
    of ``batch_size`` so callers can stop reading between batches.
    """

    def __init__(
        self,
        *,
        endpoint: str,
        token: str,
        timeout_seconds: float,
        batch_size: int = 500,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.endpoint = endpoint.rstrip("/")
        self._token = token
        self._timeout_seconds = timeout_seconds
        self._batch_size = max(1, batch_size)
        self._transport = transport

    async def stream_batches(self, sql: str) -> AsyncIterator[list[dict[str, Any]]]:
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "text/plain",
        }
        logger.info("amp_query_client: executing endpoint=%s", self.endpoint)
        rows_seen = 0
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds,
                transport=self._transport,
            ) as client:
                async with client.stream(
                    "POST",
                    self.endpoint,
                    content=sql.encode("utf-8"),
                    headers=headers,
                ) as response:
                    if response.status_code >= 400:
                        body = (await response.aread()).decode("utf-8", errors="replace")
                        logger.error(
                            "amp_query_client: query_rejected status=%s body=%s",
                            response.status_code,
                            body[:500],
                        )
                        raise UpstreamQueryError(
                            f"AMP query failed: HTTP {response.status_code} {body[:500]}"
                        )

                    batch: list[dict[str, Any]] = []
                    async for line in response.aiter_lines():
                        if not line.strip():
                            continue
                        batch.append(json.loads(line))
                        if len(batch) >= self._batch_size:
                            rows_seen += len(batch)
                            yield batch
                            batch = []
                    if batch:
                        rows_seen += len(batch)
                        yield batch
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("amp_query_client: request_failed error=%s", exc)
            raise UpstreamQueryError(f"AMP query failed: {exc}") from exc

        logger.info("amp_query_client: exhausted rows=%s", rows_seen)

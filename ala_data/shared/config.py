from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


DEFAULT_SUBGRAPH_URL = (
    "https://gateway.thegraph.com/api/subgraphs/id/5zvR82QoaXYFyDEKLZ9t6v9adgnptxYpKpSbxtgVENFV"
)
AAVE_V3_WETH_POOL_ID = "e880e828-ca59-4ec6-8d4f-27182a4dc23d"


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


@dataclass(frozen=True)
class Settings:
    subgraph_url: str
    graph_api_key: str
    amp_query_url: str
    amp_query_token: str
    amp_max_rows: int
    openai_api_key: str
    openai_model: str
    host: str
    port: int
    max_days: int
    subgraph_page_size: int
    query_timeout_seconds: float
    yields_api_base: str
    aave_weth_pool_id: str
    log_level: str


def get_settings() -> Settings:
    return Settings(
        subgraph_url=_env("SUBGRAPH_URL", DEFAULT_SUBGRAPH_URL),
        graph_api_key=_env("THE_GRAPH_API_KEY", ""),
        amp_query_url=_env("AMP_QUERY_URL", "https://gateway.amp.staging.thegraph.com"),
        amp_query_token=_env("AMP_QUERY_TOKEN", ""),
        amp_max_rows=int(_env("AMP_MAX_ROWS", "10000")),
        openai_api_key=_env("OPENAI_API_KEY", ""),
        openai_model=_env("OPENAI_MODEL", "gpt-4o-mini"),
        host=_env("HOST", "localhost"),
        port=int(_env("PORT", "3000")),
        max_days=int(_env("MAX_DAYS", "30")),
        subgraph_page_size=int(_env("SUBGRAPH_PAGE_SIZE", "1000")),
        query_timeout_seconds=float(_env("QUERY_TIMEOUT_SECONDS", "30")),
        yields_api_base=_env("YIELDS_API_BASE", "https://yields.llama.fi"),
        aave_weth_pool_id=_env("AAVE_WETH_POOL_ID", AAVE_V3_WETH_POOL_ID),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
    )

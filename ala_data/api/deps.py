from __future__ import annotations

from functools import lru_cache

from fastapi import HTTPException

from ala_data.application.use_cases.aggregate_pool_history import AggregatePoolHistoryUseCase
from ala_data.application.use_cases.export_pool_history import ExportPoolHistoryUseCase
from ala_data.application.use_cases.get_recent_swaps import GetRecentSwapsUseCase
from ala_data.application.use_cases.get_yield_rates import GetYieldRatesUseCase
from ala_data.application.use_cases.query_pool_analytics import QueryPoolAnalyticsUseCase
from ala_data.domain.exceptions import ServiceUnavailableError
from ala_data.infrastructure.clients.amp_query_client import AmpQueryClient
from ala_data.infrastructure.clients.defillama_yields_client import DefiLlamaYieldsClient
from ala_data.infrastructure.clients.openai_sql_generator import OpenAISqlGenerator
from ala_data.infrastructure.clients.univ3_subgraph_client import (
    Univ3SubgraphClient,
    Univ3SubgraphClientSettings,
)
from ala_data.shared.config import get_settings


@lru_cache(maxsize=1)
def _get_univ3_subgraph_client() -> Univ3SubgraphClient:
    settings = get_settings()
    if not settings.subgraph_url:
        raise HTTPException(status_code=500, detail="SUBGRAPH_URL is required.")
    return Univ3SubgraphClient(
        Univ3SubgraphClientSettings(
            subgraph_url=settings.subgraph_url,
            graph_api_key=settings.graph_api_key,
            timeout_seconds=settings.query_timeout_seconds,
            page_size=settings.subgraph_page_size,
        )
    )


@lru_cache(maxsize=1)
def _get_sql_generator() -> OpenAISqlGenerator | None:
    settings = get_settings()
    if not settings.openai_api_key:
        return None
    return OpenAISqlGenerator(api_key=settings.openai_api_key, model=settings.openai_model)


@lru_cache(maxsize=1)
def _get_amp_query_client() -> AmpQueryClient | None:
    settings = get_settings()
    if not settings.amp_query_token:
        return None
    return AmpQueryClient(
        endpoint=settings.amp_query_url,
        token=settings.amp_query_token,
        timeout_seconds=settings.query_timeout_seconds,
    )


@lru_cache(maxsize=1)
def _get_yields_client() -> DefiLlamaYieldsClient:
    settings = get_settings()
    return DefiLlamaYieldsClient(
        api_base=settings.yields_api_base,
        timeout_seconds=settings.query_timeout_seconds,
    )


def get_aggregate_pool_history_use_case() -> AggregatePoolHistoryUseCase:
    settings = get_settings()
    return AggregatePoolHistoryUseCase(
        pool_history_port=_get_univ3_subgraph_client(),
        max_days=settings.max_days,
        page_size=settings.subgraph_page_size,
    )


def get_export_pool_history_use_case() -> ExportPoolHistoryUseCase:
    return ExportPoolHistoryUseCase(aggregate_use_case=get_aggregate_pool_history_use_case())


def get_recent_swaps_use_case() -> GetRecentSwapsUseCase:
    return GetRecentSwapsUseCase(
        pool_history_port=_get_univ3_subgraph_client(),
        page_size=get_settings().subgraph_page_size,
    )


def get_query_pool_analytics_use_case() -> QueryPoolAnalyticsUseCase:
    try:
        return QueryPoolAnalyticsUseCase(
            pool_history_port=_get_univ3_subgraph_client(),
            sql_generation_port=_get_sql_generator(),
            analytics_query_port=_get_amp_query_client(),
            max_rows=get_settings().amp_max_rows,
        )
    except ServiceUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


def get_yield_rates_use_case() -> GetYieldRatesUseCase:
    return GetYieldRatesUseCase(
        yield_data_port=_get_yields_client(),
        pool_id=get_settings().aave_weth_pool_id,
    )

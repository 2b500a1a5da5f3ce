from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
import io
import zipfile

from fastapi.testclient import TestClient

from ala_data.api import deps
from ala_data.api.deps import (
    get_export_pool_history_use_case,
    get_query_pool_analytics_use_case,
    get_recent_swaps_use_case,
    get_yield_rates_use_case,
)
from ala_data.application.dto.analytics import QueryPoolAnalyticsOutput
from ala_data.application.dto.pool_history import ExportPoolHistoryOutput
from ala_data.application.dto.recent_swaps import (
    GetRecentSwapsOutput,
    LatestPriceOutput,
    RecentSwapOutput,
)
from ala_data.application.dto.yields import SeriesStatsOutput, YieldHistoryOutput
from ala_data.application.use_cases.aggregate_pool_history import AggregatePoolHistoryUseCase
from ala_data.application.use_cases.export_pool_history import ExportPoolHistoryUseCase
from ala_data.domain.entities.pool import PoolDescriptor, TokenDescriptor
from ala_data.domain.entities.pool_history import PoolHistoryBundle
from ala_data.domain.entities.yields import YieldHistoryPoint
from ala_data.domain.exceptions import NotFoundError, UpstreamQueryError, ValidationError
from ala_data.domain.services.normalization import LP_ACTION_COLUMNS, normalize_bundle
from ala_data.domain.services.swap_summary import SwapActivitySummary
from ala_data.main import app


GENERATED_AT = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


def _pool() -> PoolDescriptor:
    weth = TokenDescriptor(address="0xweth", symbol="WETH", name="Wrapped Ether", decimals=18)
    usdc = TokenDescriptor(address="0xusdc", symbol="USDC", name="USD Coin", decimals=6)
    return PoolDescriptor(
        pool_id="0x88e6a0c2ddd26feeb64f039a2c41296fcb3f5640",
        fee_tier=3000,
        tvl_usd=Decimal("123.45"),
        token=weth,
        token0=usdc,
        token1=weth,
    )


class FakeExportUseCase:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.commands = []

    async def execute(self, command):
        self.commands.append(command)
        if self.error is not None:
            raise self.error
        bundle = PoolHistoryBundle(pool=_pool(), window_days=command.days, min_timestamp=0)
        return ExportPoolHistoryOutput(
            pool=bundle.pool,
            window_days=bundle.window_days,
            generated_at=GENERATED_AT,
            tables=normalize_bundle(bundle),
        )


def _client_with(dependency, fake) -> TestClient:
    app.dependency_overrides[dependency] = lambda: fake
    return TestClient(app)


def test_health():
    response = TestClient(app).get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_pool_data_streams_zip_attachment():
    fake = FakeExportUseCase()
    client = _client_with(get_export_pool_history_use_case, fake)

    response = client.get("/api/pool-data", params={"tokenAddress": "0xweth", "days": 3})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/zip"
    assert response.headers["content-disposition"] == (
        'attachment; filename="uniswap_v3_WETH_3days_2024-01-02T03-04-05-678Z.zip"'
    )
    archive = zipfile.ZipFile(io.BytesIO(response.content))
    assert archive.namelist() == [
        "swaps.csv",
        "lp_actions.csv",
        "pool_stats.csv",
        "positions.csv",
        "collects.csv",
        "ticks.csv",
    ]
    assert fake.commands[0].token_address == "0xweth"
    assert fake.commands[0].days == "3"

    app.dependency_overrides.clear()


def test_single_csv_download():
    client = _client_with(get_export_pool_history_use_case, FakeExportUseCase())

    response = client.get("/api/csv/lp-actions", params={"tokenAddress": "0xweth"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "lp_actions_WETH_1days_" in response.headers["content-disposition"]
    assert response.text == ",".join(column.name for column in LP_ACTION_COLUMNS) + "\n"

    app.dependency_overrides.clear()


def test_unknown_csv_table_is_404():
    fake = FakeExportUseCase()
    client = _client_with(get_export_pool_history_use_case, fake)

    response = client.get("/api/csv/trades", params={"tokenAddress": "0xweth"})

    assert response.status_code == 404
    assert fake.commands == []

    app.dependency_overrides.clear()


def test_pool_data_error_mapping():
    cases = [
        (ValidationError("days must be between 1 and 30."), 400),
        (NotFoundError("Token 0xabc not found in subgraph."), 404),
        (UpstreamQueryError("GraphQL query failed: boom"), 500),
    ]
    for error, status in cases:
        client = _client_with(get_export_pool_history_use_case, FakeExportUseCase(error))

        response = client.get("/api/pool-data", params={"tokenAddress": "0xabc", "days": 99})

        assert response.status_code == status
        assert str(error) in response.json()["detail"]

    app.dependency_overrides.clear()


def test_non_numeric_days_is_rejected_with_domain_message():
    unused_port = object()
    export = ExportPoolHistoryUseCase(
        aggregate_use_case=AggregatePoolHistoryUseCase(pool_history_port=unused_port, max_days=30)
    )
    client = _client_with(get_export_pool_history_use_case, export)

    for path in ("/api/pool-data", "/api/csv/swaps"):
        response = client.get(path, params={"tokenAddress": "0xweth", "days": "abc"})

        assert response.status_code == 400
        assert response.json() == {"detail": "days must be between 1 and 30."}

    app.dependency_overrides.clear()


def _swap_output(timestamp: int) -> RecentSwapOutput:
    return RecentSwapOutput(
        swap_id=f"0x{timestamp}#1",
        block_number=10,
        timestamp=timestamp,
        timestamp_readable="2024-01-02T03:04:05.000Z",
        tx_hash=f"0x{timestamp}",
        log_index=1,
        sender="0xs",
        recipient="0xr",
        origin="0xo",
        amount0=Decimal("1"),
        amount1=Decimal("-2"),
        amount_usd=Decimal("2"),
        sqrt_price_x96="79228162514264337593543950336",
        tick=0,
        gas_used=1,
        gas_price=1,
        gas_cost_eth=Decimal("1E-18"),
    )


class FakeRecentSwapsUseCase:
    def __init__(self):
        self.commands = []

    async def execute(self, command):
        self.commands.append(command)
        return GetRecentSwapsOutput(
            token_address=command.token_address,
            pool=_pool(),
            time_range=command.time_range,
            from_time=datetime(2024, 1, 2, 3, 4, 0, tzinfo=timezone.utc),
            to_time=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
            swaps=[_swap_output(1704164645)],
            summary=SwapActivitySummary(
                total_volume_usd=Decimal("2"),
                swap_count=1,
                avg_swap_size_usd=Decimal("2"),
                min_swap_usd=Decimal("2"),
                max_swap_usd=Decimal("2"),
                unique_traders=1,
            ),
            latest_price=LatestPriceOutput(
                sqrt_price_x96="79228162514264337593543950336",
                tick=0,
                timestamp=1704164645,
                amount_usd=Decimal("2"),
            ),
        )


def test_recent_swaps_payload():
    fake = FakeRecentSwapsUseCase()
    client = _client_with(get_recent_swaps_use_case, fake)

    response = client.get("/api/recent-swaps", params={"tokenAddress": "0xweth"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["time_range"] == "last_10_minutes"
    assert payload["pool_info"]["pair"] == "USDC/WETH"
    assert payload["pool_info"]["fee_tier"] == "0.3%"
    assert payload["from_timestamp"] == 1704164640
    assert payload["to_time"] == "2024-01-02T03:04:05.000Z"
    assert payload["swap_count"] == 1
    assert payload["swaps"][0]["swap_id"] == "0x1704164645#1"
    assert payload["summary"]["unique_traders"] == 1
    assert payload["latest_price"] is None
    assert fake.commands[0].window_seconds == 600

    app.dependency_overrides.clear()


def test_latest_swaps_includes_latest_price():
    fake = FakeRecentSwapsUseCase()
    client = _client_with(get_recent_swaps_use_case, fake)

    response = client.get("/api/latest-swaps", params={"tokenAddress": "0xweth"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["time_range"] == "last_5_seconds"
    assert payload["latest_price"]["timestamp"] == 1704164645
    assert fake.commands[0].window_seconds == 5

    app.dependency_overrides.clear()


class FakeAnalyticsUseCase:
    async def execute(self, command):
        return QueryPoolAnalyticsOutput(
            token_address=command.token_address,
            pool=_pool(),
            user_query=command.query,
            generated_sql="SELECT 1",
            rows=[{"trader": "0xa", "swap_count": 3}],
            truncated=False,
            max_rows=10000,
            model_used="gpt-4o-mini",
            engine_url="https://amp.test",
            executed_at=GENERATED_AT,
        )


def test_processed_data_returns_rows_and_metadata():
    client = _client_with(get_query_pool_analytics_use_case, FakeAnalyticsUseCase())

    response = client.post(
        "/api/processed-data",
        json={"tokenAddress": "0xweth", "query": "top traders"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["row_count"] == 1
    assert payload["data"] == [{"trader": "0xa", "swap_count": 3}]
    assert payload["generated_sql"] == "SELECT 1"
    assert payload["metadata"]["amp_url"] == "https://amp.test"
    assert payload["metadata"]["timestamp"] == "2024-01-02T03:04:05.678Z"

    app.dependency_overrides.clear()


class FakeSqlGenerator:
    model = "gpt-test"

    async def generate_sql(self, *, instruction: str, pool_address: str) -> str:
        _ = (instruction, pool_address)
        return "SELECT 1"


def test_processed_data_without_engine_token_is_503(monkeypatch):
    monkeypatch.setattr(deps, "_get_univ3_subgraph_client", lambda: object())
    monkeypatch.setattr(deps, "_get_sql_generator", lambda: FakeSqlGenerator())
    monkeypatch.setattr(deps, "_get_amp_query_client", lambda: None)

    response = TestClient(app).post(
        "/api/processed-data",
        json={"tokenAddress": "0xweth", "query": "top traders"},
    )

    assert response.status_code == 503
    assert "AMP_QUERY_TOKEN" in response.json()["detail"]


class FakeYieldRatesUseCase:
    async def current(self):
        raise NotFoundError("Yield pool abc not found.")

    async def history(self):
        return YieldHistoryOutput(
            pool_id="abc",
            points=[
                YieldHistoryPoint("2024-01-01T00:00:00.000Z", Decimal("1.5"), None, None, Decimal("10")),
                YieldHistoryPoint("2024-01-02T00:00:00.000Z", Decimal("2.5"), None, None, Decimal("20")),
            ],
            apy=SeriesStatsOutput(
                min=Decimal("1.5"),
                max=Decimal("2.5"),
                avg=Decimal("2"),
                first=Decimal("1.5"),
                latest=Decimal("2.5"),
            ),
            tvl=SeriesStatsOutput(
                min=Decimal("10"),
                max=Decimal("20"),
                avg=Decimal("15"),
                first=Decimal("10"),
                latest=Decimal("20"),
            ),
            data_points=2,
            fetched_at=GENERATED_AT,
        )


def test_apy_history_and_missing_current():
    client = _client_with(get_yield_rates_use_case, FakeYieldRatesUseCase())

    history = client.get("/api/aave-apy/history")
    current = client.get("/api/aave-apy/current")

    assert history.status_code == 200
    payload = history.json()
    assert payload["historical"]["count"] == 2
    assert payload["historical"]["first_date"] == "2024-01-01T00:00:00.000Z"
    assert payload["historical"]["last_date"] == "2024-01-02T00:00:00.000Z"
    assert payload["historical"]["statistics"]["data_points"] == 2
    assert payload["pool_info"]["pool_id"] == "abc"
    assert current.status_code == 404

    app.dependency_overrides.clear()

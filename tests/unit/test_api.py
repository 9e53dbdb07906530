"""
Unit tests for the HTTP API.
"""

from datetime import date, timedelta
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from signal_backtester.api.main import app
from signal_backtester.core.exceptions.backtest import CalculationError
from signal_backtester.engine import PRESET_CATALOG


def make_series(closes: list[float]) -> list[dict]:
    start = date(2024, 1, 1)
    return [
        {"date": (start + timedelta(days=i)).isoformat(), "close": close, "volume": 1000}
        for i, close in enumerate(closes)
    ]


class TestBacktestAPI:
    """Test suite for backtest endpoints."""

    @pytest.fixture
    def client(self) -> TestClient:
        return TestClient(app)

    @pytest.fixture
    def rising_series(self) -> list[dict]:
        return make_series([100.0 + i for i in range(30)])

    def test_should_report_health(self, client: TestClient) -> None:
        assert client.get("/health").json() == {"status": "healthy"}
        assert client.get("/").json()["status"] == "running"

    def test_should_list_presets(self, client: TestClient) -> None:
        response = client.get("/api/backtest/presets")

        assert response.status_code == 200
        presets = response.json()["presets"]
        assert [preset["name"] for preset in presets] == [p.name for p in PRESET_CATALOG]
        assert all(preset["indicators"] and preset["role_description"] for preset in presets)

    def test_should_run_custom_backtest(self, client: TestClient, rising_series) -> None:
        response = client.post(
            "/api/backtest/",
            json={
                "series": rising_series,
                "config": {"indicators": ["sma"], "take_profit_percentage": 30.0},
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["trade_count"] == 1
        assert body["trades"][0]["exit_reason"] == "FORCE_CLOSE"
        assert body["optimizer_report"] is None
        assert len(body["equity_curve"]) == 29

    def test_should_accept_kd_alias(self, client: TestClient, rising_series) -> None:
        response = client.post(
            "/api/backtest/",
            json={"series": rising_series, "config": {"indicators": ["KD", "RSI"]}},
        )

        assert response.status_code == 200

    def test_should_run_optimizer(self, client: TestClient, rising_series) -> None:
        response = client.post("/api/backtest/optimize", json={"series": rising_series})

        assert response.status_code == 200
        report = response.json()["optimizer_report"]
        assert len(report["backtest_log"]) == len(PRESET_CATALOG)
        assert report["backtest_log"][0]["status"] == "OPTIMAL"
        assert report["recommendation"]

    def test_should_dispatch_auto_config_to_optimizer(
        self, client: TestClient, rising_series
    ) -> None:
        response = client.post(
            "/api/backtest/",
            json={"series": rising_series, "config": {"strategy_type": "AUTO_CONFIG"}},
        )

        assert response.status_code == 200
        assert response.json()["optimizer_report"] is not None

    def test_should_return_empty_result_for_empty_series(self, client: TestClient) -> None:
        response = client.post("/api/backtest/", json={"series": []})

        assert response.status_code == 200
        body = response.json()
        assert body["trade_count"] == 0
        assert body["sharpe_ratio"] is None
        assert body["final_capital"] == 1_000_000.0

    @pytest.mark.parametrize(
        "config",
        [
            {"sma_short_window": 0},
            {"initial_capital": -1},
            {"commission_rate": 1.5},
            {"rsi_oversold": 80, "rsi_overbought": 70},
            {"sma_short_window": 30, "sma_long_window": 10},
            {"indicators": ["OBV"]},
        ],
    )
    def test_should_reject_invalid_config(
        self, client: TestClient, rising_series, config: dict
    ) -> None:
        response = client.post("/api/backtest/", json={"series": rising_series, "config": config})

        assert response.status_code == 422

    def test_should_reject_non_positive_close(self, client: TestClient) -> None:
        series = make_series([100.0, 101.0])
        series[1]["close"] = 0

        response = client.post("/api/backtest/", json={"series": series})

        assert response.status_code == 422

    def test_should_map_domain_errors_to_bad_request(
        self, client: TestClient, rising_series
    ) -> None:
        with patch(
            "signal_backtester.api.routers.backtest.run_backtest",
            side_effect=CalculationError("RSI failed"),
        ):
            response = client.post("/api/backtest/", json={"series": rising_series})

        assert response.status_code == 400
        assert response.json() == {"error": "CalculationError", "message": "RSI failed"}

"""
Unit tests for the backtest entry points.
"""

import math
from datetime import date, timedelta

import pytest

from signal_backtester.core.enums import IndicatorFamily, StrategyType
from signal_backtester.core.exceptions.backtest import DataError
from signal_backtester.core.models.price import PricePoint
from signal_backtester.core.models.strategy_config import StrategyConfig
from signal_backtester.engine import PRESET_CATALOG, run_backtest, run_strategy_optimizer


def make_points(closes: list[float]) -> list[PricePoint]:
    start = date(2024, 1, 1)
    return [
        PricePoint(date=start + timedelta(days=i), close=close, volume=1000.0)
        for i, close in enumerate(closes)
    ]


class TestRunBacktest:
    """Test suite for run_backtest."""

    def test_should_return_empty_result_for_empty_series(self) -> None:
        config = StrategyConfig(initial_capital=5_000.0)

        result = run_backtest([], config)

        assert result.trades == []
        assert result.final_capital == 5_000.0
        assert result.total_return == 0.0
        assert math.isnan(result.sharpe_ratio)

    def test_should_run_configured_indicators(self) -> None:
        """Test a rising series with SMA(5,20): one trade closed on the last bar."""
        config = StrategyConfig(indicators={IndicatorFamily.SMA}, take_profit_percentage=30.0)

        result = run_backtest(make_points([100.0 + i for i in range(30)]), config)

        assert len(result.trades) == 1
        assert result.win_rate == 100.0
        assert result.total_return > 0
        assert result.optimizer_report is None
        assert len(result.equity_curve) == 29

    def test_should_accept_data_frames(self, random_walk_frame) -> None:
        config = StrategyConfig(indicators={IndicatorFamily.EMA, IndicatorFamily.RSI})

        from_frame = run_backtest(random_walk_frame, config)
        from_frame_again = run_backtest(random_walk_frame, config)

        assert from_frame.to_dict() == from_frame_again.to_dict()

    def test_should_not_modify_input_frame(self, random_walk_frame) -> None:
        before = random_walk_frame.copy()

        run_backtest(random_walk_frame, StrategyConfig(indicators=set(IndicatorFamily)))

        assert random_walk_frame.equals(before)

    def test_should_dispatch_auto_config_to_optimizer(self, random_walk_frame) -> None:
        config = StrategyConfig(strategy_type=StrategyType.AUTO_CONFIG)

        result = run_backtest(random_walk_frame, config)

        assert result.optimizer_report is not None
        assert len(result.optimizer_report.backtest_log) == len(PRESET_CATALOG)

    def test_should_propagate_data_errors(self, price_frame) -> None:
        frame = price_frame([100.0, 101.0])
        frame.loc[1, "close"] = -5.0

        with pytest.raises(DataError):
            run_backtest(frame, StrategyConfig())


class TestRunStrategyOptimizer:
    """Test suite for run_strategy_optimizer."""

    def test_should_match_auto_config_dispatch(self, random_walk_frame) -> None:
        base = StrategyConfig(initial_capital=250_000.0)
        auto = StrategyConfig(initial_capital=250_000.0, strategy_type=StrategyType.AUTO_CONFIG)

        direct = run_strategy_optimizer(random_walk_frame, base)
        dispatched = run_backtest(random_walk_frame, auto)

        assert direct.optimizer_report.best_combination == (
            dispatched.optimizer_report.best_combination
        )
        assert direct.total_return == dispatched.total_return

    def test_should_report_idle_presets_for_empty_series(self) -> None:
        result = run_strategy_optimizer([], StrategyConfig())

        assert result.trades == []
        assert result.optimizer_report is not None
        assert all(item.trade_count == 0 for item in result.optimizer_report.backtest_log)

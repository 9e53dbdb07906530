"""
Unit tests for Technical Indicators Calculator.

Tests cover Strategy Pattern implementation, indicator calculations,
warm-up handling and the absence of lookahead.
"""

import numpy as np
import pandas as pd
import pytest

from signal_backtester.core.enums import IndicatorFamily
from signal_backtester.core.exceptions.backtest import CalculationError
from signal_backtester.core.models.strategy_config import StrategyConfig
from signal_backtester.infrastructure.data.technical_indicators import (
    ATRStrategy,
    EMAStrategy,
    MACDStrategy,
    RSIStrategy,
    SMAStrategy,
    StochasticStrategy,
    TechnicalIndicatorsCalculator,
    VWMAStrategy,
    compute_indicators,
)

ALL_FAMILIES = frozenset(IndicatorFamily)


class TestIndicatorStrategies:
    """Test suite for individual indicator strategies."""

    def test_should_calculate_sma_after_warm_up(self, price_frame) -> None:
        """Test that SMA is undefined until the window fills."""
        result = SMAStrategy(3, 5).calculate(price_frame(range(1, 11)))

        assert result["sma_short"].iloc[:2].isna().all()
        assert result["sma_short"].iloc[2] == pytest.approx(2.0)
        assert result["sma_long"].iloc[:4].isna().all()
        assert result["sma_long"].iloc[4] == pytest.approx(3.0)
        assert result["sma_long"].iloc[9] == pytest.approx(8.0)

    def test_should_seed_ema_with_first_close(self, price_frame) -> None:
        """Test that EMA is defined from the first row."""
        result = EMAStrategy(3, 9).calculate(price_frame([10.0, 20.0, 20.0]))

        assert result["ema_short"].iloc[0] == pytest.approx(10.0)
        assert result["ema_short"].iloc[1] == pytest.approx(10.0 + 0.5 * 10.0)
        assert result["ema_long"].iloc[1] == pytest.approx(10.0 + 0.2 * 10.0)
        assert result["ema_short"].notna().all()

    def test_should_calculate_macd_signal_from_macd(self, random_walk_frame) -> None:
        """Test that the signal line is an EMA of the MACD line itself."""
        result = MACDStrategy().calculate(random_walk_frame)

        assert result["macd"].iloc[0] == pytest.approx(0.0)
        assert result["macd_signal"].iloc[0] == pytest.approx(0.0)
        expected_signal = result["macd"].ewm(span=9, adjust=False).mean()
        np.testing.assert_allclose(result["macd_signal"], expected_signal)
        np.testing.assert_allclose(
            result["macd_histogram"], result["macd"] - result["macd_signal"]
        )

    def test_should_calculate_wilder_rsi(self, price_frame) -> None:
        """Test RSI seeding and recursive smoothing."""
        result = RSIStrategy(period=3).calculate(price_frame([10.0, 11.0, 10.0, 12.0, 11.0]))

        assert result["rsi"].iloc[:3].isna().all()
        # gain sum 3, loss sum 1 at the seed row
        assert result["rsi"].iloc[3] == pytest.approx(75.0)
        # gain (3 * 2 + 0) / 3 = 2, loss (1 * 2 + 1) / 3 = 1
        assert result["rsi"].iloc[4] == pytest.approx(100 - 100 / 3)

    def test_should_use_unit_denominator_without_losses(self, price_frame) -> None:
        """Test that a zero loss sum is replaced by 1."""
        result = RSIStrategy(period=3).calculate(price_frame([10.0, 12.0, 14.0, 16.0]))

        assert result["rsi"].iloc[3] == pytest.approx(100 - 100 / 7)

    def test_should_read_overbought_on_rising_series(self, price_frame) -> None:
        """Test that a steady climb without losses reads above the overbought band."""
        closes = [100.0 + 0.5 * i for i in range(20)]

        result = RSIStrategy(period=14).calculate(price_frame(closes))

        rsi = result["rsi"].iloc[14:]
        assert rsi.iloc[0] == pytest.approx(87.5)
        assert rsi.iloc[1] == pytest.approx(100 - 100 / (1 + 91.5 / 14))
        assert (rsi > 70).all()

    def test_should_leave_rsi_undefined_for_short_series(self, price_frame) -> None:
        result = RSIStrategy(period=14).calculate(price_frame(range(1, 10)))
        assert result["rsi"].isna().all()

    def test_should_seed_stochastic_at_fifty(self, price_frame) -> None:
        """Test that K/D start at index 8 and are smoothed from 50."""
        result = StochasticStrategy().calculate(price_frame(range(1, 12)))

        assert result["stoch_k"].iloc[:8].isna().all()
        assert result["stoch_k"].iloc[8] == pytest.approx(200 / 3)
        assert result["stoch_d"].iloc[8] == pytest.approx(500 / 9)

    def test_should_use_fifty_for_flat_stochastic_range(self, price_frame) -> None:
        result = StochasticStrategy().calculate(price_frame([5.0] * 12))

        assert result["stoch_k"].iloc[8:].tolist() == pytest.approx([50.0] * 4)
        assert result["stoch_d"].iloc[8:].tolist() == pytest.approx([50.0] * 4)

    def test_should_weight_vwma_by_volume(self, price_frame) -> None:
        result = VWMAStrategy(2).calculate(price_frame([10.0, 20.0, 30.0], volumes=[1, 3, 0]))

        assert np.isnan(result["vwma"].iloc[0])
        assert result["vwma"].iloc[1] == pytest.approx(17.5)
        assert result["vwma"].iloc[2] == pytest.approx(20.0)

    def test_should_leave_vwma_undefined_without_volume(self, price_frame) -> None:
        result = VWMAStrategy(2).calculate(price_frame([10.0, 20.0, 30.0], volumes=[0, 0, 0]))
        assert result["vwma"].isna().all()

    def test_should_smooth_close_to_close_atr(self, price_frame) -> None:
        """Test ATR seeding with the first true range and Wilder smoothing."""
        result = ATRStrategy().calculate(price_frame([10.0, 12.0, 11.0, 15.0]))

        assert np.isnan(result["atr"].iloc[0])
        assert result["atr"].iloc[1] == pytest.approx(2.0)
        assert result["atr"].iloc[2] == pytest.approx((2.0 * 13 + 1.0) / 14)
        assert result["atr"].iloc[3] == pytest.approx((27 / 14 * 13 + 4.0) / 14)

    def test_should_not_modify_input(self, price_frame) -> None:
        data = price_frame(range(1, 30))
        snapshot = data.copy()

        for strategy in (SMAStrategy(5, 20), RSIStrategy(14), StochasticStrategy(), ATRStrategy()):
            strategy.calculate(data)

        pd.testing.assert_frame_equal(data, snapshot)


class TestTechnicalIndicatorsCalculator:
    """Test suite for the calculator and compute_indicators."""

    def test_should_apply_only_enabled_families(self, random_walk_frame) -> None:
        config = StrategyConfig(indicators={IndicatorFamily.EMA, IndicatorFamily.ATR})

        result = compute_indicators(random_walk_frame, config)

        assert len(result) == len(random_walk_frame)
        assert {"ema_short", "ema_long", "atr"} <= set(result.columns)
        assert "sma_short" not in result.columns
        assert "rsi" not in result.columns

    def test_should_build_strategies_in_declaration_order(self) -> None:
        config = StrategyConfig(indicators={IndicatorFamily.ATR, IndicatorFamily.SMA})
        calculator = TechnicalIndicatorsCalculator.from_config(config)

        assert calculator.get_enabled_indicators() == [IndicatorFamily.SMA, IndicatorFamily.ATR]

    def test_should_be_idempotent(self, random_walk_frame) -> None:
        config = StrategyConfig(indicators=ALL_FAMILIES)

        first = compute_indicators(random_walk_frame, config)
        second = compute_indicators(random_walk_frame, config)

        pd.testing.assert_frame_equal(first, second)

    def test_should_not_look_ahead(self, random_walk_frame) -> None:
        """Test that appending future rows never changes earlier values."""
        config = StrategyConfig(indicators=ALL_FAMILIES)

        full = compute_indicators(random_walk_frame, config)
        prefix = compute_indicators(random_walk_frame.iloc[:100], config)

        pd.testing.assert_frame_equal(full.iloc[:100], prefix)

    def test_should_degrade_invalid_window_to_undefined(self, price_frame) -> None:
        """Test that a non-positive window yields NaN instead of raising."""
        config = StrategyConfig(indicators={IndicatorFamily.SMA}, sma_short_window=0)

        result = compute_indicators(price_frame(range(1, 30)), config)

        assert result["sma_short"].isna().all()
        assert result["sma_long"].notna().any()

    def test_should_add_columns_to_empty_frame(self, price_frame) -> None:
        config = StrategyConfig(indicators={IndicatorFamily.MACD})

        result = compute_indicators(price_frame([]), config)

        assert result.empty
        assert set(IndicatorFamily.MACD.columns) <= set(result.columns)

    def test_should_wrap_strategy_failures(self, price_frame) -> None:
        """Test that unexpected strategy errors surface as CalculationError."""

        class BrokenStrategy:
            def calculate(self, data: pd.DataFrame) -> pd.DataFrame:
                raise ValueError("broken")

        calculator = TechnicalIndicatorsCalculator({IndicatorFamily.SMA: BrokenStrategy()})

        with pytest.raises(CalculationError, match="SMA"):
            calculator.calculate_all_indicators(price_frame([1.0, 2.0]))

"""
Technical Indicators Calculator.

This module derives per-day indicator columns from a daily close/volume
series. Implements the Strategy Pattern: one strategy per indicator family,
composed by a calculator that applies the families a config enables.

Every value at row i depends only on rows <= i. Undefined values (warm-up,
zero-volume windows, invalid windows) are NaN, never 0. Strategies return a
new DataFrame and leave their input untouched.
"""

from typing import Protocol

import numpy as np
import pandas as pd
from loguru import logger

from signal_backtester.core.constants import (
    ATR_PERIOD,
    MACD_FAST_PERIOD,
    MACD_SIGNAL_PERIOD,
    MACD_SLOW_PERIOD,
    STOCH_PERIOD,
    STOCH_SEED,
    STOCH_SMOOTHING,
)
from signal_backtester.core.enums import IndicatorFamily
from signal_backtester.core.exceptions.backtest import CalculationError
from signal_backtester.core.models.strategy_config import StrategyConfig

from .price_series import PriceSeries, prepare_price_frame


class IndicatorStrategy(Protocol):
    """Protocol for technical indicator calculation strategies."""

    def calculate(self, data: pd.DataFrame) -> pd.DataFrame:
        """Calculate specific indicator for the given data."""
        ...


def _undefined(data: pd.DataFrame) -> pd.Series:
    return pd.Series(np.nan, index=data.index, dtype="float64")


def _is_valid_window(window: int, name: str) -> bool:
    if window > 0:
        return True
    logger.warning(f"Invalid {name}={window}; indicator left undefined")
    return False


def _rolling_mean(series: pd.Series, window: int, name: str) -> pd.Series:
    """Trailing simple average, NaN until ``window`` samples exist."""
    if not _is_valid_window(window, name):
        return pd.Series(np.nan, index=series.index, dtype="float64")
    return series.rolling(window=window).mean()


def _ema(series: pd.Series, period: int, name: str) -> pd.Series:
    """Recursive average with k = 2 / (period + 1), seeded with the first value."""
    if not _is_valid_window(period, name):
        return pd.Series(np.nan, index=series.index, dtype="float64")
    return series.ewm(span=period, adjust=False).mean()


class SMAStrategy:
    """Strategy for calculating the short/long simple moving average pair."""

    def __init__(self, short_window: int, long_window: int):
        self.short_window = short_window
        self.long_window = long_window

    def calculate(self, data: pd.DataFrame) -> pd.DataFrame:
        """Add ``sma_short`` and ``sma_long``."""
        result = data.copy()
        result["sma_short"] = _rolling_mean(result["close"], self.short_window, "sma_short_window")
        result["sma_long"] = _rolling_mean(result["close"], self.long_window, "sma_long_window")
        return result


class EMAStrategy:
    """Strategy for calculating the short/long exponential moving average pair."""

    def __init__(self, short_period: int, long_period: int):
        self.short_period = short_period
        self.long_period = long_period

    def calculate(self, data: pd.DataFrame) -> pd.DataFrame:
        """Add ``ema_short`` and ``ema_long``, defined from the first row."""
        result = data.copy()
        result["ema_short"] = _ema(result["close"], self.short_period, "ema_short_period")
        result["ema_long"] = _ema(result["close"], self.long_period, "ema_long_period")
        return result


class MACDStrategy:
    """Strategy for calculating MACD (Moving Average Convergence Divergence) indicators."""

    def calculate(self, data: pd.DataFrame) -> pd.DataFrame:
        """Add MACD line, signal line (EMA of MACD seeded with its first value) and histogram."""
        result = data.copy()

        result["ema_fast"] = _ema(result["close"], MACD_FAST_PERIOD, "macd_fast_period")
        result["ema_slow"] = _ema(result["close"], MACD_SLOW_PERIOD, "macd_slow_period")
        result["macd"] = result["ema_fast"] - result["ema_slow"]
        result["macd_signal"] = _ema(result["macd"], MACD_SIGNAL_PERIOD, "macd_signal_period")
        result["macd_histogram"] = result["macd"] - result["macd_signal"]

        return result


class RSIStrategy:
    """Strategy for calculating Wilder's RSI.

    The first value appears at row ``period``, seeded with the sums of the
    first ``period`` gains and losses. Both sums then decay through the running
    average. A zero loss term is replaced by 1 in the denominator.
    """

    def __init__(self, period: int, min_loss: float = 1.0):
        self.period = period
        self.min_loss = min_loss

    def calculate(self, data: pd.DataFrame) -> pd.DataFrame:
        """Add ``rsi``."""
        result = data.copy()
        result["rsi"] = _undefined(result)

        if not _is_valid_window(self.period, "rsi_period") or len(result) <= self.period:
            return result

        delta = result["close"].diff()
        avg_gain = self._wilder_average(delta.clip(lower=0))
        avg_loss = self._wilder_average((-delta).clip(lower=0))

        rs = avg_gain / avg_loss.where(avg_loss != 0, self.min_loss)
        result["rsi"] = 100 - (100 / (1 + rs))

        return result

    def _wilder_average(self, values: pd.Series) -> pd.Series:
        """Running value seeded with the window sum at row ``period``: (prev * (n - 1) + x) / n."""
        seeded = values.copy()
        seeded.iloc[: self.period] = np.nan
        seeded.iloc[self.period] = values.iloc[1 : self.period + 1].sum()
        return seeded.ewm(alpha=1 / self.period, adjust=False).mean()


class StochasticStrategy:
    """Strategy for calculating the 9-period stochastic K/D over closes only.

    K and D use a recursive 2/3 previous + 1/3 current filter seeded at 50.
    """

    def __init__(self, period: int = STOCH_PERIOD):
        self.period = period

    def calculate(self, data: pd.DataFrame) -> pd.DataFrame:
        """Add ``stoch_k`` and ``stoch_d``."""
        result = data.copy()

        lowest = result["close"].rolling(window=self.period).min()
        highest = result["close"].rolling(window=self.period).max()
        price_range = highest - lowest

        raw = (result["close"] - lowest) / price_range * 100
        raw = raw.where(price_range != 0, STOCH_SEED)

        result["stoch_k"] = self._smooth(raw)
        result["stoch_d"] = self._smooth(result["stoch_k"])

        return result

    def _smooth(self, values: pd.Series) -> pd.Series:
        """Apply the seeded recursive filter to the defined part of a series."""
        defined = values.dropna()
        if defined.empty:
            return pd.Series(np.nan, index=values.index, dtype="float64")

        seeded = pd.concat([pd.Series([STOCH_SEED]), defined], ignore_index=True)
        smoothed = seeded.ewm(alpha=STOCH_SMOOTHING, adjust=False).mean().iloc[1:]
        return pd.Series(smoothed.to_numpy(), index=defined.index).reindex(values.index)


class VWMAStrategy:
    """Strategy for calculating the volume-weighted moving average."""

    def __init__(self, period: int):
        self.period = period

    def calculate(self, data: pd.DataFrame) -> pd.DataFrame:
        """Add ``vwma``; undefined until the window fills or when window volume is zero."""
        result = data.copy()

        if not _is_valid_window(self.period, "vwma_period"):
            result["vwma"] = _undefined(result)
            return result

        price_volume = (result["close"] * result["volume"]).rolling(window=self.period).sum()
        window_volume = result["volume"].rolling(window=self.period).sum()
        result["vwma"] = (price_volume / window_volume).where(window_volume > 0)

        return result


class ATRStrategy:
    """Strategy for calculating a close-to-close ATR.

    True range is approximated as |close[i] - close[i-1]| because the series
    carries no intrabar high/low. Wilder smoothing is seeded with the first
    true range, so row 0 is undefined.
    """

    def __init__(self, period: int = ATR_PERIOD):
        self.period = period

    def calculate(self, data: pd.DataFrame) -> pd.DataFrame:
        """Add ``atr``."""
        result = data.copy()
        true_range = result["close"].diff().abs()
        result["atr"] = true_range.ewm(alpha=1 / self.period, adjust=False).mean()
        return result


def build_strategy(family: IndicatorFamily, config: StrategyConfig) -> IndicatorStrategy:
    """Create the calculation strategy for one indicator family."""
    match family:
        case IndicatorFamily.SMA:
            return SMAStrategy(config.sma_short_window, config.sma_long_window)
        case IndicatorFamily.EMA:
            return EMAStrategy(config.ema_short_period, config.ema_long_period)
        case IndicatorFamily.RSI:
            return RSIStrategy(config.rsi_period)
        case IndicatorFamily.MACD:
            return MACDStrategy()
        case IndicatorFamily.STOCH:
            return StochasticStrategy()
        case IndicatorFamily.VWMA:
            return VWMAStrategy(config.vwma_period)
        case IndicatorFamily.ATR:
            return ATRStrategy()
    raise ValueError(f"Unsupported indicator family: {family}")


class TechnicalIndicatorsCalculator:
    """
    Technical indicators calculator using Strategy Pattern.

    This class orchestrates the enabled indicator strategies and provides a
    clean interface for enriching a price frame.
    """

    def __init__(self, strategies: dict[IndicatorFamily, IndicatorStrategy] | None = None) -> None:
        """Initialize calculator with an explicit family-to-strategy mapping."""
        self._strategies: dict[IndicatorFamily, IndicatorStrategy] = dict(strategies or {})

    @classmethod
    def from_config(cls, config: StrategyConfig) -> "TechnicalIndicatorsCalculator":
        """Create a calculator for the families enabled in a config, in declaration order."""
        return cls(
            {
                family: build_strategy(family, config)
                for family in IndicatorFamily
                if config.uses(family)
            }
        )

    def get_enabled_indicators(self) -> list[IndicatorFamily]:
        """Get list of indicator families this calculator applies."""
        return list(self._strategies.keys())

    def calculate_all_indicators(self, data: pd.DataFrame) -> pd.DataFrame:
        """
        Calculate all configured technical indicators.

        Args:
            data: Normalized price frame (date, close, volume)

        Returns:
            New DataFrame with additional indicator columns

        Raises:
            CalculationError: If an indicator strategy fails unexpectedly
        """
        result = data.copy()
        if result.empty:
            for family in self._strategies:
                for column in family.columns:
                    result[column] = pd.Series(dtype="float64")
            return result

        for family, strategy in self._strategies.items():
            logger.debug(f"Calculating {family} indicators")
            try:
                result = strategy.calculate(result)
            except (ValueError, TypeError, KeyError, IndexError) as e:
                logger.error(f"Failed to calculate {family} indicators: {e}")
                raise CalculationError(
                    f"Technical indicator calculation failed for {family}"
                ) from e

        enabled = ", ".join(self.get_enabled_indicators())
        logger.debug(f"Calculated indicators [{enabled}] for {len(result)} rows")
        return result


def compute_indicators(series: PriceSeries, config: StrategyConfig) -> pd.DataFrame:
    """
    Enrich a raw price series with the indicators a config enables.

    Args:
        series: PricePoint sequence or DataFrame with date/close/volume columns
        config: Strategy configuration

    Returns:
        Equal-length DataFrame with one column per derived value
    """
    frame = prepare_price_frame(series)
    return TechnicalIndicatorsCalculator.from_config(config).calculate_all_indicators(frame)

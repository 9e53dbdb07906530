"""
Strategy configuration model.
"""

from dataclasses import dataclass

from signal_backtester.core.constants import (
    DEFAULT_COMMISSION_RATE,
    DEFAULT_EMA_LONG_PERIOD,
    DEFAULT_EMA_SHORT_PERIOD,
    DEFAULT_INITIAL_CAPITAL,
    DEFAULT_RSI_OVERBOUGHT,
    DEFAULT_RSI_OVERSOLD,
    DEFAULT_RSI_PERIOD,
    DEFAULT_SMA_LONG_WINDOW,
    DEFAULT_SMA_SHORT_WINDOW,
    DEFAULT_STOP_LOSS_PERCENTAGE,
    DEFAULT_TAKE_PROFIT_PERCENTAGE,
    DEFAULT_TAX_RATE,
    DEFAULT_VWMA_PERIOD,
    STOCH_PERIOD,
)
from signal_backtester.core.enums import IndicatorFamily, StrategyType, TradingMode

DEFAULT_INDICATORS = frozenset({IndicatorFamily.SMA, IndicatorFamily.RSI})


@dataclass(frozen=True)
class StrategyConfig:
    """Configuration for a single backtest execution.

    Enabled indicator families are a typed set; windows are only read for
    the families that are enabled. The configuration is not validated on
    construction: invalid windows degrade to undefined indicator values.
    Use ``validate_strategy_config`` to reject them up front.
    """

    indicators: frozenset[IndicatorFamily] = DEFAULT_INDICATORS
    sma_short_window: int = DEFAULT_SMA_SHORT_WINDOW
    sma_long_window: int = DEFAULT_SMA_LONG_WINDOW
    ema_short_period: int = DEFAULT_EMA_SHORT_PERIOD
    ema_long_period: int = DEFAULT_EMA_LONG_PERIOD
    rsi_period: int = DEFAULT_RSI_PERIOD
    rsi_overbought: float = DEFAULT_RSI_OVERBOUGHT
    rsi_oversold: float = DEFAULT_RSI_OVERSOLD
    vwma_period: int = DEFAULT_VWMA_PERIOD
    stop_loss_percentage: float = DEFAULT_STOP_LOSS_PERCENTAGE
    take_profit_percentage: float = DEFAULT_TAKE_PROFIT_PERCENTAGE
    commission_rate: float = DEFAULT_COMMISSION_RATE
    tax_rate: float = DEFAULT_TAX_RATE
    initial_capital: float = DEFAULT_INITIAL_CAPITAL
    trading_mode: TradingMode = TradingMode.LONG_ONLY
    strategy_type: StrategyType = StrategyType.CUSTOM

    def __post_init__(self) -> None:
        """Normalize the indicator collection to a frozenset."""
        if not isinstance(self.indicators, frozenset):
            object.__setattr__(self, "indicators", frozenset(self.indicators))

    def uses(self, family: IndicatorFamily) -> bool:
        """Check if an indicator family is enabled."""
        return family in self.indicators

    @property
    def voting_families(self) -> list[IndicatorFamily]:
        """Enabled families that take part in the signal consensus, in declaration order."""
        return [family for family in IndicatorFamily if family.is_voting and self.uses(family)]

    @property
    def required_history(self) -> int:
        """Number of bars needed before every enabled family produces a value.

        EMA and MACD are defined from the first bar; ATR needs one prior close.
        """
        windows = [1]
        if self.uses(IndicatorFamily.SMA):
            windows += [self.sma_short_window, self.sma_long_window]
        if self.uses(IndicatorFamily.RSI):
            windows.append(self.rsi_period + 1)
        if self.uses(IndicatorFamily.STOCH):
            windows.append(STOCH_PERIOD)
        if self.uses(IndicatorFamily.VWMA):
            windows.append(self.vwma_period)
        if self.uses(IndicatorFamily.ATR):
            windows.append(2)
        return max(windows)

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "indicators": sorted(family.value for family in self.indicators),
            "sma_short_window": self.sma_short_window,
            "sma_long_window": self.sma_long_window,
            "ema_short_period": self.ema_short_period,
            "ema_long_period": self.ema_long_period,
            "rsi_period": self.rsi_period,
            "rsi_overbought": self.rsi_overbought,
            "rsi_oversold": self.rsi_oversold,
            "vwma_period": self.vwma_period,
            "stop_loss_percentage": self.stop_loss_percentage,
            "take_profit_percentage": self.take_profit_percentage,
            "commission_rate": self.commission_rate,
            "tax_rate": self.tax_rate,
            "initial_capital": self.initial_capital,
            "trading_mode": self.trading_mode.value,
            "strategy_type": self.strategy_type.value,
        }

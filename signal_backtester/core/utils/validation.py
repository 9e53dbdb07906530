"""
Validation utilities for core domain models.

Provides consistent validation across the application. The simulation
itself never calls these; callers that want hard failures on a bad
configuration validate explicitly before running a backtest.
"""

from signal_backtester.core.enums import IndicatorFamily
from signal_backtester.core.exceptions.backtest import ConfigurationError
from signal_backtester.core.models.strategy_config import StrategyConfig


def _require(condition: bool, field: str, value: object, requirement: str) -> None:
    if not condition:
        raise ConfigurationError(field, value, requirement)


def validate_strategy_config(config: StrategyConfig) -> StrategyConfig:
    """Reject configurations that would silently produce undefined indicators.

    Only windows of enabled families are checked.

    Args:
        config: Strategy configuration

    Returns:
        The validated configuration

    Raises:
        ConfigurationError: On the first invalid field
    """
    _require(config.initial_capital > 0, "initial_capital", config.initial_capital, "must be > 0")
    _require(
        0 <= config.commission_rate < 1,
        "commission_rate",
        config.commission_rate,
        "must be in [0, 1)",
    )
    _require(0 <= config.tax_rate < 1, "tax_rate", config.tax_rate, "must be in [0, 1)")
    _require(
        config.stop_loss_percentage >= 0,
        "stop_loss_percentage",
        config.stop_loss_percentage,
        "must be >= 0",
    )
    _require(
        config.take_profit_percentage >= 0,
        "take_profit_percentage",
        config.take_profit_percentage,
        "must be >= 0",
    )

    if config.uses(IndicatorFamily.SMA):
        _require(
            config.sma_short_window > 0, "sma_short_window", config.sma_short_window, "must be > 0"
        )
        _require(
            config.sma_long_window > 0, "sma_long_window", config.sma_long_window, "must be > 0"
        )
    if config.uses(IndicatorFamily.EMA):
        _require(
            config.ema_short_period > 0, "ema_short_period", config.ema_short_period, "must be > 0"
        )
        _require(
            config.ema_long_period > 0, "ema_long_period", config.ema_long_period, "must be > 0"
        )
    if config.uses(IndicatorFamily.RSI):
        _require(config.rsi_period > 0, "rsi_period", config.rsi_period, "must be > 0")
        _require(
            0 <= config.rsi_oversold < config.rsi_overbought <= 100,
            "rsi_oversold",
            config.rsi_oversold,
            f"must satisfy 0 <= oversold < overbought ({config.rsi_overbought}) <= 100",
        )
    if config.uses(IndicatorFamily.VWMA):
        _require(config.vwma_period > 0, "vwma_period", config.vwma_period, "must be > 0")

    return config

"""
Preset catalog scanned by the strategy optimizer.

Each preset combines at least two indicator families and forces its own
windows and stop-loss over the base configuration. Families a preset does
not list are disabled while it runs.
"""

from signal_backtester.core.enums import FrequencyTier, IndicatorFamily
from signal_backtester.core.models.preset import IndicatorOverrides, StrategyPreset

AGGRESSIVE_MOMENTUM = StrategyPreset(
    name="Aggressive Momentum",
    frequency=FrequencyTier.HIGH,
    logic_type="Momentum / Trend",
    overrides=IndicatorOverrides(
        indicators=frozenset(
            {IndicatorFamily.SMA, IndicatorFamily.RSI, IndicatorFamily.STOCH, IndicatorFamily.ATR}
        ),
        stop_loss_percentage=5.0,
        sma_short_window=3,
        sma_long_window=8,
        rsi_period=7,
        rsi_overbought=80.0,
        rsi_oversold=20.0,
    ),
    indicators=("SMA(3,8)", "RSI(7)", "KD(9,3,3)", "ATR(14)"),
    role_description=(
        "SMA: short-term trend confirmation | RSI+KD: momentum entry signals | "
        "ATR: dynamic trailing stop"
    ),
)

BALANCED_SWING = StrategyPreset(
    name="Balanced Swing",
    frequency=FrequencyTier.MID,
    logic_type="Trend Following",
    overrides=IndicatorOverrides(
        indicators=frozenset(
            {IndicatorFamily.EMA, IndicatorFamily.MACD, IndicatorFamily.RSI, IndicatorFamily.ATR}
        ),
        stop_loss_percentage=10.0,
        ema_short_period=10,
        ema_long_period=20,
        rsi_period=14,
        rsi_overbought=70.0,
        rsi_oversold=30.0,
    ),
    indicators=("EMA(10,20)", "MACD(12,26,9)", "RSI(14)", "ATR(14)"),
    role_description=(
        "EMA: primary trend direction | MACD: momentum confirmation | "
        "RSI: extreme-value filter | ATR: swing risk control"
    ),
)

CONSERVATIVE_FILTER = StrategyPreset(
    name="Conservative Filter",
    frequency=FrequencyTier.LOW,
    logic_type="Trend / Volume",
    overrides=IndicatorOverrides(
        indicators=frozenset({IndicatorFamily.SMA, IndicatorFamily.VWMA, IndicatorFamily.MACD}),
        stop_loss_percentage=15.0,
        sma_short_window=20,
        sma_long_window=60,
        vwma_period=20,
    ),
    indicators=("SMA(20,60)", "VWMA(20)", "MACD(12,26,9)"),
    role_description=(
        "SMA: long-term moving-average support | VWMA: volume-weighted trend confirmation | "
        "MACD: momentum filter"
    ),
)

MIXED_MOMENTUM = StrategyPreset(
    name="Mixed Momentum",
    frequency=FrequencyTier.MID,
    logic_type="Consensus",
    overrides=IndicatorOverrides(
        indicators=frozenset(
            {IndicatorFamily.STOCH, IndicatorFamily.RSI, IndicatorFamily.MACD, IndicatorFamily.ATR}
        ),
        stop_loss_percentage=8.0,
    ),
    indicators=("KD(9,3,3)", "RSI(14)", "MACD(12,26,9)", "ATR(14)"),
    role_description=(
        "KD+RSI+MACD: three-indicator consensus entry (voting) | ATR: volatility guard"
    ),
)

VOLUME_BREAKOUT = StrategyPreset(
    name="Volume Breakout",
    frequency=FrequencyTier.HIGH,
    logic_type="Volume / Momentum",
    overrides=IndicatorOverrides(
        indicators=frozenset({IndicatorFamily.VWMA, IndicatorFamily.EMA, IndicatorFamily.ATR}),
        stop_loss_percentage=6.0,
        vwma_period=5,
        ema_short_period=5,
        ema_long_period=10,
    ),
    indicators=("VWMA(5)", "EMA(5,10)", "ATR(14)"),
    role_description=(
        "VWMA: volume breakout detection | EMA: short-term acceleration confirmation | "
        "ATR: fast stop"
    ),
)

PRESET_CATALOG: tuple[StrategyPreset, ...] = (
    AGGRESSIVE_MOMENTUM,
    BALANCED_SWING,
    CONSERVATIVE_FILTER,
    MIXED_MOMENTUM,
    VOLUME_BREAKOUT,
)

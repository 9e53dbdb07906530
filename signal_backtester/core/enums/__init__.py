"""
Core enumerations for the backtesting engine.

This module provides centralized enumerations for domain concepts
like indicator families, trade lifecycle, trading modes and optimizer
outcomes.
"""

from .indicator_families import IndicatorFamily
from .optimizer_types import FrequencyTier, PresetStatus
from .trade_types import ExitReason, PositionType, TradeStatus
from .trading_modes import StrategyType, TradingMode

__all__ = [
    "IndicatorFamily",
    "TradingMode",
    "StrategyType",
    "PositionType",
    "TradeStatus",
    "ExitReason",
    "FrequencyTier",
    "PresetStatus",
]

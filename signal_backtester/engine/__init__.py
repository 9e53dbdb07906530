"""
Backtesting engine: signal scoring, trade simulation, metrics and the preset optimizer.
"""

from .backtest import compute_indicators, run_backtest, run_simulation, run_strategy_optimizer
from .metrics import MetricsAggregator
from .optimizer import StrategyOptimizer
from .presets import PRESET_CATALOG
from .signals import SignalConsensus, SignalScorer
from .simulator import TradeSimulator

__all__ = [
    # Entry points
    "compute_indicators",
    "run_simulation",
    "run_backtest",
    "run_strategy_optimizer",
    # Components
    "SignalScorer",
    "SignalConsensus",
    "TradeSimulator",
    "MetricsAggregator",
    "StrategyOptimizer",
    "PRESET_CATALOG",
]

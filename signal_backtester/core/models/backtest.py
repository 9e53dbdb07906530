"""
Backtest results models.
"""

import math
from dataclasses import dataclass, field
from datetime import date

from signal_backtester.core.enums import FrequencyTier, PresetStatus
from signal_backtester.core.types.financial import UNDEFINED, is_undefined

from .trade import Trade


def _json_float(value: float) -> float | None:
    """Serialize NaN as None so results stay JSON compatible."""
    return None if is_undefined(value) else value


@dataclass(frozen=True)
class EquityPoint:
    """Mark-to-market equity at the close of one simulated day."""

    date: date
    equity: float

    def to_dict(self) -> dict:
        """Convert equity point to dictionary."""
        return {"date": self.date.isoformat(), "equity": self.equity}


@dataclass
class SimulationResult:
    """Raw output of the trade simulation, in ratios rather than percentages."""

    trades: list[Trade]
    equity_curve: list[EquityPoint]
    max_drawdown_ratio: float
    sharpe: float
    total_return_ratio: float

    @classmethod
    def empty(cls) -> "SimulationResult":
        """Result for a series too short to simulate."""
        return cls(
            trades=[],
            equity_curve=[],
            max_drawdown_ratio=0.0,
            sharpe=UNDEFINED,
            total_return_ratio=0.0,
        )

    @property
    def trade_count(self) -> int:
        """Number of trades opened during the simulation."""
        return len(self.trades)

    @property
    def final_equity(self) -> float | None:
        """Last equity value, or None when nothing was simulated."""
        return self.equity_curve[-1].equity if self.equity_curve else None


@dataclass
class BacktestLogItem:
    """One row of the optimizer decision log."""

    combination: str
    logic_type: str
    frequency: FrequencyTier
    trade_count: int
    win_rate: float
    total_return: float
    max_drawdown: float
    sharpe: float
    score: float
    status: PresetStatus
    reason: str
    indicators: tuple[str, ...]
    role_description: str
    timeframe: str = "Daily"

    @property
    def is_optimal(self) -> bool:
        """Check if this preset won the scan."""
        return self.status == PresetStatus.OPTIMAL

    def to_dict(self) -> dict:
        """Convert log item to dictionary."""
        return {
            "combination": self.combination,
            "logic_type": self.logic_type,
            "timeframe": self.timeframe,
            "frequency": self.frequency.value,
            "trade_count": self.trade_count,
            "win_rate": self.win_rate,
            "return": self.total_return,
            "mdd": self.max_drawdown,
            "sharpe": _json_float(self.sharpe),
            "score": self.score,
            "status": self.status.value,
            "reason": self.reason,
            "indicators": list(self.indicators),
            "role_description": self.role_description,
        }


@dataclass
class OptimizerReport:
    """Transparent record of a preset scan."""

    best_combination: list[str]
    sharpe: float
    total_return: float
    max_drawdown: float
    win_rate: float
    backtest_log: list[BacktestLogItem]
    recommendation: str

    def to_dict(self) -> dict:
        """Convert report to dictionary."""
        return {
            "best_combination": self.best_combination,
            "metrics": {
                "sharpe": _json_float(self.sharpe),
                "return": self.total_return,
                "mdd": self.max_drawdown,
                "win_rate": self.win_rate,
            },
            "backtest_log": [item.to_dict() for item in self.backtest_log],
            "recommendation": self.recommendation,
        }


@dataclass
class BacktestResult:
    """Results from a backtest execution.

    Percentages are rounded to two decimals. ``sharpe_ratio`` is NaN when
    the ratio is undefined.
    """

    trades: list[Trade]
    total_return: float
    final_capital: float
    win_rate: float
    max_drawdown: float
    sharpe_ratio: float
    equity_curve: list[EquityPoint]
    total_fees: float = 0.0
    total_tax: float = 0.0
    optimizer_report: OptimizerReport | None = field(default=None)

    @classmethod
    def empty(cls, initial_capital: float) -> "BacktestResult":
        """Zeroed result for an empty or too-short series."""
        return cls(
            trades=[],
            total_return=0.0,
            final_capital=initial_capital,
            win_rate=0.0,
            max_drawdown=0.0,
            sharpe_ratio=UNDEFINED,
            equity_curve=[],
        )

    @property
    def has_sharpe(self) -> bool:
        """Check if the Sharpe ratio is defined."""
        return not math.isnan(self.sharpe_ratio)

    def performance_summary(self) -> dict:
        """Get a summary of key performance metrics."""
        return {
            "final_capital": self.final_capital,
            "total_return": self.total_return,
            "win_rate": self.win_rate,
            "max_drawdown": self.max_drawdown,
            "sharpe_ratio": _json_float(self.sharpe_ratio),
            "trade_count": len(self.trades),
        }

    def to_dict(self) -> dict:
        """Convert results to dictionary."""
        return {
            **self.performance_summary(),
            "total_fees": self.total_fees,
            "total_tax": self.total_tax,
            "trades": [trade.to_dict() for trade in self.trades],
            "equity_curve": [point.to_dict() for point in self.equity_curve],
            "optimizer_report": (
                self.optimizer_report.to_dict() if self.optimizer_report else None
            ),
        }

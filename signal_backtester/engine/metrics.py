"""
Backtest metrics and calculations.

This module reduces a trade list and an equity curve to summary statistics
following the Single Responsibility Principle. Ratio functions return raw
floats; ``MetricsAggregator.summarize`` converts them into the rounded
percentages reported in a ``BacktestResult``.
"""

import math
from collections.abc import Sequence

import numpy as np

from signal_backtester.core.constants import SHARPE_STDEV_EPSILON, TRADING_DAYS_PER_YEAR
from signal_backtester.core.models.backtest import BacktestResult, EquityPoint, SimulationResult
from signal_backtester.core.models.trade import Trade
from signal_backtester.core.models.strategy_config import StrategyConfig
from signal_backtester.core.types.financial import (
    UNDEFINED,
    round_half_up,
    round_percentage,
)


def _equity_values(equity_curve: Sequence[EquityPoint]) -> np.ndarray:
    return np.fromiter((point.equity for point in equity_curve), dtype="float64")


def daily_returns(equity_curve: Sequence[EquityPoint], initial_capital: float) -> np.ndarray:
    """Day-over-day equity returns; the first day is measured against initial capital.

    Args:
        equity_curve: Mark-to-market equity per simulated day
        initial_capital: Equity before the first simulated day

    Returns:
        Array with one return per equity point (0 where the previous equity is 0)
    """
    values = _equity_values(equity_curve)
    if values.size == 0:
        return values

    previous = np.concatenate(([initial_capital], values[:-1]))
    returns = np.zeros_like(values)
    np.divide(values - previous, previous, out=returns, where=previous != 0)
    return returns


def drawdown_series(equity_curve: Sequence[EquityPoint], initial_capital: float) -> np.ndarray:
    """Running maximum of (peak - equity) / peak, with the peak seeded by initial capital.

    The series is non-negative and non-decreasing.
    """
    values = _equity_values(equity_curve)
    if values.size == 0:
        return values

    peaks = np.maximum.accumulate(np.concatenate(([initial_capital], values)))[1:]
    drawdowns = np.zeros_like(values)
    np.divide(peaks - values, peaks, out=drawdowns, where=peaks != 0)
    return np.maximum.accumulate(np.maximum(drawdowns, 0.0))


def max_drawdown_ratio(equity_curve: Sequence[EquityPoint], initial_capital: float) -> float:
    """Largest peak-to-trough decline as a fraction of the peak (0 for an empty curve)."""
    drawdowns = drawdown_series(equity_curve, initial_capital)
    return float(drawdowns[-1]) if drawdowns.size else 0.0


def sharpe_ratio(returns: np.ndarray) -> float:
    """Annualized Sharpe ratio of daily returns.

    Returns NaN when fewer than two samples exist or the sample standard
    deviation is negligible. Callers must not coerce NaN to zero.
    """
    if returns.size < 2:
        return UNDEFINED

    std = float(np.std(returns, ddof=1))
    if not std > SHARPE_STDEV_EPSILON:
        return UNDEFINED

    return float(np.mean(returns)) / std * math.sqrt(TRADING_DAYS_PER_YEAR)


def total_return_ratio(equity_curve: Sequence[EquityPoint], initial_capital: float) -> float:
    """Final equity / initial capital - 1 (0 when nothing was simulated)."""
    if not equity_curve or initial_capital == 0:
        return 0.0
    return equity_curve[-1].equity / initial_capital - 1


def win_rate_ratio(trades: Sequence[Trade]) -> float:
    """Fraction of closed trades with positive P&L (0 if none closed)."""
    closed = [trade for trade in trades if not trade.is_open]
    if not closed:
        return 0.0
    return sum(1 for trade in closed if trade.is_winner) / len(closed)


class MetricsAggregator:
    """Builds reported results from raw simulation output."""

    def summarize(self, simulation: SimulationResult, config: StrategyConfig) -> BacktestResult:
        """
        Convert a simulation into a rounded BacktestResult.

        Args:
            simulation: Raw simulation output
            config: Configuration the simulation ran with

        Returns:
            Result with two-decimal percentages; Sharpe stays NaN when undefined
        """
        final_equity = simulation.final_equity
        return BacktestResult(
            trades=simulation.trades,
            total_return=round_percentage(simulation.total_return_ratio),
            final_capital=round_half_up(
                final_equity if final_equity is not None else config.initial_capital
            ),
            win_rate=round_percentage(win_rate_ratio(simulation.trades)),
            max_drawdown=round_percentage(simulation.max_drawdown_ratio),
            sharpe_ratio=round_half_up(simulation.sharpe),
            equity_curve=simulation.equity_curve,
            total_fees=round_half_up(sum(trade.fees for trade in simulation.trades)),
            total_tax=round_half_up(sum(trade.tax for trade in simulation.trades)),
        )

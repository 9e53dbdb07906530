"""
Trade simulation engine.

A two-state machine (FLAT, LONG) over an enriched daily series. Day i is
decided with the indicator values of day i-1 and filled at the close of
day i, so no decision ever sees the price it trades at in advance.
"""

import math
from dataclasses import dataclass
from datetime import date

import pandas as pd
from loguru import logger

from signal_backtester.core.constants import (
    ATR_TRAILING_MULTIPLIER,
    MIN_SIMULATION_BARS,
    POSITION_SIZING_RATIO,
)
from signal_backtester.core.enums import ExitReason, IndicatorFamily
from signal_backtester.core.models.backtest import EquityPoint, SimulationResult
from signal_backtester.core.models.strategy_config import StrategyConfig
from signal_backtester.core.models.trade import Trade
from signal_backtester.core.types.financial import HUNDRED, is_undefined

from .metrics import daily_returns, max_drawdown_ratio, sharpe_ratio, total_return_ratio
from .signals import Bar, SignalConsensus, SignalScorer


@dataclass
class _OpenPosition:
    """Mutable state of the single open position."""

    trade: Trade
    shares: int
    entry_cost: float
    trailing_high: float


class TradeSimulator:
    """Runs the FLAT/LONG state machine for one configuration.

    All mutable state lives inside ``run``; a simulator can be reused and
    shared across threads.
    """

    def __init__(self, config: StrategyConfig):
        self.config = config
        self.scorer = SignalScorer(config)

    def run(self, enriched: pd.DataFrame) -> SimulationResult:
        """
        Simulate trading over an enriched series.

        Args:
            enriched: Output of the indicator pipeline

        Returns:
            Trades, equity curve and raw risk ratios. A series shorter than
            two bars yields an empty result with undefined Sharpe.
        """
        if len(enriched) < MIN_SIMULATION_BARS:
            logger.debug(f"Series of {len(enriched)} bars is too short to simulate")
            return SimulationResult.empty()

        if not self.config.trading_mode.is_simulated:
            logger.debug(f"Trading mode {self.config.trading_mode} is simulated as long-only")

        bars: list[Bar] = enriched.to_dict("records")
        last_index = len(bars) - 1
        cash = self.config.initial_capital
        position: _OpenPosition | None = None
        trades: list[Trade] = []
        equity_curve: list[EquityPoint] = []

        for i in range(1, len(bars)):
            previous, today = bars[i - 1], bars[i]
            price = float(today["close"])
            day: date = today["date"]
            consensus = self.scorer.score(previous)

            if position is not None:
                position.trailing_high = max(position.trailing_high, price)
                reason = self._exit_reason(position, price, previous, consensus)
                if reason is None and i == last_index:
                    reason = ExitReason.FORCE_CLOSE
                if reason is not None:
                    cash += self._close(position, day, price, reason)
                    position = None
            elif consensus.is_bull and i < last_index:
                position = self._open(i, day, price, cash)
                if position is not None:
                    cash -= position.entry_cost
                    trades.append(position.trade)

            held_value = position.shares * price if position is not None else 0.0
            equity_curve.append(EquityPoint(date=day, equity=cash + held_value))

        returns = daily_returns(equity_curve, self.config.initial_capital)
        return SimulationResult(
            trades=trades,
            equity_curve=equity_curve,
            max_drawdown_ratio=max_drawdown_ratio(equity_curve, self.config.initial_capital),
            sharpe=sharpe_ratio(returns),
            total_return_ratio=total_return_ratio(equity_curve, self.config.initial_capital),
        )

    def _open(self, index: int, day: date, price: float, cash: float) -> _OpenPosition | None:
        """Size and open a long position; None when not even one share is affordable."""
        entry_price_with_fee = price * (1 + self.config.commission_rate)
        shares = math.floor((cash * POSITION_SIZING_RATIO) / entry_price_with_fee)
        if shares <= 0:
            return None

        entry_cost = shares * entry_price_with_fee
        trade = Trade(
            id=f"T-{index}",
            entry_date=day,
            entry_price=price,
            shares=shares,
            fees=entry_cost - shares * price,
        )
        return _OpenPosition(trade=trade, shares=shares, entry_cost=entry_cost, trailing_high=price)

    def _exit_reason(
        self,
        position: _OpenPosition,
        price: float,
        previous: Bar,
        consensus: SignalConsensus,
    ) -> ExitReason | None:
        """Evaluate exit rules in priority order; None keeps the position open."""
        entry_price = position.trade.entry_price
        pnl_pct = (price - entry_price) * HUNDRED / entry_price

        stop_loss = self.config.stop_loss_percentage
        if stop_loss > 0 and pnl_pct <= -stop_loss:
            return ExitReason.STOP_LOSS

        if self.config.uses(IndicatorFamily.ATR):
            atr = previous.get("atr")
            if not is_undefined(atr) and atr > 0:
                if price < position.trailing_high - atr * ATR_TRAILING_MULTIPLIER:
                    return ExitReason.TRAILING_STOP

        take_profit = self.config.take_profit_percentage
        if take_profit > 0 and pnl_pct >= take_profit:
            return ExitReason.TAKE_PROFIT

        if consensus.is_bear:
            return ExitReason.STRATEGY

        return None

    def _close(self, position: _OpenPosition, day: date, price: float, reason: ExitReason) -> float:
        """Close the position and return the net proceeds credited to cash."""
        gross = position.shares * price
        exit_fee = gross * self.config.commission_rate
        tax = gross * self.config.tax_rate
        proceeds = gross * (1 - self.config.commission_rate - self.config.tax_rate)

        position.trade.close(
            exit_date=day,
            exit_price=price,
            proceeds=proceeds,
            reason=reason,
            exit_fee=exit_fee,
            tax=tax,
        )
        return proceeds


def run_simulation(enriched: pd.DataFrame, config: StrategyConfig) -> SimulationResult:
    """Simulate one configuration over an enriched series."""
    return TradeSimulator(config).run(enriched)

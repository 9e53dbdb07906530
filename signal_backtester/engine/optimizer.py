"""
Preset-scanning strategy optimizer.

Runs the indicator pipeline, the trade simulation and the metrics
aggregation once per catalog preset, scores each run with trade-count and
drawdown penalties, and reports every preset together with the reason it
won or was rejected. The scan is a pure function of its inputs.
"""

import math
from dataclasses import dataclass

import pandas as pd
from loguru import logger

from signal_backtester.core.constants import (
    LOW_TRADE_COUNT,
    LOW_TRADE_PENALTY,
    MAX_ACCEPTABLE_DRAWDOWN_RATIO,
    MIN_QUALIFYING_TRADES,
    MODERATE_TRADE_COUNT,
    MODERATE_TRADE_PENALTY,
    SEVERE_DRAWDOWN_PENALTY,
    SEVERE_DRAWDOWN_RATIO,
    UNDEFINED_SHARPE_SCORE,
    UNDERPERFORMANCE_RATIO,
)
from signal_backtester.core.enums import PresetStatus
from signal_backtester.core.models.backtest import (
    BacktestLogItem,
    BacktestResult,
    OptimizerReport,
    SimulationResult,
)
from signal_backtester.core.models.preset import StrategyPreset
from signal_backtester.core.models.strategy_config import StrategyConfig
from signal_backtester.core.types.financial import (
    is_undefined,
    round_half_up,
    round_percentage,
)
from signal_backtester.infrastructure.data.price_series import PriceSeries, prepare_price_frame
from signal_backtester.infrastructure.data.technical_indicators import (
    TechnicalIndicatorsCalculator,
)

from .metrics import MetricsAggregator, win_rate_ratio
from .presets import PRESET_CATALOG
from .simulator import TradeSimulator

OPTIMAL_REASON = "Optimal risk-adjusted return"
INSUFFICIENT_TRADES_REASON = "Insufficient trades"
HIGH_DRAWDOWN_REASON = "High drawdown (>30%)"
NEGATIVE_SHARPE_REASON = "Negative Sharpe"
UNDERPERFORMANCE_REASON = "Underperformance (<50% of optimal return)"
SUBOPTIMAL_REASON = "Suboptimal"


@dataclass(frozen=True)
class PresetEvaluation:
    """Outcome of running one preset over the series."""

    preset: StrategyPreset
    config: StrategyConfig
    simulation: SimulationResult
    score: float

    @property
    def trade_count(self) -> int:
        return self.simulation.trade_count


def penalized_score(simulation: SimulationResult) -> float:
    """
    Score a simulation by its Sharpe ratio with sample-size and risk penalties.

    Args:
        simulation: Raw simulation output

    Returns:
        Sharpe (or the undefined-Sharpe floor) times the applicable penalties
    """
    score = UNDEFINED_SHARPE_SCORE if is_undefined(simulation.sharpe) else simulation.sharpe

    if simulation.trade_count < LOW_TRADE_COUNT:
        score *= LOW_TRADE_PENALTY
    elif simulation.trade_count < MODERATE_TRADE_COUNT:
        score *= MODERATE_TRADE_PENALTY

    if simulation.max_drawdown_ratio > SEVERE_DRAWDOWN_RATIO:
        score *= SEVERE_DRAWDOWN_PENALTY

    return score


def rank_evaluations(evaluations: list[PresetEvaluation]) -> list[PresetEvaluation]:
    """Order evaluations by score, best first; ties keep catalog order."""
    return sorted(evaluations, key=lambda evaluation: evaluation.score, reverse=True)


def rejection_reason(evaluation: PresetEvaluation, winner: PresetEvaluation) -> str:
    """First matching reason a non-winning preset was rejected."""
    simulation = evaluation.simulation
    if simulation.trade_count < MIN_QUALIFYING_TRADES:
        return INSUFFICIENT_TRADES_REASON
    if simulation.max_drawdown_ratio > MAX_ACCEPTABLE_DRAWDOWN_RATIO:
        return HIGH_DRAWDOWN_REASON
    if not is_undefined(simulation.sharpe) and simulation.sharpe < 0:
        return NEGATIVE_SHARPE_REASON
    winner_return = winner.simulation.total_return_ratio
    if simulation.total_return_ratio < winner_return * UNDERPERFORMANCE_RATIO:
        return UNDERPERFORMANCE_REASON
    return SUBOPTIMAL_REASON


class StrategyOptimizer:
    """Scans a preset catalog and selects the best risk-adjusted preset."""

    def __init__(
        self,
        catalog: tuple[StrategyPreset, ...] = PRESET_CATALOG,
        aggregator: MetricsAggregator | None = None,
    ):
        self.catalog = catalog
        self.aggregator = aggregator or MetricsAggregator()

    def optimize(self, series: PriceSeries, base_config: StrategyConfig) -> BacktestResult:
        """
        Run every preset and return the winner's result with the decision log.

        Args:
            series: Raw price series
            base_config: Configuration whose capital, fees and take-profit the
                presets inherit

        Returns:
            The winning preset's BacktestResult with ``optimizer_report`` set;
            an empty result when the catalog is empty
        """
        if not self.catalog:
            logger.warning("Optimizer called with an empty preset catalog")
            return BacktestResult.empty(base_config.initial_capital)

        frame = prepare_price_frame(series)
        evaluations = [self.evaluate(preset, frame, base_config) for preset in self.catalog]
        ranked = rank_evaluations(evaluations)
        winner = ranked[0]

        log = [self._log_item(evaluation, winner) for evaluation in ranked]
        result = self.aggregator.summarize(winner.simulation, winner.config)
        result.optimizer_report = OptimizerReport(
            best_combination=[winner.preset.name],
            sharpe=result.sharpe_ratio,
            total_return=result.total_return,
            max_drawdown=result.max_drawdown,
            win_rate=result.win_rate,
            backtest_log=log,
            recommendation=build_recommendation(winner.preset, log[0]),
        )

        logger.info(
            f"Optimizer selected {winner.preset.name} "
            f"(score={winner.score:.4f}, trades={winner.trade_count})"
        )
        return result

    def evaluate(
        self, preset: StrategyPreset, frame: pd.DataFrame, base_config: StrategyConfig
    ) -> PresetEvaluation:
        """Run one preset over a prepared frame with fresh indicator and trading state."""
        config = preset.build_config(base_config)

        if len(frame) < config.required_history:
            logger.debug(
                f"Skipping {preset.name}: needs {config.required_history} bars, "
                f"series has {len(frame)}"
            )
            simulation = SimulationResult.empty()
        else:
            calculator = TechnicalIndicatorsCalculator.from_config(config)
            enriched = calculator.calculate_all_indicators(frame)
            simulation = TradeSimulator(config).run(enriched)

        score = penalized_score(simulation)
        logger.debug(
            f"Preset {preset.name}: trades={simulation.trade_count} "
            f"sharpe={simulation.sharpe:.4f} score={score:.4f}"
        )
        return PresetEvaluation(preset=preset, config=config, simulation=simulation, score=score)

    def _log_item(self, evaluation: PresetEvaluation, winner: PresetEvaluation) -> BacktestLogItem:
        simulation = evaluation.simulation
        is_winner = evaluation is winner
        return BacktestLogItem(
            combination=evaluation.preset.name,
            logic_type=evaluation.preset.logic_type,
            frequency=evaluation.preset.frequency,
            trade_count=simulation.trade_count,
            win_rate=round_percentage(win_rate_ratio(simulation.trades)),
            total_return=round_percentage(simulation.total_return_ratio),
            max_drawdown=round_percentage(simulation.max_drawdown_ratio),
            sharpe=round_half_up(simulation.sharpe),
            score=round_half_up(evaluation.score, 4),
            status=PresetStatus.OPTIMAL if is_winner else PresetStatus.REJECTED,
            reason=OPTIMAL_REASON if is_winner else rejection_reason(evaluation, winner),
            indicators=evaluation.preset.indicators,
            role_description=evaluation.preset.role_description,
        )


def build_recommendation(preset: StrategyPreset, item: BacktestLogItem) -> str:
    """Assemble the fixed-template summary of the winning preset."""
    sharpe = "undefined" if math.isnan(item.sharpe) else f"{item.sharpe:.2f}"
    return (
        f'The scan selected "{preset.name}" as the best strategy for the current market.\n\n'
        f"1. Indicator combination: [{', '.join(preset.indicators)}].\n"
        f"2. Indicator roles: {preset.role_description}.\n"
        f"3. Character: {preset.logic_type} logic in a {preset.frequency.style} style.\n"
        f"4. Performance: {item.trade_count} trades, {item.total_return:.2f}% return, "
        f"Sharpe {sharpe}, maximum drawdown held to {item.max_drawdown:.2f}%.\n\n"
        "Compared with the presets rejected for thin samples or excessive risk, this "
        "configuration gave the best balance between signal coverage and risk control."
    )


def run_optimizer(series: PriceSeries, base_config: StrategyConfig) -> BacktestResult:
    """Scan the default preset catalog."""
    return StrategyOptimizer().optimize(series, base_config)

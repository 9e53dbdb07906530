"""
Backtest entry points.

Wires the indicator pipeline, the trade simulation and the metrics
aggregation into a single call, and dispatches auto-config requests to the
preset optimizer.
"""

from loguru import logger

from signal_backtester.core.models.backtest import BacktestResult
from signal_backtester.core.models.strategy_config import StrategyConfig
from signal_backtester.core.utils.decorators import log_operation
from signal_backtester.infrastructure.data.price_series import PriceSeries, prepare_price_frame
from signal_backtester.infrastructure.data.technical_indicators import compute_indicators

from .metrics import MetricsAggregator
from .optimizer import StrategyOptimizer
from .simulator import run_simulation

__all__ = ["compute_indicators", "run_backtest", "run_simulation", "run_strategy_optimizer"]


@log_operation
def run_backtest(series: PriceSeries, config: StrategyConfig) -> BacktestResult:
    """
    Run a full backtest for one configuration.

    Args:
        series: Raw daily price series
        config: Strategy configuration; ``StrategyType.AUTO_CONFIG`` runs the
            preset optimizer instead of the configured indicators

    Returns:
        BacktestResult with rounded metrics. An empty series yields a zeroed
        result with undefined Sharpe.
    """
    frame = prepare_price_frame(series)
    if frame.empty:
        logger.warning("Empty price series, returning empty result")
        return BacktestResult.empty(config.initial_capital)

    if config.strategy_type.is_auto:
        return StrategyOptimizer().optimize(frame, config)

    enriched = compute_indicators(frame, config)
    simulation = run_simulation(enriched, config)
    result = MetricsAggregator().summarize(simulation, config)

    logger.info(
        f"Backtest completed: {len(result.trades)} trades over {len(frame)} bars, "
        f"return {result.total_return}%"
    )
    return result


@log_operation
def run_strategy_optimizer(series: PriceSeries, base_config: StrategyConfig) -> BacktestResult:
    """
    Scan the preset catalog and return the winning preset's result.

    Args:
        series: Raw daily price series
        base_config: Configuration supplying capital, fees and take-profit

    Returns:
        BacktestResult with ``optimizer_report`` populated
    """
    return StrategyOptimizer().optimize(series, base_config)

#!/usr/bin/env python3
"""
Backtest Runner Script

Loads a daily price series from a CSV file and runs either a custom
indicator configuration or the preset optimizer over it.
Input: CSV file with columns: date,close[,volume]
Output: performance summary (or the full result as JSON with --json)
"""

import argparse
import asyncio
import json
import sys
from datetime import date
from pathlib import Path

from loguru import logger

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
)
from signal_backtester.core.enums import IndicatorFamily, StrategyType
from signal_backtester.core.exceptions.backtest import BacktestException
from signal_backtester.core.models.backtest import BacktestResult
from signal_backtester.core.models.strategy_config import StrategyConfig
from signal_backtester.core.utils.validation import validate_strategy_config
from signal_backtester.engine import run_backtest
from signal_backtester.infrastructure.data import CSVPriceLoader


def setup_logging(debug: bool = False):
    """Configure logging with loguru."""
    logger.remove()

    level = "DEBUG" if debug else "INFO"
    logger.add(
        sys.stderr,
        format=(
            "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
        ),
        level=level,
    )


def build_config(args: argparse.Namespace) -> StrategyConfig:
    """Build a validated strategy configuration from parsed arguments."""
    config = StrategyConfig(
        indicators=[IndicatorFamily.from_string(name) for name in args.indicators],
        sma_short_window=args.sma[0],
        sma_long_window=args.sma[1],
        ema_short_period=args.ema[0],
        ema_long_period=args.ema[1],
        rsi_period=args.rsi,
        rsi_oversold=args.rsi_bands[0],
        rsi_overbought=args.rsi_bands[1],
        vwma_period=args.vwma,
        stop_loss_percentage=args.stop_loss,
        take_profit_percentage=args.take_profit,
        commission_rate=args.commission,
        tax_rate=args.tax,
        initial_capital=args.capital,
        strategy_type=StrategyType.AUTO_CONFIG if args.auto else StrategyType.CUSTOM,
    )
    return validate_strategy_config(config)


def print_summary(result: BacktestResult) -> None:
    """Print a human-readable performance summary."""
    sharpe = f"{result.sharpe_ratio:.2f}" if result.has_sharpe else "undefined"
    print(f"Final capital: {result.final_capital:,.2f}")
    print(f"Total return:  {result.total_return:.2f}%")
    print(f"Win rate:      {result.win_rate:.2f}%")
    print(f"Max drawdown:  {result.max_drawdown:.2f}%")
    print(f"Sharpe ratio:  {sharpe}")
    print(f"Trades:        {len(result.trades)}")

    report = result.optimizer_report
    if report is None:
        return

    print()
    print(f"{'Preset':<22} {'Trades':>6} {'Return%':>8} {'MDD%':>7} {'Score':>9}  Status")
    for item in report.backtest_log:
        print(
            f"{item.combination:<22} {item.trade_count:>6} {item.total_return:>8.2f} "
            f"{item.max_drawdown:>7.2f} {item.score:>9.4f}  {item.status} ({item.reason})"
        )
    winner = next(item for item in report.backtest_log if item.is_optimal)
    print()
    print(f"Selected preset: {winner.combination} ({winner.logic_type}, {winner.frequency})")
    print(report.recommendation)


async def load_series(csv_file: Path, start: date | None, end: date | None):
    loader = CSVPriceLoader(csv_file.parent)
    return await loader.load_series(csv_file.stem, start, end)


def main():
    parser = argparse.ArgumentParser(
        description="Run an indicator-consensus backtest over a daily CSV series",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_backtest.py --csv data/2330.csv
  python run_backtest.py --csv data/2330.csv --indicators SMA RSI KD --sma 5 20
  python run_backtest.py --csv data/2330.csv --auto --json
        """,
    )

    parser.add_argument("--csv", type=Path, required=True, help="CSV file with date,close,volume")
    parser.add_argument("--auto", action="store_true", help="Run the preset optimizer")
    parser.add_argument(
        "--indicators",
        nargs="+",
        default=["SMA", "RSI"],
        help="Enabled indicator families (SMA EMA RSI MACD KD VWMA ATR)",
    )
    parser.add_argument(
        "--sma",
        nargs=2,
        type=int,
        metavar=("SHORT", "LONG"),
        default=[DEFAULT_SMA_SHORT_WINDOW, DEFAULT_SMA_LONG_WINDOW],
    )
    parser.add_argument(
        "--ema",
        nargs=2,
        type=int,
        metavar=("SHORT", "LONG"),
        default=[DEFAULT_EMA_SHORT_PERIOD, DEFAULT_EMA_LONG_PERIOD],
    )
    parser.add_argument("--rsi", type=int, default=DEFAULT_RSI_PERIOD, help="RSI period")
    parser.add_argument(
        "--rsi-bands",
        nargs=2,
        type=float,
        metavar=("OVERSOLD", "OVERBOUGHT"),
        default=[DEFAULT_RSI_OVERSOLD, DEFAULT_RSI_OVERBOUGHT],
    )
    parser.add_argument("--vwma", type=int, default=DEFAULT_VWMA_PERIOD, help="VWMA period")
    parser.add_argument("--stop-loss", type=float, default=DEFAULT_STOP_LOSS_PERCENTAGE)
    parser.add_argument("--take-profit", type=float, default=DEFAULT_TAKE_PROFIT_PERCENTAGE)
    parser.add_argument("--capital", type=float, default=DEFAULT_INITIAL_CAPITAL)
    parser.add_argument("--commission", type=float, default=DEFAULT_COMMISSION_RATE)
    parser.add_argument("--tax", type=float, default=DEFAULT_TAX_RATE)
    parser.add_argument("--start", type=date.fromisoformat, help="First day (YYYY-MM-DD)")
    parser.add_argument("--end", type=date.fromisoformat, help="Last day (YYYY-MM-DD)")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    setup_logging(args.debug)

    try:
        config = build_config(args)
        series = asyncio.run(load_series(args.csv, args.start, args.end))
        result = run_backtest(series, config)
    except (BacktestException, ValueError) as e:
        logger.error(f"Backtest failed: {e}")
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print_summary(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())

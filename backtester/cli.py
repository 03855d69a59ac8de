"""
Backtester CLI: run | signals | strategies
Usage:
  backtester run [--config config.yaml] [--strategy ma-crossover] [--csv bars.csv] [--json]
  backtester signals [--config config.yaml] [--json]
  backtester strategies
"""

from __future__ import annotations
import argparse
import json
import logging
from pathlib import Path
from typing import Dict, List

from backtester.analytics.report import format_summary
from backtester.backtesting.engine import BacktestEngine, BacktestResult
from backtester.core.config import Config, load_config
from backtester.core.errors import InvalidConfigError, NoDataError
from backtester.core.logger import setup_logging
from backtester.core.types import Bar, RiskManagement
from backtester.data.csv_loader import load_bars_csv
from backtester.data.sample_data import generate_sample_bars, generate_sample_signals
from backtester.signals.feed import DEFAULT_FEED_RISK, SignalFeed
from backtester.strategies.registry import create_strategy, default_config, list_strategies

logger = logging.getLogger("backtester.cli")


def _print_result(result: BacktestResult, as_json: bool) -> None:
    if as_json:
        print(json.dumps(result.to_dict(), indent=2, default=str))
    else:
        print(format_summary(result))


def _load_bars(config: Config) -> List[Bar]:
    if config.csv_path:
        return load_bars_csv(config.csv_path, config.symbol)
    logger.info("No CSV configured, generating sample data for %s", config.symbol)
    return generate_sample_bars(config.symbol, config.start_date, config.end_date, config.start_price, config.seed)


def run_strategy_backtest(config: Config, as_json: bool = False) -> int:
    """Run one registered strategy over CSV or generated bars."""
    strategy = create_strategy(config.strategy_config(default_config(config.strategy_id)))
    engine = BacktestEngine(strategy, config.backtest_config(), config.enforce_max_drawdown)
    engine.set_data(_load_bars(config))
    result = engine.run(progress=lambda done, total: logger.debug("Progress %d/%d", done, total))
    _print_result(result, as_json)
    return 0


def run_signal_backtest(config: Config, as_json: bool = False) -> int:
    """Replay a generated multi-symbol signal feed."""
    bars_by_symbol: Dict[str, List[Bar]] = {}
    for offset, symbol in enumerate(config.signal_symbols):
        seed = None if config.seed is None else config.seed + offset
        bars_by_symbol[symbol] = generate_sample_bars(
            symbol, config.start_date, config.end_date, 100.0 + 25.0 * offset, seed
        )
    records = generate_sample_signals(bars_by_symbol, config.confidence_threshold, seed=config.seed)
    risk = RiskManagement(**{**vars(DEFAULT_FEED_RISK), "max_position_size": config.signal_position_size})
    feed = SignalFeed(records, config.confidence_threshold, risk)
    logger.info("Replaying %d feed signals over %d symbols", len(feed.records), len(bars_by_symbol))

    engine = BacktestEngine(feed, config.backtest_config(), config.enforce_max_drawdown)
    engine.set_data(bar for bars in bars_by_symbol.values() for bar in bars)
    _print_result(engine.run(), as_json)
    return 0


def show_strategies() -> int:
    for spec in list_strategies():
        status = "active" if spec.active else "inactive"
        print(f"{spec.id} - {spec.name} ({status})")
        print(f"    {spec.description}")
        for key, info in spec.parameters.items():
            print(f"    {key}: default={info.default} range=[{info.min}, {info.max}] step={info.step} | {info.description}")
        rm = spec.risk_management
        print(
            f"    risk: stop_loss={rm.stop_loss}% take_profit={rm.take_profit}% "
            f"max_position_size={rm.max_position_size}% max_drawdown={rm.max_drawdown}%"
        )
    return 0


def main(argv: List[str] = None) -> int:
    parser = argparse.ArgumentParser(description="Strategy backtester CLI")
    parser.add_argument("mode", choices=["run", "signals", "strategies"], help="What to run")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument("--strategy", default=None, help="Strategy id (overrides config)")
    parser.add_argument("--csv", type=Path, default=None, help="OHLCV CSV file (overrides config)")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    args = parser.parse_args(argv)

    if args.mode == "strategies":
        return show_strategies()

    config = load_config(args.config)
    setup_logging(config.log_level, config.log_dir, config.log_file)
    if args.strategy:
        config.strategy_id = args.strategy
    if args.csv:
        config.csv_path = str(args.csv)

    try:
        if args.mode == "signals":
            return run_signal_backtest(config, args.json)
        return run_strategy_backtest(config, args.json)
    except InvalidConfigError as e:
        for violation in e.violations:
            logger.error("Invalid configuration: %s", violation)
        return 1
    except NoDataError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

"""
Load configuration from config.yaml and .env. Environment overrides YAML.
Only the CLI reads configuration; the engine receives explicit objects.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from backtester.core.errors import InvalidConfigError
from backtester.core.types import BacktestConfig, RiskManagement, StrategyConfig

_RISK_ALIASES = {
    "stopLoss": "stop_loss",
    "takeProfit": "take_profit",
    "maxPositionSize": "max_position_size",
    "maxDrawdown": "max_drawdown",
}


def _env_path(project_root: Optional[Path] = None) -> Path:
    root = project_root or Path.cwd()
    return root / ".env"


def load_dotenv_if_exists(project_root: Optional[Path] = None) -> None:
    """Load .env from project root if present."""
    path = _env_path(project_root)
    if path.exists():
        load_dotenv(path)


def load_config(config_path: Optional[Path] = None, project_root: Optional[Path] = None) -> "Config":
    """Load config.yaml and overlay with env. Returns Config."""
    load_dotenv_if_exists(project_root)
    root = project_root or Path.cwd()
    path = Path(config_path) if config_path else root / "config.yaml"
    data: Dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    def env(key: str, default: Any = "") -> str:
        value = os.getenv(key)
        return value.strip() if value is not None else default

    def env_bool(key: str, default: bool = False) -> bool:
        return os.getenv(key, str(default)).lower() in ("true", "1", "yes")

    def env_int(key: str, default: Optional[int] = 0) -> Optional[int]:
        try:
            return int(os.getenv(key, str(default)))
        except (TypeError, ValueError):
            return default

    def env_float(key: str, default: float = 0.0) -> float:
        try:
            return float(os.getenv(key, str(default)))
        except ValueError:
            return default

    backtest = data.get("backtest", {})
    strategy = data.get("strategy", {})
    signals = data.get("signals", {})
    source = data.get("data", {})
    logging_cfg = data.get("logging", {})

    return Config(
        # Backtest
        initial_capital=env_float("BACKTEST_INITIAL_CAPITAL", backtest.get("initial_capital", 100000.0)),
        start_date=str(env("BACKTEST_START", backtest.get("start_date", "2023-01-01"))),
        end_date=str(env("BACKTEST_END", backtest.get("end_date", "2024-01-01"))),
        commission=env_float("BACKTEST_COMMISSION", backtest.get("commission", 5.0)),
        slippage_percent=env_float("BACKTEST_SLIPPAGE_PERCENT", backtest.get("slippage_percent", 0.1)),
        enforce_max_drawdown=env_bool("ENFORCE_MAX_DRAWDOWN", backtest.get("enforce_max_drawdown", False)),
        # Strategy
        strategy_id=env("STRATEGY_ID", strategy.get("id", "ma-crossover")),
        strategy_parameters=dict(strategy.get("parameters") or {}),
        strategy_risk=dict(strategy.get("risk_management") or {}),
        # External signals
        confidence_threshold=env_float("SIGNAL_CONFIDENCE_THRESHOLD", signals.get("confidence_threshold", 0.75)),
        signal_position_size=env_float("SIGNAL_POSITION_SIZE", signals.get("position_size", 2.0)),
        signal_symbols=list(signals.get("symbols", ["AAPL", "MSFT", "GOOGL", "TSLA", "AMZN", "NVDA"])),
        # Data
        csv_path=env("DATA_CSV", source.get("csv_path")) or None,
        symbol=env("SYMBOL", source.get("symbol", "AAPL")).upper(),
        start_price=env_float("START_PRICE", source.get("start_price", 150.0)),
        seed=env_int("DATA_SEED", source.get("seed")),
        # Logging
        log_level=env("LOG_LEVEL", logging_cfg.get("level", "INFO")),
        log_dir=logging_cfg.get("log_dir"),
        log_file=logging_cfg.get("log_file", "backtester.log"),
    )


class Config:
    """Unified configuration. Treat as immutable after load."""

    __slots__ = (
        "initial_capital", "start_date", "end_date", "commission", "slippage_percent",
        "enforce_max_drawdown",
        "strategy_id", "strategy_parameters", "strategy_risk",
        "confidence_threshold", "signal_position_size", "signal_symbols",
        "csv_path", "symbol", "start_price", "seed",
        "log_level", "log_dir", "log_file",
    )

    def __init__(
        self,
        initial_capital: float = 100000.0,
        start_date: str = "2023-01-01",
        end_date: str = "2024-01-01",
        commission: float = 5.0,
        slippage_percent: float = 0.1,
        enforce_max_drawdown: bool = False,
        strategy_id: str = "ma-crossover",
        strategy_parameters: Optional[Dict[str, Any]] = None,
        strategy_risk: Optional[Dict[str, Any]] = None,
        confidence_threshold: float = 0.75,
        signal_position_size: float = 2.0,
        signal_symbols: Optional[list] = None,
        csv_path: Optional[str] = None,
        symbol: str = "AAPL",
        start_price: float = 150.0,
        seed: Optional[int] = None,
        log_level: str = "INFO",
        log_dir: Optional[Path] = None,
        log_file: str = "backtester.log",
    ):
        self.initial_capital = initial_capital
        self.start_date = start_date
        self.end_date = end_date
        self.commission = commission
        self.slippage_percent = slippage_percent
        self.enforce_max_drawdown = enforce_max_drawdown
        self.strategy_id = strategy_id
        self.strategy_parameters = strategy_parameters or {}
        self.strategy_risk = strategy_risk or {}
        self.confidence_threshold = confidence_threshold
        self.signal_position_size = signal_position_size
        self.signal_symbols = signal_symbols or ["AAPL", "MSFT", "GOOGL", "TSLA", "AMZN", "NVDA"]
        self.csv_path = csv_path
        self.symbol = symbol
        self.start_price = start_price
        self.seed = seed
        self.log_level = log_level
        self.log_dir = Path(log_dir) if log_dir else None
        self.log_file = log_file

    def backtest_config(self) -> BacktestConfig:
        return BacktestConfig(
            initial_capital=self.initial_capital,
            start_date=self.start_date,
            end_date=self.end_date,
            commission=self.commission,
            slippage_percent=self.slippage_percent,
        )

    def strategy_config(self, base: StrategyConfig) -> StrategyConfig:
        """
        Registry defaults in `base` overlaid with the configured overrides.
        Risk keys may be snake_case or camelCase; unknown keys raise InvalidConfigError.
        """
        overrides = {_RISK_ALIASES.get(k, k): v for k, v in self.strategy_risk.items()}
        unknown = sorted(set(overrides) - set(vars(base.risk_management)))
        if unknown:
            raise InvalidConfigError([f"Unknown risk setting: {key}" for key in unknown])
        risk = RiskManagement(**{**vars(base.risk_management), **overrides})
        return StrategyConfig(
            id=base.id,
            name=base.name,
            description=base.description,
            parameters={**base.parameters, **self.strategy_parameters},
            risk_management=risk,
            active=base.active,
        )

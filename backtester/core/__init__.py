"""Core: config, types, errors, logging."""

from backtester.core.config import Config, load_config
from backtester.core.errors import (
    BacktestCancelledError,
    BacktestError,
    InvalidConfigError,
    NoDataError,
    UnknownStrategyError,
)
from backtester.core.logger import setup_logging
from backtester.core.types import (
    BacktestConfig,
    Bar,
    EquityPoint,
    ExitReason,
    FeedSignal,
    Position,
    RiskManagement,
    Signal,
    SignalType,
    StrategyConfig,
    Trade,
)

__all__ = [
    "load_config",
    "Config",
    "BacktestCancelledError",
    "BacktestError",
    "InvalidConfigError",
    "NoDataError",
    "UnknownStrategyError",
    "setup_logging",
    "BacktestConfig",
    "Bar",
    "EquityPoint",
    "ExitReason",
    "FeedSignal",
    "Position",
    "RiskManagement",
    "Signal",
    "SignalType",
    "StrategyConfig",
    "Trade",
]

"""Strategies: base interface, built-ins and registry."""

from backtester.strategies.base import BaseStrategy
from backtester.strategies.bollinger_bands import BollingerBandsStrategy
from backtester.strategies.ma_crossover import MovingAverageCrossover
from backtester.strategies.macd_crossover import MacdCrossover
from backtester.strategies.registry import (
    STRATEGY_REGISTRY,
    ParameterInfo,
    StrategySpec,
    create_strategy,
    default_config,
    default_strategies,
    get_parameter_info,
    list_strategies,
    validate_backtest_config,
    validate_strategy_config,
)
from backtester.strategies.rsi_mean_reversion import RsiMeanReversion

__all__ = [
    "BaseStrategy",
    "BollingerBandsStrategy",
    "MacdCrossover",
    "MovingAverageCrossover",
    "RsiMeanReversion",
    "STRATEGY_REGISTRY",
    "ParameterInfo",
    "StrategySpec",
    "create_strategy",
    "default_config",
    "default_strategies",
    "get_parameter_info",
    "list_strategies",
    "validate_backtest_config",
    "validate_strategy_config",
]

"""
Strategy registry: parameter schemas, default configs, validation, construction.
"""

from __future__ import annotations
import copy
import logging
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Callable, Dict, List, Optional, Type

from backtester.core.errors import InvalidConfigError, UnknownStrategyError
from backtester.core.types import BacktestConfig, RiskManagement, StrategyConfig
from backtester.strategies.base import BaseStrategy
from backtester.strategies.bollinger_bands import BollingerBandsStrategy
from backtester.strategies.ma_crossover import MovingAverageCrossover
from backtester.strategies.macd_crossover import MacdCrossover
from backtester.strategies.rsi_mean_reversion import RsiMeanReversion
from backtester.utils.timeutils import parse_date_range

logger = logging.getLogger("backtester.strategies.registry")


@dataclass(frozen=True)
class ParameterInfo:
    """Schema entry for one strategy parameter. min/max/step are UI hints."""
    type: str
    description: str
    default: Any
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None


@dataclass(frozen=True)
class StrategySpec:
    """Registry row: how to build and validate one built-in strategy."""
    id: str
    name: str
    description: str
    strategy_class: Type[BaseStrategy]
    parameters: Dict[str, ParameterInfo]
    risk_management: RiskManagement
    active: bool = True
    rules: List[Callable[[Dict[str, Any]], List[str]]] = field(default_factory=list)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _positive(params: Dict[str, Any], key: str, label: str) -> List[str]:
    value = params.get(key)
    if not _is_number(value) or value <= 0:
        return [f"{label} must be a positive number"]
    return []


def _ma_rules(params: Dict[str, Any]) -> List[str]:
    errors = _positive(params, "fast_period", "Fast period") + _positive(params, "slow_period", "Slow period")
    if not errors and params["fast_period"] >= params["slow_period"]:
        errors.append("Fast period must be less than slow period")
    return errors


def _rsi_rules(params: Dict[str, Any]) -> List[str]:
    errors = _positive(params, "rsi_period", "RSI period")
    oversold = params.get("oversold_level")
    overbought = params.get("overbought_level")
    if not _is_number(oversold) or not 0 < oversold < 50:
        errors.append("Oversold level must be between 0 and 50")
    if not _is_number(overbought) or not 50 < overbought < 100:
        errors.append("Overbought level must be between 50 and 100")
    return errors


def _bollinger_rules(params: Dict[str, Any]) -> List[str]:
    errors = _positive(params, "period", "Period")
    std_dev = params.get("std_dev")
    if not _is_number(std_dev) or not 0 < std_dev <= 4:
        errors.append("Standard deviation must be between 0 and 4")
    return errors


def _macd_rules(params: Dict[str, Any]) -> List[str]:
    errors = (
        _positive(params, "fast_period", "Fast period")
        + _positive(params, "slow_period", "Slow period")
        + _positive(params, "signal_period", "Signal period")
    )
    if not errors and params["fast_period"] >= params["slow_period"]:
        errors.append("Fast period must be less than slow period")
    return errors


STRATEGY_REGISTRY: Dict[str, StrategySpec] = {
    spec.id: spec
    for spec in (
        StrategySpec(
            id="ma-crossover",
            name="Moving Average Crossover",
            description="Buy when fast MA crosses above slow MA, sell when it crosses below",
            strategy_class=MovingAverageCrossover,
            parameters={
                "fast_period": ParameterInfo("number", "Fast moving average period (bars)", 10, 1, 50, 1),
                "slow_period": ParameterInfo("number", "Slow moving average period (bars)", 30, 10, 200, 1),
            },
            risk_management=RiskManagement(stop_loss=5, take_profit=15, max_position_size=20, max_drawdown=10),
            rules=[_ma_rules],
        ),
        StrategySpec(
            id="rsi-mean-reversion",
            name="RSI Mean Reversion",
            description="Buy when RSI is oversold, sell when overbought",
            strategy_class=RsiMeanReversion,
            parameters={
                "rsi_period": ParameterInfo("number", "RSI calculation period (bars)", 14, 5, 30, 1),
                "oversold_level": ParameterInfo("number", "RSI oversold threshold", 30, 10, 40, 1),
                "overbought_level": ParameterInfo("number", "RSI overbought threshold", 70, 60, 90, 1),
            },
            risk_management=RiskManagement(stop_loss=3, take_profit=8, max_position_size=15, max_drawdown=8),
            rules=[_rsi_rules],
        ),
        StrategySpec(
            id="bollinger-bands",
            name="Bollinger Bands",
            description="Buy at lower band, sell at upper band",
            strategy_class=BollingerBandsStrategy,
            parameters={
                "period": ParameterInfo("number", "Bollinger Bands period (bars)", 20, 10, 50, 1),
                "std_dev": ParameterInfo("number", "Standard deviations for bands", 2.0, 1, 3, 0.1),
            },
            risk_management=RiskManagement(stop_loss=4, take_profit=12, max_position_size=25, max_drawdown=12),
            active=False,
            rules=[_bollinger_rules],
        ),
        StrategySpec(
            id="macd-crossover",
            name="MACD Crossover",
            description="Trade on MACD signal line crossovers",
            strategy_class=MacdCrossover,
            parameters={
                "fast_period": ParameterInfo("number", "Fast EMA period (bars)", 12, 2, 50, 1),
                "slow_period": ParameterInfo("number", "Slow EMA period (bars)", 26, 5, 100, 1),
                "signal_period": ParameterInfo("number", "Signal line EMA period (bars)", 9, 2, 50, 1),
            },
            risk_management=RiskManagement(stop_loss=4.5, take_profit=14, max_position_size=22, max_drawdown=11),
            active=False,
            rules=[_macd_rules],
        ),
    )
}


def list_strategies() -> List[StrategySpec]:
    return list(STRATEGY_REGISTRY.values())


def get_spec(strategy_id: str) -> StrategySpec:
    try:
        return STRATEGY_REGISTRY[strategy_id]
    except KeyError:
        raise UnknownStrategyError(strategy_id) from None


def get_parameter_info(strategy_id: str) -> Dict[str, ParameterInfo]:
    """Parameter schema for a strategy id; empty for unknown ids."""
    spec = STRATEGY_REGISTRY.get(strategy_id)
    return dict(spec.parameters) if spec else {}


def default_config(strategy_id: str) -> StrategyConfig:
    """Fresh StrategyConfig populated from the registry defaults."""
    spec = get_spec(strategy_id)
    return StrategyConfig(
        id=spec.id,
        name=spec.name,
        description=spec.description,
        parameters={key: info.default for key, info in spec.parameters.items()},
        risk_management=copy.copy(spec.risk_management),
        active=spec.active,
    )


def default_strategies() -> List[StrategyConfig]:
    return [default_config(strategy_id) for strategy_id in STRATEGY_REGISTRY]


def _validate_risk(rm: RiskManagement) -> List[str]:
    errors: List[str] = []
    bounds = (
        ("stop_loss", 50, "Stop loss must be between 0 and 50%"),
        ("take_profit", 100, "Take profit must be between 0 and 100%"),
        ("max_position_size", 100, "Max position size must be between 0 and 100%"),
        ("max_drawdown", 50, "Max drawdown must be between 0 and 50%"),
    )
    for attr, upper, message in bounds:
        value = getattr(rm, attr)
        if not _is_number(value) or not 0 < value <= upper:
            errors.append(message)
    return errors


def validate_strategy_config(config: StrategyConfig) -> List[str]:
    """Every violated rule, in a stable order. Empty list means valid."""
    errors: List[str] = []
    if not config.id or not str(config.id).strip():
        errors.append("Strategy ID is required")
    if not config.name or not str(config.name).strip():
        errors.append("Strategy name is required")
    errors.extend(_validate_risk(config.risk_management))

    spec = STRATEGY_REGISTRY.get(config.id)
    if spec is None:
        if config.id:
            errors.append(f"Unknown strategy: {config.id}")
        return errors

    params = config.parameters or {}
    for key, info in spec.parameters.items():
        if key not in params:
            errors.append(f"Parameter '{key}' is required")
        elif info.type == "number" and not _is_number(params[key]):
            errors.append(f"Parameter '{key}' must be a number")
    for rule in spec.rules:
        errors.extend(e for e in rule(params) if e not in errors)
    return errors


def validate_backtest_config(config: BacktestConfig) -> List[str]:
    errors: List[str] = []
    if not _is_number(config.initial_capital) or config.initial_capital <= 0:
        errors.append("Initial capital must be greater than 0")
    if not _is_number(config.commission) or config.commission < 0:
        errors.append("Commission must be 0 or greater")
    if not _is_number(config.slippage_percent) or not 0 <= config.slippage_percent < 100:
        errors.append("Slippage must be between 0 and 100%")
    try:
        start, end = parse_date_range(config.start_date, config.end_date)
    except (TypeError, ValueError):
        errors.append("Start and end dates must be ISO dates")
    else:
        if start > end:
            errors.append("Start date must not be after end date")
    return errors


def create_strategy(config: StrategyConfig) -> BaseStrategy:
    """Validate and instantiate. Raises UnknownStrategyError / InvalidConfigError."""
    spec = get_spec(config.id)
    errors = validate_strategy_config(config)
    if errors:
        raise InvalidConfigError(errors)
    logger.debug("Creating strategy %s with %s", config.id, config.parameters)
    return spec.strategy_class(config)

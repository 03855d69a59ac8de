"""Backtesting engine: bar-by-bar simulation with commission and slippage."""

from backtester.backtesting.engine import BacktestEngine, BacktestResult, StepSnapshot

__all__ = ["BacktestEngine", "BacktestResult", "StepSnapshot"]

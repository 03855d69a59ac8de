"""Analytics: performance metrics (Sharpe, drawdown, win rate, profit factor) and reports."""

from backtester.analytics.metrics import (
    PerformanceMetrics,
    compute_metrics,
    equity_returns,
    expectancy,
    max_drawdown,
    profit_factor,
    sharpe_ratio,
    win_rate,
)
from backtester.analytics.report import annualized_return, equity_frame, format_summary, trades_frame

__all__ = [
    "PerformanceMetrics",
    "compute_metrics",
    "equity_returns",
    "expectancy",
    "max_drawdown",
    "profit_factor",
    "sharpe_ratio",
    "win_rate",
    "annualized_return",
    "equity_frame",
    "format_summary",
    "trades_frame",
]

"""
Performance metrics: Sharpe, max drawdown, win rate, profit factor, averages.
Sharpe uses per-bar equity returns annualized with a fixed sqrt(252),
whatever the bar interval. Known simplification, kept for comparability.
"""

from __future__ import annotations
import math
from dataclasses import asdict, dataclass
from typing import List, Sequence

import numpy as np

from backtester.core.types import EquityPoint, Trade

TRADING_DAYS_PER_YEAR = 252.0


@dataclass
class PerformanceMetrics:
    """Aggregate performance metrics. Losses are reported as positive magnitudes."""
    total_return: float
    total_return_pct: float
    sharpe_ratio: float
    max_drawdown_pct: float
    win_rate: float
    profit_factor: float
    expectancy: float
    total_trades: int
    winning_trades: int
    losing_trades: int
    avg_win: float
    avg_loss: float
    largest_win: float
    largest_loss: float

    def to_dict(self) -> dict:
        """Plain dict; non-finite floats (profit factor with no losses) become None."""
        return {k: None if isinstance(v, float) and not math.isfinite(v) else v for k, v in asdict(self).items()}


def equity_returns(equity: Sequence[float]) -> List[float]:
    """Simple returns (E[t] - E[t-1]) / E[t-1] between consecutive points."""
    arr = np.asarray(equity, dtype=float)
    if len(arr) < 2:
        return []
    prev = arr[:-1]
    with np.errstate(divide="ignore", invalid="ignore"):
        rets = np.where(prev != 0, np.diff(arr) / prev, 0.0)
    return rets.tolist()


def sharpe_ratio(returns: List[float], risk_free_rate: float = 0.0, periods_per_year: float = TRADING_DAYS_PER_YEAR) -> float:
    """Annualized Sharpe with population std. 0 for empty or flat returns."""
    if not returns:
        return 0.0
    arr = np.array(returns)
    excess = arr - risk_free_rate / periods_per_year
    if excess.std() <= 1e-12:
        return 0.0
    return float(np.sqrt(periods_per_year) * excess.mean() / excess.std())


def max_drawdown(equity: Sequence[float]) -> float:
    """Largest decline from a running peak, in percent (positive, e.g. 15.0)."""
    if len(equity) == 0:
        return 0.0
    arr = np.asarray(equity, dtype=float)
    peak = np.maximum.accumulate(arr)
    dd = (peak - arr) / np.where(peak != 0, peak, 1)
    return float(np.max(dd)) * 100.0


def win_rate(pnls: List[float]) -> float:
    """Percentage of trades with positive PnL."""
    if not pnls:
        return 0.0
    return sum(1 for p in pnls if p > 0) / len(pnls) * 100.0


def profit_factor(pnls: List[float]) -> float:
    """Gross profit / gross loss. inf when there are only wins, 0 with neither."""
    wins = sum(p for p in pnls if p > 0)
    losses = sum(-p for p in pnls if p < 0)
    if losses <= 0:
        return float("inf") if wins > 0 else 0.0
    return wins / losses


def expectancy(pnls: List[float]) -> float:
    """Average PnL per trade."""
    if not pnls:
        return 0.0
    return sum(pnls) / len(pnls)


def compute_metrics(
    trades: Sequence[Trade],
    equity_curve: Sequence[EquityPoint],
    initial_capital: float,
    final_capital: float,
    risk_free_rate: float = 0.0,
    periods_per_year: float = TRADING_DAYS_PER_YEAR,
) -> PerformanceMetrics:
    """
    Metrics from a finished run. A trade with pnl <= 0 counts as losing.
    Max drawdown is read from the per-bar drawdown series the engine recorded.
    """
    pnls = [t.pnl for t in trades]
    wins = [p for p in pnls if p > 0]
    losses = [-p for p in pnls if p <= 0]
    total_return = final_capital - initial_capital
    rets = equity_returns([p.equity for p in equity_curve])
    return PerformanceMetrics(
        total_return=total_return,
        total_return_pct=total_return / initial_capital * 100.0 if initial_capital else 0.0,
        sharpe_ratio=sharpe_ratio(rets, risk_free_rate, periods_per_year),
        max_drawdown_pct=max((p.drawdown_pct for p in equity_curve), default=0.0),
        win_rate=win_rate(pnls),
        profit_factor=profit_factor(pnls),
        expectancy=expectancy(pnls),
        total_trades=len(pnls),
        winning_trades=len(wins),
        losing_trades=len(losses),
        avg_win=sum(wins) / len(wins) if wins else 0.0,
        avg_loss=sum(losses) / len(losses) if losses else 0.0,
        largest_win=max(wins, default=0.0),
        largest_loss=max(losses, default=0.0),
    )

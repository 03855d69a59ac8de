"""Tabular views and a text summary of a BacktestResult."""

from __future__ import annotations
from typing import TYPE_CHECKING

import pandas as pd

from backtester.analytics.metrics import TRADING_DAYS_PER_YEAR

if TYPE_CHECKING:
    from backtester.backtesting.engine import BacktestResult

TRADE_COLUMNS = [
    "symbol", "side", "entry_time", "exit_time", "entry_price", "exit_price",
    "quantity", "pnl", "pnl_pct", "duration_days", "exit_reason", "fees",
]


def trades_frame(result: "BacktestResult") -> pd.DataFrame:
    rows = [
        {
            "symbol": t.symbol,
            "side": t.side,
            "entry_time": t.entry_time,
            "exit_time": t.exit_time,
            "entry_price": t.entry_price,
            "exit_price": t.exit_price,
            "quantity": t.quantity,
            "pnl": t.pnl,
            "pnl_pct": t.pnl_pct,
            "duration_days": t.duration_days,
            "exit_reason": t.exit_reason.value,
            "fees": t.fees,
        }
        for t in result.trades
    ]
    return pd.DataFrame(rows, columns=TRADE_COLUMNS)


def equity_frame(result: "BacktestResult") -> pd.DataFrame:
    """Equity curve indexed by time."""
    df = pd.DataFrame(
        {
            "time": [p.time for p in result.equity_curve],
            "equity": [p.equity for p in result.equity_curve],
            "drawdown_pct": [p.drawdown_pct for p in result.equity_curve],
        }
    )
    return df.set_index("time")


def annualized_return(total_return: float, days: float, annualize: bool = True) -> float:
    """Linear scaling of a total return by trading days (252 per year)."""
    if days <= 0:
        return 0.0
    daily = total_return / days
    return daily * TRADING_DAYS_PER_YEAR if annualize else daily


def format_summary(result: "BacktestResult") -> str:
    m = result.metrics
    lines = [
        f"--- Backtest Results: {result.strategy_id} ({result.start_date} -> {result.end_date}) ---",
        f"Initial capital: {result.initial_capital:,.2f}",
        f"Final capital:   {result.final_capital:,.2f}",
    ]
    if m is not None:
        lines += [
            f"Total return: {m.total_return:,.2f} ({m.total_return_pct:.2f}%)",
            f"Total trades: {m.total_trades} (wins: {m.winning_trades}, losses: {m.losing_trades})",
            f"Win rate: {m.win_rate:.1f}%",
            f"Profit factor: {m.profit_factor:.2f}",
            f"Sharpe ratio: {m.sharpe_ratio:.2f}",
            f"Max drawdown: {m.max_drawdown_pct:.2f}%",
            f"Avg win / loss: {m.avg_win:,.2f} / {m.avg_loss:,.2f}",
            f"Largest win / loss: {m.largest_win:,.2f} / {m.largest_loss:,.2f}",
            f"Expectancy: {m.expectancy:,.2f} per trade",
        ]
    return "\n".join(lines)

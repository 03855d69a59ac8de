"""
Core data types for bars, signals, configs, positions, trades and equity.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd


class SignalType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class ExitReason(str, Enum):
    SIGNAL = "SIGNAL"
    STOP_LOSS = "STOP_LOSS"
    TAKE_PROFIT = "TAKE_PROFIT"
    END_OF_TEST = "END_OF_TEST"
    AI_SIGNAL = "AI_SIGNAL"


@dataclass(frozen=True)
class Bar:
    """OHLCV observation for one symbol."""
    symbol: str
    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float


@dataclass(frozen=True)
class Signal:
    """Recommendation at one bar. strength in [0, 1]."""
    type: SignalType
    strength: float
    reason: str
    timestamp: datetime
    price: float
    symbol: str = ""

    @classmethod
    def hold(cls, bar: Bar, reason: str) -> "Signal":
        return cls(SignalType.HOLD, 0.0, reason, bar.timestamp, bar.close, bar.symbol)


@dataclass
class RiskManagement:
    """Risk block in percent. stop_loss / take_profit of None disable that exit."""
    stop_loss: Optional[float] = 5.0
    take_profit: Optional[float] = 15.0
    max_position_size: float = 20.0
    max_drawdown: float = 10.0


@dataclass
class StrategyConfig:
    """Tunable parameters and risk policy for one strategy instance."""
    id: str
    name: str
    description: str = ""
    parameters: Dict[str, Any] = field(default_factory=dict)
    risk_management: RiskManagement = field(default_factory=RiskManagement)
    active: bool = True


@dataclass
class BacktestConfig:
    """
    Run settings. Dates are ISO strings, inclusive. commission is a flat amount
    per order side; slippage_percent is a percentage (0.1 = 0.1%).
    """
    initial_capital: float = 100000.0
    start_date: str = "2023-01-01"
    end_date: str = "2024-01-01"
    commission: float = 5.0
    slippage_percent: float = 0.1


@dataclass
class Position:
    """Open long exposure in one symbol."""
    symbol: str
    quantity: int
    entry_price: float
    entry_time: datetime

    def market_value(self, price: float) -> float:
        return self.quantity * price


@dataclass(frozen=True)
class Trade:
    """Closed round trip for analytics."""
    symbol: str
    entry_time: datetime
    exit_time: datetime
    entry_price: float
    exit_price: float
    quantity: int
    pnl: float
    pnl_pct: float
    duration_days: float
    exit_reason: ExitReason
    fees: float = 0.0
    side: str = "LONG"


@dataclass(frozen=True)
class EquityPoint:
    """Portfolio value snapshot after marking a bar."""
    time: datetime
    equity: float
    drawdown_pct: float


@dataclass(frozen=True)
class FeedSignal:
    """Externally generated trade recommendation (e.g. model output)."""
    symbol: str
    action: SignalType
    confidence: float
    target_price: float
    current_price: float
    timestamp: datetime
    reasoning: str = ""


BAR_COLUMNS = ["time", "open", "high", "low", "close", "volume"]


def bars_to_frame(bars: Sequence[Bar]) -> pd.DataFrame:
    """OHLCV frame (columns: time, open, high, low, close, volume) in bar order."""
    return pd.DataFrame(
        {
            "time": [b.timestamp for b in bars],
            "open": [float(b.open) for b in bars],
            "high": [float(b.high) for b in bars],
            "low": [float(b.low) for b in bars],
            "close": [float(b.close) for b in bars],
            "volume": [float(b.volume) for b in bars],
        },
        columns=BAR_COLUMNS,
    )


def frame_to_bars(df: pd.DataFrame, symbol: str) -> List[Bar]:
    """Inverse of bars_to_frame. Missing volume is read as 0."""
    volume = df["volume"] if "volume" in df.columns else pd.Series(0.0, index=df.index)
    times = pd.to_datetime(df["time"])
    return [
        Bar(
            symbol=symbol,
            timestamp=t.to_pydatetime(),
            open=float(o),
            high=float(h),
            low=float(lo),
            close=float(c),
            volume=float(v),
        )
        for t, o, h, lo, c, v in zip(times, df["open"], df["high"], df["low"], df["close"], volume)
    ]

"""
Synthetic market data for demos and tests: a seeded random walk of daily
bars and a matching stream of model-style feed signals.
"""

from __future__ import annotations
from datetime import timedelta
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from backtester.core.types import Bar, FeedSignal, SignalType
from backtester.utils.timeutils import to_utc_naive


def generate_sample_bars(
    symbol: str,
    start_date: Any,
    end_date: Any,
    initial_price: float = 100.0,
    seed: Optional[int] = None,
) -> List[Bar]:
    """
    Business-day bars: +/-2% uniform daily move plus a slow sinusoidal drift
    (30-day period). Same seed -> same series.
    """
    rng = np.random.default_rng(seed)
    days = pd.bdate_range(to_utc_naive(start_date), to_utc_naive(end_date))
    bars: List[Bar] = []
    price = float(initial_price)
    for day in days:
        change = (rng.random() - 0.5) * 0.04
        trend = np.sin(day.timestamp() / (60 * 60 * 24 * 30)) * 0.001
        price *= 1 + change + trend
        open_ = price * (1 + (rng.random() - 0.5) * 0.01)
        high = max(open_, price) * (1 + rng.random() * 0.02)
        low = min(open_, price) * (1 - rng.random() * 0.02)
        volume = float(int(rng.random() * 1_000_000 + 100_000))
        bars.append(Bar(symbol, day.to_pydatetime(), open_, high, low, price, volume))
    return bars


def generate_sample_signals(
    bars_by_symbol: Mapping[str, Sequence[Bar]],
    confidence_threshold: float = 0.75,
    daily_probability: float = 0.3,
    seed: Optional[int] = None,
) -> List[FeedSignal]:
    """
    Walk calendar days across the bars' span; on ~daily_probability of days
    pick a symbol with a bar that day and emit a BUY or SELL with confidence
    drawn from [confidence_threshold, 0.95).
    """
    rng = np.random.default_rng(seed)
    by_day: Dict[Any, Dict[str, Bar]] = {}
    for symbol, bars in bars_by_symbol.items():
        for bar in bars:
            by_day.setdefault(to_utc_naive(bar.timestamp).date(), {})[symbol] = bar
    if not by_day:
        return []

    day = min(by_day)
    last = max(by_day)
    symbols = sorted(bars_by_symbol)
    signals: List[FeedSignal] = []
    while day <= last:
        if rng.random() < daily_probability:
            symbol = symbols[int(rng.integers(len(symbols)))]
            bar = by_day.get(day, {}).get(symbol)
            if bar is not None:
                action = SignalType.BUY if rng.random() > 0.5 else SignalType.SELL
                confidence = confidence_threshold + rng.random() * (0.95 - confidence_threshold)
                signals.append(
                    FeedSignal(
                        symbol=symbol,
                        action=action,
                        confidence=float(confidence),
                        target_price=bar.close * (1.02 if action == SignalType.BUY else 0.98),
                        current_price=bar.close,
                        timestamp=to_utc_naive(bar.timestamp),
                        reasoning=f"Model detected {action.value.lower()} opportunity in {symbol}",
                    )
                )
        day += timedelta(days=1)
    return signals

"""
RSI mean reversion: BUY when oversold, SELL when overbought.
Strength grows 0.1 per RSI point beyond the threshold, from 0.5, capped at 1.
"""

from __future__ import annotations

import pandas as pd

from backtester.core.types import Bar, Signal, SignalType
from backtester.indicators.technical import rsi
from backtester.strategies.base import INSUFFICIENT_DATA, BaseStrategy


class RsiMeanReversion(BaseStrategy):

    @property
    def rsi_period(self) -> int:
        return int(self.parameters["rsi_period"])

    @property
    def oversold_level(self) -> float:
        return float(self.parameters["oversold_level"])

    @property
    def overbought_level(self) -> float:
        return float(self.parameters["overbought_level"])

    def compute_indicators(self, df: pd.DataFrame) -> pd.DataFrame:
        df = df.copy()
        df["rsi"] = rsi(df["close"], self.rsi_period)
        return df

    def signal_at(self, df: pd.DataFrame, index: int, bar: Bar) -> Signal:
        (value,) = self._values(df, "rsi", index)
        if self._any_missing(value):
            return Signal.hold(bar, INSUFFICIENT_DATA)

        if value <= self.oversold_level:
            strength = min(1.0, (self.oversold_level - value) / 10.0 + 0.5)
            return Signal(SignalType.BUY, strength, f"RSI oversold at {value:.2f}", bar.timestamp, bar.close, bar.symbol)
        if value >= self.overbought_level:
            strength = min(1.0, (value - self.overbought_level) / 10.0 + 0.5)
            return Signal(SignalType.SELL, strength, f"RSI overbought at {value:.2f}", bar.timestamp, bar.close, bar.symbol)
        return Signal.hold(bar, f"RSI neutral at {value:.2f}")

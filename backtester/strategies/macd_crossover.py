"""
MACD signal-line crossover: BUY when MACD crosses above its signal line, SELL below.
"""

from __future__ import annotations

import pandas as pd

from backtester.core.types import Bar, Signal, SignalType
from backtester.indicators.technical import macd
from backtester.strategies.base import INSUFFICIENT_DATA, BaseStrategy

CROSS_STRENGTH = 0.8


class MacdCrossover(BaseStrategy):
    """
    EMAs are seeded with the first price, so early MACD values are biased;
    signals start once slow_period + signal_period - 1 bars exist.
    """

    @property
    def fast_period(self) -> int:
        return int(self.parameters["fast_period"])

    @property
    def slow_period(self) -> int:
        return int(self.parameters["slow_period"])

    @property
    def signal_period(self) -> int:
        return int(self.parameters["signal_period"])

    @property
    def warmup_bars(self) -> int:
        return self.slow_period + self.signal_period - 1

    def compute_indicators(self, df: pd.DataFrame) -> pd.DataFrame:
        df = df.copy()
        result = macd(df["close"], self.fast_period, self.slow_period, self.signal_period)
        df["macd"] = result.macd
        df["macd_signal"] = result.signal
        df["macd_hist"] = result.histogram
        return df

    def signal_at(self, df: pd.DataFrame, index: int, bar: Bar) -> Signal:
        if index < self.warmup_bars:
            return Signal.hold(bar, INSUFFICIENT_DATA)
        hist, prev_hist = self._values(df, "macd_hist", index, index - 1)
        if self._any_missing(hist, prev_hist):
            return Signal.hold(bar, INSUFFICIENT_DATA)

        if prev_hist <= 0 < hist:
            return Signal(
                SignalType.BUY, CROSS_STRENGTH, "MACD crossed above signal line", bar.timestamp, bar.close, bar.symbol
            )
        if prev_hist >= 0 > hist:
            return Signal(
                SignalType.SELL, CROSS_STRENGTH, "MACD crossed below signal line", bar.timestamp, bar.close, bar.symbol
            )
        return Signal.hold(bar, "no MACD crossover")

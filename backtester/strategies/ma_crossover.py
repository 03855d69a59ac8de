"""
Moving-average crossover: BUY on a golden cross, SELL on a death cross.
"""

from __future__ import annotations

import pandas as pd

from backtester.core.types import Bar, Signal, SignalType
from backtester.indicators.technical import sma
from backtester.strategies.base import INSUFFICIENT_DATA, BaseStrategy

CROSS_STRENGTH = 0.8


class MovingAverageCrossover(BaseStrategy):
    """
    Fast/slow SMA on close. A cross is judged between the previous and the
    current bar; fast_period < slow_period is enforced by the registry.
    """

    @property
    def fast_period(self) -> int:
        return int(self.parameters["fast_period"])

    @property
    def slow_period(self) -> int:
        return int(self.parameters["slow_period"])

    def compute_indicators(self, df: pd.DataFrame) -> pd.DataFrame:
        df = df.copy()
        df["sma_fast"] = sma(df["close"], self.fast_period)
        df["sma_slow"] = sma(df["close"], self.slow_period)
        return df

    def signal_at(self, df: pd.DataFrame, index: int, bar: Bar) -> Signal:
        fast, prev_fast = self._values(df, "sma_fast", index, index - 1)
        slow, prev_slow = self._values(df, "sma_slow", index, index - 1)
        if self._any_missing(fast, slow, prev_fast, prev_slow):
            return Signal.hold(bar, INSUFFICIENT_DATA)

        if prev_fast <= prev_slow and fast > slow:
            return Signal(
                SignalType.BUY,
                CROSS_STRENGTH,
                f"Golden cross: {self.fast_period}-period MA crossed above {self.slow_period}-period MA",
                bar.timestamp,
                bar.close,
                bar.symbol,
            )
        if prev_fast >= prev_slow and fast < slow:
            return Signal(
                SignalType.SELL,
                CROSS_STRENGTH,
                f"Death cross: {self.fast_period}-period MA crossed below {self.slow_period}-period MA",
                bar.timestamp,
                bar.close,
                bar.symbol,
            )
        return Signal.hold(bar, "no crossover")

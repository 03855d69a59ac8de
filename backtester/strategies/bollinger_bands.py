"""
Bollinger Bands reversion: BUY at or below the lower band, SELL at or above the upper band.
"""

from __future__ import annotations

import pandas as pd

from backtester.core.types import Bar, Signal, SignalType
from backtester.indicators.technical import bollinger
from backtester.strategies.base import INSUFFICIENT_DATA, BaseStrategy


class BollingerBandsStrategy(BaseStrategy):
    """
    Strength = distance beyond the band / band-to-middle spread + 0.5, capped at 1.
    A collapsed band (zero volatility window) gives no signal.
    """

    @property
    def period(self) -> int:
        return int(self.parameters["period"])

    @property
    def std_dev(self) -> float:
        return float(self.parameters["std_dev"])

    def compute_indicators(self, df: pd.DataFrame) -> pd.DataFrame:
        df = df.copy()
        bands = bollinger(df["close"], self.period, self.std_dev)
        df["bb_upper"] = bands.upper
        df["bb_middle"] = bands.middle
        df["bb_lower"] = bands.lower
        return df

    def signal_at(self, df: pd.DataFrame, index: int, bar: Bar) -> Signal:
        (upper,) = self._values(df, "bb_upper", index)
        (middle,) = self._values(df, "bb_middle", index)
        (lower,) = self._values(df, "bb_lower", index)
        if self._any_missing(upper, middle, lower):
            return Signal.hold(bar, INSUFFICIENT_DATA)
        if upper - middle <= 0:
            return Signal.hold(bar, "zero band width")

        price = bar.close
        if price <= lower:
            strength = min(1.0, (lower - price) / (middle - lower) + 0.5)
            return Signal(
                SignalType.BUY, strength, f"Price touched lower band at {lower:.2f}", bar.timestamp, price, bar.symbol
            )
        if price >= upper:
            strength = min(1.0, (price - upper) / (upper - middle) + 0.5)
            return Signal(
                SignalType.SELL, strength, f"Price touched upper band at {upper:.2f}", bar.timestamp, price, bar.symbol
            )
        return Signal.hold(bar, "price within bands")

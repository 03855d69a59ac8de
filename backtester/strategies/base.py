"""Abstract strategy: indicators + per-bar signal generation."""

from __future__ import annotations
from abc import abstractmethod
from typing import Any, Dict, Mapping, Sequence

import numpy as np
import pandas as pd

from backtester.core.types import Bar, RiskManagement, Signal, StrategyConfig, bars_to_frame
from backtester.signals.base import SignalLookup, SignalSource

INSUFFICIENT_DATA = "insufficient data"


class BaseStrategy(SignalSource):
    """
    Strategy computes trailing indicators on an OHLCV frame and derives a Signal
    for any bar index from them. Indicators never look ahead, so evaluating the
    full frame once per run equals evaluating bars[: index + 1] at each bar.
    """

    def __init__(self, config: StrategyConfig):
        self.config = config

    @property
    def source_id(self) -> str:
        return self.config.id

    @property
    def risk(self) -> RiskManagement:
        return self.config.risk_management

    @property
    def parameters(self) -> Dict[str, Any]:
        return self.config.parameters

    @abstractmethod
    def compute_indicators(self, df: pd.DataFrame) -> pd.DataFrame:
        """Add indicator columns to OHLCV DataFrame. No lookahead."""
        pass

    @abstractmethod
    def signal_at(self, df: pd.DataFrame, index: int, bar: Bar) -> Signal:
        """Signal for row `index` of a frame returned by compute_indicators."""
        pass

    def generate_signal(self, bars: Sequence[Bar], index: int) -> Signal:
        """Signal for bars[index], using only bars up to and including it."""
        if index < 0 or index >= len(bars):
            raise IndexError(f"bar index {index} out of range for {len(bars)} bars")
        window = list(bars[: index + 1])
        df = self.compute_indicators(bars_to_frame(window))
        return self.signal_at(df, index, window[index])

    def bind(self, history: Mapping[str, Sequence[Bar]]) -> SignalLookup:
        frames = {symbol: self.compute_indicators(bars_to_frame(bars)) for symbol, bars in history.items()}

        def lookup(bar: Bar, index: int) -> Signal:
            return self.signal_at(frames[bar.symbol], index, bar)

        return lookup

    @staticmethod
    def _values(df: pd.DataFrame, column: str, *indices: int) -> list:
        """Column values at the given rows; NaN for negative rows."""
        col = df[column].to_numpy(dtype=float)
        return [float(col[i]) if i >= 0 else float("nan") for i in indices]

    @staticmethod
    def _any_missing(*values: float) -> bool:
        return any(np.isnan(v) for v in values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.config.id!r}, parameters={self.config.parameters!r})"

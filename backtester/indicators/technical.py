"""
Technical indicators over a price sequence.

Every function is pure and returns float arrays aligned index-for-index with
the input. Positions without a full lookback window are NaN, never 0, so
"no value yet" stays distinguishable from "value is zero". A period longer
than the history yields an all-NaN result.
"""

from __future__ import annotations
from typing import NamedTuple, Sequence, Union

import numpy as np
import pandas as pd
from numpy.lib.stride_tricks import sliding_window_view

PriceInput = Union[Sequence[float], np.ndarray, pd.Series]


class MacdResult(NamedTuple):
    macd: np.ndarray
    signal: np.ndarray
    histogram: np.ndarray


class BollingerResult(NamedTuple):
    upper: np.ndarray
    middle: np.ndarray
    lower: np.ndarray


def _as_array(prices: PriceInput) -> np.ndarray:
    return np.asarray(prices, dtype=float).reshape(-1)


def _check_period(period: int, name: str = "period") -> int:
    if int(period) != period or period <= 0:
        raise ValueError(f"{name} must be a positive integer, got {period!r}")
    return int(period)


def _windows(arr: np.ndarray, period: int) -> np.ndarray:
    """Trailing windows; row k covers arr[k : k + period]."""
    return sliding_window_view(arr, period)


def sma(prices: PriceInput, period: int) -> np.ndarray:
    """Arithmetic mean of the trailing `period` values."""
    period = _check_period(period)
    arr = _as_array(prices)
    out = np.full(arr.shape, np.nan)
    if len(arr) >= period:
        out[period - 1:] = _windows(arr, period).mean(axis=1)
    return out


def ema(prices: PriceInput, period: int) -> np.ndarray:
    """Recursive EMA, multiplier 2 / (period + 1), seeded with the first price."""
    period = _check_period(period)
    arr = _as_array(prices)
    if len(arr) == 0:
        return arr.copy()
    return pd.Series(arr).ewm(span=period, adjust=False).mean().to_numpy(dtype=float)


def rsi(prices: PriceInput, period: int = 14) -> np.ndarray:
    """
    RSI from trailing average gain / loss over `period` price changes.
    First defined value is at index `period`. Zero average loss saturates at
    100; a window with no movement at all reads 50.
    """
    period = _check_period(period)
    arr = _as_array(prices)
    out = np.full(arr.shape, np.nan)
    if len(arr) <= period:
        return out
    delta = np.diff(arr)
    gains = np.clip(delta, 0.0, None)
    losses = np.clip(-delta, 0.0, None)
    avg_gain = _windows(gains, period).mean(axis=1)
    avg_loss = _windows(losses, period).mean(axis=1)
    with np.errstate(divide="ignore", invalid="ignore"):
        rs = avg_gain / avg_loss
        values = 100.0 - 100.0 / (1.0 + rs)
    # flat window reads neutral 50 rather than saturating at 0
    values = np.where(avg_loss == 0.0, np.where(avg_gain > 0.0, 100.0, 50.0), values)
    out[period:] = values
    return out


def macd(
    prices: PriceInput,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> MacdResult:
    """MACD line (fast EMA - slow EMA), its EMA as signal line, and the histogram."""
    _check_period(fast_period, "fast_period")
    _check_period(slow_period, "slow_period")
    _check_period(signal_period, "signal_period")
    arr = _as_array(prices)
    line = ema(arr, fast_period) - ema(arr, slow_period)
    signal = ema(line, signal_period)
    return MacdResult(macd=line, signal=signal, histogram=line - signal)


def bollinger(prices: PriceInput, period: int = 20, std_dev: float = 2.0) -> BollingerResult:
    """SMA middle band, +/- std_dev population standard deviations over the same window."""
    period = _check_period(period)
    arr = _as_array(prices)
    middle = np.full(arr.shape, np.nan)
    upper = np.full(arr.shape, np.nan)
    lower = np.full(arr.shape, np.nan)
    if len(arr) >= period:
        windows = _windows(arr, period)
        mean = windows.mean(axis=1)
        std = windows.std(axis=1)
        middle[period - 1:] = mean
        upper[period - 1:] = mean + std * std_dev
        lower[period - 1:] = mean - std * std_dev
    return BollingerResult(upper=upper, middle=middle, lower=lower)

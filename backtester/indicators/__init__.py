"""Indicators: SMA, EMA, RSI, MACD, Bollinger Bands."""

from backtester.indicators.technical import (
    BollingerResult,
    MacdResult,
    bollinger,
    ema,
    macd,
    rsi,
    sma,
)

__all__ = ["BollingerResult", "MacdResult", "bollinger", "ema", "macd", "rsi", "sma"]

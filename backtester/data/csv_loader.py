"""Load OHLCV bars from CSV."""

from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from backtester.core.types import Bar, frame_to_bars

logger = logging.getLogger("backtester.data.csv")

_TIME_COLUMNS = ("time", "timestamp", "date", "datetime")


def load_bars_csv(path: Union[str, Path], symbol: Optional[str] = None) -> List[Bar]:
    """
    Read a CSV with a time column (time/timestamp/date/datetime) and
    open, high, low, close[, volume]. A 'symbol' column takes precedence
    over the `symbol` argument; otherwise the file stem is used.
    """
    path = Path(path)
    df = pd.read_csv(path)
    df.columns = [str(c).strip().lower() for c in df.columns]
    time_col = next((c for c in _TIME_COLUMNS if c in df.columns), None)
    if time_col is None:
        raise ValueError(f"{path}: no time column (expected one of {', '.join(_TIME_COLUMNS)})")
    missing = [c for c in ("open", "high", "low", "close") if c not in df.columns]
    if missing:
        raise ValueError(f"{path}: missing columns {missing}")
    df = df.rename(columns={time_col: "time"})

    if "symbol" in df.columns:
        bars: List[Bar] = []
        for sym, group in df.groupby("symbol", sort=False):
            bars.extend(frame_to_bars(group, str(sym)))
    else:
        bars = frame_to_bars(df, symbol or path.stem.upper())
    logger.info("Loaded %d bars from %s", len(bars), path)
    return bars

"""Timestamp normalization and date-range helpers."""

from __future__ import annotations
from datetime import datetime, timedelta
from typing import Any, Tuple

import pandas as pd

SECONDS_PER_DAY = 86400.0


def to_utc_naive(value: Any) -> datetime:
    """
    Parse a datetime, date or ISO string into a naive UTC datetime.
    Aware values are converted to UTC first; naive values are taken as UTC.
    """
    ts = value if isinstance(value, pd.Timestamp) else pd.Timestamp(value)
    if ts is pd.NaT:
        raise ValueError(f"Invalid timestamp: {value!r}")
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts.to_pydatetime()


def is_date_only(value: Any) -> bool:
    """True for 'YYYY-MM-DD' strings (no time component)."""
    return isinstance(value, str) and len(value.strip()) == 10


def parse_date_range(start: Any, end: Any) -> Tuple[datetime, datetime]:
    """
    Inclusive [start, end] bounds. A date-only end covers the whole day.
    Raises ValueError on unparseable input.
    """
    start_dt = to_utc_naive(start)
    end_dt = to_utc_naive(end)
    if is_date_only(end):
        end_dt = end_dt + timedelta(days=1) - timedelta(microseconds=1)
    return start_dt, end_dt


def days_between(start: datetime, end: datetime) -> float:
    """Calendar days between two timestamps (fractional)."""
    return (to_utc_naive(end) - to_utc_naive(start)).total_seconds() / SECONDS_PER_DAY

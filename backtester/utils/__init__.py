"""Utils: timestamp helpers."""

from backtester.utils.timeutils import days_between, parse_date_range, to_utc_naive

__all__ = ["days_between", "parse_date_range", "to_utc_naive"]

"""Unit tests for utils.timeutils."""

from datetime import date, datetime

import pytest

from backtester.utils.timeutils import days_between, is_date_only, parse_date_range, to_utc_naive


def test_to_utc_naive():
    assert to_utc_naive("2023-01-01T10:00:00+02:00") == datetime(2023, 1, 1, 8, 0)
    assert to_utc_naive("2023-01-01") == datetime(2023, 1, 1)
    assert to_utc_naive(date(2023, 1, 1)) == datetime(2023, 1, 1)
    assert to_utc_naive(datetime(2023, 1, 1, 5)).tzinfo is None


def test_to_utc_naive_invalid():
    with pytest.raises(ValueError):
        to_utc_naive("not a date")
    with pytest.raises(ValueError):
        to_utc_naive(None)


def test_date_range_inclusive_end_day():
    start, end = parse_date_range("2023-01-01", "2023-01-31")
    assert start == datetime(2023, 1, 1)
    assert end == datetime(2023, 1, 31, 23, 59, 59, 999999)
    _, end = parse_date_range("2023-01-01", "2023-01-31T12:00:00")
    assert end == datetime(2023, 1, 31, 12, 0)
    assert is_date_only("2023-01-31")
    assert not is_date_only(datetime(2023, 1, 31))


def test_days_between():
    assert days_between(datetime(2023, 1, 1), datetime(2023, 1, 2, 12)) == 1.5
    assert days_between(datetime(2023, 1, 1), datetime(2023, 1, 1)) == 0.0

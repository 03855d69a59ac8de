"""Unit tests for data.sample_data and data.csv_loader."""

from datetime import datetime

import pytest

from backtester.core.types import SignalType
from backtester.data.csv_loader import load_bars_csv
from backtester.data.sample_data import generate_sample_bars, generate_sample_signals


def test_sample_bars_business_days():
    bars = generate_sample_bars("AAA", "2023-01-02", "2023-01-13", initial_price=50.0, seed=1)
    assert len(bars) == 10
    assert all(b.timestamp.weekday() < 5 for b in bars)
    assert all(b.symbol == "AAA" for b in bars)
    for b in bars:
        assert b.high >= max(b.open, b.close)
        assert b.low <= min(b.open, b.close)
        assert b.volume >= 100_000


def test_sample_bars_seeded():
    a = generate_sample_bars("AAA", "2023-01-01", "2023-03-01", seed=7)
    b = generate_sample_bars("AAA", "2023-01-01", "2023-03-01", seed=7)
    c = generate_sample_bars("AAA", "2023-01-01", "2023-03-01", seed=8)
    assert a == b
    assert [x.close for x in a] != [x.close for x in c]


def test_sample_signals_match_bars():
    bars = {
        "AAA": generate_sample_bars("AAA", "2023-01-01", "2023-06-30", seed=1),
        "BBB": generate_sample_bars("BBB", "2023-01-01", "2023-06-30", seed=2),
    }
    keys = {(s, b.timestamp.date()) for s, series in bars.items() for b in series}
    signals = generate_sample_signals(bars, confidence_threshold=0.8, seed=3)
    assert signals
    for s in signals:
        assert (s.symbol, s.timestamp.date()) in keys
        assert 0.8 <= s.confidence < 0.95
        assert s.action in (SignalType.BUY, SignalType.SELL)
    assert signals == generate_sample_signals(bars, confidence_threshold=0.8, seed=3)


def test_sample_signals_probability_bounds():
    bars = {"AAA": generate_sample_bars("AAA", "2023-01-02", "2023-01-13", seed=1)}
    assert generate_sample_signals(bars, daily_probability=0.0, seed=1) == []
    assert len(generate_sample_signals(bars, daily_probability=1.0, seed=1)) == 10
    assert generate_sample_signals({}, seed=1) == []


def test_load_csv_symbol_from_file_name(tmp_path):
    path = tmp_path / "aapl.csv"
    path.write_text(
        "Date,Open,High,Low,Close,Volume\n"
        "2023-01-03,100,102,99,101,1000\n"
        "2023-01-04,101,103,100,102,1200\n"
    )
    bars = load_bars_csv(path)
    assert [b.symbol for b in bars] == ["AAPL", "AAPL"]
    assert bars[0].timestamp == datetime(2023, 1, 3)
    assert bars[1].close == 102.0
    assert load_bars_csv(path, "XYZ")[0].symbol == "XYZ"


def test_load_csv_symbol_column(tmp_path):
    path = tmp_path / "mixed.csv"
    path.write_text(
        "timestamp,symbol,open,high,low,close\n"
        "2023-01-03,AAA,1,1,1,1\n"
        "2023-01-03,BBB,2,2,2,2\n"
        "2023-01-04,AAA,1,1,1,1.5\n"
    )
    bars = load_bars_csv(path, "IGNORED")
    assert sorted({b.symbol for b in bars}) == ["AAA", "BBB"]
    assert all(b.volume == 0.0 for b in bars)


def test_load_csv_missing_columns(tmp_path):
    no_time = tmp_path / "a.csv"
    no_time.write_text("open,high,low,close\n1,1,1,1\n")
    with pytest.raises(ValueError):
        load_bars_csv(no_time)
    no_close = tmp_path / "b.csv"
    no_close.write_text("time,open,high,low\n2023-01-03,1,1,1\n")
    with pytest.raises(ValueError):
        load_bars_csv(no_close)

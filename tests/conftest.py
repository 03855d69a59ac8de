"""Shared fixtures: bar series builders."""

from datetime import datetime, timedelta

import pytest

from backtester.core.types import Bar


def build_bars(closes, symbol="TEST", start=datetime(2023, 1, 2)):
    """One bar per calendar day; open/high/low hug the close."""
    return [
        Bar(
            symbol=symbol,
            timestamp=start + timedelta(days=i),
            open=float(c),
            high=float(c) * 1.001,
            low=float(c) * 0.999,
            close=float(c),
            volume=1000.0,
        )
        for i, c in enumerate(closes)
    ]


@pytest.fixture
def make_bars():
    return build_bars


CONFIG_ENV_KEYS = (
    "BACKTEST_INITIAL_CAPITAL", "BACKTEST_START", "BACKTEST_END", "BACKTEST_COMMISSION",
    "BACKTEST_SLIPPAGE_PERCENT", "ENFORCE_MAX_DRAWDOWN", "STRATEGY_ID", "SIGNAL_CONFIDENCE_THRESHOLD",
    "SIGNAL_POSITION_SIZE", "DATA_CSV", "SYMBOL", "START_PRICE", "DATA_SEED", "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No config env overrides; cwd is an empty temp dir (no .env, no config.yaml)."""
    for key in CONFIG_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path

"""Unit tests for built-in strategies."""

import math

import pytest

from backtester.core.types import SignalType
from backtester.strategies.registry import create_strategy, default_config


def _strategy(strategy_id, **params):
    config = default_config(strategy_id)
    config.parameters.update(params)
    return create_strategy(config)


def _crossover_closes():
    # flat, then a single upward break at bar 40 that keeps rising
    return [100.0] * 40 + [101.0 + 0.05 * i for i in range(60)]


def test_ma_warmup_hold(make_bars):
    strategy = _strategy("ma-crossover", fast_period=10, slow_period=30)
    bars = make_bars([100 + 10 * math.sin(i) for i in range(60)])
    for i in range(29):
        signal = strategy.generate_signal(bars, i)
        assert signal.type == SignalType.HOLD
        assert signal.strength == 0
        assert signal.reason == "insufficient data"


def test_ma_golden_cross(make_bars):
    strategy = _strategy("ma-crossover", fast_period=5, slow_period=20)
    bars = make_bars(_crossover_closes())
    assert strategy.generate_signal(bars, 39).type == SignalType.HOLD
    signal = strategy.generate_signal(bars, 40)
    assert signal.type == SignalType.BUY
    assert signal.strength == 0.8
    assert signal.price == 101.0
    assert signal.timestamp == bars[40].timestamp
    assert all(strategy.generate_signal(bars, i).type == SignalType.HOLD for i in range(41, 100))


def test_ma_death_cross(make_bars):
    strategy = _strategy("ma-crossover", fast_period=5, slow_period=20)
    bars = make_bars([100.0] * 40 + [99.0 - 0.05 * i for i in range(10)])
    signal = strategy.generate_signal(bars, 40)
    assert signal.type == SignalType.SELL
    assert signal.strength == 0.8


def test_ma_flat_never_crosses(make_bars):
    strategy = _strategy("ma-crossover")
    bars = make_bars([100.0] * 100)
    assert {strategy.generate_signal(bars, i).type for i in range(100)} == {SignalType.HOLD}


def test_rsi_oversold_buy(make_bars):
    strategy = _strategy("rsi-mean-reversion", rsi_period=14, oversold_level=30, overbought_level=70)
    closes = [100 + i for i in range(9)] + [107 - i for i in range(12)]
    bars = make_bars(closes)
    signal = strategy.generate_signal(bars, 20)
    assert signal.type == SignalType.BUY
    assert signal.strength > 0.5
    assert signal.strength == 1.0
    assert "oversold" in signal.reason


def test_rsi_overbought_sell(make_bars):
    strategy = _strategy("rsi-mean-reversion")
    bars = make_bars([100 + i for i in range(20)])
    signal = strategy.generate_signal(bars, 19)
    assert signal.type == SignalType.SELL
    assert signal.strength == 1.0


def test_rsi_warmup(make_bars):
    strategy = _strategy("rsi-mean-reversion", rsi_period=14)
    bars = make_bars([100 - i for i in range(20)])
    assert all(strategy.generate_signal(bars, i).reason == "insufficient data" for i in range(14))
    assert strategy.generate_signal(bars, 14).type == SignalType.BUY


def test_rsi_strength_scaling(make_bars):
    strategy = _strategy("rsi-mean-reversion", rsi_period=14, oversold_level=30, overbought_level=70)
    # 4 gains, 10 losses -> RSI = 100 - 100 / (1 + 0.4) ~= 28.57
    closes = [100.0] + [101.0 + i for i in range(4)] + [103.0 - i for i in range(10)]
    bars = make_bars(closes)
    signal = strategy.generate_signal(bars, 14)
    expected_rsi = 100.0 - 100.0 / 1.4
    assert signal.type == SignalType.BUY
    assert signal.strength == pytest.approx((30 - expected_rsi) / 10 + 0.5)


def test_bollinger_lower_band_buy(make_bars):
    strategy = _strategy("bollinger-bands", period=20, std_dev=2.0)
    closes = [99.0 if i % 2 == 0 else 101.0 for i in range(20)] + [90.0]
    bars = make_bars(closes)
    signal = strategy.generate_signal(bars, 20)
    assert signal.type == SignalType.BUY
    assert 0.5 < signal.strength <= 1.0


def test_bollinger_upper_band_sell(make_bars):
    strategy = _strategy("bollinger-bands", period=20, std_dev=2.0)
    closes = [99.0 if i % 2 == 0 else 101.0 for i in range(20)] + [110.0]
    signal = strategy.generate_signal(make_bars(closes), 20)
    assert signal.type == SignalType.SELL
    assert 0.5 < signal.strength <= 1.0


def test_bollinger_flat_and_inside(make_bars):
    strategy = _strategy("bollinger-bands", period=20, std_dev=2.0)
    assert strategy.generate_signal(make_bars([100.0] * 25), 24).reason == "zero band width"
    closes = [99.0 if i % 2 == 0 else 101.0 for i in range(21)]
    assert strategy.generate_signal(make_bars(closes), 20).type == SignalType.HOLD
    assert strategy.generate_signal(make_bars(closes), 10).reason == "insufficient data"


def test_macd_warmup_then_cross(make_bars):
    strategy = _strategy("macd-crossover", fast_period=12, slow_period=26, signal_period=9)
    closes = [150.0 - i for i in range(50)] + [100.0 + 2 * i for i in range(40)]
    bars = make_bars(closes)
    signals = [strategy.generate_signal(bars, i) for i in range(len(bars))]
    assert all(s.type == SignalType.HOLD for s in signals[:34])
    buys = [i for i, s in enumerate(signals) if s.type == SignalType.BUY]
    assert buys and buys[0] >= 50
    assert signals[buys[0]].strength == 0.8


def test_bound_lookup_matches_generate_signal(make_bars):
    strategy = _strategy("ma-crossover", fast_period=3, slow_period=8)
    bars = make_bars([100 + 5 * math.sin(i / 3.0) for i in range(60)])
    lookup = strategy.bind({"TEST": bars})
    for i, bar in enumerate(bars):
        a = strategy.generate_signal(bars, i)
        b = lookup(bar, i)
        assert (a.type, a.strength, a.reason) == (b.type, b.strength, b.reason)


def test_generate_signal_index_out_of_range(make_bars):
    strategy = _strategy("ma-crossover")
    with pytest.raises(IndexError):
        strategy.generate_signal(make_bars([100.0] * 5), 5)

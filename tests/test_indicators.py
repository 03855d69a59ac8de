"""Unit tests for indicators.technical."""

import math

import numpy as np
import pytest

from backtester.indicators.technical import bollinger, ema, macd, rsi, sma


def test_sma_warmup_is_nan():
    out = sma([1, 2, 3, 4, 5], 3)
    assert math.isnan(out[0]) and math.isnan(out[1])
    assert out[2:].tolist() == [2.0, 3.0, 4.0]


def test_sma_period_longer_than_history():
    out = sma([1, 2], 5)
    assert len(out) == 2
    assert np.isnan(out).all()


def test_invalid_period():
    with pytest.raises(ValueError):
        sma([1, 2, 3], 0)
    with pytest.raises(ValueError):
        rsi([1, 2, 3], -1)


def test_ema_seeded_with_first_price():
    out = ema([10.0, 20.0, 20.0], 3)
    # multiplier 2 / (3 + 1) = 0.5
    assert out.tolist() == pytest.approx([10.0, 15.0, 17.5])


def test_ema_empty():
    assert len(ema([], 5)) == 0


def test_rsi_warmup_and_alignment():
    prices = [100 + i for i in range(20)]
    out = rsi(prices, 14)
    assert np.isnan(out[:14]).all()
    assert not np.isnan(out[14])
    assert len(out) == len(prices)


def test_rsi_zero_loss_saturates():
    out = rsi([100 + i for i in range(20)], 14)
    assert out[14:].tolist() == [100.0] * 6


def test_rsi_flat_is_neutral():
    out = rsi([100.0] * 20, 14)
    assert out[14:].tolist() == [50.0] * 6


def test_rsi_mixed_window():
    # 2 gains of 1 and 12 losses of 1 -> RS = 1/6 -> RSI = 100/7
    prices = [100 + i for i in range(9)] + [107 - i for i in range(12)]
    out = rsi(prices, 14)
    assert out[20] == pytest.approx(100.0 - 100.0 / (1.0 + 1.0 / 6.0))


def test_rsi_period_longer_than_history():
    assert np.isnan(rsi([1, 2, 3], 14)).all()


def test_macd_components():
    prices = [100 + math.sin(i / 3.0) * 5 for i in range(60)]
    result = macd(prices, 12, 26, 9)
    assert len(result.macd) == len(result.signal) == len(result.histogram) == 60
    np.testing.assert_allclose(result.histogram, result.macd - result.signal)
    np.testing.assert_allclose(result.macd, ema(prices, 12) - ema(prices, 26))
    np.testing.assert_allclose(result.signal, ema(result.macd, 9))


def test_macd_flat_prices_zero():
    result = macd([50.0] * 40)
    assert np.allclose(result.macd, 0.0)
    assert np.allclose(result.histogram, 0.0)


def test_bollinger_population_std():
    bands = bollinger([1.0, 2.0, 3.0], 3, 2.0)
    std = math.sqrt(2.0 / 3.0)
    assert bands.middle[2] == pytest.approx(2.0)
    assert bands.upper[2] == pytest.approx(2.0 + 2 * std)
    assert bands.lower[2] == pytest.approx(2.0 - 2 * std)
    assert np.isnan(bands.upper[:2]).all()


def test_bollinger_flat_collapses():
    bands = bollinger([100.0] * 25, 20, 2.0)
    assert bands.upper[-1] == bands.middle[-1] == bands.lower[-1] == 100.0


def test_indicators_are_deterministic():
    prices = [100 + math.sin(i / 2.0) * 3 + i * 0.1 for i in range(80)]
    snapshot = list(prices)
    for fn in (lambda p: sma(p, 10), lambda p: ema(p, 10), lambda p: rsi(p, 14)):
        assert np.array_equal(fn(prices), fn(prices), equal_nan=True)
    first, second = macd(prices), macd(prices)
    for a, b in zip(first, second):
        assert np.array_equal(a, b, equal_nan=True)
    first, second = bollinger(prices), bollinger(prices)
    for a, b in zip(first, second):
        assert np.array_equal(a, b, equal_nan=True)
    assert prices == snapshot

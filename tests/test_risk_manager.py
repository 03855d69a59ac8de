"""Unit tests for risk.manager."""

from backtester.core.types import ExitReason, RiskManagement
from backtester.risk.manager import RiskManager


def test_size_position_whole_shares():
    rm = RiskManager(stop_loss_pct=5, take_profit_pct=15, max_position_pct=20)
    r = rm.size_position(cash=10000, price=101, commission=5)
    # budget 2000, minus one commission, floored
    assert r.allowed is True
    assert r.quantity == 19


def test_size_position_budget_capped_by_cash():
    rm = RiskManager(stop_loss_pct=5, take_profit_pct=15, max_position_pct=100)
    assert rm.position_budget(500) == 500
    assert rm.size_position(cash=500, price=100, commission=0).quantity == 5


def test_size_position_rejects_below_one_share():
    rm = RiskManager(stop_loss_pct=5, take_profit_pct=15, max_position_pct=2)
    r = rm.size_position(cash=1000, price=50, commission=5)
    assert r.allowed is False
    assert r.quantity == 0
    assert "share" in r.reason


def test_size_position_non_positive_price():
    rm = RiskManager(stop_loss_pct=5, take_profit_pct=15, max_position_pct=20)
    r = rm.size_position(cash=1000, price=0, commission=0)
    assert r.allowed is False
    assert "price" in r.reason


def test_exit_stop_loss_and_take_profit():
    rm = RiskManager(stop_loss_pct=5, take_profit_pct=15, max_position_pct=20)
    assert rm.exit_reason(100, 95) == ExitReason.STOP_LOSS
    assert rm.exit_reason(100, 94) == ExitReason.STOP_LOSS
    assert rm.exit_reason(100, 116) == ExitReason.TAKE_PROFIT
    assert rm.exit_reason(100, 100) is None
    assert rm.exit_reason(100, 110) is None


def test_stop_loss_checked_first():
    # both thresholds breached by the same close
    rm = RiskManager(stop_loss_pct=5, take_profit_pct=-10, max_position_pct=20)
    assert rm.exit_reason(100, 90) == ExitReason.STOP_LOSS


def test_disabled_exits():
    rm = RiskManager(stop_loss_pct=None, take_profit_pct=None, max_position_pct=2)
    assert rm.exit_reason(100, 1) is None
    assert rm.exit_reason(100, 1000) is None


def test_peak_equity_never_decreases():
    rm = RiskManager(stop_loss_pct=5, take_profit_pct=15, max_position_pct=20, max_drawdown_pct=10)
    for equity in [1000, 1100, 900, 1050]:
        rm.set_equity(equity)
    assert rm.peak_equity == 1100
    assert abs(rm.drawdown_pct - (1100 - 1050) / 1100 * 100) < 1e-9


def test_drawdown_not_enforced_by_default():
    rm = RiskManager(stop_loss_pct=5, take_profit_pct=15, max_position_pct=20, max_drawdown_pct=10)
    rm.set_equity(1000)
    rm.set_equity(500)
    assert rm.check_drawdown() is True
    assert rm.size_position(cash=500, price=10, commission=0).allowed is True


def test_drawdown_circuit_breaker():
    rm = RiskManager(
        stop_loss_pct=5, take_profit_pct=15, max_position_pct=20, max_drawdown_pct=10, enforce_max_drawdown=True
    )
    rm.set_equity(1000)
    rm.set_equity(950)
    assert rm.check_drawdown() is True
    rm.set_equity(900)
    assert rm.check_drawdown() is False
    r = rm.size_position(cash=900, price=10, commission=0)
    assert r.allowed is False
    assert r.reason == "max drawdown"


def test_from_settings():
    rm = RiskManager.from_settings(RiskManagement(3, 8, 15, 8), enforce_max_drawdown=True)
    assert (rm.stop_loss_pct, rm.take_profit_pct, rm.max_position_pct, rm.max_drawdown_pct) == (3, 8, 15, 8)
    assert rm.enforce_max_drawdown is True

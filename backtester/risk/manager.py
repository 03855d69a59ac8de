"""
Risk manager: position sizing, stop-loss / take-profit exits, drawdown tracking.
Position size = min(cash, cash * max_position_size%); shares are whole units.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Optional

from backtester.core.types import ExitReason, RiskManagement

logger = logging.getLogger("backtester.risk")


@dataclass
class RiskResult:
    """Result of an entry check: allowed or rejected + reason."""
    allowed: bool
    quantity: int = 0
    reason: str = ""


class RiskManager:
    """
    One instance per run. Tracks the equity high-water mark (never decreases),
    sizes entries, and decides price-based exits in stop-loss -> take-profit order.
    """

    def __init__(
        self,
        stop_loss_pct: Optional[float],
        take_profit_pct: Optional[float],
        max_position_pct: float,
        max_drawdown_pct: Optional[float] = None,
        enforce_max_drawdown: bool = False,
    ):
        self.stop_loss_pct = stop_loss_pct
        self.take_profit_pct = take_profit_pct
        self.max_position_pct = max_position_pct
        self.max_drawdown_pct = max_drawdown_pct
        self.enforce_max_drawdown = enforce_max_drawdown
        self._peak_equity: float = 0.0
        self._current_equity: float = 0.0

    @classmethod
    def from_settings(cls, rm: RiskManagement, enforce_max_drawdown: bool = False) -> "RiskManager":
        return cls(
            stop_loss_pct=rm.stop_loss,
            take_profit_pct=rm.take_profit,
            max_position_pct=rm.max_position_size,
            max_drawdown_pct=rm.max_drawdown,
            enforce_max_drawdown=enforce_max_drawdown,
        )

    @property
    def peak_equity(self) -> float:
        return self._peak_equity

    @property
    def drawdown_pct(self) -> float:
        """Decline of current equity from the high-water mark, in percent."""
        if self._peak_equity <= 0:
            return 0.0
        return (self._peak_equity - self._current_equity) / self._peak_equity * 100

    def set_equity(self, equity: float) -> None:
        """Update current equity; raises the high-water mark when exceeded."""
        self._current_equity = equity
        if equity > self._peak_equity:
            self._peak_equity = equity

    def check_drawdown(self) -> bool:
        """Return False if entries are blocked by the drawdown circuit breaker."""
        if not self.enforce_max_drawdown or self.max_drawdown_pct is None:
            return True
        dd_pct = self.drawdown_pct
        if dd_pct >= self.max_drawdown_pct:
            logger.debug("Max drawdown reached: %.2f%% >= %.2f%%", dd_pct, self.max_drawdown_pct)
            return False
        return True

    def position_budget(self, cash: float) -> float:
        return min(cash, cash * self.max_position_pct / 100.0)

    def size_position(self, cash: float, price: float, commission: float) -> RiskResult:
        """Whole-share quantity affordable from the budget after one commission."""
        if price <= 0:
            return RiskResult(allowed=False, reason="non-positive price")
        if not self.check_drawdown():
            return RiskResult(allowed=False, reason="max drawdown")
        qty = math.floor((self.position_budget(cash) - commission) / price)
        if qty <= 0:
            return RiskResult(allowed=False, reason="budget below one share")
        return RiskResult(allowed=True, quantity=qty)

    def exit_reason(self, entry_price: float, close: float) -> Optional[ExitReason]:
        """Stop-loss is checked before take-profit; None when neither is breached."""
        if self.stop_loss_pct is not None and close <= entry_price * (1 - self.stop_loss_pct / 100.0):
            return ExitReason.STOP_LOSS
        if self.take_profit_pct is not None and close >= entry_price * (1 + self.take_profit_pct / 100.0):
            return ExitReason.TAKE_PROFIT
        return None

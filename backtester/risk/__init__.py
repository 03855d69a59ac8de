"""Risk management: position sizing, stop-loss / take-profit, drawdown."""

from backtester.risk.manager import RiskManager, RiskResult

__all__ = ["RiskManager", "RiskResult"]

"""Error taxonomy. All errors are recoverable by the caller."""

from __future__ import annotations
from typing import Iterable, List


class BacktestError(Exception):
    """Base class for backtester failures."""


class InvalidConfigError(BacktestError, ValueError):
    """One or more config fields violate their bounds. Carries every violation."""

    def __init__(self, violations: Iterable[str]):
        self.violations: List[str] = list(violations)
        super().__init__("; ".join(self.violations) or "invalid configuration")


class UnknownStrategyError(InvalidConfigError):
    """Strategy id has no registry entry."""

    def __init__(self, strategy_id: str):
        self.strategy_id = strategy_id
        super().__init__([f"Unknown strategy: {strategy_id}"])


class NoDataError(BacktestError):
    """Date-filtered bar set is empty."""


class BacktestCancelledError(BacktestError):
    """Run was cancelled; no partial result exists."""

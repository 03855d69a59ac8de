"""Signal source interface shared by strategies and external signal feeds."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable, Mapping, Sequence

from backtester.core.types import Bar, ExitReason, RiskManagement, Signal

# lookup(bar, index) -> Signal, index is the bar's position in its symbol's history
SignalLookup = Callable[[Bar, int], Signal]


class SignalSource(ABC):
    """
    Produces one Signal per bar. bind() returns a per-run lookup so the source
    object holds no run state and can back several runs at once.
    """

    exit_reason: ExitReason = ExitReason.SIGNAL

    @property
    @abstractmethod
    def source_id(self) -> str:
        """Identifier reported in BacktestResult.strategy_id."""

    @property
    @abstractmethod
    def risk(self) -> RiskManagement:
        """Sizing and exit policy applied by the engine."""

    @abstractmethod
    def bind(self, history: Mapping[str, Sequence[Bar]]) -> SignalLookup:
        """Prepare for a run over `history` (symbol -> ascending bars)."""

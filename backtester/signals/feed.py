"""
External signal feed: pre-generated BUY/SELL records (e.g. model output)
replayed through the engine as Signals.
"""

from __future__ import annotations
import logging
from collections import defaultdict
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from backtester.core.types import Bar, ExitReason, FeedSignal, RiskManagement, Signal, SignalType
from backtester.signals.base import SignalLookup, SignalSource
from backtester.utils.timeutils import to_utc_naive

logger = logging.getLogger("backtester.signals.feed")

DEFAULT_CONFIDENCE_THRESHOLD = 0.75
# Original AI backtest sized each entry at riskPerTrade = 2% of cash, no price exits
DEFAULT_FEED_RISK = RiskManagement(stop_loss=None, take_profit=None, max_position_size=2.0, max_drawdown=50.0)

_KEY_ALIASES = {
    "targetPrice": "target_price",
    "currentPrice": "current_price",
    "reason": "reasoning",
}


def parse_feed_record(record: Mapping[str, Any]) -> FeedSignal:
    """Build a FeedSignal from a dict with snake_case or camelCase keys."""
    data = {_KEY_ALIASES.get(k, k): v for k, v in record.items()}
    action = SignalType(str(data["action"]).upper())
    if action == SignalType.HOLD:
        raise ValueError("feed records must be BUY or SELL")
    current = float(data.get("current_price", 0.0))
    return FeedSignal(
        symbol=str(data["symbol"]),
        action=action,
        confidence=float(data["confidence"]),
        target_price=float(data.get("target_price", current)),
        current_price=current,
        timestamp=to_utc_naive(data["timestamp"]),
        reasoning=str(data.get("reasoning", "")),
    )


class SignalFeed(SignalSource):
    """
    Records below confidence_threshold are dropped up front. Each remaining
    record is delivered on the first bar with the same symbol and calendar date;
    when several land on one bar the most confident (then latest) wins.
    """

    exit_reason = ExitReason.AI_SIGNAL

    def __init__(
        self,
        records: Iterable[FeedSignal],
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        risk: Optional[RiskManagement] = None,
        source_id: str = "ai-signals",
    ):
        self.confidence_threshold = confidence_threshold
        self._risk = risk or RiskManagement(**vars(DEFAULT_FEED_RISK))
        self._source_id = source_id
        all_records = list(records)
        self.records: List[FeedSignal] = sorted(
            (r for r in all_records if r.confidence >= confidence_threshold),
            key=lambda r: to_utc_naive(r.timestamp),
        )
        dropped = len(all_records) - len(self.records)
        if dropped:
            logger.debug("Dropped %d feed records below confidence %.2f", dropped, confidence_threshold)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]], **kwargs: Any) -> "SignalFeed":
        return cls([parse_feed_record(r) for r in records], **kwargs)

    @property
    def source_id(self) -> str:
        return self._source_id

    @property
    def risk(self) -> RiskManagement:
        return self._risk

    @staticmethod
    def to_signal(record: FeedSignal, bar: Bar) -> Signal:
        return Signal(
            type=record.action,
            strength=record.confidence,
            reason=record.reasoning or f"{record.action.value} signal for {record.symbol}",
            timestamp=bar.timestamp,
            price=bar.close,
            symbol=record.symbol,
        )

    def bind(self, history: Mapping[str, Sequence[Bar]]) -> SignalLookup:
        pending: Dict[Tuple[str, date], FeedSignal] = {}
        for record in self.records:
            key = (record.symbol, to_utc_naive(record.timestamp).date())
            current = pending.get(key)
            if current is None or record.confidence >= current.confidence:
                pending[key] = record

        # the run's first bar only seeds state and never receives a signal
        starts = [(to_utc_naive(bars[0].timestamp), symbol) for symbol, bars in history.items() if bars]
        first_symbol = min(starts)[1] if starts else None
        bar_keys = {
            (symbol, to_utc_naive(b.timestamp).date())
            for symbol, bars in history.items()
            for i, b in enumerate(bars)
            if not (symbol == first_symbol and i == 0)
        }
        unmatched = defaultdict(int)
        for symbol, _ in set(pending) - bar_keys:
            unmatched[symbol] += 1
        for symbol, count in unmatched.items():
            logger.info("%d feed signal(s) for %s have no deliverable bar and are ignored", count, symbol)

        def lookup(bar: Bar, index: int) -> Signal:
            # consumed on first delivery so intraday bars see it once
            record = pending.pop((bar.symbol, to_utc_naive(bar.timestamp).date()), None)
            if record is None:
                return Signal.hold(bar, "no signal")
            return self.to_signal(record, bar)

        return lookup

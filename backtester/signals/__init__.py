"""Signal sources: common interface and external signal feed."""

from backtester.signals.base import SignalLookup, SignalSource
from backtester.signals.feed import SignalFeed, parse_feed_record

__all__ = ["SignalFeed", "SignalLookup", "SignalSource", "parse_feed_record"]

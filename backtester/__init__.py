"""Strategy backtester: indicators, strategies, signal feeds, engine and analytics."""

__version__ = "0.1.0"

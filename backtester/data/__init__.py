"""Data collaborators: synthetic bars / signals and CSV loading."""

from backtester.data.csv_loader import load_bars_csv
from backtester.data.sample_data import generate_sample_bars, generate_sample_signals

__all__ = ["generate_sample_bars", "generate_sample_signals", "load_bars_csv"]

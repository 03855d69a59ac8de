#!/usr/bin/env python3
"""
Backtester CLI entry point: run | signals | strategies
Usage:
  python main.py run [--config config.yaml]
  python main.py signals [--config config.yaml]
  python main.py strategies
"""

from backtester.cli import main

if __name__ == "__main__":
    raise SystemExit(main())

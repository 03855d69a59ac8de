"""
Backtest engine: bar-by-bar long-only simulation with commission and slippage.

One loop serves strategies and external signal feeds alike; positions are
keyed by symbol so a merged multi-symbol series works the same way as a
single-symbol one. A run owns all of its state, so independent runs may
execute concurrently.
"""

from __future__ import annotations
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Generator, Iterable, List, Optional

from backtester.analytics.metrics import PerformanceMetrics, compute_metrics
from backtester.core.errors import BacktestCancelledError, InvalidConfigError, NoDataError
from backtester.core.types import (
    BacktestConfig,
    Bar,
    EquityPoint,
    ExitReason,
    Position,
    SignalType,
    Trade,
)
from backtester.risk.manager import RiskManager
from backtester.signals.base import SignalSource
from backtester.strategies.registry import validate_backtest_config
from backtester.utils.timeutils import days_between, parse_date_range, to_utc_naive

logger = logging.getLogger("backtester.backtest")

# Signals at or below this strength are ignored
MIN_SIGNAL_STRENGTH = 0.5

ProgressCallback = Callable[[int, int], None]


@dataclass
class BacktestResult:
    """Backtest output: capital summary, trades, equity curve and metrics."""
    strategy_id: str
    start_date: str
    end_date: str
    initial_capital: float
    final_capital: float
    trades: List[Trade] = field(default_factory=list)
    equity_curve: List[EquityPoint] = field(default_factory=list)
    metrics: Optional[PerformanceMetrics] = None

    @property
    def total_return(self) -> float:
        return self.final_capital - self.initial_capital

    @property
    def total_return_pct(self) -> float:
        return self.total_return / self.initial_capital * 100.0

    def to_dict(self) -> dict:
        return {
            "strategy_id": self.strategy_id,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "initial_capital": self.initial_capital,
            "final_capital": self.final_capital,
            "metrics": self.metrics.to_dict() if self.metrics else None,
            "trades": [
                {
                    "symbol": t.symbol,
                    "side": t.side,
                    "entry_time": t.entry_time.isoformat(),
                    "exit_time": t.exit_time.isoformat(),
                    "entry_price": t.entry_price,
                    "exit_price": t.exit_price,
                    "quantity": t.quantity,
                    "pnl": t.pnl,
                    "pnl_pct": t.pnl_pct,
                    "duration_days": t.duration_days,
                    "exit_reason": t.exit_reason.value,
                    "fees": t.fees,
                }
                for t in self.trades
            ],
            "equity_curve": [
                {"time": p.time.isoformat(), "equity": p.equity, "drawdown_pct": p.drawdown_pct}
                for p in self.equity_curve
            ],
        }


@dataclass(frozen=True)
class StepSnapshot:
    """State right after the bar at `index` was processed."""
    index: int
    bar: Bar
    cash: float
    holdings_value: float
    equity_point: EquityPoint
    peak_equity: float
    open_positions: int


class _Simulation:
    """Mutable state of one run. Discarded on error or cancellation."""

    def __init__(self, source: SignalSource, config: BacktestConfig, enforce_max_drawdown: bool):
        self.config = config
        self.exit_reason = source.exit_reason
        self.risk = RiskManager.from_settings(source.risk, enforce_max_drawdown)
        self.cash = float(config.initial_capital)
        self.positions: Dict[str, Position] = {}
        self.last_close: Dict[str, float] = {}
        self.last_bar: Dict[str, Bar] = {}
        self.trades: List[Trade] = []
        self.equity_curve: List[EquityPoint] = []
        self.risk.set_equity(self.cash)

    @property
    def slip(self) -> float:
        return self.config.slippage_percent / 100.0

    def holdings_value(self) -> float:
        return sum(p.market_value(self.last_close[s]) for s, p in self.positions.items())

    def mark(self, bar: Bar) -> EquityPoint:
        self.last_close[bar.symbol] = bar.close
        self.last_bar[bar.symbol] = bar
        equity = self.cash + self.holdings_value()
        self.risk.set_equity(equity)
        point = EquityPoint(time=bar.timestamp, equity=equity, drawdown_pct=self.risk.drawdown_pct)
        self.equity_curve.append(point)
        return point

    def enter(self, bar: Bar) -> None:
        price = bar.close * (1 + self.slip)
        sizing = self.risk.size_position(self.cash, price, self.config.commission)
        if not sizing.allowed:
            logger.debug("%s %s entry skipped: %s", bar.timestamp, bar.symbol, sizing.reason)
            return
        qty = sizing.quantity
        self.cash -= qty * price + self.config.commission
        self.positions[bar.symbol] = Position(bar.symbol, qty, price, bar.timestamp)
        logger.debug("%s BUY %s qty=%d @ %.4f", bar.timestamp, bar.symbol, qty, price)

    def close(self, bar: Bar, reason: ExitReason) -> Trade:
        pos = self.positions.pop(bar.symbol)
        commission = self.config.commission
        exit_price = bar.close * (1 - self.slip)
        pnl = (exit_price - pos.entry_price) * pos.quantity - 2 * commission
        self.cash += pos.quantity * exit_price - commission
        trade = Trade(
            symbol=pos.symbol,
            entry_time=pos.entry_time,
            exit_time=bar.timestamp,
            entry_price=pos.entry_price,
            exit_price=exit_price,
            quantity=pos.quantity,
            pnl=pnl,
            pnl_pct=pnl / (pos.entry_price * pos.quantity) * 100.0,
            duration_days=days_between(pos.entry_time, bar.timestamp),
            exit_reason=reason,
            fees=2 * commission,
        )
        self.trades.append(trade)
        logger.debug("%s SELL %s qty=%d @ %.4f pnl=%.2f (%s)", bar.timestamp, pos.symbol, pos.quantity, exit_price, pnl, reason.value)
        return trade

    def step(self, bar: Bar, signal_type: SignalType, strength: float) -> None:
        position = self.positions.get(bar.symbol)
        if signal_type == SignalType.BUY and position is None and strength > MIN_SIGNAL_STRENGTH:
            self.enter(bar)
        elif signal_type == SignalType.SELL and position is not None and strength > MIN_SIGNAL_STRENGTH:
            self.close(bar, self.exit_reason)

        position = self.positions.get(bar.symbol)
        if position is not None:
            reason = self.risk.exit_reason(position.entry_price, bar.close)
            if reason is not None:
                self.close(bar, reason)

    def liquidate(self) -> None:
        for symbol in list(self.positions):
            self.close(self.last_bar[symbol], ExitReason.END_OF_TEST)


class BacktestEngine:
    """
    Replays bars through a SignalSource. Per bar i >= 1 (bar 0 only seeds):
    mark to market, enter on BUY, exit on SELL, then stop-loss / take-profit.
    Open positions are closed at the last bar with reason END_OF_TEST.
    """

    def __init__(
        self,
        source: SignalSource,
        config: BacktestConfig,
        enforce_max_drawdown: bool = False,
    ):
        errors = validate_backtest_config(config)
        if errors:
            raise InvalidConfigError(errors)
        self.source = source
        self.config = config
        self.enforce_max_drawdown = enforce_max_drawdown
        self._start, self._end = parse_date_range(config.start_date, config.end_date)
        self._bars: List[Bar] = []

    @property
    def bars(self) -> List[Bar]:
        return list(self._bars)

    def set_data(self, bars: Iterable[Bar]) -> None:
        """Keep bars inside [start_date, end_date], ascending by timestamp then symbol."""
        keyed = []
        for bar in bars:
            ts = to_utc_naive(bar.timestamp)
            if self._start <= ts <= self._end:
                keyed.append((ts, bar.symbol, bar))
        keyed.sort(key=lambda item: (item[0], item[1]))
        self._bars = [bar for _, _, bar in keyed]
        logger.debug("Loaded %d bars in [%s, %s]", len(self._bars), self.config.start_date, self.config.end_date)

    def simulate(self) -> Generator[StepSnapshot, None, BacktestResult]:
        """
        Generator over processed bars; its return value is the BacktestResult.
        Raises NoDataError immediately when no bars are loaded.
        """
        if not self._bars:
            raise NoDataError(
                f"No data available for backtesting between {self.config.start_date} and {self.config.end_date}"
            )
        return self._steps(list(self._bars))

    def _steps(self, bars: List[Bar]) -> Generator[StepSnapshot, None, BacktestResult]:
        history: Dict[str, List[Bar]] = {}
        indices: List[int] = []
        for bar in bars:
            series = history.setdefault(bar.symbol, [])
            indices.append(len(series))
            series.append(bar)
        lookup = self.source.bind(history)
        sim = _Simulation(self.source, self.config, self.enforce_max_drawdown)

        sim.last_close[bars[0].symbol] = bars[0].close
        sim.last_bar[bars[0].symbol] = bars[0]
        for i in range(1, len(bars)):
            bar = bars[i]
            signal = lookup(bar, indices[i])
            point = sim.mark(bar)
            sim.step(bar, signal.type, signal.strength)
            yield StepSnapshot(
                index=i,
                bar=bar,
                cash=sim.cash,
                holdings_value=sim.holdings_value(),
                equity_point=point,
                peak_equity=sim.risk.peak_equity,
                open_positions=len(sim.positions),
            )

        sim.liquidate()
        metrics = compute_metrics(sim.trades, sim.equity_curve, self.config.initial_capital, sim.cash)
        return BacktestResult(
            strategy_id=self.source.source_id,
            start_date=self.config.start_date,
            end_date=self.config.end_date,
            initial_capital=self.config.initial_capital,
            final_capital=sim.cash,
            trades=sim.trades,
            equity_curve=sim.equity_curve,
            metrics=metrics,
        )

    def run(
        self,
        progress: Optional[ProgressCallback] = None,
        progress_interval: int = 100,
        cancel_event: Optional[threading.Event] = None,
    ) -> BacktestResult:
        """
        Run to completion. progress(processed, total) is called every
        progress_interval bars and once at the end. Setting cancel_event aborts
        with BacktestCancelledError; no partial result is returned.
        """
        steps = self.simulate()
        total = len(self._bars) - 1
        processed = 0
        interval = max(1, progress_interval)
        started = datetime.now()
        while True:
            if cancel_event is not None and cancel_event.is_set():
                steps.close()
                logger.info("Backtest %s cancelled after %d/%d bars", self.source.source_id, processed, total)
                raise BacktestCancelledError(f"cancelled after {processed} of {total} bars")
            try:
                next(steps)
            except StopIteration as stop:
                result = stop.value
                break
            processed += 1
            if progress is not None and processed % interval == 0:
                progress(processed, total)
        if progress is not None and (total == 0 or total % interval):
            progress(total, total)

        m = result.metrics
        logger.info(
            "Backtest %s done in %.2fs: %d bars, %d trades, return %.2f%%, max drawdown %.2f%%",
            result.strategy_id,
            (datetime.now() - started).total_seconds(),
            total,
            m.total_trades,
            m.total_return_pct,
            m.max_drawdown_pct,
        )
        return result

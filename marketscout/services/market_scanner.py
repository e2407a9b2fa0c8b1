"""
Market Scanner - multi-timeframe buy-signal scan over the watch-list.

Walks every asset x timeframe sequentially, pauses after each provider
call to respect the provider's rate limit, and stores a signal for each
asset that qualifies on at least two timeframes. Only one scan pass may
run at a time.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from marketscout.core.config import settings
from marketscout.core.logger import Logger
from marketscout.core.rate_limiter import RateLimiter
from marketscout.core.timezone import utc_now
from marketscout.services.data_provider.base import BaseBarProvider
from marketscout.services.data_provider.polygon_provider import PolygonProvider
from marketscout.services.scanner import (
    AggregatedSignal,
    AssetConfig,
    ScanResult,
    SignalEvaluator,
    aggregate_signals,
)
from marketscout.services.signal_store import SignalStore, signal_store

logger = Logger("MarketScanner")

MSG_ALREADY_RUNNING = "Scan already in progress."
MSG_STARTED = "Scan started in background. Results will appear as they are found."


class ScanState(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"


@dataclass
class ScanAck:
    started: bool
    message: str


def load_watchlist() -> List[AssetConfig]:
    """Build the watch-list from settings.WATCHLIST."""
    return [AssetConfig(symbol, asset_type) for symbol, asset_type in settings.watchlist_pairs]


class MarketScanner:
    """Single-flight scan orchestrator."""

    def __init__(
        self,
        provider: Optional[BaseBarProvider] = None,
        evaluator: Optional[SignalEvaluator] = None,
        store: Optional[SignalStore] = None,
        assets: Optional[List[AssetConfig]] = None,
        timeframes: Optional[List[str]] = None,
        rate_limiter: Optional[RateLimiter] = None,
        bar_limit: Optional[int] = None,
    ):
        self.provider = provider or PolygonProvider()
        self.evaluator = evaluator or SignalEvaluator()
        self.store = store or signal_store
        self.assets = tuple(assets if assets is not None else load_watchlist())
        self.timeframes = tuple(timeframes or settings.timeframes_list)
        self.rate_limiter = rate_limiter or RateLimiter()
        self.bar_limit = bar_limit or settings.PROVIDER_BAR_LIMIT

        self.state = ScanState.IDLE
        self.is_running = False
        self._scan_task: Optional[asyncio.Task] = None
        self._scheduler_task: Optional[asyncio.Task] = None

        self.last_started_at: Optional[datetime] = None
        self.last_finished_at: Optional[datetime] = None
        self.last_signal_count = 0
        self.last_iterations = 0

    @property
    def is_scanning(self) -> bool:
        return self.state == ScanState.SCANNING

    def start(self) -> ScanAck:
        """Begin a background scan pass unless one is already running.

        The check and the state change happen with no await in between, so
        two callers on the same event loop can never both start a pass.
        """
        if self.state == ScanState.SCANNING:
            logger.warn("⚠️ Scan already in progress, rejecting duplicate request")
            return ScanAck(started=False, message=MSG_ALREADY_RUNNING)

        self.state = ScanState.SCANNING
        pass_coro = self._run_pass()
        try:
            self._scan_task = asyncio.create_task(pass_coro)
        except RuntimeError:
            # No running loop: the pass never starts, so its finally never runs
            pass_coro.close()
            self.state = ScanState.IDLE
            raise

        self.last_started_at = utc_now()
        return ScanAck(started=True, message=MSG_STARTED)

    async def wait(self):
        """Wait for the current pass, if any, to finish."""
        if self._scan_task is not None:
            await asyncio.gather(self._scan_task, return_exceptions=True)

    async def _run_pass(self):
        try:
            logger.info("🔍 Starting background market scan...")
            signals = await self.scan_all()
            self.last_signal_count = len(signals)
            logger.info(f"✅ Market scan completed: {len(signals)} signal(s)")
        except Exception as e:
            logger.error(f"❌ Scan failed with error: {e}", e)
        finally:
            self.state = ScanState.IDLE
            self.last_finished_at = utc_now()

    async def scan_all(self) -> List[AggregatedSignal]:
        """Scan every asset on every timeframe and store confirmed signals."""
        found: List[AggregatedSignal] = []
        self.last_iterations = 0

        for asset in self.assets:
            results: Dict[str, ScanResult] = {}

            for timeframe in self.timeframes:
                self.last_iterations += 1
                result = await self.scan_symbol(asset, timeframe)
                if result:
                    results[timeframe] = result

            signal = aggregate_signals(asset, results)
            if signal is None:
                continue

            logger.info(f"Found opportunity: {asset.symbol} ({', '.join(results)})")
            try:
                await self.store.save_signal(signal)
                found.append(signal)
            except Exception as e:
                logger.error(f"Failed to save signal for {asset.symbol}: {e}", e)

        return found

    async def scan_symbol(self, asset: AssetConfig, timeframe: str) -> Optional[ScanResult]:
        """Fetch and evaluate one asset/timeframe; failures yield None.

        The rate-limit pause follows every provider call, success or not.
        """
        logger.info(f"Scanning {asset.symbol} {timeframe}...")
        try:
            bars = await self.provider.fetch_bars(asset.symbol, timeframe, self.bar_limit)
            return self.evaluator.evaluate(bars, asset.type)
        except Exception as e:
            logger.error(f"Error scanning {asset.symbol} {timeframe}: {e}")
            return None
        finally:
            await self.rate_limiter.pause()

    def status(self) -> Dict:
        return {
            "state": self.state.value,
            "last_started_at": self.last_started_at,
            "last_finished_at": self.last_finished_at,
            "last_signal_count": self.last_signal_count,
            "assets": len(self.assets),
            "timeframes": list(self.timeframes),
        }

    async def start_scheduler(self, interval_minutes: int = None):
        """Start periodic scans; a non-positive interval disables them."""
        interval = settings.SCAN_INTERVAL_MINUTES if interval_minutes is None else interval_minutes
        if self.is_running or interval <= 0:
            return

        self.is_running = True
        self._scheduler_task = asyncio.create_task(self._scheduler_loop(interval * 60))
        logger.info(f"✅ Scan scheduler started (every {interval} min)")

    async def _scheduler_loop(self, interval_seconds: float):
        while self.is_running:
            await asyncio.sleep(interval_seconds)
            try:
                ack = self.start()
                logger.info(f"Scheduled scan: {ack.message}")
            except Exception as e:
                logger.error(f"Scheduler error: {e}")

    async def stop(self):
        """Stop the scheduler and any running pass."""
        self.is_running = False
        for task in (self._scheduler_task, self._scan_task):
            if task and not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        self.state = ScanState.IDLE
        await self.provider.shutdown()
        logger.info("Market Scanner stopped")


market_scanner = MarketScanner()

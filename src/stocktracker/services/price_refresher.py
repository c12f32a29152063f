"""Background loop that keeps held tickers warm in the price cache."""

import asyncio
import logging
from typing import Optional

from stocktracker.repositories.protocols import HoldingsRepository
from stocktracker.services.price_cache import PriceCache

logger = logging.getLogger(__name__)


class PriceRefresher:
    """
    Periodically refetches every held ticker into a PriceCache.

    Runs as one asyncio task, independent of request handling. A failed cycle
    is logged and the loop carries on. The stop signal is checked at every
    sleep and before every batch; a batch already in flight is allowed to
    finish.
    """

    def __init__(
        self,
        price_cache: PriceCache,
        holdings_repo: HoldingsRepository,
        interval_seconds: float,
        initial_delay_seconds: float = 0.0,
        enabled: bool = True,
    ):
        self._cache = price_cache
        self._holdings = holdings_repo
        self._interval = interval_seconds
        self._initial_delay = initial_delay_seconds
        self._enabled = enabled
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the loop on the running event loop. No-op if already running."""
        if not self._enabled:
            logger.info("Background price refresh disabled")
            return
        if self.is_running:
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(), name="price-refresher")

    async def stop(self) -> None:
        """Signal the loop to exit and wait for it."""
        if self._task is None:
            return
        self._stop_event.set()
        try:
            await self._task
        finally:
            self._task = None

    async def run_once(self) -> int:
        """Refresh every held ticker once. Returns how many prices were refreshed."""
        tickers = await self._discover()
        return await self._refresh(tickers)

    async def _discover(self) -> list[str]:
        return await asyncio.to_thread(self._holdings.list_all_tickers)

    async def _refresh(self, tickers: list[str]) -> int:
        if not tickers:
            logger.debug("No held tickers to refresh")
            return 0
        refreshed = await self._cache.refresh(tickers)
        failed = len(tickers) - len(refreshed)
        if failed:
            logger.warning("Refreshed %d of %d tickers (%d failed)", len(refreshed), len(tickers), failed)
        else:
            logger.info("Refreshed %d tickers", len(refreshed))
        return len(refreshed)

    async def _run(self) -> None:
        logger.info(
            "Price refresher started (initial delay %ss, interval %ss)",
            self._initial_delay,
            self._interval,
        )
        stopped = await self._sleep(self._initial_delay)
        while not stopped and not self._stop_event.is_set():
            try:
                tickers = await self._discover()
                # Ticker discovery can be slow; stop may have arrived meanwhile
                if self._stop_event.is_set():
                    logger.info("Stop requested, skipping refresh of %d tickers", len(tickers))
                    break
                await self._refresh(tickers)
            except Exception:
                logger.exception("Price refresh cycle failed")
            stopped = await self._sleep(self._interval)
        logger.info("Price refresher stopped")

    async def _sleep(self, seconds: float) -> bool:
        """Sleep up to seconds. Returns True if stop was requested meanwhile."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True

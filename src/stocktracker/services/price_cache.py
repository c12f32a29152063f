"""Time-bounded price cache in front of an upstream price fetcher."""

import asyncio
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Iterable, Optional

from stocktracker.core.ticker import distinct_tickers, normalize_ticker
from stocktracker.core.timezone import now_utc
from stocktracker.domain.models import PriceEntry
from stocktracker.providers.price_fetcher import PriceFetcher

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 15 * 60


class PriceCache:
    """
    Process-wide TTL cache mapping canonical ticker -> PriceEntry.

    Staleness is decided at read time: an expired entry stays in the store
    until overwritten but readers treat it as absent. Entries are never
    evicted.

    Concurrent fetches for the same ticker are coalesced: while a fetch is in
    flight every resolve/refresh that needs the ticker awaits that fetch
    instead of issuing its own.
    """

    def __init__(
        self,
        fetcher: PriceFetcher,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], datetime] = now_utc,
    ):
        """
        Args:
            fetcher: Upstream price source.
            ttl_seconds: How long an entry is served after it was written.
            clock: Source of "now" (aware UTC); injectable for tests.
        """
        self._fetcher = fetcher
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._entries: dict[str, PriceEntry] = {}
        self._inflight: dict[str, asyncio.Future] = {}

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> dict[str, PriceEntry]:
        """Snapshot of every stored entry, stale ones included."""
        return dict(self._entries)

    def get_cached(self, ticker: str) -> Optional[Decimal]:
        """Return the cached price if present and not expired. Never fetches."""
        entry = self._entries.get(normalize_ticker(ticker))
        if entry is not None and entry.is_fresh(self._clock(), self._ttl):
            return entry.price
        return None

    def get_cached_prices(self, tickers: Iterable[str]) -> dict[str, Decimal]:
        """Cache-only bulk read; absent and stale tickers are omitted."""
        result: dict[str, Decimal] = {}
        for ticker in distinct_tickers(tickers):
            cached = self.get_cached(ticker)
            if cached is not None:
                result[ticker] = cached
        return result

    def set_price(self, ticker: str, price: Decimal) -> None:
        """Overwrite the entry for ticker with (price, now). Last writer wins."""
        self._entries[normalize_ticker(ticker)] = PriceEntry(
            price=price,
            fetched_at=self._clock(),
        )

    async def resolve(self, tickers: Iterable[str]) -> dict[str, Decimal]:
        """
        Return prices for tickers, fetching only what the cache cannot serve.

        Missing tickers are fetched concurrently and this call waits for all
        of them. Tickers whose fetch fails are left out of the result; the
        next resolve that needs them tries again.
        """
        result: dict[str, Decimal] = {}
        to_fetch: list[str] = []

        for ticker in distinct_tickers(tickers):
            cached = self.get_cached(ticker)
            if cached is not None:
                result[ticker] = cached
            else:
                to_fetch.append(ticker)

        if to_fetch:
            logger.debug("Fetching %d uncached tickers: %s", len(to_fetch), to_fetch)
            result.update(await self._fetch_many(to_fetch))

        return result

    async def refresh(self, tickers: Iterable[str]) -> dict[str, Decimal]:
        """Fetch every ticker regardless of cache state; return what succeeded."""
        canonical = distinct_tickers(tickers)
        if not canonical:
            return {}
        return await self._fetch_many(canonical)

    async def _fetch_many(self, tickers: list[str]) -> dict[str, Decimal]:
        prices = await asyncio.gather(*(self._fetch_one(t) for t in tickers))
        return {
            ticker: price
            for ticker, price in zip(tickers, prices)
            if price is not None
        }

    async def _fetch_one(self, ticker: str) -> Optional[Decimal]:
        pending = self._inflight.get(ticker)
        if pending is None:
            pending = asyncio.ensure_future(self._fetch_and_store(ticker))
            self._inflight[ticker] = pending
            pending.add_done_callback(lambda done, key=ticker: self._forget(key, done))
        # A cancelled waiter must not cancel the fetch other callers share
        return await asyncio.shield(pending)

    def _forget(self, ticker: str, done: asyncio.Future) -> None:
        if self._inflight.get(ticker) is done:
            del self._inflight[ticker]

    async def _fetch_and_store(self, ticker: str) -> Optional[Decimal]:
        try:
            price = await self._fetcher.fetch_latest(ticker)
        except Exception:
            logger.warning("Price fetch for %s raised", ticker, exc_info=True)
            return None
        if price is None:
            logger.debug("No price available for %s", ticker)
            return None
        self.set_price(ticker, price)
        return price

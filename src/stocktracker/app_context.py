"""Application context owning the process-wide pricing components.

Constructed once at process start. The price cache and its refresh loop live
here rather than in module globals, so tests can build isolated instances.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from stocktracker.config.settings import Settings, get_settings
from stocktracker.core.timezone import now_utc
from stocktracker.providers import PriceFetcher, StubPriceFetcher, YahooPriceFetcher
from stocktracker.repositories.protocols import HoldingsRepository
from stocktracker.repositories.sqlalchemy import SqlAlchemyHoldingsRepository
from stocktracker.repositories.sqlalchemy.database import get_session_factory
from stocktracker.services import (
    CgtEngine,
    PortfolioService,
    PriceCache,
    PriceRefresher,
    ValuationEngine,
)

logger = logging.getLogger(__name__)


class AppContext:
    """
    Owns the fetcher, price cache, refresher and holdings repository and
    wires them into the service layer.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        fetcher: Optional[PriceFetcher] = None,
        holdings_repo: Optional[HoldingsRepository] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        """
        Args:
            settings: Configuration. Uses global settings if not provided.
            fetcher: Price source. Built from settings.price_provider if None.
            holdings_repo: Holdings store. SQLAlchemy-backed if None.
            clock: Source of "now" shared by the cache and CGT engine.
        """
        self._settings = settings or get_settings()
        self._fetcher = fetcher
        self._holdings_repo = holdings_repo
        self._clock = clock

        # Service instances (lazy initialized)
        self._price_cache: Optional[PriceCache] = None
        self._refresher: Optional[PriceRefresher] = None
        self._portfolio: Optional[PortfolioService] = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def fetcher(self) -> PriceFetcher:
        """Get the price fetcher, creating it from settings if not provided."""
        if self._fetcher is None:
            if self._settings.price_provider == "stub":
                self._fetcher = StubPriceFetcher()
            else:
                self._fetcher = YahooPriceFetcher(
                    symbol_suffix=self._settings.price_symbol_suffix,
                    timeout_seconds=self._settings.price_fetch_timeout_seconds,
                )
            logger.info("Using %s price fetcher", type(self._fetcher).__name__)
        return self._fetcher

    @property
    def holdings_repo(self) -> HoldingsRepository:
        if self._holdings_repo is None:
            self._holdings_repo = SqlAlchemyHoldingsRepository(get_session_factory())
        return self._holdings_repo

    @property
    def price_cache(self) -> PriceCache:
        if self._price_cache is None:
            self._price_cache = PriceCache(
                fetcher=self.fetcher,
                ttl_seconds=self._settings.price_cache_ttl_seconds,
                clock=self._clock,
            )
        return self._price_cache

    @property
    def refresher(self) -> PriceRefresher:
        if self._refresher is None:
            self._refresher = PriceRefresher(
                price_cache=self.price_cache,
                holdings_repo=self.holdings_repo,
                interval_seconds=self._settings.price_refresh_interval_seconds,
                initial_delay_seconds=self._settings.price_refresh_initial_delay_seconds,
                enabled=self._settings.price_refresh_enabled,
            )
        return self._refresher

    @property
    def portfolio(self) -> PortfolioService:
        if self._portfolio is None:
            self._portfolio = PortfolioService(
                holdings_repo=self.holdings_repo,
                price_cache=self.price_cache,
                valuation_engine=ValuationEngine(),
                cgt_engine=CgtEngine(clock=self._clock),
            )
        return self._portfolio

    def start_background(self) -> None:
        """Start the refresh loop on the running event loop."""
        self.refresher.start()

    async def close(self) -> None:
        """Stop the refresh loop, letting an in-flight batch finish."""
        if self._refresher is not None:
            await self._refresher.stop()

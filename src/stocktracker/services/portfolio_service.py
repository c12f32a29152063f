"""Portfolio service: request-path orchestration of holdings, prices and engines."""

import asyncio
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from stocktracker.domain.models import HoldingSnapshot
from stocktracker.domain.views import CgtReport, PricedHolding, ValuationResult
from stocktracker.repositories.protocols import HoldingsRepository
from stocktracker.services.cgt_engine import CgtEngine
from stocktracker.services.price_cache import PriceCache
from stocktracker.services.valuation_engine import ValuationEngine

logger = logging.getLogger(__name__)


class PortfolioService:
    """
    Loads an owner's holdings, resolves prices through the cache and hands the
    snapshot to the valuation and CGT engines.
    """

    def __init__(
        self,
        holdings_repo: HoldingsRepository,
        price_cache: PriceCache,
        valuation_engine: Optional[ValuationEngine] = None,
        cgt_engine: Optional[CgtEngine] = None,
    ):
        self._holdings = holdings_repo
        self._prices = price_cache
        self._valuation = valuation_engine or ValuationEngine()
        self._cgt = cgt_engine or CgtEngine()

    async def get_summary(self, owner_id: str) -> ValuationResult:
        """Portfolio totals and per-holding breakdown for an owner."""
        holdings = await self._load(owner_id)
        if not holdings:
            return ValuationResult()

        prices = await self._prices.resolve(h.ticker for h in holdings)
        return self._valuation.summarize(holdings, prices)

    async def get_cgt_report(
        self,
        owner_id: str,
        as_of: Optional[datetime] = None,
    ) -> CgtReport:
        """CGT exposure for an owner's holdings at as_of (default now)."""
        holdings = await self._load(owner_id)
        if not holdings:
            return CgtReport()

        prices = await self._prices.resolve(h.ticker for h in holdings)
        priced = [
            PricedHolding(holding=h, current_price=self._valuation.current_price(h, prices))
            for h in holdings
        ]
        return self._cgt.calculate(priced, as_of=as_of)

    async def refresh_prices(self, owner_id: str) -> dict[str, Decimal]:
        """Force a refetch of every ticker the owner holds."""
        holdings = await self._load(owner_id)
        refreshed = await self._prices.refresh(h.ticker for h in holdings)
        logger.info("Manual refresh for %s updated %d tickers", owner_id, len(refreshed))
        return refreshed

    async def _load(self, owner_id: str) -> list[HoldingSnapshot]:
        return await asyncio.to_thread(self._holdings.list_by_owner, owner_id)

"""Service layer - pricing, valuation and tax calculation."""

from stocktracker.services.price_cache import PriceCache
from stocktracker.services.price_refresher import PriceRefresher
from stocktracker.services.valuation_engine import ValuationEngine, unknown_price_fallback
from stocktracker.services.cgt_engine import CgtEngine
from stocktracker.services.portfolio_service import PortfolioService

__all__ = [
    "PriceCache",
    "PriceRefresher",
    "ValuationEngine",
    "unknown_price_fallback",
    "CgtEngine",
    "PortfolioService",
]

"""
Yahoo Finance price fetcher via yfinance.

The yfinance call blocks, so it runs in a worker thread with a timeout.
Degrades to None on timeout or any per-symbol failure.
"""

import asyncio
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT_SECONDS = 10.0


# Lazy import so tests can patch before import
def _get_yf():
    import yfinance as yf
    return yf


def _to_price(value: Any) -> Optional[Decimal]:
    """Convert an upstream numeric field to a positive finite Decimal, else None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not price.is_finite() or price <= 0:
        return None
    return price


def _fetch_price_impl(symbol: str) -> Optional[Decimal]:
    """Call yfinance for one symbol. No cache, no exception handling."""
    info = _get_yf().Ticker(symbol).info
    if not isinstance(info, dict):
        return None
    # currentPrice preferred, then regularMarketPrice
    price = _to_price(info.get("currentPrice"))
    if price is None:
        price = _to_price(info.get("regularMarketPrice"))
    return price


class YahooPriceFetcher:
    """Fetches latest prices from Yahoo Finance."""

    def __init__(
        self,
        symbol_suffix: str = "",
        timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
    ):
        """
        Args:
            symbol_suffix: Exchange suffix appended to bare tickers (".AX" for ASX).
            timeout_seconds: Upper bound on one upstream round trip.
        """
        self._suffix = symbol_suffix.strip().upper()
        self._timeout = timeout_seconds

    def upstream_symbol(self, ticker: str) -> str:
        """Map a canonical ticker to the symbol Yahoo expects."""
        symbol = ticker.strip().upper()
        if self._suffix and not symbol.endswith(self._suffix):
            symbol = f"{symbol}{self._suffix}"
        return symbol

    async def fetch_latest(self, ticker: str) -> Optional[Decimal]:
        symbol = self.upstream_symbol(ticker)
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(_fetch_price_impl, symbol),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Timed out fetching price for %s after %ss", symbol, self._timeout)
            return None
        except Exception as exc:
            logger.warning("Failed to fetch price for %s: %s", symbol, exc)
            return None

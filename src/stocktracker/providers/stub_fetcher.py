"""Stub price fetcher for offline/testing use."""

from decimal import Decimal
from typing import Optional


# Deterministic fake prices for common ASX symbols
_STUB_PRICES: dict[str, Decimal] = {
    "BHP": Decimal("45.20"),
    "CBA": Decimal("128.75"),
    "CSL": Decimal("290.10"),
    "NAB": Decimal("34.15"),
    "WBC": Decimal("27.60"),
    "ANZ": Decimal("28.40"),
    "WES": Decimal("68.90"),
    "WOW": Decimal("33.05"),
    "FMG": Decimal("19.85"),
    "VAS": Decimal("98.30"),
}


class StubPriceFetcher:
    """
    Stub fetcher with deterministic fake data for offline operation.

    Known symbols return fixed prices; unknown symbols return None, the same
    outcome as an upstream miss.
    """

    def __init__(self, prices: Optional[dict[str, Decimal]] = None):
        self._prices = dict(_STUB_PRICES if prices is None else prices)

    async def fetch_latest(self, ticker: str) -> Optional[Decimal]:
        """Return the stub price for a ticker (an optional .AX suffix is ignored)."""
        symbol = ticker.strip().upper()
        if symbol.endswith(".AX"):
            symbol = symbol[: -len(".AX")]
        return self._prices.get(symbol)

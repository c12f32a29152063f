"""Price fetcher protocol."""

from decimal import Decimal
from typing import Optional, Protocol


class PriceFetcher(Protocol):
    """
    Protocol for upstream price sources.

    One network round trip per call. Every failure (network error, missing
    field, non-success status, unknown ticker) collapses to None; callers
    draw no distinction between "not found" and "upstream unavailable".
    """

    async def fetch_latest(self, ticker: str) -> Optional[Decimal]:
        """Return the latest price for a canonical ticker, or None."""
        ...

"""Cached price entry."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal


@dataclass(frozen=True)
class PriceEntry:
    """
    A price observed for a ticker at a point in time.

    IMPORTANT: Never mutated; a newer fetch replaces the entry wholesale.
    """

    price: Decimal
    fetched_at: datetime

    def is_fresh(self, now: datetime, ttl: timedelta) -> bool:
        """True while now - fetched_at < ttl."""
        return now - self.fetched_at < ttl

"""Holdings repository protocol."""

from typing import Protocol

from stocktracker.domain.models import HoldingSnapshot


class HoldingsRepository(Protocol):
    """Read-only interface to the holdings store."""

    def list_by_owner(self, owner_id: str) -> list[HoldingSnapshot]:
        """List all holdings belonging to an owner."""
        ...

    def list_all_tickers(self) -> list[str]:
        """Distinct canonical tickers held across all owners."""
        ...

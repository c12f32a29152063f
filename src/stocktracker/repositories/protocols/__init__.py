"""Repository protocol definitions (interfaces)."""

from stocktracker.repositories.protocols.holdings_repo import HoldingsRepository

__all__ = [
    "HoldingsRepository",
]

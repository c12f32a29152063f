"""Repository layer - data access abstractions and implementations."""

from stocktracker.repositories.protocols import HoldingsRepository

__all__ = [
    "HoldingsRepository",
]

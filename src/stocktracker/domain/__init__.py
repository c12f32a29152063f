"""Domain layer - pure business models with no external dependencies."""

from stocktracker.domain.models import HoldingSnapshot, PriceEntry

__all__ = [
    "HoldingSnapshot",
    "PriceEntry",
]

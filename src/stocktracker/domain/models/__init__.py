"""Domain models package."""

from stocktracker.domain.models.holding import HoldingSnapshot, to_decimal
from stocktracker.domain.models.price import PriceEntry

__all__ = [
    "HoldingSnapshot",
    "PriceEntry",
    "to_decimal",
]

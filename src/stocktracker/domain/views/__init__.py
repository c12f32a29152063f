"""View models for service outputs."""

from stocktracker.domain.views.valuation import HoldingValuation, ValuationResult
from stocktracker.domain.views.cgt import PricedHolding, CgtHoldingView, CgtReport

__all__ = [
    "HoldingValuation",
    "ValuationResult",
    "PricedHolding",
    "CgtHoldingView",
    "CgtReport",
]

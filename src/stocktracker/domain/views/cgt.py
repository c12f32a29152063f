"""View models for the capital gains tax report."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import NamedTuple

from stocktracker.domain.models import HoldingSnapshot


class PricedHolding(NamedTuple):
    """A holding paired with the price it is valued at."""

    holding: HoldingSnapshot
    current_price: Decimal


@dataclass
class CgtHoldingView:
    """CGT position of a single holding."""

    holding_id: int
    ticker: str
    buy_date: datetime
    quantity: Decimal
    buy_price: Decimal
    current_price: Decimal
    brokerage: Decimal
    capital_gain: Decimal
    eligible_for_discount: bool
    discounted_gain: Decimal
    days_held: int
    cgt_days_remaining: int


@dataclass
class CgtReport:
    """Aggregate CGT figures across holdings."""

    total_gains: Decimal = field(default_factory=lambda: Decimal("0"))
    total_losses: Decimal = field(default_factory=lambda: Decimal("0"))
    net_gain: Decimal = field(default_factory=lambda: Decimal("0"))
    discounted_gain_total: Decimal = field(default_factory=lambda: Decimal("0"))
    holdings: list[CgtHoldingView] = field(default_factory=list)

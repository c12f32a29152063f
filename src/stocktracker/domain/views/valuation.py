"""View models for portfolio valuation output."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


@dataclass
class HoldingValuation:
    """Valuation breakdown for a single holding."""

    id: int
    ticker: str
    quantity: Decimal
    buy_price: Decimal
    current_price: Decimal
    buy_date: datetime
    brokerage: Decimal
    cost_basis: Decimal
    market_value: Decimal
    pnl: Decimal
    pnl_percent: Decimal
    allocation_percent: Decimal = field(default_factory=lambda: Decimal("0"))


@dataclass
class ValuationResult:
    """Portfolio totals plus per-holding breakdown."""

    total_value: Decimal = field(default_factory=lambda: Decimal("0"))
    total_cost: Decimal = field(default_factory=lambda: Decimal("0"))
    total_pnl: Decimal = field(default_factory=lambda: Decimal("0"))
    total_pnl_percent: Decimal = field(default_factory=lambda: Decimal("0"))
    holdings: list[HoldingValuation] = field(default_factory=list)

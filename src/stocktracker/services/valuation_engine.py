"""Portfolio valuation over a holdings snapshot and a price map."""

from decimal import Decimal
from typing import Callable, Iterable, Mapping

from stocktracker.domain.models import HoldingSnapshot
from stocktracker.domain.views import HoldingValuation, ValuationResult

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def unknown_price_fallback(holding: HoldingSnapshot) -> Decimal:
    """Price used when no current price is known: the holding's own buy price."""
    return holding.buy_price


def percent_of(part: Decimal, whole: Decimal) -> Decimal:
    """part / whole * 100, or 0 when whole is 0."""
    if whole == ZERO:
        return ZERO
    return part / whole * HUNDRED


class ValuationEngine:
    """
    Computes cost basis, market value, P&L and allocation per holding.

    Pure and stateless: safe to share across concurrent requests.
    A holding without a price is valued at the fallback price, which for the
    default policy means zero P&L rather than an error.
    """

    def __init__(
        self,
        fallback: Callable[[HoldingSnapshot], Decimal] = unknown_price_fallback,
    ):
        self._fallback = fallback

    def current_price(self, holding: HoldingSnapshot, prices: Mapping[str, Decimal]) -> Decimal:
        """Look up the holding's price, applying the fallback when missing."""
        price = prices.get(holding.ticker)
        if price is None:
            return self._fallback(holding)
        return price

    def summarize(
        self,
        holdings: Iterable[HoldingSnapshot],
        prices: Mapping[str, Decimal],
    ) -> ValuationResult:
        """
        Value a holdings snapshot.

        Totals are accumulated first; allocation needs the final total so it
        is assigned in a second pass.
        """
        prices = {key.strip().upper(): value for key, value in prices.items()}
        items: list[HoldingValuation] = []
        total_value = ZERO
        total_cost = ZERO

        for holding in holdings:
            current_price = self.current_price(holding, prices)
            cost_basis = holding.cost_basis
            market_value = current_price * holding.quantity
            pnl = market_value - cost_basis
            total_value += market_value
            total_cost += cost_basis

            items.append(
                HoldingValuation(
                    id=holding.id,
                    ticker=holding.ticker,
                    quantity=holding.quantity,
                    buy_price=holding.buy_price,
                    current_price=current_price,
                    buy_date=holding.buy_date,
                    brokerage=holding.brokerage,
                    cost_basis=cost_basis,
                    market_value=market_value,
                    pnl=pnl,
                    pnl_percent=percent_of(pnl, cost_basis),
                )
            )

        for item in items:
            item.allocation_percent = percent_of(item.market_value, total_value)

        total_pnl = total_value - total_cost
        return ValuationResult(
            total_value=total_value,
            total_cost=total_cost,
            total_pnl=total_pnl,
            total_pnl_percent=percent_of(total_pnl, total_cost),
            holdings=items,
        )

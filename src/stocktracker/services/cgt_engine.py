"""Australian capital gains tax calculation."""

from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional, Tuple, Union

from stocktracker.core.timezone import now_utc, to_utc
from stocktracker.domain.models import HoldingSnapshot, to_decimal
from stocktracker.domain.views import CgtHoldingView, CgtReport, PricedHolding

ZERO = Decimal("0")

# Assets held for more than this many days get the CGT discount
CGT_DISCOUNT_HOLDING_DAYS = 365
CGT_DISCOUNT_RATE = Decimal("0.5")


def is_discount_eligible(days_held: int) -> bool:
    """Strictly more than 365 days; exactly 365 is not eligible."""
    return days_held > CGT_DISCOUNT_HOLDING_DAYS


def discounted_gain(capital_gain: Decimal, eligible: bool) -> Decimal:
    """
    Taxable portion of a single holding's gain.

    Losses and break-even positions contribute 0; only gains are discounted.
    """
    if capital_gain <= ZERO:
        return ZERO
    if eligible:
        return capital_gain * CGT_DISCOUNT_RATE
    return capital_gain


class CgtEngine:
    """
    Builds a CGT report from holdings paired with their current prices.

    Losses offset the discounted gain pool dollar for dollar and the reported
    discounted total is floored at zero.
    """

    def __init__(self, clock: Callable[[], datetime] = now_utc):
        self._clock = clock

    def calculate(
        self,
        priced_holdings: Iterable[Union[PricedHolding, Tuple[HoldingSnapshot, Decimal]]],
        as_of: Optional[datetime] = None,
    ) -> CgtReport:
        """
        Calculate per-holding and aggregate CGT figures.

        Args:
            priced_holdings: (holding, current_price) pairs.
            as_of: Valuation moment for days held. Defaults to now (UTC).
        """
        as_of = to_utc(as_of) if as_of is not None else self._clock()
        items: list[CgtHoldingView] = []
        total_gains = ZERO
        total_losses = ZERO

        for holding, current_price in priced_holdings:
            current_price = to_decimal(current_price, "current_price")
            market_value = current_price * holding.quantity
            capital_gain = market_value - holding.cost_basis
            days_held = (as_of - holding.buy_date).days
            eligible = is_discount_eligible(days_held)

            if capital_gain > ZERO:
                total_gains += capital_gain
            else:
                total_losses += abs(capital_gain)

            items.append(
                CgtHoldingView(
                    holding_id=holding.id,
                    ticker=holding.ticker,
                    buy_date=holding.buy_date,
                    quantity=holding.quantity,
                    buy_price=holding.buy_price,
                    current_price=current_price,
                    brokerage=holding.brokerage,
                    capital_gain=capital_gain,
                    eligible_for_discount=eligible,
                    discounted_gain=discounted_gain(capital_gain, eligible),
                    days_held=days_held,
                    cgt_days_remaining=max(0, CGT_DISCOUNT_HOLDING_DAYS - days_held),
                )
            )

        gain_pool = sum(
            (item.discounted_gain for item in items if item.capital_gain > ZERO),
            ZERO,
        )
        return CgtReport(
            total_gains=total_gains,
            total_losses=total_losses,
            net_gain=total_gains - total_losses,
            discounted_gain_total=max(ZERO, gain_pool - total_losses),
            holdings=items,
        )

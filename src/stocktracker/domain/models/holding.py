"""Holding snapshot domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from stocktracker.core.exceptions import ValidationError
from stocktracker.core.ticker import normalize_ticker
from stocktracker.core.timezone import parse_datetime_utc


def to_decimal(value: Any, name: str) -> Decimal:
    """Convert a numeric input to Decimal without binary float drift."""
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            # str() first so 9.95 stays 9.95 rather than its float expansion
            result = Decimal(str(value))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"{name} is not a valid number: {value!r}") from exc
    if not result.is_finite():
        raise ValidationError(f"{name} must be finite, got {value!r}")
    return result


@dataclass(frozen=True)
class HoldingSnapshot:
    """
    Read-only view of one holding for a single evaluation.

    Supplied per call by the holdings store; the engines never mutate it.
    Ticker is canonicalized and buy_date normalized to aware UTC on construction.
    """

    id: int
    ticker: str
    buy_date: datetime
    quantity: Decimal
    buy_price: Decimal
    brokerage: Decimal = field(default_factory=lambda: Decimal("0"))

    def __post_init__(self) -> None:
        object.__setattr__(self, "ticker", normalize_ticker(self.ticker))
        object.__setattr__(self, "buy_date", parse_datetime_utc(self.buy_date))
        object.__setattr__(self, "quantity", to_decimal(self.quantity, "quantity"))
        object.__setattr__(self, "buy_price", to_decimal(self.buy_price, "buy_price"))
        object.__setattr__(self, "brokerage", to_decimal(self.brokerage, "brokerage"))

    @property
    def cost_basis(self) -> Decimal:
        """Purchase price times quantity plus brokerage."""
        return self.buy_price * self.quantity + self.brokerage

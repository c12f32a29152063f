"""Core utilities and shared functionality."""

from stocktracker.core.timezone import (
    now_utc,
    to_utc,
    parse_datetime_utc,
    UTC,
)
from stocktracker.core.exceptions import (
    AppError,
    ValidationError,
)
from stocktracker.core.ticker import normalize_ticker, distinct_tickers

__all__ = [
    "now_utc",
    "to_utc",
    "parse_datetime_utc",
    "UTC",
    "AppError",
    "ValidationError",
    "normalize_ticker",
    "distinct_tickers",
]

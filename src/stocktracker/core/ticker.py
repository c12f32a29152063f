"""Ticker canonicalization."""

from typing import Iterable, Optional

from stocktracker.core.exceptions import ValidationError


def normalize_ticker(ticker: Optional[str]) -> str:
    """Strip and uppercase a ticker. Raises ValidationError when empty."""
    canonical = (ticker or "").strip().upper()
    if not canonical:
        raise ValidationError("Ticker must not be empty")
    return canonical


def distinct_tickers(tickers: Iterable[str]) -> list[str]:
    """Canonicalize tickers and drop duplicates, keeping first-seen order."""
    seen: dict[str, None] = {}
    for ticker in tickers:
        seen.setdefault(normalize_ticker(ticker), None)
    return list(seen)

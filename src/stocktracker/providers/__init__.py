"""Price providers module."""

from stocktracker.providers.price_fetcher import PriceFetcher
from stocktracker.providers.stub_fetcher import StubPriceFetcher
from stocktracker.providers.yahoo_fetcher import YahooPriceFetcher

__all__ = [
    "PriceFetcher",
    "StubPriceFetcher",
    "YahooPriceFetcher",
]

"""Portfolio valuation, price caching and Australian CGT reporting."""

__version__ = "0.1.0"

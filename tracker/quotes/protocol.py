"""
Quote source protocol for abstracting market data providers.

FinnhubQuoteSource and YFinanceQuoteSource satisfy this interface. MockQuoteSource
provides canned quotes for tests.
"""

from typing import Protocol

from tracker.models import Quote


class QuoteSource(Protocol):
    """Protocol that any quote provider must satisfy."""

    name: str

    def fetch_quote(self, ticker: str) -> Quote | None:
        """Fetch the latest quote for a ticker. Returns None on any failure; never raises."""
        ...

"""
Mock quote source for testing. Returns canned quotes without network access.
"""

import time

from tracker.models import Quote


class MockQuoteSource:
    """Mock source that satisfies QuoteSource for testing."""

    name = 'mock'

    def __init__(self, prices: dict[str, float] | None = None,
                 previous_closes: dict[str, float] | None = None,
                 failing: set[str] | None = None):
        self._prices = prices if prices is not None else {'AAPL': 190.00, 'SPY': 605.50, 'TSLA': 250.00}
        self._previous_closes = previous_closes or {}
        self._failing = failing or set()
        self.requests: list[str] = []

    def fetch_quote(self, ticker: str) -> Quote | None:
        self.requests.append(ticker)
        if ticker in self._failing or ticker not in self._prices:
            return None
        price = self._prices[ticker]
        prev = self._previous_closes.get(ticker, price)
        return Quote(
            current=price,
            previous_close=prev,
            open=prev,
            high=max(price, prev),
            low=min(price, prev),
            change=price - prev,
            change_percent=((price - prev) / prev * 100) if prev else 0.0,
            timestamp=int(time.time()),
            last_fetched=int(time.time() * 1000),
            source=self.name,
        )

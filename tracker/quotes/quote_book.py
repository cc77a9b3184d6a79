"""
In-memory quote cache keyed by ticker.

Owned by the caller (Dash store, headless monitor) and passed explicitly to
the service.
Last write wins per ticker; manual quotes live here until a real fetch or
another manual entry replaces them.
"""

import logging
import math
import time
from typing import Callable

from tracker.config import QUOTE_REQUEST_DELAY_SECONDS
from tracker.models import Quote
from tracker.position import ValidationError
from tracker.quotes.protocol import QuoteSource

logger = logging.getLogger(__name__)


class QuoteBook:
    """Latest quote per ticker"""

    def __init__(self, delay_seconds: float = QUOTE_REQUEST_DELAY_SECONDS,
                 sleep: Callable[[float], None] = time.sleep):
        self._quotes: dict[str, Quote] = {}
        self.delay_seconds = delay_seconds
        self._sleep = sleep

    def get(self, ticker: str) -> Quote | None:
        return self._quotes.get(ticker)

    def all_quotes(self) -> dict[str, Quote]:
        """Shallow copy of the ticker -> Quote mapping."""
        return dict(self._quotes)

    def set(self, ticker: str, quote: Quote) -> None:
        self._quotes[ticker] = quote

    def clear(self) -> None:
        self._quotes.clear()

    def set_manual_quote(self, ticker: str, current_price) -> Quote:
        """
        Store a synthetic quote for a user-entered price.

        All OHLC fields equal the price and the change is zero.

        Raises:
            ValidationError: price is not a positive number.
        """
        try:
            price = float(current_price)
        except (TypeError, ValueError):
            raise ValidationError("Please enter a valid price.")
        if not math.isfinite(price) or price <= 0:
            raise ValidationError("Please enter a valid price.")

        now = time.time()
        quote = Quote(
            current=price,
            previous_close=price,
            open=price,
            high=price,
            low=price,
            change=0.0,
            change_percent=0.0,
            timestamp=int(now),
            last_fetched=int(now * 1000),
            source='manual',
        )
        self._quotes[ticker] = quote
        logger.info(f"Manual quote set for {ticker}: ${price:,.2f}")
        return quote

    def fetch_batch(self, tickers: list[str], source: QuoteSource) -> dict[str, Quote]:
        """
        Fetch quotes for unique tickers one at a time, pausing between requests.

        A failed ticker is skipped and simply missing from the result.

        Returns:
            ticker -> Quote for the tickers that were fetched successfully.
        """
        unique_tickers = list(dict.fromkeys(tickers))
        fetched: dict[str, Quote] = {}

        for i, ticker in enumerate(unique_tickers):
            if i > 0 and self.delay_seconds > 0:
                self._sleep(self.delay_seconds)

            quote = source.fetch_quote(ticker)
            if quote is not None:
                self._quotes[ticker] = quote
                fetched[ticker] = quote

        missing = len(unique_tickers) - len(fetched)
        if missing:
            logger.warning(f"Quote refresh via {source.name}: {missing} of {len(unique_tickers)} tickers failed")
        else:
            logger.info(f"Quote refresh via {source.name}: {len(fetched)} tickers updated")
        return fetched

    def to_dict(self) -> dict[str, dict]:
        return {ticker: quote.to_dict() for ticker, quote in self._quotes.items()}

    @classmethod
    def from_dict(cls, data: dict | None, **kwargs) -> 'QuoteBook':
        book = cls(**kwargs)
        for ticker, quote in (data or {}).items():
            book.set(ticker, Quote.from_dict(quote))
        return book

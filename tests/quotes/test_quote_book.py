"""Tests for tracker/quotes/quote_book.py — quote cache, manual quotes and batch fetch."""

import pytest

from tracker.position import ValidationError
from tracker.quotes.mock_source import MockQuoteSource
from tracker.quotes.quote_book import QuoteBook


class TestManualQuote:
    def test_synthesizes_flat_quote(self):
        book = QuoteBook()
        quote = book.set_manual_quote('AAPL', '187.25')
        assert quote.current == 187.25
        assert quote.previous_close == quote.open == quote.high == quote.low == 187.25
        assert quote.change == 0.0
        assert quote.change_percent == 0.0
        assert quote.source == 'manual'
        assert book.get('AAPL') is quote

    @pytest.mark.parametrize("price", [0, -5, 'abc', None, float('nan')])
    def test_rejects_invalid_price(self, price):
        book = QuoteBook()
        with pytest.raises(ValidationError, match="Please enter a valid price."):
            book.set_manual_quote('AAPL', price)
        assert book.get('AAPL') is None

    def test_overrides_fetched_quote(self):
        book = QuoteBook(delay_seconds=0)
        book.fetch_batch(['AAPL'], MockQuoteSource())
        book.set_manual_quote('AAPL', 10)
        assert book.get('AAPL').source == 'manual'


class TestFetchBatch:
    def test_dedupes_and_spaces_requests(self):
        sleeps = []
        book = QuoteBook(delay_seconds=0.12, sleep=sleeps.append)
        source = MockQuoteSource()
        fetched = book.fetch_batch(['AAPL', 'SPY', 'AAPL', 'TSLA'], source)
        assert source.requests == ['AAPL', 'SPY', 'TSLA']
        assert sleeps == [0.12, 0.12]
        assert set(fetched) == {'AAPL', 'SPY', 'TSLA'}

    def test_failure_does_not_abort_batch(self):
        book = QuoteBook(delay_seconds=0)
        source = MockQuoteSource(failing={'SPY'})
        fetched = book.fetch_batch(['AAPL', 'SPY', 'TSLA'], source)
        assert set(fetched) == {'AAPL', 'TSLA'}
        assert book.get('SPY') is None
        assert source.requests == ['AAPL', 'SPY', 'TSLA']

    def test_failed_refresh_keeps_previous_quote(self):
        book = QuoteBook(delay_seconds=0)
        book.set_manual_quote('SPY', 600)
        book.fetch_batch(['SPY'], MockQuoteSource(failing={'SPY'}))
        assert book.get('SPY').current == 600

    def test_latest_wins(self):
        book = QuoteBook(delay_seconds=0)
        book.fetch_batch(['AAPL'], MockQuoteSource(prices={'AAPL': 100.0}))
        book.fetch_batch(['AAPL'], MockQuoteSource(prices={'AAPL': 101.0}))
        assert book.get('AAPL').current == 101.0

    def test_empty_batch(self):
        sleeps = []
        book = QuoteBook(sleep=sleeps.append)
        assert book.fetch_batch([], MockQuoteSource()) == {}
        assert sleeps == []


class TestQuoteBookState:
    def test_all_quotes_is_a_copy(self):
        book = QuoteBook()
        book.set_manual_quote('AAPL', 100)
        quotes = book.all_quotes()
        quotes.clear()
        assert book.get('AAPL') is not None

    def test_clear(self):
        book = QuoteBook()
        book.set_manual_quote('AAPL', 100)
        book.clear()
        assert book.all_quotes() == {}

    def test_store_round_trip(self):
        book = QuoteBook(delay_seconds=0)
        book.fetch_batch(['AAPL', 'SPY'], MockQuoteSource(previous_closes={'AAPL': 180.0}))
        restored = QuoteBook.from_dict(book.to_dict())
        assert restored.all_quotes() == book.all_quotes()

    def test_from_empty_store(self):
        assert QuoteBook.from_dict(None).all_quotes() == {}

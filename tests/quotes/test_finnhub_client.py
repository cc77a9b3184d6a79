"""Tests for tracker/quotes/finnhub_client.py — Finnhub /quote client.

The HTTP session is mocked; no network access is needed.
"""

from unittest.mock import MagicMock

import pytest
import requests

from tracker.quotes.finnhub_client import FinnhubQuoteSource
from tracker.quotes.quote_book import QuoteBook


def _session(payload=None, ok=True, status_code=200, exc=None):
    session = MagicMock()
    if exc is not None:
        session.get.side_effect = exc
    else:
        response = MagicMock()
        response.ok = ok
        response.status_code = status_code
        response.json.return_value = payload if payload is not None else {}
        session.get.return_value = response
    return session


AAPL_PAYLOAD = {'c': 191.5, 'pc': 189.0, 'o': 189.5, 'h': 192.0, 'l': 188.8,
                'd': 2.5, 'dp': 1.3228, 't': 1760870000}


class TestFinnhubQuoteSource:
    def test_builds_quote(self):
        source = FinnhubQuoteSource('key123', session=_session(AAPL_PAYLOAD))
        quote = source.fetch_quote('AAPL')
        assert quote.current == 191.5
        assert quote.previous_close == 189.0
        assert quote.open == 189.5
        assert quote.high == 192.0
        assert quote.low == 188.8
        assert quote.change == 2.5
        assert quote.change_percent == pytest.approx(1.3228)
        assert quote.timestamp == 1760870000
        assert quote.last_fetched > 0
        assert quote.source == 'finnhub'

    def test_request_shape(self):
        session = _session(AAPL_PAYLOAD)
        FinnhubQuoteSource('key123', base_url='https://example.test/api/', session=session,
                           timeout=3).fetch_quote('AAPL')
        session.get.assert_called_once_with(
            'https://example.test/api/quote',
            params={'symbol': 'AAPL', 'token': 'key123'},
            timeout=3,
        )

    def test_all_zero_response_is_failure(self):
        """Unknown tickers come back as zeros rather than an HTTP error."""
        payload = {'c': 0, 'pc': 0, 'o': 0, 'h': 0, 'l': 0, 'd': None, 'dp': None, 't': 0}
        assert FinnhubQuoteSource('key', session=_session(payload)).fetch_quote('ZZZZ') is None

    def test_http_error(self):
        source = FinnhubQuoteSource('key', session=_session(ok=False, status_code=429))
        assert source.fetch_quote('AAPL') is None

    def test_network_error(self):
        source = FinnhubQuoteSource('key', session=_session(exc=requests.ConnectionError('down')))
        assert source.fetch_quote('AAPL') is None

    def test_bad_json(self):
        session = _session(AAPL_PAYLOAD)
        session.get.return_value.json.side_effect = ValueError('not json')
        assert FinnhubQuoteSource('key', session=session).fetch_quote('AAPL') is None

    @pytest.mark.parametrize("body", [None, [], 'error', 42])
    def test_non_object_body(self, body):
        session = _session(AAPL_PAYLOAD)
        session.get.return_value.json.return_value = body
        assert FinnhubQuoteSource('key', session=session).fetch_quote('AAPL') is None

    def test_non_object_body_does_not_abort_batch(self):
        session = _session(AAPL_PAYLOAD)
        ok_response = session.get.return_value
        null_response = MagicMock(ok=True, status_code=200)
        null_response.json.return_value = None
        session.get.side_effect = [null_response, ok_response]

        book = QuoteBook(delay_seconds=0)
        fetched = book.fetch_batch(['ZZZZ', 'AAPL'], FinnhubQuoteSource('key', session=session))

        assert list(fetched) == ['AAPL']

    def test_missing_key_skips_request(self):
        session = _session(AAPL_PAYLOAD)
        source = FinnhubQuoteSource('  ', session=session)
        assert source.is_configured is False
        assert source.fetch_quote('AAPL') is None
        session.get.assert_not_called()

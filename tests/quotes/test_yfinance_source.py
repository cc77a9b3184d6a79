"""Tests for tracker/quotes/yfinance_source.py — keyless quote source (yfinance mocked)."""

from unittest.mock import MagicMock, patch

import pytest

from tracker.quotes.yfinance_source import YFinanceQuoteSource


def _ticker(info):
    ticker = MagicMock()
    ticker.info = info
    return ticker


class TestYFinanceQuoteSource:
    def test_builds_quote(self):
        info = {'currentPrice': 105.0, 'previousClose': 100.0, 'open': 101.0,
                'dayHigh': 106.0, 'dayLow': 99.5, 'regularMarketTime': 1760870000}
        with patch('tracker.quotes.yfinance_source.yf.Ticker', return_value=_ticker(info)) as mock_ticker:
            quote = YFinanceQuoteSource().fetch_quote('AAPL')
        mock_ticker.assert_called_once_with('AAPL')
        assert quote.current == 105.0
        assert quote.previous_close == 100.0
        assert quote.change == pytest.approx(5.0)
        assert quote.change_percent == pytest.approx(5.0)
        assert quote.high == 106.0
        assert quote.low == 99.5
        assert quote.timestamp == 1760870000
        assert quote.source == 'yfinance'

    def test_regular_market_price_fallback(self):
        info = {'regularMarketPrice': 42.0}
        with patch('tracker.quotes.yfinance_source.yf.Ticker', return_value=_ticker(info)):
            quote = YFinanceQuoteSource().fetch_quote('XYZ')
        assert quote.current == 42.0
        assert quote.previous_close == 0.0
        assert quote.change == 0.0
        assert quote.open == 42.0

    def test_no_price(self):
        with patch('tracker.quotes.yfinance_source.yf.Ticker', return_value=_ticker({})):
            assert YFinanceQuoteSource().fetch_quote('NOPE') is None

    def test_exception_returns_none(self):
        with patch('tracker.quotes.yfinance_source.yf.Ticker', side_effect=RuntimeError('rate limited')):
            assert YFinanceQuoteSource().fetch_quote('AAPL') is None

"""
yfinance quote source — keyless fallback when no Finnhub key is configured.
Source: Yahoo Finance (15-min delayed, free, no auth required).
"""

import logging
import time

import yfinance as yf

from tracker.models import Quote

logger = logging.getLogger(__name__)


class YFinanceQuoteSource:
    """Builds quotes from Ticker.info snapshots."""

    name = 'yfinance'

    def fetch_quote(self, ticker: str) -> Quote | None:
        try:
            info = yf.Ticker(ticker).info or {}

            current = info.get('currentPrice') or info.get('regularMarketPrice')
            if not current:
                logger.warning(f"yfinance: no price available for {ticker}")
                return None

            current = float(current)
            previous_close = float(info.get('previousClose') or info.get('regularMarketPreviousClose') or 0)
            change = current - previous_close if previous_close else 0.0
            change_percent = (change / previous_close * 100) if previous_close else 0.0

            return Quote(
                current=current,
                previous_close=previous_close,
                open=float(info.get('open') or info.get('regularMarketOpen') or current),
                high=float(info.get('dayHigh') or info.get('regularMarketDayHigh') or current),
                low=float(info.get('dayLow') or info.get('regularMarketDayLow') or current),
                change=change,
                change_percent=change_percent,
                timestamp=int(info.get('regularMarketTime') or time.time()),
                last_fetched=int(time.time() * 1000),
                source=self.name,
            )

        except Exception as e:
            logger.warning(f"yfinance: failed to get quote for {ticker}: {e}")
            return None

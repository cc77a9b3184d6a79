"""
Finnhub quote client
Fetches real-time equity quotes over the Finnhub REST API (free tier, API key required)
"""

import logging
import time

import requests

from tracker.config import FINNHUB_BASE_URL, QUOTE_REQUEST_TIMEOUT_SECONDS
from tracker.models import Quote

logger = logging.getLogger(__name__)


class FinnhubQuoteSource:
    """Finnhub /quote endpoint client"""

    name = 'finnhub'

    def __init__(self, api_key: str, base_url: str = FINNHUB_BASE_URL,
                 session: requests.Session | None = None,
                 timeout: float = QUOTE_REQUEST_TIMEOUT_SECONDS):
        """
        Initialize Finnhub client

        Args:
            api_key: Finnhub API token; an empty key disables fetching
            base_url: API root (default: public Finnhub endpoint)
            session: Optional requests session (injected in tests)
            timeout: Per-request timeout in seconds
        """
        self.api_key = (api_key or '').strip()
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'Accept': 'application/json'})

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def fetch_quote(self, ticker: str) -> Quote | None:
        """
        Fetch a quote for one ticker.

        Returns:
            Quote, or None if no key is configured, the request fails, or the
            ticker is unknown (Finnhub answers unknown tickers with all zeros).
        """
        if not self.is_configured:
            return None

        try:
            response = self.session.get(
                f"{self.base_url}/quote",
                params={'symbol': ticker, 'token': self.api_key},
                timeout=self.timeout,
            )
            if not response.ok:
                raise RuntimeError(f"HTTP {response.status_code}")
            data = response.json()
            if not isinstance(data, dict):
                raise RuntimeError(f"Unexpected response body: {type(data).__name__}")

            if not data.get('c') and not data.get('pc'):
                raise RuntimeError(f"No data for ticker {ticker}")

            return Quote(
                current=float(data.get('c') or 0),
                previous_close=float(data.get('pc') or 0),
                open=float(data.get('o') or 0),
                high=float(data.get('h') or 0),
                low=float(data.get('l') or 0),
                change=float(data.get('d') or 0),
                change_percent=float(data.get('dp') or 0),
                timestamp=int(data.get('t') or 0),
                last_fetched=int(time.time() * 1000),
                source=self.name,
            )

        except (requests.RequestException, RuntimeError, ValueError) as e:
            logger.warning(f"Finnhub fetch failed for {ticker}: {e}")
            return None

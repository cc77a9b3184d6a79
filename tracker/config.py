"""
Centralized business constants for the options goal tracker.

All hardcoded values that drive valuation, projection and goal logic are defined here.
Import from this module instead of hardcoding values in business logic.
"""

import os


# --- Contracts ---

# Every option contract controls 100 shares of the underlying
CONTRACT_MULTIPLIER = 100


# --- Time Decay Heuristic ---

# Time value decays with sqrt(days / baseline); at or beyond the baseline no decay is applied
DECAY_BASELINE_DAYS = 30


# --- Projection Curve ---

# Number of intervals between the lower and upper bound (51 samples including both ends)
PROJECTION_STEPS = 50

# Lower bound = min(current, strike) * pad, upper bound = max(current, strike, breakeven) * pad
PROJECTION_LOWER_PAD = 0.90
PROJECTION_UPPER_PAD = 1.30

# Price slider on the position card is a little wider than the chart
SLIDER_LOWER_PAD = 0.85
SLIDER_UPPER_PAD = 1.35


# --- Position Cards ---

# Positions with this many days or fewer left are flagged as expiring soon
EXPIRING_SOON_DTE = 7


# --- Goal Planning ---

# Typical order size used to turn "contracts needed" into "trades needed"
CONTRACTS_PER_TRADE = 5


# --- Quote Provider ---

FINNHUB_BASE_URL = 'https://finnhub.io/api/v1'

# Free tier allows 60 requests/minute; wait between sequential requests in a batch
QUOTE_REQUEST_DELAY_SECONDS = 0.12

QUOTE_REQUEST_TIMEOUT_SECONDS = 10

# Auto-refresh cadence while the market is open
AUTO_REFRESH_INTERVAL_MS = 60_000


# --- Market Hours ---

MARKET_TIMEZONE = 'America/New_York'
MARKET_OPEN_MINUTES = 9 * 60 + 30   # 9:30 AM ET
MARKET_CLOSE_MINUTES = 16 * 60      # 4:00 PM ET


# --- Persistence ---

SCHEMA_VERSION = '1'
STORAGE_PREFIX = 'eclipse_eq_'
DEFAULT_DB_PATH = os.path.join('data', 'tracker.db')


def get_db_path() -> str:
    """Return the SQLite path, overridable with TRACKER_DB_PATH."""
    return os.getenv('TRACKER_DB_PATH', DEFAULT_DB_PATH)


def get_env_api_key() -> str:
    """Return the Finnhub API key from the environment, or '' if unset."""
    return os.getenv('FINNHUB_API_KEY', '').strip()

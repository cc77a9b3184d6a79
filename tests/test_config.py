"""Tests for tracker/config.py — business constants and environment settings."""

import os

import pytest
from tracker.config import (
    CONTRACT_MULTIPLIER, DECAY_BASELINE_DAYS,
    PROJECTION_STEPS, PROJECTION_LOWER_PAD, PROJECTION_UPPER_PAD,
    SLIDER_LOWER_PAD, SLIDER_UPPER_PAD,
    EXPIRING_SOON_DTE, CONTRACTS_PER_TRADE,
    QUOTE_REQUEST_DELAY_SECONDS, AUTO_REFRESH_INTERVAL_MS,
    MARKET_OPEN_MINUTES, MARKET_CLOSE_MINUTES,
    SCHEMA_VERSION, STORAGE_PREFIX, DEFAULT_DB_PATH,
    get_db_path, get_env_api_key,
)


class TestConstants:
    """Verify business constants have expected values."""

    def test_contract_multiplier(self):
        assert CONTRACT_MULTIPLIER == 100

    def test_decay_baseline(self):
        assert DECAY_BASELINE_DAYS == 30

    def test_projection_params(self):
        assert PROJECTION_STEPS == 50
        assert PROJECTION_LOWER_PAD < 1 < PROJECTION_UPPER_PAD

    def test_slider_wider_than_chart(self):
        assert SLIDER_LOWER_PAD < PROJECTION_LOWER_PAD
        assert SLIDER_UPPER_PAD > PROJECTION_UPPER_PAD

    def test_planning_params(self):
        assert EXPIRING_SOON_DTE == 7
        assert CONTRACTS_PER_TRADE == 5

    def test_rate_limit_delay(self):
        """Sequential batch requests are spaced 120ms apart."""
        assert QUOTE_REQUEST_DELAY_SECONDS == pytest.approx(0.12)
        assert AUTO_REFRESH_INTERVAL_MS == 60_000

    def test_market_session(self):
        assert MARKET_OPEN_MINUTES == 570
        assert MARKET_CLOSE_MINUTES == 960

    def test_storage(self):
        assert SCHEMA_VERSION == '1'
        assert STORAGE_PREFIX == 'eclipse_eq_'


class TestEnvironment:
    def test_db_path_default(self, monkeypatch):
        monkeypatch.delenv('TRACKER_DB_PATH', raising=False)
        assert get_db_path() == DEFAULT_DB_PATH
        assert DEFAULT_DB_PATH == os.path.join('data', 'tracker.db')

    def test_db_path_override(self, monkeypatch):
        monkeypatch.setenv('TRACKER_DB_PATH', '/tmp/other.db')
        assert get_db_path() == '/tmp/other.db'

    def test_api_key_stripped(self, monkeypatch):
        monkeypatch.setenv('FINNHUB_API_KEY', '  abc123 ')
        assert get_env_api_key() == 'abc123'

    def test_api_key_unset(self, monkeypatch):
        monkeypatch.delenv('FINNHUB_API_KEY', raising=False)
        assert get_env_api_key() == ''

"""
Tracker service — owns persistence and the choice of quote source.

All state changes go through here so that a lifecycle transition and the
matching saves happen together. The quote book is owned by the caller and
passed in. Dash pages obtain the instance with get_service(); tests install
their own with set_service().
"""

import logging
from datetime import datetime

from tracker.config import get_db_path, get_env_api_key
from tracker.database.models import TrackerStore
from tracker.market_hours import is_market_open
from tracker.models import ClosedPosition, Goal, PortfolioMetrics, Position, Quote
from tracker.portfolio import calculate_portfolio_metrics
from tracker.position import (
    close_position,
    create_goal,
    create_position,
    expire_position,
    parse_exit_premium,
    remove_position,
)
from tracker.quotes.finnhub_client import FinnhubQuoteSource
from tracker.quotes.protocol import QuoteSource
from tracker.quotes.quote_book import QuoteBook
from tracker.quotes.yfinance_source import YFinanceQuoteSource

logger = logging.getLogger(__name__)


class TrackerService:
    """Orchestrates positions, goals and quotes for a single user"""

    def __init__(self, store: TrackerStore, quote_source: QuoteSource | None = None):
        """
        Args:
            store: Persistence collaborator
            quote_source: Fixed quote source; when None it is chosen from the API key
        """
        self.store = store
        self._quote_source = quote_source

        self.positions: list[Position] = []
        self.closed_positions: list[ClosedPosition] = []
        self.goals: list[Goal] = []
        self.reload()

    def reload(self) -> None:
        """Re-read every collection from the store (picks up writes from other processes)."""
        self.positions = self.store.load_positions()
        self.closed_positions = self.store.load_closed_positions()
        self.goals = self.store.load_goals()
        logger.debug(f"Loaded {len(self.positions)} open, {len(self.closed_positions)} closed positions, "
                     f"{len(self.goals)} goals")

    # ------------------------------------------------------------------
    # Quotes
    # ------------------------------------------------------------------

    @property
    def api_key(self) -> str:
        return self.store.load_api_key() or get_env_api_key()

    def quote_source(self) -> QuoteSource:
        if self._quote_source is not None:
            return self._quote_source
        if self.api_key:
            return FinnhubQuoteSource(self.api_key)
        return YFinanceQuoteSource()

    def unique_tickers(self) -> list[str]:
        return list(dict.fromkeys(p.ticker for p in self.positions))

    def refresh_quotes(self, quote_book: QuoteBook, tickers: list[str] | None = None) -> dict[str, Quote]:
        """Fetch quotes into quote_book for the given tickers (default: every open position's ticker)."""
        tickers = self.unique_tickers() if tickers is None else tickers
        if not tickers:
            return {}
        return quote_book.fetch_batch(tickers, self.quote_source())

    def auto_refresh(self, quote_book: QuoteBook, now: datetime | None = None) -> dict[str, Quote]:
        """Periodic refresh: only while the market is open."""
        if not is_market_open(now):
            return {}
        return self.refresh_quotes(quote_book)

    # ------------------------------------------------------------------
    # Positions
    # ------------------------------------------------------------------

    def find_position(self, position_id: str) -> Position | None:
        return next((p for p in self.positions if p.id == position_id), None)

    def add_position(self, **fields) -> Position:
        """Validate and store a new position. Raises ValidationError."""
        position = create_position(**fields)
        self.positions = self.positions + [position]
        self.store.save_positions(self.positions)
        return position

    def delete_position(self, position_id: str) -> bool:
        if self.find_position(position_id) is None:
            return False
        self.positions = remove_position(self.positions, position_id)
        self.store.save_positions(self.positions)
        logger.info(f"Deleted position {position_id}")
        return True

    def close_position(self, position_id: str, raw_exit_premium) -> ClosedPosition | None:
        """Sell to close. Raises ValidationError for an invalid exit premium."""
        position = self.find_position(position_id)
        if position is None:
            return None
        exit_premium = parse_exit_premium(raw_exit_premium)
        closed = close_position(position, exit_premium)
        self._archive(position, closed)
        return closed

    def expire_position(self, position_id: str) -> ClosedPosition | None:
        position = self.find_position(position_id)
        if position is None:
            return None
        expired = expire_position(position)
        self._archive(position, expired)
        return expired

    def _archive(self, position: Position, closed: ClosedPosition) -> None:
        self.positions = remove_position(self.positions, position.id)
        self.closed_positions = self.closed_positions + [closed]
        self.store.save_positions(self.positions)
        self.store.save_closed_positions(self.closed_positions)
        logger.info(f"{closed.status.value} {position.ticker} ({position.id}): "
                    f"realized P&L ${closed.realized_pnl:,.2f}")

    # ------------------------------------------------------------------
    # Goals
    # ------------------------------------------------------------------

    def add_goal(self, name, target_amount, target_date) -> Goal:
        """Validate and store a new goal. Raises ValidationError."""
        goal = create_goal(name, target_amount, target_date)
        self.goals = self.goals + [goal]
        self.store.save_goals(self.goals)
        logger.info(f"Added goal {goal.id}: {goal.name}")
        return goal

    def delete_goal(self, goal_id: str) -> bool:
        remaining = [g for g in self.goals if g.id != goal_id]
        if len(remaining) == len(self.goals):
            return False
        self.goals = remaining
        self.store.save_goals(self.goals)
        logger.info(f"Deleted goal {goal_id}")
        return True

    # ------------------------------------------------------------------
    # Aggregates & settings
    # ------------------------------------------------------------------

    def metrics(self, quotes: dict[str, Quote]) -> PortfolioMetrics:
        return calculate_portfolio_metrics(self.positions, self.closed_positions, quotes)

    def save_api_key(self, key: str) -> bool:
        return self.store.save_api_key(key)


_service: TrackerService | None = None


def get_service() -> TrackerService:
    """Return the process-wide service, creating it from TRACKER_DB_PATH on first use."""
    global _service
    if _service is None:
        _service = TrackerService(TrackerStore(get_db_path()))
    return _service


def set_service(service: TrackerService | None) -> None:
    global _service
    _service = service

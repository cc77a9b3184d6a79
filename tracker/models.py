"""
Domain models for the options goal tracker.

Dataclasses replacing ad-hoc dicts for typed, self-documenting data flow.
Records are frozen: lifecycle transitions build new records instead of mutating.
"""

from dataclasses import dataclass, asdict
from datetime import date, datetime
from enum import Enum
import math


class OptionType(str, Enum):
    CALL = 'CALL'
    PUT = 'PUT'


class PositionStatus(str, Enum):
    OPEN = 'OPEN'
    CLOSED = 'CLOSED'
    EXPIRED = 'EXPIRED'


def to_date(value) -> date:
    """Coerce a date, datetime or ISO 'YYYY-MM-DD' string to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def _date_or_none(value) -> date | None:
    return to_date(value) if value else None


@dataclass(frozen=True)
class Position:
    """An open long option position."""
    id: str
    ticker: str                  # normalized uppercase, e.g. 'AAPL'
    option_type: OptionType
    strike_price: float
    premium_paid: float          # per share
    contracts: int               # each contract = 100 shares
    expiration_date: date
    entry_date: date
    target_price: float | None = None
    notes: str = ''
    status: PositionStatus = PositionStatus.OPEN

    def to_dict(self) -> dict:
        data = asdict(self)
        data['option_type'] = self.option_type.value
        data['status'] = self.status.value
        data['expiration_date'] = self.expiration_date.isoformat()
        data['entry_date'] = self.entry_date.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'Position':
        return cls(
            id=data['id'],
            ticker=data['ticker'],
            option_type=OptionType(data.get('option_type', OptionType.CALL.value)),
            strike_price=float(data['strike_price']),
            premium_paid=float(data['premium_paid']),
            contracts=int(data['contracts']),
            expiration_date=to_date(data['expiration_date']),
            entry_date=to_date(data.get('entry_date') or data['expiration_date']),
            target_price=float(data['target_price']) if data.get('target_price') is not None else None,
            notes=data.get('notes') or '',
            status=PositionStatus(data.get('status', PositionStatus.OPEN.value)),
        )


@dataclass(frozen=True)
class ClosedPosition(Position):
    """A position that was sold or expired. Append-only history."""
    exit_date: date | None = None
    exit_premium: float = 0.0
    realized_pnl: float = 0.0

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['exit_date'] = self.exit_date.isoformat() if self.exit_date else None
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'ClosedPosition':
        base = Position.from_dict(data)
        return cls(
            **{name: getattr(base, name) for name in Position.__dataclass_fields__},
            exit_date=_date_or_none(data.get('exit_date')),
            exit_premium=float(data.get('exit_premium') or 0.0),
            realized_pnl=float(data.get('realized_pnl') or 0.0),
        )


@dataclass(frozen=True)
class Quote:
    """Snapshot of an underlying's price. At most one per ticker (latest wins)."""
    current: float
    previous_close: float
    open: float
    high: float
    low: float
    change: float
    change_percent: float
    timestamp: int               # exchange time, epoch seconds
    last_fetched: int            # retrieval time, epoch milliseconds
    source: str                  # 'finnhub', 'yfinance' or 'manual'

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'Quote':
        return cls(
            current=float(data.get('current') or 0.0),
            previous_close=float(data.get('previous_close') or 0.0),
            open=float(data.get('open') or 0.0),
            high=float(data.get('high') or 0.0),
            low=float(data.get('low') or 0.0),
            change=float(data.get('change') or 0.0),
            change_percent=float(data.get('change_percent') or 0.0),
            timestamp=int(data.get('timestamp') or 0),
            last_fetched=int(data.get('last_fetched') or 0),
            source=data.get('source', 'manual'),
        )


@dataclass(frozen=True)
class Goal:
    """A P&L target. Related to positions only through aggregate P&L."""
    id: str
    name: str
    target_amount: float
    target_date: date
    created_date: date

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'target_amount': self.target_amount,
            'target_date': self.target_date.isoformat(),
            'created_date': self.created_date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Goal':
        return cls(
            id=data['id'],
            name=data['name'],
            target_amount=float(data['target_amount']),
            target_date=to_date(data['target_date']),
            created_date=to_date(data.get('created_date') or data['target_date']),
        )


DEFAULT_GOALS = [
    Goal('goal_1', '$50K by March 15', 50000.0, date(2026, 3, 15), date(2026, 2, 15)),
    Goal('goal_2', '$100K by April 15', 100000.0, date(2026, 4, 15), date(2026, 2, 15)),
]


# ---------------------------------------------------------------------------
# Calculation results
# ---------------------------------------------------------------------------

@dataclass
class TodayReturn:
    dollar_change: float = 0.0
    percent_change: float = 0.0


@dataclass
class ProjectionPoint:
    """One sample of the profit-vs-underlying curve at expiration."""
    underlying_price: float      # rounded to cents
    profit: float
    is_above_breakeven: bool


@dataclass
class GoalProgress:
    remaining: float
    percent_complete: float


@dataclass
class Achievable:
    """Contracts and capital needed to close the gap to a goal."""
    contracts_needed: int
    total_capital_required: float
    profit_per_contract: float

    @property
    def is_achievable(self) -> bool:
        return True


@dataclass
class Unachievable:
    """No projection possible: return or premium assumption is not positive."""
    profit_per_contract: float = 0.0

    @property
    def is_achievable(self) -> bool:
        return False

    @property
    def contracts_needed(self) -> float:
        return math.inf

    @property
    def total_capital_required(self) -> float:
        return math.inf


@dataclass
class PortfolioMetrics:
    total_invested: float = 0.0
    total_current_value: float = 0.0
    unrealized_pnl: float = 0.0
    realized_pnl: float = 0.0
    total_pnl: float = 0.0
    win_rate: float = 0.0
    closed_count: int = 0
    unrealized_pnl_percent: float = 0.0


@dataclass
class PositionSnapshot:
    """Everything a position card shows, computed from a position and its quote."""
    position: Position
    has_quote: bool
    current_price: float
    breakeven: float
    days_to_expiration: int
    max_loss: float
    in_the_money: bool
    today_return: TodayReturn | None
    estimated_value: float
    estimated_pnl: float
    profit_at_target: float | None = None
    expiring_soon: bool = False
    expires_today: bool = False


@dataclass
class GoalPlan:
    """Progress and sizing projection for a single goal."""
    goal: Goal
    progress: GoalProgress
    days_left: int
    daily_target: float
    projection: Achievable | Unachievable
    trades_needed: int | None = None
    trades_per_week: float | None = None

    @property
    def goal_reached(self) -> bool:
        return self.progress.remaining <= 0

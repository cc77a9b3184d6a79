"""
Position lifecycle: construction, close-by-sale and expire-worthless.

Pure transforms. Each transition returns a new record; the caller removes the
original from its collection in the same step. No storage, no UI imports.
"""

import logging
import math
import random
import string
import time
from dataclasses import fields
from datetime import date

from tracker.config import CONTRACT_MULTIPLIER
from tracker.models import (
    ClosedPosition,
    Goal,
    OptionType,
    Position,
    PositionStatus,
    to_date,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = (
    'Missing required fields: ticker, strike_price, premium_paid, contracts, expiration_date'
)
GOAL_REQUIRED_FIELDS_MESSAGE = 'Missing required fields: name, target_amount, target_date'


class ValidationError(ValueError):
    """Raised when user input cannot produce a valid record."""


def generate_position_id() -> str:
    """Timestamp plus random suffix, e.g. 'pos_1760870000000_k3x9a'."""
    suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=5))
    return f"pos_{int(time.time() * 1000)}_{suffix}"


def _parse_number(value, label) -> float:
    if isinstance(value, str):
        value = value.strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label}: {value!r}")
    if not math.isfinite(number):
        raise ValidationError(f"Invalid {label}: {value!r}")
    return number


def _parse_date(value, label) -> date:
    try:
        return to_date(value)
    except ValueError:
        raise ValidationError(f"Invalid {label}: {value!r}")


def create_position(
    ticker,
    strike_price,
    premium_paid,
    contracts,
    expiration_date,
    option_type=OptionType.CALL,
    entry_date=None,
    target_price=None,
    notes: str = '',
) -> Position:
    """
    Build a validated open Position from form input.

    Numeric fields may be given as strings. Missing or falsy required fields fail
    with REQUIRED_FIELDS_MESSAGE; unparseable or out-of-range values fail with a
    field-specific message.

    Raises:
        ValidationError: the record could not be built.
    """
    ticker = (ticker or '').strip() if isinstance(ticker, str) else ticker
    if not ticker or not strike_price or not premium_paid or not contracts or not expiration_date:
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)

    strike = _parse_number(strike_price, 'strike price')
    premium = _parse_number(premium_paid, 'premium')
    # Fractional input truncates to whole contracts
    qty = int(_parse_number(contracts, 'contracts'))

    if not strike or not premium or not qty:
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)
    if strike < 0:
        raise ValidationError("Strike price must be positive")
    if premium < 0:
        raise ValidationError("Premium must be positive")
    if qty < 1:
        raise ValidationError("Contracts must be at least 1")

    if isinstance(option_type, OptionType):
        opt_type = option_type
    else:
        try:
            opt_type = OptionType(str(option_type or OptionType.CALL.value).strip().upper())
        except ValueError:
            raise ValidationError(f"Invalid option type: {option_type!r}")

    expiry = _parse_date(expiration_date, 'expiration date')
    entry = _parse_date(entry_date, 'entry date') if entry_date else date.today()

    target = _parse_number(target_price, 'target price') if target_price else None

    position = Position(
        id=generate_position_id(),
        ticker=str(ticker).strip().upper(),
        option_type=opt_type,
        strike_price=strike,
        premium_paid=premium,
        contracts=qty,
        expiration_date=expiry,
        entry_date=entry,
        target_price=target,
        notes=notes or '',
        status=PositionStatus.OPEN,
    )
    logger.info(f"Created position {position.id}: {position.ticker} "
                f"{position.strike_price} {position.option_type.value} x{position.contracts}")
    return position


def parse_exit_premium(raw) -> float:
    """Validate the exit premium entered when closing. Must be a real number >= 0."""
    try:
        value = float(raw.strip() if isinstance(raw, str) else raw)
    except (TypeError, ValueError):
        raise ValidationError("Please enter a valid exit premium.")
    if not math.isfinite(value) or value < 0:
        raise ValidationError("Please enter a valid exit premium.")
    return value


def _copy_as_closed(position: Position, **changes) -> ClosedPosition:
    values = {f.name: getattr(position, f.name) for f in fields(Position)}
    values.update(changes)
    return ClosedPosition(**values)


def close_position(position: Position, exit_premium: float, today: date | None = None) -> ClosedPosition:
    """Sell to close at exit_premium per share. Callers validate with parse_exit_premium first."""
    exit_price = float(exit_premium)
    realized_pnl = (exit_price - position.premium_paid) * position.contracts * CONTRACT_MULTIPLIER

    return _copy_as_closed(
        position,
        status=PositionStatus.CLOSED,
        exit_date=today or date.today(),
        exit_premium=exit_price,
        realized_pnl=realized_pnl,
    )


def expire_position(position: Position) -> ClosedPosition:
    """Option expired worthless: the full premium is lost."""
    realized_pnl = -position.premium_paid * position.contracts * CONTRACT_MULTIPLIER

    return _copy_as_closed(
        position,
        status=PositionStatus.EXPIRED,
        exit_date=position.expiration_date,
        exit_premium=0.0,
        realized_pnl=realized_pnl,
    )


def remove_position(positions: list[Position], position_id: str) -> list[Position]:
    """Return a new list without the given position."""
    return [p for p in positions if p.id != position_id]


def create_goal(name: str, target_amount, target_date, goal_id: str | None = None) -> Goal:
    """Build a Goal created today."""
    if not name or not target_amount or not target_date:
        raise ValidationError(GOAL_REQUIRED_FIELDS_MESSAGE)
    amount = _parse_number(target_amount, 'target amount')
    if not amount:
        raise ValidationError(GOAL_REQUIRED_FIELDS_MESSAGE)
    deadline = _parse_date(target_date, 'target date')
    return Goal(
        id=goal_id or f"goal_{int(time.time() * 1000)}",
        name=name,
        target_amount=amount,
        target_date=deadline,
        created_date=date.today(),
    )

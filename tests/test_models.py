"""Tests for tracker/models.py — domain model dataclasses."""

import dataclasses
import math
from datetime import date, datetime

import pytest
from tracker.models import (
    DEFAULT_GOALS, Achievable, ClosedPosition, Goal, GoalPlan, GoalProgress,
    OptionType, Position, PositionStatus, Quote, Unachievable, to_date,
)


def _position():
    return Position(
        id='pos_1', ticker='SPY', option_type=OptionType.PUT,
        strike_price=600.0, premium_paid=4.5, contracts=3,
        expiration_date=date(2026, 3, 20), entry_date=date(2026, 2, 2),
        target_price=580.0, notes='hedge',
    )


class TestToDate:
    def test_variants(self):
        assert to_date(date(2026, 3, 20)) == date(2026, 3, 20)
        assert to_date(datetime(2026, 3, 20, 15, 30)) == date(2026, 3, 20)
        assert to_date('2026-03-20') == date(2026, 3, 20)
        assert to_date('2026-03-20T00:00:00') == date(2026, 3, 20)

    def test_invalid(self):
        with pytest.raises(ValueError):
            to_date('March 20')


class TestEnums:
    def test_values(self):
        assert OptionType('CALL') is OptionType.CALL
        assert PositionStatus('EXPIRED') is PositionStatus.EXPIRED
        assert OptionType.PUT == 'PUT'


class TestPosition:
    def test_frozen(self):
        pos = _position()
        with pytest.raises(dataclasses.FrozenInstanceError):
            pos.contracts = 5

    def test_to_dict_is_json_friendly(self):
        d = _position().to_dict()
        assert d['option_type'] == 'PUT'
        assert d['status'] == 'OPEN'
        assert d['expiration_date'] == '2026-03-20'
        assert d['entry_date'] == '2026-02-02'

    def test_from_dict(self):
        assert Position.from_dict(_position().to_dict()) == _position()

    def test_from_dict_defaults(self):
        pos = Position.from_dict({
            'id': 'p', 'ticker': 'AAPL', 'strike_price': '190', 'premium_paid': 3,
            'contracts': '1', 'expiration_date': '2026-03-20',
        })
        assert pos.option_type == OptionType.CALL
        assert pos.status == PositionStatus.OPEN
        assert pos.entry_date == date(2026, 3, 20)
        assert pos.target_price is None
        assert pos.notes == ''


class TestClosedPosition:
    def test_is_a_position(self):
        closed = ClosedPosition(**_position().__dict__)
        assert isinstance(closed, Position)
        assert closed.exit_date is None
        assert closed.realized_pnl == 0.0

    def test_dict_round_trip(self):
        closed = ClosedPosition(
            **{**_position().__dict__, 'status': PositionStatus.CLOSED},
            exit_date=date(2026, 3, 1), exit_premium=6.0, realized_pnl=450.0,
        )
        d = closed.to_dict()
        assert d['exit_date'] == '2026-03-01'
        assert d['status'] == 'CLOSED'
        assert ClosedPosition.from_dict(d) == closed


class TestQuote:
    def test_from_dict_fills_missing(self):
        q = Quote.from_dict({'current': 101.5})
        assert q.current == 101.5
        assert q.previous_close == 0.0
        assert q.timestamp == 0
        assert q.source == 'manual'


class TestGoal:
    def test_default_goals(self):
        assert [g.target_amount for g in DEFAULT_GOALS] == [50000.0, 100000.0]
        assert DEFAULT_GOALS[0].target_date == date(2026, 3, 15)
        assert DEFAULT_GOALS[1].target_date == date(2026, 4, 15)

    def test_dict_round_trip(self):
        goal = DEFAULT_GOALS[0]
        assert Goal.from_dict(goal.to_dict()) == goal


class TestProjectionResults:
    def test_achievable(self):
        a = Achievable(contracts_needed=8, total_capital_required=2000.0, profit_per_contract=125.0)
        assert a.is_achievable is True

    def test_unachievable(self):
        u = Unachievable()
        assert u.is_achievable is False
        assert math.isinf(u.contracts_needed)
        assert math.isinf(u.total_capital_required)
        assert u.profit_per_contract == 0.0

    def test_goal_plan_reached(self):
        plan = GoalPlan(
            goal=DEFAULT_GOALS[0], progress=GoalProgress(0, 100), days_left=0,
            daily_target=0, projection=Unachievable(),
        )
        assert plan.goal_reached is True

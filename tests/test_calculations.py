"""Tests for tracker/calculations.py — valuation engine."""

from datetime import date

import pytest

from tracker.calculations import (
    calculate_breakeven,
    calculate_days_to_expiration,
    calculate_estimated_option_value,
    calculate_intrinsic_value,
    calculate_max_loss,
    calculate_position_pnl,
    calculate_profit_at_price,
    calculate_today_return,
    calculate_total_invested,
    calculate_win_rate,
    is_in_the_money,
)
from tracker.models import ClosedPosition, OptionType, Position


def _position(**overrides):
    fields = dict(
        id='pos_1', ticker='AAPL', option_type=OptionType.CALL,
        strike_price=100.0, premium_paid=2.0, contracts=1,
        expiration_date=date(2026, 3, 20), entry_date=date(2026, 2, 1),
    )
    fields.update(overrides)
    return Position(**fields)


class TestBreakeven:
    def test_call_scenario(self):
        """strike 100, premium 2 CALL breaks even at 102."""
        assert calculate_breakeven(100, 2, OptionType.CALL) == 102

    def test_put(self):
        assert calculate_breakeven(100, 2, OptionType.PUT) == 98

    def test_default_is_call(self):
        assert calculate_breakeven(50, 1.5) == 51.5


class TestIntrinsicValue:
    def test_call_itm(self):
        assert calculate_intrinsic_value(110, 100, OptionType.CALL) == 10

    def test_call_otm_is_zero(self):
        assert calculate_intrinsic_value(90, 100, OptionType.CALL) == 0

    def test_put_itm(self):
        assert calculate_intrinsic_value(90, 100, OptionType.PUT) == 10

    def test_put_otm_is_zero(self):
        assert calculate_intrinsic_value(110, 100, OptionType.PUT) == 0


class TestInTheMoney:
    def test_at_strike_is_never_itm(self):
        """Strict comparison for both option types."""
        assert is_in_the_money(100, 100, OptionType.CALL) is False
        assert is_in_the_money(100, 100, OptionType.PUT) is False

    def test_call(self):
        assert is_in_the_money(100.01, 100, OptionType.CALL) is True
        assert is_in_the_money(99.99, 100, OptionType.CALL) is False

    def test_put(self):
        assert is_in_the_money(99.99, 100, OptionType.PUT) is True
        assert is_in_the_money(100.01, 100, OptionType.PUT) is False


class TestMaxLossAndProfit:
    @pytest.mark.parametrize("strike,premium,contracts", [
        (100, 2, 1), (55.5, 0.35, 10), (600, 12.4, 3),
    ])
    def test_profit_at_strike_is_negative_max_loss(self, strike, premium, contracts):
        max_loss = calculate_max_loss(premium, contracts)
        assert max_loss == pytest.approx(premium * contracts * 100)
        assert calculate_profit_at_price(strike, strike, premium, contracts, OptionType.CALL) == pytest.approx(-max_loss)

    def test_profit_scenario(self):
        """(10 - 2) * 1 * 100 = 800"""
        assert calculate_profit_at_price(110, 100, 2, 1, OptionType.CALL) == 800

    def test_put_profit(self):
        assert calculate_profit_at_price(90, 100, 2, 2, OptionType.PUT) == 1600

    def test_loss_capped_at_premium(self):
        assert calculate_profit_at_price(50, 100, 2, 1, OptionType.CALL) == -200


class TestDaysToExpiration:
    def test_future(self):
        assert calculate_days_to_expiration(date(2026, 3, 20), today=date(2026, 3, 10)) == 10

    def test_same_day_is_zero(self):
        assert calculate_days_to_expiration(date(2026, 3, 20), today=date(2026, 3, 20)) == 0

    def test_past_is_floored_at_zero(self):
        assert calculate_days_to_expiration(date(2026, 3, 20), today=date(2026, 4, 1)) == 0

    def test_accepts_iso_string(self):
        assert calculate_days_to_expiration('2026-03-20', today='2026-03-19') == 1


class TestTodayReturn:
    def test_up_move(self):
        result = calculate_today_return(105, 100)
        assert result.dollar_change == 5
        assert result.percent_change == pytest.approx(5.0)

    def test_missing_previous_close(self):
        result = calculate_today_return(105, 0)
        assert result.dollar_change == 0.0
        assert result.percent_change == 0.0


class TestEstimatedOptionValue:
    def test_zero_dte_equals_intrinsic(self):
        for price in (80, 100, 103.5, 130):
            value = calculate_estimated_option_value(price, 100, 2, 0, OptionType.CALL)
            assert value == calculate_intrinsic_value(price, 100, OptionType.CALL)

    def test_full_time_value_at_baseline(self):
        """OTM at 30 DTE keeps the whole premium as time value."""
        assert calculate_estimated_option_value(95, 100, 2, 30, OptionType.CALL) == pytest.approx(2.0)

    def test_decay_factor_capped_at_one(self):
        assert calculate_estimated_option_value(95, 100, 2, 120, OptionType.CALL) == pytest.approx(2.0)

    def test_sqrt_decay(self):
        """7.5 DTE -> factor sqrt(0.25) = 0.5"""
        assert calculate_estimated_option_value(95, 100, 2, 7.5, OptionType.CALL) == pytest.approx(1.0)

    def test_non_decreasing_in_dte(self):
        for price in (90, 100, 101, 115):
            values = [calculate_estimated_option_value(price, 100, 3, dte, OptionType.PUT) for dte in range(0, 61)]
            assert all(a <= b for a, b in zip(values, values[1:]))

    def test_deep_itm_has_no_time_value(self):
        assert calculate_estimated_option_value(105, 100, 2, 30, OptionType.CALL) == pytest.approx(5.0)


class TestPositionPnl:
    def test_scenario_300(self):
        """One CALL at strike 100 / premium 2, underlying 105 at 30 DTE -> +300."""
        pos = _position(expiration_date=date(2026, 3, 31))
        assert calculate_position_pnl(pos, 105, today=date(2026, 3, 1)) == pytest.approx(300.0)

    def test_expired_otm_loses_premium(self):
        pos = _position(contracts=3)
        assert calculate_position_pnl(pos, 90, today=date(2026, 3, 20)) == pytest.approx(-600.0)


class TestAggregates:
    def test_total_invested(self):
        positions = [_position(), _position(id='pos_2', premium_paid=1.5, contracts=4)]
        assert calculate_total_invested(positions) == pytest.approx(200 + 600)

    def test_total_invested_empty(self):
        assert calculate_total_invested([]) == 0

    def test_win_rate(self):
        closed = [
            ClosedPosition(**_position(id=f'c{i}').__dict__, realized_pnl=pnl)
            for i, pnl in enumerate([100.0, -50.0, 0.0, 25.0])
        ]
        assert calculate_win_rate(closed) == pytest.approx(50.0)

    def test_win_rate_no_closed(self):
        assert calculate_win_rate([]) == 0.0

"""
Valuation engine for long option positions.

Contains pure functions for:
- Breakeven, intrinsic value, moneyness and max loss
- Profit at a hypothetical underlying price at expiration
- Days to expiration and today's move of the underlying
- Heuristic estimated option value with square-root time decay

The time decay model is a deliberate simplification (no volatility term).
No UI imports.
"""

import math
from datetime import date

from tracker.config import CONTRACT_MULTIPLIER, DECAY_BASELINE_DAYS
from tracker.models import OptionType, TodayReturn, to_date


def calculate_breakeven(strike, premium, option_type=OptionType.CALL):
    """Underlying price at which the position breaks even at expiration."""
    if option_type == OptionType.CALL:
        return strike + premium
    return strike - premium


def calculate_intrinsic_value(current_price, strike, option_type=OptionType.CALL):
    """In-the-money amount per share"""
    if option_type == OptionType.CALL:
        return max(0, current_price - strike)
    return max(0, strike - current_price)


def is_in_the_money(current_price, strike, option_type=OptionType.CALL):
    """Strict comparison: a price equal to the strike is never ITM."""
    if option_type == OptionType.CALL:
        return current_price > strike
    return current_price < strike


def calculate_max_loss(premium, contracts):
    """Total premium at risk. Long options cannot lose more than this."""
    return premium * contracts * CONTRACT_MULTIPLIER


def calculate_profit_at_price(target_price, strike, premium, contracts, option_type=OptionType.CALL):
    """P&L at expiration if the underlying settles at target_price"""
    intrinsic = calculate_intrinsic_value(target_price, strike, option_type)
    profit_per_share = intrinsic - premium
    return profit_per_share * contracts * CONTRACT_MULTIPLIER


def calculate_days_to_expiration(expiration_date, today: date | None = None) -> int:
    """
    Calendar days from today (midnight) until expiration.

    Same-day expiration returns 0, past expirations are floored at 0.
    """
    today = to_date(today) if today else date.today()
    expiry = to_date(expiration_date)
    # Both sides are whole calendar days, so no partial day needs rounding up
    return max(0, (expiry - today).days)


def calculate_today_return(current_price, previous_close) -> TodayReturn:
    """Dollar and percent move since the previous close."""
    if not previous_close:
        return TodayReturn(0.0, 0.0)
    dollar_change = current_price - previous_close
    percent_change = (dollar_change / previous_close) * 100
    return TodayReturn(dollar_change, percent_change)


def calculate_estimated_option_value(current_price, strike, premium, days_to_expiration,
                                     option_type=OptionType.CALL):
    """
    Estimate the current per-share value of an option.

    Value = intrinsic + original time value * decay factor, where the decay factor
    is sqrt(dte / 30) capped at 1 and 0 at or after expiration.

    Without the underlying price at entry, the whole non-intrinsic part of the
    premium is treated as time value (an upper bound; overstates time value for
    deep ITM entries).
    """
    intrinsic = calculate_intrinsic_value(current_price, strike, option_type)

    if days_to_expiration > 0:
        time_decay_factor = math.sqrt(days_to_expiration / DECAY_BASELINE_DAYS)
    else:
        time_decay_factor = 0.0

    original_time_value = max(0, premium - max(0, intrinsic))
    estimated_time_value = original_time_value * min(1, time_decay_factor)

    return max(0, intrinsic + estimated_time_value)


def calculate_position_pnl(position, current_price, today: date | None = None):
    """Unrealized P&L of an open position at the given underlying price."""
    estimated_value = calculate_estimated_option_value(
        current_price,
        position.strike_price,
        position.premium_paid,
        calculate_days_to_expiration(position.expiration_date, today),
        position.option_type,
    )
    pnl_per_share = estimated_value - position.premium_paid
    return pnl_per_share * position.contracts * CONTRACT_MULTIPLIER


def calculate_total_invested(positions) -> float:
    """Premium paid across all open positions."""
    return sum(p.premium_paid * p.contracts * CONTRACT_MULTIPLIER for p in positions)


def calculate_win_rate(closed_positions) -> float:
    """Percent of closed positions with a positive realized P&L. 0 when there are none."""
    if not closed_positions:
        return 0.0
    wins = sum(1 for p in closed_positions if p.realized_pnl > 0)
    return (wins / len(closed_positions)) * 100

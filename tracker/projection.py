"""
Profit projection curve for charting a single position.

Discretizes a price range around the strike, current price and breakeven into
profit-at-expiration samples. No UI imports.
"""

import math

from tracker.calculations import calculate_breakeven, calculate_profit_at_price
from tracker.config import (
    PROJECTION_STEPS,
    PROJECTION_LOWER_PAD,
    PROJECTION_UPPER_PAD,
    SLIDER_LOWER_PAD,
    SLIDER_UPPER_PAD,
)
from tracker.models import OptionType, ProjectionPoint


def calculate_projection_range(current_price, strike, premium, contracts,
                               option_type=OptionType.CALL) -> list[ProjectionPoint]:
    """
    Sample profit at expiration across [lower, upper], both ends included.

    lower = min(current, strike) * 0.90
    upper = max(current, strike, breakeven) * 1.30

    Returns:
        PROJECTION_STEPS + 1 points ordered by underlying price.
    """
    breakeven = calculate_breakeven(strike, premium, option_type)
    lower_bound = min(current_price, strike) * PROJECTION_LOWER_PAD
    upper_bound = max(current_price, strike, breakeven) * PROJECTION_UPPER_PAD
    step = (upper_bound - lower_bound) / PROJECTION_STEPS

    points = []
    for i in range(PROJECTION_STEPS + 1):
        # Index-based stepping so accumulated float error never drops the upper bound
        price = upper_bound if i == PROJECTION_STEPS else lower_bound + i * step
        if option_type == OptionType.CALL:
            above_breakeven = price > breakeven
        else:
            above_breakeven = price < breakeven
        points.append(ProjectionPoint(
            underlying_price=round(price, 2),
            profit=calculate_profit_at_price(price, strike, premium, contracts, option_type),
            is_above_breakeven=above_breakeven,
        ))
    return points


def calculate_slider_bounds(current_price, strike, breakeven) -> tuple[int, int]:
    """
    Whole-dollar bounds for the what-if price slider on a position card.

    Without a quote (current_price falsy) the strike is padded by 10% each way instead.
    """
    low_ref = current_price or strike * 0.9
    high_ref = current_price or strike * 1.1
    slider_min = math.floor(min(low_ref, strike) * SLIDER_LOWER_PAD)
    slider_max = math.ceil(max(high_ref, strike, breakeven) * SLIDER_UPPER_PAD)
    return slider_min, slider_max

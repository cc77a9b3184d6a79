"""
Goal progress and sizing math.

Pure functions turning total P&L into progress toward a goal, and a return/premium
assumption into the contracts and capital needed to close the gap.
Degenerate inputs resolve to defined results, never exceptions. No UI imports.
"""

import math
from datetime import date

from tracker.calculations import calculate_days_to_expiration
from tracker.config import CONTRACT_MULTIPLIER, CONTRACTS_PER_TRADE
from tracker.models import Achievable, Goal, GoalPlan, GoalProgress, Unachievable


def calculate_goal_progress(total_pnl, goal_amount) -> GoalProgress:
    """
    Distance to a goal and percent complete.

    Losses never produce negative progress; progress is capped at 100%.
    """
    remaining = max(0, goal_amount - total_pnl)
    if goal_amount > 0:
        percent_complete = min(100, (max(0, total_pnl) / goal_amount) * 100)
    else:
        percent_complete = 0
    return GoalProgress(remaining=remaining, percent_complete=percent_complete)


def calculate_contracts_needed(goal_remaining, avg_return_percent, avg_premium) -> Achievable | Unachievable:
    """
    Contracts and capital required to earn goal_remaining.

    profit per contract = avg_premium * 100 * avg_return_percent / 100

    Returns:
        Unachievable when either assumption is not positive.
    """
    if avg_return_percent <= 0 or avg_premium <= 0:
        return Unachievable()

    profit_per_contract = avg_premium * CONTRACT_MULTIPLIER * (avg_return_percent / 100)
    contracts_needed = math.ceil(goal_remaining / profit_per_contract)
    total_capital_required = contracts_needed * avg_premium * CONTRACT_MULTIPLIER

    return Achievable(
        contracts_needed=contracts_needed,
        total_capital_required=total_capital_required,
        profit_per_contract=profit_per_contract,
    )


def build_goal_plan(goal: Goal, total_pnl, avg_return_percent, avg_premium,
                    today: date | None = None) -> GoalPlan:
    """Progress, daily pace and trade count for one goal."""
    progress = calculate_goal_progress(total_pnl, goal.target_amount)
    days_left = calculate_days_to_expiration(goal.target_date, today)
    daily_target = progress.remaining / days_left if days_left > 0 else progress.remaining

    projection = calculate_contracts_needed(progress.remaining, avg_return_percent, avg_premium)

    trades_needed = None
    trades_per_week = None
    if projection.is_achievable and days_left > 0:
        trades_needed = math.ceil(projection.contracts_needed / CONTRACTS_PER_TRADE)
        trades_per_week = trades_needed / max(1, days_left // 7)

    return GoalPlan(
        goal=goal,
        progress=progress,
        days_left=days_left,
        daily_target=daily_target,
        projection=projection,
        trades_needed=trades_needed,
        trades_per_week=trades_per_week,
    )

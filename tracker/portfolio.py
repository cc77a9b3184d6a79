"""
Portfolio aggregation over open and closed positions.

Joins positions to quotes by ticker at read time. A position without a usable
quote (missing, or current price <= 0) is valued at cost and claims no P&L.
No UI imports.
"""

from datetime import date

from tracker.calculations import (
    calculate_breakeven,
    calculate_days_to_expiration,
    calculate_estimated_option_value,
    calculate_max_loss,
    calculate_position_pnl,
    calculate_profit_at_price,
    calculate_today_return,
    calculate_total_invested,
    calculate_win_rate,
    is_in_the_money,
)
from tracker.config import CONTRACT_MULTIPLIER, EXPIRING_SOON_DTE
from tracker.models import (
    ClosedPosition,
    PortfolioMetrics,
    Position,
    PositionSnapshot,
    Quote,
)


def has_usable_quote(quote: Quote | None) -> bool:
    return quote is not None and quote.current > 0


def calculate_portfolio_metrics(
    positions: list[Position],
    closed_positions: list[ClosedPosition],
    quotes: dict[str, Quote],
    today: date | None = None,
) -> PortfolioMetrics:
    """
    Fold the valuation engine over every position.

    Args:
        positions: Open positions
        closed_positions: Closed and expired positions
        quotes: ticker -> Quote; tickers may be absent
        today: Valuation date (defaults to today)

    Returns:
        PortfolioMetrics with invested, current value, unrealized/realized/total P&L and win rate.
    """
    total_invested = calculate_total_invested(positions)

    total_current_value = 0.0
    unrealized_pnl = 0.0

    for pos in positions:
        quote = quotes.get(pos.ticker)
        if has_usable_quote(quote):
            estimated_value = calculate_estimated_option_value(
                quote.current,
                pos.strike_price,
                pos.premium_paid,
                calculate_days_to_expiration(pos.expiration_date, today),
                pos.option_type,
            )
            total_current_value += estimated_value * pos.contracts * CONTRACT_MULTIPLIER
            unrealized_pnl += calculate_position_pnl(pos, quote.current, today)
        else:
            # No quote: assume at cost
            total_current_value += pos.premium_paid * pos.contracts * CONTRACT_MULTIPLIER

    realized_pnl = sum(p.realized_pnl for p in closed_positions)

    return PortfolioMetrics(
        total_invested=total_invested,
        total_current_value=total_current_value,
        unrealized_pnl=unrealized_pnl,
        realized_pnl=realized_pnl,
        total_pnl=unrealized_pnl + realized_pnl,
        win_rate=calculate_win_rate(closed_positions),
        closed_count=len(closed_positions),
        unrealized_pnl_percent=(unrealized_pnl / total_invested * 100) if total_invested > 0 else 0.0,
    )


def build_position_snapshot(position: Position, quote: Quote | None,
                            today: date | None = None) -> PositionSnapshot:
    """Compute the figures shown on a single position card."""
    has_quote = has_usable_quote(quote)
    current_price = quote.current if has_quote else 0.0
    dte = calculate_days_to_expiration(position.expiration_date, today)

    if has_quote:
        estimated_value = calculate_estimated_option_value(
            current_price, position.strike_price, position.premium_paid, dte, position.option_type,
        )
        estimated_pnl = calculate_position_pnl(position, current_price, today)
        today_return = calculate_today_return(quote.current, quote.previous_close)
    else:
        estimated_value = position.premium_paid
        estimated_pnl = 0.0
        today_return = None

    profit_at_target = None
    if position.target_price:
        profit_at_target = calculate_profit_at_price(
            position.target_price,
            position.strike_price,
            position.premium_paid,
            position.contracts,
            position.option_type,
        )

    return PositionSnapshot(
        position=position,
        has_quote=has_quote,
        current_price=current_price,
        breakeven=calculate_breakeven(position.strike_price, position.premium_paid, position.option_type),
        days_to_expiration=dte,
        max_loss=calculate_max_loss(position.premium_paid, position.contracts),
        in_the_money=has_quote and is_in_the_money(current_price, position.strike_price, position.option_type),
        today_return=today_return,
        estimated_value=estimated_value,
        estimated_pnl=estimated_pnl,
        profit_at_target=profit_at_target,
        expiring_soon=0 < dte <= EXPIRING_SOON_DTE,
        expires_today=dte == 0,
    )

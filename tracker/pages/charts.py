"""
Plotly figures for position cards.
"""

import plotly.graph_objects as go

from tracker.models import PositionSnapshot
from tracker.pages.components import COLOR_ACCENT, COLOR_BREAKEVEN, COLOR_LOSS, COLOR_PROFIT
from tracker.projection import calculate_projection_range


def profit_chart(snapshot: PositionSnapshot) -> go.Figure:
    """
    Profit at expiration across the projection range.

    Profitable samples are drawn green, losing samples red. Breakeven and (when
    quoted) the current price are marked with vertical lines.
    """
    pos = snapshot.position
    reference_price = snapshot.current_price or pos.strike_price
    points = calculate_projection_range(
        reference_price, pos.strike_price, pos.premium_paid, pos.contracts, pos.option_type,
    )

    prices = [p.underlying_price for p in points]
    gains = [p.profit if p.profit >= 0 else None for p in points]
    losses = [p.profit if p.profit < 0 else None for p in points]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=prices, y=gains,
        mode='lines', name='Profit',
        line=dict(color=COLOR_PROFIT, width=2),
        fill='tozeroy',
        fillcolor='rgba(63,185,80,0.15)',
        connectgaps=False,
    ))
    fig.add_trace(go.Scatter(
        x=prices, y=losses,
        mode='lines', name='Loss',
        line=dict(color=COLOR_LOSS, width=2),
        fill='tozeroy',
        fillcolor='rgba(248,81,73,0.15)',
        connectgaps=False,
    ))
    fig.add_hline(y=0, line_dash="dash", line_color="gray", line_width=1)
    fig.add_vline(x=snapshot.breakeven, line_dash="dot", line_color=COLOR_BREAKEVEN, line_width=1,
                  annotation_text="Breakeven")
    if snapshot.has_quote:
        fig.add_vline(x=snapshot.current_price, line_dash="dot", line_color=COLOR_ACCENT, line_width=1,
                      annotation_text="Current")

    fig.update_layout(
        xaxis_title=f"{pos.ticker} at Expiration ($)",
        yaxis_title="P&L ($)",
        height=260,
        margin=dict(l=40, r=10, t=20, b=40),
        showlegend=False,
        hovermode='x unified',
    )
    return fig

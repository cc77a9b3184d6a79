"""
Goals page — Tab 2.

Goal cards with progress toward each P&L target, plus a projection
calculator sizing the contracts and capital needed to close the gap.
"""

from dash import html, dcc, callback, Input, Output, State, no_update

from tracker.config import CONTRACTS_PER_TRADE
from tracker.goals import build_goal_plan
from tracker.models import GoalPlan
from tracker.position import ValidationError
from tracker.quotes.quote_book import QuoteBook
from tracker.service import get_service
from tracker.pages.components import (
    BUTTON_STYLE, CARD_STYLE, COLOR_ACCENT, COLOR_MUTED, COLOR_PROFIT, DANGER_BUTTON_STYLE,
    GRID_STYLE, STATUS_ERROR_STYLE, STATUS_OK_STYLE,
    fmt_money, pnl_span, progress_bar, section,
)

DEFAULT_AVG_RETURN = 50
DEFAULT_AVG_PREMIUM = 2.50


def layout():
    return html.Div([
        html.H3("Goals"),
        html.Div(id='goals-total-pnl', style={'marginBottom': '12px'}),
        html.Div(id='goals-content'),
        section(
            "Projection Calculator",
            html.Div([
                html.Label("Avg return per trade (%)", style={'marginRight': '8px'}),
                dcc.Input(id='goal-avg-return', type='number', value=DEFAULT_AVG_RETURN, min=0, step=1,
                          style={'width': '90px', 'marginRight': '20px'}),
                html.Label("Avg premium per share ($)", style={'marginRight': '8px'}),
                dcc.Input(id='goal-avg-premium', type='number', value=DEFAULT_AVG_PREMIUM, min=0, step=0.05,
                          style={'width': '90px'}),
            ], style={'marginBottom': '12px'}),
            html.Div(id='goal-projection-results'),
            subtitle="Contracts and capital needed to reach each goal at your average trade",
        ),
        section(
            "Manage Goals",
            html.Div([
                dcc.Input(id='goal-name-input', type='text', placeholder='Name',
                          style={'width': '200px', 'marginRight': '8px'}),
                dcc.Input(id='goal-amount-input', type='number', placeholder='Target ($)', min=0,
                          style={'width': '130px', 'marginRight': '8px'}),
                dcc.DatePickerSingle(id='goal-date-input', placeholder='Target date'),
                html.Button('Add Goal', id='add-goal-btn', n_clicks=0,
                            style={**BUTTON_STYLE, 'marginLeft': '8px'}),
            ], style={'marginBottom': '8px'}),
            html.Div([
                dcc.Dropdown(id='goal-delete-select', options=[], placeholder='Select a goal',
                             style={'width': '260px', 'display': 'inline-block', 'verticalAlign': 'middle',
                                    'marginRight': '8px'}),
                html.Button('Delete Goal', id='delete-goal-btn', n_clicks=0, style=DANGER_BUTTON_STYLE),
            ]),
            html.Div(id='goal-status'),
        ),
    ])


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------

def goal_card(plan: GoalPlan) -> html.Div:
    goal = plan.goal
    progress = plan.progress
    plural = 's' if plan.days_left != 1 else ''
    pct_style = {'fontFamily': 'monospace'}
    if progress.percent_complete > 0:
        pct_style['color'] = COLOR_PROFIT

    children = [
        html.Strong(goal.name, style={'fontSize': '16px'}),
        html.Div(f"{plan.days_left} day{plural} remaining · Target: {fmt_money(goal.target_amount, 0)}",
                 style={'fontSize': '13px', 'color': COLOR_MUTED}),
        progress_bar(progress.percent_complete),
        html.Div([
            html.Span("Progress: "),
            html.Span(f"{progress.percent_complete:.1f}%", style=pct_style),
            html.Span(" · Remaining: "),
            html.Span(fmt_money(progress.remaining, 0), style={'fontFamily': 'monospace'}),
        ], style={'fontSize': '13px'}),
    ]
    if plan.days_left > 0:
        children.append(html.Div([
            html.Span("Daily target: "),
            html.Span(f"{fmt_money(plan.daily_target, 0)}/day",
                      style={'fontFamily': 'monospace', 'color': COLOR_ACCENT}),
        ], style={'fontSize': '13px', 'marginTop': '4px'}))
    return html.Div(children, style=CARD_STYLE)


def projection_block(plan: GoalPlan, avg_return) -> html.Div:
    goal = plan.goal
    if plan.goal_reached:
        return html.Div([
            html.Strong(goal.name), ": ",
            html.Span("Goal reached!", style={'color': COLOR_PROFIT}),
        ], style={'marginBottom': '10px'})

    projection = plan.projection
    lines = [
        html.Div([html.Strong(goal.name), f" — {fmt_money(plan.progress.remaining, 0)} remaining"]),
        html.Div(f"Profit per contract at {avg_return:g}% return: {fmt_money(projection.profit_per_contract)}"),
        html.Div(f"Contracts needed: {projection.contracts_needed:,} "
                 f"(capital required: {fmt_money(projection.total_capital_required, 0)})"),
    ]
    if plan.trades_needed is not None:
        lines.append(html.Div(
            f"At ~{CONTRACTS_PER_TRADE} contracts/trade: {plan.trades_needed} trades over {plan.days_left} days "
            f"(~{plan.trades_per_week:.1f} trades/week)"
        ))
    return html.Div(lines, style={'marginBottom': '12px', 'fontSize': '14px'})


def _to_float(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


# ---------------------------------------------------------------------------
# Callbacks
# ---------------------------------------------------------------------------

@callback(
    Output('goals-total-pnl', 'children'),
    Output('goals-content', 'children'),
    Output('goal-projection-results', 'children'),
    Output('goal-delete-select', 'options'),
    Input('quote-store', 'data'),
    Input('positions-version', 'data'),
    Input('goals-version', 'data'),
    Input('goal-avg-return', 'value'),
    Input('goal-avg-premium', 'value'),
)
def render_goals(quote_data, positions_version, goals_version, avg_return, avg_premium):
    service = get_service()
    quotes = QuoteBook.from_dict(quote_data).all_quotes()
    total_pnl = service.metrics(quotes).total_pnl
    avg_return = _to_float(avg_return)
    avg_premium = _to_float(avg_premium)

    plans = [build_goal_plan(g, total_pnl, avg_return, avg_premium) for g in service.goals]
    options = [{'label': g.name, 'value': g.id} for g in service.goals]
    header = html.Div([html.Span("Total P&L: "), pnl_span(total_pnl)], style={'fontSize': '16px'})

    if not plans:
        empty = html.P("No active goals.", style={'color': COLOR_MUTED})
        return header, empty, empty, options

    cards = html.Div([goal_card(p) for p in plans], style=GRID_STYLE)

    if avg_return <= 0 or avg_premium <= 0:
        projections = html.Span("Enter valid return % and premium to see projections.",
                                style={'color': COLOR_MUTED})
    else:
        projections = html.Div([projection_block(p, avg_return) for p in plans])

    return header, cards, projections, options


@callback(
    Output('goals-version', 'data'),
    Output('goal-status', 'children'),
    Input('add-goal-btn', 'n_clicks'),
    Input('delete-goal-btn', 'n_clicks'),
    State('goal-name-input', 'value'),
    State('goal-amount-input', 'value'),
    State('goal-date-input', 'date'),
    State('goal-delete-select', 'value'),
    State('goals-version', 'data'),
    prevent_initial_call=True,
)
def handle_goal_action(add_clicks, delete_clicks, name, amount, target_date, selected_id, version):
    from dash import ctx

    service = get_service()
    version = (version or 0) + 1

    if ctx.triggered_id == 'add-goal-btn':
        try:
            goal = service.add_goal(name, amount, target_date)
        except ValidationError as e:
            return no_update, html.Div(str(e), style=STATUS_ERROR_STYLE)
        return version, html.Div(f"Added goal {goal.name}", style=STATUS_OK_STYLE)

    if ctx.triggered_id == 'delete-goal-btn':
        if not selected_id or not service.delete_goal(selected_id):
            return no_update, html.Div("Select a goal first.", style=STATUS_ERROR_STYLE)
        return version, html.Div("Goal deleted.", style=STATUS_OK_STYLE)

    return no_update, no_update

"""
Positions page — Tab 1.

Add and manage long option positions, refresh or enter underlying quotes,
and see the portfolio summary, one card per open position (with a profit
chart and what-if slider) and the closed-position history.
"""

from datetime import datetime

import pytz
from dash import html, dcc, callback, Input, Output, State, MATCH, no_update

from tracker.calculations import calculate_profit_at_price
from tracker.config import AUTO_REFRESH_INTERVAL_MS, MARKET_TIMEZONE
from tracker.models import ClosedPosition, OptionType, PortfolioMetrics, PositionStatus
from tracker.portfolio import build_position_snapshot
from tracker.position import ValidationError
from tracker.projection import calculate_slider_bounds
from tracker.quotes.quote_book import QuoteBook
from tracker.service import get_service
from tracker.pages.charts import profit_chart
from tracker.pages.components import (
    BUTTON_STYLE, CARD_STYLE, COLOR_BREAKEVEN, COLOR_LOSS, COLOR_MUTED, COLOR_PROFIT,
    DANGER_BUTTON_STYLE, GRID_STYLE, STATUS_ERROR_STYLE, STATUS_OK_STYLE,
    badge, fmt_money, fmt_signed_money, fmt_signed_pct, metric, pnl_color, pnl_span,
    section, summary_card,
)

INPUT_STYLE = {'width': '120px', 'marginRight': '8px', 'padding': '4px'}


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

def _add_form():
    return section(
        "Add Position",
        html.Div([
            dcc.Input(id='add-ticker', type='text', placeholder='Ticker', style=INPUT_STYLE),
            dcc.RadioItems(
                id='add-option-type',
                options=[
                    {'label': ' Call', 'value': OptionType.CALL.value},
                    {'label': ' Put', 'value': OptionType.PUT.value},
                ],
                value=OptionType.CALL.value,
                inline=True,
                style={'display': 'inline-block', 'marginRight': '12px'},
            ),
            dcc.Input(id='add-strike', type='number', placeholder='Strike', min=0, step=0.5,
                      style=INPUT_STYLE),
            dcc.Input(id='add-premium', type='number', placeholder='Premium / share', min=0, step=0.01,
                      style=INPUT_STYLE),
            dcc.Input(id='add-contracts', type='number', placeholder='Contracts', min=1, step=1,
                      style=INPUT_STYLE),
            dcc.DatePickerSingle(id='add-expiration', placeholder='Expiration'),
        ], style={'marginBottom': '8px'}),
        html.Div([
            dcc.Input(id='add-target', type='number', placeholder='Target price (optional)', min=0,
                      step=0.5, style={**INPUT_STYLE, 'width': '180px'}),
            dcc.Input(id='add-notes', type='text', placeholder='Notes', style={**INPUT_STYLE, 'width': '300px'}),
            html.Button('Add Position', id='add-position-btn', n_clicks=0, style=BUTTON_STYLE),
        ]),
        html.Div(id='add-position-status'),
    )


def _manage_panel():
    return section(
        "Manage Position",
        html.Div([
            dcc.Dropdown(id='manage-position-select', options=[], placeholder='Select a position',
                         style={'width': '320px', 'display': 'inline-block', 'verticalAlign': 'middle',
                                'marginRight': '8px'}),
            dcc.Input(id='exit-premium-input', type='number', placeholder='Exit premium / share', min=0,
                      step=0.01, style={**INPUT_STYLE, 'width': '170px'}),
            html.Button('Close Position', id='close-position-btn', n_clicks=0, style=BUTTON_STYLE),
            html.Button('Mark Expired', id='expire-position-btn', n_clicks=0,
                        style={**BUTTON_STYLE, 'backgroundColor': COLOR_MUTED}),
            html.Button('Delete', id='delete-position-btn', n_clicks=0, style=DANGER_BUTTON_STYLE),
        ]),
        html.Div(id='manage-status'),
    )


def _quote_controls():
    return html.Div([
        html.Button('Refresh Quotes', id='positions-refresh-btn', n_clicks=0, style=BUTTON_STYLE),
        dcc.Input(id='manual-ticker-input', type='text', placeholder='Ticker', style=INPUT_STYLE),
        dcc.Input(id='manual-price-input', type='number', placeholder='Current price', min=0, step=0.01,
                  style=INPUT_STYLE),
        html.Button('Set Price', id='manual-price-btn', n_clicks=0, style=BUTTON_STYLE),
        html.Span(id='quote-status', style={'color': COLOR_MUTED, 'fontSize': '13px'}),
        dcc.Interval(id='positions-refresh-interval', interval=AUTO_REFRESH_INTERVAL_MS),
    ], style={'marginBottom': '15px'})


def layout():
    return html.Div([
        html.H3("Positions"),
        _quote_controls(),
        _add_form(),
        _manage_panel(),
        dcc.Loading(html.Div(id='positions-content')),
    ])


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------

def summary_bar(metrics: PortfolioMetrics) -> html.Div:
    unrealized = html.Span([
        pnl_span(metrics.unrealized_pnl),
        html.Span(f" ({fmt_signed_pct(metrics.unrealized_pnl_percent)})",
                  style={'fontSize': '13px', 'color': pnl_color(metrics.unrealized_pnl)}),
    ])
    return html.Div([
        summary_card("Invested", fmt_money(metrics.total_invested)),
        summary_card("Current Value", fmt_money(metrics.total_current_value)),
        summary_card("Unrealized P&L", unrealized),
        summary_card("Realized P&L", fmt_signed_money(metrics.realized_pnl), pnl_color(metrics.realized_pnl)),
        summary_card("Total P&L", fmt_signed_money(metrics.total_pnl), pnl_color(metrics.total_pnl)),
        summary_card("Win Rate", f"{metrics.win_rate:.0f}% of {metrics.closed_count}"),
    ], style={'display': 'flex', 'flexWrap': 'wrap', 'gap': '12px', 'marginBottom': '20px'})


def _card_badges(snapshot):
    badges = []
    if snapshot.has_quote:
        if snapshot.in_the_money:
            badges.append(badge('ITM', COLOR_PROFIT))
        else:
            badges.append(badge('OTM', COLOR_MUTED))
    if snapshot.expiring_soon:
        badges.append(badge('Expiring Soon', COLOR_BREAKEVEN))
    if snapshot.expires_today:
        badges.append(badge('Expires Today', COLOR_LOSS))
    return badges


def position_card(snapshot) -> html.Div:
    pos = snapshot.position
    type_code = 'C' if pos.option_type == OptionType.CALL else 'P'
    plural = 's' if pos.contracts > 1 else ''
    description = (f"{fmt_money(pos.strike_price)}{type_code} · "
                   f"{pos.expiration_date.strftime('%b')} {pos.expiration_date.day} · "
                   f"{pos.contracts} contract{plural}")

    if snapshot.today_return is not None:
        move = snapshot.today_return
        today_move = html.Span(
            f"{fmt_signed_money(move.dollar_change)} ({fmt_signed_pct(move.percent_change)})",
            style={'color': pnl_color(move.dollar_change)},
        )
    else:
        today_move = '—'

    dte = snapshot.days_to_expiration
    metrics = [
        metric("Current Price", fmt_money(snapshot.current_price) if snapshot.has_quote else '—'),
        metric("Breakeven", fmt_money(snapshot.breakeven)),
        metric("Today's Move", today_move),
        metric("Days to Expiry", f"{dte} day{'s' if dte != 1 else ''}",
               COLOR_LOSS if dte <= 7 else None),
        metric("Max Loss", f"-{fmt_money(snapshot.max_loss)}", COLOR_LOSS),
        metric("Est. Value", fmt_money(snapshot.estimated_value)),
        metric("Est. P&L", pnl_span(snapshot.estimated_pnl) if snapshot.has_quote else '—'),
    ]
    if snapshot.profit_at_target is not None:
        metrics.append(metric("Target Price", fmt_money(pos.target_price)))
        metrics.append(metric("Profit at Target", fmt_signed_money(snapshot.profit_at_target),
                              pnl_color(snapshot.profit_at_target)))

    slider_min, slider_max = calculate_slider_bounds(snapshot.current_price, pos.strike_price, snapshot.breakeven)
    slider_value = snapshot.current_price if snapshot.has_quote else pos.strike_price

    return html.Div([
        html.Div([
            html.Div([
                html.Strong(pos.ticker, style={'fontSize': '18px'}),
                html.Div(description, style={'fontSize': '13px', 'color': COLOR_MUTED}),
            ]),
            html.Div(_card_badges(snapshot)),
        ], style={'display': 'flex', 'justifyContent': 'space-between'}),
        html.Div(metrics, style={'display': 'grid', 'gridTemplateColumns': '1fr 1fr', 'gap': '4px 12px',
                                 'margin': '10px 0'}),
        html.Div(pos.notes, style={'fontSize': '13px', 'color': COLOR_MUTED}) if pos.notes else None,
        html.Div([
            html.Div("Price Projection (at expiration)", style={'fontSize': '12px', 'color': COLOR_MUTED}),
            html.Div(what_if_text(pos, slider_value), id={'type': 'whatif-result', 'index': pos.id}),
            dcc.Slider(
                id={'type': 'whatif-slider', 'index': pos.id},
                min=slider_min, max=slider_max, step=0.5, value=slider_value,
                marks=None, tooltip={'placement': 'bottom'},
            ),
        ]),
        dcc.Graph(figure=profit_chart(snapshot), config={'displayModeBar': False}),
    ], style=CARD_STYLE)


def what_if_text(position, price) -> html.Span:
    profit = calculate_profit_at_price(
        price, position.strike_price, position.premium_paid, position.contracts, position.option_type,
    )
    return html.Span([
        html.Span(fmt_money(price), style={'fontFamily': 'monospace'}),
        " → ",
        pnl_span(profit),
    ])


def closed_positions_table(closed: list[ClosedPosition]) -> html.Div:
    if not closed:
        return html.P("No closed positions yet.", style={'color': COLOR_MUTED})

    header = html.Tr([html.Th(h) for h in
                      ['Ticker', 'Type', 'Strike', 'Contracts', 'Premium', 'Exit', 'Exit Date', 'Status', 'P&L']])
    rows = []
    for p in sorted(closed, key=lambda c: c.exit_date or c.expiration_date, reverse=True):
        status_color = COLOR_MUTED if p.status == PositionStatus.EXPIRED else COLOR_PROFIT
        rows.append(html.Tr([
            html.Td(p.ticker),
            html.Td(p.option_type.value),
            html.Td(fmt_money(p.strike_price)),
            html.Td(p.contracts),
            html.Td(fmt_money(p.premium_paid)),
            html.Td(fmt_money(p.exit_premium)),
            html.Td(p.exit_date.isoformat() if p.exit_date else ''),
            html.Td(p.status.value, style={'color': status_color}),
            html.Td(pnl_span(p.realized_pnl)),
        ]))
    return html.Table([html.Thead(header), html.Tbody(rows)],
                      style={'width': '100%', 'borderCollapse': 'collapse', 'fontSize': '13px'})


def position_options(positions) -> list[dict]:
    """Dropdown options for the manage panel."""
    return [
        {
            'label': f"{p.ticker} {p.strike_price:g}{p.option_type.value[0]} "
                     f"{p.expiration_date.isoformat()} x{p.contracts}",
            'value': p.id,
        }
        for p in positions
    ]


def _status(message, ok=True):
    return html.Div(message, style=STATUS_OK_STYLE if ok else STATUS_ERROR_STYLE)


def _timestamp():
    now = datetime.now(pytz.timezone(MARKET_TIMEZONE))
    return now.strftime('%I:%M:%S %p ET')


# ---------------------------------------------------------------------------
# Callbacks
# ---------------------------------------------------------------------------

@callback(
    Output('positions-content', 'children'),
    Output('manage-position-select', 'options'),
    Input('quote-store', 'data'),
    Input('positions-version', 'data'),
)
def render_positions(quote_data, version):
    service = get_service()
    quotes = QuoteBook.from_dict(quote_data).all_quotes()
    options = position_options(service.positions)

    if service.positions:
        cards = html.Div(
            [position_card(build_position_snapshot(p, quotes.get(p.ticker))) for p in service.positions],
            style=GRID_STYLE,
        )
    else:
        cards = html.P("No open positions. Add one above to start tracking.", style={'color': COLOR_MUTED})

    return html.Div([
        summary_bar(service.metrics(quotes)),
        cards,
        section("Closed Positions", closed_positions_table(service.closed_positions)),
    ]), options


@callback(
    Output('positions-version', 'data'),
    Output('add-position-status', 'children'),
    Output('manage-status', 'children'),
    Input('add-position-btn', 'n_clicks'),
    Input('close-position-btn', 'n_clicks'),
    Input('expire-position-btn', 'n_clicks'),
    Input('delete-position-btn', 'n_clicks'),
    State('add-ticker', 'value'),
    State('add-option-type', 'value'),
    State('add-strike', 'value'),
    State('add-premium', 'value'),
    State('add-contracts', 'value'),
    State('add-expiration', 'date'),
    State('add-target', 'value'),
    State('add-notes', 'value'),
    State('manage-position-select', 'value'),
    State('exit-premium-input', 'value'),
    State('positions-version', 'data'),
    prevent_initial_call=True,
)
def handle_position_action(add_clicks, close_clicks, expire_clicks, delete_clicks,
                           ticker, option_type, strike, premium, contracts, expiration,
                           target, notes, selected_id, exit_premium, version):
    """Add, close, expire or delete a position depending on which button fired."""
    from dash import ctx

    service = get_service()
    version = (version or 0) + 1
    triggered_id = ctx.triggered_id

    if triggered_id == 'add-position-btn':
        try:
            position = service.add_position(
                ticker=ticker,
                strike_price=strike,
                premium_paid=premium,
                contracts=contracts,
                expiration_date=expiration,
                option_type=option_type,
                target_price=target,
                notes=notes or '',
            )
        except ValidationError as e:
            return no_update, _status(str(e), ok=False), no_update
        return version, _status(f"Added {position.ticker} {position.strike_price:g} "
                                f"{position.option_type.value}"), no_update

    if triggered_id not in ('close-position-btn', 'expire-position-btn', 'delete-position-btn'):
        return no_update, no_update, no_update

    if not selected_id or service.find_position(selected_id) is None:
        return no_update, no_update, _status("Select a position first.", ok=False)

    if triggered_id == 'close-position-btn':
        try:
            closed = service.close_position(selected_id, exit_premium)
        except ValidationError as e:
            return no_update, no_update, _status(str(e), ok=False)
        return version, no_update, _status(f"Closed {closed.ticker}: realized "
                                           f"{fmt_signed_money(closed.realized_pnl)}")

    if triggered_id == 'expire-position-btn':
        expired = service.expire_position(selected_id)
        return version, no_update, _status(f"{expired.ticker} expired worthless: "
                                           f"{fmt_signed_money(expired.realized_pnl)}")

    service.delete_position(selected_id)
    return version, no_update, _status("Position deleted.")


@callback(
    Output('quote-store', 'data'),
    Output('quote-status', 'children'),
    Input('positions-refresh-btn', 'n_clicks'),
    Input('positions-refresh-interval', 'n_intervals'),
    Input('manual-price-btn', 'n_clicks'),
    Input('positions-version', 'data'),
    State('manual-ticker-input', 'value'),
    State('manual-price-input', 'value'),
    State('quote-store', 'data'),
)
def update_quotes(refresh_clicks, n_intervals, manual_clicks, version,
                  manual_ticker, manual_price, quote_data):
    """
    Keep the quote store current.

    Refresh button fetches every open ticker; the interval does the same but only
    while the market is open; a manual price overrides one ticker; otherwise only
    tickers without a quote are fetched.
    """
    from dash import ctx

    service = get_service()
    book = QuoteBook.from_dict(quote_data)
    triggered_id = ctx.triggered_id

    if triggered_id == 'manual-price-btn':
        ticker = (manual_ticker or '').strip().upper()
        if not ticker:
            return no_update, html.Span("Enter a ticker.", style={'color': COLOR_LOSS})
        try:
            book.set_manual_quote(ticker, manual_price)
        except ValidationError as e:
            return no_update, html.Span(str(e), style={'color': COLOR_LOSS})
        return book.to_dict(), f"Manual price set for {ticker} · {_timestamp()}"

    tickers = service.unique_tickers()
    if triggered_id == 'positions-refresh-interval':
        fetched = service.auto_refresh(book)
        if not fetched:
            return no_update, no_update
    elif triggered_id == 'positions-refresh-btn':
        if not tickers:
            return no_update, "No open positions to quote."
        fetched = service.refresh_quotes(book, tickers)
    else:
        tickers = [t for t in tickers if book.get(t) is None]
        if not tickers:
            return no_update, no_update
        fetched = service.refresh_quotes(book, tickers)

    return book.to_dict(), (f"Quotes: {len(fetched)} of {len(tickers)} updated · {_timestamp()}")


@callback(
    Output({'type': 'whatif-result', 'index': MATCH}, 'children'),
    Input({'type': 'whatif-slider', 'index': MATCH}, 'value'),
    State({'type': 'whatif-slider', 'index': MATCH}, 'id'),
    prevent_initial_call=True,
)
def update_what_if(price, slider_id):
    position = get_service().find_position(slider_id['index'])
    if position is None or price is None:
        return no_update
    return what_if_text(position, price)

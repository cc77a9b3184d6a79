#!/usr/bin/env python3
"""
Options Goal Tracker — Dash Application

Run with: python app.py
Then open http://127.0.0.1:8050 in your browser.
"""

import logging

from dash import Dash, html, dcc, callback, Input, Output
from dotenv import load_dotenv

from tracker.market_hours import is_market_open
from tracker.pages import goals, positions, settings
from tracker.pages.components import COLOR_MUTED, COLOR_PROFIT, badge

load_dotenv()

app = Dash(
    __name__,
    suppress_callback_exceptions=True,
    title="Options Goal Tracker",
)

app.layout = html.Div([
    # Shared data stores
    dcc.Store(id='quote-store', data={}),
    dcc.Store(id='positions-version', data=0),
    dcc.Store(id='goals-version', data=0),
    dcc.Interval(id='market-status-interval', interval=60_000),

    html.Div([
        html.H1("Options Goal Tracker", style={'fontSize': '22px', 'margin': '0'}),
        html.Div(id='market-status'),
    ], style={'display': 'flex', 'justifyContent': 'space-between', 'alignItems': 'center',
              'marginBottom': '12px'}),
    dcc.Tabs(
        id='main-tabs',
        value='positions',
        children=[
            dcc.Tab(label='Positions', value='positions'),
            dcc.Tab(label='Goals', value='goals'),
            dcc.Tab(label='Settings', value='settings'),
        ],
    ),
    html.Div(id='tab-content', style={'padding': '20px'}),
], style={'padding': '20px', 'maxWidth': '1400px', 'margin': '0 auto'})


@callback(
    Output('tab-content', 'children'),
    Input('main-tabs', 'value'),
)
def render_tab(tab_value):
    """Render the selected tab's layout."""
    if tab_value == 'positions':
        return positions.layout()
    elif tab_value == 'goals':
        return goals.layout()
    elif tab_value == 'settings':
        return settings.layout()
    return html.Div("Select a tab")


@callback(
    Output('market-status', 'children'),
    Input('market-status-interval', 'n_intervals'),
)
def update_market_status(n_intervals):
    """Market open/closed badge in the header."""
    if is_market_open():
        return badge("Market Open", COLOR_PROFIT)
    return badge("Market Closed", COLOR_MUTED)


if __name__ == '__main__':
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    app.run(debug=True, port=8050)

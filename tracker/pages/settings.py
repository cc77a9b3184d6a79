"""
Settings page — Tab 3.

Stores the Finnhub API key. Without a key, quotes come from yfinance.
"""

from dash import html, dcc, callback, Input, Output, State, no_update

from tracker.service import get_service
from tracker.pages.components import BUTTON_STYLE, COLOR_MUTED, STATUS_ERROR_STYLE, STATUS_OK_STYLE, section


def _source_note():
    source = get_service().quote_source()
    return html.Div(f"Current quote source: {source.name}", style={'fontSize': '13px', 'color': COLOR_MUTED})


def layout():
    return html.Div([
        html.H3("Settings"),
        section(
            "Finnhub API Key",
            html.Div([
                dcc.Input(id='api-key-input', type='password', placeholder='Finnhub API key',
                          value=get_service().api_key,
                          style={'width': '320px', 'marginRight': '8px', 'padding': '4px'}),
                html.Button('Save', id='save-api-key-btn', n_clicks=0, style=BUTTON_STYLE),
            ]),
            html.Div(id='api-key-status'),
            html.Div(_source_note(), id='quote-source-note', style={'marginTop': '8px'}),
            subtitle="Free key from finnhub.io. Leave empty to use Yahoo Finance via yfinance.",
        ),
    ])


@callback(
    Output('api-key-status', 'children'),
    Output('quote-source-note', 'children'),
    Input('save-api-key-btn', 'n_clicks'),
    State('api-key-input', 'value'),
    prevent_initial_call=True,
)
def save_api_key(n_clicks, key):
    if not n_clicks:
        return no_update, no_update
    if not get_service().save_api_key(key or ''):
        return html.Div("Could not save the API key.", style=STATUS_ERROR_STYLE), no_update
    message = "API key saved." if (key or '').strip() else "API key cleared."
    return html.Div(message, style=STATUS_OK_STYLE), _source_note()

"""
Shared UI components, formatters and style constants for the dashboard pages.

Keeps colors, card styles and money formatting in one place so the positions,
goals and settings tabs look the same.
"""

from dash import html


# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------

COLOR_PROFIT = '#3fb950'
COLOR_LOSS = '#f85149'
COLOR_MUTED = '#6e7681'
COLOR_ACCENT = '#58a6ff'
COLOR_BREAKEVEN = '#d29922'
COLOR_CARD_BG = '#ffffff'
COLOR_BORDER = '#d0d7de'


# ---------------------------------------------------------------------------
# Card & layout styles
# ---------------------------------------------------------------------------

CARD_STYLE = {
    'border': f'1px solid {COLOR_BORDER}',
    'borderRadius': '8px',
    'padding': '16px',
    'marginBottom': '16px',
    'backgroundColor': COLOR_CARD_BG,
}

GRID_STYLE = {
    'display': 'grid',
    'gridTemplateColumns': 'repeat(auto-fill, minmax(340px, 1fr))',
    'gap': '16px',
}

LABEL_STYLE = {
    'fontSize': '11px',
    'fontWeight': '600',
    'textTransform': 'uppercase',
    'letterSpacing': '0.5px',
    'color': COLOR_MUTED,
    'marginBottom': '4px',
}

BUTTON_STYLE = {
    'padding': '6px 14px',
    'backgroundColor': COLOR_ACCENT,
    'color': 'white',
    'border': 'none',
    'borderRadius': '4px',
    'cursor': 'pointer',
    'marginRight': '8px',
}

DANGER_BUTTON_STYLE = {**BUTTON_STYLE, 'backgroundColor': COLOR_LOSS}

STATUS_ERROR_STYLE = {'color': COLOR_LOSS, 'fontSize': '13px', 'marginTop': '6px'}
STATUS_OK_STYLE = {'color': COLOR_PROFIT, 'fontSize': '13px', 'marginTop': '6px'}


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def fmt_money(value: float, decimals: int = 2) -> str:
    return f"${value:,.{decimals}f}"


def fmt_signed_money(value: float) -> str:
    """'+$1,234.00' / '-$56.78'"""
    sign = '+' if value >= 0 else '-'
    return f"{sign}${abs(value):,.2f}"


def fmt_signed_pct(value: float, decimals: int = 2) -> str:
    sign = '+' if value >= 0 else '-'
    return f"{sign}{abs(value):,.{decimals}f}%"


def pnl_color(value: float) -> str:
    return COLOR_PROFIT if value >= 0 else COLOR_LOSS


# ---------------------------------------------------------------------------
# Reusable components
# ---------------------------------------------------------------------------

def pnl_span(value: float) -> html.Span:
    """Signed P&L, green when >= 0 and red below."""
    return html.Span(
        fmt_signed_money(value),
        style={'color': pnl_color(value), 'fontWeight': 'bold', 'fontFamily': 'monospace'},
    )


def metric(label: str, value, color: str | None = None) -> html.Div:
    """Small label over a monospace value."""
    value_style = {'fontSize': '15px', 'fontFamily': 'monospace'}
    if color:
        value_style['color'] = color
    return html.Div([
        html.Div(label, style=LABEL_STYLE),
        html.Div(value, style=value_style),
    ], style={'padding': '4px 0'})


def summary_card(label: str, value, color: str | None = None) -> html.Div:
    """Larger metric used in the portfolio summary bar."""
    value_style = {'fontSize': '22px', 'fontWeight': 'bold', 'fontFamily': 'monospace'}
    if color:
        value_style['color'] = color
    return html.Div([
        html.Div(label, style=LABEL_STYLE),
        html.Div(value, style=value_style),
    ], style={**CARD_STYLE, 'minWidth': '180px', 'marginBottom': '0'})


def badge(text: str, color: str) -> html.Span:
    return html.Span(text, style={
        'fontSize': '11px',
        'fontWeight': 'bold',
        'color': 'white',
        'backgroundColor': color,
        'borderRadius': '10px',
        'padding': '2px 8px',
        'marginLeft': '4px',
    })


def progress_bar(percent: float) -> html.Div:
    """Horizontal bar filled to percent (clamped to 0-100)."""
    width = max(0.0, min(100.0, percent))
    return html.Div(
        html.Div(style={
            'width': f'{width}%',
            'height': '100%',
            'backgroundColor': COLOR_PROFIT,
            'borderRadius': '4px',
        }),
        style={
            'height': '8px',
            'backgroundColor': '#eaeef2',
            'borderRadius': '4px',
            'margin': '8px 0',
        },
    )


def section(title: str, *children, subtitle: str = None) -> html.Div:
    """Card wrapper with a title and optional subtitle."""
    header = [html.H4(title, style={'marginTop': '0'})]
    if subtitle:
        header.append(html.Div(
            subtitle,
            style={'fontSize': '13px', 'color': COLOR_MUTED, 'marginBottom': '12px'},
        ))
    return html.Div(header + list(children), style=CARD_STYLE)

"""Plotly visualisation helpers for Trackmate.

Each function accepts one of the derived structures produced by the
analytics modules and returns a ``plotly.graph_objects.Figure`` that
Streamlit renders via ``st.plotly_chart``.  Empty input yields a blank
figure titled "No data to display" rather than an error.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .budget import TIER_CRITICAL, TIER_HEALTHY, TIER_WARNING, BudgetStatus
from .formatting import month_label
from .heatmap import TIERS, SpendingCalendar

INCOME_COLOR = '#10b981'
EXPENSE_COLOR = '#f43f5e'
CATEGORY_COLORS = ['#3b82f6', '#8b5cf6', '#ec4899', '#f43f5e', '#f97316', '#eab308', '#10b981', '#06b6d4']
TIER_COLORS = {
    'none': '#f1f5f9',
    'lightest': '#ffe4e6',
    'light': '#fda4af',
    'strong': '#f43f5e',
    'darkest': '#be123c',
}
GAUGE_COLORS = {
    TIER_HEALTHY: '#10b981',
    TIER_WARNING: '#eab308',
    TIER_CRITICAL: '#f43f5e',
}
WEEKDAY_LABELS = ['S', 'M', 'T', 'W', 'T', 'F', 'S']


def _empty_figure(title: str = "No data to display") -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=title)
    return fig


def create_income_expense_chart(bar_data: Sequence[Dict[str, Any]], title: str | None = None) -> go.Figure:
    """Grouped income vs expense bars per month.

    Parameters
    ----------
    bar_data : sequence of dict
        ``FinanceStats.bar_data`` rows, already in chronological order.
    title : str, optional
        Chart title.
    """
    if not bar_data:
        return _empty_figure()
    df = pd.DataFrame(list(bar_data))
    multi_year = df['key'].str[:4].nunique() > 1
    df['Month'] = df['key'].apply(lambda key: month_label(key, include_year=multi_year))
    long_df = df.melt(
        id_vars=['Month'], value_vars=['income', 'expense'], var_name='Type', value_name='Amount'
    )
    fig = px.bar(
        long_df,
        x='Month',
        y='Amount',
        color='Type',
        barmode='group',
        color_discrete_map={'income': INCOME_COLOR, 'expense': EXPENSE_COLOR},
    )
    fig.update_layout(title=title or "Income vs expense", xaxis_title="Month", yaxis_title="Amount")
    return fig


def create_category_chart(category_data: Sequence[Dict[str, Any]], title: str | None = None) -> go.Figure:
    """Donut chart of expense by category."""
    if not category_data:
        return _empty_figure()
    df = pd.DataFrame(list(category_data))
    fig = px.pie(
        df, names='name', values='value', hole=0.6, color_discrete_sequence=CATEGORY_COLORS
    )
    fig.update_layout(title=title or "Spending by category")
    return fig


def _tier_colorscale() -> List[List[Any]]:
    """Discrete colorscale mapping tier index 0..4 to its colour band."""
    scale = []
    steps = len(TIERS)
    for index, tier in enumerate(TIERS):
        scale.append([index / steps, TIER_COLORS[tier]])
        scale.append([(index + 1) / steps, TIER_COLORS[tier]])
    return scale


def create_spending_calendar_chart(cal: SpendingCalendar, title: str | None = None) -> go.Figure:
    """Week-by-weekday grid coloured by each day's spending tier."""
    cells = cal.leading_blanks + len(cal.days)
    weeks = -(-cells // 7)
    z = np.full((weeks, 7), np.nan)
    text = np.full((weeks, 7), '', dtype=object)
    spend = np.zeros((weeks, 7))
    for day in cal.days:
        row, col = divmod(cal.leading_blanks + day.day - 1, 7)
        z[row, col] = TIERS.index(day.tier)
        text[row, col] = str(day.day)
        spend[row, col] = day.spend

    fig = go.Figure(go.Heatmap(
        z=z.tolist(),
        x=list(range(7)),
        text=text.tolist(),
        texttemplate='%{text}',
        customdata=spend.tolist(),
        hovertemplate='Day %{text}: %{customdata:,.2f}<extra></extra>',
        colorscale=_tier_colorscale(),
        zmin=-0.5,
        zmax=len(TIERS) - 0.5,
        showscale=False,
        xgap=3,
        ygap=3,
    ))
    fig.update_layout(
        title=title or cal.label,
        xaxis=dict(tickmode='array', tickvals=list(range(7)), ticktext=WEEKDAY_LABELS, side='top'),
        yaxis=dict(autorange='reversed', showticklabels=False),
    )
    return fig


def create_budget_gauge(status: BudgetStatus, title: str | None = None) -> go.Figure:
    """Gauge of the month's spend against the budget."""
    fig = go.Figure(go.Indicator(
        mode='gauge+number',
        value=status.progress,
        number={'suffix': '%', 'valueformat': '.0f'},
        gauge={
            'axis': {'range': [0, 100]},
            'bar': {'color': GAUGE_COLORS[status.tier]},
        },
    ))
    fig.update_layout(title=title or "Monthly budget")
    return fig

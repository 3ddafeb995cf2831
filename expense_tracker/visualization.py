"""Plotly visualisation helpers for the expense tracker.

Each function accepts the output of one of the analytics modules and
returns a ``plotly.graph_objects.Figure`` that Streamlit can render via
``st.plotly_chart``.  Empty inputs produce an empty figure titled
"No data to display" rather than raising.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .budgets import BudgetEvaluation, BudgetStatus
from .formatting import format_month
from .goals import GoalProgress
from .models import Category

STATUS_COLORS = {
    BudgetStatus.ON_TRACK.value: '#22c55e',
    BudgetStatus.NEAR_LIMIT.value: '#eab308',
    BudgetStatus.OVER_BUDGET.value: '#ef4444',
}


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def create_category_bar_chart(totals: Sequence[Tuple[Category, float]], title: str | None = None) -> go.Figure:
    """Generate a horizontal bar chart of the top spending categories.

    Parameters
    ----------
    totals : sequence of (Category, float)
        Output of :func:`expense_tracker.insights.category_totals`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Bar chart, largest category on top.
    """
    if not totals:
        return _empty_figure()
    df = pd.DataFrame(
        [(category.value, amount) for category, amount in totals],
        columns=["Category", "Amount"],
    )
    fig = px.bar(df, x="Amount", y="Category", orientation="h")
    fig.update_layout(
        title=title or "Top Categories",
        xaxis_title="Amount",
        yaxis_title="",
        yaxis={'categoryorder': 'total ascending'},
    )
    return fig


def create_monthly_trend_chart(trend: Sequence[Tuple[str, float]], title: str | None = None) -> go.Figure:
    """Generate a bar chart of monthly spend, oldest month first.

    Parameters
    ----------
    trend : sequence of (str, float)
        Output of :func:`expense_tracker.insights.monthly_trend`.
    title : str, optional
        Chart title.
    """
    if not trend:
        return _empty_figure()
    df = pd.DataFrame(trend, columns=["Month", "Amount"])
    df["Label"] = df["Month"].map(format_month)
    fig = px.bar(df, x="Label", y="Amount")
    fig.update_layout(
        title=title or "Monthly Trend",
        xaxis_title="Month",
        yaxis_title="Amount",
    )
    return fig


def create_budget_progress_chart(evaluations: Sequence[BudgetEvaluation], title: str | None = None) -> go.Figure:
    """Spent-vs-budget bars coloured by budget status."""
    if not evaluations:
        return _empty_figure()
    df = pd.DataFrame(
        {
            "Category": [e.budget.category.value for e in evaluations],
            "Spent": [e.spent for e in evaluations],
            "Budget": [e.budget.amount for e in evaluations],
            "Status": [e.status.value for e in evaluations],
        }
    )
    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            name="Budget",
            x=df["Category"],
            y=df["Budget"],
            marker_color="#cbd5e1",
        )
    )
    fig.add_trace(
        go.Bar(
            name="Spent",
            x=df["Category"],
            y=df["Spent"],
            marker_color=[STATUS_COLORS[s] for s in df["Status"]],
        )
    )
    fig.update_layout(
        title=title or "Budget Utilisation",
        barmode="overlay",
        xaxis_title="Category",
        yaxis_title="Amount",
    )
    return fig


def create_goal_progress_chart(progress: Sequence[GoalProgress], title: str | None = None) -> go.Figure:
    """Horizontal percent-complete bars, one per savings goal."""
    if not progress:
        return _empty_figure()
    df = pd.DataFrame(
        {
            "Goal": [p.goal.title for p in progress],
            "Progress": [p.bar_percentage for p in progress],
            "Status": [p.status.value for p in progress],
        }
    )
    fig = px.bar(df, x="Progress", y="Goal", color="Status", orientation="h", range_x=[0, 100])
    fig.update_layout(
        title=title or "Savings Goals",
        xaxis_title="% of target",
        yaxis_title="",
    )
    return fig

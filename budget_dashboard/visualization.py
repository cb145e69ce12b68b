"""Plotly visualisation helpers for the budget dashboard.

Each function accepts a summary record produced by
:mod:`budget_dashboard.service` (or a piece of one) and returns a
``plotly.graph_objects.Figure`` that Streamlit renders with
``st.plotly_chart``.  Empty inputs produce an empty figure titled
"No data to display" instead of raising.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .models import (
    BUDGET_GROUP_NAMES,
    BudgetGroupSummary,
    BudgetGroupYearlySummary,
    CategoryTotal,
    LineBurn,
    MonthlyGroupSpend,
    MonthlyTrendPoint,
    PaceStatus,
)

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

STATUS_COLOURS = {
    PaceStatus.ON_TRACK: "#2ca02c",
    PaceStatus.OVER_PACE: "#ff7f0e",
    PaceStatus.OVER_BUDGET: "#d62728",
}


def _empty_figure(title: str = "No data to display") -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=title)
    return fig


def create_budget_vs_actual_chart(
    groups: Sequence[BudgetGroupSummary],
    title: str | None = None,
) -> go.Figure:
    """Grouped bar chart of budget and actual spend per budget group.

    Parameters
    ----------
    groups : sequence of BudgetGroupSummary
        Group rows from a monthly summary.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Two bar traces ("Budget" and "Actual") sharing the group axis.
    """
    if not groups:
        return _empty_figure()
    names = [g.group for g in groups]
    fig = go.Figure()
    fig.add_trace(go.Bar(name="Budget", x=names, y=[g.budget for g in groups], marker_color="#9ecae1"))
    fig.add_trace(go.Bar(name="Actual", x=names, y=[g.actual for g in groups], marker_color="#3182bd"))
    fig.update_layout(
        barmode="group",
        title=title or "Budget vs actual by group",
        xaxis_title="Budget group",
        yaxis_title="Amount",
    )
    return fig


def create_category_donut_chart(
    breakdown: Sequence[CategoryTotal],
    title: str | None = None,
    top_n: int = 10,
) -> go.Figure:
    """Donut chart of spend per category.

    Categories beyond ``top_n`` are folded into a single "Other" slice.
    """
    if not breakdown:
        return _empty_figure()
    df = pd.DataFrame([{"Category": c.category, "Total": c.total} for c in breakdown])
    if len(df) > top_n:
        head = df.iloc[:top_n]
        other = pd.DataFrame([{"Category": "Other", "Total": df.iloc[top_n:]["Total"].sum()}])
        df = pd.concat([head, other], ignore_index=True)
    fig = px.pie(df, names="Category", values="Total", hole=0.5)
    fig.update_layout(title=title or "Spending by category")
    return fig


def create_monthly_trend_chart(
    trend: Sequence[MonthlyTrendPoint],
    title: str | None = None,
) -> go.Figure:
    """Income vs expenses per month, with net savings as a line."""
    if not trend:
        return _empty_figure()
    df = pd.DataFrame([p.to_dict() for p in trend])
    df["label"] = df["month"].map(lambda m: MONTH_LABELS[int(m) - 1])
    df["net"] = df["income"] - df["expenses"]
    fig = go.Figure()
    fig.add_trace(go.Bar(name="Income", x=df["label"], y=df["income"], marker_color="#2ca02c"))
    fig.add_trace(go.Bar(name="Expenses", x=df["label"], y=df["expenses"], marker_color="#d62728"))
    fig.add_trace(go.Scatter(name="Net", x=df["label"], y=df["net"], mode="lines+markers"))
    fig.update_layout(
        barmode="group",
        title=title or "Monthly income vs expenses",
        xaxis_title="Month",
        yaxis_title="Amount",
    )
    return fig


def create_monthly_group_chart(
    monthly_by_group: Sequence[MonthlyGroupSpend],
    title: str | None = None,
) -> go.Figure:
    """Stacked bars of monthly spend per budget group."""
    if not monthly_by_group:
        return _empty_figure()
    wide = pd.DataFrame([m.to_dict() for m in monthly_by_group])
    columns = [name for name in BUDGET_GROUP_NAMES if name in wide.columns]
    if not columns or np.allclose(wide[columns].to_numpy(dtype=float), 0.0):
        return _empty_figure()
    wide["label"] = wide["month"].map(lambda m: MONTH_LABELS[int(m) - 1])
    long_df = wide.melt(id_vars=["month", "label"], value_vars=columns, var_name="Group", value_name="Spend")
    fig = px.bar(
        long_df,
        x="label",
        y="Spend",
        color="Group",
        category_orders={"label": MONTH_LABELS, "Group": list(columns)},
    )
    fig.update_layout(
        barmode="relative",
        title=title or "Monthly spend by budget group",
        xaxis_title="Month",
        yaxis_title="Spend",
    )
    return fig


def create_budget_burn_chart(
    burn: Sequence[LineBurn],
    expected_pace: float | None = None,
    title: str | None = None,
) -> go.Figure:
    """Horizontal bars of percent-of-annual-budget used per line.

    Lines with no annual budget are left out.  When ``expected_pace`` is
    given a dashed reference line marks where spending should be by now.
    """
    rows = [b for b in burn if b.annual_budget > 0]
    if not rows:
        return _empty_figure()
    df = pd.DataFrame({
        "Line": [f"{b.group} / {b.line}" for b in rows],
        "Used": [b.percent_used for b in rows],
        "Spent": [b.spent_ytd for b in rows],
        "Budget": [b.annual_budget for b in rows],
    }).sort_values("Used")
    colours = np.where(df["Used"] > 100, "#d62728", "#3182bd")
    fig = go.Figure(go.Bar(
        x=df["Used"],
        y=df["Line"],
        orientation="h",
        marker_color=colours,
        customdata=df[["Spent", "Budget"]].to_numpy(),
        hovertemplate="%{y}<br>%{x:.1f}% used<br>%{customdata[0]:,.2f} of %{customdata[1]:,.2f}<extra></extra>",
    ))
    if expected_pace is not None:
        fig.add_vline(x=expected_pace, line_dash="dash", line_color="grey")
    fig.update_layout(
        title=title or "Annual budget burn",
        xaxis_title="% of annual budget used",
        yaxis_title="",
        height=max(300, 28 * len(df)),
    )
    return fig


def create_group_pacing_chart(
    groups: Sequence[BudgetGroupYearlySummary],
    title: str | None = None,
) -> go.Figure:
    """Percent used per budget group, coloured by pacing status."""
    if not groups:
        return _empty_figure()
    fig = go.Figure(go.Bar(
        x=[g.group for g in groups],
        y=[g.percent_used for g in groups],
        marker_color=[STATUS_COLOURS[g.status] for g in groups],
        text=[g.status.value.replace("_", " ") for g in groups],
    ))
    fig.add_hline(y=groups[0].expected_pace, line_dash="dash", line_color="grey")
    fig.update_layout(
        title=title or "Budget group pacing",
        xaxis_title="Budget group",
        yaxis_title="% of annual budget used",
    )
    return fig

"""Smoke tests for the Plotly figure builders."""

from __future__ import annotations

from datetime import date

import plotly.graph_objects as go

from budget_dashboard import visualization as viz
from budget_dashboard.budgets import build_monthly_summary, build_yearly_summary


def _is_empty(fig: go.Figure) -> bool:
    return len(fig.data) == 0 and fig.layout.title.text == "No data to display"


def test_empty_inputs_produce_placeholder_figures() -> None:
    yearly = build_yearly_summary([], [], year=2026, pace_month=6)

    assert _is_empty(viz.create_budget_vs_actual_chart([]))
    assert _is_empty(viz.create_category_donut_chart([]))
    assert _is_empty(viz.create_monthly_trend_chart([]))
    assert _is_empty(viz.create_monthly_group_chart(yearly.monthly_by_group))
    assert _is_empty(viz.create_budget_burn_chart([]))
    assert _is_empty(viz.create_group_pacing_chart([]))


def test_monthly_figures(make_tx, make_line) -> None:
    summary = build_monthly_summary(
        [
            make_tx(900, "expense", "Fixed Costs", "Rent", category="Housing"),
            make_tx(60, "expense", "Guilt-Free", "Dining", category="Restaurants"),
        ],
        [
            make_line("Fixed Costs", "Rent", monthly_amount=1000),
            make_line("Guilt-Free", "Dining", monthly_amount=100),
        ],
        month=1,
        year=2026,
    )

    bars = viz.create_budget_vs_actual_chart(summary.groups)
    assert [trace.name for trace in bars.data] == ["Budget", "Actual"]
    assert list(bars.data[1].y) == [900.0, 60.0]

    donut = viz.create_category_donut_chart(summary.category_breakdown)
    assert list(donut.data[0].labels) == ["Housing", "Restaurants"]


def test_donut_folds_small_categories(make_tx) -> None:
    transactions = [make_tx(100 - i, "expense", category=f"Cat {i}") for i in range(5)]
    summary = build_monthly_summary(transactions, [], month=1, year=2026)

    donut = viz.create_category_donut_chart(summary.category_breakdown, top_n=3)

    assert list(donut.data[0].labels) == ["Cat 0", "Cat 1", "Cat 2", "Other"]
    assert donut.data[0].values[-1] == 97 + 96


def test_yearly_figures(make_tx, make_line) -> None:
    summary = build_yearly_summary(
        [
            make_tx(3000, "income", "Income", day=date(2026, 1, 31)),
            make_tx(1300, "expense", "Guilt-Free", "Travel", day=date(2026, 2, 3)),
        ],
        [
            make_line("Guilt-Free", "Travel", annual_amount=1200, is_annual=True),
            make_line("Fixed Costs", "Nothing", monthly_amount=0, annual_amount=0),
        ],
        year=2026,
        pace_month=6,
    )

    trend = viz.create_monthly_trend_chart(summary.monthly_trend)
    assert [trace.name for trace in trend.data] == ["Income", "Expenses", "Net"]
    assert len(trend.data[0].x) == 12

    stacked = viz.create_monthly_group_chart(summary.monthly_by_group)
    assert len(stacked.data) == 5

    burn = viz.create_budget_burn_chart(summary.annual_budget_burn, expected_pace=50.0)
    assert list(burn.data[0].y) == ["Guilt-Free / Travel"]

    pacing = viz.create_group_pacing_chart(summary.budget_group_summary)
    assert list(pacing.data[0].text) == ["over budget", "on track"]

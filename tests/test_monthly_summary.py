"""Tests for budget_dashboard.budgets.monthly."""

from __future__ import annotations

from datetime import date

import pytest

from budget_dashboard.budgets import build_monthly_summary, days_in_month


def _rent(make_line):
    return make_line("Fixed Costs", "Rent", monthly_amount=1000, annual_amount=12000)


def test_rent_paid_exactly_on_budget(make_tx, make_line) -> None:
    summary = build_monthly_summary(
        [make_tx(1000, "expense", "Fixed Costs", "Rent")],
        [_rent(make_line)],
        month=1,
        year=2026,
    )

    assert [g.to_dict() for g in summary.groups] == [
        {"group": "Fixed Costs", "budget": 1000.0, "actual": 1000.0, "delta": 0.0}
    ]


def test_credit_reduces_actual_below_budget(make_tx, make_line) -> None:
    summary = build_monthly_summary(
        [
            make_tx(1000, "expense", "Fixed Costs", "Rent"),
            make_tx(200, "credit", "Fixed Costs", "Rent"),
        ],
        [_rent(make_line)],
        month=1,
        year=2026,
    )

    group = summary.groups[0]
    assert group.actual == pytest.approx(800.0)
    assert group.delta == pytest.approx(-200.0)
    assert summary.lines[0].actual == pytest.approx(800.0)


def test_transfer_only_appears_in_raw_transactions(make_tx, make_line) -> None:
    transfer = make_tx(500, "transfer", "Transfer", category="Savings transfer")
    summary = build_monthly_summary([transfer], [_rent(make_line)], month=1, year=2026)

    assert summary.kpis.total_income == 0.0
    assert summary.kpis.total_expenses == 0.0
    assert summary.category_breakdown == ()
    assert summary.groups[0].actual == 0.0
    assert summary.transactions == (transfer,)
    assert summary.kpis.transaction_count == 1


def test_empty_month_keeps_budget_lines_with_zero_actuals(make_line) -> None:
    lines = [_rent(make_line), make_line("Guilt-Free", "Dining", monthly_amount=200)]
    summary = build_monthly_summary([], lines, month=2, year=2026)

    kpis = summary.kpis.to_dict()
    assert kpis == {
        "totalIncome": 0.0,
        "totalExpenses": 0.0,
        "netSavings": 0.0,
        "savingsRate": 0.0,
        "dailyAvgSpend": 0.0,
        "transactionCount": 0,
    }
    assert [(line.line, line.budget, line.actual) for line in summary.lines] == [
        ("Rent", 1000.0, 0.0),
        ("Dining", 200.0, 0.0),
    ]


def test_no_budget_lines_gives_empty_comparison(make_tx) -> None:
    summary = build_monthly_summary(
        [make_tx(40, "expense", "Guilt-Free", "Dining", category="Restaurants")],
        [],
        month=1,
        year=2026,
    )
    assert summary.groups == ()
    assert summary.lines == ()
    assert summary.category_breakdown[0].category == "Restaurants"


def test_kpis(make_tx) -> None:
    transactions = [
        make_tx(3000, "income", "Income", day=date(2026, 2, 1)),
        make_tx(560, "expense", "Guilt-Free", day=date(2026, 2, 10)),
    ]
    kpis = build_monthly_summary(transactions, [], month=2, year=2026).kpis

    assert kpis.net_savings == pytest.approx(2440.0)
    assert kpis.savings_rate == pytest.approx(2440.0 / 3000.0 * 100)
    assert kpis.daily_avg_spend == pytest.approx(560.0 / 28)


def test_days_in_month_handles_leap_years() -> None:
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2026, 2) == 28
    assert days_in_month(2026, 12) == 31


def test_payload_shape(make_tx, make_line) -> None:
    summary = build_monthly_summary(
        [make_tx(1000, "expense", "Fixed Costs", "Rent", category="Housing")],
        [_rent(make_line)],
        month=1,
        year=2026,
    )
    payload = summary.to_dict()

    assert set(payload) == {"month", "year", "kpis", "budgetComparison", "categoryBreakdown", "transactions"}
    assert payload["budgetComparison"]["lines"] == [
        {"group": "Fixed Costs", "line": "Rent", "budget": 1000.0, "actual": 1000.0, "delta": 0.0}
    ]
    assert payload["categoryBreakdown"] == [{"category": "Housing", "total": 1000.0, "count": 1}]
    assert payload["transactions"][0]["date"] == "2026-01-15"


def test_summary_is_deterministic(make_tx, make_line) -> None:
    transactions = [
        make_tx(1000, "expense", "Fixed Costs", "Rent", category="Housing"),
        make_tx(12.5, "expense", "Guilt-Free", "Dining", category="Coffee"),
        make_tx(12.5, "expense", "Guilt-Free", "Dining", category="Books"),
    ]
    lines = [_rent(make_line), make_line("Guilt-Free", "Dining", monthly_amount=150)]

    first = build_monthly_summary(transactions, lines, month=1, year=2026)
    second = build_monthly_summary(transactions, lines, month=1, year=2026)

    assert first == second
    assert first.to_dict() == second.to_dict()

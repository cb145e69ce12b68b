"""Tests for budget_dashboard.budgets.actuals."""

from __future__ import annotations

import pytest

from budget_dashboard.budgets import (
    aggregate_actuals,
    category_breakdown,
    category_totals,
    expense_bearing,
    resolve_budget,
    total_expenses,
    total_income,
)


def test_credit_offsets_expense_in_same_group(make_tx, make_line) -> None:
    resolved = resolve_budget([make_line("Guilt-Free", "Dining", monthly_amount=200)])
    transactions = [
        make_tx(50, "expense", "Guilt-Free", "Dining"),
        make_tx(50, "credit", "Guilt-Free", "Dining"),
    ]

    actuals = aggregate_actuals(transactions, resolved)

    assert actuals.group_actuals["Guilt-Free"] == 0.0
    assert actuals.line_actual(("Guilt-Free", "Dining")) == 0.0


def test_transfers_internal_and_income_do_not_count(make_tx, make_line) -> None:
    resolved = resolve_budget([make_line("Fixed Costs", "Rent", monthly_amount=1000)])
    transactions = [
        make_tx(500, "transfer", "Fixed Costs", "Rent"),
        make_tx(300, "internal", "Fixed Costs", "Rent"),
        make_tx(2000, "income", "Income", "Salary"),
    ]

    actuals = aggregate_actuals(transactions, resolved)

    assert dict(actuals.group_actuals) == {}
    assert actuals.line_actual(("Fixed Costs", "Rent")) == 0.0
    assert expense_bearing(transactions) == []


def test_pass_through_and_missing_groups_are_skipped(make_tx) -> None:
    resolved = resolve_budget([])
    transactions = [
        make_tx(40, "expense", "Transfer", None),
        make_tx(40, "expense", None, None),
        make_tx(40, "expense", "", None),
    ]
    assert dict(aggregate_actuals(transactions, resolved).group_actuals) == {}


def test_unknown_line_counts_toward_group_only(make_tx, make_line) -> None:
    resolved = resolve_budget([make_line("Guilt-Free", "Dining", monthly_amount=200)])
    transactions = [
        make_tx(30, "expense", "Guilt-Free", "Dining"),
        make_tx(70, "expense", "Guilt-Free", "Concerts"),
    ]

    actuals = aggregate_actuals(transactions, resolved)

    assert actuals.group_actual("Guilt-Free") == pytest.approx(100.0)
    assert actuals.line_actual(("Guilt-Free", "Dining")) == pytest.approx(30.0)
    assert ("Guilt-Free", "Concerts") not in actuals.line_actuals


def test_every_resolved_line_starts_at_zero(make_line) -> None:
    resolved = resolve_budget([
        make_line("Fixed Costs", "Rent", monthly_amount=1000),
        make_line("Investments", "Index fund", monthly_amount=250),
    ])
    actuals = aggregate_actuals([], resolved)
    assert dict(actuals.line_actuals) == {
        ("Fixed Costs", "Rent"): 0.0,
        ("Investments", "Index fund"): 0.0,
    }


def test_aggregation_does_not_mutate_resolved_budget(make_tx, make_line) -> None:
    resolved = resolve_budget([make_line("Fixed Costs", "Rent", monthly_amount=1000)])
    before = (dict(resolved.group_budgets), dict(resolved.line_budgets))
    aggregate_actuals([make_tx(1000, "expense", "Fixed Costs", "Rent")], resolved)
    assert (dict(resolved.group_budgets), dict(resolved.line_budgets)) == before


def test_totals(make_tx) -> None:
    transactions = [
        make_tx(3000, "income", "Income"),
        make_tx(100, "expense", "Guilt-Free"),
        make_tx(25, "credit", "Guilt-Free"),
        make_tx(400, "transfer", "Transfer"),
    ]
    assert total_income(transactions) == pytest.approx(3000.0)
    assert total_expenses(transactions) == pytest.approx(75.0)


def test_category_breakdown_drops_net_non_positive_and_orders(make_tx) -> None:
    transactions = [
        make_tx(80, "expense", category="Groceries"),
        make_tx(20, "expense", category="Groceries"),
        make_tx(60, "expense", category="Books"),
        make_tx(60, "expense", category="Apps"),
        make_tx(40, "expense", category="Returns"),
        make_tx(40, "credit", category="Returns"),
        make_tx(15, "expense"),
        make_tx(999, "income", category="Salary"),
    ]

    breakdown = category_breakdown(transactions)

    assert [(c.category, c.total, c.count) for c in breakdown] == [
        ("Groceries", 100.0, 2),
        ("Apps", 60.0, 1),
        ("Books", 60.0, 1),
        ("Uncategorized", 15.0, 1),
    ]
    assert category_totals(transactions)["Returns"] == (0.0, 2)

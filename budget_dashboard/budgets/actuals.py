"""Actual spend aggregation over a window of transactions.

Only ``expense`` and ``credit`` transactions carry spend: an expense adds
its amount and a credit subtracts it, so refunds and reimbursements
offset the spend they belong to.  ``transfer`` and ``internal``
transactions never reach any total here, and ``income`` is summed
separately by :func:`total_income`.

All functions are pure; none of them mutate their arguments.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Tuple

from ..models import (
    PASS_THROUGH_GROUPS,
    UNCATEGORIZED,
    CategoryTotal,
    Transaction,
    TransactionType,
)
from .resolver import LineKey, ResolvedBudget


@dataclass(frozen=True)
class Actuals:
    """Signed spend per budget group and per predefined budget line."""

    group_actuals: Mapping[str, float]
    line_actuals: Mapping[LineKey, float]

    def group_actual(self, group: str) -> float:
        return self.group_actuals.get(group, 0.0)

    def line_actual(self, key: LineKey) -> float:
        return self.line_actuals.get(key, 0.0)


def expense_bearing(transactions: Iterable[Transaction]) -> List[Transaction]:
    """Return the expense/credit subset, keeping the original order."""
    return [tx for tx in transactions if tx.is_expense_bearing]


def total_income(transactions: Iterable[Transaction]) -> float:
    return float(sum(tx.amount for tx in transactions if tx.type is TransactionType.INCOME))


def total_expenses(transactions: Iterable[Transaction]) -> float:
    """Net spend over the window (credits reduce the total)."""
    return float(sum(tx.signed_amount for tx in transactions if tx.is_expense_bearing))


def is_budget_tracked(group: str | None) -> bool:
    return bool(group) and group not in PASS_THROUGH_GROUPS


def aggregate_actuals(
    transactions: Iterable[Transaction],
    resolved: ResolvedBudget,
) -> Actuals:
    """Accumulate signed spend into group and line actuals.

    Args:
        transactions: Transactions already filtered to one profile and window
        resolved: Output of :func:`resolve_budget` for the same profile/year

    Returns:
        Actuals with a fresh group map (every tracked group seen in the
        transactions) and a line map holding every resolved line.  A
        transaction whose (group, line) has no budget line still counts
        toward its group.
    """
    group_actuals: Dict[str, float] = {}
    line_actuals: Dict[LineKey, float] = {key: 0.0 for key in resolved.line_budgets}

    for tx in expense_bearing(transactions):
        group = tx.budget_group
        if not is_budget_tracked(group):
            continue
        amount = tx.signed_amount
        group_actuals[group] = group_actuals.get(group, 0.0) + amount
        key = (group, tx.budget_line or "")
        if key in line_actuals:
            line_actuals[key] += amount

    return Actuals(
        group_actuals=MappingProxyType(group_actuals),
        line_actuals=MappingProxyType(line_actuals),
    )


def category_totals(transactions: Iterable[Transaction]) -> Mapping[str, Tuple[float, int]]:
    """Return ``{category: (signed total, transaction count)}`` for expense-bearing rows."""
    totals: Dict[str, Tuple[float, int]] = {}
    for tx in expense_bearing(transactions):
        category = tx.category or UNCATEGORIZED
        total, count = totals.get(category, (0.0, 0))
        totals[category] = (total + tx.signed_amount, count + 1)
    return MappingProxyType(totals)


def category_breakdown(transactions: Iterable[Transaction]) -> Tuple[CategoryTotal, ...]:
    """Categories with positive net spend, largest first.

    Categories fully offset by credits (net total <= 0) are left out.
    Equal totals are ordered by category name.
    """
    rows = [
        CategoryTotal(category=category, total=total, count=count)
        for category, (total, count) in category_totals(transactions).items()
        if total > 0
    ]
    rows.sort(key=lambda row: (-row.total, row.category))
    return tuple(rows)

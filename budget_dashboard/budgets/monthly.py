"""Monthly budget-vs-actual summary for one (profile, month, year)."""

from __future__ import annotations

import calendar
from typing import Iterable, Optional, Sequence

from ..logging_config import get_logger
from ..models import (
    BudgetGroupSummary,
    BudgetLine,
    BudgetLineSummary,
    MonthlyKpis,
    MonthlySummary,
    Profile,
    Transaction,
)
from .actuals import aggregate_actuals, category_breakdown, total_expenses, total_income
from .resolver import resolve_budget

logger = get_logger(__name__)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def build_monthly_summary(
    transactions: Sequence[Transaction],
    budget_lines: Iterable[BudgetLine],
    *,
    month: int,
    year: int,
    profile: Optional[Profile] = None,
) -> MonthlySummary:
    """Combine resolved budgets and actuals into the monthly dashboard payload.

    Args:
        transactions: The profile's transactions for ``month``/``year``
        budget_lines: The profile's budget lines for ``year``
        month: Calendar month (1-12), already resolved by the caller
        year: Four-digit year, already resolved by the caller
        profile: Optional profile record to attach to the payload

    Returns:
        MonthlySummary with KPIs, group and line comparisons and the
        category breakdown.  An empty transaction list yields zero KPIs
        and every budget line with ``actual=0``.
    """
    transactions = tuple(transactions)
    resolved = resolve_budget(budget_lines)
    actuals = aggregate_actuals(transactions, resolved)

    expenses = total_expenses(transactions)
    kpis = MonthlyKpis(
        total_income=total_income(transactions),
        total_expenses=expenses,
        daily_avg_spend=expenses / days_in_month(year, month),
        transaction_count=len(transactions),
    )

    groups = tuple(
        BudgetGroupSummary(group=group, budget=budget, actual=actuals.group_actual(group))
        for group, budget in resolved.group_budgets.items()
    )
    lines = tuple(
        BudgetLineSummary(
            group=line.group,
            line=line.line,
            budget=line.budget,
            actual=actuals.line_actual(key),
        )
        for key, line in resolved.line_budgets.items()
    )

    logger.debug(
        "Monthly summary %s-%02d: %d transactions, %d budget lines",
        year, month, len(transactions), len(lines),
    )
    return MonthlySummary(
        month=month,
        year=year,
        kpis=kpis,
        groups=groups,
        lines=lines,
        category_breakdown=category_breakdown(transactions),
        transactions=transactions,
        profile=profile,
    )

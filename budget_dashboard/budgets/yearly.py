"""Year-to-date budget burn, pacing and monthly series for one (profile, year)."""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from ..ledger import transactions_to_frame
from ..logging_config import get_logger
from ..models import (
    BUDGET_GROUP_NAMES,
    BudgetGroupYearlySummary,
    BudgetLine,
    LineBurn,
    MonthlyGroupSpend,
    MonthlyTrendPoint,
    Profile,
    Transaction,
    YearlyKpis,
    YearlySummary,
)
from .actuals import category_breakdown, expense_bearing, total_expenses, total_income

logger = get_logger(__name__)

MONTHS = list(range(1, 13))


def expected_pace(pace_month: int) -> float:
    """Share of the annual budget that should be used by ``pace_month`` (percent)."""
    return pace_month / 12 * 100


def monthly_trend(frame: pd.DataFrame) -> Tuple[MonthlyTrendPoint, ...]:
    """Income and net spend for each calendar month, zero-filled to 12 points."""
    if frame.empty:
        income = pd.Series(0.0, index=MONTHS)
        spend = pd.Series(0.0, index=MONTHS)
    else:
        income = (
            frame.loc[frame["type"] == "income"]
            .groupby("month")["amount"].sum()
            .reindex(MONTHS, fill_value=0.0)
        )
        spend = frame.groupby("month")["signed"].sum().reindex(MONTHS, fill_value=0.0)

    return tuple(
        MonthlyTrendPoint(month=month, income=float(income[month]), expenses=float(spend[month]))
        for month in MONTHS
    )


def monthly_by_group(frame: pd.DataFrame) -> Tuple[MonthlyGroupSpend, ...]:
    """Signed spend per month for each canonical budget group (12 x 5, zero-filled)."""
    scoped = frame[frame["budget_group"].isin(BUDGET_GROUP_NAMES)] if not frame.empty else frame
    if scoped.empty:
        table = pd.DataFrame(0.0, index=MONTHS, columns=list(BUDGET_GROUP_NAMES))
    else:
        table = scoped.pivot_table(
            index="month",
            columns="budget_group",
            values="signed",
            aggfunc="sum",
            fill_value=0.0,
        ).reindex(index=MONTHS, columns=list(BUDGET_GROUP_NAMES), fill_value=0.0)

    return tuple(
        MonthlyGroupSpend(
            month=month,
            by_group=MappingProxyType({group: float(table.at[month, group]) for group in BUDGET_GROUP_NAMES}),
        )
        for month in MONTHS
    )


def annual_budget_burn(
    transactions: Iterable[Transaction],
    budget_lines: Iterable[BudgetLine],
) -> Tuple[LineBurn, ...]:
    """Year-to-date spend against each line's annual budget.

    Only transactions whose (budget_group, budget_line) exactly match the
    line count toward it.
    """
    spent: Dict[Tuple[str, str], float] = {}
    for tx in expense_bearing(transactions):
        key = (tx.budget_group or "", tx.budget_line or "")
        spent[key] = spent.get(key, 0.0) + tx.signed_amount

    return tuple(
        LineBurn(
            group=line.budget_group.value,
            line=line.line_name,
            annual_budget=float(line.annual_budget),
            spent_ytd=spent.get(line.key, 0.0),
        )
        for line in budget_lines
    )


def group_pacing(burn: Sequence[LineBurn], pace_month: int) -> Tuple[BudgetGroupYearlySummary, ...]:
    """Roll line burn up by group and classify each group against the pace."""
    pace = expected_pace(pace_month)
    totals: Dict[str, List[float]] = {}
    for item in burn:
        budget_spent = totals.setdefault(item.group, [0.0, 0.0])
        budget_spent[0] += item.annual_budget
        budget_spent[1] += item.spent_ytd

    return tuple(
        BudgetGroupYearlySummary(
            group=group,
            annual_budget=budget,
            spent_ytd=spent,
            expected_pace=pace,
        )
        for group, (budget, spent) in totals.items()
    )


def build_yearly_summary(
    transactions: Sequence[Transaction],
    budget_lines: Iterable[BudgetLine],
    *,
    year: int,
    pace_month: int,
    profile: Optional[Profile] = None,
) -> YearlySummary:
    """Build the year-to-date dashboard payload.

    Args:
        transactions: All of the profile's transactions dated in ``year``
        budget_lines: The profile's budget lines for ``year``
        year: Four-digit year
        pace_month: Month (0-12) the budget is expected to have been used
            up to; see :func:`budget_dashboard.service.expected_pace_month`
        profile: Optional profile record to attach to the payload

    Returns:
        YearlySummary; every monthly series has exactly 12 entries.
    """
    if not 0 <= pace_month <= 12:
        raise ValueError(f"pace_month must be between 0 and 12, got {pace_month}")

    transactions = tuple(transactions)
    budget_lines = tuple(budget_lines)
    frame = transactions_to_frame(transactions)

    kpis = YearlyKpis(
        total_income=total_income(transactions),
        total_expenses=total_expenses(transactions),
        months_with_data=len({tx.month for tx in transactions}),
        transaction_count=len(transactions),
    )
    burn = annual_budget_burn(transactions, budget_lines)

    logger.debug(
        "Yearly summary %s: %d transactions, %d budget lines, pace month %d",
        year, len(transactions), len(budget_lines), pace_month,
    )
    return YearlySummary(
        year=year,
        kpis=kpis,
        monthly_trend=monthly_trend(frame),
        annual_budget_burn=burn,
        budget_group_summary=group_pacing(burn, pace_month),
        monthly_by_group=monthly_by_group(frame),
        category_breakdown=category_breakdown(transactions),
        profile=profile,
    )

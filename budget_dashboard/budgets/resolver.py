"""Budget resolution: budget-line definitions to monthly figures.

Annual lines are amortized over twelve months, so a line with
``annual_amount=1200, is_annual=True`` resolves to the same monthly
budget as ``monthly_amount=100, is_annual=False``.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Tuple

from ..models import BudgetLine

LineKey = Tuple[str, str]


@dataclass(frozen=True)
class LineBudget:
    group: str
    line: str
    budget: float


@dataclass(frozen=True)
class ResolvedBudget:
    """Per-group and per-(group, line) monthly budget figures."""

    group_budgets: Mapping[str, float]
    line_budgets: Mapping[LineKey, LineBudget]

    @property
    def is_empty(self) -> bool:
        return not self.group_budgets


def resolve_budget(budget_lines: Iterable[BudgetLine]) -> ResolvedBudget:
    """Resolve budget lines for one (profile, year) into monthly maps.

    Args:
        budget_lines: Budget lines for a single profile and year

    Returns:
        ResolvedBudget whose maps preserve the order lines were given in.
        A repeated (group, line) key keeps the last definition for the
        line map while every definition still adds to its group total.

    Example:
        >>> from budget_dashboard.models import BudgetGroup
        >>> rent = BudgetLine(None, 'diego', BudgetGroup.FIXED_COSTS, 'Rent', 1000, 12000, False, 2026)
        >>> resolve_budget([rent]).group_budgets['Fixed Costs']
        1000.0
    """
    group_budgets: Dict[str, float] = {}
    line_budgets: Dict[LineKey, LineBudget] = {}

    for line in budget_lines:
        group = line.budget_group.value
        monthly = float(line.monthly_budget)
        group_budgets[group] = group_budgets.get(group, 0.0) + monthly
        line_budgets[line.key] = LineBudget(group=group, line=line.line_name, budget=monthly)

    return ResolvedBudget(
        group_budgets=MappingProxyType(group_budgets),
        line_budgets=MappingProxyType(line_budgets),
    )

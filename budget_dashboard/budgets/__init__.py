"""Budget-vs-actual aggregation.

This package holds the pure computations behind the dashboards:
- Budget resolution (monthly figures per group and line)
- Actual spend aggregation and category breakdowns
- Monthly and yearly summary builders
"""

from .resolver import (
    LineBudget,
    ResolvedBudget,
    resolve_budget,
)
from .actuals import (
    Actuals,
    aggregate_actuals,
    category_breakdown,
    category_totals,
    expense_bearing,
    total_expenses,
    total_income,
)
from .monthly import (
    build_monthly_summary,
    days_in_month,
)
from .yearly import (
    annual_budget_burn,
    build_yearly_summary,
    expected_pace,
    group_pacing,
    monthly_by_group,
    monthly_trend,
)

__all__ = [
    # Resolution
    'LineBudget',
    'ResolvedBudget',
    'resolve_budget',
    # Actuals
    'Actuals',
    'aggregate_actuals',
    'category_breakdown',
    'category_totals',
    'expense_bearing',
    'total_expenses',
    'total_income',
    # Monthly
    'build_monthly_summary',
    'days_in_month',
    # Yearly
    'annual_budget_burn',
    'build_yearly_summary',
    'expected_pace',
    'group_pacing',
    'monthly_by_group',
    'monthly_trend',
]

"""Domain records for the budget dashboard.

Transactions and budget lines are loaded from the ledger store as plain
rows and converted into the frozen dataclasses below (see
:mod:`budget_dashboard.ledger`).  The aggregation code in
:mod:`budget_dashboard.budgets` only ever sees these records, never raw
rows, so the sign conventions live in exactly one place.

Derived aggregates are frozen as well and expose ``to_dict()`` which
returns the camelCase payload consumed by the presentation layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


class TransactionType(str, Enum):
    EXPENSE = "expense"
    INCOME = "income"
    TRANSFER = "transfer"
    INTERNAL = "internal"
    CREDIT = "credit"

    @classmethod
    def parse(cls, value: Any) -> "TransactionType":
        """Parse a stored type label, tolerating case and whitespace."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


class BudgetGroup(str, Enum):
    FIXED_COSTS = "Fixed Costs"
    SAVINGS_GOALS = "Savings Goals"
    GUILT_FREE = "Guilt-Free"
    INVESTMENTS = "Investments"
    PRE_TAX = "Pre-Tax"

    @classmethod
    def parse(cls, value: Any) -> "BudgetGroup":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip())


class PaceStatus(str, Enum):
    ON_TRACK = "on_track"
    OVER_PACE = "over_pace"
    OVER_BUDGET = "over_budget"


BUDGET_GROUP_NAMES: Tuple[str, ...] = tuple(group.value for group in BudgetGroup)

# Ledger-only groups the parser assigns to non-spending movements
PASS_THROUGH_GROUPS = frozenset({"Income", "Transfer", "Internal"})

EXPENSE_BEARING_TYPES = frozenset({TransactionType.EXPENSE, TransactionType.CREDIT})

UNCATEGORIZED = "Uncategorized"


class ProfileNotFoundError(LookupError):
    """Raised when a summary is requested for a profile the store does not hold."""

    def __init__(self, profile_id: str) -> None:
        super().__init__(f"Profile '{profile_id}' not found")
        self.profile_id = profile_id


# ---------------------------------------------------------------------------
# Ledger records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Profile:
    id: str
    name: str
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "description": self.description}


@dataclass(frozen=True)
class Transaction:
    id: Optional[int]
    profile_id: str
    date: date
    description: str
    amount: float
    type: TransactionType
    source: Optional[str] = None
    category: Optional[str] = None
    budget_group: Optional[str] = None
    budget_line: Optional[str] = None
    notes: Optional[str] = None
    upload_batch_id: Optional[str] = None

    @property
    def month(self) -> int:
        return self.date.month

    @property
    def year(self) -> int:
        return self.date.year

    @property
    def is_expense_bearing(self) -> bool:
        return self.type in EXPENSE_BEARING_TYPES

    @property
    def signed_amount(self) -> float:
        """Contribution to spend: expenses add, credits offset, everything else is neutral."""
        if self.type is TransactionType.EXPENSE:
            return self.amount
        if self.type is TransactionType.CREDIT:
            return -self.amount
        return 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "profile_id": self.profile_id,
            "date": self.date.isoformat(),
            "description": self.description,
            "amount": self.amount,
            "type": self.type.value,
            "source": self.source,
            "category": self.category,
            "budget_group": self.budget_group,
            "budget_line": self.budget_line,
            "notes": self.notes,
            "upload_batch_id": self.upload_batch_id,
            "month": self.month,
            "year": self.year,
        }


@dataclass(frozen=True)
class BudgetLine:
    id: Optional[int]
    profile_id: str
    budget_group: BudgetGroup
    line_name: str
    monthly_amount: float
    annual_amount: float
    is_annual: bool
    year: int

    @property
    def key(self) -> Tuple[str, str]:
        return (self.budget_group.value, self.line_name)

    @property
    def monthly_budget(self) -> float:
        """Monthly figure used for aggregation (annual lines are amortized)."""
        if self.is_annual:
            return self.annual_amount / 12
        return self.monthly_amount

    @property
    def annual_budget(self) -> float:
        return self.annual_amount or self.monthly_amount * 12


def derive_budget_amounts(
    monthly_amount: Optional[float],
    annual_amount: Optional[float],
    is_annual: bool,
) -> Tuple[float, float]:
    """Return ``(monthly, annual)`` with the non-authoritative figure derived.

    Annual lines treat ``annual_amount`` as the source of truth; monthly
    lines treat ``monthly_amount`` as the source of truth.  An explicitly
    supplied value for the other field is kept as an override.

    Example:
        >>> derive_budget_amounts(100, None, False)
        (100.0, 1200.0)
        >>> derive_budget_amounts(None, 1200, True)
        (100.0, 1200.0)
    """
    if is_annual:
        annual = float(annual_amount or 0.0)
        monthly = float(monthly_amount) if monthly_amount is not None else annual / 12
    else:
        monthly = float(monthly_amount or 0.0)
        annual = float(annual_amount) if annual_amount is not None else monthly * 12
    return monthly, annual


# ---------------------------------------------------------------------------
# Derived aggregates
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BudgetGroupSummary:
    group: str
    budget: float
    actual: float

    @property
    def delta(self) -> float:
        return self.actual - self.budget

    def to_dict(self) -> Dict[str, Any]:
        return {"group": self.group, "budget": self.budget, "actual": self.actual, "delta": self.delta}


@dataclass(frozen=True)
class BudgetLineSummary:
    group: str
    line: str
    budget: float
    actual: float

    @property
    def delta(self) -> float:
        return self.actual - self.budget

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group": self.group,
            "line": self.line,
            "budget": self.budget,
            "actual": self.actual,
            "delta": self.delta,
        }


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    total: float
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "total": self.total, "count": self.count}


@dataclass(frozen=True)
class LineBurn:
    group: str
    line: str
    annual_budget: float
    spent_ytd: float

    @property
    def percent_used(self) -> float:
        return self.spent_ytd / self.annual_budget * 100 if self.annual_budget > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group": self.group,
            "line": self.line,
            "annualBudget": self.annual_budget,
            "spentYTD": self.spent_ytd,
            "percentUsed": self.percent_used,
        }


@dataclass(frozen=True)
class BudgetGroupYearlySummary:
    group: str
    annual_budget: float
    spent_ytd: float
    expected_pace: float

    @property
    def percent_used(self) -> float:
        return self.spent_ytd / self.annual_budget * 100 if self.annual_budget > 0 else 0.0

    @property
    def remaining_budget(self) -> float:
        return self.annual_budget - self.spent_ytd

    @property
    def status(self) -> PaceStatus:
        used = self.percent_used
        if used > 100:
            return PaceStatus.OVER_BUDGET
        if used > self.expected_pace:
            return PaceStatus.OVER_PACE
        return PaceStatus.ON_TRACK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group": self.group,
            "annualBudget": self.annual_budget,
            "spentYTD": self.spent_ytd,
            "percentUsed": self.percent_used,
            "remainingBudget": self.remaining_budget,
            "expectedPace": self.expected_pace,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class MonthlyTrendPoint:
    month: int
    income: float
    expenses: float

    def to_dict(self) -> Dict[str, Any]:
        return {"month": self.month, "income": self.income, "expenses": self.expenses}


@dataclass(frozen=True)
class MonthlyGroupSpend:
    month: int
    by_group: Mapping[str, float]

    def to_dict(self) -> Dict[str, Any]:
        return {"month": self.month, **self.by_group}


@dataclass(frozen=True)
class MonthlyKpis:
    total_income: float
    total_expenses: float
    daily_avg_spend: float
    transaction_count: int

    @property
    def net_savings(self) -> float:
        return self.total_income - self.total_expenses

    @property
    def savings_rate(self) -> float:
        return self.net_savings / self.total_income * 100 if self.total_income > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalIncome": self.total_income,
            "totalExpenses": self.total_expenses,
            "netSavings": self.net_savings,
            "savingsRate": self.savings_rate,
            "dailyAvgSpend": self.daily_avg_spend,
            "transactionCount": self.transaction_count,
        }


@dataclass(frozen=True)
class YearlyKpis:
    total_income: float
    total_expenses: float
    months_with_data: int
    transaction_count: int

    @property
    def net_savings(self) -> float:
        return self.total_income - self.total_expenses

    @property
    def savings_rate(self) -> float:
        return self.net_savings / self.total_income * 100 if self.total_income > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalIncome": self.total_income,
            "totalExpenses": self.total_expenses,
            "netSavings": self.net_savings,
            "savingsRate": self.savings_rate,
            "monthsWithData": self.months_with_data,
            "transactionCount": self.transaction_count,
        }


@dataclass(frozen=True)
class MonthlySummary:
    month: int
    year: int
    kpis: MonthlyKpis
    groups: Tuple[BudgetGroupSummary, ...]
    lines: Tuple[BudgetLineSummary, ...]
    category_breakdown: Tuple[CategoryTotal, ...]
    transactions: Tuple[Transaction, ...] = ()
    profile: Optional[Profile] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "month": self.month,
            "year": self.year,
            "kpis": self.kpis.to_dict(),
            "budgetComparison": {
                "groups": [g.to_dict() for g in self.groups],
                "lines": [line.to_dict() for line in self.lines],
            },
            "categoryBreakdown": [c.to_dict() for c in self.category_breakdown],
            "transactions": [tx.to_dict() for tx in self.transactions],
        }
        if self.profile is not None:
            payload["profile"] = self.profile.to_dict()
        return payload


@dataclass(frozen=True)
class YearlySummary:
    year: int
    kpis: YearlyKpis
    monthly_trend: Tuple[MonthlyTrendPoint, ...]
    annual_budget_burn: Tuple[LineBurn, ...]
    budget_group_summary: Tuple[BudgetGroupYearlySummary, ...]
    monthly_by_group: Tuple[MonthlyGroupSpend, ...]
    category_breakdown: Tuple[CategoryTotal, ...]
    profile: Optional[Profile] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "year": self.year,
            "kpis": self.kpis.to_dict(),
            "monthlyTrend": [p.to_dict() for p in self.monthly_trend],
            "annualBudgetBurn": [b.to_dict() for b in self.annual_budget_burn],
            "budgetGroupSummary": [g.to_dict() for g in self.budget_group_summary],
            "monthlyByGroup": [m.to_dict() for m in self.monthly_by_group],
            "categoryBreakdown": [c.to_dict() for c in self.category_breakdown],
        }
        if self.profile is not None:
            payload["profile"] = self.profile.to_dict()
        return payload

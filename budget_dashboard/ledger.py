"""Conversion between ledger-store rows and domain records.

The store hands back pandas DataFrames (one row per transaction or budget
line).  Everything downstream works on the frozen records from
:mod:`budget_dashboard.models`, so this is the boundary where stored
values are coerced and where the non-negative amount invariant is
enforced.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Tuple

import pandas as pd

from .logging_config import get_logger
from .models import BudgetGroup, BudgetLine, Profile, Transaction, TransactionType

logger = get_logger(__name__)


def _optional_text(value: Any) -> Optional[str]:
    """Convert pandas NA/NaN and blank strings to ``None``."""
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else None
    if pd.isna(value):
        return None
    return str(value)


def _optional_int(value: Any) -> Optional[int]:
    if value is None or pd.isna(value):
        return None
    return int(value)


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    ts = pd.to_datetime(value, errors="coerce")
    if pd.isna(ts):
        raise ValueError(f"Invalid transaction date: {value!r}")
    return ts.date()


def clamp_amount(value: Any, *, row_id: Any = None) -> float:
    """Return the magnitude of a stored amount.

    Direction is carried by the transaction type, so a negative stored
    amount is a data error from upstream.  It is clamped rather than
    trusted so it cannot silently flip the sign of a contribution.
    """
    if value is None or pd.isna(value):
        return 0.0
    amount = float(value)
    if amount < 0:
        logger.warning("Clamping negative amount %s on transaction %s", amount, row_id)
        return -amount
    return amount


def transaction_from_row(row: Any) -> Transaction:
    get = row.get if hasattr(row, "get") else row.__getitem__
    row_id = _optional_int(get("id"))
    return Transaction(
        id=row_id,
        profile_id=str(get("profile_id")),
        date=_to_date(get("date")),
        description=_optional_text(get("description")) or "",
        amount=clamp_amount(get("amount"), row_id=row_id),
        type=TransactionType.parse(get("type")),
        source=_optional_text(get("source")),
        category=_optional_text(get("category")),
        budget_group=_optional_text(get("budget_group")),
        budget_line=_optional_text(get("budget_line")),
        notes=_optional_text(get("notes")),
        upload_batch_id=_optional_text(get("upload_batch_id")),
    )


def transactions_from_frame(df: Optional[pd.DataFrame]) -> Tuple[Transaction, ...]:
    """Convert a store DataFrame into transaction records, preserving row order."""
    if df is None or df.empty:
        return ()
    return tuple(transaction_from_row(row) for row in df.to_dict(orient="records"))


def budget_line_from_row(row: Any) -> BudgetLine:
    get = row.get if hasattr(row, "get") else row.__getitem__
    monthly = get("monthly_amount")
    annual = get("annual_amount")
    is_annual = get("is_annual")
    return BudgetLine(
        id=_optional_int(get("id")),
        profile_id=str(get("profile_id")),
        budget_group=BudgetGroup.parse(get("budget_group")),
        line_name=str(get("line_name")),
        monthly_amount=0.0 if monthly is None or pd.isna(monthly) else float(monthly),
        annual_amount=0.0 if annual is None or pd.isna(annual) else float(annual),
        is_annual=False if is_annual is None or pd.isna(is_annual) else bool(is_annual),
        year=int(get("year")),
    )


def budget_lines_from_frame(df: Optional[pd.DataFrame]) -> Tuple[BudgetLine, ...]:
    if df is None or df.empty:
        return ()
    return tuple(budget_line_from_row(row) for row in df.to_dict(orient="records"))


def profile_from_row(row: Any) -> Profile:
    return Profile(
        id=str(row["id"]),
        name=str(row["name"]),
        description=_optional_text(row.get("description")),
    )


def transactions_to_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Build an analysis frame with ``month``, ``year`` and ``signed`` columns.

    ``signed`` is the contribution to spend (expense positive, credit
    negative, every other type zero).
    """
    records: List[dict] = []
    for tx in transactions:
        records.append({
            "id": tx.id,
            "date": pd.Timestamp(tx.date),
            "month": tx.month,
            "year": tx.year,
            "type": tx.type.value,
            "amount": tx.amount,
            "signed": tx.signed_amount,
            "category": tx.category,
            "budget_group": tx.budget_group,
            "budget_line": tx.budget_line,
        })
    if not records:
        return pd.DataFrame(
            columns=["id", "date", "month", "year", "type", "amount", "signed",
                     "category", "budget_group", "budget_line"]
        )
    return pd.DataFrame.from_records(records)

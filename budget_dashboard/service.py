"""Read-only summary queries over the ledger store.

This is the boundary between the store and the pure aggregation code in
:mod:`budget_dashboard.budgets`.  Default month/year and the pacing month
are resolved here from the clock, so the builders only ever receive
concrete integers.
"""

from __future__ import annotations

from datetime import date
from typing import Optional, Tuple

from . import config, db
from .budgets import build_monthly_summary, build_yearly_summary
from .ledger import budget_lines_from_frame, profile_from_row, transactions_from_frame
from .logging_config import get_logger
from .models import MonthlySummary, Profile, ProfileNotFoundError, YearlySummary

logger = get_logger(__name__)


def resolve_period(
    month: Optional[int] = None,
    year: Optional[int] = None,
    *,
    today: Optional[date] = None,
) -> Tuple[int, int]:
    """Fill in a missing month/year from ``today`` and validate the result."""
    today = today or date.today()
    resolved_month = int(month) if month else today.month
    resolved_year = int(year) if year else today.year
    if not 1 <= resolved_month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {resolved_month}")
    if not 1000 <= resolved_year <= 9999:
        raise ValueError(f"year must have four digits, got {resolved_year}")
    return resolved_month, resolved_year


def expected_pace_month(year: int, mode: Optional[str] = None, *, today: Optional[date] = None) -> int:
    """Month the yearly budget should be paced against.

    ``calendar`` always uses today's month, whatever year is reviewed.
    ``elapsed`` uses 12 for past years, today's month for the current
    year and 0 for future years.
    """
    mode = (mode or config.PACE_MODE).strip().lower()
    today = today or date.today()
    if mode == "calendar":
        return today.month
    if mode == "elapsed":
        if year < today.year:
            return 12
        if year > today.year:
            return 0
        return today.month
    raise ValueError(f"Unknown pace mode '{mode}'. Expected one of: {', '.join(config.PACE_MODES)}")


def get_profile(profile_id: str) -> Profile:
    if not profile_id or not str(profile_id).strip():
        raise ValueError("profile_id is required")
    row = db.fetch_profile(profile_id)
    if row is None:
        raise ProfileNotFoundError(profile_id)
    return profile_from_row(row)


def get_monthly_summary(
    profile_id: str,
    month: Optional[int] = None,
    year: Optional[int] = None,
    *,
    today: Optional[date] = None,
) -> MonthlySummary:
    """Budget-vs-actual summary for one profile and month.

    Raises:
        ProfileNotFoundError: if the profile does not exist
        ValueError: for a blank profile id or an invalid period
    """
    month, year = resolve_period(month, year, today=today)
    profile = get_profile(profile_id)

    transactions = transactions_from_frame(db.fetch_transactions(profile_id, month=month, year=year))
    budget_lines = budget_lines_from_frame(db.fetch_budget_lines(profile_id, year))

    logger.info("Building monthly summary for %s %s-%02d", profile_id, year, month)
    return build_monthly_summary(transactions, budget_lines, month=month, year=year, profile=profile)


def get_yearly_summary(
    profile_id: str,
    year: Optional[int] = None,
    *,
    pace_mode: Optional[str] = None,
    today: Optional[date] = None,
) -> YearlySummary:
    """Year-to-date summary for one profile.

    Raises:
        ProfileNotFoundError: if the profile does not exist
        ValueError: for a blank profile id, invalid year or unknown pace mode
    """
    today = today or date.today()
    _, year = resolve_period(None, year, today=today)
    pace_month = expected_pace_month(year, pace_mode, today=today)
    profile = get_profile(profile_id)

    transactions = transactions_from_frame(db.fetch_transactions(profile_id, year=year))
    budget_lines = budget_lines_from_frame(db.fetch_budget_lines(profile_id, year))

    logger.info("Building yearly summary for %s %s (pace month %d)", profile_id, year, pace_month)
    return build_yearly_summary(
        transactions, budget_lines, year=year, pace_month=pace_month, profile=profile
    )

#!/usr/bin/env python3
"""Print a monthly or yearly budget summary for a profile."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

import pandas as pd

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from budget_dashboard import config, db, service
from budget_dashboard.logging_config import setup_logging
from budget_dashboard.models import MonthlySummary, ProfileNotFoundError, YearlySummary


def _print_kpis(kpis: dict) -> None:
    for key, value in kpis.items():
        shown = f"{value:,.2f}" if isinstance(value, float) else value
        print(f"  {key:<18} {shown}")


def print_monthly(summary: MonthlySummary) -> None:
    payload = summary.to_dict()
    print(f"{summary.year}-{summary.month:02d}")
    _print_kpis(payload['kpis'])

    groups = pd.DataFrame(payload['budgetComparison']['groups'])
    if not groups.empty:
        print("\nBudget groups:")
        print(groups.to_string(index=False, float_format=lambda v: f"{v:,.2f}"))

    lines = pd.DataFrame(payload['budgetComparison']['lines'])
    if not lines.empty:
        print("\nBudget lines:")
        print(lines.to_string(index=False, float_format=lambda v: f"{v:,.2f}"))

    categories = pd.DataFrame(payload['categoryBreakdown'])
    if not categories.empty:
        print("\nCategories:")
        print(categories.to_string(index=False, float_format=lambda v: f"{v:,.2f}"))


def print_yearly(summary: YearlySummary) -> None:
    payload = summary.to_dict()
    print(f"{summary.year}")
    _print_kpis(payload['kpis'])

    trend = pd.DataFrame(payload['monthlyTrend'])
    print("\nMonthly trend:")
    print(trend.to_string(index=False, float_format=lambda v: f"{v:,.2f}"))

    pacing = pd.DataFrame(payload['budgetGroupSummary'])
    if not pacing.empty:
        print("\nBudget pacing:")
        print(pacing.to_string(index=False, float_format=lambda v: f"{v:,.1f}"))

    burn = pd.DataFrame(payload['annualBudgetBurn'])
    if not burn.empty:
        print("\nAnnual budget burn:")
        print(burn.to_string(index=False, float_format=lambda v: f"{v:,.1f}"))


def main(
    profile_id: str,
    month: Optional[int] = None,
    year: Optional[int] = None,
    yearly: bool = False,
    pace_mode: Optional[str] = None,
    as_json: bool = False,
) -> int:
    db.init_db()
    try:
        if yearly:
            summary = service.get_yearly_summary(profile_id, year, pace_mode=pace_mode)
        else:
            summary = service.get_monthly_summary(profile_id, month, year)
    except ProfileNotFoundError as exc:
        print(exc, file=sys.stderr)
        return 1

    if as_json:
        print(json.dumps(summary.to_dict(), indent=2, ensure_ascii=False))
    elif yearly:
        print_yearly(summary)
    else:
        print_monthly(summary)
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Show a budget-vs-actual summary.')
    parser.add_argument('profile', help='Profile id, e.g. diego')
    parser.add_argument('--month', type=int, default=None, help='Month (1-12), defaults to the current month')
    parser.add_argument('--year', type=int, default=None, help='Year, defaults to the current year')
    parser.add_argument('--yearly', action='store_true', help='Show the year-to-date summary instead')
    parser.add_argument('--pace-mode', choices=config.PACE_MODES, default=None, help='Yearly pacing policy')
    parser.add_argument('--json', action='store_true', help='Print the raw payload as JSON')
    args = parser.parse_args()
    setup_logging()
    sys.exit(main(args.profile, args.month, args.year, args.yearly, args.pace_mode, args.json))

from __future__ import annotations

import sys
from datetime import date
from itertools import count
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from budget_dashboard import db as db_mod
from budget_dashboard.models import BudgetGroup, BudgetLine, Transaction, TransactionType


@pytest.fixture
def make_tx():
    """Factory for Transaction records with sensible defaults."""
    ids = count(1)

    def _make(
        amount: float,
        tx_type: str = "expense",
        budget_group: str | None = None,
        budget_line: str | None = None,
        category: str | None = None,
        day: date = date(2026, 1, 15),
        description: str = "test",
    ) -> Transaction:
        return Transaction(
            id=next(ids),
            profile_id="diego",
            date=day,
            description=description,
            amount=amount,
            type=TransactionType(tx_type),
            category=category,
            budget_group=budget_group,
            budget_line=budget_line,
        )

    return _make


@pytest.fixture
def make_line():
    """Factory for BudgetLine records."""
    ids = count(1)

    def _make(
        group: str,
        line: str,
        monthly_amount: float = 0.0,
        annual_amount: float = 0.0,
        is_annual: bool = False,
        year: int = 2026,
    ) -> BudgetLine:
        return BudgetLine(
            id=next(ids),
            profile_id="diego",
            budget_group=BudgetGroup(group),
            line_name=line,
            monthly_amount=monthly_amount,
            annual_amount=annual_amount,
            is_annual=is_annual,
            year=year,
        )

    return _make


@pytest.fixture
def temp_db(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Point the ledger store at an empty temporary SQLite file."""
    db_path = tmp_path / "finances.db"
    monkeypatch.setattr(db_mod, "DB_PATH", str(db_path))
    db_mod.init_db(seed=False)
    db_mod.create_profile("diego", "Diego", "Personal")
    return db_mod

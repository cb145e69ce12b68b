"""Tests for the SQLite ledger store."""

from __future__ import annotations

import sqlite3

import pandas as pd
import pytest

from budget_dashboard import db as db_mod
from budget_dashboard import service
from budget_dashboard.seed import DEFAULT_BUDGET_LINES, DEFAULT_PROFILES


def _rows(*rows):
    return pd.DataFrame(list(rows))


def _tx(date, amount, description="Coffee", tx_type="expense", **extra):
    row = {"date": date, "description": description, "amount": amount, "type": tx_type}
    row.update(extra)
    return row


def test_init_db_seeds_defaults_once(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(db_mod, "DB_PATH", str(tmp_path / "seeded.db"))
    db_mod.init_db()
    db_mod.init_db()

    profiles = db_mod.fetch_profiles()
    assert sorted(profiles["id"]) == sorted(p[0] for p in DEFAULT_PROFILES)

    with db_mod.connect() as conn:
        total = conn.execute("SELECT COUNT(*) FROM budget_lines").fetchone()[0]
    assert total == len(DEFAULT_BUDGET_LINES)

    annual = db_mod.fetch_budget_lines("diego", 2026)
    insurance = annual.loc[annual["line_name"] == "Seguro coche"].iloc[0]
    assert bool(insurance["is_annual"])


def test_fetch_profile(temp_db) -> None:
    assert temp_db.fetch_profile("diego") == {"id": "diego", "name": "Diego", "description": "Personal"}
    assert temp_db.fetch_profile("missing") is None


def test_insert_batch_and_fetch_by_period(temp_db) -> None:
    batch_id = temp_db.insert_transactions(
        "diego",
        _rows(
            _tx("2026-01-31", 4.5),
            _tx("2026-01-02", 1000, "Rent", budget_group="Fixed Costs", budget_line="Rent"),
            _tx("2026-02-01", 3.2),
        ),
        filename="jan.csv",
        source="Santander",
    )

    january = temp_db.fetch_transactions("diego", month=1, year=2026)
    assert list(january["date"]) == ["2026-01-02", "2026-01-31"]
    assert set(january["upload_batch_id"]) == {batch_id}
    assert list(january["month"]) == [1, 1]

    uploads = temp_db.fetch_uploads("diego")
    assert uploads.iloc[0]["transaction_count"] == 3
    assert uploads.iloc[0]["filename"] == "jan.csv"

    assert len(temp_db.fetch_transactions("diego", year=2026)) == 3
    assert temp_db.fetch_transactions("marta").empty


def test_insert_rejects_negative_amounts_and_unknown_types(temp_db) -> None:
    with pytest.raises(ValueError):
        temp_db.insert_transactions("diego", _rows(_tx("2026-01-01", -5)))
    with pytest.raises(ValueError):
        temp_db.insert_transactions("diego", _rows(_tx("2026-01-01", 5, tx_type="refund")))
    with pytest.raises(ValueError):
        temp_db.insert_transactions("diego", pd.DataFrame())
    assert temp_db.fetch_transactions("diego").empty


def test_delete_upload_batch_rolls_back_only_that_batch(temp_db) -> None:
    first = temp_db.insert_transactions("diego", _rows(_tx("2026-01-01", 1), _tx("2026-01-02", 2)))
    temp_db.insert_transactions("diego", _rows(_tx("2026-01-03", 3)))

    assert temp_db.delete_upload_batch(first) == 2

    remaining = temp_db.fetch_transactions("diego")
    assert list(remaining["amount"]) == [3.0]
    assert len(temp_db.fetch_uploads("diego")) == 1


def test_update_transaction(temp_db) -> None:
    tx_id = temp_db.insert_transaction("diego", **_tx("2026-03-01", 12))

    assert temp_db.update_transaction(tx_id, category="Books", type="CREDIT", notes="  ")
    row = temp_db.fetch_transactions("diego").iloc[0]
    assert row["category"] == "Books"
    assert row["type"] == "credit"
    assert pd.isna(row["notes"])

    assert not temp_db.update_transaction(9999, category="Books")
    with pytest.raises(ValueError):
        temp_db.update_transaction(tx_id, profile_id="marta")
    with pytest.raises(ValueError):
        temp_db.update_transaction(tx_id)
    with pytest.raises(ValueError):
        temp_db.update_transaction(tx_id, amount=-1)
    with pytest.raises(ValueError):
        temp_db.update_transaction(tx_id, description="   ")
    assert temp_db.fetch_transactions("diego").iloc[0]["description"] == "Coffee"


def test_bulk_replace_and_distinct_values(temp_db) -> None:
    temp_db.insert_transactions(
        "diego",
        _rows(
            _tx("2025-12-30", 1, source="BBVA"),
            _tx("2026-01-01", 2, source="BBVA"),
            _tx("2026-01-02", 3, source="BBVA"),
            _tx("2026-01-03", 4, source="Revolut"),
        ),
    )

    values = temp_db.distinct_values("diego", "source", year=2026)
    assert values.to_dict(orient="records") == [
        {"value": "BBVA", "count": 2},
        {"value": "Revolut", "count": 1},
    ]

    assert temp_db.bulk_replace("diego", "source", "BBVA", "BBVA Cuenta", year=2026) == 2
    sources = temp_db.fetch_transactions("diego")["source"].tolist()
    assert sources == ["BBVA", "BBVA Cuenta", "BBVA Cuenta", "Revolut"]

    with pytest.raises(ValueError):
        temp_db.bulk_replace("diego", "amount", 1, 2)
    with pytest.raises(ValueError):
        temp_db.distinct_values("diego", "description")


def test_delete_transactions(temp_db) -> None:
    ids = [temp_db.insert_transaction("diego", **_tx(f"2026-01-0{d}", d)) for d in (1, 2, 3)]

    assert temp_db.delete_transaction(ids[0])
    assert not temp_db.delete_transaction(ids[0])
    assert temp_db.delete_transactions(ids[1:]) == 2
    assert temp_db.fetch_transactions("diego").empty
    with pytest.raises(ValueError):
        temp_db.delete_transactions([])


def test_fetch_uncategorized(temp_db) -> None:
    temp_db.insert_transactions(
        "diego",
        _rows(
            _tx("2026-01-01", 1, category="Groceries"),
            _tx("2026-01-02", 2, category="Uncategorized"),
            _tx("2026-01-03", 3),
        ),
    )
    df = temp_db.fetch_uncategorized("diego")
    assert sorted(df["amount"]) == [2.0, 3.0]


def test_find_duplicate_groups(temp_db) -> None:
    temp_db.insert_transactions(
        "diego",
        _rows(
            _tx("2026-01-05", 9.99, "Netflix", source="BBVA"),
            _tx("2026-01-05", 9.99, "NETFLIX.COM", source="Revolut"),
            _tx("2026-01-05", 9.99, "Netflix", source="Revolut"),
            _tx("2026-01-06", 20, "Taxi"),
            _tx("2026-01-06", 20, "Taxi"),
            _tx("2026-01-07", 20, "Taxi"),
        ),
    )

    result = temp_db.find_duplicate_groups("diego")

    assert [len(g["transactions"]) for g in result["groups"]] == [3, 2]
    assert result["groups"][0]["amount"] == pytest.approx(9.99)
    assert result["total_duplicates"] == 3
    assert temp_db.find_duplicate_groups("marta") == {"groups": [], "total_duplicates": 0}


def test_create_budget_line_derives_amounts(temp_db) -> None:
    temp_db.create_budget_line("diego", "Fixed Costs", "Rent", monthly_amount=1000, year=2026)
    temp_db.create_budget_line("diego", "Guilt-Free", "Travel", annual_amount=1200, is_annual=True, year=2026)

    lines = temp_db.fetch_budget_lines("diego", 2026).set_index("line_name")
    assert lines.loc["Rent", "annual_amount"] == pytest.approx(12000.0)
    assert lines.loc["Travel", "monthly_amount"] == pytest.approx(100.0)

    with pytest.raises(sqlite3.IntegrityError):
        temp_db.create_budget_line("diego", "Fixed Costs", "Rent", monthly_amount=900, year=2026)
    with pytest.raises(ValueError):
        temp_db.create_budget_line("diego", "Hobbies", "Climbing", monthly_amount=50, year=2026)


def test_update_budget_line_rederives(temp_db) -> None:
    line_id = temp_db.create_budget_line("diego", "Fixed Costs", "Gym", monthly_amount=40, year=2026)

    assert temp_db.update_budget_line(line_id, monthly_amount=50)
    row = temp_db.fetch_budget_lines("diego", 2026).iloc[0]
    assert row["annual_amount"] == pytest.approx(600.0)

    assert temp_db.update_budget_line(line_id, is_annual=True, annual_amount=360)
    row = temp_db.fetch_budget_lines("diego", 2026).iloc[0]
    assert row["monthly_amount"] == pytest.approx(30.0)
    assert row["is_annual"] == 1

    assert not temp_db.update_budget_line(9999, monthly_amount=1)
    with pytest.raises(ValueError):
        temp_db.update_budget_line(line_id, year=2027)

    assert temp_db.delete_budget_line(line_id)
    assert temp_db.fetch_budget_lines("diego", 2026).empty


def test_rename_budget_line_keeps_line_and_group_actuals_consistent(temp_db) -> None:
    line_id = temp_db.create_budget_line("diego", "Fixed Costs", "Rent", monthly_amount=1000, year=2026)

    assert temp_db.update_budget_line(line_id, line_name="  Alquiler ")
    assert temp_db.fetch_budget_lines("diego", 2026).iloc[0]["line_name"] == "Alquiler"
    with pytest.raises(ValueError):
        temp_db.update_budget_line(line_id, line_name="   ")

    temp_db.insert_transaction(
        "diego", **_tx("2026-01-01", 1000, description="January rent",
                       budget_group="Fixed Costs", budget_line="Alquiler ")
    )
    summary = service.get_monthly_summary("diego", 1, 2026)

    (line,) = summary.lines
    (group,) = summary.groups
    assert line.line == "Alquiler"
    assert line.actual == pytest.approx(1000.0)
    assert group.actual == pytest.approx(line.actual)


def test_upload_timestamps_are_utc_aware(temp_db) -> None:
    temp_db.insert_transaction("diego", **_tx("2026-01-02", 5))
    temp_db.insert_transactions("diego", _rows(_tx("2026-01-03", 6)), filename="jan.csv")

    assert temp_db.fetch_transactions("diego")["created_at"].str.endswith("+00:00").all()
    assert temp_db.fetch_uploads("diego").iloc[0]["uploaded_at"].endswith("+00:00")

from __future__ import annotations

import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence

import pandas as pd

from .config import DB_PATH, SEED_YEAR
from .logging_config import get_logger
from .models import BudgetGroup, TransactionType, derive_budget_amounts
from .seed import DEFAULT_BUDGET_LINES, DEFAULT_PROFILES

logger = get_logger(__name__)

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA synchronous=NORMAL;

CREATE TABLE IF NOT EXISTS profiles (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT
);

CREATE TABLE IF NOT EXISTS budget_lines (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    profile_id TEXT NOT NULL,
    budget_group TEXT NOT NULL,
    line_name TEXT NOT NULL,
    monthly_amount REAL DEFAULT 0,
    annual_amount REAL DEFAULT 0,
    is_annual INTEGER DEFAULT 0,
    year INTEGER NOT NULL,
    UNIQUE(profile_id, line_name, year)
);

CREATE TABLE IF NOT EXISTS transactions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    profile_id TEXT NOT NULL,
    date TEXT NOT NULL,
    description TEXT NOT NULL,
    amount REAL NOT NULL,
    type TEXT NOT NULL,
    source TEXT,
    category TEXT,
    budget_group TEXT,
    budget_line TEXT,
    notes TEXT,
    upload_batch_id TEXT,
    month INTEGER NOT NULL,
    year INTEGER NOT NULL,
    created_at TEXT
);

CREATE TABLE IF NOT EXISTS uploads (
    id TEXT PRIMARY KEY,
    profile_id TEXT NOT NULL,
    source TEXT NOT NULL,
    filename TEXT NOT NULL,
    uploaded_at TEXT,
    transaction_count INTEGER DEFAULT 0
);

CREATE INDEX IF NOT EXISTS ix_tx_profile_month ON transactions (profile_id, month, year);
CREATE INDEX IF NOT EXISTS ix_tx_profile_year ON transactions (profile_id, year);
CREATE INDEX IF NOT EXISTS ix_tx_batch ON transactions (upload_batch_id);
CREATE INDEX IF NOT EXISTS ix_budget_profile ON budget_lines (profile_id, year);
"""

TRANSACTION_SELECT = (
    "SELECT id, profile_id, date, description, amount, type, source, category, "
    "budget_group, budget_line, notes, upload_batch_id, month, year, created_at "
    "FROM transactions"
)

# Fields a single transaction edit may touch
EDITABLE_TRANSACTION_FIELDS = (
    'category', 'budget_group', 'budget_line', 'notes', 'type', 'description', 'amount',
)
# Fields the find-and-replace tool may rewrite across many rows
BULK_FIELDS = ('source', 'category', 'budget_group', 'budget_line', 'type')
EDITABLE_BUDGET_FIELDS = ('budget_group', 'line_name', 'monthly_amount', 'annual_amount', 'is_annual')


def _ensure_dirs() -> None:
    Path(DB_PATH).parent.mkdir(parents=True, exist_ok=True)


@contextmanager
def connect() -> Iterator[sqlite3.Connection]:
    _ensure_dirs()
    conn = sqlite3.connect(str(DB_PATH))
    try:
        yield conn
    finally:
        conn.close()


def init_db(seed: bool = True) -> None:
    with connect() as conn:
        conn.executescript(SCHEMA_SQL)
        conn.commit()
        if seed:
            _seed_defaults(conn)


def _seed_defaults(conn: sqlite3.Connection) -> None:
    """Insert default profiles and budget lines into empty tables."""
    if conn.execute("SELECT COUNT(*) FROM profiles").fetchone()[0] == 0:
        conn.executemany(
            "INSERT INTO profiles (id, name, description) VALUES (?, ?, ?)",
            DEFAULT_PROFILES,
        )
        logger.info("Seeded %d default profiles", len(DEFAULT_PROFILES))

    if conn.execute("SELECT COUNT(*) FROM budget_lines").fetchone()[0] == 0:
        conn.executemany(
            "INSERT INTO budget_lines (profile_id, budget_group, line_name, monthly_amount, "
            "annual_amount, is_annual, year) VALUES (?, ?, ?, ?, ?, ?, ?)",
            [
                (profile_id, group, line, monthly, annual, int(is_annual), SEED_YEAR)
                for profile_id, group, line, monthly, annual, is_annual in DEFAULT_BUDGET_LINES
            ],
        )
        logger.info("Seeded %d budget lines for %s", len(DEFAULT_BUDGET_LINES), SEED_YEAR)
    conn.commit()


def _to_iso_date(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if hasattr(value, 'to_pydatetime'):
        value = value.to_pydatetime()
    if isinstance(value, datetime):
        return value.date().isoformat()
    ts = pd.to_datetime(value, errors='coerce')
    if pd.isna(ts):
        return None
    return ts.date().isoformat()


def _sanitize_db_value(value: Any) -> Any:
    """Convert pandas NA/NaT and empty strings to SQLite-friendly values."""
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else None
    if pd.isna(value):
        return None
    return value


def _validated_amount(value: Any) -> float:
    amount = float(value)
    if amount < 0:
        raise ValueError(f"Transaction amounts are stored as magnitudes, got {amount}")
    return amount


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


def fetch_profile(profile_id: str) -> Optional[Dict[str, Any]]:
    with connect() as conn:
        row = conn.execute(
            "SELECT id, name, description FROM profiles WHERE id = ?", (profile_id,)
        ).fetchone()
    if row is None:
        return None
    return {"id": row[0], "name": row[1], "description": row[2]}


def fetch_profiles() -> pd.DataFrame:
    with connect() as conn:
        return pd.read_sql_query("SELECT id, name, description FROM profiles ORDER BY id", conn)


def create_profile(profile_id: str, name: str, description: Optional[str] = None) -> None:
    with connect() as conn:
        conn.execute(
            "INSERT INTO profiles (id, name, description) VALUES (?, ?, ?)",
            (profile_id, name, description),
        )
        conn.commit()
    logger.info("Created profile %s", profile_id)


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


def fetch_transactions(
    profile_id: str,
    month: Optional[int] = None,
    year: Optional[int] = None,
) -> pd.DataFrame:
    """Fetch a profile's transactions, optionally scoped to a month and/or year.

    Rows are ordered by date ascending, then id.
    """
    where: List[str] = ["profile_id = ?"]
    params: List[Any] = [profile_id]

    if month is not None:
        where.append("month = ?")
        params.append(int(month))
    if year is not None:
        where.append("year = ?")
        params.append(int(year))

    sql = TRANSACTION_SELECT + " WHERE " + " AND ".join(where) + " ORDER BY date ASC, id ASC"
    with connect() as conn:
        return pd.read_sql_query(sql, conn, params=params)


def fetch_uncategorized(profile_id: Optional[str] = None) -> pd.DataFrame:
    """Fetch transactions with NULL, empty or 'Uncategorized' category."""
    sql = TRANSACTION_SELECT + " WHERE (category IS NULL OR category = '' OR category = 'Uncategorized')"
    params: List[Any] = []
    if profile_id:
        sql += " AND profile_id = ?"
        params.append(profile_id)
    sql += " ORDER BY date DESC, id DESC"
    with connect() as conn:
        return pd.read_sql_query(sql, conn, params=params)


def _transaction_record(profile_id: str, row: Dict[str, Any], batch_id: Optional[str], created_at: str):
    iso_date = _to_iso_date(row.get('date'))
    if iso_date is None:
        raise ValueError(f"Transaction is missing a valid date: {row!r}")
    tx_date = datetime.fromisoformat(iso_date)
    return (
        profile_id,
        iso_date,
        _sanitize_db_value(row.get('description')) or 'Unknown',
        _validated_amount(row.get('amount')),
        TransactionType.parse(row.get('type')).value,
        _sanitize_db_value(row.get('source')),
        _sanitize_db_value(row.get('category')),
        _sanitize_db_value(row.get('budget_group')),
        _sanitize_db_value(row.get('budget_line')),
        _sanitize_db_value(row.get('notes')),
        batch_id,
        tx_date.month,
        tx_date.year,
        created_at,
    )


_INSERT_TRANSACTION_SQL = (
    "INSERT INTO transactions (profile_id, date, description, amount, type, source, category, "
    "budget_group, budget_line, notes, upload_batch_id, month, year, created_at) "
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)"
)


def insert_transactions(
    profile_id: str,
    df: pd.DataFrame,
    filename: str = 'upload.csv',
    source: Optional[str] = None,
) -> str:
    """Save a batch of parsed transactions under one upload id.

    Returns the new batch id.  The upload record and its transactions are
    written in a single commit.
    """
    if df is None or df.empty:
        raise ValueError("No transactions to save")

    batch_id = str(uuid.uuid4())
    created_at = datetime.now(timezone.utc).isoformat()
    records = [
        _transaction_record(profile_id, row, batch_id, created_at)
        for row in df.to_dict(orient='records')
    ]

    with connect() as conn:
        conn.execute(
            "INSERT INTO uploads (id, profile_id, source, filename, uploaded_at, transaction_count) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (batch_id, profile_id, source or 'Unknown', filename or 'upload.csv', created_at, len(records)),
        )
        conn.executemany(_INSERT_TRANSACTION_SQL, records)
        conn.commit()

    logger.info("Saved %d transactions for %s in batch %s", len(records), profile_id, batch_id)
    return batch_id


def insert_transaction(profile_id: str, **fields: Any) -> int:
    """Insert a single transaction outside any upload batch and return its id."""
    record = _transaction_record(profile_id, fields, None, datetime.now(timezone.utc).isoformat())
    with connect() as conn:
        cursor = conn.execute(_INSERT_TRANSACTION_SQL, record)
        conn.commit()
        return int(cursor.lastrowid)


def update_transaction(transaction_id: int, **fields: Any) -> bool:
    """Update editable fields of a transaction.

    Returns True if a row was updated.
    """
    unknown = set(fields) - set(EDITABLE_TRANSACTION_FIELDS)
    if unknown:
        raise ValueError(f"Fields not editable: {', '.join(sorted(unknown))}")
    if not fields:
        raise ValueError("No fields to update")

    updates = []
    params: List[Any] = []
    for name, value in fields.items():
        if name == 'amount':
            value = _validated_amount(value)
        elif name == 'type':
            value = TransactionType.parse(value).value
        else:
            value = _sanitize_db_value(value)
            if name == 'description' and value is None:
                raise ValueError("description cannot be empty")
        updates.append(f"{name} = ?")
        params.append(value)

    params.append(transaction_id)
    sql = f"UPDATE transactions SET {', '.join(updates)} WHERE id = ?"

    with connect() as conn:
        cursor = conn.cursor()
        cursor.execute(sql, params)
        conn.commit()
        return cursor.rowcount > 0


def bulk_replace(
    profile_id: str,
    field: str,
    old_value: Any,
    new_value: Any,
    year: Optional[int] = None,
) -> int:
    """Replace ``old_value`` with ``new_value`` in ``field`` across a profile's transactions.

    Returns the number of rows changed.
    """
    if field not in BULK_FIELDS:
        raise ValueError(f"Invalid field. Allowed: {', '.join(BULK_FIELDS)}")
    if field == 'type':
        new_value = TransactionType.parse(new_value).value

    sql = f"UPDATE transactions SET {field} = ? WHERE profile_id = ? AND {field} = ?"
    params: List[Any] = [new_value, profile_id, old_value]
    if year is not None:
        sql += " AND year = ?"
        params.append(int(year))

    with connect() as conn:
        cursor = conn.execute(sql, params)
        conn.commit()
        changed = cursor.rowcount
    logger.info("Bulk replaced %s '%s' -> '%s' on %d rows for %s", field, old_value, new_value, changed, profile_id)
    return changed


def distinct_values(profile_id: str, field: str = 'source', year: Optional[int] = None) -> pd.DataFrame:
    """Return distinct non-null values of ``field`` with their row counts, most used first."""
    if field not in BULK_FIELDS:
        raise ValueError(f"Invalid field. Allowed: {', '.join(BULK_FIELDS)}")

    sql = f"SELECT {field} AS value, COUNT(*) AS count FROM transactions WHERE profile_id = ? AND {field} IS NOT NULL"
    params: List[Any] = [profile_id]
    if year is not None:
        sql += " AND year = ?"
        params.append(int(year))
    sql += f" GROUP BY {field} ORDER BY count DESC, value ASC"

    with connect() as conn:
        return pd.read_sql_query(sql, conn, params=params)


def delete_transaction(transaction_id: int) -> bool:
    with connect() as conn:
        cursor = conn.execute("DELETE FROM transactions WHERE id = ?", (transaction_id,))
        conn.commit()
        return cursor.rowcount > 0


def delete_transactions(ids: Sequence[int]) -> int:
    """Delete several transactions by id; returns the number deleted."""
    if not ids:
        raise ValueError("ids must not be empty")
    placeholders = ", ".join("?" for _ in ids)
    with connect() as conn:
        cursor = conn.execute(f"DELETE FROM transactions WHERE id IN ({placeholders})", [int(i) for i in ids])
        conn.commit()
        deleted = cursor.rowcount
    logger.info("Deleted %d transactions", deleted)
    return deleted


def delete_upload_batch(batch_id: str) -> int:
    """Roll back an upload: remove its transactions and the upload record."""
    with connect() as conn:
        cursor = conn.execute("DELETE FROM transactions WHERE upload_batch_id = ?", (batch_id,))
        deleted = cursor.rowcount
        conn.execute("DELETE FROM uploads WHERE id = ?", (batch_id,))
        conn.commit()
    logger.info("Rolled back upload %s (%d transactions)", batch_id, deleted)
    return deleted


def fetch_uploads(profile_id: str) -> pd.DataFrame:
    with connect() as conn:
        return pd.read_sql_query(
            "SELECT id, profile_id, source, filename, uploaded_at, transaction_count "
            "FROM uploads WHERE profile_id = ? ORDER BY uploaded_at DESC",
            conn,
            params=[profile_id],
        )


def find_duplicate_groups(profile_id: str, year: Optional[int] = None) -> Dict[str, Any]:
    """Group a profile's transactions that share a date and amount.

    The result contains:
        ``groups``: list of dicts (``key``, ``date``, ``amount``,
        ``description``, ``transactions`` DataFrame), largest group first.
        ``total_duplicates``: rows that could be removed, keeping one per group.
    """
    result: Dict[str, Any] = {'groups': [], 'total_duplicates': 0}
    df = fetch_transactions(profile_id, year=year)
    if df.empty:
        return result

    df = df.copy()
    df['__key__'] = df['date'].astype(str) + '|' + df['amount'].astype(float).map(lambda a: f"{a:.2f}")
    sizes = df.groupby('__key__', sort=False)['id'].transform('size')
    dupes = df[sizes >= 2]
    if dupes.empty:
        return result

    groups = []
    for key, members in dupes.groupby('__key__', sort=False):
        members = members.drop(columns='__key__')
        first = members.iloc[0]
        groups.append({
            'key': key,
            'date': first['date'],
            'amount': float(first['amount']),
            'description': first['description'],
            'transactions': members.reset_index(drop=True),
        })

    groups.sort(key=lambda g: len(g['transactions']), reverse=True)
    result['groups'] = groups
    result['total_duplicates'] = sum(len(g['transactions']) - 1 for g in groups)
    return result


# ---------------------------------------------------------------------------
# Budget lines
# ---------------------------------------------------------------------------


def fetch_budget_lines(profile_id: str, year: int) -> pd.DataFrame:
    with connect() as conn:
        return pd.read_sql_query(
            "SELECT id, profile_id, budget_group, line_name, monthly_amount, annual_amount, is_annual, year "
            "FROM budget_lines WHERE profile_id = ? AND year = ? ORDER BY id",
            conn,
            params=[profile_id, int(year)],
        )


def create_budget_line(
    profile_id: str,
    budget_group: str,
    line_name: str,
    monthly_amount: Optional[float] = None,
    annual_amount: Optional[float] = None,
    is_annual: bool = False,
    year: Optional[int] = None,
) -> int:
    """Create a budget line, deriving the non-authoritative amount.

    Raises sqlite3.IntegrityError when the profile already has a line with
    this name for the year.
    """
    group = BudgetGroup.parse(budget_group)
    if not line_name or not str(line_name).strip():
        raise ValueError("line_name is required")
    monthly, annual = derive_budget_amounts(monthly_amount, annual_amount, is_annual)
    budget_year = int(year) if year is not None else datetime.now().year

    with connect() as conn:
        cursor = conn.execute(
            "INSERT INTO budget_lines (profile_id, budget_group, line_name, monthly_amount, "
            "annual_amount, is_annual, year) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (profile_id, group.value, str(line_name).strip(), monthly, annual, int(bool(is_annual)), budget_year),
        )
        conn.commit()
        line_id = int(cursor.lastrowid)
    logger.info("Created budget line %s/%s for %s %s", group.value, line_name, profile_id, budget_year)
    return line_id


def update_budget_line(line_id: int, **fields: Any) -> bool:
    """Patch a budget line.

    Changing the authoritative amount re-derives the other one unless it is
    patched in the same call.
    """
    unknown = set(fields) - set(EDITABLE_BUDGET_FIELDS)
    if unknown:
        raise ValueError(f"Fields not editable: {', '.join(sorted(unknown))}")
    if not fields:
        raise ValueError("No fields to update")

    with connect() as conn:
        current = conn.execute(
            "SELECT monthly_amount, annual_amount, is_annual FROM budget_lines WHERE id = ?", (line_id,)
        ).fetchone()
        if current is None:
            return False

        patch = dict(fields)
        if 'line_name' in patch:
            line_name = _sanitize_db_value(patch['line_name'])
            if line_name is None:
                raise ValueError("line_name is required")
            patch['line_name'] = str(line_name)
        if 'budget_group' in patch:
            patch['budget_group'] = BudgetGroup.parse(patch['budget_group']).value
        if 'is_annual' in patch:
            patch['is_annual'] = int(bool(patch['is_annual']))

        is_annual = bool(patch.get('is_annual', current[2]))
        if 'monthly_amount' in patch or 'annual_amount' in patch:
            monthly_in = patch.get('monthly_amount')
            annual_in = patch.get('annual_amount')
            if is_annual:
                annual_in = annual_in if annual_in is not None else current[1]
            else:
                monthly_in = monthly_in if monthly_in is not None else current[0]
            monthly, annual = derive_budget_amounts(monthly_in, annual_in, is_annual)
            patch['monthly_amount'] = monthly
            patch['annual_amount'] = annual

        updates = [f"{name} = ?" for name in patch]
        params = list(patch.values()) + [line_id]
        cursor = conn.execute(f"UPDATE budget_lines SET {', '.join(updates)} WHERE id = ?", params)
        conn.commit()
        return cursor.rowcount > 0


def delete_budget_line(line_id: int) -> bool:
    with connect() as conn:
        cursor = conn.execute("DELETE FROM budget_lines WHERE id = ?", (line_id,))
        conn.commit()
        return cursor.rowcount > 0

"""Import of categorized transaction files.

Bank statements are turned into categorized rows by an external parser
(one row per transaction with ``date, description, amount, type, source,
category, budget_group, budget_line, notes``).  This module loads such a
file, applies the parser's defaults to missing fields and saves the rows
as one upload batch.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional, Tuple

import pandas as pd

from . import db
from .logging_config import get_logger
from .models import TransactionType

logger = get_logger(__name__)

PARSED_COLUMNS = [
    "date",
    "description",
    "amount",
    "type",
    "source",
    "category",
    "budget_group",
    "budget_line",
    "notes",
]

# Values the parser falls back to when it leaves a field empty
PARSED_DEFAULTS = {
    "description": "Unknown",
    "type": TransactionType.EXPENSE.value,
    "source": "Unknown",
    "category": "Uncategorized",
    "budget_group": "Guilt-Free",
    "budget_line": "—",
    "notes": "",
}


# ---------------------------------------------------------------------------
# File loading
# ---------------------------------------------------------------------------


def read_file(path_or_buffer) -> pd.DataFrame:
    """Load a CSV or Excel file into a DataFrame with encoding/delimiter fallbacks."""
    csv_kwargs = {"index_col": False}

    if hasattr(path_or_buffer, "read"):
        name = getattr(path_or_buffer, "name", "uploaded_file.csv").lower()
        if name.endswith((".xlsx", ".xls")):
            return pd.read_excel(path_or_buffer)
        return pd.read_csv(path_or_buffer, **csv_kwargs)

    path = Path(path_or_buffer)
    ext = path.suffix.lower()
    if ext in {".csv", ""}:
        encodings = ['utf-8', 'utf-8-sig', 'latin-1', 'cp1252']
        delimiters = [',', ';', '\t', '|']
        for encoding in encodings:
            for delimiter in delimiters:
                try:
                    df = pd.read_csv(path, encoding=encoding, delimiter=delimiter, **csv_kwargs)
                except (UnicodeDecodeError, pd.errors.ParserError):
                    continue
                if df.shape[1] > 1:
                    return df.reset_index(drop=True)
        return pd.read_csv(path, **csv_kwargs).reset_index(drop=True)
    if ext in {".xlsx", ".xls"}:
        return pd.read_excel(path)
    raise ValueError(f"Unsupported file extension '{ext}'.")


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def _normalise_header(name: Any) -> str:
    return str(name).strip().lower().replace(" ", "_").replace("-", "_")


def _parse_amount(value: Any) -> Optional[float]:
    """Convert textual amounts ("1.234,50", "(12.00)", "$5") into non-negative floats."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, (int, float)):
        if pd.isna(value):
            return None
        return abs(float(value))
    cleaned = str(value).strip()
    if cleaned.startswith("(") and cleaned.endswith(")"):
        cleaned = cleaned[1:-1]
    cleaned = cleaned.replace("$", "").replace("€", "").replace(" ", "")
    last_comma, last_dot = cleaned.rfind(","), cleaned.rfind(".")
    if last_comma > last_dot and (last_dot >= 0 or len(cleaned) - last_comma - 1 == 2):
        # decimal comma, optional dot thousands separators
        cleaned = cleaned.replace(".", "").replace(",", ".")
    else:
        cleaned = cleaned.replace(",", "")
    number = pd.to_numeric([cleaned], errors="coerce")[0]
    if pd.isna(number):
        return None
    return abs(float(number))


def _normalise_type(value: Any) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)) or not str(value).strip():
        return PARSED_DEFAULTS["type"]
    return TransactionType.parse(value).value


def normalize_parsed_transactions(df: pd.DataFrame) -> pd.DataFrame:
    """Coerce parsed rows into the store's column set.

    Rows with an unparseable date or amount are dropped; a description of
    each is stored in ``df.attrs['normalization_issues']``.  An unknown
    transaction type raises ``ValueError``.
    """
    issues: List[str] = []
    working = df.rename(columns={col: _normalise_header(col) for col in df.columns}).copy()

    for column in PARSED_COLUMNS:
        if column not in working.columns:
            working[column] = pd.NA

    working = working[PARSED_COLUMNS].copy()
    working["date"] = pd.to_datetime(working["date"], errors="coerce")
    working["amount"] = working["amount"].map(_parse_amount)

    invalid = working["date"].isna() | working["amount"].isna()
    for idx in working.index[invalid]:
        issues.append(f"Row {idx + 1}: missing or invalid date/amount")
    working = working.loc[~invalid].copy()

    working["type"] = working["type"].map(_normalise_type)
    for column, default in PARSED_DEFAULTS.items():
        if column == "type":
            continue
        working[column] = working[column].astype("object").map(
            lambda v, d=default: d if v is None or pd.isna(v) or not str(v).strip() else str(v).strip()
        )

    working["date"] = working["date"].dt.date.map(lambda d: d.isoformat())
    working = working.reset_index(drop=True)
    working.attrs["normalization_issues"] = issues
    if issues:
        logger.warning("Dropped %d unparseable rows during import", len(issues))
    return working


def import_file(
    profile_id: str,
    path_or_buffer,
    source: Optional[str] = None,
    filename: Optional[str] = None,
) -> Tuple[str, int]:
    """Load, normalize and save a parsed transaction file as one upload batch.

    Returns:
        Tuple of (batch id, number of transactions saved)
    """
    raw = read_file(path_or_buffer)
    normalized = normalize_parsed_transactions(raw)
    if normalized.empty:
        raise ValueError("File contains no importable transactions")

    if source:
        normalized["source"] = source
    name = filename or getattr(path_or_buffer, "name", None) or Path(str(path_or_buffer)).name
    batch_source = source or normalized["source"].mode().iat[0]
    batch_id = db.insert_transactions(profile_id, normalized, filename=Path(str(name)).name, source=batch_source)
    return batch_id, len(normalized)

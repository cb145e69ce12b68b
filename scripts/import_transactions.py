#!/usr/bin/env python3
"""Import a categorized transaction file into a profile's ledger."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from budget_dashboard import db, ingest
from budget_dashboard.logging_config import setup_logging


def main(profile_id: str, path: Path, source: str | None = None) -> int:
    db.init_db()
    if db.fetch_profile(profile_id) is None:
        print(f"Unknown profile '{profile_id}'", file=sys.stderr)
        return 1
    try:
        batch_id, count = ingest.import_file(profile_id, path, source=source)
    except (OSError, ValueError) as exc:
        print(f"Import failed: {exc}", file=sys.stderr)
        return 1
    print(f"Imported {count} transactions (batch {batch_id})")
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Import a parsed transaction CSV/Excel file.')
    parser.add_argument('profile', help='Profile id, e.g. diego')
    parser.add_argument('path', type=Path, help='CSV or Excel file')
    parser.add_argument('--source', default=None, help='Bank/account label to stamp on every row')
    args = parser.parse_args()
    setup_logging()
    sys.exit(main(args.profile, args.path, args.source))

#!/usr/bin/env python3
"""Show the most common uncategorized transactions to help clean up the ledger."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from budget_dashboard import db


def main(profile_id: Optional[str] = None, limit: int = 50) -> None:
    db.init_db()
    df = db.fetch_uncategorized(profile_id)
    if df.empty:
        print("All transactions are categorized. 🎉")
        return

    print(f"Total uncategorized: {len(df)}")
    freq = df['description'].value_counts().head(limit)
    print("\nTop descriptions:")
    print(freq.to_string())

    if profile_id is None:
        print("\nBy profile:")
        print(df['profile_id'].value_counts().to_string())

    sample_columns: List[str] = ['date', 'description', 'amount', 'type', 'profile_id', 'source']
    print("\nSample rows:")
    print(df[sample_columns].head(20).to_string(index=False))


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Show uncategorized transaction stats.')
    parser.add_argument('--profile', default=None, help='Only show this profile id')
    parser.add_argument('--limit', type=int, default=50, help='How many top descriptions to show')
    args = parser.parse_args()
    main(profile_id=args.profile, limit=args.limit)

"""Configuration management for the budget dashboard.

This module centralizes all configuration values including paths,
defaults, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base project root - assumes this file is in budget_dashboard/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("BUDGET_DATA_DIR", _PROJECT_ROOT / "data"))

# Database
DB_PATH = Path(
    os.getenv("BUDGET_DB_PATH", DATA_DIR / "finances.db")
).resolve()

# UI preferences cache
CACHE_PATH = DATA_DIR / "persistent_cache.json"

# Yearly pacing: 'calendar' compares every year against today's month,
# 'elapsed' treats past years as fully elapsed and future years as not started.
PACE_MODES = ("calendar", "elapsed")
PACE_MODE = os.getenv("BUDGET_PACE_MODE", "calendar").strip().lower()
if PACE_MODE not in PACE_MODES:
    PACE_MODE = "calendar"

# Logging
LOG_LEVEL = os.getenv("BUDGET_LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("BUDGET_LOG_FILE")

# Year the bundled budget seed applies to
SEED_YEAR = int(os.getenv("BUDGET_SEED_YEAR", "2026"))


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, DB_PATH.parent, CACHE_PATH.parent]:
        directory.mkdir(parents=True, exist_ok=True)

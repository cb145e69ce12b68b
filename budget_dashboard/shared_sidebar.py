"""Shared sidebar components for the multi-page dashboard.

Every page calls :func:`render_shared_sidebar` to get the selected
profile and period, so switching pages keeps the same selection.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict

import streamlit as st

from . import config, db, ingest
from .logging_config import get_logger
from .persistent_cache import load_cache as load_persistent_cache, save_cache as save_persistent_cache
from .visualization import MONTH_LABELS

logger = get_logger(__name__)


def render_shared_sidebar(show_month: bool = True) -> Dict[str, Any]:
    """Render profile, period and import controls.

    Returns:
        Dict with keys: 'profile_id', 'month', 'year', 'pace_mode'
    """
    cache = _get_persistent_cache()
    today = date.today()

    st.sidebar.title("💶 Budget Dashboard")

    profiles = db.fetch_profiles()
    if profiles.empty:
        st.sidebar.warning("No profiles found.")
        return {'profile_id': None, 'month': today.month, 'year': today.year, 'pace_mode': cache['pace_mode']}

    profile_ids = profiles['id'].tolist()
    names = dict(zip(profiles['id'], profiles['name']))
    default_profile = cache.get('profile_id') if cache.get('profile_id') in profile_ids else profile_ids[0]
    profile_id = st.sidebar.selectbox(
        "Profile",
        options=profile_ids,
        index=profile_ids.index(default_profile),
        format_func=lambda pid: names.get(pid, pid),
    )
    if cache.get('profile_id') != profile_id:
        cache['profile_id'] = profile_id
        _persist_cache(cache)

    years = list(range(today.year - 4, today.year + 2))
    year = st.sidebar.selectbox("Year", options=years, index=years.index(today.year))

    month = today.month
    if show_month:
        month = st.sidebar.selectbox(
            "Month",
            options=list(range(1, 13)),
            index=today.month - 1,
            format_func=lambda m: MONTH_LABELS[m - 1],
        )

    pace_modes = list(config.PACE_MODES)
    pace_mode = st.sidebar.radio(
        "Yearly pacing",
        options=pace_modes,
        index=pace_modes.index(cache['pace_mode']),
        help="'calendar' paces every year against today's month; "
             "'elapsed' treats past years as complete and future years as not started",
    )
    if cache.get('pace_mode') != pace_mode:
        cache['pace_mode'] = pace_mode
        _persist_cache(cache)

    _render_import_section(profile_id)

    return {'profile_id': profile_id, 'month': month, 'year': year, 'pace_mode': pace_mode}


def _render_import_section(profile_id: str) -> None:
    st.sidebar.subheader("📁 Import parsed transactions")
    uploaded_file = st.sidebar.file_uploader(
        "Categorized CSV/Excel",
        type=["csv", "xls", "xlsx"],
        help="One row per transaction: date, description, amount, type, source, "
             "category, budget_group, budget_line, notes",
    )
    source = st.sidebar.text_input("Source (optional)", placeholder="e.g. Santander")
    if uploaded_file is None or not st.sidebar.button("Import file"):
        return
    try:
        batch_id, count = ingest.import_file(
            profile_id, uploaded_file, source=source or None, filename=uploaded_file.name
        )
    except ValueError as exc:
        st.sidebar.error(f"Error importing file: {exc}")
        return
    logger.info("Imported %d transactions for %s (batch %s)", count, profile_id, batch_id)
    st.sidebar.success(f"✅ Imported {count} transactions")


def _get_persistent_cache() -> Dict[str, Any]:
    cache = st.session_state.get('_persistent_cache_store')
    if cache is None:
        cache = load_persistent_cache()
        st.session_state['_persistent_cache_store'] = cache
    return cache


def _persist_cache(cache: Dict[str, Any]) -> None:
    try:
        save_persistent_cache(cache)
    except OSError as exc:
        logger.warning("Could not save preferences: %s", exc)

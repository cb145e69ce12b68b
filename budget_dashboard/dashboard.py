"""Streamlit app for the budget dashboard.

The home page shows a short overview of the selected month.  The
detailed views live in ``pages/`` and reuse the rendering helpers
defined here.  To run the dashboard from the command line::

    python run_dashboard.py
"""

from __future__ import annotations

from typing import Any, Dict

import pandas as pd
import streamlit as st

from . import config, db, service
from . import visualization as viz
from .logging_config import setup_logging
from .models import MonthlyKpis, MonthlySummary, ProfileNotFoundError, YearlyKpis, YearlySummary
from .shared_sidebar import render_shared_sidebar


def format_currency(value: float) -> str:
    return f"€{value:,.2f}"


def bootstrap() -> None:
    """Configure logging and make sure the database exists (once per session)."""
    if st.session_state.get('_bootstrapped'):
        return
    setup_logging()
    config.ensure_data_directories()
    db.init_db()
    st.session_state['_bootstrapped'] = True


def render_monthly_kpis(kpis: MonthlyKpis) -> None:
    col1, col2, col3, col4, col5 = st.columns(5)
    col1.metric("Income", format_currency(kpis.total_income))
    col2.metric("Expenses", format_currency(kpis.total_expenses))
    col3.metric("Net savings", format_currency(kpis.net_savings))
    col4.metric("Savings rate", f"{kpis.savings_rate:.1f}%")
    col5.metric("Daily avg spend", format_currency(kpis.daily_avg_spend))
    st.caption(f"{kpis.transaction_count} transactions")


def render_yearly_kpis(kpis: YearlyKpis) -> None:
    col1, col2, col3, col4, col5 = st.columns(5)
    col1.metric("Income YTD", format_currency(kpis.total_income))
    col2.metric("Expenses YTD", format_currency(kpis.total_expenses))
    col3.metric("Net savings", format_currency(kpis.net_savings))
    col4.metric("Savings rate", f"{kpis.savings_rate:.1f}%")
    col5.metric("Months with data", kpis.months_with_data)
    st.caption(f"{kpis.transaction_count} transactions")


def lines_frame(summary: MonthlySummary) -> pd.DataFrame:
    """Budget line comparison as a display table."""
    frame = pd.DataFrame([line.to_dict() for line in summary.lines])
    if frame.empty:
        return frame
    return frame.rename(columns={
        'group': 'Group', 'line': 'Line', 'budget': 'Budget', 'actual': 'Actual', 'delta': 'Delta',
    })


def group_pacing_frame(summary: YearlySummary) -> pd.DataFrame:
    frame = pd.DataFrame([g.to_dict() for g in summary.budget_group_summary])
    if frame.empty:
        return frame
    frame['status'] = frame['status'].str.replace('_', ' ')
    return frame.rename(columns={
        'group': 'Group',
        'annualBudget': 'Annual budget',
        'spentYTD': 'Spent YTD',
        'percentUsed': '% used',
        'remainingBudget': 'Remaining',
        'expectedPace': 'Expected %',
        'status': 'Status',
    })


def load_monthly_summary(selection: Dict[str, Any]) -> MonthlySummary | None:
    """Fetch the monthly summary for the sidebar selection, showing errors inline."""
    try:
        return service.get_monthly_summary(selection['profile_id'], selection['month'], selection['year'])
    except ProfileNotFoundError as exc:
        st.error(str(exc))
    except ValueError as exc:
        st.error(f"Invalid selection: {exc}")
    return None


def load_yearly_summary(selection: Dict[str, Any]) -> YearlySummary | None:
    try:
        return service.get_yearly_summary(
            selection['profile_id'], selection['year'], pace_mode=selection['pace_mode']
        )
    except ProfileNotFoundError as exc:
        st.error(str(exc))
    except ValueError as exc:
        st.error(f"Invalid selection: {exc}")
    return None


def main() -> None:
    """Entry point for the Streamlit app."""
    st.set_page_config(
        page_title="Budget Dashboard",
        page_icon="💶",
        layout="wide",
        initial_sidebar_state="expanded",
    )
    bootstrap()

    selection = render_shared_sidebar()
    st.title("💶 Budget Dashboard")
    if selection['profile_id'] is None:
        st.info("Create a profile to get started.")
        return

    summary = load_monthly_summary(selection)
    if summary is None:
        return

    name = summary.profile.name if summary.profile else selection['profile_id']
    st.subheader(f"{name} · {viz.MONTH_LABELS[summary.month - 1]} {summary.year}")
    render_monthly_kpis(summary.kpis)

    if not summary.groups and not summary.transactions:
        st.info("No budget or transactions for this month yet. Import a file from the sidebar.")
        return

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(viz.create_budget_vs_actual_chart(summary.groups), use_container_width=True)
    with col2:
        st.plotly_chart(viz.create_category_donut_chart(summary.category_breakdown), use_container_width=True)
    st.markdown("Open **📊 Monthly** or **📅 Yearly** in the sidebar for the full breakdown.")

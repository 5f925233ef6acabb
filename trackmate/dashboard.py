"""Streamlit app for Trackmate.

This module is the host for the analytics core: it loads a transaction
snapshot, reads the monthly budget from the persisted settings and
re-derives every figure on each rerun.  Storage, sign-in and live sync
belong to other services; here transactions come from an uploaded export
plus whatever is added in the session, and goals/debts live in the session.

To run the dashboard from the command line::

    streamlit run trackmate/dashboard.py
"""

from __future__ import annotations

import io
import json
import logging
import os
import sys
from datetime import date
from typing import Any, Dict, List

import pandas as pd
import streamlit as st

if __package__:
    from . import visualization as viz
    from .analytics import compute_stats, recurring_summary
    from .budget import budget_progress
    from .config import (
        EMI_DEFAULT_PRINCIPAL, EMI_DEFAULT_RATE, EMI_DEFAULT_YEARS, EMI_MAX_YEARS, EMI_MIN_YEARS,
        configure_logging,
    )
    from .export import EXPORT_FILENAME, transactions_to_csv
    from .extraction import default_form, parse_extraction, populate_form
    from .formatting import format_currency, parse_amount, shift_month
    from .goals import summarize_goals
    from .heatmap import build_spending_calendar
    from .loans import amortization_schedule, calculate_emi
    from .models import (
        TRANSACTION_TYPES, CategoryCatalog, Goal, pending_debt_total, settlement_transaction, split_debt,
    )
    from .settings import load_settings, save_settings
else:
    # Allow ``streamlit run trackmate/dashboard.py`` without installing the package
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from trackmate import visualization as viz  # type: ignore
    from trackmate.analytics import compute_stats, recurring_summary  # type: ignore
    from trackmate.budget import budget_progress  # type: ignore
    from trackmate.config import (  # type: ignore
        EMI_DEFAULT_PRINCIPAL, EMI_DEFAULT_RATE, EMI_DEFAULT_YEARS, EMI_MAX_YEARS, EMI_MIN_YEARS,
        configure_logging,
    )
    from trackmate.export import EXPORT_FILENAME, transactions_to_csv  # type: ignore
    from trackmate.extraction import default_form, parse_extraction, populate_form  # type: ignore
    from trackmate.formatting import format_currency, parse_amount, shift_month  # type: ignore
    from trackmate.goals import summarize_goals  # type: ignore
    from trackmate.heatmap import build_spending_calendar  # type: ignore
    from trackmate.loans import amortization_schedule, calculate_emi  # type: ignore
    from trackmate.models import (  # type: ignore
        TRANSACTION_TYPES, CategoryCatalog, Goal, pending_debt_total, settlement_transaction, split_debt,
    )
    from trackmate.settings import load_settings, save_settings  # type: ignore

logger = logging.getLogger(__name__)

# Export headers map back onto store record keys
EXPORT_COLUMN_MAP = {
    'Date': 'date',
    'Description': 'description',
    'Category': 'category',
    'Type': 'type',
    'Amount': 'amount',
    'Recurring': 'isRecurring',
}


def read_transactions(file) -> List[Dict[str, Any]]:
    """Read transaction records from an uploaded CSV export or JSON list.

    Raises:
        ValueError: If the file type or JSON shape is not supported.
    """
    name = getattr(file, 'name', '') or ''
    raw = file.read()
    if isinstance(raw, bytes):
        raw = raw.decode('utf-8')
    if name.lower().endswith('.json'):
        data = json.loads(raw or '[]')
        if not isinstance(data, list):
            raise ValueError("JSON upload must contain a list of transactions")
        return [record for record in data if isinstance(record, dict)]
    if name.lower().endswith('.csv'):
        if not raw.strip():
            return []
        frame = pd.read_csv(io.StringIO(raw), dtype=str, keep_default_na=False)
        frame = frame.rename(columns=EXPORT_COLUMN_MAP)
        return frame.to_dict(orient='records')
    raise ValueError(f"Unsupported file type: {name or 'unknown'}")


def load_data(file) -> List[Dict[str, Any]]:
    try:
        return read_transactions(file)
    except (ValueError, UnicodeDecodeError) as exc:  # pragma: no cover - UI display only
        logger.warning("Failed to read upload %s: %s", getattr(file, 'name', '?'), exc)
        st.error(f"Failed to read file: {exc}")
        return []


def _ensure_state() -> None:
    state = st.session_state
    if 'calendar_month' not in state:
        today = date.today()
        state['calendar_month'] = (today.year, today.month)
    for key in ('added_transactions', 'goals', 'debts'):
        if key not in state:
            state[key] = []
    if 'form' not in state:
        state['form'] = default_form()


def _shift_calendar(delta: int) -> None:
    year, month = st.session_state['calendar_month']
    st.session_state['calendar_month'] = shift_month(year, month, delta)


def _record_transaction(form: Dict[str, Any]) -> None:
    """Store a submitted form, plus the split debt it implies."""
    state = st.session_state
    record = {key: form[key] for key in ('type', 'category', 'description', 'date', 'isRecurring')}
    record['amount'] = parse_amount(form['amount'])
    state['added_transactions'].insert(0, record)
    debt = split_debt(form)
    if debt is not None:
        state['debts'].append(debt)
    state['form'] = default_form()


def _settle_debt(index: int) -> None:
    state = st.session_state
    debt = state['debts'].pop(index)
    state['added_transactions'].insert(0, settlement_transaction(debt).to_record())


def _render_add_transaction(categories: CategoryCatalog) -> None:
    state = st.session_state
    with st.sidebar.expander("Magic fill"):
        reply = st.text_area("Extraction result (JSON)", key='magic_reply')
        if st.button("Fill form", key='magic_fill'):
            fields = parse_extraction(reply)
            if fields is None:
                st.warning("Could not read the extraction result.")
            else:
                state['form'] = populate_form(fields, base=state['form'])

    form = state['form']
    options = categories.to_list()
    if form['category'] not in options:
        options.append(form['category'])
    with st.sidebar.form('add_transaction', clear_on_submit=True):
        kind = st.radio("Type", TRANSACTION_TYPES, index=TRANSACTION_TYPES.index(form['type']), horizontal=True)
        amount = st.text_input("Amount", value=str(form['amount']))
        description = st.text_input("Description", value=form['description'])
        category = st.selectbox("Category", options, index=options.index(form['category']))
        when = st.date_input("Date", value=date.fromisoformat(form['date']))
        recurring = st.checkbox("Recurring payment", value=form['isRecurring'])
        split_with = st.text_input("Split with", value=form['splitWith'])
        split_amount = st.text_input("Their share", value=str(form['splitAmount']))
        submitted = st.form_submit_button("Add transaction")
    if submitted and description and parse_amount(amount) > 0:
        _record_transaction({
            'type': kind,
            'amount': amount,
            'description': description,
            'category': category,
            'date': when.isoformat(),
            'isRecurring': recurring,
            'isSplit': bool(split_with),
            'splitWith': split_with,
            'splitAmount': split_amount,
        })


def _render_overview(transactions: List[Dict[str, Any]], monthly_budget: float) -> None:
    stats = compute_stats(transactions, monthly_budget)

    col1, col2, col3 = st.columns(3)
    col1.metric("Total Balance", format_currency(stats.balance))
    col2.metric("Total Income", format_currency(stats.income), f"{stats.income_trend}%")
    col3.metric(
        "Total Expenses", format_currency(stats.expense), f"{stats.expense_trend}%", delta_color='inverse'
    )

    status = budget_progress(stats.current_month_expense, monthly_budget)
    left, right = st.columns(2)
    with left:
        st.plotly_chart(viz.create_budget_gauge(status), use_container_width=True)
        st.caption(
            f"Spent {format_currency(status.spent)} of {format_currency(status.budget)} "
            f"· {stats.streak}-day streak under budget"
        )
    with right:
        st.plotly_chart(viz.create_category_chart(stats.category_data), use_container_width=True)

    st.plotly_chart(viz.create_income_expense_chart(stats.bar_data), use_container_width=True)

    prev_col, _, next_col = st.columns([1, 6, 1])
    prev_col.button("◀", on_click=_shift_calendar, args=(-1,), key='calendar_prev')
    next_col.button("▶", on_click=_shift_calendar, args=(1,), key='calendar_next')
    year, month = st.session_state['calendar_month']
    calendar = build_spending_calendar(transactions, year, month)
    st.plotly_chart(viz.create_spending_calendar_chart(calendar), use_container_width=True)

    recurring = recurring_summary(stats)
    st.subheader(f"Subscriptions ({recurring['count']})")
    if recurring['transactions']:
        st.dataframe(pd.DataFrame([t.to_record() for t in recurring['transactions']]))
        st.caption(f"Recurring spend: {format_currency(recurring['monthly_total'])}")
    else:
        st.info("No recurring subscriptions found.")


def _render_goals() -> None:
    with st.form('new_goal', clear_on_submit=True):
        title = st.text_input("Goal")
        target = st.number_input("Target amount", min_value=0.0, step=1000.0)
        if st.form_submit_button("Add goal") and title and target > 0:
            st.session_state['goals'].append(Goal(id=None, title=title, target_amount=target))

    for index, progress in enumerate(summarize_goals(st.session_state['goals'])):
        goal = progress.goal
        st.markdown(f"**{goal.title}** {'🏆' if progress.is_completed else ''}")
        st.progress(progress.percent / 100)
        st.caption(f"{format_currency(goal.current_amount)} saved · Target {format_currency(goal.target_amount)}")
        amount = st.number_input("Add funds", min_value=0.0, key=f'deposit_{index}')
        if st.button("Add", key=f'deposit_btn_{index}') and amount > 0:
            st.session_state['goals'][index] = goal.deposit(amount)
            st.rerun()


def _render_debts() -> None:
    debts = st.session_state['debts']
    if not debts:
        st.info("No pending debts. Add a split transaction to see it here.")
        return
    st.metric("Owed to you", format_currency(pending_debt_total(debts)))
    for index, debt in enumerate(debts):
        col1, col2 = st.columns([5, 1])
        col1.write(f"**{debt.person}** owes {format_currency(debt.amount)} · {debt.description}")
        col2.button("Settle", key=f'settle_{index}', on_click=_settle_debt, args=(index,))


def _render_tools() -> None:
    principal = st.number_input("Loan amount", min_value=0.0, value=EMI_DEFAULT_PRINCIPAL, step=10000.0)
    rate = st.number_input("Interest rate (%)", min_value=0.0, value=EMI_DEFAULT_RATE, step=0.1)
    years = st.slider("Tenure (years)", EMI_MIN_YEARS, EMI_MAX_YEARS, EMI_DEFAULT_YEARS)
    result = calculate_emi(principal, rate, years)
    col1, col2, col3 = st.columns(3)
    col1.metric("Monthly EMI", format_currency(result.monthly_emi, decimals=0))
    col2.metric("Total Interest", format_currency(result.total_interest, decimals=0))
    col3.metric("Total Payable", format_currency(result.total_payable, decimals=0))
    schedule = amortization_schedule(principal, rate, years)
    if not schedule.empty:
        st.dataframe(schedule.round(2), use_container_width=True)


def main() -> None:
    """Entry point for the Streamlit app."""
    configure_logging()
    st.set_page_config(page_title="Trackmate", layout="wide", initial_sidebar_state="expanded")
    st.title("Trackmate")
    _ensure_state()

    settings = load_settings()
    budget = st.sidebar.number_input(
        "Monthly budget", min_value=0.0, value=float(settings['monthly_budget']), step=1000.0
    )
    if budget != settings['monthly_budget'] and budget > 0:
        settings['monthly_budget'] = budget
        save_settings(settings)

    categories = CategoryCatalog(settings['categories'])
    new_category = st.sidebar.text_input("New category")
    if st.sidebar.button("Add category") and new_category.strip():
        if categories.add(new_category):
            settings['categories'] = categories.to_list()
            save_settings(settings)

    uploaded = st.sidebar.file_uploader("Transactions (CSV export or JSON)", type=['csv', 'json'])
    uploaded_records = load_data(uploaded) if uploaded is not None else []
    _render_add_transaction(categories)
    transactions = st.session_state['added_transactions'] + uploaded_records

    if transactions:
        st.sidebar.download_button(
            "Export CSV", transactions_to_csv(transactions), file_name=EXPORT_FILENAME, mime='text/csv'
        )

    overview, goals, debts, tools = st.tabs(["Dashboard", "Goals", "Debts", "Tools"])
    with overview:
        _render_overview(transactions, settings['monthly_budget'])
    with goals:
        _render_goals()
    with debts:
        _render_debts()
    with tools:
        _render_tools()


if __name__ == "__main__":  # pragma: no cover
    main()

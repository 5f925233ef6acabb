"""Transaction aggregation and month-over-month trends.

This module turns a transaction snapshot into the figures the dashboard
shows: all-time totals, spending by category, the monthly income/expense
series, the current and previous month sub-totals, the recurring list and
the current month's per-day spending.  Everything is recomputed from the
snapshot on each call; nothing is cached or mutated.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from .budget import calculate_budget_streak
from .formatting import DateLike, month_label, parse_amount, parse_date
from .models import EXPENSE, INCOME, Transaction

logger = logging.getLogger(__name__)

TRANSACTION_COLUMNS = [
    'id', 'type', 'amount', 'category', 'description', 'date', 'is_recurring', 'created_at'
]


@dataclass(frozen=True)
class FinanceStats:
    income: float = 0.0
    expense: float = 0.0
    balance: float = 0.0
    category_data: List[Dict[str, Any]] = field(default_factory=list)
    bar_data: List[Dict[str, Any]] = field(default_factory=list)
    current_month_income: float = 0.0
    current_month_expense: float = 0.0
    prev_month_income: float = 0.0
    prev_month_expense: float = 0.0
    recurring_list: List[Transaction] = field(default_factory=list)
    daily_spend: Dict[str, float] = field(default_factory=dict)
    streak: int = 0
    income_trend: int = 0
    expense_trend: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def transactions_frame(transactions: Iterable[Any]) -> pd.DataFrame:
    """Normalize transactions into a DataFrame with parsed date columns.

    Rows with an unreadable date keep their amount (they still count in
    all-time totals) but get ``NaT`` and no month/day key.
    """
    records = [asdict(Transaction.from_record(t)) for t in transactions or []]
    frame = pd.DataFrame(records, columns=TRANSACTION_COLUMNS)
    frame['amount'] = pd.to_numeric(frame['amount'], errors='coerce').fillna(0.0).astype(float)
    frame['parsed_date'] = pd.to_datetime(frame['date'], format='%Y-%m-%d', errors='coerce')
    dropped = int(frame['parsed_date'].isna().sum())
    if dropped:
        logger.debug("%d transaction(s) have no readable date", dropped)
    frame['month_key'] = frame['parsed_date'].dt.strftime('%Y-%m')
    frame['day_key'] = frame['parsed_date'].dt.strftime('%Y-%m-%d')
    return frame


def daily_expense_totals(frame: pd.DataFrame, year: int, month: int) -> Dict[str, float]:
    """Total expense per ``YYYY-MM-DD`` for one calendar month."""
    key = f"{year:04d}-{month:02d}"
    expenses = frame[(frame['type'] == EXPENSE) & (frame['month_key'] == key)]
    if expenses.empty:
        return {}
    totals = expenses.groupby('day_key')['amount'].sum().sort_index()
    return {day: float(value) for day, value in totals.items()}


def calculate_trend(current: Any, previous: Any) -> int:
    """Percentage change from ``previous`` to ``current``, rounded half up.

    A zero baseline reports ``100`` when anything appeared and ``0``
    otherwise.

    Example:
        >>> calculate_trend(80, 100)
        -20
        >>> calculate_trend(150, 0)
        100
    """
    current = parse_amount(current)
    previous = parse_amount(previous)
    if previous == 0:
        return 100 if current > 0 else 0
    return int(math.floor((current - previous) / previous * 100 + 0.5))


class FinanceAnalytics:
    """Aggregations over an immutable transaction snapshot."""

    def __init__(self, transactions: Iterable[Any], today: DateLike = None):
        self.transactions = [Transaction.from_record(t) for t in transactions or []]
        self.today = parse_date(today) or date.today()
        self.data = transactions_frame(self.transactions)

        current = pd.Period(year=self.today.year, month=self.today.month, freq='M')
        self.current_month = str(current)
        self.previous_month = str(current - 1)

    def _income_rows(self) -> pd.DataFrame:
        return self.data[self.data['type'] == INCOME]

    def _expense_rows(self) -> pd.DataFrame:
        return self.data[self.data['type'] == EXPENSE]

    def calculate_totals(self) -> Dict[str, float]:
        income = float(self._income_rows()['amount'].sum())
        expense = float(self._expense_rows()['amount'].sum())
        return {'income': income, 'expense': expense, 'balance': income - expense}

    def calculate_month_totals(self, key: str) -> Dict[str, float]:
        """Income and expense for a ``YYYY-MM`` month."""
        in_month = self.data[self.data['month_key'] == key]
        return {
            'income': float(in_month.loc[in_month['type'] == INCOME, 'amount'].sum()),
            'expense': float(in_month.loc[in_month['type'] == EXPENSE, 'amount'].sum()),
        }

    def calculate_category_spending(self) -> List[Dict[str, Any]]:
        """Expense totals per category, largest first.

        Ties keep the order in which categories first appear.
        """
        expenses = self._expense_rows()
        if expenses.empty:
            return []
        totals = expenses.groupby('category', sort=False)['amount'].sum()
        totals = totals.sort_values(ascending=False, kind='mergesort')
        return [{'name': name, 'value': float(value)} for name, value in totals.items()]

    def calculate_monthly_breakdown(self) -> List[Dict[str, Any]]:
        """Income/expense per month in chronological order.

        Buckets are keyed by ``YYYY-MM`` so the same month name in two
        different years never merges; ``name`` is only the display label.
        ``time`` is the first date seen for the bucket in epoch milliseconds.
        """
        dated = self.data.dropna(subset=['parsed_date'])
        if dated.empty:
            return []
        totals = (
            dated.groupby(['month_key', 'type'])['amount'].sum()
            .unstack(fill_value=0.0)
            .reindex(columns=[INCOME, EXPENSE], fill_value=0.0)
        )
        first_seen = dated.groupby('month_key', sort=False)['parsed_date'].first()

        rows = []
        for key, row in totals.iterrows():
            rows.append({
                'key': key,
                'name': month_label(key),
                'income': float(row[INCOME]),
                'expense': float(row[EXPENSE]),
                'time': int(first_seen[key].value // 1_000_000),
            })
        rows.sort(key=lambda item: (item['time'], item['key']))
        return rows

    def recurring_transactions(self) -> List[Transaction]:
        return [t for t in self.transactions if t.is_recurring]

    def summarize(self, monthly_budget: Any) -> FinanceStats:
        """Build the full derived statistics for the dashboard."""
        totals = self.calculate_totals()
        current = self.calculate_month_totals(self.current_month)
        previous = self.calculate_month_totals(self.previous_month)
        daily_spend = daily_expense_totals(self.data, self.today.year, self.today.month)

        return FinanceStats(
            income=totals['income'],
            expense=totals['expense'],
            balance=totals['balance'],
            category_data=self.calculate_category_spending(),
            bar_data=self.calculate_monthly_breakdown(),
            current_month_income=current['income'],
            current_month_expense=current['expense'],
            prev_month_income=previous['income'],
            prev_month_expense=previous['expense'],
            recurring_list=self.recurring_transactions(),
            daily_spend=daily_spend,
            streak=calculate_budget_streak(daily_spend, monthly_budget, today=self.today),
            income_trend=calculate_trend(current['income'], previous['income']),
            expense_trend=calculate_trend(current['expense'], previous['expense']),
        )


def compute_stats(
    transactions: Iterable[Any],
    monthly_budget: Any,
    today: DateLike = None,
) -> FinanceStats:
    """Derive totals, breakdowns, trends and the budget streak in one call."""
    return FinanceAnalytics(transactions, today=today).summarize(monthly_budget)


def recurring_summary(stats: FinanceStats) -> Dict[str, Any]:
    """Recurring obligations with their combined monthly expense."""
    monthly_total = sum(t.amount for t in stats.recurring_list if t.is_expense)
    return {
        'transactions': list(stats.recurring_list),
        'count': len(stats.recurring_list),
        'monthly_total': float(monthly_total),
    }

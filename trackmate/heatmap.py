"""Spending calendar: per-day expense intensity for one month.

The calendar is rebuilt from the full transaction list for whichever month
is selected.  Moving to another month means calling
:func:`build_spending_calendar` again with the new ``(year, month)``;
there is no state carried between months.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, List, Optional, Tuple

from .analytics import daily_expense_totals, transactions_frame
from .config import HEATMAP_MIN_PEAK
from .formatting import MONTH_NAMES, DateLike, days_in_month, parse_date, shift_month

TIER_NONE = 'none'
TIER_LIGHTEST = 'lightest'
TIER_LIGHT = 'light'
TIER_STRONG = 'strong'
TIER_DARKEST = 'darkest'
TIERS = (TIER_NONE, TIER_LIGHTEST, TIER_LIGHT, TIER_STRONG, TIER_DARKEST)


@dataclass(frozen=True)
class CalendarDay:
    day: int
    date: str
    spend: float
    intensity: float
    tier: str


@dataclass(frozen=True)
class SpendingCalendar:
    year: int
    month: int
    max_spend: float
    days: List[CalendarDay]

    @property
    def label(self) -> str:
        return f"{MONTH_NAMES[self.month]} {self.year}"

    @property
    def leading_blanks(self) -> int:
        """Empty cells before day 1 in a Sunday-first week grid."""
        return (calendar.weekday(self.year, self.month, 1) + 1) % 7

    @property
    def total(self) -> float:
        return sum(day.spend for day in self.days)

    def previous_month(self) -> Tuple[int, int]:
        return shift_month(self.year, self.month, -1)

    def next_month(self) -> Tuple[int, int]:
        return shift_month(self.year, self.month, 1)


def intensity_tier(spend: float, max_spend: float) -> str:
    """Bucket a day's spend relative to the month's peak day."""
    if spend <= 0 or max_spend <= 0:
        return TIER_NONE
    intensity = spend / max_spend
    if intensity < 0.2:
        return TIER_LIGHTEST
    if intensity < 0.5:
        return TIER_LIGHT
    if intensity < 0.8:
        return TIER_STRONG
    return TIER_DARKEST


def build_spending_calendar(
    transactions: Iterable[Any],
    year: Optional[int] = None,
    month: Optional[int] = None,
    today: DateLike = None,
) -> SpendingCalendar:
    """Expense per day of ``(year, month)`` with an intensity tier for each.

    Defaults to the month containing ``today``.  Out-of-range months are
    normalized, so ``month=0`` is December of the previous year.
    """
    anchor = parse_date(today) or date.today()
    year, month = shift_month(
        anchor.year if year is None else int(year),
        anchor.month if month is None else int(month),
        0,
    )

    totals = daily_expense_totals(transactions_frame(transactions), year, month)
    positive = [value for value in totals.values() if value > 0]
    max_spend = max(positive + [HEATMAP_MIN_PEAK])

    days = []
    for day in range(1, days_in_month(year, month) + 1):
        key = date(year, month, day).isoformat()
        spend = totals.get(key, 0.0)
        days.append(CalendarDay(
            day=day,
            date=key,
            spend=spend,
            intensity=spend / max_spend if spend > 0 else 0.0,
            tier=intensity_tier(spend, max_spend),
        ))
    return SpendingCalendar(year=year, month=month, max_spend=max_spend, days=days)

"""Monthly budget tracking: the daily compliance streak and the progress gauge.

The monthly budget is always an argument here.  Callers read the user's
current setting at call time and pass it in.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Mapping, Optional

from .config import DAILY_BUDGET_DIVISOR, STREAK_WINDOW_DAYS
from .formatting import DateLike, parse_amount, parse_date

TIER_HEALTHY = 'healthy'
TIER_WARNING = 'warning'
TIER_CRITICAL = 'critical'


@dataclass(frozen=True)
class BudgetStatus:
    progress: float
    tier: str
    spent: float
    budget: float

    @property
    def remaining(self) -> float:
        return self.budget - self.spent


def daily_budget(monthly_budget: Any) -> float:
    """Prorated daily allowance; always divides by 30, whatever the month."""
    return parse_amount(monthly_budget) / DAILY_BUDGET_DIVISOR


def calculate_budget_streak(
    daily_spend: Optional[Mapping[Any, Any]],
    monthly_budget: Any,
    today: DateLike = None,
    window: int = STREAK_WINDOW_DAYS,
) -> int:
    """Count consecutive days within the daily budget, ending yesterday.

    Walks back from yesterday (offset 1) through offset ``window - 1`` and
    stops at the first day whose spend exceeds the daily budget.  Days with
    no recorded spend are compliant; today is never counted.

    Example:
        >>> calculate_budget_streak({}, 30000, today='2024-03-15')
        29
    """
    limit = daily_budget(monthly_budget)
    anchor = parse_date(today) or date.today()
    spend_by_day = {str(day)[:10]: parse_amount(value) for day, value in (daily_spend or {}).items()}

    streak = 0
    for offset in range(1, window):
        day = (anchor - timedelta(days=offset)).isoformat()
        if spend_by_day.get(day, 0.0) > limit:
            break
        streak += 1
    return streak


def budget_tier(progress: float) -> str:
    if progress > 90:
        return TIER_CRITICAL
    if progress > 70:
        return TIER_WARNING
    return TIER_HEALTHY


def budget_progress(current_month_expense: Any, monthly_budget: Any) -> BudgetStatus:
    """Share of the monthly budget already spent, capped to 0..100.

    A zero or negative budget reads as fully used once anything is spent.
    """
    spent = parse_amount(current_month_expense)
    budget = parse_amount(monthly_budget)
    if budget <= 0:
        progress = 100.0 if spent > 0 else 0.0
    else:
        progress = min(max(spent / budget * 100, 0.0), 100.0)
    return BudgetStatus(progress=progress, tier=budget_tier(progress), spent=spent, budget=budget)

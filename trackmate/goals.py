"""Savings goal progress."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Union

from .formatting import parse_amount
from .models import Goal


@dataclass(frozen=True)
class GoalProgress:
    goal: Goal
    percent: float
    is_completed: bool
    remaining: float
    months_to_goal: Optional[float] = None


def calculate_goal_progress(
    goal: Union[Goal, Mapping[str, Any]],
    monthly_savings: Any = None,
) -> GoalProgress:
    """Percent complete (capped at 100) and completion for one goal.

    Completion is judged on the uncapped ratio, so a goal saved past its
    target is still completed.  When ``monthly_savings`` is given,
    ``months_to_goal`` estimates the time left (``inf`` if nothing is being
    saved).
    """
    goal = Goal.from_record(goal)
    target = goal.target_amount
    ratio = goal.current_amount / target if target > 0 else 0.0
    remaining = max(target - goal.current_amount, 0.0)

    months_to_goal = None
    if monthly_savings is not None:
        savings = parse_amount(monthly_savings)
        if remaining == 0:
            months_to_goal = 0.0
        else:
            months_to_goal = remaining / savings if savings > 0 else float('inf')

    return GoalProgress(
        goal=goal,
        percent=min(max(ratio * 100, 0.0), 100.0),
        is_completed=target > 0 and ratio >= 1,
        remaining=remaining,
        months_to_goal=months_to_goal,
    )


def summarize_goals(goals: Iterable[Union[Goal, Mapping[str, Any]]], monthly_savings: Any = None) -> List[GoalProgress]:
    return [calculate_goal_progress(goal, monthly_savings) for goal in goals or []]

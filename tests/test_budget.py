"""Tests for the budget streak and the monthly budget gauge."""

from datetime import date, timedelta

import pytest

from trackmate.budget import (
    TIER_CRITICAL,
    TIER_HEALTHY,
    TIER_WARNING,
    budget_progress,
    budget_tier,
    calculate_budget_streak,
    daily_budget,
)

TODAY = date(2024, 3, 15)


def _day(offset):
    return (TODAY - timedelta(days=offset)).isoformat()


def test_no_spending_gives_full_window():
    assert calculate_budget_streak({}, 20000, today=TODAY) == 29
    assert calculate_budget_streak(None, 20000, today=TODAY) == 29


@pytest.mark.parametrize('offset', [1, 2, 7, 29])
def test_streak_stops_at_first_day_over_budget(offset):
    # 3000 / 30 gives a daily limit of 100
    spend = {_day(offset): 150}
    assert calculate_budget_streak(spend, 3000, today=TODAY) == offset - 1


def test_spend_equal_to_limit_is_compliant():
    spend = {_day(1): 100, _day(2): 100}
    assert calculate_budget_streak(spend, 3000, today=TODAY) == 29


def test_today_and_days_outside_window_are_ignored():
    spend = {TODAY.isoformat(): 10_000, _day(30): 10_000, _day(45): 10_000}
    assert calculate_budget_streak(spend, 3000, today=TODAY) == 29


def test_earliest_breach_wins():
    spend = {_day(3): 500, _day(10): 500}
    assert calculate_budget_streak(spend, 3000, today=TODAY) == 2


def test_streak_accepts_string_today():
    spend = {'2024-03-14': 101}
    assert calculate_budget_streak(spend, 3000, today='2024-03-15') == 0


def test_daily_budget_always_divides_by_thirty():
    assert daily_budget(3100) == pytest.approx(103.3333, rel=1e-4)
    assert daily_budget('abc') == 0


@pytest.mark.parametrize(
    ('spent', 'budget', 'progress', 'tier'),
    [
        (0, 20000, 0, TIER_HEALTHY),
        (14000, 20000, 70, TIER_HEALTHY),
        (14200, 20000, 71, TIER_WARNING),
        (18000, 20000, 90, TIER_WARNING),
        (18200, 20000, 91, TIER_CRITICAL),
        (50000, 20000, 100, TIER_CRITICAL),
    ],
)
def test_budget_progress_tiers(spent, budget, progress, tier):
    status = budget_progress(spent, budget)
    assert status.progress == pytest.approx(progress)
    assert status.tier == tier


def test_budget_progress_with_non_positive_budget():
    assert budget_progress(10, 0).progress == 100
    assert budget_progress(0, 0).progress == 0
    assert budget_progress(10, -5).tier == TIER_CRITICAL


def test_budget_status_remaining():
    status = budget_progress(5000, 20000)
    assert status.remaining == 15000
    assert status.spent == 5000


def test_budget_tier_boundaries():
    assert budget_tier(70) == TIER_HEALTHY
    assert budget_tier(90) == TIER_WARNING
    assert budget_tier(90.01) == TIER_CRITICAL

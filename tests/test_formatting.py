"""Tests for money and calendar helpers."""

import calendar
from datetime import date, datetime

import pytest

from trackmate.formatting import (
    days_in_month,
    format_currency,
    month_key,
    month_label,
    parse_amount,
    parse_date,
    shift_month,
    today_iso,
)


@pytest.mark.parametrize(
    ('value', 'expected'),
    [
        (250, 250.0),
        ('1,250.50', 1250.5),
        ('₹ 499', 499.0),
        ('  12 ', 12.0),
        ('abc', 0.0),
        ('', 0.0),
        (None, 0.0),
        (True, 0.0),
        (float('nan'), 0.0),
        ('inf', 0.0),
        ('-40', -40.0),
    ],
)
def test_parse_amount(value, expected):
    assert parse_amount(value) == expected


def test_format_currency():
    assert format_currency(1234.5, symbol='₹') == '₹1,234.50'
    assert format_currency(-10512, symbol='₹', decimals=0) == '-₹10,512'
    assert format_currency('garbage', symbol='$') == '$0.00'


def test_parse_date():
    assert parse_date('2024-02-29') == date(2024, 2, 29)
    assert parse_date('2024-02-29T10:15:00Z') == date(2024, 2, 29)
    assert parse_date(datetime(2024, 1, 5, 8, 30)) == date(2024, 1, 5)
    assert parse_date('2023-02-29') is None
    assert parse_date('soon') is None
    assert parse_date(None) is None


def test_today_iso_and_month_key():
    assert today_iso('2024-07-04') == '2024-07-04'
    assert month_key('2024-07-04') == '2024-07'
    assert month_key('nope') is None


def test_month_label():
    assert month_label('2024-01') == 'Jan'
    assert month_label('2025-12', include_year=True) == 'Dec 2025'


@pytest.mark.parametrize(
    ('start', 'delta', 'expected'),
    [
        ((2024, 1), -1, (2023, 12)),
        ((2024, 12), 1, (2025, 1)),
        ((2024, 5), 0, (2024, 5)),
        ((2024, 13), 0, (2025, 1)),
        ((2024, 0), 0, (2023, 12)),
        ((2024, 3), -15, (2022, 12)),
    ],
)
def test_shift_month(start, delta, expected):
    assert shift_month(*start, delta) == expected


def test_days_in_month():
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2023, 2) == 28


def test_month_label_ignores_locale(monkeypatch):
    monkeypatch.setattr(calendar, 'month_abbr', ['', 'janv.', 'févr.'] + [''] * 10)
    assert month_label('2024-01') == 'Jan'
    assert month_label('2024-02', include_year=True) == 'Feb 2024'

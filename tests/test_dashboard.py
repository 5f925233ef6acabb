"""Tests for dashboard helpers that do not need a running Streamlit server."""

import types

import pytest

from trackmate import dashboard
from trackmate.analytics import compute_stats
from trackmate.export import transactions_to_csv
from trackmate.models import Debt


def _upload(name, text):
    return types.SimpleNamespace(name=name, read=lambda: text.encode('utf-8'))


@pytest.fixture
def session(monkeypatch):
    state = {}
    monkeypatch.setattr(dashboard, 'st', types.SimpleNamespace(session_state=state))
    dashboard._ensure_state()
    return state


def test_read_transactions_from_exported_csv():
    records = [
        {'date': '2024-03-01', 'description': 'Pay, March', 'category': 'Salary',
         'type': 'income', 'amount': 1500, 'isRecurring': True},
        {'date': '2024-03-02', 'description': 'Lunch', 'category': 'Food',
         'type': 'expense', 'amount': 200, 'isRecurring': False},
    ]
    loaded = dashboard.read_transactions(_upload('export.csv', transactions_to_csv(records)))
    assert loaded[0]['description'] == 'Pay, March'
    stats = compute_stats(loaded, 20000, today='2024-03-15')
    assert stats.income == 1500
    assert stats.expense == 200
    assert len(stats.recurring_list) == 1


def test_read_transactions_from_json():
    loaded = dashboard.read_transactions(_upload('data.json', '[{"amount": 5}, "skip"]'))
    assert loaded == [{'amount': 5}]


def test_read_transactions_rejects_other_files():
    with pytest.raises(ValueError):
        dashboard.read_transactions(_upload('data.txt', 'x'))
    with pytest.raises(ValueError):
        dashboard.read_transactions(_upload('data.json', '{"amount": 5}'))


def test_empty_csv_upload():
    assert dashboard.read_transactions(_upload('data.csv', '')) == []


def test_ensure_state_initializes_session(session):
    assert session['added_transactions'] == []
    assert session['goals'] == []
    assert session['debts'] == []
    assert session['form']['type'] == 'expense'
    assert len(session['calendar_month']) == 2


def test_shift_calendar(session):
    session['calendar_month'] = (2024, 1)
    dashboard._shift_calendar(-1)
    assert session['calendar_month'] == (2023, 12)
    dashboard._shift_calendar(2)
    assert session['calendar_month'] == (2024, 2)


def test_record_transaction_with_split(session):
    dashboard._record_transaction({
        'type': 'expense',
        'amount': '1,200',
        'category': 'Food',
        'description': 'Dinner',
        'date': '2024-03-02',
        'isRecurring': False,
        'isSplit': True,
        'splitWith': 'Asha',
        'splitAmount': '600',
    })
    assert session['added_transactions'][0]['amount'] == 1200
    assert session['debts'][0].person == 'Asha'
    assert session['form']['amount'] == ''


def test_settle_debt_adds_income(session):
    session['debts'].append(Debt(id=None, person='Ravi', amount=300, description='Split: Cab', date='2024-03-01'))
    dashboard._settle_debt(0)
    assert session['debts'] == []
    settled = session['added_transactions'][0]
    assert settled['type'] == 'income'
    assert settled['description'] == 'Settled by Ravi'

"""Tests for the EMI calculator and amortization schedule."""

import pytest

from trackmate.loans import amortization_schedule, calculate_emi


def test_standard_loan():
    result = calculate_emi(500000, 9.5, 5)
    assert round(result.monthly_emi) == 10501
    assert result.months == 60
    assert result.total_payable == pytest.approx(result.monthly_emi * 60)
    assert result.total_interest == pytest.approx(result.total_payable - 500000)


def test_string_inputs_are_accepted():
    assert calculate_emi('500,000', '9.5', '5') == calculate_emi(500000, 9.5, 5)


@pytest.mark.parametrize(
    ('principal', 'rate', 'years'),
    [
        (500000, 0, 5),
        (500000, 9.5, 0),
        (0, 9.5, 5),
        ('abc', 9.5, 5),
        (-1000, 9.5, 5),
    ],
)
def test_invalid_inputs_give_zeros(principal, rate, years):
    result = calculate_emi(principal, rate, years)
    assert result.monthly_emi == 0
    assert result.total_payable == 0
    assert result.total_interest == 0


def test_amortization_schedule_pays_off_the_loan():
    schedule = amortization_schedule(500000, 9.5, 5)
    assert list(schedule.columns) == ['Month', 'Payment', 'Interest', 'Principal', 'Balance']
    assert len(schedule) == 60
    assert schedule['Principal'].sum() == pytest.approx(500000)
    assert schedule['Balance'].iloc[-1] == pytest.approx(0, abs=1e-6)
    assert schedule['Interest'].is_monotonic_decreasing


def test_amortization_schedule_empty_for_invalid_loan():
    assert amortization_schedule(500000, 0, 5).empty


@pytest.mark.parametrize(
    ('principal', 'rate', 'years', 'expected_emi'),
    [
        # Rate so small the growth factor rounds to exactly 1
        (500000, 1e-14, 5, 500000 / 60),
        # Growth factor overflows a float; installment tends to the interest
        (500000, 100, 1000, 500000 * 100 / 1200),
    ],
)
def test_extreme_rates_do_not_raise(principal, rate, years, expected_emi):
    result = calculate_emi(principal, rate, years)
    assert result.monthly_emi == pytest.approx(expected_emi)
    assert result.total_payable == pytest.approx(result.monthly_emi * result.months)
    assert result.total_interest == pytest.approx(result.total_payable - principal)


def test_amortization_schedule_with_negligible_rate():
    schedule = amortization_schedule(500000, 1e-14, 5)
    assert len(schedule) == 60
    assert schedule['Payment'].iloc[0] == pytest.approx(500000 / 60)
    assert schedule['Balance'].iloc[-1] == pytest.approx(0, abs=1e-6)

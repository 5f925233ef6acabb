"""Equal monthly installment (EMI) loan calculations."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import pandas as pd

from .formatting import parse_amount


@dataclass(frozen=True)
class EmiResult:
    monthly_emi: float = 0.0
    total_payable: float = 0.0
    total_interest: float = 0.0
    months: int = 0


def calculate_emi(principal: Any, rate: Any, years: Any) -> EmiResult:
    """Monthly installment, total payable and total interest for a loan.

    ``rate`` is the annual interest rate in percent.  Any non-positive or
    unreadable input yields an all-zero result; this is recomputed live as
    the user types, so it never raises.

    Example:
        >>> round(calculate_emi(500000, 9.5, 5).monthly_emi)
        10501
    """
    principal = parse_amount(principal)
    rate = parse_amount(rate)
    years = parse_amount(years)
    if principal <= 0 or rate <= 0 or years <= 0:
        return EmiResult()

    monthly_rate = rate / 1200
    months = years * 12
    try:
        growth = (1 + monthly_rate) ** months
    except OverflowError:
        growth = math.inf

    if growth - 1 <= 0:
        # Rate too small to register: repayment is principal spread evenly
        emi = principal / months
    elif math.isinf(growth):
        # Tenure long enough that the installment is just the interest
        emi = principal * monthly_rate
    else:
        emi = principal * monthly_rate * growth / (growth - 1)
    total_payable = emi * months
    return EmiResult(
        monthly_emi=emi,
        total_payable=total_payable,
        total_interest=total_payable - principal,
        months=int(round(months)),
    )


def amortization_schedule(principal: Any, rate: Any, years: Any) -> pd.DataFrame:
    """Month-by-month split of each installment into interest and principal.

    Returns a DataFrame with Month, Payment, Interest, Principal and Balance,
    or an empty DataFrame when the inputs do not describe a valid loan.
    """
    result = calculate_emi(principal, rate, years)
    if result.months <= 0:
        return pd.DataFrame()

    monthly_rate = parse_amount(rate) / 1200
    balance = parse_amount(principal)
    schedule = []
    for month in range(1, result.months + 1):
        interest = balance * monthly_rate
        payment = result.monthly_emi
        principal_part = payment - interest
        # Last installment absorbs floating point drift
        if month == result.months or principal_part > balance:
            principal_part = balance
            payment = interest + principal_part
        balance -= principal_part
        schedule.append({
            'Month': month,
            'Payment': payment,
            'Interest': interest,
            'Principal': principal_part,
            'Balance': max(0.0, balance),
        })
    return pd.DataFrame(schedule)

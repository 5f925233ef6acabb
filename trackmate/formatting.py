"""Money and calendar helpers shared by every analytics module.

Amounts arrive from form fields, store records and extraction output, so
they may be numbers, numeric strings or garbage.  Everything funnels
through :func:`parse_amount`, which never raises and treats anything it
cannot read as ``0``.  Dates are ISO calendar strings (``YYYY-MM-DD``);
month buckets use the ``YYYY-MM`` prefix.
"""

from __future__ import annotations

import calendar
import logging
import math
from datetime import date, datetime
from typing import Any, Optional, Tuple, Union

from .config import CURRENCY_SYMBOL

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, str, None]

_STRIP_CHARS = (',', '₹', '$', ' ')

# English month names regardless of the process locale
MONTH_ABBR = ('', 'Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')
MONTH_NAMES = (
    '', 'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December',
)


def parse_amount(value: Any) -> float:
    """Coerce ``value`` to a float amount, returning ``0.0`` when unreadable.

    Example:
        >>> parse_amount('1,250.50')
        1250.5
        >>> parse_amount('n/a')
        0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        text = value.strip()
        for char in _STRIP_CHARS:
            text = text.replace(char, '')
        if not text:
            return 0.0
        value = text
    try:
        amount = float(value)
    except (TypeError, ValueError):
        logger.debug("Coercing unreadable amount %r to 0", value)
        return 0.0
    if math.isnan(amount) or math.isinf(amount):
        return 0.0
    return amount


def format_currency(amount: Union[float, int], symbol: Optional[str] = None, decimals: int = 2) -> str:
    """Format an amount with thousands separators and a currency symbol.

    Example:
        >>> format_currency(1234.5)
        '₹1,234.50'
        >>> format_currency(-10512, decimals=0)
        '-₹10,512'
    """
    symbol = CURRENCY_SYMBOL if symbol is None else symbol
    value = parse_amount(amount)
    sign = '-' if value < 0 else ''
    return f"{sign}{symbol}{abs(value):,.{decimals}f}"


def parse_date(value: DateLike) -> Optional[date]:
    """Parse an ISO calendar date, returning ``None`` for invalid input."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()[:10]
    try:
        return datetime.strptime(text, '%Y-%m-%d').date()
    except ValueError:
        return None


def today_iso(today: DateLike = None) -> str:
    return (parse_date(today) or date.today()).isoformat()


def month_key(value: DateLike) -> Optional[str]:
    """Return the ``YYYY-MM`` bucket of a date, or ``None`` if it is invalid."""
    parsed = parse_date(value)
    if parsed is None:
        return None
    return parsed.strftime('%Y-%m')


def month_label(key: str, include_year: bool = False) -> str:
    """Turn a ``YYYY-MM`` key into its short display label (``Jan``)."""
    year, month = int(key[:4]), int(key[5:7])
    label = MONTH_ABBR[month]
    return f"{label} {year}" if include_year else label


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move ``delta`` calendar months from ``(year, month)``.

    Also normalizes out-of-range months, so ``shift_month(2024, 13, 0)``
    is ``(2025, 1)``.
    """
    index = year * 12 + (month - 1) + delta
    new_year, new_month = divmod(index, 12)
    return new_year, new_month + 1


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]

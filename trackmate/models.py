"""Record types for transactions, savings goals, split debts and categories.

Store snapshots hand us plain dicts with camelCase keys (``isRecurring``,
``targetAmount``).  The ``from_record`` constructors normalize those into
immutable dataclasses, coercing amounts with :func:`parse_amount` so the
analytics code never has to.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from .config import DEFAULT_CATEGORIES, FALLBACK_CATEGORY
from .formatting import DateLike, parse_amount, parse_date, today_iso

INCOME = 'income'
EXPENSE = 'expense'
TRANSACTION_TYPES = (INCOME, EXPENSE)
DEBT_PENDING = 'pending'

_TRUE_STRINGS = {'true', 'yes', 'y', '1'}


def normalize_type(value: Any) -> str:
    """Anything that is not explicitly income counts as an expense."""
    if isinstance(value, str) and value.strip().lower() == INCOME:
        return INCOME
    return EXPENSE


def _coerce_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _coerce_date_text(value: Any) -> str:
    parsed = parse_date(value)
    if parsed is not None:
        return parsed.isoformat()
    return '' if value is None else str(value)


def _pick(record: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return default


@dataclass(frozen=True)
class Transaction:
    id: Optional[str]
    type: str
    amount: float
    category: str
    description: str
    date: str
    is_recurring: bool = False
    created_at: Any = None

    @classmethod
    def from_record(cls, record: Union['Transaction', Mapping[str, Any]]) -> 'Transaction':
        if isinstance(record, Transaction):
            return record
        return cls(
            id=_pick(record, 'id'),
            type=normalize_type(_pick(record, 'type')),
            amount=parse_amount(_pick(record, 'amount')),
            category=str(_pick(record, 'category', default=FALLBACK_CATEGORY)),
            description=str(_pick(record, 'description', default='')),
            date=_coerce_date_text(_pick(record, 'date')),
            is_recurring=_coerce_flag(_pick(record, 'isRecurring', 'is_recurring', default=False)),
            created_at=_pick(record, 'createdAt', 'created_at'),
        )

    @property
    def is_income(self) -> bool:
        return self.type == INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == EXPENSE

    def to_record(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'type': self.type,
            'amount': self.amount,
            'category': self.category,
            'description': self.description,
            'date': self.date,
            'isRecurring': self.is_recurring,
            'createdAt': self.created_at,
        }


@dataclass(frozen=True)
class Goal:
    id: Optional[str]
    title: str
    target_amount: float
    current_amount: float = 0.0
    created_at: Any = None

    @classmethod
    def from_record(cls, record: Union['Goal', Mapping[str, Any]]) -> 'Goal':
        if isinstance(record, Goal):
            return record
        return cls(
            id=_pick(record, 'id'),
            title=str(_pick(record, 'title', 'name', default='Unnamed Goal')),
            target_amount=parse_amount(_pick(record, 'targetAmount', 'target_amount')),
            current_amount=parse_amount(_pick(record, 'currentAmount', 'current_amount')),
            created_at=_pick(record, 'createdAt', 'created_at'),
        )

    def deposit(self, amount: Any) -> 'Goal':
        """Return a copy of the goal with ``amount`` added to the saved total.

        Raises:
            ValueError: If the deposit is not a positive amount.
        """
        value = parse_amount(amount)
        if value <= 0:
            raise ValueError(f"Deposit must be positive, got {amount!r}")
        return replace(self, current_amount=self.current_amount + value)


@dataclass(frozen=True)
class Debt:
    id: Optional[str]
    person: str
    amount: float
    description: str
    date: str
    status: str = DEBT_PENDING
    created_at: Any = None

    @classmethod
    def from_record(cls, record: Union['Debt', Mapping[str, Any]]) -> 'Debt':
        if isinstance(record, Debt):
            return record
        return cls(
            id=_pick(record, 'id'),
            person=str(_pick(record, 'person', default='')),
            amount=parse_amount(_pick(record, 'amount')),
            description=str(_pick(record, 'description', default='')),
            date=_coerce_date_text(_pick(record, 'date')),
            status=str(_pick(record, 'status', default=DEBT_PENDING)),
            created_at=_pick(record, 'createdAt', 'created_at'),
        )


def split_debt(form: Mapping[str, Any]) -> Optional[Debt]:
    """Build the pending debt created when an expense is split with someone.

    Returns ``None`` unless the form is marked as split, names a person and
    carries a positive split amount.
    """
    if not _coerce_flag(form.get('isSplit')):
        return None
    person = str(form.get('splitWith') or '').strip()
    amount = parse_amount(form.get('splitAmount'))
    if not person or amount <= 0:
        return None
    return Debt(
        id=None,
        person=person,
        amount=amount,
        description=f"Split: {form.get('description') or ''}",
        date=_coerce_date_text(form.get('date')),
    )


def settlement_transaction(debt: Union[Debt, Mapping[str, Any]], today: DateLike = None) -> Transaction:
    """Income transaction recorded when ``debt`` is paid back."""
    debt = Debt.from_record(debt)
    return Transaction(
        id=None,
        type=INCOME,
        amount=debt.amount,
        category=FALLBACK_CATEGORY,
        description=f"Settled by {debt.person}",
        date=today_iso(today),
    )


def pending_debt_total(debts: Iterable[Union[Debt, Mapping[str, Any]]]) -> float:
    total = 0.0
    for debt in debts or []:
        debt = Debt.from_record(debt)
        if debt.status == DEBT_PENDING:
            total += debt.amount
    return total


class CategoryCatalog:
    """Ordered, case-sensitive set of category names."""

    def __init__(self, names: Optional[Iterable[str]] = None):
        self._names: List[str] = []
        for name in DEFAULT_CATEGORIES if names is None else names:
            if isinstance(name, str) and name.strip() and name.strip() not in self._names:
                self._names.append(name.strip())

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def add(self, name: str) -> bool:
        """Append ``name``; returns ``False`` if it was already present.

        Raises:
            ValueError: If ``name`` is blank.
        """
        cleaned = (name or '').strip()
        if not cleaned:
            raise ValueError("Category name cannot be empty")
        if cleaned in self._names:
            return False
        self._names.append(cleaned)
        return True

    def to_list(self) -> List[str]:
        return list(self._names)

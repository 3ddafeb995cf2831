"""Record types for the expense tracker.

Every record is an immutable dataclass.  Constructors normalise their
inputs (category strings become :class:`Category` members, ISO date
strings become :class:`datetime.date`) and reject values that could
never be valid, raising :class:`ValidationError`.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Union

from .config import MAX_DAY_OF_MONTH

DateLike = Union[date, datetime, str]

MONTH_KEY_PATTERN = re.compile(r'^\d{4}-(0[1-9]|1[0-2])$')


class ValidationError(ValueError):
    """Raised when a record is built from malformed input."""


class Category(str, Enum):
    FOOD = 'Food'
    RENT = 'Rent'
    TRANSPORT = 'Transport'
    ENTERTAINMENT = 'Entertainment'
    HEALTHCARE = 'Healthcare'
    SHOPPING = 'Shopping'
    UTILITIES = 'Utilities'
    OTHER = 'Other'

    @classmethod
    def _missing_(cls, value: object) -> Optional['Category']:
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return None

    @classmethod
    def coerce(cls, value: Any) -> 'Category':
        """Return the member for ``value``, matching names case-insensitively."""
        try:
            return cls(value)
        except ValueError as exc:
            raise ValidationError(f"Unknown category: {value!r}") from exc


CATEGORIES = tuple(Category)


def parse_date(value: DateLike) -> date:
    """Convert ``value`` to a :class:`datetime.date`.

    Accepts ``date``/``datetime`` objects and ``YYYY-MM-DD`` strings
    (a trailing time component is ignored).
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()[:10]
        try:
            return date.fromisoformat(text)
        except ValueError as exc:
            raise ValidationError(f"Invalid date: {value!r}") from exc
    raise ValidationError(f"Invalid date: {value!r}")


def month_key(value: DateLike) -> str:
    """Return the ``YYYY-MM`` month key for a date."""
    return parse_date(value).strftime('%Y-%m')


def current_month_key(today: Optional[date] = None) -> str:
    return month_key(today or date.today())


def validate_month_key(value: str) -> str:
    text = str(value).strip()
    if not MONTH_KEY_PATTERN.match(text):
        raise ValidationError(f"Invalid month key (expected YYYY-MM): {value!r}")
    return text


def _amount(value: Any, field_name: str) -> float:
    try:
        amount = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field_name} must be a number, got {value!r}") from exc
    if not math.isfinite(amount):
        raise ValidationError(f"{field_name} must be finite, got {value!r}")
    if amount < 0:
        raise ValidationError(f"{field_name} cannot be negative, got {amount}")
    return amount


def _title(value: Any) -> str:
    text = str(value or '').strip()
    if not text:
        raise ValidationError("Title cannot be empty")
    return text


def _description(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class Expense:
    title: str
    amount: float
    category: Category
    date: date
    description: Optional[str] = None
    id: str = ''

    def __post_init__(self) -> None:
        object.__setattr__(self, 'title', _title(self.title))
        object.__setattr__(self, 'amount', _amount(self.amount, 'amount'))
        object.__setattr__(self, 'category', Category.coerce(self.category))
        object.__setattr__(self, 'date', parse_date(self.date))
        object.__setattr__(self, 'description', _description(self.description))

    @property
    def month(self) -> str:
        return month_key(self.date)


@dataclass(frozen=True)
class Budget:
    """Spending ceiling for one category in one calendar month."""

    category: Category
    amount: float
    month: str
    id: str = ''

    def __post_init__(self) -> None:
        object.__setattr__(self, 'category', Category.coerce(self.category))
        object.__setattr__(self, 'amount', _amount(self.amount, 'amount'))
        object.__setattr__(self, 'month', validate_month_key(self.month))


@dataclass(frozen=True)
class RecurringExpense:
    """A recurring charge template.

    Templates are never turned into :class:`Expense` records; ``is_active``
    only marks whether the template is in effect.
    """

    title: str
    amount: float
    category: Category
    day_of_month: int
    description: Optional[str] = None
    is_active: bool = True
    id: str = ''

    def __post_init__(self) -> None:
        object.__setattr__(self, 'title', _title(self.title))
        object.__setattr__(self, 'amount', _amount(self.amount, 'amount'))
        object.__setattr__(self, 'category', Category.coerce(self.category))
        try:
            day = int(self.day_of_month)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"day_of_month must be an integer, got {self.day_of_month!r}") from exc
        if not 1 <= day <= MAX_DAY_OF_MONTH:
            raise ValidationError(f"day_of_month must be between 1 and {MAX_DAY_OF_MONTH}, got {day}")
        object.__setattr__(self, 'day_of_month', day)
        object.__setattr__(self, 'description', _description(self.description))
        object.__setattr__(self, 'is_active', bool(self.is_active))


@dataclass(frozen=True)
class SavingsGoal:
    title: str
    target_amount: float
    target_date: date
    current_amount: float = 0.0
    description: Optional[str] = None
    id: str = ''

    def __post_init__(self) -> None:
        object.__setattr__(self, 'title', _title(self.title))
        object.__setattr__(self, 'target_amount', _amount(self.target_amount, 'target_amount'))
        object.__setattr__(self, 'target_date', parse_date(self.target_date))
        # Contributions are unchecked, so only require a real number here.
        try:
            current = float(self.current_amount)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"current_amount must be a number, got {self.current_amount!r}") from exc
        object.__setattr__(self, 'current_amount', current)
        object.__setattr__(self, 'description', _description(self.description))


Record = Union[Expense, Budget, RecurringExpense, SavingsGoal]

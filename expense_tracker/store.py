"""In-memory record storage.

The :class:`RecordStore` is the single source of truth for a session.
It holds one :class:`RecordCollection` per record kind; every derived
view (filters, budgets, insights, goals, summary) is recomputed from a
snapshot of these collections and nothing is cached here.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from typing import Any, Callable, Dict, Generic, Hashable, Iterator, List, Mapping, Optional, Type, TypeVar, Union

from .ids import generate_id
from .models import Budget, Expense, RecurringExpense, SavingsGoal

logger = logging.getLogger(__name__)

T = TypeVar('T', Expense, Budget, RecurringExpense, SavingsGoal)


class DuplicateRecordError(ValueError):
    """Raised when a record would break a collection's uniqueness rule."""


class DuplicateBudgetError(DuplicateRecordError):
    """Raised when a second budget is set for the same category and month."""


class RecordCollection(Generic[T]):
    """Ordered collection of records keyed by ``id``."""

    def __init__(
        self,
        record_type: Type[T],
        *,
        prepend: bool = False,
        lock: Optional[threading.RLock] = None,
        unique_key: Optional[Callable[[T], Hashable]] = None,
        duplicate_error: Type[DuplicateRecordError] = DuplicateRecordError,
    ):
        self.record_type = record_type
        self.prepend = prepend
        self._lock = lock or threading.RLock()
        self._unique_key = unique_key
        self._duplicate_error = duplicate_error
        self._records: List[T] = []

    @property
    def name(self) -> str:
        return self.record_type.__name__

    def _build(self, data: Union[T, Mapping[str, Any], None], fields: Dict[str, Any]) -> T:
        fields.pop('id', None)
        if isinstance(data, self.record_type):
            return dataclasses.replace(data, id=generate_id(), **fields)
        payload = dict(data or {})
        payload.update(fields)
        payload.pop('id', None)
        return self.record_type(id=generate_id(), **payload)

    def _check_unique(self, record: T) -> None:
        if self._unique_key is None:
            return
        key = self._unique_key(record)
        for existing in self._records:
            if existing.id != record.id and self._unique_key(existing) == key:
                raise self._duplicate_error(
                    f"{self.name} already exists for {key!r} (id={existing.id})"
                )

    def add(self, data: Union[T, Mapping[str, Any], None] = None, **fields: Any) -> T:
        """Store a new record under a freshly generated id and return it.

        ``data`` may be a record instance (its id is ignored) or a mapping
        of constructor fields; keyword arguments override either.
        """
        record = self._build(data, fields)
        with self._lock:
            self._check_unique(record)
            if self.prepend:
                self._records.insert(0, record)
            else:
                self._records.append(record)
        logger.debug("Added %s %s", self.name, record.id)
        return record

    def update(self, record: T) -> bool:
        """Replace the stored record with the same id.

        Unknown ids are ignored; the return value tells whether a record
        was replaced.
        """
        with self._lock:
            index = self._index_of(record.id)
            if index is None:
                logger.debug("Update ignored, no %s with id %s", self.name, record.id)
                return False
            self._check_unique(record)
            self._records[index] = record
        logger.debug("Updated %s %s", self.name, record.id)
        return True

    def modify(self, record_id: str, change: Callable[[T], T]) -> Optional[T]:
        """Apply ``change`` to the record with ``record_id`` and store the result."""
        with self._lock:
            index = self._index_of(record_id)
            if index is None:
                logger.debug("Change ignored, no %s with id %s", self.name, record_id)
                return None
            updated = change(self._records[index])
            self._check_unique(updated)
            self._records[index] = updated
        logger.debug("Changed %s %s", self.name, record_id)
        return updated

    def remove(self, record_id: str) -> bool:
        with self._lock:
            index = self._index_of(record_id)
            if index is None:
                logger.debug("Delete ignored, no %s with id %s", self.name, record_id)
                return False
            del self._records[index]
        logger.debug("Deleted %s %s", self.name, record_id)
        return True

    def get(self, record_id: str) -> Optional[T]:
        with self._lock:
            index = self._index_of(record_id)
            return None if index is None else self._records[index]

    def list(self) -> List[T]:
        with self._lock:
            return list(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def _index_of(self, record_id: str) -> Optional[int]:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return None

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[T]:
        return iter(self.list())

    def __contains__(self, record_id: object) -> bool:
        return isinstance(record_id, str) and self.get(record_id) is not None


@dataclasses.dataclass(frozen=True)
class StoreSnapshot:
    """Point-in-time copy of every collection."""

    expenses: List[Expense]
    budgets: List[Budget]
    recurring: List[RecurringExpense]
    goals: List[SavingsGoal]


class RecordStore:
    """Expenses, budgets, recurring templates and savings goals for one session."""

    def __init__(self):
        self._lock = threading.RLock()
        # Newest expense first; everything else keeps insertion order.
        self.expenses: RecordCollection[Expense] = RecordCollection(Expense, prepend=True, lock=self._lock)
        self.budgets: RecordCollection[Budget] = RecordCollection(
            Budget,
            lock=self._lock,
            unique_key=lambda budget: (budget.category, budget.month),
            duplicate_error=DuplicateBudgetError,
        )
        self.recurring: RecordCollection[RecurringExpense] = RecordCollection(RecurringExpense, lock=self._lock)
        self.goals: RecordCollection[SavingsGoal] = RecordCollection(SavingsGoal, lock=self._lock)

    def toggle_active(self, recurring_id: str) -> Optional[RecurringExpense]:
        """Flip ``is_active`` on a recurring template; unknown ids are ignored."""
        return self.recurring.modify(
            recurring_id,
            lambda template: dataclasses.replace(template, is_active=not template.is_active),
        )

    def contribute(self, goal_id: str, amount: float) -> Optional[SavingsGoal]:
        """Add ``amount`` to a goal's saved total.

        The amount is not checked here; callers reject non-positive
        contributions before calling.
        """
        return self.goals.modify(
            goal_id,
            lambda goal: dataclasses.replace(goal, current_amount=goal.current_amount + float(amount)),
        )

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return StoreSnapshot(
                expenses=self.expenses.list(),
                budgets=self.budgets.list(),
                recurring=self.recurring.list(),
                goals=self.goals.list(),
            )

    def is_empty(self) -> bool:
        with self._lock:
            return not any(len(c) for c in (self.expenses, self.budgets, self.recurring, self.goals))

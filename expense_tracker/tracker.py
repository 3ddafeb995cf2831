"""Session facade over the record store and the analytics modules.

:class:`ExpenseTracker` is what the UI talks to.  Mutations go to the
:class:`~expense_tracker.store.RecordStore`; queries take a snapshot of
the store and run the pure analytics functions over it, so every read
sees the immediately preceding write.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from datetime import date
from typing import Any, Callable, List, Mapping, Optional, Union

from . import budgets as budget_eval
from . import goals as goal_tracker
from .filters import empty_state_message, filter_expenses
from .insights import SpendingInsights, compute_insights
from .models import (
    Budget,
    Category,
    Expense,
    RecurringExpense,
    SavingsGoal,
    ValidationError,
    current_month_key,
)
from .seed import load_seed
from .session import Session
from .store import RecordStore
from .summary import Summary, compute_summary

logger = logging.getLogger(__name__)

RecordData = Optional[Mapping[str, Any]]


class ExpenseTracker:
    """Mutation and query calls for one interactive session."""

    def __init__(
        self,
        store: Optional[RecordStore] = None,
        session: Optional[Session] = None,
        clock: Callable[[], date] = date.today,
    ):
        self.store = store or RecordStore()
        self.session = session or Session()
        self.clock = clock

    @classmethod
    def with_seed(cls, **kwargs: Any) -> 'ExpenseTracker':
        """Create a tracker pre-loaded with the demonstration records."""
        tracker = cls(**kwargs)
        load_seed(tracker.store)
        return tracker

    def today(self) -> date:
        return self.clock()

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------
    def add_expense(self, data: Union[Expense, RecordData] = None, **fields: Any) -> Expense:
        return self.store.expenses.add(data, **fields)

    def edit_expense(
        self,
        data: Union[Expense, RecordData] = None,
        expense_id: Optional[str] = None,
        **fields: Any,
    ) -> Optional[Expense]:
        """Replace the expense open for editing (or ``expense_id``) with ``data``.

        The editing reference is cleared afterwards.  Returns the stored
        record, or None when there was nothing to edit.
        """
        target_id = expense_id or self.session.editing_expense_id
        if target_id is None:
            logger.debug("Edit ignored, no expense is open for editing")
            return None
        if isinstance(data, Expense):
            record = dataclasses.replace(data, id=target_id, **fields)
        else:
            payload = dict(data or {})
            payload.update(fields)
            payload['id'] = target_id
            record = Expense(**payload)
        updated = self.store.expenses.update(record)
        if self.session.is_editing(target_id):
            self.session.cancel_edit()
        return record if updated else None

    def delete_expense(self, expense_id: str) -> bool:
        removed = self.store.expenses.remove(expense_id)
        self.session.forget_expense(expense_id)
        return removed

    def start_edit(self, expense_id: str) -> Optional[Expense]:
        expense = self.store.expenses.get(expense_id)
        if expense is not None:
            self.session.start_edit(expense_id)
        return expense

    def cancel_edit(self) -> None:
        self.session.cancel_edit()

    @property
    def editing_expense(self) -> Optional[Expense]:
        if self.session.editing_expense_id is None:
            return None
        return self.store.expenses.get(self.session.editing_expense_id)

    # ------------------------------------------------------------------
    # Budgets
    # ------------------------------------------------------------------
    def add_budget(self, data: Union[Budget, RecordData] = None, **fields: Any) -> Budget:
        """Add a budget; the month defaults to the current month."""
        if not isinstance(data, Budget):
            payload = dict(data or {})
            payload.update(fields)
            payload.setdefault('month', current_month_key(self.today()))
            return self.store.budgets.add(payload)
        return self.store.budgets.add(data, **fields)

    def update_budget(self, budget: Budget) -> bool:
        return self.store.budgets.update(budget)

    def delete_budget(self, budget_id: str) -> bool:
        return self.store.budgets.remove(budget_id)

    # ------------------------------------------------------------------
    # Recurring templates
    # ------------------------------------------------------------------
    def add_recurring(self, data: Union[RecurringExpense, RecordData] = None, **fields: Any) -> RecurringExpense:
        return self.store.recurring.add(data, **fields)

    def update_recurring(self, template: RecurringExpense) -> bool:
        return self.store.recurring.update(template)

    def delete_recurring(self, recurring_id: str) -> bool:
        return self.store.recurring.remove(recurring_id)

    def toggle_recurring(self, recurring_id: str) -> Optional[RecurringExpense]:
        return self.store.toggle_active(recurring_id)

    # ------------------------------------------------------------------
    # Savings goals
    # ------------------------------------------------------------------
    def add_goal(self, data: Union[SavingsGoal, RecordData] = None, **fields: Any) -> SavingsGoal:
        return self.store.goals.add(data, **fields)

    def update_goal(self, goal: SavingsGoal) -> bool:
        return self.store.goals.update(goal)

    def edit_goal(self, goal_id: str, **fields: Any) -> Optional[SavingsGoal]:
        """Change some fields of a goal, keeping the rest (including the saved amount)."""
        fields.pop('id', None)
        return self.store.goals.modify(goal_id, lambda goal: dataclasses.replace(goal, **fields))

    def delete_goal(self, goal_id: str) -> bool:
        self.session.pop_contribution_input(goal_id)
        return self.store.goals.remove(goal_id)

    def contribute_to_goal(self, goal_id: str, amount: float) -> Optional[SavingsGoal]:
        """Add a positive ``amount`` to a goal's saved total.

        Raises:
            ValidationError: If ``amount`` is not a positive number.
        """
        try:
            value = float(amount)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Contribution must be a number, got {amount!r}") from exc
        if not math.isfinite(value) or value <= 0:
            raise ValidationError(f"Contribution must be positive, got {amount!r}")
        return self.store.contribute(goal_id, value)

    def set_contribution_input(self, goal_id: str, text: str) -> None:
        self.session.set_contribution_input(goal_id, text)

    def submit_contribution(self, goal_id: str) -> bool:
        """Apply the amount typed for ``goal_id``.

        Empty, unparsable or non-positive input is ignored and left in
        place; a successful contribution clears the input.
        """
        text = self.session.contribution_inputs.get(goal_id, '')
        try:
            self.contribute_to_goal(goal_id, text or 0)
        except ValidationError:
            return False
        self.session.pop_contribution_input(goal_id)
        return True

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------
    def set_search(self, term: str) -> None:
        self.session.search_term = term or ''

    def set_category_filter(self, category: Union[Category, str, None]) -> None:
        self.session.category_filter = Category.coerce(category).value if category else ''

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_expenses(self, filtered: bool = True) -> List[Expense]:
        expenses = self.store.expenses.list()
        if not filtered:
            return expenses
        return filter_expenses(expenses, self.session.search_term, self.session.category_filter)

    def list_budgets(self) -> List[Budget]:
        return self.store.budgets.list()

    def list_recurring(self) -> List[RecurringExpense]:
        return self.store.recurring.list()

    def list_goals(self) -> List[SavingsGoal]:
        return self.store.goals.list()

    def empty_list_message(self) -> str:
        return empty_state_message(len(self.store.expenses) == 0)

    def evaluate_budgets(self) -> List[budget_eval.BudgetEvaluation]:
        snapshot = self.store.snapshot()
        return budget_eval.evaluate_budgets(snapshot.budgets, snapshot.expenses, today=self.today())

    def compute_insights(self) -> SpendingInsights:
        return compute_insights(self.store.expenses.list())

    def compute_goal_progress(self) -> List[goal_tracker.GoalProgress]:
        return goal_tracker.compute_goal_progress(self.store.goals.list(), today=self.today())

    def compute_summary(self) -> Summary:
        return compute_summary(self.store.expenses.list(), today=self.today())

"""Budget evaluation for the current month.

Spend is recomputed from the expense list on every call so that edits
and deletions elsewhere show up immediately.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, List, Optional, Union

from . import config
from .formatting import budget_message
from .models import Budget, Category, Expense, current_month_key, validate_month_key


class BudgetStatus(str, Enum):
    ON_TRACK = 'onTrack'
    NEAR_LIMIT = 'nearLimit'
    OVER_BUDGET = 'overBudget'


@dataclass(frozen=True)
class BudgetEvaluation:
    budget: Budget
    spent: float
    percentage: float
    status: BudgetStatus
    difference: float

    @property
    def is_over_budget(self) -> bool:
        return self.status is BudgetStatus.OVER_BUDGET

    @property
    def needs_attention(self) -> bool:
        return self.status is not BudgetStatus.ON_TRACK

    @property
    def bar_percentage(self) -> float:
        return min(self.percentage, 100.0)

    @property
    def message(self) -> str:
        return budget_message(self.is_over_budget, self.difference)


def month_spend(expenses: Iterable[Expense], category: Union[Category, str], month: str) -> float:
    """Sum the amounts of ``category`` expenses dated in ``month`` (YYYY-MM)."""
    month = validate_month_key(month)
    category = Category.coerce(category)
    return sum(
        expense.amount
        for expense in expenses
        if expense.category == category and expense.month == month
    )


def _percentage(spent: float, limit: float) -> float:
    if limit > 0:
        return spent / limit * 100
    # A zero budget is exceeded by any spend at all.
    return math.inf if spent > 0 else 0.0


def classify(spent: float, limit: float, percentage: float, near_limit_percent: Optional[float] = None) -> BudgetStatus:
    threshold = config.get_near_limit_percent() if near_limit_percent is None else near_limit_percent
    if spent > limit:
        return BudgetStatus.OVER_BUDGET
    if percentage > threshold:
        return BudgetStatus.NEAR_LIMIT
    return BudgetStatus.ON_TRACK


def evaluate_budget(budget: Budget, expenses: Iterable[Expense]) -> BudgetEvaluation:
    """Compare one budget against the spend recorded in its month."""
    spent = month_spend(expenses, budget.category, budget.month)
    percentage = _percentage(spent, budget.amount)
    return BudgetEvaluation(
        budget=budget,
        spent=spent,
        percentage=percentage,
        status=classify(spent, budget.amount, percentage),
        difference=abs(budget.amount - spent),
    )


def evaluate_budgets(
    budgets: Iterable[Budget],
    expenses: Iterable[Expense],
    today: Optional[date] = None,
) -> List[BudgetEvaluation]:
    """Evaluate every budget set for the current month, in stored order.

    Budgets for other months are skipped.
    """
    month = current_month_key(today)
    expenses = list(expenses)
    return [evaluate_budget(budget, expenses) for budget in budgets if budget.month == month]

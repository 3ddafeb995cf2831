"""Search and category filtering for the expense list."""

from __future__ import annotations

from typing import Iterable, List, Union

from .models import Category, Expense

CategoryFilter = Union[Category, str, None]

NO_EXPENSES_MESSAGE = "No expenses yet. Add your first expense to get started!"
NO_MATCHES_MESSAGE = "No expenses match your search or filter."


def matches(expense: Expense, search_term: str = '', category: CategoryFilter = '') -> bool:
    """Return True when ``expense`` passes the category and search filters.

    An empty category or search term matches everything.  Search is a
    case-insensitive substring test against the title and description.
    """
    if category and expense.category != category:
        return False
    if not search_term:
        return True
    needle = search_term.lower()
    if needle in expense.title.lower():
        return True
    return bool(expense.description) and needle in expense.description.lower()


def filter_expenses(
    expenses: Iterable[Expense],
    search_term: str = '',
    category: CategoryFilter = '',
) -> List[Expense]:
    """Return the expenses matching the filters, keeping their order."""
    return [expense for expense in expenses if matches(expense, search_term, category)]


def empty_state_message(store_is_empty: bool) -> str:
    """Text shown when the filtered list is empty."""
    return NO_EXPENSES_MESSAGE if store_is_empty else NO_MATCHES_MESSAGE

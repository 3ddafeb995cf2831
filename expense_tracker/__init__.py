"""Top-level package for the Expense Tracker.

The package is split into a small in-memory core and a Streamlit
front end:

* ``store`` – the record collections (single source of truth)
* ``filters``, ``budgets``, ``insights``, ``goals``, ``summary`` –
  pure views recomputed from the store on every query
* ``tracker`` – the facade the UI calls into
* ``app`` – the Streamlit app (``streamlit run expense_tracker/Home.py``)

The Streamlit app is not imported here so the core can be used and
tested without a running Streamlit server.
"""

from .models import Budget, Category, Expense, RecurringExpense, SavingsGoal, ValidationError
from .store import DuplicateBudgetError, RecordStore
from .tracker import ExpenseTracker

__all__ = [
    "Budget",
    "Category",
    "DuplicateBudgetError",
    "Expense",
    "ExpenseTracker",
    "RecordStore",
    "RecurringExpense",
    "SavingsGoal",
    "ValidationError",
]

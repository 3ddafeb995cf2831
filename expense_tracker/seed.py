"""Demonstration data loaded into a fresh session."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List

from .store import RecordStore

SEED_EXPENSES: List[Dict[str, Any]] = [
    {
        'title': 'Grocery Shopping',
        'amount': 85.50,
        'category': 'Food',
        'date': date(2025, 1, 15),
        'description': 'Weekly grocery shopping at the local supermarket',
    },
    {
        'title': 'Monthly Rent',
        'amount': 1200.00,
        'category': 'Rent',
        'date': date(2025, 1, 1),
        'description': 'January rent payment',
    },
    {
        'title': 'Bus Pass',
        'amount': 45.00,
        'category': 'Transport',
        'date': date(2025, 1, 10),
        'description': 'Monthly public transport pass',
    },
]

SEED_RECURRING: List[Dict[str, Any]] = [
    {
        'title': 'Monthly Rent',
        'amount': 1200.00,
        'category': 'Rent',
        'day_of_month': 1,
        'description': 'Monthly apartment rent',
        'is_active': True,
    },
]

SEED_GOALS: List[Dict[str, Any]] = [
    {
        'title': 'Emergency Fund',
        'target_amount': 5000.00,
        'current_amount': 1250.00,
        'target_date': date(2025, 12, 31),
        'description': '6 months of expenses for emergencies',
    },
]


def load_seed(store: RecordStore) -> RecordStore:
    """Populate ``store`` with the demonstration records and return it.

    Expenses are listed newest-added first, so they are added in reverse
    to keep the order above.
    """
    for data in reversed(SEED_EXPENSES):
        store.expenses.add(data)
    for data in SEED_RECURRING:
        store.recurring.add(data)
    for data in SEED_GOALS:
        store.goals.add(data)
    return store

"""Spending insights computed over the full expense list.

Four independent views feed the insights panel: the largest spending
categories, the monthly trend, the biggest single expenses and the
average daily spend.  They are always computed from the unfiltered
expense collection.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from . import config
from .models import Category, Expense

FRAME_COLUMNS = ['Title', 'Amount', 'Category', 'Date', 'Month']


def expenses_frame(expenses: Sequence[Expense]) -> pd.DataFrame:
    """Build a DataFrame with one row per expense, keeping list order in the index."""
    if not expenses:
        frame = pd.DataFrame(columns=FRAME_COLUMNS)
        frame['Amount'] = frame['Amount'].astype(float)
        frame['Date'] = pd.to_datetime(frame['Date'])
        return frame
    frame = pd.DataFrame(
        {
            'Title': [e.title for e in expenses],
            'Amount': [e.amount for e in expenses],
            'Category': [e.category.value for e in expenses],
            'Date': pd.to_datetime([e.date for e in expenses]),
        }
    )
    frame['Month'] = frame['Date'].dt.strftime('%Y-%m')
    return frame


def category_totals(expenses: Sequence[Expense], limit: Optional[int] = None) -> List[Tuple[Category, float]]:
    """Return the ``limit`` highest-spending categories, largest first.

    Equal totals keep the order in which the categories first appear.
    """
    limit = config.get_top_n() if limit is None else limit
    frame = expenses_frame(expenses)
    if frame.empty:
        return []
    totals = (
        frame.groupby('Category', sort=False)['Amount']
        .sum()
        .sort_values(ascending=False, kind='stable')
        .head(limit)
    )
    return [(Category(name), float(total)) for name, total in totals.items()]


def monthly_trend(expenses: Sequence[Expense], months: Optional[int] = None) -> List[Tuple[str, float]]:
    """Return ``(YYYY-MM, total)`` pairs for the latest months that have expenses.

    Months without expenses are not counted, so the result covers the
    last ``months`` months present in the data, oldest first.
    """
    months = config.get_trend_months() if months is None else months
    frame = expenses_frame(expenses)
    if frame.empty:
        return []
    totals = frame.groupby('Month')['Amount'].sum().sort_index().tail(months)
    return [(str(month), float(total)) for month, total in totals.items()]


def top_expenses(expenses: Sequence[Expense], limit: Optional[int] = None) -> List[Expense]:
    """Return the ``limit`` largest expenses; ties keep list order."""
    limit = config.get_top_n() if limit is None else limit
    expenses = list(expenses)
    frame = expenses_frame(expenses)
    if frame.empty:
        return []
    ranked = frame.sort_values('Amount', ascending=False, kind='stable').head(limit)
    return [expenses[position] for position in ranked.index]


def daily_average(expenses: Sequence[Expense]) -> float:
    """Average spend per day across the span of expense dates.

    The span is floored at one day, so a single-day dataset averages to
    that day's total.
    """
    frame = expenses_frame(expenses)
    if frame.empty:
        return 0.0
    span = frame['Date'].max() - frame['Date'].min()
    days = max(1, math.ceil(span.total_seconds() / 86400))
    return float(frame['Amount'].sum()) / days


def _ratios(values: Sequence[float], base: float) -> List[float]:
    amounts = np.asarray(values, dtype=float)
    ratios = np.divide(amounts * 100, base, out=np.zeros_like(amounts), where=base > 0)
    return [float(r) for r in ratios]


@dataclass(frozen=True)
class SpendingInsights:
    category_totals: List[Tuple[Category, float]]
    monthly_trend: List[Tuple[str, float]]
    top_expenses: List[Expense]
    daily_average: float
    total: float
    count: int
    # Percent of total spend for each entry of category_totals
    category_shares: List[float] = field(default_factory=list)
    # Percent of the largest month for each entry of monthly_trend
    trend_ratios: List[float] = field(default_factory=list)

    @property
    def biggest_category(self) -> Optional[Category]:
        return self.category_totals[0][0] if self.category_totals else None

    @property
    def biggest_category_total(self) -> float:
        return self.category_totals[0][1] if self.category_totals else 0.0

    @property
    def largest_expense(self) -> Optional[Expense]:
        return self.top_expenses[0] if self.top_expenses else None


def compute_insights(expenses: Sequence[Expense]) -> SpendingInsights:
    """Compute every insights view over ``expenses``."""
    expenses = list(expenses)
    totals = category_totals(expenses)
    trend = monthly_trend(expenses)
    grand_total = float(sum(e.amount for e in expenses))
    largest_month = max((amount for _, amount in trend), default=0.0)
    return SpendingInsights(
        category_totals=totals,
        monthly_trend=trend,
        top_expenses=top_expenses(expenses),
        daily_average=daily_average(expenses),
        total=grand_total,
        count=len(expenses),
        category_shares=_ratios([amount for _, amount in totals], grand_total),
        trend_ratios=_ratios([amount for _, amount in trend], largest_month),
    )

"""Portfolio-wide expense totals."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from .insights import expenses_frame
from .models import Expense, current_month_key


@dataclass(frozen=True)
class Summary:
    total: float
    count: int
    average: float
    monthly_total: float


def compute_summary(expenses: Sequence[Expense], today: Optional[date] = None) -> Summary:
    """Grand total, transaction count, average and current-month total.

    The current month is taken from ``today`` (default: the real date)
    on every call.
    """
    frame = expenses_frame(list(expenses))
    if frame.empty:
        return Summary(total=0.0, count=0, average=0.0, monthly_total=0.0)
    total = float(frame['Amount'].sum())
    count = len(frame)
    this_month = frame['Month'] == current_month_key(today)
    return Summary(
        total=total,
        count=count,
        average=total / count,
        monthly_total=float(frame.loc[this_month, 'Amount'].sum()),
    )

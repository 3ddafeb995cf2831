"""Savings goal progress and contributions."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, List, Optional

from .formatting import goal_label
from .models import SavingsGoal


class GoalStatus(str, Enum):
    COMPLETED = 'completed'
    OVERDUE = 'overdue'
    ON_TRACK = 'onTrack'


@dataclass(frozen=True)
class GoalProgress:
    goal: SavingsGoal
    percentage: float
    remaining: float
    is_completed: bool
    days_remaining: int
    is_overdue: bool

    @property
    def status(self) -> GoalStatus:
        if self.is_completed:
            return GoalStatus.COMPLETED
        if self.is_overdue:
            return GoalStatus.OVERDUE
        return GoalStatus.ON_TRACK

    @property
    def bar_percentage(self) -> float:
        return max(0.0, min(self.percentage, 100.0))

    @property
    def label(self) -> str:
        return goal_label(self.is_completed, self.is_overdue, self.days_remaining)


def goal_progress(goal: SavingsGoal, today: Optional[date] = None) -> GoalProgress:
    """Compute completion and deadline figures for one goal.

    A goal with a zero target counts as already complete.
    """
    today = today or date.today()
    if goal.target_amount > 0:
        percentage = goal.current_amount / goal.target_amount * 100
    else:
        percentage = 100.0
    is_completed = goal.current_amount >= goal.target_amount
    days_remaining = (goal.target_date - today).days
    return GoalProgress(
        goal=goal,
        percentage=percentage,
        remaining=goal.target_amount - goal.current_amount,
        is_completed=is_completed,
        days_remaining=days_remaining,
        is_overdue=days_remaining < 0 and not is_completed,
    )


def compute_goal_progress(goals: Iterable[SavingsGoal], today: Optional[date] = None) -> List[GoalProgress]:
    today = today or date.today()
    return [goal_progress(goal, today) for goal in goals]


def apply_contribution(goal: SavingsGoal, amount: float) -> SavingsGoal:
    """Return ``goal`` with ``amount`` added to its saved total.

    The total is not clamped; saving past the target keeps the goal
    completed.
    """
    return dataclasses.replace(goal, current_amount=goal.current_amount + float(amount))

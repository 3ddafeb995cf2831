"""Per-session interaction state.

The UI keeps the search box, the category dropdown, the expense open
for editing and the half-typed contribution amounts here instead of in
module globals.  A :class:`Session` lives exactly as long as one
interactive session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class Session:
    search_term: str = ''
    category_filter: str = ''
    editing_expense_id: Optional[str] = None
    contribution_inputs: Dict[str, str] = field(default_factory=dict)

    def start_edit(self, expense_id: str) -> None:
        self.editing_expense_id = expense_id

    def cancel_edit(self) -> None:
        self.editing_expense_id = None

    def is_editing(self, expense_id: Optional[str] = None) -> bool:
        if expense_id is None:
            return self.editing_expense_id is not None
        return self.editing_expense_id == expense_id

    def forget_expense(self, expense_id: str) -> None:
        """Drop the editing reference if it points at a deleted expense."""
        if self.editing_expense_id == expense_id:
            self.editing_expense_id = None

    def set_contribution_input(self, goal_id: str, text: str) -> None:
        self.contribution_inputs[goal_id] = text

    def pop_contribution_input(self, goal_id: str) -> str:
        return self.contribution_inputs.pop(goal_id, '')

    def clear_filters(self) -> None:
        self.search_term = ''
        self.category_filter = ''

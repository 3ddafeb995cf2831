"""Streamlit user interface for the expense tracker.

The UI owns no business logic: every button and form calls into the
:class:`~expense_tracker.tracker.ExpenseTracker` stored in
``st.session_state`` and renders whatever the query calls return.

To run the app from the command line::

    streamlit run expense_tracker/Home.py
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import date
from typing import Optional

import streamlit as st
from streamlit.errors import StreamlitAPIException

from . import config
from . import visualization as viz
from .formatting import escape_dollar_for_markdown, format_currency, format_percentage
from .models import CATEGORIES, Budget, Category, RecurringExpense, SavingsGoal
from .tracker import ExpenseTracker

logger = logging.getLogger(__name__)

TRACKER_KEY = 'tracker'
STATUS_ICONS = {
    'onTrack': '🟢',
    'nearLimit': '🟡',
    'overBudget': '🔴',
}
CATEGORY_NAMES = [category.value for category in CATEGORIES]
DAYS_OF_MONTH = list(range(1, config.MAX_DAY_OF_MONTH + 1))

# session_state keys holding the id of the row shown as an edit form
EDIT_KEYS = {
    'budget': 'editing_budget_id',
    'recurring': 'editing_recurring_id',
    'goal': 'editing_goal_id',
}
CONTRIBUTION_ERROR_KEY = 'contribution_error_goal_id'


def get_tracker() -> ExpenseTracker:
    """Return the tracker for this browser session, creating it on first use."""
    if TRACKER_KEY not in st.session_state:
        tracker = ExpenseTracker.with_seed() if config.SEED_ON_START else ExpenseTracker()
        st.session_state[TRACKER_KEY] = tracker
        logger.info("Started new tracker session (seeded=%s)", config.SEED_ON_START)
    return st.session_state[TRACKER_KEY]


def _rerun() -> None:
    rerun_fn = getattr(st, 'rerun', None) or getattr(st, 'experimental_rerun', None)
    if rerun_fn:
        rerun_fn()


def _category_index(value: Optional[str], default: Category) -> int:
    name = value or default.value
    return CATEGORY_NAMES.index(name) if name in CATEGORY_NAMES else 0


def _contribution_key(goal_id: str) -> str:
    return f"contribution_{goal_id}"


def _start_editing(kind: str, record_id: str) -> None:
    st.session_state[EDIT_KEYS[kind]] = record_id


def _stop_editing(kind: str) -> None:
    st.session_state.pop(EDIT_KEYS[kind], None)


def _is_editing(kind: str, record_id: str) -> bool:
    return st.session_state.get(EDIT_KEYS[kind]) == record_id


class ExpenseTrackerUI:
    """Renders each section of the page for one tracker."""
    _PAGE_CONFIGURED = False

    def __init__(self, tracker: ExpenseTracker):
        self.tracker = tracker

    def setup_page_config(self) -> None:
        if ExpenseTrackerUI._PAGE_CONFIGURED:
            return
        try:
            st.set_page_config(
                page_title="Expense Tracker",
                page_icon="💰",
                layout="wide",
            )
        except StreamlitAPIException:
            # Already configured upstream; keep reruns smooth.
            pass
        finally:
            ExpenseTrackerUI._PAGE_CONFIGURED = True

    def render_header(self) -> None:
        st.title("💰 Expense Tracker")
        st.markdown(
            "Monitor your spending, categorize expenses, and work towards your financial goals."
        )

    def render_summary(self) -> None:
        summary = self.tracker.compute_summary()
        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Total Expenses", format_currency(summary.total))
        with col2:
            st.metric("Transactions", f"{summary.count}")
        with col3:
            st.metric("Average Expense", format_currency(summary.average))
        with col4:
            st.metric("This Month", format_currency(summary.monthly_total))

    def render_budgets(self) -> None:
        st.subheader("🎯 Budget Tracker")
        with st.expander("➕ Add Budget"):
            with st.form("add_budget_form", clear_on_submit=True):
                category = st.selectbox("Category", CATEGORY_NAMES, index=_category_index(None, Category.FOOD))
                amount = st.number_input("Budget amount", min_value=0.0, step=10.0, format="%.2f")
                if st.form_submit_button("Add"):
                    try:
                        self.tracker.add_budget(category=category, amount=amount)
                    except ValueError as exc:
                        st.error(str(exc))
                    else:
                        _rerun()

        evaluations = self.tracker.evaluate_budgets()
        if not evaluations:
            st.info("No budgets set for this month. Add your first budget to start tracking!")
            return

        for evaluation in evaluations:
            budget = evaluation.budget
            with st.container(border=True):
                if _is_editing('budget', budget.id):
                    self._render_budget_edit_form(budget)
                    continue
                icon = STATUS_ICONS[evaluation.status.value]
                col1, col2, col3 = st.columns([4, 1, 1])
                with col1:
                    st.markdown(f"**{icon} {budget.category.value}**")
                    st.caption(escape_dollar_for_markdown(
                        f"{format_currency(evaluation.spent)} spent of {format_currency(budget.amount)} "
                        f"({format_percentage(evaluation.percentage)})"
                    ))
                    st.progress(evaluation.bar_percentage / 100)
                    st.caption(escape_dollar_for_markdown(evaluation.message))
                with col2:
                    st.button("✏️ Edit", key=f"edit_budget_{budget.id}", on_click=_start_editing, args=('budget', budget.id))
                with col3:
                    if st.button("🗑️ Delete", key=f"delete_budget_{budget.id}"):
                        self.tracker.delete_budget(budget.id)
                        _rerun()

        st.plotly_chart(viz.create_budget_progress_chart(evaluations), width="stretch")

    def _render_budget_edit_form(self, budget: Budget) -> None:
        with st.form(f"edit_budget_form_{budget.id}"):
            category = st.selectbox(
                "Category",
                CATEGORY_NAMES,
                index=_category_index(budget.category.value, Category.FOOD),
                key=f"budget_category_{budget.id}",
            )
            amount = st.number_input(
                "Budget amount",
                min_value=0.0,
                value=float(budget.amount),
                step=10.0,
                format="%.2f",
                key=f"budget_amount_{budget.id}",
            )
            save = st.form_submit_button("Save Budget")
            cancel = st.form_submit_button("Cancel")

        if cancel:
            _stop_editing('budget')
            _rerun()
        elif save:
            try:
                self.tracker.update_budget(dataclasses.replace(budget, category=category, amount=amount))
            except ValueError as exc:
                st.error(str(exc))
            else:
                _stop_editing('budget')
                _rerun()

    def render_recurring(self) -> None:
        st.subheader("🔁 Recurring Expenses")
        with st.expander("➕ Add Recurring Expense"):
            with st.form("add_recurring_form", clear_on_submit=True):
                title = st.text_input("Title")
                amount = st.number_input("Amount", min_value=0.0, step=1.0, format="%.2f")
                category = st.selectbox("Category", CATEGORY_NAMES, index=_category_index(None, Category.RENT))
                day = st.selectbox("Day of month", DAYS_OF_MONTH)
                description = st.text_area("Description (optional)")
                if st.form_submit_button("Add"):
                    try:
                        self.tracker.add_recurring(
                            title=title,
                            amount=amount,
                            category=category,
                            day_of_month=day,
                            description=description,
                        )
                    except ValueError as exc:
                        st.error(str(exc))
                    else:
                        _rerun()

        templates = self.tracker.list_recurring()
        if not templates:
            st.info("No recurring expenses yet.")
            return
        for template in templates:
            if _is_editing('recurring', template.id):
                self._render_recurring_edit_form(template)
                continue
            col1, col2, col3, col4 = st.columns([4, 1, 1, 1])
            with col1:
                state = "Active" if template.is_active else "Paused"
                st.markdown(escape_dollar_for_markdown(
                    f"**{template.title}** · {format_currency(template.amount)} · "
                    f"{template.category.value} · day {template.day_of_month} · _{state}_"
                ))
                if template.description:
                    st.caption(template.description)
            with col2:
                label = "⏸️ Pause" if template.is_active else "▶️ Resume"
                if st.button(label, key=f"toggle_recurring_{template.id}"):
                    self.tracker.toggle_recurring(template.id)
                    _rerun()
            with col3:
                st.button(
                    "✏️ Edit",
                    key=f"edit_recurring_{template.id}",
                    on_click=_start_editing,
                    args=('recurring', template.id),
                )
            with col4:
                if st.button("🗑️ Delete", key=f"delete_recurring_{template.id}"):
                    self.tracker.delete_recurring(template.id)
                    _rerun()

    def _render_recurring_edit_form(self, template: RecurringExpense) -> None:
        with st.form(f"edit_recurring_form_{template.id}"):
            title = st.text_input("Title", value=template.title, key=f"recurring_title_{template.id}")
            amount = st.number_input(
                "Amount",
                min_value=0.0,
                value=float(template.amount),
                step=1.0,
                format="%.2f",
                key=f"recurring_amount_{template.id}",
            )
            category = st.selectbox(
                "Category",
                CATEGORY_NAMES,
                index=_category_index(template.category.value, Category.RENT),
                key=f"recurring_category_{template.id}",
            )
            day = st.selectbox(
                "Day of month",
                DAYS_OF_MONTH,
                index=DAYS_OF_MONTH.index(template.day_of_month),
                key=f"recurring_day_{template.id}",
            )
            description = st.text_area(
                "Description (optional)",
                value=template.description or "",
                key=f"recurring_description_{template.id}",
            )
            save = st.form_submit_button("Save Template")
            cancel = st.form_submit_button("Cancel")

        if cancel:
            _stop_editing('recurring')
            _rerun()
        elif save:
            try:
                # Pausing is a separate action; an edit keeps is_active as it is.
                self.tracker.update_recurring(dataclasses.replace(
                    template,
                    title=title,
                    amount=amount,
                    category=category,
                    day_of_month=day,
                    description=description,
                ))
            except ValueError as exc:
                st.error(str(exc))
            else:
                _stop_editing('recurring')
                _rerun()

    def render_insights(self) -> None:
        st.subheader("📈 Spending Insights")
        insights = self.tracker.compute_insights()

        col1, col2 = st.columns(2)
        with col1:
            if insights.category_totals:
                st.plotly_chart(viz.create_category_bar_chart(insights.category_totals), width="stretch")
                for (category, amount), share in zip(insights.category_totals, insights.category_shares):
                    st.caption(escape_dollar_for_markdown(
                        f"{category.value}: {format_currency(amount)} · {share:.1f}% of total spending"
                    ))
            else:
                st.info("No spending data yet.")
        with col2:
            if insights.monthly_trend:
                st.plotly_chart(viz.create_monthly_trend_chart(insights.monthly_trend), width="stretch")
            else:
                st.info("No monthly data yet.")

        st.markdown("**Key Insights**")
        k1, k2, k3, k4 = st.columns(4)
        with k1:
            biggest = insights.biggest_category
            st.metric(
                "Biggest Category",
                biggest.value if biggest else "N/A",
                format_currency(insights.biggest_category_total) if biggest else None,
                delta_color="off",
            )
        with k2:
            st.metric("Daily Average", format_currency(insights.daily_average))
        with k3:
            largest = insights.largest_expense
            st.metric(
                "Largest Expense",
                format_currency(largest.amount if largest else 0),
                largest.title if largest else "None",
                delta_color="off",
            )
        with k4:
            st.metric("Total Spent", format_currency(insights.total), f"{insights.count} transactions", delta_color="off")


    def render_goals(self) -> None:
        st.subheader("🏦 Savings Goals")
        with st.expander("➕ Add Goal"):
            with st.form("add_goal_form", clear_on_submit=True):
                title = st.text_input("Goal title (e.g., Emergency Fund)")
                target = st.number_input("Target amount", min_value=0.0, step=100.0, format="%.2f")
                target_date = st.date_input("Target date", value=date.today())
                description = st.text_area("Description (optional)")
                if st.form_submit_button("Add Goal"):
                    try:
                        self.tracker.add_goal(
                            title=title,
                            target_amount=target,
                            target_date=target_date,
                            description=description,
                        )
                    except ValueError as exc:
                        st.error(str(exc))
                    else:
                        _rerun()

        progress_list = self.tracker.compute_goal_progress()
        if not progress_list:
            st.info("No savings goals yet. Set your first financial goal to start tracking progress!")
            return

        for progress in progress_list:
            goal = progress.goal
            with st.container(border=True):
                if _is_editing('goal', goal.id):
                    self._render_goal_edit_form(goal)
                    continue
                st.markdown(f"**{goal.title}** · {progress.label}")
                if goal.description:
                    st.caption(goal.description)
                st.progress(progress.bar_percentage / 100)
                st.caption(escape_dollar_for_markdown(
                    f"{format_currency(goal.current_amount)} saved of {format_currency(goal.target_amount)} "
                    f"({format_percentage(progress.percentage)}) · {format_currency(progress.remaining)} remaining"
                ))
                col1, col2, col3, col4 = st.columns([3, 1, 1, 1])
                if not progress.is_completed:
                    with col1:
                        text = st.text_input("Add amount", key=_contribution_key(goal.id))
                        self.tracker.set_contribution_input(goal.id, text)
                    with col2:
                        st.button(
                            "Add",
                            key=f"contribute_{goal.id}",
                            on_click=self._submit_contribution,
                            args=(goal.id,),
                        )
                    if st.session_state.get(CONTRIBUTION_ERROR_KEY) == goal.id:
                        st.session_state.pop(CONTRIBUTION_ERROR_KEY)
                        st.warning("Enter a positive amount to contribute.")
                with col3:
                    st.button("✏️ Edit", key=f"edit_goal_{goal.id}", on_click=_start_editing, args=('goal', goal.id))
                with col4:
                    if st.button("🗑️ Delete", key=f"delete_goal_{goal.id}"):
                        self.tracker.delete_goal(goal.id)
                        _rerun()

        st.plotly_chart(viz.create_goal_progress_chart(progress_list), width="stretch")

    def _submit_contribution(self, goal_id: str) -> None:
        # Runs as a button callback, before the input widget is drawn again,
        # so the widget value can still be reset here.
        key = _contribution_key(goal_id)
        self.tracker.set_contribution_input(goal_id, st.session_state.get(key, ''))
        if self.tracker.submit_contribution(goal_id):
            st.session_state[key] = ''
            st.session_state.pop(CONTRIBUTION_ERROR_KEY, None)
        else:
            st.session_state[CONTRIBUTION_ERROR_KEY] = goal_id

    def _render_goal_edit_form(self, goal: SavingsGoal) -> None:
        with st.form(f"edit_goal_form_{goal.id}"):
            title = st.text_input("Goal title", value=goal.title, key=f"goal_title_{goal.id}")
            target = st.number_input(
                "Target amount",
                min_value=0.0,
                value=float(goal.target_amount),
                step=100.0,
                format="%.2f",
                key=f"goal_target_{goal.id}",
            )
            target_date = st.date_input("Target date", value=goal.target_date, key=f"goal_date_{goal.id}")
            description = st.text_area(
                "Description (optional)",
                value=goal.description or "",
                key=f"goal_description_{goal.id}",
            )
            save = st.form_submit_button("Save Goal")
            cancel = st.form_submit_button("Cancel")

        if cancel:
            _stop_editing('goal')
            _rerun()
        elif save:
            try:
                self.tracker.edit_goal(
                    goal.id,
                    title=title,
                    target_amount=target,
                    target_date=target_date,
                    description=description,
                )
            except ValueError as exc:
                st.error(str(exc))
            else:
                _stop_editing('goal')
                _rerun()


    def render_expense_form(self) -> None:
        editing = self.tracker.editing_expense
        st.subheader("✏️ Edit Expense" if editing else "➕ Add Expense")
        form_key = f"expense_form_{editing.id}" if editing else "expense_form_new"
        with st.form(form_key, clear_on_submit=editing is None):
            title = st.text_input("Title", value=editing.title if editing else "")
            amount = st.number_input(
                "Amount",
                min_value=0.0,
                value=float(editing.amount) if editing else 0.0,
                step=1.0,
                format="%.2f",
            )
            category = st.selectbox(
                "Category",
                CATEGORY_NAMES,
                index=_category_index(editing.category.value if editing else None, Category.FOOD),
            )
            expense_date = st.date_input("Date", value=editing.date if editing else date.today())
            description = st.text_area("Description (optional)", value=(editing.description or "") if editing else "")
            submitted = st.form_submit_button("Update Expense" if editing else "Add Expense")
            cancelled = st.form_submit_button("Cancel") if editing else False

        if cancelled:
            self.tracker.cancel_edit()
            _rerun()
        elif submitted:
            data = {
                'title': title,
                'amount': amount,
                'category': category,
                'date': expense_date,
                'description': description,
            }
            try:
                if editing:
                    self.tracker.edit_expense(data)
                else:
                    self.tracker.add_expense(data)
            except ValueError as exc:
                st.error(str(exc))
            else:
                _rerun()

    def render_expense_list(self) -> None:
        st.subheader("📋 Expenses")
        col1, col2 = st.columns([3, 1])
        with col1:
            search = st.text_input("Search expenses", value=self.tracker.session.search_term)
        with col2:
            options = ["All Categories"] + CATEGORY_NAMES
            current = self.tracker.session.category_filter or "All Categories"
            choice = st.selectbox("Category", options, index=options.index(current))
        self.tracker.set_search(search)
        self.tracker.set_category_filter("" if choice == "All Categories" else choice)

        expenses = self.tracker.list_expenses()
        if not expenses:
            st.info(self.tracker.empty_list_message())
            return

        for expense in expenses:
            col1, col2, col3 = st.columns([5, 1, 1])
            with col1:
                st.markdown(escape_dollar_for_markdown(
                    f"**{expense.title}** · {format_currency(expense.amount)} · "
                    f"{expense.category.value} · {expense.date.isoformat()}"
                ))
                if expense.description:
                    st.caption(expense.description)
            with col2:
                if st.button("✏️ Edit", key=f"edit_expense_{expense.id}"):
                    self.tracker.start_edit(expense.id)
                    _rerun()
            with col3:
                if st.button("🗑️ Delete", key=f"delete_expense_{expense.id}"):
                    self.tracker.delete_expense(expense.id)
                    _rerun()


def main() -> None:
    """Render the whole expense tracker page."""
    config.configure_logging()
    ui = ExpenseTrackerUI(get_tracker())
    ui.setup_page_config()
    ui.render_header()
    ui.render_summary()
    st.divider()
    ui.render_budgets()
    st.divider()
    ui.render_recurring()
    st.divider()
    ui.render_insights()
    st.divider()
    ui.render_goals()
    st.divider()
    ui.render_expense_form()
    ui.render_expense_list()

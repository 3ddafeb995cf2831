from datetime import date

import pytest

from expense_tracker.budgets import BudgetStatus
from expense_tracker.models import Budget, Category, ValidationError
from expense_tracker.store import DuplicateBudgetError
from expense_tracker.tracker import ExpenseTracker

TODAY = date(2025, 1, 20)


def _tracker(seed=True):
    if seed:
        return ExpenseTracker.with_seed(clock=lambda: TODAY)
    return ExpenseTracker(clock=lambda: TODAY)


def test_seed_dataset():
    tracker = _tracker()
    assert [e.title for e in tracker.list_expenses()] == ['Grocery Shopping', 'Monthly Rent', 'Bus Pass']
    assert len(tracker.list_recurring()) == 1
    assert tracker.list_goals()[0].current_amount == 1250
    assert tracker.list_budgets() == []


def test_add_expense_is_listed_first():
    tracker = _tracker()
    added = tracker.add_expense(title='Cinema', amount=12, category='Entertainment', date='2025-01-18')
    assert tracker.list_expenses()[0] == added


def test_edit_expense_uses_open_edit_and_clears_it():
    tracker = _tracker()
    target = tracker.list_expenses()[1]
    tracker.start_edit(target.id)
    assert tracker.editing_expense == target

    updated = tracker.edit_expense({
        'title': 'Rent',
        'amount': 1250,
        'category': 'Rent',
        'date': '2025-01-01',
    })

    assert updated.id == target.id
    assert tracker.store.expenses.get(target.id).amount == 1250
    assert tracker.editing_expense is None
    assert len(tracker.list_expenses(filtered=False)) == 3


def test_edit_without_open_expense_does_nothing():
    tracker = _tracker()
    before = tracker.list_expenses()
    assert tracker.edit_expense({'title': 'x', 'amount': 1, 'category': 'Food', 'date': '2025-01-01'}) is None
    assert tracker.list_expenses() == before


def test_deleting_edited_expense_clears_edit_session():
    tracker = _tracker()
    target = tracker.list_expenses()[0]
    tracker.start_edit(target.id)

    assert tracker.delete_expense(target.id)
    assert tracker.session.editing_expense_id is None
    assert tracker.editing_expense is None


def test_deleting_other_expense_keeps_edit_session():
    tracker = _tracker()
    first, second = tracker.list_expenses()[:2]
    tracker.start_edit(first.id)
    tracker.delete_expense(second.id)
    assert tracker.session.editing_expense_id == first.id


def test_filters_come_from_session():
    tracker = _tracker()
    tracker.set_search('monthly')
    assert [e.title for e in tracker.list_expenses()] == ['Monthly Rent', 'Bus Pass']
    tracker.set_category_filter('transport')
    assert [e.title for e in tracker.list_expenses()] == ['Bus Pass']
    assert tracker.session.category_filter == 'Transport'
    tracker.set_search('nothing here')
    assert tracker.list_expenses() == []
    assert tracker.empty_list_message().startswith('No expenses match')
    assert len(tracker.list_expenses(filtered=False)) == 3


def test_budget_defaults_to_current_month_and_is_evaluated():
    tracker = _tracker()
    budget = tracker.add_budget(category='Food', amount=100)
    assert budget.month == '2025-01'

    [evaluation] = tracker.evaluate_budgets()
    assert evaluation.spent == 85.50
    assert evaluation.status is BudgetStatus.NEAR_LIMIT

    tracker.add_expense(title='Snacks', amount=20, category='Food', date='2025-01-19')
    assert tracker.evaluate_budgets()[0].status is BudgetStatus.OVER_BUDGET


def test_budget_update_and_delete():
    tracker = _tracker()
    budget = tracker.add_budget(category='Rent', amount=1000)
    assert tracker.update_budget(Budget(category='Rent', amount=1400, month=budget.month, id=budget.id))
    assert tracker.evaluate_budgets()[0].status is BudgetStatus.NEAR_LIMIT
    assert tracker.delete_budget(budget.id)
    assert tracker.evaluate_budgets() == []
    assert tracker.delete_budget(budget.id) is False


def test_duplicate_budget_rejected():
    tracker = _tracker()
    tracker.add_budget(category='Food', amount=100)
    with pytest.raises(DuplicateBudgetError):
        tracker.add_budget(category='Food', amount=200)


def test_recurring_lifecycle_never_creates_expenses():
    tracker = _tracker()
    template = tracker.add_recurring(title='Gym', amount=30, category='Healthcare', day_of_month=5)
    assert tracker.toggle_recurring(template.id).is_active is False
    assert tracker.update_recurring(template.__class__(
        title='Gym Plus', amount=35, category='Healthcare', day_of_month=5, is_active=False, id=template.id,
    ))
    assert tracker.store.recurring.get(template.id).title == 'Gym Plus'
    assert tracker.delete_recurring(template.id)
    assert len(tracker.list_expenses(filtered=False)) == 3
    assert tracker.toggle_recurring('missing') is None


def test_contribute_to_goal():
    tracker = _tracker()
    goal = tracker.list_goals()[0]
    updated = tracker.contribute_to_goal(goal.id, 250)
    assert updated.current_amount == 1500

    [progress] = tracker.compute_goal_progress()
    assert progress.percentage == pytest.approx(30.0)
    assert not progress.is_completed


@pytest.mark.parametrize('amount', [0, -5, 'abc'])
def test_contribution_must_be_positive(amount):
    tracker = _tracker()
    goal = tracker.list_goals()[0]
    with pytest.raises(ValidationError):
        tracker.contribute_to_goal(goal.id, amount)
    assert tracker.store.goals.get(goal.id).current_amount == 1250


def test_submit_contribution_from_input_buffer():
    tracker = _tracker()
    goal = tracker.list_goals()[0]

    tracker.set_contribution_input(goal.id, 'not a number')
    assert tracker.submit_contribution(goal.id) is False
    assert tracker.session.contribution_inputs[goal.id] == 'not a number'

    tracker.set_contribution_input(goal.id, '100.25')
    assert tracker.submit_contribution(goal.id) is True
    assert goal.id not in tracker.session.contribution_inputs
    assert tracker.store.goals.get(goal.id).current_amount == pytest.approx(1350.25)

    assert tracker.submit_contribution(goal.id) is False


def test_edit_goal_preserves_saved_amount():
    tracker = _tracker()
    goal = tracker.list_goals()[0]
    edited = tracker.edit_goal(goal.id, title='Rainy Day', target_amount=6000)
    assert edited.current_amount == 1250
    assert edited.title == 'Rainy Day'
    assert tracker.edit_goal('missing', title='x') is None


def test_goal_add_update_delete():
    tracker = _tracker(seed=False)
    goal = tracker.add_goal(title='Laptop', target_amount=1500, target_date='2025-09-01')
    assert goal.current_amount == 0
    assert tracker.update_goal(goal.__class__(
        title='Laptop', target_amount=1800, target_date='2025-09-01', id=goal.id,
    ))
    assert tracker.list_goals()[0].target_amount == 1800
    tracker.set_contribution_input(goal.id, '50')
    assert tracker.delete_goal(goal.id)
    assert tracker.list_goals() == []
    assert goal.id not in tracker.session.contribution_inputs


def test_insights_ignore_list_filters():
    tracker = _tracker()
    tracker.set_category_filter(Category.FOOD)
    insights = tracker.compute_insights()
    assert insights.count == 3
    assert insights.biggest_category is Category.RENT
    assert insights.largest_expense.title == 'Monthly Rent'


def test_summary_uses_clock_and_is_repeatable():
    tracker = _tracker()
    first = tracker.compute_summary()
    assert first == tracker.compute_summary()
    assert first.total == pytest.approx(1330.50)
    assert first.monthly_total == pytest.approx(1330.50)

    later = ExpenseTracker(store=tracker.store, clock=lambda: date(2025, 3, 1))
    assert later.compute_summary().monthly_total == 0

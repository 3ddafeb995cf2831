import math
from datetime import date

from expense_tracker.budgets import (
    BudgetStatus,
    classify,
    evaluate_budget,
    evaluate_budgets,
    month_spend,
)
from expense_tracker.models import Budget, Expense

TODAY = date(2025, 1, 20)


def _expense(amount, category='Food', day='2025-01-15'):
    return Expense(title='Item', amount=amount, category=category, date=day)


def test_near_limit_example():
    expenses = [_expense(85.50)]
    budget = Budget(id='b1', category='Food', amount=100, month='2025-01')

    [result] = evaluate_budgets([budget], expenses, today=TODAY)

    assert result.spent == 85.50
    assert math.isclose(result.percentage, 85.5)
    assert result.status is BudgetStatus.NEAR_LIMIT
    assert math.isclose(result.difference, 14.50)
    assert result.message == '$14.50 remaining'


def test_spend_equal_to_budget_is_not_over_budget():
    result = evaluate_budget(Budget(category='Food', amount=100, month='2025-01'), [_expense(100)])
    # over budget needs strictly more spend than the budget
    assert result.status is BudgetStatus.NEAR_LIMIT
    assert not result.is_over_budget


def test_spend_equal_to_budget_below_threshold_is_on_track(monkeypatch):
    from expense_tracker import config

    monkeypatch.setattr(config, 'NEAR_LIMIT_PERCENT', 100.0)
    result = evaluate_budget(Budget(category='Food', amount=100, month='2025-01'), [_expense(100)])
    assert result.status is BudgetStatus.ON_TRACK


def test_over_budget_reports_overage():
    result = evaluate_budget(Budget(category='Food', amount=100, month='2025-01'), [_expense(70), _expense(55)])
    assert result.status is BudgetStatus.OVER_BUDGET
    assert result.difference == 25
    assert result.bar_percentage == 100
    assert result.message == 'Over budget by $25.00'


def test_low_spend_is_on_track():
    result = evaluate_budget(Budget(category='Food', amount=100, month='2025-01'), [_expense(10)])
    assert result.status is BudgetStatus.ON_TRACK
    assert not result.needs_attention


def test_spend_only_counts_matching_category_and_month():
    expenses = [
        _expense(10),
        _expense(20, category='Rent'),
        _expense(40, day='2024-12-31'),
        _expense(5, day='2025-01-31'),
    ]
    assert month_spend(expenses, 'Food', '2025-01') == 15


def test_zero_budget_is_degenerate_but_defined():
    over = evaluate_budget(Budget(category='Food', amount=0, month='2025-01'), [_expense(1)])
    assert math.isinf(over.percentage)
    assert over.status is BudgetStatus.OVER_BUDGET

    idle = evaluate_budget(Budget(category='Food', amount=0, month='2025-01'), [])
    assert idle.percentage == 0
    assert idle.status is BudgetStatus.ON_TRACK


def test_only_current_month_budgets_are_evaluated():
    budgets = [
        Budget(id='old', category='Food', amount=100, month='2024-12'),
        Budget(id='now', category='Food', amount=100, month='2025-01'),
        Budget(id='next', category='Rent', amount=100, month='2025-02'),
    ]
    results = evaluate_budgets(budgets, [_expense(10)], today=TODAY)
    assert [r.budget.id for r in results] == ['now']


def test_evaluation_reflects_latest_expenses():
    budget = Budget(category='Food', amount=100, month='2025-01')
    expenses = [_expense(50)]
    assert evaluate_budgets([budget], expenses, today=TODAY)[0].spent == 50
    expenses.append(_expense(60))
    assert evaluate_budgets([budget], expenses, today=TODAY)[0].status is BudgetStatus.OVER_BUDGET


def test_classify_uses_explicit_threshold():
    assert classify(95, 100, 95.0, near_limit_percent=90) is BudgetStatus.NEAR_LIMIT
    assert classify(95, 100, 95.0, near_limit_percent=99) is BudgetStatus.ON_TRACK
    assert classify(101, 100, 101.0, near_limit_percent=200) is BudgetStatus.OVER_BUDGET

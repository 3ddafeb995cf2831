import pytest

from expense_tracker.insights import (
    category_totals,
    compute_insights,
    daily_average,
    expenses_frame,
    monthly_trend,
    top_expenses,
)
from expense_tracker.models import Category, Expense


def _expense(title, amount, category, day):
    return Expense(id=title, title=title, amount=amount, category=category, date=day)


def _sample():
    return [
        _expense('Grocery Shopping', 85.50, 'Food', '2025-01-15'),
        _expense('Monthly Rent', 1200.00, 'Rent', '2025-01-01'),
        _expense('Bus Pass', 45.00, 'Transport', '2025-01-10'),
    ]


def test_category_totals_ranked_descending():
    assert category_totals(_sample()) == [
        (Category.RENT, 1200.00),
        (Category.FOOD, 85.50),
        (Category.TRANSPORT, 45.00),
    ]


def test_category_totals_group_and_limit_to_five():
    expenses = [
        _expense('a', 10, 'Food', '2025-01-01'),
        _expense('b', 15, 'Food', '2025-01-02'),
        _expense('c', 30, 'Shopping', '2025-01-03'),
        _expense('d', 1, 'Other', '2025-01-03'),
        _expense('e', 2, 'Utilities', '2025-01-03'),
        _expense('f', 3, 'Healthcare', '2025-01-03'),
        _expense('g', 4, 'Entertainment', '2025-01-03'),
    ]
    totals = category_totals(expenses)
    assert len(totals) == 5
    assert totals[0] == (Category.SHOPPING, 30)
    assert totals[1] == (Category.FOOD, 25)
    assert Category.OTHER not in [c for c, _ in totals]


def test_category_ties_keep_first_appearance():
    expenses = [
        _expense('a', 50, 'Transport', '2025-01-01'),
        _expense('b', 50, 'Food', '2025-01-02'),
    ]
    assert [c for c, _ in category_totals(expenses)] == [Category.TRANSPORT, Category.FOOD]


def test_monthly_trend_uses_latest_months_present():
    expenses = [
        _expense(f'e{m}', m * 10, 'Food', f'2024-{m:02d}-05') for m in (1, 2, 3, 5, 8, 9, 11)
    ] + [_expense('extra', 5, 'Rent', '2024-11-20')]
    trend = monthly_trend(expenses)
    assert [month for month, _ in trend] == ['2024-02', '2024-03', '2024-05', '2024-08', '2024-09', '2024-11']
    assert trend[-1] == ('2024-11', 115.0)


def test_monthly_trend_sorted_across_years():
    expenses = [
        _expense('late', 1, 'Food', '2025-01-02'),
        _expense('early', 2, 'Food', '2024-12-30'),
    ]
    assert [m for m, _ in monthly_trend(expenses)] == ['2024-12', '2025-01']


def test_top_expenses_descending_and_stable():
    expenses = _sample() + [_expense('Bus Pass 2', 45.00, 'Transport', '2025-01-12')]
    top = top_expenses(expenses, limit=3)
    assert [e.title for e in top] == ['Monthly Rent', 'Grocery Shopping', 'Bus Pass']
    assert [e.title for e in top_expenses(expenses)][-1] == 'Bus Pass 2'


def test_top_expenses_does_not_reorder_input():
    expenses = _sample()
    top_expenses(expenses)
    assert [e.title for e in expenses] == ['Grocery Shopping', 'Monthly Rent', 'Bus Pass']


def test_daily_average_over_span():
    # 2025-01-01 .. 2025-01-15 is a 14 day span
    assert daily_average(_sample()) == pytest.approx(1330.50 / 14)


def test_daily_average_single_day_and_empty():
    assert daily_average([_expense('x', 42.0, 'Food', '2025-03-03'), _expense('y', 8.0, 'Food', '2025-03-03')]) == 50.0
    assert daily_average([]) == 0


def test_compute_insights_key_facts():
    insights = compute_insights(_sample())
    assert insights.biggest_category is Category.RENT
    assert insights.biggest_category_total == 1200.00
    assert insights.largest_expense.title == 'Monthly Rent'
    assert insights.total == pytest.approx(1330.50)
    assert insights.count == 3
    assert insights.category_shares[0] == pytest.approx(1200 / 1330.5 * 100)
    assert insights.trend_ratios == [100.0]


def test_compute_insights_empty_uses_sentinels():
    insights = compute_insights([])
    assert insights.biggest_category is None
    assert insights.largest_expense is None
    assert insights.category_totals == []
    assert insights.monthly_trend == []
    assert insights.daily_average == 0
    assert insights.total == 0
    assert insights.category_shares == []


def test_expenses_frame_columns():
    frame = expenses_frame(_sample())
    assert list(frame.columns) == ['Title', 'Amount', 'Category', 'Date', 'Month']
    assert frame['Month'].tolist() == ['2025-01'] * 3
    assert expenses_frame([]).empty

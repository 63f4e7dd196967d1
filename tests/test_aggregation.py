import itertools
import math

import pytest

from balancebeam.aggregation import aggregate, category_totals, savings_progress
from balancebeam.models import BudgetItem


def _items():
    return [
        BudgetItem('1', 'Salary', 5000, 'income'),
        BudgetItem('2', 'Rent', 1200, 'expense'),
        BudgetItem('3', 'Freelance', 0.1, 'income'),
        BudgetItem('4', 'Groceries', 0.2, 'expense'),
        BudgetItem('5', 'Rent', 0.3, 'expense'),
    ]


def test_aggregate_salary_and_rent():
    result = aggregate([BudgetItem('a', 'Salary', 5000, 'income'), BudgetItem('b', 'Rent', 1200, 'expense')], 1000)
    assert result.total_income == 5000
    assert result.total_expenses == 1200
    assert result.net_income == 3800
    assert result.savings_progress == 100


def test_aggregate_empty_items():
    result = aggregate([], 1000)
    assert (result.total_income, result.total_expenses, result.net_income, result.savings_progress) == (0, 0, 0, 0)


def test_aggregate_is_order_independent():
    items = _items()
    expected = aggregate(items, 250)
    for permutation in itertools.permutations(items):
        assert aggregate(list(permutation), 250) == expected


def test_savings_progress_partial_and_negative():
    assert savings_progress(250, 1000) == 25.0
    assert savings_progress(-500, 1000) == -50.0


def test_savings_progress_with_zero_goal_is_zero():
    assert savings_progress(3800, 0) == 0.0
    assert savings_progress(3800, math.nan) == 0.0
    assert aggregate([BudgetItem('a', 'Salary', 10, 'income')], 0).savings_progress == 0.0


def test_aggregate_to_dict_keys():
    data = aggregate(_items()[:2], 1000).to_dict()
    assert data == {'totalIncome': 5000.0, 'totalExpenses': 1200.0, 'netIncome': 3800.0, 'savingsProgress': 100.0}


def test_category_totals_combines_repeated_categories():
    frame = category_totals(_items())
    assert list(frame.columns) == ['Category', 'Type', 'Amount']
    assert list(frame['Type']) == ['income', 'income', 'expense', 'expense']
    assert frame.iloc[0]['Category'] == 'Salary'
    rent = frame[frame['Category'] == 'Rent']
    assert len(rent) == 1
    assert rent['Amount'].item() == pytest.approx(1200.3)


def test_category_totals_empty():
    assert category_totals([]).empty

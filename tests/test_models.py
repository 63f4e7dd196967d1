import math
from datetime import datetime, timezone

import pytest

from balancebeam.exceptions import ItemValidationError
from balancebeam.models import (
    BudgetItem,
    BudgetSnapshot,
    ChartType,
    ItemKind,
    Preferences,
    field_error_messages,
    new_item,
    parse_amount,
    validate_item,
)


@pytest.mark.parametrize('text, expected', [
    ('5000', 5000.0),
    (' 12.5 ', 12.5),
    ('1e3', 1000.0),
    ('-4', -4.0),
])
def test_parse_amount_accepts_numbers(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize('text', ['', '   ', 'abc', '12abc', 'nan', 'inf', '1_000', None])
def test_parse_amount_rejects_non_numbers(text):
    assert parse_amount(text) is None


def test_validate_item_trims_category_and_parses_amount():
    entry = validate_item('  Salary  ', ' 5000 ')
    assert entry.category == 'Salary'
    assert entry.amount == 5000.0


@pytest.mark.parametrize('amount', ['abc', '0', '-10', 'nan'])
def test_validate_item_rejects_bad_amounts(amount):
    with pytest.raises(ItemValidationError) as excinfo:
        validate_item('Rent', amount)
    assert excinfo.value.errors == {'amount': 'invalid'}


def test_validate_item_reports_every_invalid_field():
    with pytest.raises(ItemValidationError) as excinfo:
        validate_item('   ', '')
    assert excinfo.value.errors == {'category': 'required', 'amount': 'required'}


def test_validate_item_blank_category_with_invalid_amount():
    with pytest.raises(ItemValidationError) as excinfo:
        validate_item('', '-1')
    assert excinfo.value.errors == {'category': 'required', 'amount': 'invalid'}


def test_field_error_messages_uses_display_text():
    messages = field_error_messages({'category': 'required', 'amount': 'invalid'})
    assert messages == {
        'category': 'Category is required',
        'amount': 'Please enter a valid positive number',
    }


def test_budget_item_rejects_invalid_values():
    with pytest.raises(ValueError):
        BudgetItem('a', '', 10, ItemKind.INCOME)
    with pytest.raises(ValueError):
        BudgetItem('a', 'Rent', 0, ItemKind.EXPENSE)
    with pytest.raises(ValueError):
        BudgetItem('a', 'Rent', math.inf, ItemKind.EXPENSE)
    with pytest.raises(ValueError):
        BudgetItem('a', 'Rent', True, ItemKind.EXPENSE)
    with pytest.raises(ValueError):
        BudgetItem('a', 'Rent', 10, 'transfer')


def test_budget_item_accepts_plain_kind_string():
    item = BudgetItem('a', 'Rent', 1200, 'expense')
    assert item.kind is ItemKind.EXPENSE
    assert isinstance(item.amount, float)


def test_budget_item_dict_uses_type_key():
    item = BudgetItem('csv-0', 'Salary', 5000, ItemKind.INCOME)
    data = item.to_dict()
    assert data == {'id': 'csv-0', 'category': 'Salary', 'amount': 5000.0, 'type': 'income'}
    assert BudgetItem.from_dict(data) == item


def test_budget_item_from_dict_rejects_string_amount():
    with pytest.raises(ValueError):
        BudgetItem.from_dict({'id': 'x', 'category': 'Rent', 'amount': '12', 'type': 'expense'})


def test_new_item_generates_unique_ids():
    first = new_item('Rent', 100, 'expense')
    second = new_item('Rent', 100, 'expense')
    assert first.id != second.id


def test_snapshot_is_immutable_copy_of_inputs():
    items = [new_item('Salary', 5000, 'income')]
    colors = ['#000000']
    snapshot = BudgetSnapshot.create('June', items, 500, 'bar', colors)
    items.append(new_item('Rent', 1200, 'expense'))
    colors.append('#ffffff')

    assert len(snapshot.items) == 1
    assert snapshot.color_theme == ('#000000',)
    assert snapshot.chart_type is ChartType.BAR
    with pytest.raises(AttributeError):
        snapshot.title = 'Changed'


def test_snapshot_dict_format():
    created = datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)
    snapshot = BudgetSnapshot(
        id='snap-1',
        title='March',
        items=(BudgetItem('i1', 'Salary', 5000, 'income'),),
        savings_goal=1000,
        chart_type='pie',
        color_theme=('#3B82F6',),
        created_at=created,
    )
    data = snapshot.to_dict()
    assert data['savingsGoal'] == 1000.0
    assert data['chartType'] == 'pie'
    assert data['colorTheme'] == ['#3B82F6']
    assert data['createdAt'] == '2024-03-01T12:30:00.000Z'
    assert BudgetSnapshot.from_dict(data) == snapshot


def test_preferences_default_to_animated():
    assert Preferences.from_dict({}).animated is True
    assert Preferences.from_dict({'isAnimated': False}).animated is False
    assert Preferences.from_dict({'isAnimated': 'no'}).animated is True
    assert Preferences(animated=False).to_dict() == {'isAnimated': False}


def test_out_of_range_numbers_raise_value_error():
    with pytest.raises(ValueError):
        BudgetItem.from_dict({'id': 'x', 'category': 'Rent', 'amount': 10 ** 400, 'type': 'expense'})
    with pytest.raises(ValueError):
        BudgetItem('x', 'Rent', 10 ** 400, ItemKind.EXPENSE)
    with pytest.raises(ValueError):
        BudgetSnapshot.create('Huge goal', [], 10 ** 400, 'pie', [])

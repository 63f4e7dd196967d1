import plotly.graph_objects as go
import pytest

from balancebeam.config import COLOR_THEMES
from balancebeam.models import BudgetItem, ChartType
from balancebeam.visualization import (
    create_bar_chart,
    create_budget_chart,
    create_line_chart,
    create_pie_chart,
    projection_frame,
)

THEME = COLOR_THEMES['Default']


def _items():
    return [
        BudgetItem('1', 'Rent', 1200, 'expense'),
        BudgetItem('2', 'Salary', 5000, 'income'),
        BudgetItem('3', 'Groceries', 400, 'expense'),
    ]


@pytest.mark.parametrize('chart_type', list(ChartType))
def test_every_chart_type_has_a_builder(chart_type):
    fig = create_budget_chart(_items(), chart_type, THEME)
    assert isinstance(fig, go.Figure)
    assert len(fig.data) > 0


@pytest.mark.parametrize('chart_type', ['bar', 'pie', 'line'])
def test_empty_items_give_placeholder(chart_type):
    fig = create_budget_chart([], chart_type, THEME)
    assert len(fig.data) == 0
    assert fig.layout.title.text == 'No data to display'


def test_unknown_chart_type():
    with pytest.raises(ValueError):
        create_budget_chart(_items(), 'scatter', THEME)


def test_pie_chart_lists_income_first():
    fig = create_pie_chart(_items(), THEME)
    assert list(fig.data[0].labels) == ['Salary', 'Rent', 'Groceries']
    assert list(fig.data[0].values) == [5000.0, 1200.0, 400.0]


def test_pie_chart_reuses_colours_cyclically():
    items = [BudgetItem(str(n), f'Item {n}', 10, 'expense') for n in range(7)]
    colors = list(create_pie_chart(items, ['#111111', '#222222']).data[0].marker.colors)
    assert colors == ['#111111', '#222222'] * 3 + ['#111111']


def test_bar_chart_compares_totals():
    fig = create_bar_chart(_items(), THEME)
    values = {trace.x[0]: trace.y[0] for trace in fig.data}
    assert values == {'Income': 5000.0, 'Expenses': 1600.0}


def test_animation_toggle_sets_transition_duration():
    assert create_bar_chart(_items(), THEME, animated=True).layout.transition.duration == 1000
    assert create_bar_chart(_items(), THEME, animated=False).layout.transition.duration == 0
    assert create_line_chart(_items(), THEME, animated=True).layout.transition.duration == 1500


def test_projection_stays_within_ten_percent_and_is_repeatable():
    frame = projection_frame(_items(), seed=7)
    assert list(frame['Month']) == ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun']
    assert frame['Income'].between(4500, 5500).all()
    assert frame['Expenses'].between(1440, 1760).all()
    assert frame.equals(projection_frame(_items(), seed=7))


def test_line_chart_has_income_and_expense_traces():
    fig = create_line_chart(_items(), THEME)
    assert [trace.name for trace in fig.data] == ['Income', 'Expenses']
    assert fig.data[0].fillcolor == 'rgba(59, 130, 246, 0.125)'

"""Budget totals.

``aggregate`` is a pure function of its inputs and is recomputed every
time totals are displayed. Sums use :func:`math.fsum` so the result does
not depend on the order of the items.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

import pandas as pd

from .models import AggregationResult, BudgetItem, ItemKind

MAX_PROGRESS = 100.0


def total_for(items: Iterable[BudgetItem], kind: ItemKind) -> float:
    return math.fsum(item.amount for item in items if item.kind is kind)


def savings_progress(net_income: float, savings_goal: float) -> float:
    """Percentage of the savings goal covered by ``net_income``, capped at 100.

    A goal of zero has no meaningful percentage and yields ``0.0``.
    The value is not floored, so a deficit gives a negative percentage.
    """
    if not savings_goal or not math.isfinite(savings_goal):
        return 0.0
    return min(net_income / savings_goal * 100.0, MAX_PROGRESS)


def aggregate(items: Sequence[BudgetItem], savings_goal: float) -> AggregationResult:
    """Compute income, expense, net and savings-goal totals.

    >>> from balancebeam.models import BudgetItem
    >>> result = aggregate(
    ...     [BudgetItem("a", "Salary", 5000, "income"), BudgetItem("b", "Rent", 1200, "expense")],
    ...     1000,
    ... )
    >>> result.net_income, result.savings_progress
    (3800.0, 100.0)
    """
    total_income = total_for(items, ItemKind.INCOME)
    total_expenses = total_for(items, ItemKind.EXPENSE)
    net_income = total_income - total_expenses
    return AggregationResult(
        total_income=total_income,
        total_expenses=total_expenses,
        net_income=net_income,
        savings_progress=savings_progress(net_income, savings_goal),
    )


def category_totals(items: Iterable[BudgetItem]) -> pd.DataFrame:
    """Sum amounts per category and kind.

    Returns a DataFrame with ``Category``, ``Type`` and ``Amount`` columns,
    sorted by kind (income first) then by descending amount. Repeated
    categories are combined here; the item list itself is never merged.
    """
    frame = pd.DataFrame(
        [{"Category": item.category, "Type": item.kind.value, "Amount": item.amount} for item in items],
        columns=["Category", "Type", "Amount"],
    )
    if frame.empty:
        return frame
    grouped = frame.groupby(["Category", "Type"], as_index=False, sort=False)["Amount"].sum()
    grouped["_order"] = grouped["Type"].map({ItemKind.INCOME.value: 0, ItemKind.EXPENSE.value: 1})
    grouped = grouped.sort_values(["_order", "Amount"], ascending=[True, False], kind="mergesort")
    return grouped.drop(columns="_order").reset_index(drop=True)

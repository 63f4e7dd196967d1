"""Plotly chart builders for the budget editor.

Each chart type has its own builder that takes the current budget items
and a colour theme and returns a ``plotly.graph_objects.Figure`` ready
for ``st.plotly_chart``. :func:`create_budget_chart` dispatches on
:class:`~balancebeam.models.ChartType`; every member must have a builder
in ``_BUILDERS``.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .aggregation import total_for
from .config import default_color_theme
from .models import BudgetItem, ChartType, ItemKind

PROJECTION_MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]
PROJECTION_SPREAD = 0.2
DOLLAR_TICKFORMAT = "$,.0f"


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def _palette(colors: Sequence[str], count: int) -> List[str]:
    colors = list(colors) or default_color_theme()
    return [colors[i % len(colors)] for i in range(count)]


def _with_alpha(color: str, alpha: float) -> str:
    """Turn ``#RRGGBB`` into an ``rgba()`` string; other values pass through."""
    value = color.lstrip("#")
    if not color.startswith("#") or len(value) != 6:
        return color
    r, g, b = (int(value[i:i + 2], 16) for i in (0, 2, 4))
    return f"rgba({r}, {g}, {b}, {alpha})"


def _apply_animation(fig: go.Figure, animated: bool, duration: int = 1000) -> go.Figure:
    fig.update_layout(transition={"duration": duration if animated else 0, "easing": "cubic-in-out"})
    return fig


def create_pie_chart(items: Sequence[BudgetItem], colors: Sequence[str], animated: bool = True) -> go.Figure:
    """One slice per item, income items first.

    Parameters
    ----------
    items : sequence of BudgetItem
        Items to plot. Repeated categories get separate slices.
    colors : sequence of str
        Colour theme; reused cyclically when there are more slices.
    animated : bool
        Whether chart transitions are animated.

    Returns
    -------
    plotly.graph_objects.Figure
        Pie chart with amount and percentage in the hover label.
    """
    if not items:
        return _empty_figure()
    ordered = [i for i in items if i.kind is ItemKind.INCOME] + [i for i in items if i.kind is ItemKind.EXPENSE]
    df = pd.DataFrame(
        {
            "Category": [item.category for item in ordered],
            "Amount": [item.amount for item in ordered],
        }
    )
    fig = go.Figure(
        go.Pie(
            labels=df["Category"],
            values=df["Amount"],
            sort=False,
            marker={"colors": _palette(colors, len(df)), "line": {"color": "#ffffff", "width": 2}},
            hovertemplate="%{label}: $%{value:,.2f} (%{percent:.1%})<extra></extra>",
        )
    )
    fig.update_layout(legend={"orientation": "h", "y": -0.1})
    return _apply_animation(fig, animated)


def create_bar_chart(items: Sequence[BudgetItem], colors: Sequence[str], animated: bool = True) -> go.Figure:
    """Two bars comparing total income with total expenses."""
    if not items:
        return _empty_figure()
    palette = _palette(colors, 2)
    df = pd.DataFrame(
        {
            "Kind": ["Income", "Expenses"],
            "Amount": [total_for(items, ItemKind.INCOME), total_for(items, ItemKind.EXPENSE)],
        }
    )
    fig = px.bar(df, x="Kind", y="Amount", color="Kind", color_discrete_sequence=palette)
    fig.update_traces(hovertemplate="Amount: $%{y:,.2f}<extra></extra>")
    fig.update_layout(
        showlegend=False,
        xaxis_title=None,
        yaxis={"title": None, "rangemode": "tozero", "tickformat": DOLLAR_TICKFORMAT},
    )
    return _apply_animation(fig, animated)


def projection_frame(items: Sequence[BudgetItem], seed: Optional[int] = 0) -> pd.DataFrame:
    """Six-month projection of income and expense totals.

    Each month varies the totals by up to +/-10%. The generator is seeded
    so the same items always produce the same projection.
    """
    rng = np.random.default_rng(seed)
    income = total_for(items, ItemKind.INCOME)
    expenses = total_for(items, ItemKind.EXPENSE)
    months = len(PROJECTION_MONTHS)
    return pd.DataFrame(
        {
            "Month": PROJECTION_MONTHS,
            "Income": income + (rng.random(months) - 0.5) * income * PROJECTION_SPREAD,
            "Expenses": expenses + (rng.random(months) - 0.5) * expenses * PROJECTION_SPREAD,
        }
    )


def create_line_chart(
    items: Sequence[BudgetItem],
    colors: Sequence[str],
    animated: bool = True,
    seed: Optional[int] = 0,
) -> go.Figure:
    """Filled lines projecting income and expenses over six months."""
    if not items:
        return _empty_figure()
    palette = _palette(colors, 2)
    df = projection_frame(items, seed=seed)
    fig = go.Figure()
    for column, color in zip(["Income", "Expenses"], palette):
        fig.add_trace(
            go.Scatter(
                x=df["Month"],
                y=df[column],
                name=column,
                mode="lines",
                line={"color": color, "shape": "spline", "smoothing": 0.8},
                fill="tozeroy",
                fillcolor=_with_alpha(color, 0.125),
                hovertemplate=f"{column}: $%{{y:,.2f}}<extra></extra>",
            )
        )
    fig.update_layout(
        legend={"orientation": "h", "y": 1.1},
        yaxis={"rangemode": "tozero", "tickformat": DOLLAR_TICKFORMAT},
    )
    return _apply_animation(fig, animated, duration=1500)


ChartBuilder = Callable[[Sequence[BudgetItem], Sequence[str], bool], go.Figure]

_BUILDERS: Dict[ChartType, ChartBuilder] = {
    ChartType.PIE: create_pie_chart,
    ChartType.BAR: create_bar_chart,
    ChartType.LINE: create_line_chart,
}


def create_budget_chart(
    items: Sequence[BudgetItem],
    chart_type: ChartType | str,
    colors: Sequence[str],
    animated: bool = True,
) -> go.Figure:
    """Build the chart selected in the editor.

    Raises:
        ValueError: If ``chart_type`` is not a known chart type.
    """
    builder = _BUILDERS[ChartType(chart_type)]
    return builder(items, colors, animated)

"""Live budget editing session.

``BudgetSession`` owns the mutable editing state and turns user intents
(add item, remove item, import CSV, load favorite, ...) into changes of
that state. Totals are never cached; :meth:`BudgetSession.totals`
recomputes them on every call.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .aggregation import aggregate
from .config import COLOR_THEMES
from .exceptions import EmptySnapshotError
from .export import SharedBudget
from .favorites import SnapshotStore
from .models import (
    AggregationResult,
    BudgetItem,
    BudgetSnapshot,
    ChartType,
    EditingState,
    ItemKind,
    new_item,
    validate_item,
)

logger = logging.getLogger(__name__)


class BudgetSession:
    """Editing state plus the operations the UI can request on it."""

    def __init__(self, state: Optional[EditingState] = None):
        self.state = state or EditingState()

    @property
    def items(self) -> List[BudgetItem]:
        return list(self.state.items)

    def add_item(self, category: str, amount_text: str, kind: ItemKind | str) -> BudgetItem:
        """Validate and append a manually entered item.

        Raises:
            ItemValidationError: If the category or amount is invalid.
        """
        entry = validate_item(category, amount_text)
        item = new_item(entry.category, entry.amount, kind)
        self.state.items.append(item)
        logger.debug("Added %s item %r", item.kind.value, item.category)
        return item

    def remove_item(self, item_id: str) -> bool:
        """Remove the item with ``item_id``. Returns whether anything was removed."""
        before = len(self.state.items)
        self.state.items = [item for item in self.state.items if item.id != item_id]
        return len(self.state.items) != before

    def import_items(self, items: Iterable[BudgetItem]) -> int:
        """Replace the current items with ``items`` (e.g. from a CSV import)."""
        self.state.items = list(items)
        logger.info("Imported %d budget items", len(self.state.items))
        return len(self.state.items)

    def clear_items(self) -> None:
        self.state.items = []

    def set_title(self, title: str) -> None:
        self.state.title = title

    def set_savings_goal(self, goal: float) -> None:
        self.state.savings_goal = float(goal)

    def set_chart_type(self, chart_type: ChartType | str) -> None:
        self.state.chart_type = ChartType(chart_type)

    def set_color_theme(self, colors: Iterable[str]) -> None:
        self.state.color_theme = list(colors)

    def apply_theme(self, name: str) -> None:
        """Switch to one of the named themes in :data:`COLOR_THEMES`."""
        if name not in COLOR_THEMES:
            raise KeyError(f"Unknown color theme '{name}'")
        self.set_color_theme(COLOR_THEMES[name])

    def totals(self) -> AggregationResult:
        return aggregate(self.state.items, self.state.savings_goal)

    def to_snapshot(self) -> BudgetSnapshot:
        """Capture the current state as a new snapshot with a fresh id.

        Raises:
            EmptySnapshotError: If there are no items.
        """
        if not self.state.items:
            raise EmptySnapshotError("Please add some budget items first")
        return BudgetSnapshot.create(
            title=self.state.title,
            items=self.state.items,
            savings_goal=self.state.savings_goal,
            chart_type=self.state.chart_type,
            color_theme=self.state.color_theme,
        )

    def preview_snapshot(self) -> BudgetSnapshot:
        """Snapshot of the current state for exports; may have no items."""
        return BudgetSnapshot.create(
            title=self.state.title,
            items=self.state.items,
            savings_goal=self.state.savings_goal,
            chart_type=self.state.chart_type,
            color_theme=self.state.color_theme,
        )

    def load_snapshot(self, snapshot: BudgetSnapshot) -> None:
        self.state = SnapshotStore.load(snapshot)
        logger.info("Loaded favorite %r", snapshot.title)

    def load_shared(self, shared: SharedBudget) -> None:
        """Replace title and items with a budget received through a share link.

        Display preferences and the savings goal are kept, since share
        links do not carry them.
        """
        self.state.title = shared.title or self.state.title
        self.state.items = list(shared.items)

"""Budget records and their validation rules.

Three record types make up the domain:

* ``BudgetItem`` – a single income or expense line.
* ``BudgetSnapshot`` – a named, timestamped, immutable copy of a budget
  together with its display preferences. Snapshots are what the
  favorites collection stores.
* ``AggregationResult`` – totals derived from a list of items.

Every record knows how to convert itself to and from the camelCase
dictionaries used in persisted storage and JSON exports.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .config import DEFAULT_CHART_TYPE, DEFAULT_SAVINGS_GOAL, DEFAULT_TITLE, default_color_theme
from .exceptions import ItemValidationError


class ItemKind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class ChartType(str, Enum):
    BAR = "bar"
    PIE = "pie"
    LINE = "line"


FIELD_ERROR_MESSAGES: Dict[Tuple[str, str], str] = {
    ("category", "required"): "Category is required",
    ("amount", "required"): "Amount is required",
    ("amount", "invalid"): "Please enter a valid positive number",
}


def new_item_id() -> str:
    return uuid.uuid4().hex


def parse_amount(text: Any) -> Optional[float]:
    """Parse ``text`` as a finite number, returning ``None`` when it isn't one.

    Surrounding whitespace is ignored. Values such as ``"nan"``, ``"inf"``
    or ``"1_000"`` are rejected even though :func:`float` accepts them.
    """
    if text is None:
        return None
    cleaned = str(text).strip()
    if not cleaned or "_" in cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


@dataclass(frozen=True)
class ValidatedEntry:
    category: str
    amount: float


def validate_item(category: str, amount_text: str) -> ValidatedEntry:
    """Validate a manually entered category/amount pair.

    Both fields are checked and every failure is collected before raising,
    so the caller can show one message per invalid field.

    Raises:
        ItemValidationError: with ``errors`` such as
            ``{"category": "required", "amount": "invalid"}``.
    """
    errors: Dict[str, str] = {}
    cleaned_category = (category or "").strip()
    cleaned_amount = (amount_text or "").strip()

    if not cleaned_category:
        errors["category"] = "required"

    amount: Optional[float] = None
    if not cleaned_amount:
        errors["amount"] = "required"
    else:
        amount = parse_amount(cleaned_amount)
        if amount is None or amount <= 0:
            errors["amount"] = "invalid"

    if errors:
        raise ItemValidationError(errors)
    return ValidatedEntry(category=cleaned_category, amount=float(amount))


def as_float(value: Any, label: str) -> float:
    """``float(value)``, reporting integers too large for a float as ``ValueError``."""
    try:
        return float(value)
    except OverflowError as exc:
        raise ValueError(f"{label} is out of range: {exc}") from exc


def field_error_messages(errors: Mapping[str, str]) -> Dict[str, str]:
    """Translate error codes into display messages keyed by field."""
    return {
        field_name: FIELD_ERROR_MESSAGES.get((field_name, code), code)
        for field_name, code in errors.items()
    }


@dataclass(frozen=True)
class BudgetItem:
    id: str
    category: str
    amount: float
    kind: ItemKind

    def __post_init__(self) -> None:
        if not self.category or not self.category.strip():
            raise ValueError("Budget item category cannot be empty")
        if isinstance(self.amount, bool) or not isinstance(self.amount, (int, float)):
            raise ValueError(f"Budget item amount must be a number, got {self.amount!r}")
        amount = as_float(self.amount, "Budget item amount")
        if not math.isfinite(amount) or amount <= 0:
            raise ValueError(f"Budget item amount must be positive, got {self.amount!r}")
        object.__setattr__(self, "amount", amount)
        # Accept the plain string tags too
        object.__setattr__(self, "kind", ItemKind(self.kind))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category,
            "amount": self.amount,
            "type": self.kind.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BudgetItem":
        amount = data["amount"]
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            raise ValueError(f"Invalid amount {amount!r}")
        return cls(
            id=str(data["id"]),
            category=str(data["category"]),
            amount=as_float(amount, "Budget item amount"),
            kind=ItemKind(data["type"]),
        )


def new_item(category: str, amount: float, kind: ItemKind | str) -> BudgetItem:
    """Create an item with a freshly generated identifier."""
    return BudgetItem(id=new_item_id(), category=category, amount=float(amount), kind=ItemKind(kind))


def _format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_timestamp(text: str) -> datetime:
    cleaned = str(text).strip()
    if cleaned.endswith("Z"):
        cleaned = cleaned[:-1] + "+00:00"
    parsed = datetime.fromisoformat(cleaned)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utcnow() -> datetime:
    """Current UTC time at the millisecond precision used when persisting."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


@dataclass(frozen=True)
class BudgetSnapshot:
    """Saved budget. Items and colours are held as tuples so a snapshot
    can never be changed after it is created."""

    id: str
    title: str
    items: Tuple[BudgetItem, ...]
    savings_goal: float
    chart_type: ChartType
    color_theme: Tuple[str, ...]
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))
        object.__setattr__(self, "color_theme", tuple(self.color_theme))
        object.__setattr__(self, "chart_type", ChartType(self.chart_type))
        object.__setattr__(self, "savings_goal", as_float(self.savings_goal, "Savings goal"))

    @classmethod
    def create(
        cls,
        title: str,
        items: Iterable[BudgetItem],
        savings_goal: float,
        chart_type: ChartType | str,
        color_theme: Iterable[str],
    ) -> "BudgetSnapshot":
        return cls(
            id=new_item_id(),
            title=title,
            items=tuple(items),
            savings_goal=savings_goal,
            chart_type=ChartType(chart_type),
            color_theme=tuple(color_theme),
            created_at=utcnow(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "items": [item.to_dict() for item in self.items],
            "savingsGoal": self.savings_goal,
            "chartType": self.chart_type.value,
            "colorTheme": list(self.color_theme),
            "createdAt": _format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BudgetSnapshot":
        items = data.get("items") or []
        colors = data.get("colorTheme") or []
        if not isinstance(items, list) or not isinstance(colors, list):
            raise ValueError("Snapshot items and colorTheme must be lists")
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            items=tuple(BudgetItem.from_dict(item) for item in items),
            savings_goal=as_float(data.get("savingsGoal", 0), "Savings goal"),
            chart_type=ChartType(data["chartType"]),
            color_theme=tuple(str(color) for color in colors),
            created_at=_parse_timestamp(data["createdAt"]),
        )


@dataclass(frozen=True)
class AggregationResult:
    total_income: float
    total_expenses: float
    net_income: float
    savings_progress: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "totalIncome": self.total_income,
            "totalExpenses": self.total_expenses,
            "netIncome": self.net_income,
            "savingsProgress": self.savings_progress,
        }


@dataclass(frozen=True)
class Preferences:
    animated: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"isAnimated": self.animated}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Preferences":
        value = data.get("isAnimated", True)
        return cls(animated=value if isinstance(value, bool) else True)


@dataclass
class EditingState:
    """Mutable state behind the budget editor."""

    items: List[BudgetItem] = field(default_factory=list)
    title: str = DEFAULT_TITLE
    savings_goal: float = DEFAULT_SAVINGS_GOAL
    chart_type: ChartType = ChartType(DEFAULT_CHART_TYPE)
    color_theme: List[str] = field(default_factory=default_color_theme)

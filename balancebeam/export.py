"""Export and share helpers.

Three outputs are produced from a budget snapshot and its totals:

* a JSON document (the snapshot fields plus a ``totals`` object),
* a PDF report rendered with Matplotlib's PDF backend,
* a share link carrying a base64-encoded ``{title, items, totals}``
  payload in its ``shared`` query parameter.

All of them refuse to run on a budget without items. Matplotlib is
imported inside :func:`export_pdf` to keep the dashboard start-up fast.
"""

from __future__ import annotations

import base64
import io
import json
import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
from urllib.parse import quote, unquote

from .exceptions import EmptySnapshotError, SharePayloadError
from .formatting import format_amount
from .models import AggregationResult, BudgetItem, BudgetSnapshot

logger = logging.getLogger(__name__)

SHARE_PARAM = "shared"

# Page geometry in millimetres (A4 portrait)
PAGE_WIDTH_MM = 210.0
PAGE_HEIGHT_MM = 297.0
MARGIN_X_MM = 20.0
ITEMS_START_MM = 180.0
LINE_STEP_MM = 15.0
PAGE_BOTTOM_MM = 270.0
PAGE_TOP_MM = 30.0
MM_PER_INCH = 25.4


def _require_items(items: Iterable[BudgetItem], action: str) -> None:
    if not tuple(items):
        raise EmptySnapshotError(f"No budget data to {action}")


def export_filename(title: str, extension: str) -> str:
    """Build a download name: ``"My Budget"`` -> ``"My_Budget.pdf"``."""
    stem = re.sub(r"\s+", "_", (title or "").strip()) or "budget"
    return f"{stem}.{extension.lstrip('.')}"


def export_payload(snapshot: BudgetSnapshot, totals: AggregationResult) -> Dict[str, Any]:
    payload = snapshot.to_dict()
    payload["totals"] = totals.to_dict()
    return payload


def export_json(snapshot: BudgetSnapshot, totals: AggregationResult) -> str:
    """Serialize a snapshot and its totals as indented JSON.

    Raises:
        EmptySnapshotError: If the snapshot has no items.
    """
    _require_items(snapshot.items, "export")
    return json.dumps(export_payload(snapshot, totals), indent=2)


def item_line(item: BudgetItem) -> str:
    return f"{item.category} ({item.kind.value}): ${format_amount(item.amount)}"


def summary_lines(snapshot: BudgetSnapshot, totals: AggregationResult) -> Tuple[str, ...]:
    return (
        f"Total Income: ${format_amount(totals.total_income)}",
        f"Total Expenses: ${format_amount(totals.total_expenses)}",
        f"Net Income: ${format_amount(totals.net_income)}",
        f"Savings Goal: ${format_amount(snapshot.savings_goal)}",
        f"Savings Progress: {totals.savings_progress:.1f}%",
    )


def paginate_items(items: Sequence[BudgetItem]) -> List[List[Tuple[BudgetItem, float]]]:
    """Assign each item a page and a baseline (mm from the top of the page).

    The first page holds items from :data:`ITEMS_START_MM` down, later
    pages from :data:`PAGE_TOP_MM`. A line never starts below
    :data:`PAGE_BOTTOM_MM`.
    """
    pages: List[List[Tuple[BudgetItem, float]]] = [[]]
    y_mm = ITEMS_START_MM
    for item in items:
        if y_mm > PAGE_BOTTOM_MM:
            pages.append([])
            y_mm = PAGE_TOP_MM
        pages[-1].append((item, y_mm))
        y_mm += LINE_STEP_MM
    return pages


def export_pdf(
    snapshot: BudgetSnapshot,
    totals: AggregationResult,
    generated_on: Optional[date] = None,
) -> bytes:
    """Render a one-or-more page PDF report.

    The first page carries the title, generation date and financial
    summary, followed by one line per item. Items continue on new pages
    once the bottom margin is reached.

    Raises:
        EmptySnapshotError: If the snapshot has no items.
    """
    _require_items(snapshot.items, "export")

    from matplotlib.backends.backend_pdf import PdfPages
    from matplotlib.figure import Figure

    generated_on = generated_on or date.today()
    figsize = (PAGE_WIDTH_MM / MM_PER_INCH, PAGE_HEIGHT_MM / MM_PER_INCH)
    x = MARGIN_X_MM / PAGE_WIDTH_MM

    def _y(mm: float) -> float:
        return 1.0 - mm / PAGE_HEIGHT_MM

    def _page() -> Figure:
        return Figure(figsize=figsize)

    buffer = io.BytesIO()
    with PdfPages(buffer, metadata={"Title": snapshot.title}) as pdf:
        fig = _page()
        fig.text(x, _y(30), snapshot.title, fontsize=20, va="baseline")
        fig.text(x, _y(45), f"Generated on: {generated_on.strftime('%m/%d/%Y')}", fontsize=12, va="baseline")
        fig.text(x, _y(65), "Financial Summary", fontsize=14, va="baseline")
        y_mm = 80.0
        for line in summary_lines(snapshot, totals):
            fig.text(x, _y(y_mm), line, fontsize=11, va="baseline")
            y_mm += 15.0
        fig.text(x, _y(165), "Budget Items", fontsize=11, va="baseline")

        pages = paginate_items(snapshot.items)
        for number, page in enumerate(pages):
            if number:
                pdf.savefig(fig)
                fig = _page()
            for item, y_mm in page:
                fig.text(x, _y(y_mm), item_line(item), fontsize=11, va="baseline")
        pdf.savefig(fig)

    logger.info("Exported %r to PDF (%d page(s))", snapshot.title, len(pages))
    return buffer.getvalue()


@dataclass(frozen=True)
class SharedBudget:
    title: str
    items: Tuple[BudgetItem, ...]
    totals: Dict[str, float]


def encode_share_token(snapshot: BudgetSnapshot, totals: AggregationResult) -> str:
    payload = {
        "title": snapshot.title,
        "items": [item.to_dict() for item in snapshot.items],
        "totals": totals.to_dict(),
    }
    encoded = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return base64.b64encode(encoded).decode("ascii")


def build_share_url(origin: str, snapshot: BudgetSnapshot, totals: AggregationResult) -> str:
    """Build a link to ``origin`` that carries the budget in its query string.

    Raises:
        EmptySnapshotError: If the snapshot has no items.
    """
    _require_items(snapshot.items, "share")
    token = encode_share_token(snapshot, totals)
    return f"{origin}?{SHARE_PARAM}={quote(token, safe='')}"


def decode_share_payload(token: str) -> SharedBudget:
    """Decode the ``shared`` query parameter produced by :func:`build_share_url`.

    Accepts the token either URL-quoted or already unquoted.

    Raises:
        SharePayloadError: If the token is not valid base64 JSON or the
            items inside it are invalid.
    """
    cleaned = unquote((token or "").strip())
    if not cleaned:
        raise SharePayloadError("Share link is empty")
    # Query-string parsing may turn '+' into ' '
    cleaned = cleaned.replace(" ", "+")
    cleaned += "=" * (-len(cleaned) % 4)
    try:
        raw = base64.b64decode(cleaned, validate=True)
        payload = json.loads(raw.decode("utf-8"))
    except (ValueError, RecursionError) as exc:
        raise SharePayloadError(f"Share link could not be decoded: {exc}") from exc

    if not isinstance(payload, dict) or not isinstance(payload.get("items"), list):
        raise SharePayloadError("Share link does not contain a budget")
    try:
        items = tuple(BudgetItem.from_dict(item) for item in payload["items"])
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise SharePayloadError(f"Share link contains an invalid item: {exc}") from exc
    if not items:
        raise SharePayloadError("Share link contains no budget items")

    totals = payload.get("totals")
    return SharedBudget(
        title=str(payload.get("title") or ""),
        items=items,
        totals=dict(totals) if isinstance(totals, dict) else {},
    )

"""CSV import for budget items.

The accepted format is deliberately small: one item per line, three
comma-separated fields ``category,amount,type`` and no header row::

    Salary,5000,income
    Rent,1200,expense

Parsing is all-or-nothing. The first invalid line raises
:class:`~balancebeam.exceptions.CSVParseError` naming the line and the
reason, and no items are returned. Items receive deterministic ids
(``csv-0``, ``csv-1``, ...) derived from their position.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List

import pandas as pd

from .exceptions import CSVFileTypeError, CSVParseError
from .models import BudgetItem, ItemKind, parse_amount

logger = logging.getLogger(__name__)

MISSING_FIELD = "missing field"
INVALID_AMOUNT = "invalid amount"
INVALID_TYPE = "invalid type"
NO_DATA = "no data"

REASON_MESSAGES = {
    MISSING_FIELD: "Invalid data on line {line}",
    INVALID_AMOUNT: "Invalid amount on line {line}",
    INVALID_TYPE: "Invalid type on line {line}. Must be 'income' or 'expense'",
    NO_DATA: "No budget items found in the CSV data",
}

PREVIEW_COLUMNS = ["Category", "Amount", "Type"]

SAMPLE_CSV = """Salary,5000,income
Freelance,1500,income
Rent,1200,expense
Groceries,400,expense
Utilities,200,expense"""

_ENCODINGS = ("utf-8-sig", "cp1252")


def _split_lines(text: str) -> List[str]:
    return [line for line in (text or "").strip().splitlines() if line.strip()]


def _parse_line(line: str, index: int) -> BudgetItem:
    line_no = index + 1
    fields = [part.strip() for part in line.split(",")]
    # Anything past the third field is ignored
    category, amount_text, kind_text = (fields + ["", "", ""])[:3]

    if not category or not amount_text or not kind_text:
        raise CSVParseError(line_no, MISSING_FIELD)

    amount = parse_amount(amount_text)
    if amount is None or amount <= 0:
        raise CSVParseError(line_no, INVALID_AMOUNT)

    if kind_text not in (ItemKind.INCOME.value, ItemKind.EXPENSE.value):
        raise CSVParseError(line_no, INVALID_TYPE)

    return BudgetItem(id=f"csv-{index}", category=category, amount=amount, kind=ItemKind(kind_text))


def parse_csv(text: str) -> List[BudgetItem]:
    """Parse CSV text into budget items.

    Args:
        text: Raw CSV text. Leading/trailing whitespace and blank lines
            are ignored.

    Returns:
        One item per non-blank line, in input order.

    Raises:
        CSVParseError: On the first invalid line (``missing field``,
            ``invalid amount`` or ``invalid type``), or with line 0 and
            reason ``no data`` when the text has no lines at all.
    """
    lines = _split_lines(text)
    if not lines:
        raise CSVParseError(0, NO_DATA)
    items = [_parse_line(line, index) for index, line in enumerate(lines)]
    logger.debug("Parsed %d budget items from CSV", len(items))
    return items


def describe_error(error: CSVParseError) -> str:
    """Return the user-facing message for a parse error."""
    template = REASON_MESSAGES.get(error.reason)
    if template is None:
        return str(error)
    return template.format(line=error.line)


def is_csv_upload(uploaded_file: Any) -> bool:
    name = str(getattr(uploaded_file, "name", "") or "").lower()
    mime = str(getattr(uploaded_file, "type", "") or "").lower()
    return mime == "text/csv" or name.endswith(".csv")


def decode_csv_bytes(data: bytes) -> str:
    for encoding in _ENCODINGS:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return data.decode("latin-1")


def read_csv_upload(uploaded_file: Any) -> str:
    """Read the text of an uploaded CSV file.

    ``uploaded_file`` is any object with a ``name`` and a ``read()``
    method, such as a Streamlit ``UploadedFile``.

    Raises:
        CSVFileTypeError: If the file is neither named ``*.csv`` nor
            typed ``text/csv``.
    """
    if not is_csv_upload(uploaded_file):
        raise CSVFileTypeError("Please select a CSV file")
    raw = uploaded_file.getvalue() if hasattr(uploaded_file, "getvalue") else uploaded_file.read()
    if isinstance(raw, str):
        return raw
    return decode_csv_bytes(raw)


def sample_csv_bytes() -> bytes:
    return SAMPLE_CSV.encode("utf-8")


def items_to_frame(items: Iterable[BudgetItem]) -> pd.DataFrame:
    """Build the preview table shown before an import is confirmed."""
    rows = [
        {"Category": item.category, "Amount": item.amount, "Type": item.kind.value}
        for item in items
    ]
    return pd.DataFrame(rows, columns=PREVIEW_COLUMNS)

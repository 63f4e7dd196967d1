#!/usr/bin/env python3
"""Check budget CSV files before importing them in the dashboard."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from balancebeam.aggregation import aggregate  # noqa: E402
from balancebeam.config import DEFAULT_SAVINGS_GOAL  # noqa: E402
from balancebeam.csv_import import decode_csv_bytes, describe_error, parse_csv  # noqa: E402
from balancebeam.exceptions import CSVParseError  # noqa: E402
from balancebeam.formatting import format_currency, format_percent  # noqa: E402


def validate_file(path: Path, savings_goal: float) -> Optional[str]:
    """Return an error message for ``path``, or ``None`` when it parses."""
    try:
        text = decode_csv_bytes(path.read_bytes())
    except OSError as exc:
        return f"could not read file ({exc})"
    try:
        items = parse_csv(text)
    except CSVParseError as exc:
        return describe_error(exc)

    totals = aggregate(items, savings_goal)
    print(
        f"{path.name}: {len(items)} items, income {format_currency(totals.total_income)}, "
        f"expenses {format_currency(totals.total_expenses)}, "
        f"savings progress {format_percent(totals.savings_progress)}"
    )
    return None


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("paths", nargs="+", type=Path, help="CSV files to check")
    parser.add_argument(
        "--goal",
        type=float,
        default=DEFAULT_SAVINGS_GOAL,
        help="Savings goal used for the progress figure",
    )
    args = parser.parse_args(argv)

    issues = []
    for path in args.paths:
        message = validate_file(path, args.goal)
        if message:
            issues.append((path.name, message))

    if issues:
        print("CSV validation failed:")
        for filename, message in issues:
            print(f"  - {filename}: {message}")
        return 1

    print("All CSV files validated successfully.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

#!/usr/bin/env python3
"""List the budgets saved to favorites, or export one of them."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from balancebeam.aggregation import aggregate  # noqa: E402
from balancebeam.config import STORAGE_PATH  # noqa: E402
from balancebeam.export import export_filename, export_json, export_pdf  # noqa: E402
from balancebeam.favorites import SnapshotStore  # noqa: E402
from balancebeam.formatting import format_currency  # noqa: E402
from balancebeam.logger import configure_logging  # noqa: E402
from balancebeam.storage import JSONFileStore  # noqa: E402


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--store", type=Path, default=STORAGE_PATH, help="Path of the local storage file")
    parser.add_argument("--export", metavar="ID", help="Export the favorite with this id")
    parser.add_argument("--format", choices=["json", "pdf"], default="json", help="Export format")
    parser.add_argument("--output-dir", type=Path, default=Path.cwd(), help="Where exports are written")
    args = parser.parse_args(argv)
    configure_logging()

    favorites = SnapshotStore(JSONFileStore(args.store))
    if args.export:
        snapshot = favorites.get(args.export)
        if snapshot is None:
            print(f"No favorite with id {args.export}")
            return 1
        totals = aggregate(snapshot.items, snapshot.savings_goal)
        target = args.output_dir / export_filename(snapshot.title, args.format)
        if args.format == "pdf":
            target.write_bytes(export_pdf(snapshot, totals))
        else:
            target.write_text(export_json(snapshot, totals), encoding="utf-8")
        print(f"Wrote {target}")
        return 0

    snapshots = favorites.snapshots
    if not snapshots:
        print(f"No favorites saved in {args.store}")
        return 0

    for snapshot in snapshots:
        totals = aggregate(snapshot.items, snapshot.savings_goal)
        print(
            f"{snapshot.id}  {snapshot.created_at:%Y-%m-%d}  {snapshot.title}: "
            f"{len(snapshot.items)} items, net {format_currency(totals.net_income)}"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Preview a reconciliation run without touching the database.

Usage:
    python scripts/reconcile_preview.py catraca1.xlsx [catraca2.xlsx]
    python scripts/reconcile_preview.py --single 1 catraca1.xlsx
"""

from __future__ import annotations

import argparse
import csv
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.turnstile_system.turnstile_system.core.enums import ReconciliationMode
from src.turnstile_system.turnstile_system.punches.factory import ReconciliationStrategyFactory
from src.turnstile_system.turnstile_system.punches.workbook import read_device_export


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("files", nargs="+", type=Path, help="one or two turnstile workbooks")
    parser.add_argument("--single", type=int, choices=(1, 2), help="single-device import for this device id")
    args = parser.parse_args(argv)

    if len(args.files) > 2 or (args.single and len(args.files) != 1):
        parser.error("consolidated mode takes up to two files, single mode exactly one")

    factory = ReconciliationStrategyFactory()
    if args.single:
        exports = [read_device_export(args.files[0], source_label=args.files[0].name, device_id=args.single)]
        strategy = factory.for_mode(ReconciliationMode.SINGLE_DEVICE)
    else:
        exports = [
            read_device_export(path, source_label=path.name, device_id=i)
            for i, path in enumerate(args.files, start=1)
        ]
        strategy = factory.for_mode(ReconciliationMode.CROSS_DEVICE)

    records = strategy.reconcile(exports)
    rows = [r.to_row() for r in records]
    if not rows:
        print("No records.")
        return

    writer = csv.DictWriter(sys.stdout, fieldnames=list(rows[0].keys()))
    writer.writeheader()
    writer.writerows(rows)


if __name__ == "__main__":
    main()

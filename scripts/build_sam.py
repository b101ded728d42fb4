"""Build a canonical SAM dataset from a directory of IO tables.

Loads the tables with CsvDirectoryAdapter, writes sam.csv / sets.csv and
prints SAM and IO balance summaries.

Usage:
    python -m scripts.build_sam data/io_tables
    python -m scripts.build_sam data/io_tables --output out/canonical --atol 1e-4
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import pandas as pd

from src.config.logging_setup import configure_logging
from src.config.settings import get_settings
from src.data.adapters import get_adapter, load_iobundle
from src.engine.balance import check_io_balance, check_sam_balance
from src.engine.sam import sam_from_io
from src.export.canonical_dataset import write_canonical_dataset


def _print_header(source: str, n_accounts: int) -> None:
    w = 60
    print("=" * w)
    print("  SAM Build")
    print(f"  {source}")
    print("=" * w)
    print(f"  Accounts: {n_accounts}")


def _print_unbalanced(title: str, report: pd.DataFrame, key: str) -> int:
    """Print rows with balanced == False; return how many there were."""
    bad = report.loc[~report["balanced"]]
    print()
    if bad.empty:
        print(f"  {title}: PASS ({len(report)} checked)")
        return 0
    print(f"  {title}: FAIL ({len(bad)} of {len(report)} unbalanced)")
    for _, row in bad.iterrows():
        print(f"    ! {row[key]:<12} imbalance {row['imbalance']:>14,.6f}")
    return len(bad)


def main(argv: list[str] | None = None) -> int:
    """Run the build. Returns 0 when every check balances, else 1."""
    settings = get_settings()
    log = configure_logging(settings)

    parser = argparse.ArgumentParser(
        description="Assemble a SAM from CSV IO tables and write the canonical dataset",
    )
    parser.add_argument("input_dir", type=Path, help="Directory of IO table CSVs")
    parser.add_argument(
        "--output", type=Path, default=Path(settings.OUTPUT_DIR),
        help="Output directory for the canonical dataset",
    )
    parser.add_argument(
        "--atol", type=float, default=settings.BALANCE_TOLERANCE,
        help="Absolute tolerance for balance checks",
    )
    args = parser.parse_args(argv)

    bundle = load_iobundle(get_adapter("csv", args.input_dir))
    sam = sam_from_io(bundle)
    written = write_canonical_dataset(args.output, bundle, sam=sam)
    log.info("dataset_written", output=str(args.output), files=[p.name for p in written])

    _print_header(str(args.input_dir), len(bundle.accounts))
    io_report = check_io_balance(bundle, atol=args.atol)
    bad_accounts = _print_unbalanced(
        "SAM row/column balance", check_sam_balance(sam, atol=args.atol), "account",
    )
    bad_goods = _print_unbalanced("Goods balance", io_report.goods, "good")
    bad_activities = _print_unbalanced("Activity balance", io_report.activities, "activity")

    print()
    print("=" * 60)
    if bad_accounts + bad_goods + bad_activities == 0:
        print("  RESULT: BALANCED")
        print("=" * 60)
        return 0
    print(
        f"  RESULT: UNBALANCED ({bad_accounts} SAM accounts, "
        f"{bad_goods} goods, {bad_activities} activities)"
    )
    print("=" * 60)
    return 1


if __name__ == "__main__":
    sys.exit(main())

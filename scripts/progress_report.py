#!/usr/bin/env python3
"""
progress_report.py - Inspect or reset persisted module progress.

Lists every module with a stored cursor, or clears one module so the
learner starts it again from the first section.

Usage:
  python scripts/progress_report.py
  python scripts/progress_report.py --db ~/.courseflow/progress.db
  python scripts/progress_report.py --reset CM_INTRO
"""

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from courseflow.classroom import ProgressStore
from courseflow.config import Settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def format_progress_rows(store: ProgressStore) -> list[str]:
    """One line per module: id, cursor, section count and status."""
    rows = []
    for module_id in store.list_module_ids():
        progress = store.get(module_id)
        if progress is None:
            continue
        count = progress.section_count if progress.section_count is not None else "?"
        status = "completed" if progress.is_completed else "in progress"
        rows.append(f"{module_id}\t{progress.current_section_index}/{count}\t{status}")
    return rows


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Inspect or reset module progress")
    parser.add_argument("--db", type=Path, default=None, help="Path to progress.db")
    parser.add_argument("--reset", metavar="MODULE_ID", help="Clear progress for one module")
    args = parser.parse_args(argv)

    db_path = args.db or Settings.from_env().progress_db
    store = ProgressStore(db_path)

    if args.reset:
        if store.get(args.reset) is None:
            logger.warning("No progress stored for %s", args.reset)
            return 1
        store.reset_module(args.reset)
        logger.info("Cleared progress for %s", args.reset)
        return 0

    rows = format_progress_rows(store)
    if not rows:
        logger.info("No module progress in %s", db_path)
        return 0

    print("module\tposition\tstatus")
    for row in rows:
        print(row)
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Delete orphaned uploads older than N days: the file under the public
directory and its FileStorage record.

  python scripts/cleanup_orphaned_files.py --dry-run
  python scripts/cleanup_orphaned_files.py --days 30 --public-dir ../web/public
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from opsdesk.maintenance import file_cleanup
from opsdesk.maintenance.runner import run_database_task
from opsdesk.utils.config_loader import load_targets_config
from opsdesk.utils.settings import OpsSettings, load_environment


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Clean up orphaned uploaded files")
    parser.add_argument("--days", type=int, default=None, help="Only files older than this many days")
    parser.add_argument("--public-dir", type=Path, default=None, help="Directory the stored file paths are relative to")
    parser.add_argument("--dry-run", action="store_true", help="Report without deleting")
    parser.add_argument("--config", type=Path, default=None, help="Path to ops_targets.yml")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    load_environment()
    targets = load_targets_config(args.config).cleanup
    days = args.days if args.days is not None else targets.older_than_days
    public_dir = args.public_dir or Path(targets.public_dir)

    return run_database_task(
        "Orphaned File Cleanup",
        lambda db: file_cleanup.run(db, public_dir, older_than_days=days, dry_run=args.dry_run),
        OpsSettings.from_env(),
    )


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Roll back migration 010.

Removes selectedEvents from quotes (event selections are lost), restores
activitiesIncluded from the migrated internalNotes section, drops the index
and deletes the migration record.

  python scripts/rollback_quote_events_migration.py --yes
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from opsdesk.maintenance import quote_events_migration as migration
from opsdesk.maintenance.runner import run_database_task
from opsdesk.utils.settings import OpsSettings, load_environment


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Roll back the quote events migration")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if not args.yes:
        print("⚠️  This removes selectedEvents from every quote; event selections will be lost.")
        answer = input("Type 'rollback' to continue: ").strip()
        if answer != "rollback":
            print("\n❌ Rollback cancelled by user")
            return 0

    load_environment()
    return run_database_task(
        f"Rollback Migration {migration.VERSION}: Add Events to Quotes",
        migration.rollback_migration,
        OpsSettings.from_env(),
    )


if __name__ == "__main__":
    sys.exit(main())

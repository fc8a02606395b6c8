#!/usr/bin/env python3
"""
Verify migration 010 without modifying anything. Exits 1 if quotes are
missing selectedEvents, hold a non-array value, or the index is absent.

  python scripts/verify_quote_events_migration.py --samples 5
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from opsdesk.maintenance import quote_events_migration as migration
from opsdesk.maintenance.runner import run_database_task
from opsdesk.utils.settings import OpsSettings, load_environment


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Verify the quote events migration")
    parser.add_argument("--samples", type=int, default=3, help="Quotes with events to print")
    args = parser.parse_args(argv)

    load_environment()
    return run_database_task(
        f"Verify Migration {migration.VERSION}: Add Events to Quotes",
        lambda db: migration.verify_migration(db, sample_size=args.samples),
        OpsSettings.from_env(),
    )


if __name__ == "__main__":
    sys.exit(main())

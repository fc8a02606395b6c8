#!/usr/bin/env python3
"""
Verify migration 008 (super packages): migration record, collections,
indexes and a few sample packages. Read-only; exits 1 when the migration is
not recorded as completed or a required collection is missing.

  python scripts/verify_super_packages_migration.py --samples 5
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from opsdesk.maintenance import super_packages_migration as migration
from opsdesk.maintenance.runner import run_database_task
from opsdesk.utils.settings import OpsSettings, load_environment


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Verify the super packages migration")
    parser.add_argument("--samples", type=int, default=3, help="Packages to print")
    args = parser.parse_args(argv)

    load_environment()
    return run_database_task(
        "Super Packages Migration Verification",
        lambda db: migration.verify_migration(db, sample_size=args.samples),
        OpsSettings.from_env(),
    )


if __name__ == "__main__":
    sys.exit(main())

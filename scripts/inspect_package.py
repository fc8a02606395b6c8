#!/usr/bin/env python3
"""
Inspect super packages: total count, a named package's id, destination and
status, and the most recent records.

  python scripts/inspect_package.py
  python scripts/inspect_package.py --name "Albufeira Super Package" --limit 10
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from opsdesk.maintenance import packages
from opsdesk.maintenance.runner import run_database_task
from opsdesk.utils.config_loader import load_targets_config
from opsdesk.utils.settings import OpsSettings, load_environment


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Inspect super packages")
    parser.add_argument("--name", default=None, help="Package name (default: package.name from config)")
    parser.add_argument("--limit", type=int, default=None, help="How many packages to list")
    parser.add_argument("--config", type=Path, default=None, help="Path to ops_targets.yml")
    args = parser.parse_args(argv)

    load_environment()
    targets = load_targets_config(args.config).package
    name = args.name or targets.name
    limit = args.limit or targets.list_limit

    return run_database_task(
        "Package Inspection",
        lambda db: packages.run(db, name=name, list_limit=limit),
        OpsSettings.from_env(),
    )


if __name__ == "__main__":
    sys.exit(main())

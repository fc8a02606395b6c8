#!/usr/bin/env python3
"""
Verify MongoDB connectivity: connect, list collections, read, write and
delete a probe document, and print server details.

Uses MONGODB_URI (and optionally MONGODB_DB). Run locally and against the
deployed environment's settings to compare.

  python scripts/verify_database_connection.py
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from opsdesk.maintenance import db_check
from opsdesk.utils.settings import OpsSettings, load_environment


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Verify MongoDB connectivity")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    load_environment()
    return db_check.run(OpsSettings.from_env())


if __name__ == "__main__":
    sys.exit(main())

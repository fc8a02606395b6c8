#!/usr/bin/env python3
"""
Approve admin accounts that were left with isApproved=false.

Writes directly to the users collection. Accounts already approved are left
alone, so running it twice is safe.

  python scripts/fix_admin_approval.py                       # every admin
  python scripts/fix_admin_approval.py --email ops@example.org
  python scripts/fix_admin_approval.py --user agent@example.org   # any single account
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from opsdesk.maintenance import approvals
from opsdesk.maintenance.runner import run_database_task
from opsdesk.utils.config_loader import load_targets_config
from opsdesk.utils.settings import OpsSettings, load_environment


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Approve admin accounts")
    parser.add_argument("--email", action="append", default=None, help="Admin email to approve (repeatable)")
    parser.add_argument("--user", default=None, help="Approve a single account by email regardless of role")
    parser.add_argument("--config", type=Path, default=None, help="Path to ops_targets.yml")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    load_environment()
    settings = OpsSettings.from_env()

    if args.user:
        return run_database_task(
            "Approve User Account",
            lambda db: approvals.run_single(db, args.user),
            settings,
        )

    emails = args.email if args.email is not None else load_targets_config(args.config).approvals.admin_emails
    return run_database_task(
        "Fix Admin Approval",
        lambda db: approvals.run(db, emails),
        settings,
    )


if __name__ == "__main__":
    sys.exit(main())

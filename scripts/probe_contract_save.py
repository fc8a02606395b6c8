#!/usr/bin/env python3
"""
Check that contract templates and signatures can be saved: inserts one of
each for an admin user, reads them back, reports validation errors, and
always deletes what it created.

  python scripts/probe_contract_save.py
  python scripts/probe_contract_save.py --admin-email ops@example.org --signature-type electronic
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from opsdesk.maintenance import contract_probe
from opsdesk.maintenance.runner import run_database_task
from opsdesk.utils.config_loader import load_targets_config
from opsdesk.utils.settings import OpsSettings, load_environment


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Probe contract template/signature saving")
    parser.add_argument("--admin-email", default=None, help="Admin to sign as (default: first admin)")
    parser.add_argument(
        "--signature-type",
        choices=["checkbox", "digital", "electronic"],
        default=None,
        help="Signature type to record",
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to ops_targets.yml")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    load_environment()
    targets = load_targets_config(args.config).contract_probe
    admin_email = args.admin_email or targets.admin_email
    signature_type = args.signature_type or targets.signature_type

    return run_database_task(
        "Contract Save Probe",
        lambda db: contract_probe.run(db, admin_email=admin_email, signature_type=signature_type),
        OpsSettings.from_env(),
    )


if __name__ == "__main__":
    sys.exit(main())

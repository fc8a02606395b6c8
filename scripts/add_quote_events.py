#!/usr/bin/env python3
"""
Attach the first active events to a quote as selectedEvents entries.

Modifies the quote in place; events already on the quote are skipped.

  python scripts/add_quote_events.py --quote-id 665f1c2e8b3a4d0012345678
  python scripts/add_quote_events.py --quote-id 665f... --events 3
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from opsdesk.maintenance import quote_events
from opsdesk.maintenance.runner import run_database_task
from opsdesk.utils.config_loader import load_targets_config
from opsdesk.utils.settings import OpsSettings, load_environment


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Add active events to a quote")
    parser.add_argument("--quote-id", default=None, help="Quote _id (default: quote_events.quote_id from config)")
    parser.add_argument("--events", type=int, default=None, help="How many active events to attach")
    parser.add_argument("--config", type=Path, default=None, help="Path to ops_targets.yml")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    load_environment()
    targets = load_targets_config(args.config).quote_events
    quote_id = args.quote_id or targets.quote_id
    limit = args.events or targets.events_limit

    return run_database_task(
        "Add Events to Quote",
        lambda db: quote_events.run(db, quote_id, events_limit=limit),
        OpsSettings.from_env(),
    )


if __name__ == "__main__":
    sys.exit(main())

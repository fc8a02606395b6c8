#!/usr/bin/env python3
"""
Call the running application's quote pricing endpoints and print the
responses. Non-JSON bodies are reported as a generic error. Without event ids
(flag or targets file) the first active events in the database are priced.

  python scripts/probe_quote_api.py --event-id 665f... --event-id 6660...
  python scripts/probe_quote_api.py --base-url https://staging.example.org --quote-id 665f...
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from opsdesk.error_handler import ErrorHandler
from opsdesk.errors import TransportError
from opsdesk.integrations.app_api import AppApiClient
from opsdesk.maintenance import api_probe
from opsdesk.maintenance.runner import print_banner, run_database_task
from opsdesk.utils.config_loader import load_targets_config
from opsdesk.utils.settings import OpsSettings, load_environment


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Probe the quote pricing API")
    parser.add_argument("--base-url", default=None, help="Application base URL (default: APP_BASE_URL / NEXTAUTH_URL)")
    parser.add_argument("--event-id", action="append", default=None, help="Event id to price (repeatable)")
    parser.add_argument("--people", type=int, default=None, help="numberOfPeople for the price calculation")
    parser.add_argument("--quote-id", default=None, help="Also fetch this quote")
    parser.add_argument("--config", type=Path, default=None, help="Path to ops_targets.yml")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    load_environment()
    settings = OpsSettings.from_env()
    targets = load_targets_config(args.config).api_probe
    overrides = {}
    if args.people is not None:
        overrides["number_of_people"] = args.people
    if args.quote_id:
        overrides["quote_id"] = args.quote_id
    if overrides:
        targets = targets.model_copy(update=overrides)

    client = AppApiClient(args.base_url or settings.app_base_url, token=settings.admin_api_token)
    try:
        if args.event_id or targets.event_ids:
            print_banner("Quote API Probe")
            return api_probe.run(client, targets, event_ids=args.event_id)
        # No ids configured: price the first active events from the store
        return run_database_task(
            "Quote API Probe",
            lambda db: api_probe.run(
                client, targets, event_lookup=lambda: api_probe.active_event_ids(db, targets.events_limit)
            ),
            settings,
        )
    except TransportError as e:
        print("Is the application running at that URL?", file=sys.stderr)
        return ErrorHandler().handle_exception(e, context={"task": "Quote API probe"})
    finally:
        client.close()


if __name__ == "__main__":
    sys.exit(main())

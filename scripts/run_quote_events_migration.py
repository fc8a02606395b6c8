#!/usr/bin/env python3
"""
Apply migration 010 (events on quotes).

Adds selectedEvents to existing quotes, moves activitiesIncluded into
internalNotes, creates the selectedEvents.eventId index and records the
migration. Skips if already recorded as completed.

  python scripts/run_quote_events_migration.py
"""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from opsdesk.maintenance import quote_events_migration as migration
from opsdesk.maintenance.runner import run_database_task
from opsdesk.utils.settings import OpsSettings, load_environment


def main() -> int:
    load_environment()
    return run_database_task(
        f"Migration {migration.VERSION}: Add Events to Quotes",
        migration.run_migration,
        OpsSettings.from_env(),
    )


if __name__ == "__main__":
    sys.exit(main())

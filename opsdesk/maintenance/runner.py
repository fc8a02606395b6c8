"""
Connect / operate / report / close skeleton shared by the database tasks.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Callable, Optional

from pymongo.database import Database

from opsdesk.database.connection import MongoConnection, mask_connection_string
from opsdesk.error_handler import ErrorHandler
from opsdesk.utils.settings import OpsSettings

logger = logging.getLogger(__name__)

DatabaseTask = Callable[[Database], int]


def print_banner(title: str, width: int = 60) -> None:
    print("=" * width)
    print(title)
    print("=" * width)
    print()


def run_database_task(
    title: str,
    task: DatabaseTask,
    settings: OpsSettings,
    *,
    client_factory: Optional[Callable[..., Any]] = None,
    error_handler: Optional[ErrorHandler] = None,
) -> int:
    """
    Run `task` against a fresh connection and return the exit code.

    Everything raised by connect or by the task is reported through the error
    handler (exit 1). The connection is closed on every path.
    """
    handler = error_handler or ErrorHandler()
    print_banner(title)

    try:
        uri = settings.require_mongodb_uri()
    except Exception as e:
        return handler.handle_exception(e, context={"task": title})

    conn = MongoConnection(uri, settings.mongodb_db, client_factory=client_factory)
    try:
        print("Connecting to MongoDB...")
        logger.info("Connecting to %s", mask_connection_string(conn.uri))
        db = conn.connect()
        print("✅ Connected to MongoDB")
        print()
        return task(db)
    except Exception as e:
        return handler.handle_exception(e, context={"task": title})
    finally:
        if conn.close():
            print("Database connection closed")
        sys.stdout.flush()

"""
Document store connectivity check: connect, list collections, read, write
and delete a probe document, and report server details when permitted.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from pymongo.errors import OperationFailure, PyMongoError

from opsdesk.database.connection import MongoConnection, describe_connection_string
from opsdesk.error_handler import ErrorHandler
from opsdesk.maintenance.runner import print_banner
from opsdesk.utils.settings import OpsSettings

logger = logging.getLogger(__name__)

PROBE_COLLECTION = "_connection_test"


def troubleshooting_tips(message: str) -> List[str]:
    if "ENOTFOUND" in message or "ETIMEDOUT" in message or "timed out" in message.lower() or "nodename" in message:
        return [
            "Check your network connection",
            "Verify the cluster hostname in MONGODB_URI",
            "Ensure MongoDB Atlas Network Access allows your IP",
        ]
    if "Authentication failed" in message or "bad auth" in message:
        return [
            "Verify your database username and password",
            "Check if password contains special characters (needs URL encoding)",
            "Ensure database user has correct permissions",
        ]
    if "not authorized" in message:
        return [
            "Check database user permissions in MongoDB Atlas",
            "Ensure user has readWrite role on the database",
        ]
    return [
        "Review the error message above",
        "Check MongoDB Atlas status page",
        "Verify MONGODB_URI format is correct",
    ]


def _check_read(db: Any, collections: List[str]) -> bool:
    print_banner("Testing Read Operation")
    name = collections[0] if collections else "test"
    try:
        count = db[name].count_documents({})
    except PyMongoError as e:
        print(f'⚠️  Could not read from collection "{name}"')
        print(f"  Error: {e}")
        return False
    print(f'✅ Successfully read from collection "{name}"')
    print(f"  Document count: {count}")
    return True


def _check_write(db: Any) -> bool:
    print_banner("Testing Write Operation")
    now = datetime.now(timezone.utc)
    probe = {"_id": f"connection-test-{int(now.timestamp() * 1000)}", "test": True, "timestamp": now}
    collection = db[PROBE_COLLECTION]
    try:
        collection.insert_one(probe)
        print("✅ Successfully wrote test document")
    except PyMongoError as e:
        print("⚠️  Could not write to database")
        print(f"  Error: {e}")
        print("  This may be due to user permissions")
        return False
    try:
        collection.delete_one({"_id": probe["_id"]})
        print("✅ Successfully deleted test document")
    except PyMongoError as e:
        print(f"⚠️  Could not delete test document {probe['_id']}: {e}")
        return False
    return True


def _server_info(db: Any) -> None:
    print_banner("Connection Information")
    try:
        status = db.command("serverStatus")
    except OperationFailure:
        print("⚠️  Could not retrieve server status (requires admin privileges)")
        return
    print(f"MongoDB Version: {status.get('version', 'unknown')}")
    print(f"Uptime: {int(status.get('uptime', 0)) // 60} minutes")


def run(settings: OpsSettings, client_factory: Optional[Callable[..., Any]] = None) -> int:
    print_banner("MongoDB Connection Verification")
    if not settings.mongodb_uri:
        print("❌ MONGODB_URI environment variable is not set")
        print('\nPlease set MONGODB_URI in your environment:')
        print('  export MONGODB_URI="mongodb+srv://..."')
        return 1
    print("✅ MONGODB_URI environment variable is set")

    details = describe_connection_string(settings.mongodb_uri)
    if details:
        print("\nConnection Details:")
        print(f"  Username: {details['username']}")
        print(f"  Cluster: {details['cluster']}")
        print(f"  Database: {details['database']}")
    else:
        print("⚠️  Could not parse connection string")
    print()

    conn = MongoConnection(settings.mongodb_uri, settings.mongodb_db, client_factory=client_factory)
    try:
        print_banner("Testing Connection")
        print("Connecting to MongoDB...")
        db = conn.connect()
        print("✅ Successfully connected to MongoDB\n")

        print_banner("Testing Database Access")
        print(f"Database name: {db.name}")
        collections = sorted(db.list_collection_names())
        print(f"\n✅ Found {len(collections)} collections:")
        for name in collections:
            print(f"  - {name}")
        print()

        read_ok = _check_read(db, collections)
        print()
        write_ok = _check_write(db)
        print()
        _server_info(db)
        print()

        print_banner("Verification Summary")
        print("✅ Database connection is working correctly")
        print(("✅" if read_ok else "⚠️ ") + " Read operations " + ("are functional" if read_ok else "failed"))
        print(("✅" if write_ok else "⚠️ ") + " Write operations " + ("are functional" if write_ok else "failed"))
        return 0
    except Exception as e:
        code = ErrorHandler().handle_exception(e, context={"task": "MongoDB connection"})
        print("\nTroubleshooting Tips:")
        for tip in troubleshooting_tips(str(e)):
            print(f"  • {tip}")
        return code
    finally:
        if conn.close():
            print("\nConnection closed")

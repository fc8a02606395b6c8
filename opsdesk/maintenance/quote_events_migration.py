"""
Migration 010: add events to quotes.

Run:
- adds an empty `selectedEvents` array to quotes that lack it
- appends legacy `activitiesIncluded` text to `internalNotes`
- creates the sparse index on `selectedEvents.eventId`
- records the migration in `migrations`

Rollback undoes each step (best effort for the notes). Verify only reads.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from pymongo.errors import OperationFailure

logger = logging.getLogger(__name__)

VERSION = "010"
DESCRIPTION = "Add selectedEvents field to quotes and migrate activitiesIncluded"
INDEX_NAME = "selected_events_event_id_idx"
NOTES_MARKER = "[Migrated Activities]:"

# Server error codes for "index already exists with different options/name"
_INDEX_EXISTS_CODES = {85, 86}
_INDEX_NOT_FOUND_CODE = 27

_MIGRATED_RE = re.compile(r"\[Migrated Activities\]:\s*(.+?)(?:\n\n|$)", re.DOTALL)
_HAS_MARKER = re.compile(re.escape(NOTES_MARKER))


def _quotes_exist(db: Any) -> bool:
    return "quotes" in db.list_collection_names()


def migration_record(db: Any) -> Optional[Dict[str, Any]]:
    return db["migrations"].find_one({"version": VERSION})


def _has_activities() -> Dict[str, Any]:
    return {"activitiesIncluded": {"$exists": True, "$nin": ["", None]}}


def merge_notes(existing: Optional[str], activities: str) -> str:
    if existing:
        return f"{existing}\n\n{NOTES_MARKER} {activities}"
    return f"{NOTES_MARKER} {activities}"


def split_notes(notes: str) -> Tuple[Optional[str], str]:
    """Return (activities text, notes without the migrated section)."""
    match = _MIGRATED_RE.search(notes)
    if not match:
        return None, notes
    activities = match.group(1).strip()
    cleaned = (notes[: match.start()] + notes[match.end():]).strip()
    return activities, cleaned


# ------------------------------------------------------------------ #
# Run
# ------------------------------------------------------------------ #
def add_selected_events_field(db: Any) -> Tuple[int, int]:
    print("Step 1: Adding selectedEvents field to existing quotes...")
    if not _quotes_exist(db):
        print("  ℹ Quotes collection does not exist yet, skipping migration")
        return 0, 0
    quotes = db["quotes"]
    total = quotes.count_documents({})
    result = quotes.update_many({"selectedEvents": {"$exists": False}}, {"$set": {"selectedEvents": []}})
    print(f"  ✓ Updated {result.modified_count} of {total} quotes with selectedEvents field")
    return result.modified_count, total


def migrate_activities_included(db: Any) -> int:
    print("Step 2: Migrating activitiesIncluded to internalNotes...")
    quotes = db["quotes"]
    migrated = 0
    for quote in quotes.find(_has_activities()):
        notes = quote.get("internalNotes") or ""
        if _HAS_MARKER.search(notes):
            continue
        quotes.update_one(
            {"_id": quote["_id"]},
            {"$set": {"internalNotes": merge_notes(notes, quote["activitiesIncluded"])}},
        )
        migrated += 1
    if migrated:
        print(f"  ✓ Migrated activitiesIncluded to internalNotes for {migrated} quotes")
    else:
        print("  ℹ No quotes with activitiesIncluded to migrate")
    return migrated


def create_indexes(db: Any) -> None:
    print("Step 3: Creating index on selectedEvents.eventId...")
    try:
        db["quotes"].create_index([("selectedEvents.eventId", 1)], name=INDEX_NAME, sparse=True)
        print(f"  ✓ Created index: {INDEX_NAME}")
    except OperationFailure as e:
        if e.code in _INDEX_EXISTS_CODES:
            print(f"  ℹ Index {INDEX_NAME} already exists, skipping...")
        else:
            raise


def record_migration(db: Any) -> None:
    print("Step 4: Recording migration in database...")
    db["migrations"].update_one(
        {"version": VERSION},
        {
            "$set": {
                "version": VERSION,
                "description": DESCRIPTION,
                "appliedAt": datetime.now(timezone.utc),
                "status": "completed",
            }
        },
        upsert=True,
    )
    print("  ✓ Migration recorded")


def run_migration(db: Any) -> int:
    record = migration_record(db)
    if record and record.get("status") == "completed":
        print(f"⚠️  Migration {VERSION} has already been applied")
        print(f"   Applied at: {record.get('appliedAt')}")
        print("\nTo re-run the migration, you must first rollback:")
        print("   python scripts/rollback_quote_events_migration.py")
        return 0

    modified, total = add_selected_events_field(db)
    migrated = migrate_activities_included(db)
    create_indexes(db)
    record_migration(db)

    print()
    print("✅ Migration completed successfully!")
    print("\nSummary:")
    print(f"  - Total quotes: {total}")
    print(f"  - Quotes updated with selectedEvents: {modified}")
    print(f"  - Quotes with migrated activities: {migrated}")
    return 0


# ------------------------------------------------------------------ #
# Verify
# ------------------------------------------------------------------ #
def verify_migration(db: Any, sample_size: int = 3) -> int:
    print("Check 1: Verifying quotes collection exists...")
    if not _quotes_exist(db):
        print("⚠️  Quotes collection does not exist")
        return 0
    print("✅ Quotes collection exists\n")
    quotes = db["quotes"]

    total = quotes.count_documents({})
    print(f"Check 2: Total quotes: {total}\n")

    print("Check 3: Verifying selectedEvents field...")
    missing = quotes.count_documents({"selectedEvents": {"$exists": False}})
    if missing:
        print(f"❌ Found {missing} quotes without selectedEvents field")
        for q in quotes.find({"selectedEvents": {"$exists": False}}).limit(sample_size):
            print(f"  - Quote ID: {q['_id']}")
    else:
        print("✅ All quotes have selectedEvents field")
    print()

    print("Check 4: Verifying selectedEvents is an array...")
    invalid = sum(
        1 for q in quotes.find({"selectedEvents": {"$exists": True}}) if not isinstance(q.get("selectedEvents"), list)
    )
    if invalid:
        print(f"❌ Found {invalid} quotes with invalid selectedEvents type")
    else:
        print("✅ All selectedEvents fields are arrays")
    print()

    with_events = quotes.count_documents({"selectedEvents": {"$exists": True, "$ne": []}})
    print(f"Check 5: Quotes with selected events: {with_events}\n")

    print("Check 6: Verifying activitiesIncluded migration...")
    with_activities = quotes.count_documents(_has_activities())
    migrated = quotes.count_documents({"internalNotes": _HAS_MARKER})
    print(f"  - Quotes with activitiesIncluded: {with_activities}")
    print(f"  - Quotes with migrated notes: {migrated}")
    if with_activities == 0:
        print("✅ No quotes had activitiesIncluded to migrate")
    elif migrated >= with_activities:
        print("✅ activitiesIncluded has been migrated to internalNotes")
    else:
        print("⚠️  Some quotes may not have been migrated")
    print()

    print("Check 7: Verifying indexes...")
    index = quotes.index_information().get(INDEX_NAME)
    if index:
        print(f'✅ Index "{INDEX_NAME}" exists')
        print(f"   Keys: {index.get('key')}")
        print(f"   Sparse: {index.get('sparse', False)}")
    else:
        print(f'❌ Index "{INDEX_NAME}" not found')
    print()

    print("Check 8: Sampling quotes with selectedEvents...")
    cursor = quotes.find({"selectedEvents": {"$exists": True, "$ne": []}})
    samples = [q for q in cursor if isinstance(q.get("selectedEvents"), list)][:sample_size]
    if not samples:
        print("  No quotes with selected events yet (this is normal for new migrations)")
    for i, q in enumerate(samples, start=1):
        print(f"  Sample {i}: Quote ID {q['_id']} ({len(q['selectedEvents'])} events)")
        for e in q["selectedEvents"]:
            if not isinstance(e, dict):
                print(f"    - ❌ malformed entry: {e!r}")
                continue
            print(f"    - {e.get('eventName')}: {e.get('eventCurrency')} {e.get('eventPrice')} (added {e.get('addedAt')})")
    print()

    print("Verification Summary")
    print(f"  Total quotes: {total}")
    print(f"  Quotes with selectedEvents field: {total - missing}")
    print(f"  Quotes with events: {with_events}")
    print(f"  Quotes with migrated activities: {migrated}")
    if missing == 0 and invalid == 0 and index:
        print("✅ Migration verification PASSED")
        return 0
    print("⚠️  Migration verification found issues")
    print("  1. Re-run the migration: python scripts/run_quote_events_migration.py")
    print("  2. Inspect the quotes collection manually")
    return 1


# ------------------------------------------------------------------ #
# Rollback
# ------------------------------------------------------------------ #
def remove_selected_events_field(db: Any) -> int:
    print("Step 1: Removing selectedEvents field from quotes...")
    if not _quotes_exist(db):
        print("  ℹ Quotes collection does not exist, nothing to rollback")
        return 0
    result = db["quotes"].update_many({"selectedEvents": {"$exists": True}}, {"$unset": {"selectedEvents": ""}})
    print(f"  ✓ Removed selectedEvents field from {result.modified_count} quotes")
    return result.modified_count


def restore_activities_included(db: Any) -> int:
    print("Step 2: Attempting to restore activitiesIncluded from internalNotes...")
    quotes = db["quotes"]
    restored = 0
    for quote in quotes.find({"internalNotes": _HAS_MARKER}):
        activities, cleaned = split_notes(quote.get("internalNotes") or "")
        if not activities:
            continue
        update: Dict[str, Any] = {"$set": {"activitiesIncluded": activities}}
        if cleaned:
            update["$set"]["internalNotes"] = cleaned
        else:
            update["$unset"] = {"internalNotes": ""}
        quotes.update_one({"_id": quote["_id"]}, update)
        restored += 1
    if restored:
        print(f"  ✓ Restored activitiesIncluded for {restored} quotes")
    else:
        print("  ℹ No quotes with migrated activities to restore")
    return restored


def drop_indexes(db: Any) -> None:
    print("Step 3: Dropping index on selectedEvents.eventId...")
    try:
        db["quotes"].drop_index(INDEX_NAME)
        print(f"  ✓ Dropped index: {INDEX_NAME}")
    except OperationFailure as e:
        if e.code == _INDEX_NOT_FOUND_CODE or "not found" in str(e).lower():
            print(f"  ℹ Index {INDEX_NAME} does not exist, skipping...")
        else:
            raise


def rollback_migration(db: Any) -> int:
    removed = remove_selected_events_field(db)
    restored = restore_activities_included(db)
    drop_indexes(db)
    print("Step 4: Removing migration record from database...")
    db["migrations"].delete_one({"version": VERSION})
    print("  ✓ Migration record removed")

    print()
    print("✅ Rollback completed successfully!")
    print("\nSummary:")
    print(f"  - Quotes with selectedEvents removed: {removed}")
    print(f"  - Quotes with activitiesIncluded restored: {restored}")
    return 0

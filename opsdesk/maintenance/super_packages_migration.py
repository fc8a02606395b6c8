"""
Verify migration 008 (super packages) without modifying anything.

Checks the migration record, the package and history collections, their
indexes, the `linkedPackage` index on quotes, and prints a few packages.
Applying 008 belongs to the application's own migration runner.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

logger = logging.getLogger(__name__)

VERSION = "008"
PACKAGES = "super_offer_packages"
HISTORY = "super_offer_package_history"
QUOTES = "quotes"

REQUIRED_COLLECTIONS = (PACKAGES, HISTORY, QUOTES)
PACKAGE_INDEXES = (
    "status_destination_idx",
    "created_at_desc_idx",
    "name_destination_text_idx",
    "name_idx",
    "resort_idx",
)
HISTORY_INDEXES = ("package_version_idx", "modified_at_desc_idx")
LINKED_PACKAGE_INDEX = "linked_package_id_idx"


def _section(title: str) -> None:
    print(title)
    print("-" * 60)


def check_indexes(db: Any, collection: str, expected: Sequence[str]) -> List[str]:
    """Print each expected index; returns the names that are missing."""
    info: Dict[str, Any] = db[collection].index_information()
    missing = []
    for name in expected:
        index = info.get(name)
        if index:
            print(f"✓ {name}")
            print(f"  Keys: {index.get('key')}")
        else:
            print(f"✗ {name}")
            missing.append(name)
    return missing


def verify_migration(db: Any, sample_size: int = 3) -> int:
    _section("Migration Status:")
    record = db["migrations"].find_one({"version": VERSION})
    applied = bool(record) and record.get("status") == "completed"
    if record:
        print(f"Version: {record.get('version')}")
        print(f"Description: {record.get('description')}")
        print(f"Applied: {'Yes ✓' if applied else 'No ✗'}")
        if record.get("appliedAt"):
            print(f"Applied at: {record['appliedAt']}")
    else:
        print(f"Migration {VERSION}: Not applied ✗")
    print()

    _section("Collections:")
    names = set(db.list_collection_names())
    for name in REQUIRED_COLLECTIONS:
        exists = name in names
        print(f"{'✓' if exists else '✗'} {name}")
        if exists:
            print(f"  Documents: {db[name].count_documents({})}")
    print()

    missing_indexes: List[str] = []
    if PACKAGES in names:
        _section(f"Indexes on {PACKAGES}:")
        missing_indexes += check_indexes(db, PACKAGES, PACKAGE_INDEXES)
        print()
    if HISTORY in names:
        _section(f"Indexes on {HISTORY}:")
        missing_indexes += check_indexes(db, HISTORY, HISTORY_INDEXES)
        print()
    if QUOTES in names:
        _section("Indexes on quotes collection (linkedPackage):")
        index = db[QUOTES].index_information().get(LINKED_PACKAGE_INDEX)
        if index:
            print(f"✓ {LINKED_PACKAGE_INDEX}")
            print(f"  Keys: {index.get('key')}")
            print(f"  Sparse: {index.get('sparse', False)}")
        else:
            print(f"✗ {LINKED_PACKAGE_INDEX} (not found)")
            missing_indexes.append(LINKED_PACKAGE_INDEX)
        print()

    if PACKAGES in names:
        samples = list(db[PACKAGES].find({}).limit(sample_size))
        if samples:
            _section("Sample Super Packages:")
            for i, pkg in enumerate(samples, start=1):
                print(f"{i}. {pkg.get('name')}")
                print(f"   Destination: {pkg.get('destination')}")
                print(f"   Resort: {pkg.get('resort')}")
                print(f"   Status: {pkg.get('status')}")
                print(f"   Created: {pkg.get('createdAt')}")
                print()

    print("=" * 60)
    _section("Summary:")
    collections_exist = PACKAGES in names and HISTORY in names
    if applied and collections_exist:
        print(f"✓ Migration {VERSION} is properly applied")
        print("✓ All required collections exist")
        if missing_indexes:
            print(f"⚠️  Missing indexes: {', '.join(missing_indexes)}")
        else:
            print("✓ System is ready for super packages")
        print("=" * 60)
        return 0

    print("✗ Migration issues detected")
    if not applied:
        print(f"  - Migration {VERSION} not applied")
        print("  - Run: npm run migrate:super-packages")
    for name in (PACKAGES, HISTORY):
        if name not in names:
            print(f"  - {name} collection missing")
    print("=" * 60)
    return 1

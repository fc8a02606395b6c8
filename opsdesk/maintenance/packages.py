"""
Read-only inspection of super packages: total count, lookup by name and a
short listing of the first records.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from opsdesk.database.models import SuperPackage
from opsdesk.database.repository import Repository


def find_package(db: Any, name: str) -> Optional[SuperPackage]:
    """Exact name match first, then a case-insensitive whole-name match."""
    repo = Repository(db, SuperPackage)
    found = repo.find_one({"name": name})
    if found:
        return found
    pattern = re.compile(f"^{re.escape(name.strip())}$", re.IGNORECASE)
    return repo.find_one({"name": pattern})


def print_package(pkg: SuperPackage) -> None:
    print(f"  ID: {pkg.object_id}")
    print(f"  Name: {pkg.name}")
    print(f"  Destination: {pkg.destination}")
    if pkg.resort:
        print(f"  Resort: {pkg.resort}")
    print(f"  Status: {pkg.status}")
    if pkg.created_at:
        print(f"  Created: {pkg.created_at.isoformat()}")


def run(db: Any, name: Optional[str] = None, list_limit: int = 5) -> int:
    repo = Repository(db, SuperPackage)
    total = repo.count()
    print(f"Total packages in {SuperPackage.collection_name}: {total}")
    print()

    if name:
        print(f'Looking up package "{name}"...')
        pkg = find_package(db, name)
        if pkg:
            print("✅ Found package:")
            print_package(pkg)
        else:
            print(f'⚠️  No package named "{name}"')
        print()

    if total:
        print(f"First {min(list_limit, total)} package(s):")
        for pkg in repo.find(limit=list_limit, sort=[("createdAt", -1)]):
            print(f"  - {pkg.object_id} | {pkg.name} | {pkg.destination} | {pkg.status}")
    return 0

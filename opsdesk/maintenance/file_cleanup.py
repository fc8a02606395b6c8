"""
Remove orphaned uploads: FileStorage records flagged `isOrphaned` that are
older than a cut-off, together with their files under the public directory.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, List, Optional, Tuple

from opsdesk.database.models import FileStorage
from opsdesk.database.repository import Repository

logger = logging.getLogger(__name__)


def _aware(dt: datetime) -> datetime:
    # pymongo returns naive UTC datetimes unless tz_aware is set
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def find_orphaned_files(db: Any, older_than_days: int, now: Optional[datetime] = None) -> List[FileStorage]:
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=older_than_days)
    return Repository(db, FileStorage).find(
        {"isOrphaned": True, "createdAt": {"$lt": cutoff}},
        sort=[("createdAt", -1)],
    )


def physical_path(public_dir: Path, file_path: str) -> Path:
    """Resolve a stored path under public_dir; paths escaping it are rejected."""
    root = public_dir.resolve()
    candidate = (root / file_path.lstrip("/\\")).resolve()
    if root != candidate and root not in candidate.parents:
        raise ValueError(f"File path escapes public directory: {file_path}")
    return candidate


def delete_physical_file(public_dir: Path, file_path: str) -> bool:
    try:
        physical_path(public_dir, file_path).unlink()
        return True
    except (OSError, ValueError) as e:
        print(f"  Warning: Failed to delete physical file {file_path}: {e}")
        return False


def cleanup_orphaned_files(
    db: Any,
    public_dir: Path,
    older_than_days: int = 7,
    dry_run: bool = False,
    now: Optional[datetime] = None,
) -> Tuple[int, int]:
    """Returns (deleted, errors)."""
    now = now or datetime.now(timezone.utc)
    print(f"Searching for orphaned files older than {older_than_days} days...")
    files = find_orphaned_files(db, older_than_days, now=now)
    print(f"✓ Found {len(files)} orphaned file(s)\n")
    if not files:
        print("No orphaned files to clean up.")
        return 0, 0

    total_mb = sum(f.size for f in files) / (1024 * 1024)
    print(f"Total size to be freed: {total_mb:.2f} MB\n")

    repo = Repository(db, FileStorage)
    deleted = errors = 0
    for f in files:
        age = (now - _aware(f.created_at)).days if f.created_at else 0
        print(f"Processing: {f.original_name} ({f.object_id})")
        print(f"  - Age: {age} days")
        print(f"  - Size: {f.size / 1024:.2f} KB")
        print(f"  - Path: {f.file_path}")
        if dry_run:
            print("  (dry run) would delete file and database record\n")
            continue
        try:
            physical = delete_physical_file(public_dir, f.file_path)
            repo.delete(f.object_id)
        except Exception as e:
            logger.error("Failed to delete %s: %s", f.object_id, e, exc_info=True)
            print(f"  ✗ Error: {e}\n")
            errors += 1
            continue
        if physical:
            print("  ✓ Deleted successfully (file and database record)\n")
        else:
            print("  ⚠ Database record deleted, but physical file not found\n")
        deleted += 1

    print("Cleanup Summary:")
    print(f"  - Files processed: {len(files)}")
    print(f"  - Successfully deleted: {deleted}")
    print(f"  - Errors: {errors}")
    if not dry_run:
        print(f"  - Space freed: {total_mb:.2f} MB")
    return deleted, errors


def run(db: Any, public_dir: Path, older_than_days: int = 7, dry_run: bool = False) -> int:
    _, errors = cleanup_orphaned_files(db, public_dir, older_than_days, dry_run=dry_run)
    return 1 if errors else 0

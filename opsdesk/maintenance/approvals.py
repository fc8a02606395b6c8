"""
Admin approval repair.

Admin accounts created outside the registration flow can end up with
`isApproved: false`, which locks them out of the dashboard. This flips the
flag (and the registration status) in place. Accounts already approved are
excluded by the filter, so a second run matches nothing.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from opsdesk.database.models import User
from opsdesk.database.repository import Repository, UpdateOutcome

logger = logging.getLogger(__name__)


def _approval_update() -> Dict[str, Any]:
    return {
        "$set": {
            "isApproved": True,
            "registrationStatus": "approved",
            "approvedAt": datetime.now(timezone.utc),
        }
    }


def admin_filter(emails: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    query: Dict[str, Any] = {"role": "admin"}
    if emails:
        query["contactEmail"] = {"$in": [e.strip().lower() for e in emails]}
    return query


def approve_admins(db: Any, emails: Optional[Sequence[str]] = None) -> UpdateOutcome:
    users = Repository(db, User)
    query = admin_filter(emails)
    query["isApproved"] = {"$ne": True}
    outcome = users.update_many(query, _approval_update())
    logger.info("Admin approval: matched=%d modified=%d", outcome.matched, outcome.modified)
    return outcome


def approve_user(db: Any, email: str) -> UpdateOutcome:
    """Approve a single account by contact email; unknown emails give zero counts."""
    users = Repository(db, User)
    return users.update_one({"contactEmail": email.strip().lower()}, _approval_update())


def list_admins(db: Any, emails: Optional[Sequence[str]] = None) -> List[User]:
    return Repository(db, User).find(admin_filter(emails), sort=[("contactEmail", 1)])


def run(db: Any, emails: Optional[Sequence[str]] = None) -> int:
    scope = ", ".join(emails) if emails else "all admin accounts"
    print(f"Target: {scope}")
    before = list_admins(db, emails)
    if not before:
        print("⚠️  No matching admin users found")
        return 0

    pending = [u for u in before if not u.is_approved]
    print(f"Found {len(before)} admin user(s), {len(pending)} not approved")
    for u in pending:
        print(f"  - {u.email} ({u.name}) isApproved={u.is_approved} status={u.status}")
    print()

    outcome = approve_admins(db, emails)
    print(f"Matched: {outcome.matched}")
    print(f"Modified: {outcome.modified}")
    if outcome.modified == 0:
        print("ℹ️  No changes were made (all targeted admins already approved)")
    print()

    print("Current state:")
    for u in list_admins(db, emails):
        marker = "✅" if u.is_approved else "❌"
        print(f"  {marker} {u.email}: isApproved={u.is_approved} status={u.status}")
    return 0


def run_single(db: Any, email: str) -> int:
    print(f"Target: {email}")
    outcome = approve_user(db, email)
    print(f"Matched: {outcome.matched}")
    print(f"Modified: {outcome.modified}")
    if outcome.matched == 0:
        print(f"⚠️  No user found with email {email}")
    return 0

"""
Contract save probe.

Creates a throwaway contract template and a signature for an admin user
through the mapping layer, reads both back, then deletes them. Used to check
that the stored shape still satisfies the model constraints and that the
database user can write to the contract collections.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional, Tuple

from pydantic import ValidationError

from opsdesk.database.models import ContractSignature, ContractTemplate, Document, User
from opsdesk.database.repository import Repository

logger = logging.getLogger(__name__)

PROBE_CONTENT = (
    "This agreement is a connectivity probe created by the opsdesk maintenance tools. "
    "It is deleted immediately after it is saved and never shown to agents."
)


def build_template(admin: User) -> ContractTemplate:
    stamp = datetime.now(timezone.utc)
    return ContractTemplate(
        # Minor number keeps probe versions unique if a cleanup ever fails
        version=f"v0.{int(stamp.timestamp())}",
        title="Save probe contract",
        content=PROBE_CONTENT,
        is_active=False,
        created_by=admin.object_id,
    )


def build_signature(admin: User, template: ContractTemplate, signature_type: str = "checkbox") -> ContractSignature:
    return ContractSignature(
        user_id=admin.object_id,
        contract_template_id=template.object_id,
        signature=f"probe:{admin.email or admin.object_id}",
        signature_type=signature_type,
        metadata={"hasReadContract": True, "probe": True, "contractVersion": template.version},
    )


def _cleanup(db: Any, created: List[Tuple[type, Any]]) -> int:
    deleted = 0
    for model, object_id in reversed(created):
        n = Repository(db, model).delete(object_id)
        print(f"  {'✓' if n else '⚠️ '} Deleted {model.__name__} {object_id}" + ("" if n else " (not found)"))
        deleted += n
    return deleted


def run(db: Any, admin_email: Optional[str] = None, signature_type: str = "checkbox") -> int:
    users = Repository(db, User)
    query = {"role": "admin"}
    if admin_email:
        query["contactEmail"] = admin_email.strip().lower()
    admin = users.find_one(query)
    if admin is None:
        print("⚠️  No admin user found; nothing to probe")
        return 0
    print(f"✅ Using admin: {admin.name} <{admin.email}>")

    created: List[Tuple[type, Any]] = []
    failed = False
    try:
        print("\nStep 1: Saving contract template...")
        template = Repository(db, ContractTemplate).insert(build_template(admin))
        created.append((ContractTemplate, template.object_id))
        print(f"  ✓ Saved template {template.object_id} ({template.version})")

        print("Step 2: Saving contract signature...")
        signature = Repository(db, ContractSignature).insert(build_signature(admin, template, signature_type))
        created.append((ContractSignature, signature.object_id))
        print(f"  ✓ Saved signature {signature.object_id} ({signature.signature_type})")

        print("Step 3: Reading records back...")
        for model, object_id in created:
            record: Optional[Document] = Repository(db, model).get(object_id)
            if record is None:
                print(f"  ❌ {model.__name__} {object_id} not found after save")
                failed = True
            else:
                print(f"  ✓ {model.__name__} {object_id} read back")
    except ValidationError as e:
        failed = True
        print("  ❌ Record failed schema validation:")
        for err in e.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()))
            print(f"    - {loc}: {err.get('msg')}")
    finally:
        print("Step 4: Cleaning up probe records...")
        _cleanup(db, created)

    print()
    if failed:
        print("❌ Contract save probe found problems")
        return 1
    print("✅ Contract records save and load correctly")
    return 0

from bson import ObjectId

from opsdesk.database.models import SelectedEvent, SuperPackage, User, Event
from opsdesk.database.repository import Repository, to_object_id


def test_to_object_id():
    oid = ObjectId()
    assert to_object_id(oid) is oid
    assert to_object_id(str(oid)) == oid
    assert to_object_id("not-an-id") is None
    assert to_object_id(None) is None


def test_models_map_stored_field_names(db):
    db.seed("users", [{"name": "Ops", "contactEmail": "ops@example.org", "role": "admin", "isApproved": False, "phone": "123"}])
    user = Repository(db, User).find_one({"contactEmail": "ops@example.org"})
    assert user.email == "ops@example.org"
    assert user.is_approved is False
    assert user.status == "pending"
    # unknown stored fields survive the round-trip
    assert user.to_mongo()["phone"] == "123"


def test_find_sorts_and_limits(db):
    db.seed("super_offer_packages", [{"name": n, "destination": "Spain"} for n in ("C", "A", "B")])
    names = [p.name for p in Repository(db, SuperPackage).find(sort=[("name", 1)], limit=2)]
    assert names == ["A", "B"]


def test_insert_assigns_id_and_delete(db):
    repo = Repository(db, SuperPackage)
    pkg = repo.insert(SuperPackage(name="Albufeira Super Package", destination="Portugal"))
    assert isinstance(pkg.object_id, ObjectId)
    assert repo.get(str(pkg.object_id)).destination == "Portugal"
    assert repo.delete(pkg.object_id) == 1
    assert repo.delete(pkg.object_id) == 0
    assert repo.get("garbage") is None


def test_selected_event_from_event_defaults():
    event = Event.model_validate({"_id": ObjectId(), "name": "Boat party"})
    selected = SelectedEvent.from_event(event)
    assert selected.event_price == 0.0
    assert selected.event_currency == "GBP"
    dumped = selected.model_dump(by_alias=True)
    assert set(dumped) >= {"eventId", "eventName", "eventPrice", "eventCurrency", "addedAt"}

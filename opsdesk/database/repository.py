"""
Typed access to one collection through a `Document` model.

`insert` validates through the model before writing; `collection` stays
available for raw-document operations that bypass validation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from bson import ObjectId
from bson.errors import InvalidId

from opsdesk.database.models import Document

D = TypeVar("D", bound=Document)


@dataclass(frozen=True)
class UpdateOutcome:
    matched: int
    modified: int

    @classmethod
    def from_result(cls, result: Any) -> "UpdateOutcome":
        return cls(matched=int(result.matched_count), modified=int(result.modified_count))


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Coerce a 24-hex string to an ObjectId; anything unparseable gives None."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


class Repository(Generic[D]):
    def __init__(self, db: Any, model: Type[D]) -> None:
        self.model = model
        self.collection = db[model.collection_name]

    def find_one(self, query: Dict[str, Any]) -> Optional[D]:
        doc = self.collection.find_one(query)
        return self.model.from_mongo(doc) if doc else None

    def get(self, object_id: Any) -> Optional[D]:
        oid = to_object_id(object_id)
        if oid is None:
            return None
        return self.find_one({"_id": oid})

    def find(
        self,
        query: Optional[Dict[str, Any]] = None,
        limit: int = 0,
        sort: Optional[Sequence[Tuple[str, int]]] = None,
    ) -> List[D]:
        cursor = self.collection.find(query or {})
        if sort:
            cursor = cursor.sort(list(sort))
        if limit:
            cursor = cursor.limit(limit)
        return [self.model.from_mongo(doc) for doc in cursor]

    def count(self, query: Optional[Dict[str, Any]] = None) -> int:
        return int(self.collection.count_documents(query or {}))

    def insert(self, record: D) -> D:
        # Round-trip through validation so constraints apply to the saved form too
        record = self.model.model_validate(record.to_mongo())
        result = self.collection.insert_one(record.to_mongo())
        record.object_id = result.inserted_id
        return record

    def update_one(self, query: Dict[str, Any], update: Dict[str, Any]) -> UpdateOutcome:
        return UpdateOutcome.from_result(self.collection.update_one(query, update))

    def update_many(self, query: Dict[str, Any], update: Dict[str, Any]) -> UpdateOutcome:
        return UpdateOutcome.from_result(self.collection.update_many(query, update))

    def delete(self, object_id: Any) -> int:
        oid = to_object_id(object_id)
        if oid is None:
            return 0
        return int(self.collection.delete_one({"_id": oid}).deleted_count)

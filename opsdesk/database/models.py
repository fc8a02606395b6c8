"""
Record definitions for the back-office collections the tasks touch.

Field names are snake_case in Python and camelCase in the stored documents
(via aliases). Only the fields the tasks read or write are declared; any
other stored field is kept as an extra so documents round-trip untouched.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, List, Literal, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Embedded(BaseModel):
    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True, extra="allow")


class Document(Embedded):
    """Base for top-level records; `collection_name` maps the model to its collection."""

    collection_name: ClassVar[str] = ""

    object_id: Optional[ObjectId] = Field(default=None, alias="_id")

    @classmethod
    def from_mongo(cls, doc: Dict[str, Any]):
        return cls.model_validate(doc)

    def to_mongo(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# ------------------------------------------------------------------ #
# Users
# ------------------------------------------------------------------ #
class User(Document):
    collection_name: ClassVar[str] = "users"

    name: str = ""
    email: Optional[str] = Field(default=None, alias="contactEmail")
    company_name: Optional[str] = Field(default=None, alias="companyName")
    role: Literal["agent", "admin"] = "agent"
    is_approved: bool = Field(default=False, alias="isApproved")
    status: Literal["pending", "approved", "rejected", "contracted"] = Field(default="pending", alias="registrationStatus")
    approved_at: Optional[datetime] = Field(default=None, alias="approvedAt")
    approved_by: Optional[ObjectId] = Field(default=None, alias="approvedBy")


# ------------------------------------------------------------------ #
# Packages and events
# ------------------------------------------------------------------ #
class SuperPackage(Document):
    collection_name: ClassVar[str] = "super_offer_packages"

    name: str
    destination: str = ""
    resort: str = ""
    currency: str = "EUR"
    status: Literal["active", "inactive", "deleted"] = "active"
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")


class EventPricing(Embedded):
    estimated_cost: Optional[float] = Field(default=None, alias="estimatedCost")
    currency: Optional[str] = None


class Event(Document):
    collection_name: ClassVar[str] = "events"

    name: str
    is_active: bool = Field(default=True, alias="isActive")
    pricing: Optional[EventPricing] = None

    @property
    def price(self) -> float:
        if self.pricing and self.pricing.estimated_cost is not None:
            return float(self.pricing.estimated_cost)
        return 0.0

    @property
    def currency(self) -> str:
        if self.pricing and self.pricing.currency:
            return self.pricing.currency
        return "GBP"


# ------------------------------------------------------------------ #
# Quotes
# ------------------------------------------------------------------ #
class SelectedEvent(Embedded):
    event_id: ObjectId = Field(alias="eventId")
    event_name: str = Field(alias="eventName")
    event_price: float = Field(default=0.0, ge=0, alias="eventPrice")
    event_currency: str = Field(default="GBP", alias="eventCurrency")
    added_at: datetime = Field(default_factory=utcnow, alias="addedAt")

    @classmethod
    def from_event(cls, event: Event) -> "SelectedEvent":
        return cls(
            event_id=event.object_id,
            event_name=event.name,
            event_price=event.price,
            event_currency=event.currency,
        )


class Quote(Document):
    collection_name: ClassVar[str] = "quotes"

    lead_name: str = Field(default="", alias="leadName")
    selected_events: List[SelectedEvent] = Field(default_factory=list, alias="selectedEvents")
    total_price: Optional[float] = Field(default=None, alias="totalPrice")
    currency: str = "GBP"
    internal_notes: Optional[str] = Field(default=None, alias="internalNotes")
    activities_included: Optional[str] = Field(default=None, alias="activitiesIncluded")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


# ------------------------------------------------------------------ #
# Contracts
# ------------------------------------------------------------------ #
class ContractTemplate(Document):
    collection_name: ClassVar[str] = "contracttemplates"

    version: str = Field(pattern=r"^v\d+\.\d+$")
    title: str = Field(min_length=5, max_length=200)
    content: str = Field(min_length=100, max_length=50000)
    is_active: bool = Field(default=False, alias="isActive")
    created_by: ObjectId = Field(alias="createdBy")
    effective_date: datetime = Field(default_factory=utcnow, alias="effectiveDate")
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=utcnow, alias="updatedAt")


_IPV4 = r"(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)"
_IPV6 = r"(?:[0-9a-fA-F]{1,4}:){7}[0-9a-fA-F]{1,4}"


class ContractSignature(Document):
    collection_name: ClassVar[str] = "contractsignatures"

    user_id: ObjectId = Field(alias="userId")
    contract_template_id: ObjectId = Field(alias="contractTemplateId")
    signed_at: datetime = Field(default_factory=utcnow, alias="signedAt")
    signature: str = Field(min_length=1, max_length=10000)
    signature_type: Literal["digital", "checkbox", "electronic"] = Field(default="checkbox", alias="signatureType")
    ip_address: str = Field(default="unknown", pattern=rf"^(unknown|{_IPV4}|{_IPV6})$", alias="ipAddress")
    user_agent: str = Field(default="opsdesk", max_length=1000, alias="userAgent")
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=utcnow, alias="updatedAt")


# ------------------------------------------------------------------ #
# Uploaded files
# ------------------------------------------------------------------ #
class FileStorage(Document):
    collection_name: ClassVar[str] = "filestorages"

    original_name: str = Field(default="", alias="originalName")
    file_path: str = Field(default="", alias="filePath")
    mime_type: Optional[str] = Field(default=None, alias="mimeType")
    size: int = 0
    is_orphaned: bool = Field(default=False, alias="isOrphaned")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

"""
ParcelTrack Backend — Pydantic Package Schemas
===============================================

What:  Pydantic models for the package record, its create/update inputs and
       the API response envelopes.
How:   Python attributes are snake_case; the wire format (API bodies and the
       JSON store) is camelCase through an alias generator, so
       `sender_country_code` is read and written as `senderCountryCode`.
Who:   Used by the record store (persistence), PackageService (merge and
       validation) and route handlers (response models).

Presence tracking:
    PackageUpdate relies on pydantic's `model_fields_set` to tell a field
    that was sent as "" apart from a field that was not sent at all. Only
    fields in `model_fields_set` are merged over the stored record.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# Mutable text fields shared by the record and its inputs, in form order.
PACKAGE_FIELDS = (
    "package_name",
    "package_condition",
    "quantity",
    "description",
    "sender_name",
    "sender_address",
    "sender_country",
    "sender_email",
    "sender_country_code",
    "recipient_name",
    "recipient_address",
    "recipient_country",
    "recipient_email",
    "recipient_country_code",
    "send_date",
    "delivery_date",
    "package_status",
    "package_current_country",
)

# Fields that must be present and non-empty on create (never on update).
REQUIRED_FIELDS = ("package_name", "description", "sender_name", "recipient_name")


def wire_name(field: str) -> str:
    """camelCase name used on the wire for a snake_case attribute."""
    return to_camel(field)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


# ══════════════════════════════════════════════════════════════════════════
# Stored Record
# ══════════════════════════════════════════════════════════════════════════


class PackageRecord(_CamelModel):
    """
    A single package's tracking data, exactly as stored and returned.

    The four create-time required fields are plain `str` because an update
    may legitimately blank them out (""). `image` is the public path of the
    uploaded photo, or None.

    Unknown keys found in the store file are kept (extra="allow") so that a
    load/save round-trip never drops data.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(description="Server-generated identifier (uuid4), immutable")
    package_name: str
    package_condition: Optional[str] = None
    quantity: Optional[str] = None
    description: str
    sender_name: str
    sender_address: Optional[str] = None
    sender_country: Optional[str] = None
    sender_email: Optional[str] = None
    sender_country_code: Optional[str] = None
    recipient_name: str
    recipient_address: Optional[str] = None
    recipient_country: Optional[str] = None
    recipient_email: Optional[str] = None
    recipient_country_code: Optional[str] = None
    send_date: Optional[str] = None
    delivery_date: Optional[str] = None
    package_status: Optional[str] = None
    package_current_country: Optional[str] = None
    image: Optional[str] = Field(
        default=None,
        description="Public path of the uploaded photo, e.g. /uploads/<token>-photo.jpg",
    )

    def to_wire(self) -> Dict[str, Any]:
        """camelCase dict for the JSON store and API bodies."""
        return self.model_dump(by_alias=True)


# ══════════════════════════════════════════════════════════════════════════
# Inputs
# ══════════════════════════════════════════════════════════════════════════


class PackageCreate(_CamelModel):
    """
    Fields accepted by POST /api/packages.

    Every field is optional at the type level: the presence rule for the four
    required fields is enforced by PackageService so that it surfaces as a
    ValidationError (400) with the list of missing fields, not as a 422.
    Unknown keys and `id` are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    package_name: Optional[str] = None
    package_condition: Optional[str] = None
    quantity: Optional[str] = None
    description: Optional[str] = None
    sender_name: Optional[str] = None
    sender_address: Optional[str] = None
    sender_country: Optional[str] = None
    sender_email: Optional[str] = None
    sender_country_code: Optional[str] = None
    recipient_name: Optional[str] = None
    recipient_address: Optional[str] = None
    recipient_country: Optional[str] = None
    recipient_email: Optional[str] = None
    recipient_country_code: Optional[str] = None
    send_date: Optional[str] = None
    delivery_date: Optional[str] = None
    package_status: Optional[str] = None
    package_current_country: Optional[str] = None

    def missing_required(self) -> List[str]:
        """Wire names of required fields that are absent or empty."""
        return [wire_name(name) for name in REQUIRED_FIELDS if not getattr(self, name)]


class PackageUpdate(PackageCreate):
    """
    Partial update for PUT /api/packages/{id}.

    Same fields as PackageCreate, but only the ones the client actually sent
    (see `changes()`) are applied. `id` and `image` are never taken from the
    payload: the id is immutable and the image only changes with an upload.
    """

    def changes(self) -> Dict[str, Any]:
        """
        Attribute-name → value for every field present in the payload.

        A JSON null clears an optional field. For the four required fields
        null counts as absent, since a stored record must keep them as
        strings; "" is a real value and is applied.
        """
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None or name not in REQUIRED_FIELDS
        }


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class PackageCreatedResponse(BaseModel):
    """Returned by POST /api/packages with HTTP 201."""

    message: str = Field(default="Package created successfully")
    id: str = Field(description="Identifier of the new package")


class PackageUpdatedResponse(BaseModel):
    """Returned by PUT /api/packages/{id}."""

    message: str = Field(default="Package updated successfully")
    package: PackageRecord


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description
        details: Optional extra context (e.g., which required fields are missing)
        request_id: Correlation ID for tracing this error in server logs
    """

    error: str
    message: str
    details: Optional[dict] = None
    request_id: Optional[str] = None


class HealthResponse(BaseModel):
    """Returned by GET /health."""

    status: str = Field(description="Overall service status: healthy or unhealthy")
    version: str
    store: str = Field(description="Record store status: readable or unreadable")
    uptime_seconds: float

"""MyContacts - Pydantic models for API validation.

Pydantic models for request/response validation corresponding to
JSON schemas in /specs. Used by FastAPI for runtime validation.
"""

from pydantic import BaseModel, ConfigDict, Field

from mycontacts.models import Contact

# --- Request Models ---


class ContactCreateRequest(BaseModel):
    """Request payload for saving a contact.

    An omitted id is generated; a supplied id replaces any stored contact.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="Display name")
    mobile: str = Field(..., description="Mobile number")
    id: str | None = Field(
        default=None,
        description="Contact id (generated when omitted)",
    )


class ContactUpdateRequest(BaseModel):
    """Request payload for updating a contact (id comes from the path)."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="Display name")
    mobile: str = Field(..., description="Mobile number")


# --- Response Models ---


class ContactResponse(BaseModel):
    """Contact response model for API serialization.

    Corresponds to specs/contact.schema.json.
    """

    model_config = ConfigDict(extra="forbid")

    schema_id: str = Field(default="contact.v1", description="Schema identifier")
    version: str = Field(default="1.0.0", description="Schema version")
    id: str = Field(..., description="Unique contact identifier")
    name: str = Field(..., description="Display name")
    mobile: str = Field(..., description="Mobile number")

    @classmethod
    def from_contact(cls, contact: Contact) -> "ContactResponse":
        return cls(id=contact.id, name=contact.name, mobile=contact.mobile)


class ContactErrorResponse(BaseModel):
    """Response for failed contact operations."""

    model_config = ConfigDict(extra="forbid")

    status: str = Field(default="error", description="Operation status")
    error_code: str = Field(..., description="Error code")
    error_message: str = Field(..., description="Human-readable error description")


__all__ = [
    "ContactCreateRequest",
    "ContactUpdateRequest",
    "ContactResponse",
    "ContactErrorResponse",
]

"""Message and extracted-field models."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from agentforms.conversation.models.enums import MessageRole, ValidationState


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class Message(BaseModel):
    """One transcript entry. Append-only; never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    session_id: UUID = Field(..., description="Owning session")
    role: MessageRole = Field(..., description="Author")
    content: str = Field(..., description="Message text")
    created_at: datetime = Field(default_factory=utc_now, description="Creation time")
    validation_state: ValidationState | None = Field(default=None)
    metadata: dict[str, Any] = Field(default_factory=dict)


class ExtractedField(BaseModel):
    """Current candidate value for one field of a session.

    At most one per field_id per session; a newer extraction replaces the
    previous one.
    """

    model_config = ConfigDict(frozen=True)

    field_id: str = Field(..., description="Schema field id")
    value: str = Field(..., description="Normalized extracted value")
    confidence: int = Field(..., ge=0, le=100, description="Matcher score")
    source_message_id: UUID = Field(..., description="Message the value came from")
    raw_value: str = Field(..., description="Verbatim matched text")
    validated: bool = Field(default=False, description="Passed field validation")
    validation_errors: tuple[str, ...] = Field(default=())
    extracted_at: datetime = Field(default_factory=utc_now)

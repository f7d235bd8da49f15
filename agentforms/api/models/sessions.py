"""Session, turn and stream event models."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from agentforms.conversation.models import ExtractedField, Session, SessionStatus


class StartSessionRequest(BaseModel):
    """Request body for POST /v1/sessions."""

    agent_id: UUID
    visitor_id: str | None = None


class SessionResponse(BaseModel):
    """Session state with its current extracted fields."""

    session_id: UUID
    agent_id: UUID
    visitor_id: str | None = None
    status: SessionStatus
    completion_rate: float
    required_fields_count: int
    completed_fields_count: int
    turn_count: int
    flagged: bool
    flag_reason: str | None = None
    started_at: datetime
    ended_at: datetime | None = None
    last_activity_at: datetime
    extracted_fields: dict[str, ExtractedField] = Field(default_factory=dict)

    @classmethod
    def from_session(
        cls,
        session: Session,
        extracted_fields: dict[str, ExtractedField] | None = None,
    ) -> "SessionResponse":
        return cls(
            **session.model_dump(),
            extracted_fields=extracted_fields or {},
        )


class TurnRequest(BaseModel):
    """Request body for POST /v1/sessions/{session_id}/turns."""

    message: str = Field(min_length=1)
    """The visitor's message text."""


class CancelResponse(BaseModel):
    """Response body for POST /v1/sessions/{session_id}/cancel."""

    session_id: UUID
    cancelled: bool
    """True if an in-flight turn was signalled."""


class ReplyEvent(BaseModel):
    """Incremental reply content during streaming."""

    type: Literal["reply"] = "reply"
    content_so_far: str


class DoneEvent(BaseModel):
    """Final event when the reply completes."""

    type: Literal["done"] = "done"
    session_id: str
    content: str
    status: SessionStatus
    completion_rate: float
    extracted_fields: dict[str, ExtractedField] = Field(default_factory=dict)


class ErrorEvent(BaseModel):
    """Error event during streaming."""

    type: Literal["error"] = "error"
    code: str
    message: str


StreamEvent = ReplyEvent | DoneEvent | ErrorEvent

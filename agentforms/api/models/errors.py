"""Error response models for consistent API error handling."""

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Machine-readable error codes shared by exceptions and API responses."""

    INVALID_REQUEST = "INVALID_REQUEST"
    """Request or turn input failed validation."""

    INVALID_SCHEMA = "INVALID_SCHEMA"
    """The agent's field schema is malformed."""

    AGENT_NOT_FOUND = "AGENT_NOT_FOUND"
    """The specified agent_id does not exist."""

    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    """The specified session_id does not exist."""

    FIELD_NOT_FOUND = "FIELD_NOT_FOUND"
    """The specified field_id is not part of the agent's schema."""

    SESSION_CLOSED = "SESSION_CLOSED"
    """The session is completed, abandoned or errored."""

    TURN_IN_PROGRESS = "TURN_IN_PROGRESS"
    """Another turn is still in flight for the session."""

    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    """The admission window for the key and category is exhausted."""

    ABUSE_DETECTED = "ABUSE_DETECTED"
    """The visitor's recent messages match an abuse pattern."""

    LLM_ERROR = "LLM_ERROR"
    """The text-generation provider failed mid-turn."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""


class ErrorDetail(BaseModel):
    """Field-level error information for validation failures."""

    field: str | None = None
    message: str


class ErrorBody(BaseModel):
    """Error body content for API error responses."""

    code: ErrorCode
    message: str
    details: list[ErrorDetail] | None = None
    retry_after: int | None = None
    """Seconds until the caller may retry (rate limiting only)."""


class ErrorResponse(BaseModel):
    """Standard error response format for all API errors.

    Example:
        {
            "error": {
                "code": "SESSION_CLOSED",
                "message": "Session 3f2c... is completed"
            }
        }
    """

    error: ErrorBody

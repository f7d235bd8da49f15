"""Exception hierarchy for the engine and its caller API.

All exceptions inherit from AgentFormsError, which carries the status_code
and error_code the HTTP layer uses to build an ErrorResponse. Extraction and
validation never raise: a missing match or a failed rule is a normal result.
"""

from typing import TYPE_CHECKING

from agentforms.api.models.errors import ErrorCode

if TYPE_CHECKING:
    from agentforms.admission.models import RateLimitResult


class AgentFormsError(Exception):
    """Base exception for all engine errors."""

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


# Input errors: rejected before any message is appended


class InvalidRequestError(AgentFormsError):
    """Raised when a request argument is malformed."""

    status_code = 400
    error_code = ErrorCode.INVALID_REQUEST


class InvalidTurnInputError(InvalidRequestError):
    """Raised when visitor text is empty or too long."""


class UnknownAdmissionCategoryError(InvalidRequestError):
    """Raised when an admission category has no configured limit."""


class InvalidSchemaError(AgentFormsError):
    """Raised when an agent's field schema is malformed."""

    status_code = 400
    error_code = ErrorCode.INVALID_SCHEMA


class AgentNotFoundError(AgentFormsError):
    """Raised when agent_id doesn't exist."""

    status_code = 404
    error_code = ErrorCode.AGENT_NOT_FOUND


class SessionNotFoundError(AgentFormsError):
    """Raised when session_id doesn't exist."""

    status_code = 404
    error_code = ErrorCode.SESSION_NOT_FOUND


class FieldNotFoundError(AgentFormsError):
    """Raised when a field_id is not part of the agent's schema."""

    status_code = 404
    error_code = ErrorCode.FIELD_NOT_FOUND


# Admission errors: rejected before orchestration


class RateLimitExceededError(AgentFormsError):
    """Raised when the admission window is exhausted."""

    status_code = 429
    error_code = ErrorCode.RATE_LIMIT_EXCEEDED

    def __init__(self, message: str, result: "RateLimitResult") -> None:
        super().__init__(message)
        self.result = result

    @property
    def retry_after(self) -> int | None:
        return self.result.retry_after


class AbuseDetectedError(AgentFormsError):
    """Raised when the abuse heuristic flags the visitor's recent messages."""

    status_code = 429
    error_code = ErrorCode.ABUSE_DETECTED

    def __init__(self, message: str, reason: str) -> None:
        super().__init__(message)
        self.reason = reason


# Session state errors


class SessionClosedError(AgentFormsError):
    """Raised when a turn or transition targets a terminal session."""

    status_code = 409
    error_code = ErrorCode.SESSION_CLOSED


class TurnInProgressError(AgentFormsError):
    """Raised when another turn holds the session lock past the wait timeout."""

    status_code = 409
    error_code = ErrorCode.TURN_IN_PROGRESS


# Provider errors


class TurnFailedError(AgentFormsError):
    """Raised when generation fails mid-turn; the session moves to error."""

    status_code = 502
    error_code = ErrorCode.LLM_ERROR

    def __init__(self, message: str, partial_content: str = "") -> None:
        super().__init__(message)
        self.partial_content = partial_content

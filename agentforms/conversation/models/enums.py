"""Enums for conversation domain."""

from enum import Enum


class MessageRole(str, Enum):
    """Who authored a message."""

    AGENT = "agent"
    VISITOR = "visitor"
    SYSTEM = "system"


class ValidationState(str, Enum):
    """Validation outcome attached to a message."""

    VALID = "valid"
    INVALID = "invalid"
    PENDING = "pending"


class SessionStatus(str, Enum):
    """Session lifecycle state.

    ACTIVE is the only non-terminal state.
    """

    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"
    ERROR = "error"

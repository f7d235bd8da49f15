"""Conversation domain: transcript, extracted fields and session lifecycle."""

from agentforms.conversation.models import (
    TERMINAL_STATUSES,
    ExtractedField,
    Message,
    MessageRole,
    Session,
    SessionStatus,
    ValidationState,
)
from agentforms.conversation.store import SessionStore

__all__ = [
    "ExtractedField",
    "Message",
    "MessageRole",
    "Session",
    "SessionStatus",
    "SessionStore",
    "TERMINAL_STATUSES",
    "ValidationState",
]

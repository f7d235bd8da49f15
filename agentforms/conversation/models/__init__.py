"""Conversation domain models.

- Messages: append-only transcript entries
- ExtractedFields: current candidate value per schema field
- Sessions: lifecycle state machine and completion counters
"""

from agentforms.conversation.models.enums import (
    MessageRole,
    SessionStatus,
    ValidationState,
)
from agentforms.conversation.models.message import ExtractedField, Message
from agentforms.conversation.models.session import TERMINAL_STATUSES, Session

__all__ = [
    # Enums
    "MessageRole",
    "SessionStatus",
    "ValidationState",
    # Models
    "Message",
    "ExtractedField",
    "Session",
    "TERMINAL_STATUSES",
]

"""SessionStore abstract interface."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import datetime
from uuid import UUID

from agentforms.conversation.models import (
    ExtractedField,
    Message,
    MessageRole,
    Session,
)


class SessionStore(ABC):
    """Abstract interface for session, transcript and extracted-field storage.

    CRUD only: lifecycle rules live on Session and in the orchestrator.
    """

    @abstractmethod
    async def get(self, session_id: UUID) -> Session | None:
        """Get a session by ID."""
        pass

    @abstractmethod
    async def save(self, session: Session) -> UUID:
        """Save a session, returning its ID."""
        pass

    @abstractmethod
    async def delete(self, session_id: UUID) -> bool:
        """Delete a session with its messages and extracted fields."""
        pass

    @abstractmethod
    async def append_message(self, message: Message) -> None:
        """Append a message to its session's transcript."""
        pass

    @abstractmethod
    async def get_messages(
        self,
        session_id: UUID,
        *,
        role: MessageRole | None = None,
        since: datetime | None = None,
    ) -> list[Message]:
        """Get a session's messages in chronological order."""
        pass

    @abstractmethod
    async def get_extracted_fields(self, session_id: UUID) -> dict[str, ExtractedField]:
        """Get the current extracted-field map, keyed by field id."""
        pass

    @abstractmethod
    async def save_extracted_fields(
        self,
        session_id: UUID,
        fields: Mapping[str, ExtractedField],
    ) -> None:
        """Write entries into the extracted-field map, replacing same-id entries."""
        pass

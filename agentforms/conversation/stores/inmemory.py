"""In-memory implementation of SessionStore."""

from collections import defaultdict
from collections.abc import Mapping
from datetime import UTC, datetime
from uuid import UUID

from agentforms.conversation.models import (
    ExtractedField,
    Message,
    MessageRole,
    Session,
)
from agentforms.conversation.store import SessionStore


class InMemorySessionStore(SessionStore):
    """In-memory implementation of SessionStore for testing and development.

    Not suitable for production use.
    """

    def __init__(self) -> None:
        self._sessions: dict[UUID, Session] = {}
        self._messages: dict[UUID, list[Message]] = defaultdict(list)
        self._fields: dict[UUID, dict[str, ExtractedField]] = defaultdict(dict)

    async def get(self, session_id: UUID) -> Session | None:
        session = self._sessions.get(session_id)
        return session.model_copy(deep=True) if session else None

    async def save(self, session: Session) -> UUID:
        session.last_activity_at = datetime.now(UTC)
        self._sessions[session.session_id] = session.model_copy(deep=True)
        return session.session_id

    async def delete(self, session_id: UUID) -> bool:
        self._messages.pop(session_id, None)
        self._fields.pop(session_id, None)
        return self._sessions.pop(session_id, None) is not None

    async def append_message(self, message: Message) -> None:
        self._messages[message.session_id].append(message)

    async def get_messages(
        self,
        session_id: UUID,
        *,
        role: MessageRole | None = None,
        since: datetime | None = None,
    ) -> list[Message]:
        results = []
        for message in self._messages.get(session_id, []):
            if role is not None and message.role != role:
                continue
            if since is not None and message.created_at < since:
                continue
            results.append(message)
        return results

    async def get_extracted_fields(self, session_id: UUID) -> dict[str, ExtractedField]:
        return dict(self._fields.get(session_id, {}))

    async def save_extracted_fields(
        self,
        session_id: UUID,
        fields: Mapping[str, ExtractedField],
    ) -> None:
        self._fields[session_id].update(fields)

"""Redis implementation of SessionStore.

Key structure:
- {prefix}:session:{session_id} - Session JSON document
- {prefix}:messages:{session_id} - Transcript list (RPUSH, chronological)
- {prefix}:fields:{session_id} - Hash of field_id -> ExtractedField JSON

All three keys share the configured TTL, refreshed on every write.
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from uuid import UUID

import redis.asyncio as redis

from agentforms.conversation.models import (
    ExtractedField,
    Message,
    MessageRole,
    Session,
)
from agentforms.conversation.store import SessionStore
from agentforms.observability.logging import get_logger

logger = get_logger(__name__)


class RedisSessionStore(SessionStore):
    """Redis-backed session store shared across instances."""

    def __init__(
        self,
        client: redis.Redis,
        key_prefix: str = "agentforms",
        ttl_seconds: int = 604800,
    ) -> None:
        """Initialize Redis session store.

        Args:
            client: Redis client instance
            key_prefix: Prefix for every key this store writes
            ttl_seconds: Expiry applied to session, message and field keys
        """
        self._client = client
        self._prefix = key_prefix
        self._ttl = ttl_seconds

    def _session_key(self, session_id: UUID) -> str:
        return f"{self._prefix}:session:{session_id}"

    def _messages_key(self, session_id: UUID) -> str:
        return f"{self._prefix}:messages:{session_id}"

    def _fields_key(self, session_id: UUID) -> str:
        return f"{self._prefix}:fields:{session_id}"

    async def get(self, session_id: UUID) -> Session | None:
        data = await self._client.get(self._session_key(session_id))
        if not data:
            return None
        return Session.model_validate_json(data)

    async def save(self, session: Session) -> UUID:
        session.last_activity_at = datetime.now(UTC)
        await self._client.set(
            self._session_key(session.session_id),
            session.model_dump_json(),
            ex=self._ttl,
        )
        logger.debug(
            "session_saved",
            session_id=str(session.session_id),
            status=session.status.value,
        )
        return session.session_id

    async def delete(self, session_id: UUID) -> bool:
        deleted = await self._client.delete(
            self._session_key(session_id),
            self._messages_key(session_id),
            self._fields_key(session_id),
        )
        return deleted > 0

    async def append_message(self, message: Message) -> None:
        key = self._messages_key(message.session_id)
        await self._client.rpush(key, message.model_dump_json())
        await self._client.expire(key, self._ttl)

    async def get_messages(
        self,
        session_id: UUID,
        *,
        role: MessageRole | None = None,
        since: datetime | None = None,
    ) -> list[Message]:
        raw = await self._client.lrange(self._messages_key(session_id), 0, -1)
        messages = [Message.model_validate_json(item) for item in raw]
        if role is not None:
            messages = [m for m in messages if m.role == role]
        if since is not None:
            messages = [m for m in messages if m.created_at >= since]
        return messages

    async def get_extracted_fields(self, session_id: UUID) -> dict[str, ExtractedField]:
        raw = await self._client.hgetall(self._fields_key(session_id))
        fields: dict[str, ExtractedField] = {}
        for key, value in raw.items():
            field_id = key.decode() if isinstance(key, bytes) else key
            fields[field_id] = ExtractedField.model_validate_json(value)
        return fields

    async def save_extracted_fields(
        self,
        session_id: UUID,
        fields: Mapping[str, ExtractedField],
    ) -> None:
        if not fields:
            return
        key = self._fields_key(session_id)
        await self._client.hset(
            key,
            mapping={
                field_id: extracted.model_dump_json()
                for field_id, extracted in fields.items()
            },
        )
        await self._client.expire(key, self._ttl)

"""SessionStore implementations."""

from agentforms.conversation.stores.inmemory import InMemorySessionStore
from agentforms.conversation.stores.redis import RedisSessionStore

__all__ = ["InMemorySessionStore", "RedisSessionStore"]

"""AgentStore implementations."""

from agentforms.schema.stores.inmemory import InMemoryAgentStore
from agentforms.schema.stores.redis import RedisAgentStore

__all__ = ["InMemoryAgentStore", "RedisAgentStore"]

"""Unit tests for build_service wiring."""

from unittest.mock import MagicMock

from agentforms.admission import InMemoryCounterStore, RedisCounterStore
from agentforms.bootstrap import build_service
from agentforms.config.settings import Settings
from agentforms.conversation.stores import InMemorySessionStore, RedisSessionStore
from agentforms.orchestration import InMemorySessionMutex, RedisSessionMutex
from agentforms.providers.llm import MockTextProvider, TemplateTextProvider
from agentforms.schema.stores import InMemoryAgentStore, RedisAgentStore


class TestBuildService:
    """Tests for build_service."""

    def test_inmemory_backend(self) -> None:
        service = build_service(Settings())

        assert isinstance(service._agent_store, InMemoryAgentStore)
        assert isinstance(service._session_store, InMemorySessionStore)
        assert isinstance(service._mutex, InMemorySessionMutex)
        assert isinstance(service._admission._rate_limiter._store, InMemoryCounterStore)
        assert isinstance(service._orchestrator._provider, TemplateTextProvider)

    def test_redis_backend_uses_given_client(self) -> None:
        client = MagicMock()
        settings = Settings(storage={"backend": "redis", "key_prefix": "test"})

        service = build_service(settings, redis_client=client)

        assert isinstance(service._agent_store, RedisAgentStore)
        assert isinstance(service._session_store, RedisSessionStore)
        assert isinstance(service._mutex, RedisSessionMutex)
        assert isinstance(service._admission._rate_limiter._store, RedisCounterStore)
        assert service._session_store._client is client
        assert service._session_store._prefix == "test"

    def test_provider_override(self) -> None:
        provider = MockTextProvider()
        service = build_service(Settings(), provider=provider)
        assert service._orchestrator._provider is provider

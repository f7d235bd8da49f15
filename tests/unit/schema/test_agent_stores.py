"""Unit tests for AgentStore implementations."""

from unittest.mock import AsyncMock

import pytest

from agentforms.schema.stores import InMemoryAgentStore, RedisAgentStore
from tests.factories import AgentFactory


@pytest.fixture
def store() -> InMemoryAgentStore:
    return InMemoryAgentStore()


class TestInMemoryAgentStore:
    """Tests for InMemoryAgentStore."""

    @pytest.mark.asyncio
    async def test_save_and_get(self, store: InMemoryAgentStore) -> None:
        """Saved agents are returned by id."""
        agent = AgentFactory.create()
        assert await store.save(agent) == agent.id
        assert await store.get(agent.id) == agent

    @pytest.mark.asyncio
    async def test_get_missing(self, store: InMemoryAgentStore) -> None:
        """Unknown ids return None."""
        assert await store.get(AgentFactory.create().id) is None

    @pytest.mark.asyncio
    async def test_delete(self, store: InMemoryAgentStore) -> None:
        """Delete reports whether an agent was removed."""
        agent = AgentFactory.create()
        await store.save(agent)
        assert await store.delete(agent.id) is True
        assert await store.delete(agent.id) is False
        assert await store.get(agent.id) is None


class TestRedisAgentStore:
    """Tests for RedisAgentStore against a mocked client."""

    @pytest.mark.asyncio
    async def test_save_writes_json_document(self) -> None:
        """Agents are stored as JSON under the prefixed key."""
        client = AsyncMock()
        store = RedisAgentStore(client, key_prefix="test")
        agent = AgentFactory.create()

        await store.save(agent)

        client.set.assert_awaited_once_with(
            f"test:agent:{agent.id}", agent.model_dump_json()
        )

    @pytest.mark.asyncio
    async def test_get_parses_document(self) -> None:
        """Stored JSON is parsed back into a FormAgent."""
        agent = AgentFactory.create()
        client = AsyncMock()
        client.get.return_value = agent.model_dump_json().encode()
        store = RedisAgentStore(client)

        assert await store.get(agent.id) == agent
        client.get.assert_awaited_once_with(f"agentforms:agent:{agent.id}")

    @pytest.mark.asyncio
    async def test_get_missing(self) -> None:
        """A missing key returns None."""
        client = AsyncMock()
        client.get.return_value = None
        store = RedisAgentStore(client)

        assert await store.get(AgentFactory.create().id) is None

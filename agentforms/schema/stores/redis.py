"""Redis implementation of AgentStore."""

from uuid import UUID

import redis.asyncio as redis

from agentforms.observability.logging import get_logger
from agentforms.schema.models import FormAgent
from agentforms.schema.store import AgentStore

logger = get_logger(__name__)


class RedisAgentStore(AgentStore):
    """Stores each agent as one JSON document under {prefix}:agent:{agent_id}.

    Agents do not expire; they are owned by schema authoring.
    """

    def __init__(self, client: redis.Redis, key_prefix: str = "agentforms") -> None:
        self._client = client
        self._prefix = key_prefix

    def _key(self, agent_id: UUID) -> str:
        return f"{self._prefix}:agent:{agent_id}"

    async def get(self, agent_id: UUID) -> FormAgent | None:
        data = await self._client.get(self._key(agent_id))
        if not data:
            return None
        return FormAgent.model_validate_json(data)

    async def save(self, agent: FormAgent) -> UUID:
        await self._client.set(self._key(agent.id), agent.model_dump_json())
        logger.debug("agent_saved", agent_id=str(agent.id))
        return agent.id

    async def delete(self, agent_id: UUID) -> bool:
        return await self._client.delete(self._key(agent_id)) > 0

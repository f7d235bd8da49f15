"""In-memory implementation of AgentStore."""

from uuid import UUID

from agentforms.schema.models import FormAgent
from agentforms.schema.store import AgentStore


class InMemoryAgentStore(AgentStore):
    """Dict-backed AgentStore for testing and development."""

    def __init__(self) -> None:
        self._agents: dict[UUID, FormAgent] = {}

    async def get(self, agent_id: UUID) -> FormAgent | None:
        return self._agents.get(agent_id)

    async def save(self, agent: FormAgent) -> UUID:
        self._agents[agent.id] = agent
        return agent.id

    async def delete(self, agent_id: UUID) -> bool:
        return self._agents.pop(agent_id, None) is not None

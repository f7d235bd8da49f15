"""AgentStore abstract interface."""

from abc import ABC, abstractmethod
from uuid import UUID

from agentforms.schema.models import FormAgent


class AgentStore(ABC):
    """Abstract interface for published agents and their schemas.

    Schema authoring happens elsewhere; the engine only reads agents,
    and writes them when a caller registers one.
    """

    @abstractmethod
    async def get(self, agent_id: UUID) -> FormAgent | None:
        """Get an agent by ID."""
        pass

    @abstractmethod
    async def save(self, agent: FormAgent) -> UUID:
        """Save an agent, returning its ID."""
        pass

    @abstractmethod
    async def delete(self, agent_id: UUID) -> bool:
        """Delete an agent."""
        pass

"""Agent registration and validation models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from agentforms.schema.models import FieldDefinition, FormAgent, Knowledge, Persona


class AgentCreate(BaseModel):
    """Request body for POST /v1/agents."""

    name: str = Field(min_length=1)
    fields: list[FieldDefinition] = Field(default_factory=list)
    persona: Persona
    knowledge: Knowledge | None = None
    welcome_message: str | None = None


class AgentResponse(BaseModel):
    """A registered agent."""

    id: UUID
    name: str
    fields: list[FieldDefinition]
    persona: Persona
    knowledge: Knowledge | None = None
    welcome_message: str | None = None
    created_at: datetime

    @classmethod
    def from_agent(cls, agent: FormAgent) -> "AgentResponse":
        return cls(
            id=agent.id,
            name=agent.name,
            fields=list(agent.field_schema.fields),
            persona=agent.persona,
            knowledge=agent.knowledge,
            welcome_message=agent.welcome_message,
            created_at=agent.created_at,
        )


class ValidateRequest(BaseModel):
    """Request body for POST /v1/agents/{agent_id}/validate."""

    field_id: str = Field(min_length=1)
    value: str

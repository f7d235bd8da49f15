"""Agent registration and live validation endpoints."""

from uuid import UUID

from fastapi import APIRouter, status
from pydantic import ValidationError

from agentforms.api.dependencies import ServiceDep
from agentforms.api.models.agents import AgentCreate, AgentResponse, ValidateRequest
from agentforms.exceptions import InvalidSchemaError
from agentforms.observability.logging import get_logger
from agentforms.schema.models import AgentSchema, FormAgent
from agentforms.validation import ValidationResult

logger = get_logger(__name__)

router = APIRouter(prefix="/agents")


@router.post("", response_model=AgentResponse, status_code=status.HTTP_201_CREATED)
async def create_agent(body: AgentCreate, service: ServiceDep) -> AgentResponse:
    """Register a data-collection agent.

    Raises:
        InvalidSchemaError: If field ids are duplicated
    """
    try:
        schema = AgentSchema(fields=tuple(body.fields))
    except ValidationError as e:
        raise InvalidSchemaError(
            "; ".join(error["msg"] for error in e.errors())
        ) from e

    agent = FormAgent(
        name=body.name,
        field_schema=schema,
        persona=body.persona,
        knowledge=body.knowledge,
        welcome_message=body.welcome_message,
    )
    await service.register_agent(agent)
    return AgentResponse.from_agent(agent)


@router.get("/{agent_id}", response_model=AgentResponse)
async def get_agent(agent_id: UUID, service: ServiceDep) -> AgentResponse:
    return AgentResponse.from_agent(await service.get_agent(agent_id))


@router.post("/{agent_id}/validate", response_model=ValidationResult)
async def validate_value(
    agent_id: UUID,
    body: ValidateRequest,
    service: ServiceDep,
) -> ValidationResult:
    """Validate a value for one field, for live form preview."""
    return await service.validate_value(agent_id, body.field_id, body.value)

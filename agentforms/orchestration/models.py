"""Per-turn orchestration models."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from agentforms.conversation.models import ExtractedField, Message
from agentforms.schema.models import FormAgent


class ConversationContext(BaseModel):
    """Inputs for one turn, built fresh by the caller and discarded after.

    messages is the transcript before the new visitor message.
    """

    model_config = ConfigDict(frozen=True)

    session_id: UUID
    agent: FormAgent
    messages: tuple[Message, ...] = Field(default=())
    extracted_fields: dict[str, ExtractedField] = Field(default_factory=dict)


class PartialReply(BaseModel):
    """One streamed emission of an agent reply.

    content_so_far only ever grows within a turn. Only the final emission
    has done=True, and only it carries extracted_fields.
    """

    model_config = ConfigDict(frozen=True)

    content_so_far: str
    done: bool = False
    extracted_fields: dict[str, ExtractedField] | None = None

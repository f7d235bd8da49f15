"""Schema domain models.

A field definition is a tagged variant discriminated by ``type``: each
variant carries only the validation attributes that apply to it (numbers
have bounds, selects have options). All models are frozen; a published
schema never changes under a running session.
"""

import re
from datetime import UTC, datetime
from typing import Annotated, Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from agentforms.schema.enums import FieldType, Tone


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class FieldValidation(BaseModel):
    """Validation rules shared by every field type."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    pattern: str | None = Field(
        default=None, description="Regex the value must contain a match for"
    )

    @field_validator("pattern")
    @classmethod
    def _pattern_compiles(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"Invalid pattern {value!r}: {exc}") from exc
        return value


class NumberValidation(FieldValidation):
    """Numeric bounds, inclusive."""

    min: float | None = Field(default=None, description="Minimum allowed value")
    max: float | None = Field(default=None, description="Maximum allowed value")

    @model_validator(mode="after")
    def _bounds_ordered(self) -> "NumberValidation":
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"min ({self.min}) is greater than max ({self.max})")
        return self


class BaseField(BaseModel):
    """Attributes common to all field variants."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., min_length=1, description="Stable key")
    label: str = Field(..., min_length=1, description="Human-readable name")
    required: bool = Field(default=False)
    order: int = Field(default=0, description="Collection priority, ascending")
    placeholder: str | None = Field(default=None, description="Suggested phrasing")
    help_text: str | None = Field(default=None, description="Extra guidance")
    pii_flag: bool = Field(default=False, description="Value is personal data")
    validation: FieldValidation = Field(default_factory=FieldValidation)


class TextField(BaseField):
    type: Literal["text"] = "text"


class NumberField(BaseField):
    type: Literal["number"] = "number"
    validation: NumberValidation = Field(default_factory=NumberValidation)


class EmailField(BaseField):
    type: Literal["email"] = "email"


class SelectField(BaseField):
    type: Literal["select"] = "select"
    options: tuple[str, ...] = Field(..., min_length=1, description="Allowed values")


class DateField(BaseField):
    type: Literal["date"] = "date"


class FileField(BaseField):
    type: Literal["file"] = "file"


FieldDefinition = Annotated[
    TextField | NumberField | EmailField | SelectField | DateField | FileField,
    Field(discriminator="type"),
]


class AgentSchema(BaseModel):
    """Ordered field definitions an agent collects.

    Field ids are unique. An empty schema is valid and is trivially
    complete.
    """

    model_config = ConfigDict(frozen=True)

    fields: tuple[FieldDefinition, ...] = Field(default=())

    @field_validator("fields")
    @classmethod
    def _unique_ids(
        cls, value: tuple[BaseField, ...]
    ) -> tuple[BaseField, ...]:
        seen: set[str] = set()
        for field in value:
            if field.id in seen:
                raise ValueError(f"Duplicate field id: {field.id}")
            seen.add(field.id)
        return value

    def get_field(self, field_id: str) -> BaseField | None:
        """Look up a field by id."""
        for field in self.fields:
            if field.id == field_id:
                return field
        return None

    def required_fields(self) -> list[BaseField]:
        """Required fields in collection order (ties keep declared order)."""
        return sorted((f for f in self.fields if f.required), key=lambda f: f.order)

    def field_types(self) -> dict[str, FieldType]:
        return {f.id: FieldType(f.type) for f in self.fields}


class Persona(BaseModel):
    """How the agent presents itself."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    description: str = Field(default="")
    tone: Tone = Field(default=Tone.FRIENDLY)
    sample_messages: tuple[str, ...] = Field(default=())


class Knowledge(BaseModel):
    """Reference text the agent may draw on when replying."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(default="")
    enable_rag: bool = Field(default=False)


class FormAgent(BaseModel):
    """A published data-collection agent."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1)
    field_schema: AgentSchema = Field(default_factory=AgentSchema)
    persona: Persona
    knowledge: Knowledge | None = None
    welcome_message: str | None = Field(
        default=None, description="Posted as the first agent message of a session"
    )
    created_at: datetime = Field(default_factory=utc_now)

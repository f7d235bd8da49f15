"""Schema model: ordered, typed field definitions and the agents that own them."""

from agentforms.schema.enums import FieldType, Tone
from agentforms.schema.models import (
    AgentSchema,
    BaseField,
    DateField,
    EmailField,
    FieldDefinition,
    FieldValidation,
    FileField,
    FormAgent,
    Knowledge,
    NumberField,
    NumberValidation,
    Persona,
    SelectField,
    TextField,
)
from agentforms.schema.store import AgentStore

__all__ = [
    # Enums
    "FieldType",
    "Tone",
    # Fields
    "BaseField",
    "TextField",
    "NumberField",
    "EmailField",
    "SelectField",
    "DateField",
    "FileField",
    "FieldDefinition",
    "FieldValidation",
    "NumberValidation",
    # Agent
    "AgentSchema",
    "Persona",
    "Knowledge",
    "FormAgent",
    # Store
    "AgentStore",
]

"""Completion tracking over the extracted-field map."""

from collections.abc import Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field

from agentforms.conversation.models import ExtractedField
from agentforms.schema.models import BaseField, FieldDefinition

ExtractedValues = Mapping[str, ExtractedField] | Mapping[str, str]


def _is_present(extracted: ExtractedValues, field_id: str) -> bool:
    entry = extracted.get(field_id)
    if entry is None:
        return False
    value = entry.value if isinstance(entry, ExtractedField) else entry
    return bool(value and value.strip())


def _required_in_order(fields: Sequence[BaseField]) -> list[BaseField]:
    # sorted() is stable, so equal orders keep declared position
    return sorted((f for f in fields if f.required), key=lambda f: f.order)


def next_required_field(
    extracted: ExtractedValues,
    fields: Sequence[BaseField],
) -> BaseField | None:
    """Return the lowest-order required field with no value, or None when done."""
    for field in _required_in_order(fields):
        if not _is_present(extracted, field.id):
            return field
    return None


def completion_rate(extracted: ExtractedValues, fields: Sequence[BaseField]) -> float:
    """Percentage of required fields with a value.

    Presence only, validity is not considered. A schema with no required
    fields is 100% complete.
    """
    required = _required_in_order(fields)
    if not required:
        return 100.0
    present = sum(1 for f in required if _is_present(extracted, f.id))
    return present / len(required) * 100


class CompletionState(BaseModel):
    """Snapshot of collection progress for one session."""

    model_config = ConfigDict(frozen=True)

    completed: int = Field(..., ge=0, description="Required fields with a value")
    total: int = Field(..., ge=0, description="Required fields in the schema")
    rate: float = Field(..., ge=0.0, le=100.0)
    next_field: FieldDefinition | None = Field(default=None)

    @property
    def is_complete(self) -> bool:
        return self.next_field is None


class CompletionTracker:
    """Fold an extracted-field map into a CompletionState."""

    def evaluate(
        self,
        extracted: ExtractedValues,
        fields: Sequence[BaseField],
    ) -> CompletionState:
        required = _required_in_order(fields)
        completed = sum(1 for f in required if _is_present(extracted, f.id))
        return CompletionState(
            completed=completed,
            total=len(required),
            rate=completion_rate(extracted, fields),
            next_field=next_required_field(extracted, fields),
        )

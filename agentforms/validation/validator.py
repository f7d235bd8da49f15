"""Field value validation.

Used both on extracted values during a turn and for live validation of a
value typed into a form. Every rule runs independently and all violations
are collected.
"""

import math
import re
from collections.abc import Callable
from datetime import date, datetime
from typing import cast

from pydantic import BaseModel, Field

from agentforms.observability.logging import get_logger
from agentforms.schema.models import (
    BaseField,
    DateField,
    EmailField,
    FileField,
    NumberField,
    SelectField,
    TextField,
)

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DATE_FORMATS = ("%m/%d/%Y", "%Y/%m/%d", "%B %d, %Y", "%b %d, %Y", "%d %B %Y")


class ValidationResult(BaseModel):
    """Outcome of validating one value against one field."""

    valid: bool = Field(..., description="True when no rule was violated")
    errors: list[str] = Field(default_factory=list)


def _format_bound(bound: float) -> str:
    return f"{bound:g}"


def parse_date(value: str) -> date | None:
    """Parse the date spellings a visitor is likely to type."""
    text = value.strip()
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


class FieldValidator:
    """Validate values against field definitions.

    Type rules are keyed by field variant and cover every variant in
    FieldDefinition.
    """

    def __init__(self) -> None:
        self._type_rules: dict[type[BaseField], Callable[[str, BaseField], list[str]]] = {
            TextField: self._validate_text,
            NumberField: self._validate_number,
            EmailField: self._validate_email,
            SelectField: self._validate_select,
            DateField: self._validate_date,
            FileField: self._validate_file,
        }

    def validate(self, value: str, field: BaseField) -> ValidationResult:
        """Validate a value for a field.

        Args:
            value: Raw value as typed or extracted
            field: Field definition to validate against

        Returns:
            ValidationResult with every violated rule's message
        """
        errors: list[str] = []

        if not value.strip():
            if field.required:
                errors.append(f"{field.label} is required")
            return ValidationResult(valid=not errors, errors=errors)

        rule = self._type_rules.get(type(field))
        if rule is not None:
            errors.extend(rule(value, field))

        if field.validation.pattern:
            errors.extend(self._validate_pattern(value, field.validation.pattern))

        if errors:
            logger.debug(
                "field_validation_failed",
                field_id=field.id,
                field_type=type(field).__name__,
                error_count=len(errors),
            )

        return ValidationResult(valid=not errors, errors=errors)

    def _validate_text(self, value: str, field: BaseField) -> list[str]:  # noqa: ARG002
        return []

    def _validate_file(self, value: str, field: BaseField) -> list[str]:  # noqa: ARG002
        return []

    def _validate_email(self, value: str, field: BaseField) -> list[str]:  # noqa: ARG002
        if not EMAIL_PATTERN.match(value.strip()):
            return ["Invalid email format"]
        return []

    def _validate_number(self, value: str, field: BaseField) -> list[str]:
        try:
            number = float(value.strip())
        except ValueError:
            return ["Must be a valid number"]
        if not math.isfinite(number):
            return ["Must be a valid number"]

        errors = []
        bounds = field.validation
        if bounds.min is not None and number < bounds.min:
            errors.append(f"Must be at least {_format_bound(bounds.min)}")
        if bounds.max is not None and number > bounds.max:
            errors.append(f"Must be at most {_format_bound(bounds.max)}")
        return errors

    def _validate_select(self, value: str, field: BaseField) -> list[str]:
        options = cast(SelectField, field).options
        if value not in options:
            return [f"Must be one of: {', '.join(options)}"]
        return []

    def _validate_date(self, value: str, field: BaseField) -> list[str]:  # noqa: ARG002
        if parse_date(value) is None:
            return ["Invalid date format"]
        return []

    def _validate_pattern(self, value: str, pattern: str) -> list[str]:
        try:
            matched = re.search(pattern, value)
        except re.error:
            logger.warning("invalid_validation_pattern", pattern=pattern)
            return ["Invalid validation pattern"]
        return [] if matched else ["Invalid format"]

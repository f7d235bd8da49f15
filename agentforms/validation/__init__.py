"""Field validation: type, shape and required-rule checks."""

from agentforms.validation.validator import (
    FieldValidator,
    ValidationResult,
    parse_date,
)

__all__ = ["FieldValidator", "ValidationResult", "parse_date"]

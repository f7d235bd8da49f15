"""Unit tests for FieldValidator."""

from datetime import date

import pytest

from agentforms.schema.models import FieldDefinition, FieldValidation, FileField, TextField
from agentforms.validation import FieldValidator, parse_date
from tests.factories import FieldFactory


@pytest.fixture
def validator() -> FieldValidator:
    return FieldValidator()


class TestRequired:
    """Tests for empty values."""

    def test_required_empty(self, validator: FieldValidator) -> None:
        """An empty value for a required field reports the label."""
        result = validator.validate("   ", FieldFactory.email(required=True))
        assert result.valid is False
        assert result.errors == ["Email is required"]

    def test_optional_empty(self, validator: FieldValidator) -> None:
        """An empty optional value is valid and skips the type rules."""
        result = validator.validate("", FieldFactory.number())
        assert result.valid is True
        assert result.errors == []


class TestTypeRules:
    """Tests for per-type rules."""

    @pytest.mark.parametrize("value", ["sam@x.com", "first.last@sub.example.org"])
    def test_valid_email(self, validator: FieldValidator, value: str) -> None:
        assert validator.validate(value, FieldFactory.email()).valid is True

    @pytest.mark.parametrize("value", ["sam", "sam@x", "sam @x.com", "@x.com"])
    def test_invalid_email(self, validator: FieldValidator, value: str) -> None:
        result = validator.validate(value, FieldFactory.email())
        assert result.errors == ["Invalid email format"]

    def test_number_below_minimum(self, validator: FieldValidator) -> None:
        """A number under min reports the minimum."""
        field = FieldFactory.number(validation={"min": 18, "max": 65})
        result = validator.validate("12", field)
        assert result.valid is False
        assert result.errors == ["Must be at least 18"]

    def test_number_above_maximum(self, validator: FieldValidator) -> None:
        field = FieldFactory.number(validation={"min": 18, "max": 65})
        assert validator.validate("70", field).errors == ["Must be at most 65"]

    def test_number_bounds_inclusive(self, validator: FieldValidator) -> None:
        field = FieldFactory.number(validation={"min": 18, "max": 65})
        assert validator.validate("18", field).valid is True
        assert validator.validate("65", field).valid is True

    @pytest.mark.parametrize("value", ["abc", "nan", "inf", "12 years"])
    def test_not_a_number(self, validator: FieldValidator, value: str) -> None:
        result = validator.validate(value, FieldFactory.number())
        assert result.errors == ["Must be a valid number"]

    def test_select_option(self, validator: FieldValidator) -> None:
        field = FieldFactory.select(options=("Basic", "Pro"))
        assert validator.validate("Pro", field).valid is True
        assert validator.validate("Enterprise", field).errors == [
            "Must be one of: Basic, Pro"
        ]

    @pytest.mark.parametrize(
        "value", ["2024-03-15", "03/15/2024", "March 15, 2024", "15 March 2024"]
    )
    def test_valid_date(self, validator: FieldValidator, value: str) -> None:
        assert validator.validate(value, FieldFactory.date()).valid is True

    def test_invalid_date(self, validator: FieldValidator) -> None:
        result = validator.validate("next tuesday", FieldFactory.date())
        assert result.errors == ["Invalid date format"]

    def test_text_and_file_accept_anything(self, validator: FieldValidator) -> None:
        assert validator.validate("anything", FieldFactory.text()).valid is True
        assert validator.validate("cv.pdf", FileField(id="cv", label="CV")).valid is True


class TestPattern:
    """Tests for the pattern rule."""

    def test_pattern_mismatch(self, validator: FieldValidator) -> None:
        field = TextField(id="zip", label="Zip", validation={"pattern": r"^\d{5}$"})
        assert validator.validate("1234", field).errors == ["Invalid format"]
        assert validator.validate("12345", field).valid is True

    def test_pattern_searches_anywhere(self, validator: FieldValidator) -> None:
        """An unanchored pattern only has to occur in the value."""
        field = TextField(id="ref", label="Reference", validation={"pattern": r"REF-\d+"})
        assert validator.validate("my ref is REF-42", field).valid is True

    def test_rules_accumulate(self, validator: FieldValidator) -> None:
        """Type and pattern violations are all reported."""
        field = FieldFactory.email(validation={"pattern": "@corp\\.com$"})
        result = validator.validate("nope", field)
        assert result.errors == ["Invalid email format", "Invalid format"]

    def test_uncompilable_pattern_reported(self, validator: FieldValidator) -> None:
        """A bad pattern that bypassed construction is an error, not a crash."""
        field = TextField(id="code", label="Code").model_copy(
            update={"validation": FieldValidation.model_construct(pattern="[bad")}
        )
        assert validator.validate("abc", field).errors == ["Invalid validation pattern"]


class TestParseDate:
    """Tests for parse_date."""

    def test_formats(self) -> None:
        assert parse_date("2024-03-15") == date(2024, 3, 15)
        assert parse_date("3/15/2024") == date(2024, 3, 15)
        assert parse_date("Mar 15, 2024") == date(2024, 3, 15)

    def test_unparseable(self) -> None:
        assert parse_date("soon") is None


class TestRevalidation:
    """A value that passes keeps passing; the validator holds no state."""

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            (FieldFactory.text(validation={"pattern": r"^[A-Z]"}), "Sam"),
            (FieldFactory.email(), "sam@x.com"),
            (FieldFactory.number(validation={"min": 18, "max": 65}), "18"),
            (FieldFactory.number(), "-2.5"),
            (FieldFactory.select(), "Pro"),
            (FieldFactory.date(), "Mar 15, 2024"),
            (FileField(id="cv", label="CV"), "cv.pdf"),
            (FieldFactory.email(required=False), ""),
        ],
    )
    def test_valid_value_stays_valid(
        self, validator: FieldValidator, field: FieldDefinition, value: str
    ) -> None:
        first = validator.validate(value, field)
        second = validator.validate(value, field)

        assert first.valid is True
        assert second == first
        assert validator.validate(value, field.model_copy()) == first

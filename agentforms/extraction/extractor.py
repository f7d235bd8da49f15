"""Pattern-based field extraction from visitor messages.

Each field type has one matcher with a fixed confidence score. Messages are
scanned oldest first and a field resolved by an earlier message is never
re-examined, so the earliest explicit answer wins over later noise.
"""

import re
from collections.abc import Callable, Sequence
from typing import NamedTuple, cast

from agentforms.conversation.models import ExtractedField, Message, MessageRole
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

EMAIL_CONFIDENCE = 95
SELECT_CONFIDENCE = 90
DATE_CONFIDENCE = 85
NUMBER_CONFIDENCE = 80
TEXT_CONFIDENCE = 70

# Free text shorter than this only matches when it shares a word with the label
TEXT_MIN_LENGTH = 6


class Match(NamedTuple):
    """A matcher hit: normalized value plus the text it came from."""

    value: str
    raw_value: str
    confidence: int


class FieldExtractor:
    """Extract candidate field values from visitor messages.

    Pure: the same messages and fields always produce the same map. A
    message that matches nothing simply leaves the field out of the result.
    """

    EMAIL_PATTERN = re.compile(r"[\w.-]+@[\w.-]+\.\w+")
    NUMBER_PATTERN = re.compile(r"\d+(\.\d+)?")
    DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}|\d{1,2}/\d{1,2}/\d{4}")
    WORD_PATTERN = re.compile(r"\w+")

    def __init__(self) -> None:
        self._matchers: dict[type[BaseField], Callable[[str, BaseField], Match | None]] = {
            EmailField: self._match_email,
            NumberField: self._match_number,
            SelectField: self._match_select,
            DateField: self._match_date,
            TextField: self._match_text,
            FileField: self._match_file,
        }

    def extract(
        self,
        messages: Sequence[Message],
        fields: Sequence[BaseField],
    ) -> dict[str, ExtractedField]:
        """Extract field values from a transcript.

        Args:
            messages: Transcript in chronological order; only visitor
                messages are read
            fields: Schema fields, in declared order

        Returns:
            Map of field_id to ExtractedField for every field that matched
        """
        extracted: dict[str, ExtractedField] = {}

        for message in messages:
            if message.role != MessageRole.VISITOR:
                continue

            for field in fields:
                if field.id in extracted:
                    continue

                match = self.match(message.content, field)
                if match is None:
                    continue

                extracted[field.id] = ExtractedField(
                    field_id=field.id,
                    value=match.value,
                    confidence=match.confidence,
                    source_message_id=message.id,
                    raw_value=match.raw_value,
                )

        logger.debug(
            "fields_extracted",
            message_count=len(messages),
            field_ids=list(extracted.keys()),
        )
        return extracted

    def match(self, content: str, field: BaseField) -> Match | None:
        """Run the matcher for the field's type against one message."""
        matcher = self._matchers.get(type(field))
        if matcher is None:
            logger.warning("no_matcher_for_field_type", field_type=type(field).__name__)
            return None
        return matcher(content, field)

    def _match_email(self, content: str, field: BaseField) -> Match | None:  # noqa: ARG002
        found = self.EMAIL_PATTERN.search(content)
        if not found:
            return None
        return Match(found.group(0), found.group(0), EMAIL_CONFIDENCE)

    def _match_number(self, content: str, field: BaseField) -> Match | None:  # noqa: ARG002
        found = self.NUMBER_PATTERN.search(content)
        if not found:
            return None
        return Match(found.group(0), found.group(0), NUMBER_CONFIDENCE)

    def _match_select(self, content: str, field: BaseField) -> Match | None:
        lowered = content.lower()
        for option in cast(SelectField, field).options:
            position = lowered.find(option.lower())
            if position >= 0:
                raw = content[position : position + len(option)]
                return Match(option, raw, SELECT_CONFIDENCE)
        return None

    def _match_date(self, content: str, field: BaseField) -> Match | None:  # noqa: ARG002
        found = self.DATE_PATTERN.search(content)
        if not found:
            return None
        return Match(found.group(0), found.group(0), DATE_CONFIDENCE)

    def _match_text(self, content: str, field: BaseField) -> Match | None:
        stripped = content.strip()
        if not stripped:
            return None
        if len(stripped) >= TEXT_MIN_LENGTH or self._shares_word(stripped, field.label):
            return Match(stripped, content, TEXT_CONFIDENCE)
        return None

    def _match_file(self, content: str, field: BaseField) -> Match | None:  # noqa: ARG002
        # Files arrive as uploads, never as chat text
        return None

    def _shares_word(self, content: str, label: str) -> bool:
        label_words = {w.lower() for w in self.WORD_PATTERN.findall(label)}
        content_words = {w.lower() for w in self.WORD_PATTERN.findall(content)}
        return bool(label_words & content_words)

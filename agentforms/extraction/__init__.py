"""Field extraction: typed pattern matchers producing scored candidate values."""

from agentforms.extraction.extractor import (
    DATE_CONFIDENCE,
    EMAIL_CONFIDENCE,
    NUMBER_CONFIDENCE,
    SELECT_CONFIDENCE,
    TEXT_CONFIDENCE,
    FieldExtractor,
    Match,
)

__all__ = [
    "FieldExtractor",
    "Match",
    "EMAIL_CONFIDENCE",
    "SELECT_CONFIDENCE",
    "DATE_CONFIDENCE",
    "NUMBER_CONFIDENCE",
    "TEXT_CONFIDENCE",
]

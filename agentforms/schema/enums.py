"""Enums for the schema domain."""

from enum import Enum


class FieldType(str, Enum):
    """Kind of datum a field collects; selects extractor and validator rules."""

    TEXT = "text"
    NUMBER = "number"
    EMAIL = "email"
    SELECT = "select"
    DATE = "date"
    FILE = "file"


class Tone(str, Enum):
    """Conversational register of the agent's persona."""

    FRIENDLY = "friendly"
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    FORMAL = "formal"

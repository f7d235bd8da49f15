"""Observability configuration."""

from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ObservabilityConfig(BaseModel):
    """Logging configuration."""

    log_level: LogLevel = Field(default="INFO")
    log_format: Literal["json", "console"] = Field(default="json")
    redact_pii: bool = Field(default=True)

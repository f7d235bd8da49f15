"""Health check response model."""

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response body for GET /health."""

    status: Literal["healthy", "degraded"]
    version: str
    storage_backend: str
    generation_provider: str
    active_turns: int = Field(ge=0, description="Turns currently holding a session lock")
    checked_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

"""Turn processing configuration."""

from pydantic import BaseModel, Field


class TurnConfig(BaseModel):
    """Limits applied to a single visitor turn."""

    max_message_length: int = Field(
        default=10000, gt=0, description="Max visitor message length"
    )
    mutex_blocking_timeout: float = Field(
        default=5.0,
        ge=0.0,
        description="Seconds a turn waits for an in-flight turn on the same session",
    )
    mutex_lock_timeout: int = Field(
        default=120, gt=0, description="Auto-release for distributed session locks"
    )
    history_limit: int = Field(
        default=50, gt=0, description="Transcript messages included in the prompt"
    )

"""Text-generation provider configuration."""

from typing import Literal

from pydantic import BaseModel, Field


class GenerationConfig(BaseModel):
    """Which provider phrases the agent's replies."""

    provider: Literal["template", "agno"] = Field(
        default="template",
        description="template: deterministic tone templates; agno: LLM via Agno",
    )
    model: str = Field(
        default="openai/gpt-4o-mini",
        description="Model string: {provider}/{model}",
    )
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)

"""Text generation interface and error types.

The engine decides what to ask and when; a provider only phrases the reply.
Providers receive a GenerationRequest holding the rendered prompt plus the
structured inputs it was rendered from, and stream text chunks back.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from pydantic import BaseModel, ConfigDict, Field

from agentforms.schema.models import FieldDefinition, Persona


class GenerationRequest(BaseModel):
    """Everything a provider needs to phrase one agent reply."""

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., description="Fully rendered prompt")
    persona: Persona = Field(..., description="Agent persona")
    next_field: FieldDefinition | None = Field(
        default=None, description="Field to ask for; None means wrap up"
    )
    session_id: str | None = Field(default=None, description="For logging")

    @property
    def is_complete(self) -> bool:
        return self.next_field is None


class TextGenerationProvider(ABC):
    """Abstract interface for reply generation."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    def generate(self, request: GenerationRequest) -> AsyncIterator[str]:
        """Stream reply text in chunks.

        Implementations are async generators. Raising ProviderError (or any
        exception) mid-stream fails the turn.
        """
        pass


# ============================================================================
# Error Types
# ============================================================================


class ProviderError(Exception):
    """Base exception for text generation provider errors."""

    pass


class RateLimitError(ProviderError):
    """Upstream rate limit exceeded."""

    pass

"""LLM-backed provider using Agno.

Model string format selects the Agno model class:
    openrouter/anthropic/claude-3-haiku -> OpenRouter(id="anthropic/claude-3-haiku")
    anthropic/claude-3-haiku -> Claude(id="claude-3-haiku")
    openai/gpt-4o-mini -> OpenAIChat(id="gpt-4o-mini")
    groq/llama-3.1-70b -> Groq(id="llama-3.1-70b")

Agno is imported lazily so the engine runs without the llm extra installed.
"""

from __future__ import annotations

import time
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any

from agentforms.observability.logging import get_logger
from agentforms.providers.llm.base import (
    GenerationRequest,
    ProviderError,
    RateLimitError,
    TextGenerationProvider,
)

if TYPE_CHECKING:
    from agno.agent import Agent

logger = get_logger(__name__)


class AgnoTextProvider(TextGenerationProvider):
    """Streams replies from a language model through an Agno agent.

    The rendered prompt is sent as the whole input; the engine owns the
    transcript, so Agno keeps no history of its own.
    """

    def __init__(self, model: str, temperature: float = 0.7) -> None:
        """Initialize the provider.

        Args:
            model: Model string, e.g. 'openai/gpt-4o-mini'
            temperature: Sampling temperature
        """
        self._model = model
        self._temperature = temperature
        self._agent: Agent | None = None

    @property
    def provider_name(self) -> str:
        return "agno"

    @property
    def model(self) -> str:
        return self._model

    async def generate(self, request: GenerationRequest) -> AsyncIterator[str]:
        agent = self._get_or_create_agent()
        start_time = time.perf_counter()
        chunk_count = 0

        try:
            async for chunk in agent.arun(request.prompt, stream=True):
                content = getattr(chunk, "content", None)
                if content:
                    chunk_count += 1
                    yield content
        except ProviderError:
            raise
        except Exception as e:
            error_msg = str(e).lower()
            if "rate" in error_msg and "limit" in error_msg:
                raise RateLimitError(f"Rate limited: {e}") from e
            raise ProviderError(f"Agno streaming failed: {e}") from e

        logger.debug(
            "provider_stream_complete",
            model=self._model,
            session_id=request.session_id,
            chunk_count=chunk_count,
            latency_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )

    def _get_or_create_agent(self) -> Agent:
        if self._agent is not None:
            return self._agent

        from agno.agent import Agent

        self._agent = Agent(
            model=self._create_agno_model(),
            num_history_messages=0,
            markdown=False,
        )
        return self._agent

    def _create_agno_model(self) -> Any:
        provider_type, api_model = self._parse_model(self._model)

        if provider_type == "openrouter":
            from agno.models.openrouter import OpenRouter

            return OpenRouter(id=api_model, temperature=self._temperature)

        elif provider_type == "anthropic":
            from agno.models.anthropic import Claude

            return Claude(id=api_model, temperature=self._temperature)

        elif provider_type == "openai":
            from agno.models.openai import OpenAIChat

            return OpenAIChat(id=api_model, temperature=self._temperature)

        elif provider_type == "groq":
            from agno.models.groq import Groq

            return Groq(id=api_model, temperature=self._temperature)

        else:
            from agno.models.openrouter import OpenRouter

            logger.warning(
                "unknown_provider_defaulting_to_openrouter",
                model=self._model,
                provider_type=provider_type,
            )
            return OpenRouter(id=self._model, temperature=self._temperature)

    def _parse_model(self, model: str) -> tuple[str, str]:
        """Parse model string into (provider_type, api_model).

        Examples:
            "openrouter/anthropic/claude-3-haiku" -> ("openrouter", "anthropic/claude-3-haiku")
            "openai/gpt-4o-mini" -> ("openai", "gpt-4o-mini")
            "gpt-4o-mini" -> ("openrouter", "gpt-4o-mini")
        """
        parts = model.split("/")

        if len(parts) >= 3 and parts[0] == "openrouter":
            return "openrouter", "/".join(parts[1:])
        elif len(parts) >= 2:
            return parts[0], "/".join(parts[1:])
        else:
            return "openrouter", model

"""Mock text generation provider for testing."""

import asyncio
from collections.abc import AsyncIterator

from agentforms.providers.llm.base import (
    GenerationRequest,
    ProviderError,
    TextGenerationProvider,
)


class MockTextProvider(TextGenerationProvider):
    """Mock provider for testing.

    Streams configurable chunks without calling a model, and can fail after
    a given number of chunks to exercise provider-fault handling.
    """

    def __init__(
        self,
        chunks: list[str] | None = None,
        fail_after: int | None = None,
        error: Exception | None = None,
        chunk_delay: float = 0.0,
    ) -> None:
        """Initialize mock provider.

        Args:
            chunks: Chunks to stream, in order
            fail_after: Raise after yielding this many chunks
            error: Exception to raise when failing
            chunk_delay: Seconds to pause after each chunk
        """
        self._chunks = chunks if chunks is not None else ["Mock ", "response"]
        self._fail_after = fail_after
        self._error = error or ProviderError("Mock provider failure")
        self._chunk_delay = chunk_delay
        self._call_history: list[GenerationRequest] = []

    @property
    def provider_name(self) -> str:
        return "mock"

    @property
    def call_history(self) -> list[GenerationRequest]:
        """Return history of calls for testing assertions."""
        return self._call_history

    def clear_history(self) -> None:
        self._call_history.clear()

    async def generate(self, request: GenerationRequest) -> AsyncIterator[str]:
        self._call_history.append(request)
        for i, chunk in enumerate(self._chunks):
            if self._fail_after is not None and i >= self._fail_after:
                raise self._error
            yield chunk
            await asyncio.sleep(self._chunk_delay)
        if self._fail_after is not None and self._fail_after >= len(self._chunks):
            raise self._error

"""Cooperative cancellation for streamed turns."""

import asyncio


class CancellationToken:
    """Signal a running turn to stop streaming.

    The orchestrator races the token against the provider's next chunk, so a
    stalled provider is interrupted too; once set it emits nothing further
    and persists what was streamed so far.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    async def wait(self) -> None:
        await self._event.wait()

"""Caller-facing handle on one streamed turn."""

from collections.abc import AsyncGenerator, Awaitable, Callable
from types import TracebackType

from agentforms.orchestration.cancellation import CancellationToken
from agentforms.orchestration.models import PartialReply


class TurnStream:
    """Async iterator of PartialReply values for one turn.

    The stream owns the session lock: it is released exactly once, when the
    stream ends, fails or is closed. Use as an async context manager, or
    iterate to exhaustion, so the lock is never left held.

    Example:
        async with await service.start_turn(session_id, "hi") as stream:
            async for reply in stream:
                print(reply.content_so_far)
    """

    def __init__(
        self,
        replies: AsyncGenerator[PartialReply, None],
        cancel_token: CancellationToken,
        on_close: Callable[[], Awaitable[None]],
    ) -> None:
        self._replies = replies
        self._cancel_token = cancel_token
        self._on_close = on_close
        self._closed = False
        self._last: PartialReply | None = None

    @property
    def cancel_token(self) -> CancellationToken:
        return self._cancel_token

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def last_reply(self) -> PartialReply | None:
        """Most recent emission, if any."""
        return self._last

    def cancel(self, reason: str = "cancelled") -> None:
        """Stop the turn; nothing further is emitted after the current chunk."""
        self._cancel_token.cancel(reason)

    def __aiter__(self) -> "TurnStream":
        return self

    async def __anext__(self) -> PartialReply:
        if self._closed:
            raise StopAsyncIteration
        try:
            reply = await self._replies.__anext__()
        except BaseException:
            await self.aclose()
            raise
        self._last = reply
        return reply

    async def aclose(self) -> None:
        """Tear the turn down, persisting partial content, and release the lock."""
        if self._closed:
            return
        self._closed = True
        try:
            await self._replies.aclose()
        finally:
            await self._on_close()

    async def collect(self) -> PartialReply | None:
        """Drain the stream and return the final emission."""
        async for _ in self:
            pass
        return self._last

    async def __aenter__(self) -> "TurnStream":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

"""Windowed rate limiting over an injected CounterStore."""

import math
import time
from collections.abc import Callable
from datetime import UTC, datetime

from agentforms.admission.counter_store import CounterStore
from agentforms.admission.models import RateLimitConfig, RateLimitResult
from agentforms.observability.logging import get_logger

logger = get_logger(__name__)


def _to_datetime(epoch: float) -> datetime:
    return datetime.fromtimestamp(epoch, tz=UTC)


class RateLimiter:
    """Fixed-window counter per key.

    A window opens on the first request for a key and lasts window_seconds.
    The store counts every request in it atomically, denied ones included;
    the counter resets once now >= reset_at. Counter store failures fail
    open: the request is allowed with a full budget.
    """

    def __init__(
        self,
        store: CounterStore,
        key_prefix: str = "agentforms_rate_limit",
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the rate limiter.

        Args:
            store: Counter storage
            key_prefix: Prefix for counter keys
            clock: Source of the current time in epoch seconds
        """
        self._store = store
        self._key_prefix = key_prefix
        self._clock = clock

    def _get_key(self, key: str) -> str:
        return f"{self._key_prefix}:{key}"

    def _allow_all(self, config: RateLimitConfig, now: float) -> RateLimitResult:
        return RateLimitResult(
            allowed=True,
            limit=config.max_requests,
            remaining=config.max_requests,
            reset_at=_to_datetime(now + config.window_seconds),
        )

    async def check(self, key: str, config: RateLimitConfig) -> RateLimitResult:
        """Count a request against the key's window.

        Args:
            key: Counter key, e.g. "{session_id}:messages"
            config: Budget for the window

        Returns:
            RateLimitResult; retry_after is set only when denied
        """
        now = self._clock()
        storage_key = self._get_key(key)

        try:
            state = await self._store.increment(storage_key, config.window_seconds)
        except Exception as e:
            logger.warning("rate_limit_store_failed", key=key, error=str(e))
            return self._allow_all(config, now)

        allowed = state.count <= config.max_requests
        remaining = max(0, config.max_requests - state.count)
        retry_after = None if allowed else max(1, math.ceil(state.reset_at - now))

        if not allowed:
            logger.info(
                "rate_limit_exceeded",
                key=key,
                limit=config.max_requests,
                retry_after=retry_after,
            )

        return RateLimitResult(
            allowed=allowed,
            limit=config.max_requests,
            remaining=remaining,
            reset_at=_to_datetime(state.reset_at),
            retry_after=retry_after,
        )

    async def peek(self, key: str, config: RateLimitConfig) -> RateLimitResult:
        """Report the key's window without counting a request."""
        now = self._clock()

        try:
            state = await self._store.get(self._get_key(key))
        except Exception as e:
            logger.warning("rate_limit_store_failed", key=key, error=str(e))
            return self._allow_all(config, now)

        if state is None or now >= state.reset_at:
            return self._allow_all(config, now)

        exhausted = state.count >= config.max_requests
        return RateLimitResult(
            allowed=not exhausted,
            limit=config.max_requests,
            remaining=max(0, config.max_requests - state.count),
            reset_at=_to_datetime(state.reset_at),
            retry_after=max(1, math.ceil(state.reset_at - now)) if exhausted else None,
        )

    async def reset(self, key: str) -> None:
        """Clear the key's window."""
        await self._store.delete(self._get_key(key))

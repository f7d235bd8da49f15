"""Storage for rate-limit counters.

A counter lives for exactly one window: the first hit opens it with a TTL of
window_seconds and later hits in the same window only increment it.
"""

import time
from abc import ABC, abstractmethod
from collections.abc import Callable

import redis.asyncio as redis

from agentforms.admission.models import RateLimitState


class CounterStore(ABC):
    """Abstract storage for windowed counters keyed by string."""

    @abstractmethod
    async def increment(self, key: str, window_seconds: float) -> RateLimitState:
        """Count one hit atomically, opening a new window if none is live.

        Returns:
            The counter after the hit
        """
        pass

    @abstractmethod
    async def get(self, key: str) -> RateLimitState | None:
        """Get the live counter for a key, or None if absent or expired."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the counter for a key."""
        pass


class InMemoryCounterStore(CounterStore):
    """Process-local counter store for tests and single-instance use.

    Expired windows are purged on every increment, so the map only holds
    keys with a live window.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._entries: dict[str, RateLimitState] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _purge(self, now: float) -> None:
        expired = [k for k, state in self._entries.items() if now >= state.reset_at]
        for key in expired:
            del self._entries[key]

    async def increment(self, key: str, window_seconds: float) -> RateLimitState:
        now = self._clock()
        self._purge(now)
        state = self._entries.get(key)
        if state is None:
            state = self._entries[key] = RateLimitState(reset_at=now + window_seconds)
        state.count += 1
        return state.model_copy()

    async def get(self, key: str) -> RateLimitState | None:
        state = self._entries.get(key)
        if state is None:
            return None
        if self._clock() >= state.reset_at:
            del self._entries[key]
            return None
        return state.model_copy()

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)


class RedisCounterStore(CounterStore):
    """Redis-backed counter store shared across instances.

    Each counter is a plain integer. INCR, PEXPIRE NX and PTTL run in one
    MULTI/EXEC pipeline, so concurrent instances never lose a hit and only
    the hit that opens a window sets its expiry.
    """

    def __init__(self, client: redis.Redis, clock: Callable[[], float] = time.time) -> None:
        self._client = client
        self._clock = clock

    def _state(self, count: int, ttl_ms: int, window_seconds: float) -> RateLimitState:
        remaining_ms = ttl_ms if ttl_ms > 0 else int(window_seconds * 1000)
        return RateLimitState(count=count, reset_at=self._clock() + remaining_ms / 1000)

    async def increment(self, key: str, window_seconds: float) -> RateLimitState:
        pipe = self._client.pipeline(transaction=True)
        pipe.incr(key)
        pipe.pexpire(key, max(1, int(window_seconds * 1000)), nx=True)
        pipe.pttl(key)
        count, _, ttl_ms = await pipe.execute()
        return self._state(int(count), int(ttl_ms), window_seconds)

    async def get(self, key: str) -> RateLimitState | None:
        pipe = self._client.pipeline(transaction=True)
        pipe.get(key)
        pipe.pttl(key)
        data, ttl_ms = await pipe.execute()
        if data is None or int(ttl_ms) == -2:
            return None
        return self._state(int(data), int(ttl_ms), 0)

    async def delete(self, key: str) -> None:
        await self._client.delete(key)

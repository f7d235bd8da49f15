"""Session mutex: at most one turn in flight per session.

A turn holds the lock from admission until its stream is torn down, across
many awaits, so the lock is acquired and released explicitly rather than
through a context manager.
"""

import asyncio
from abc import ABC, abstractmethod

from redis.asyncio import Redis
from redis.asyncio.lock import Lock
from redis.exceptions import LockError

from agentforms.observability.logging import get_logger

logger = get_logger(__name__)


class SessionMutex(ABC):
    """Abstract per-session lock."""

    @abstractmethod
    async def acquire(self, session_key: str, blocking_timeout: float | None = None) -> bool:
        """Acquire the lock for a session.

        Args:
            session_key: Session identifier
            blocking_timeout: Override default blocking timeout

        Returns:
            True if acquired, False if the wait timed out
        """
        pass

    @abstractmethod
    async def release(self, session_key: str) -> None:
        """Release a lock acquired by this instance. Releasing twice is a no-op."""
        pass

    @abstractmethod
    async def is_locked(self, session_key: str) -> bool:
        """Check if a session is currently locked."""
        pass


class InMemorySessionMutex(SessionMutex):
    """asyncio lock per session for single-process deployments.

    A session's lock exists only while some turn holds or waits for it.
    """

    def __init__(self, blocking_timeout: float = 5.0) -> None:
        self._blocking_timeout = blocking_timeout
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def _checkout(self, session_key: str) -> asyncio.Lock:
        lock = self._locks.get(session_key)
        if lock is None:
            lock = self._locks[session_key] = asyncio.Lock()
        self._users[session_key] = self._users.get(session_key, 0) + 1
        return lock

    def _checkin(self, session_key: str) -> None:
        self._users[session_key] -= 1
        if self._users[session_key] == 0:
            del self._users[session_key]
            del self._locks[session_key]

    async def acquire(self, session_key: str, blocking_timeout: float | None = None) -> bool:
        timeout = self._blocking_timeout if blocking_timeout is None else blocking_timeout
        lock = self._checkout(session_key)
        acquired = False
        try:
            if timeout <= 0:
                if not lock.locked():
                    await lock.acquire()
                    acquired = True
            else:
                try:
                    await asyncio.wait_for(lock.acquire(), timeout=timeout)
                    acquired = True
                except TimeoutError:
                    pass
        finally:
            if not acquired:
                self._checkin(session_key)
        return acquired

    async def release(self, session_key: str) -> None:
        lock = self._locks.get(session_key)
        if lock is not None and lock.locked():
            lock.release()
            self._checkin(session_key)

    async def is_locked(self, session_key: str) -> bool:
        lock = self._locks.get(session_key)
        return lock is not None and lock.locked()


class RedisSessionMutex(SessionMutex):
    """Redis-backed distributed lock for multi-instance deployments.

    Lock key format: {prefix}:sesslock:{session_key}. The lock auto-expires
    after lock_timeout seconds so a crashed instance cannot wedge a session.
    """

    def __init__(
        self,
        redis: Redis,
        key_prefix: str = "agentforms",
        lock_timeout: int = 120,
        blocking_timeout: float = 5.0,
    ) -> None:
        """Initialize session mutex.

        Args:
            redis: Redis client instance
            key_prefix: Prefix for lock keys
            lock_timeout: How long lock is held before auto-release (seconds)
            blocking_timeout: How long to wait when trying to acquire (seconds)
        """
        self._redis = redis
        self._prefix = key_prefix
        self._lock_timeout = lock_timeout
        self._blocking_timeout = blocking_timeout
        self._held: dict[str, Lock] = {}

    def _key(self, session_key: str) -> str:
        return f"{self._prefix}:sesslock:{session_key}"

    async def acquire(self, session_key: str, blocking_timeout: float | None = None) -> bool:
        timeout = self._blocking_timeout if blocking_timeout is None else blocking_timeout
        lock = self._redis.lock(self._key(session_key), timeout=self._lock_timeout)
        acquired = await lock.acquire(blocking=timeout > 0, blocking_timeout=timeout)
        if acquired:
            self._held[session_key] = lock
        return bool(acquired)

    async def release(self, session_key: str) -> None:
        lock = self._held.pop(session_key, None)
        if lock is None:
            return
        try:
            await lock.release()
        except LockError:
            logger.warning("session_lock_expired_before_release", session_key=session_key)

    async def is_locked(self, session_key: str) -> bool:
        return await self._redis.exists(self._key(session_key)) > 0

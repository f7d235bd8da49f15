"""Unit tests for session mutexes."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import LockError

from agentforms.orchestration import InMemorySessionMutex, RedisSessionMutex


class TestInMemorySessionMutex:
    """Tests for InMemorySessionMutex."""

    @pytest.mark.asyncio
    async def test_acquire_and_release(self) -> None:
        mutex = InMemorySessionMutex()
        assert await mutex.acquire("s1") is True
        assert await mutex.is_locked("s1") is True

        await mutex.release("s1")

        assert await mutex.is_locked("s1") is False

    @pytest.mark.asyncio
    async def test_second_acquire_times_out(self) -> None:
        """A held lock makes a second acquire fail after the timeout."""
        mutex = InMemorySessionMutex(blocking_timeout=0.05)
        await mutex.acquire("s1")
        assert await mutex.acquire("s1") is False

    @pytest.mark.asyncio
    async def test_non_blocking(self) -> None:
        mutex = InMemorySessionMutex()
        await mutex.acquire("s1")
        assert await mutex.acquire("s1", blocking_timeout=0) is False
        assert await mutex.acquire("s2", blocking_timeout=0) is True

    @pytest.mark.asyncio
    async def test_waiter_gets_lock_after_release(self) -> None:
        mutex = InMemorySessionMutex(blocking_timeout=1.0)
        await mutex.acquire("s1")

        waiter = asyncio.create_task(mutex.acquire("s1"))
        await asyncio.sleep(0)
        await mutex.release("s1")

        assert await waiter is True

    @pytest.mark.asyncio
    async def test_idle_sessions_leave_no_lock_behind(self) -> None:
        """Locks are dropped once nothing holds or waits on them."""
        mutex = InMemorySessionMutex(blocking_timeout=0.05)
        for i in range(20):
            await mutex.acquire(f"s{i}")
            await mutex.release(f"s{i}")

        await mutex.acquire("held")
        assert await mutex.acquire("held") is False
        assert list(mutex._locks) == ["held"]

        await mutex.release("held")
        assert mutex._locks == {}

    @pytest.mark.asyncio
    async def test_lock_kept_while_waiter_pending(self) -> None:
        mutex = InMemorySessionMutex(blocking_timeout=1.0)
        await mutex.acquire("s1")
        waiter = asyncio.create_task(mutex.acquire("s1"))
        await asyncio.sleep(0)

        await mutex.release("s1")
        assert await waiter is True
        assert await mutex.is_locked("s1") is True

        await mutex.release("s1")
        assert mutex._locks == {}

    @pytest.mark.asyncio
    async def test_release_twice_is_noop(self) -> None:
        mutex = InMemorySessionMutex()
        await mutex.acquire("s1")
        await mutex.release("s1")
        await mutex.release("s1")
        await mutex.release("never-locked")


class TestRedisSessionMutex:
    """Tests for RedisSessionMutex against a mocked client."""

    @pytest.fixture
    def lock(self) -> AsyncMock:
        lock = AsyncMock()
        lock.acquire.return_value = True
        return lock

    @pytest.fixture
    def client(self, lock: AsyncMock) -> MagicMock:
        client = MagicMock()
        client.lock.return_value = lock
        client.exists = AsyncMock(return_value=1)
        return client

    @pytest.mark.asyncio
    async def test_acquire_uses_prefixed_lock(
        self, client: MagicMock, lock: AsyncMock
    ) -> None:
        mutex = RedisSessionMutex(client, key_prefix="test", lock_timeout=30, blocking_timeout=2.0)

        assert await mutex.acquire("s1") is True

        client.lock.assert_called_once_with("test:sesslock:s1", timeout=30)
        lock.acquire.assert_awaited_once_with(blocking=True, blocking_timeout=2.0)

    @pytest.mark.asyncio
    async def test_release_releases_held_lock(
        self, client: MagicMock, lock: AsyncMock
    ) -> None:
        mutex = RedisSessionMutex(client)
        await mutex.acquire("s1")

        await mutex.release("s1")
        await mutex.release("s1")

        lock.release.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_acquire_holds_nothing(
        self, client: MagicMock, lock: AsyncMock
    ) -> None:
        lock.acquire.return_value = False
        mutex = RedisSessionMutex(client)

        assert await mutex.acquire("s1") is False
        await mutex.release("s1")

        lock.release.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_expired_lock_release_is_logged(
        self, client: MagicMock, lock: AsyncMock
    ) -> None:
        """Releasing a lock that already expired does not raise."""
        lock.release.side_effect = LockError("Cannot release an unlocked lock")
        mutex = RedisSessionMutex(client)
        await mutex.acquire("s1")

        await mutex.release("s1")

    @pytest.mark.asyncio
    async def test_is_locked(self, client: MagicMock) -> None:
        mutex = RedisSessionMutex(client, key_prefix="test")
        assert await mutex.is_locked("s1") is True
        client.exists.assert_awaited_once_with("test:sesslock:s1")

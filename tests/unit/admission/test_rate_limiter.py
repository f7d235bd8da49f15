"""Unit tests for the windowed rate limiter."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from agentforms.admission import (
    InMemoryCounterStore,
    RateLimitConfig,
    RateLimiter,
    RateLimitState,
)


class FakeClock:
    """Settable epoch clock."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock: FakeClock) -> RateLimiter:
    return RateLimiter(InMemoryCounterStore(clock=clock), clock=clock)


@pytest.fixture
def config() -> RateLimitConfig:
    return RateLimitConfig(max_requests=2, window_seconds=60)


class TestRateLimiter:
    """Tests for RateLimiter.check."""

    @pytest.mark.asyncio
    async def test_allows_until_budget_exhausted(
        self, limiter: RateLimiter, config: RateLimitConfig
    ) -> None:
        """Two requests pass with decreasing remaining; the third is denied."""
        first = await limiter.check("visitor", config)
        second = await limiter.check("visitor", config)
        third = await limiter.check("visitor", config)

        assert first.allowed is True
        assert first.remaining == 1
        assert second.allowed is True
        assert second.remaining == 0
        assert third.allowed is False
        assert third.remaining == 0
        assert third.retry_after is not None
        assert third.retry_after > 0

    @pytest.mark.asyncio
    async def test_retry_after_counts_down(
        self, limiter: RateLimiter, config: RateLimitConfig, clock: FakeClock
    ) -> None:
        """retry_after reflects the time left in the window."""
        await limiter.check("visitor", config)
        await limiter.check("visitor", config)
        clock.advance(45)

        result = await limiter.check("visitor", config)

        assert result.retry_after == 15
        assert result.limit == 2

    @pytest.mark.asyncio
    async def test_window_resets(
        self, limiter: RateLimiter, config: RateLimitConfig, clock: FakeClock
    ) -> None:
        """A new window opens once reset_at has passed."""
        for _ in range(3):
            await limiter.check("visitor", config)
        clock.advance(60)

        result = await limiter.check("visitor", config)

        assert result.allowed is True
        assert result.remaining == 1
        assert result.retry_after is None

    @pytest.mark.asyncio
    async def test_keys_are_independent(
        self, limiter: RateLimiter, config: RateLimitConfig
    ) -> None:
        for _ in range(3):
            await limiter.check("a", config)
        assert (await limiter.check("b", config)).allowed is True

    @pytest.mark.asyncio
    async def test_denied_requests_do_not_extend_window(
        self, limiter: RateLimiter, config: RateLimitConfig, clock: FakeClock
    ) -> None:
        """Denials leave reset_at where the first request put it."""
        first = await limiter.check("visitor", config)
        await limiter.check("visitor", config)
        clock.advance(30)
        denied = await limiter.check("visitor", config)

        assert denied.reset_at == first.reset_at

    @pytest.mark.asyncio
    async def test_store_failure_fails_open(self, config: RateLimitConfig) -> None:
        """Counter store errors allow the request with a full budget."""
        store = AsyncMock()
        store.increment.side_effect = ConnectionError("redis down")
        limiter = RateLimiter(store)

        result = await limiter.check("visitor", config)

        assert result.allowed is True
        assert result.remaining == 2

    @pytest.mark.asyncio
    async def test_counter_key_is_prefixed(self, config: RateLimitConfig) -> None:
        store = AsyncMock()
        store.increment.return_value = RateLimitState(count=1, reset_at=1_700_000_060.0)
        limiter = RateLimiter(store, key_prefix="rl")

        await limiter.check("abc:messages", config)

        store.increment.assert_awaited_once_with("rl:abc:messages", 60)

    @pytest.mark.asyncio
    async def test_concurrent_checks_respect_budget(
        self, limiter: RateLimiter, config: RateLimitConfig
    ) -> None:
        """Overlapping checks on one key never admit more than max_requests."""
        results = await asyncio.gather(*(limiter.check("visitor", config) for _ in range(6)))

        assert sum(r.allowed for r in results) == 2


class TestPeekAndReset:
    """Tests for RateLimiter.peek and reset."""

    @pytest.mark.asyncio
    async def test_peek_does_not_count(
        self, limiter: RateLimiter, config: RateLimitConfig
    ) -> None:
        await limiter.check("visitor", config)
        for _ in range(3):
            peeked = await limiter.peek("visitor", config)
        assert peeked.remaining == 1
        assert (await limiter.check("visitor", config)).allowed is True

    @pytest.mark.asyncio
    async def test_peek_reports_exhausted(
        self, limiter: RateLimiter, config: RateLimitConfig
    ) -> None:
        await limiter.check("visitor", config)
        await limiter.check("visitor", config)

        peeked = await limiter.peek("visitor", config)

        assert peeked.allowed is False
        assert peeked.retry_after == 60

    @pytest.mark.asyncio
    async def test_peek_unknown_key(
        self, limiter: RateLimiter, config: RateLimitConfig
    ) -> None:
        peeked = await limiter.peek("nobody", config)
        assert peeked.allowed is True
        assert peeked.remaining == 2

    @pytest.mark.asyncio
    async def test_reset(self, limiter: RateLimiter, config: RateLimitConfig) -> None:
        for _ in range(3):
            await limiter.check("visitor", config)
        await limiter.reset("visitor")
        assert (await limiter.check("visitor", config)).allowed is True

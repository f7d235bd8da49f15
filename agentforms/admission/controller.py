"""Admission controller: pre-turn gating by rate limit and abuse heuristic."""

from collections.abc import Sequence

from agentforms.admission.abuse import AbuseDetector
from agentforms.admission.models import AbuseCheckResult, RateLimitConfig, RateLimitResult
from agentforms.admission.rate_limit import RateLimiter
from agentforms.config.models import AdmissionConfig
from agentforms.conversation.models import Message
from agentforms.exceptions import RateLimitExceededError, UnknownAdmissionCategoryError
from agentforms.observability.logging import get_logger

logger = get_logger(__name__)


class AdmissionController:
    """Gate turns and sessions before they reach the orchestrator.

    Categories (messages, sessions, requests, ...) and their budgets come
    from AdmissionConfig.limits; the key is usually a session or visitor id.
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        abuse_detector: AbuseDetector | None = None,
        config: AdmissionConfig | None = None,
    ) -> None:
        self._config = config or AdmissionConfig()
        self._rate_limiter = rate_limiter
        self._abuse_detector = abuse_detector or AbuseDetector(self._config.abuse)

    @property
    def abuse_action(self) -> str:
        return self._config.abuse_action

    def limit_for(self, category: str) -> RateLimitConfig:
        """Resolve a category's budget.

        Raises:
            UnknownAdmissionCategoryError: If the category is not configured
        """
        limit = self._config.limits.get(category)
        if limit is None:
            raise UnknownAdmissionCategoryError(f"Unknown admission category: {category}")
        return RateLimitConfig(
            max_requests=limit.max_requests,
            window_seconds=limit.window_seconds,
        )

    async def check_admission(self, key: str, category: str) -> RateLimitResult:
        """Count one request for (key, category) and report the window."""
        return await self._rate_limiter.check(
            f"{key}:{category}", self.limit_for(category)
        )

    async def enforce(self, key: str, category: str) -> RateLimitResult:
        """Count one request and raise if the window is exhausted.

        Raises:
            RateLimitExceededError: When the request is denied
        """
        result = await self.check_admission(key, category)
        if not result.allowed:
            raise RateLimitExceededError(
                f"Rate limit exceeded for {category}. "
                f"Try again in {result.retry_after} seconds",
                result,
            )
        return result

    async def peek(self, key: str, category: str) -> RateLimitResult:
        """Report (key, category) status without counting a request."""
        return await self._rate_limiter.peek(
            f"{key}:{category}", self.limit_for(category)
        )

    async def reset(self, key: str, category: str) -> None:
        self.limit_for(category)
        await self._rate_limiter.reset(f"{key}:{category}")

    def check_abuse(self, messages: Sequence[Message]) -> AbuseCheckResult:
        result = self._abuse_detector.detect(messages)
        if result.is_abuse:
            logger.warning(
                "abuse_detected",
                reason=result.reason,
                message_count=result.message_count,
            )
        return result

"""Admission control: rate limiting and abuse detection."""

from agentforms.admission.abuse import AbuseDetector, normalize_content
from agentforms.admission.controller import AdmissionController
from agentforms.admission.counter_store import (
    CounterStore,
    InMemoryCounterStore,
    RedisCounterStore,
)
from agentforms.admission.models import (
    AbuseCheckResult,
    RateLimitConfig,
    RateLimitResult,
    RateLimitState,
)
from agentforms.admission.rate_limit import RateLimiter

__all__ = [
    "AbuseCheckResult",
    "AbuseDetector",
    "AdmissionController",
    "CounterStore",
    "InMemoryCounterStore",
    "RateLimitConfig",
    "RateLimitResult",
    "RateLimitState",
    "RateLimiter",
    "RedisCounterStore",
    "normalize_content",
]

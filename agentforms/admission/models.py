"""Admission control models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RateLimitConfig(BaseModel):
    """Budget for one (key, category) window."""

    model_config = ConfigDict(frozen=True)

    max_requests: int = Field(..., gt=0)
    window_seconds: float = Field(..., gt=0)


class RateLimitState(BaseModel):
    """Stored counter for one window."""

    count: int = Field(default=0, ge=0)
    reset_at: float = Field(..., description="Epoch seconds when the window resets")


class RateLimitResult(BaseModel):
    """Result of a rate limit check.

    Returned by the rate limiter to indicate whether a request is allowed
    and to populate rate limit response headers.
    """

    allowed: bool
    """Whether the request is within rate limits."""

    limit: int
    """Maximum requests allowed in the window."""

    remaining: int
    """Remaining requests in the current window."""

    reset_at: datetime
    """When the rate limit window resets."""

    retry_after: int | None = None
    """Seconds until the next request is allowed; set only when denied."""


class AbuseCheckResult(BaseModel):
    """Outcome of the abuse heuristic. Advisory only."""

    is_abuse: bool = False
    reason: str | None = None
    message_count: int = Field(default=0, ge=0, description="Messages in the window")

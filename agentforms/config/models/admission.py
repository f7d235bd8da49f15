"""Admission control configuration models."""

from typing import Literal

from pydantic import BaseModel, Field


class WindowLimitConfig(BaseModel):
    """Request budget for one admission category."""

    max_requests: int = Field(..., gt=0, description="Requests allowed per window")
    window_seconds: int = Field(..., gt=0, description="Window length in seconds")


def _default_limits() -> dict[str, WindowLimitConfig]:
    return {
        "messages": WindowLimitConfig(max_requests=30, window_seconds=60),
        "sessions": WindowLimitConfig(max_requests=5, window_seconds=3600),
        "requests": WindowLimitConfig(max_requests=100, window_seconds=60),
    }


class AbuseConfig(BaseModel):
    """Thresholds for the abuse heuristic."""

    threshold: int = Field(
        default=10, gt=0, description="Max visitor messages per window"
    )
    window_seconds: int = Field(default=60, gt=0, description="Look-back window")
    duplicate_limit: int = Field(
        default=5, gt=0, description="Max near-duplicate messages per window"
    )
    short_message_limit: int = Field(
        default=5, gt=0, description="Max very short messages per window"
    )
    short_message_length: int = Field(
        default=3, gt=0, description="Messages shorter than this count as short"
    )


class AdmissionConfig(BaseModel):
    """Rate limiting and abuse detection configuration."""

    key_prefix: str = Field(
        default="agentforms_rate_limit", description="Counter key prefix"
    )
    limits: dict[str, WindowLimitConfig] = Field(
        default_factory=_default_limits,
        description="Budget per admission category",
    )
    abuse: AbuseConfig = Field(default_factory=AbuseConfig)
    abuse_action: Literal["reject", "warn"] = Field(
        default="reject",
        description="reject: refuse the turn; warn: flag the session and continue",
    )

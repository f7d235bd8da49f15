"""Storage backend configuration."""

from typing import Literal

from pydantic import BaseModel, Field

BackendType = Literal["inmemory", "redis"]


class StorageConfig(BaseModel):
    """Backend for sessions, agents, rate-limit counters and session locks."""

    backend: BackendType = Field(default="inmemory", description="Backend type")
    redis_url: str = Field(
        default="redis://localhost:6379", description="Redis connection URL"
    )
    key_prefix: str = Field(default="agentforms", description="Redis key prefix")
    session_ttl_seconds: int = Field(
        default=604800,  # 7 days
        gt=0,
        description="Expiry for session, message and field keys",
    )

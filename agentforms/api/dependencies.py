"""Dependency injection for API routes.

The service is built once from settings and reused. Override get_service in
tests via app.dependency_overrides.
"""

from typing import Annotated

import redis.asyncio as redis
from fastapi import Depends

from agentforms.bootstrap import build_service
from agentforms.config import get_settings
from agentforms.config.settings import Settings
from agentforms.observability.logging import get_logger
from agentforms.service import FormSessionService

logger = get_logger(__name__)

_redis_client: redis.Redis | None = None
_service: FormSessionService | None = None


def get_redis_client(settings: Settings) -> redis.Redis:
    """Get the shared Redis client, creating it on first access."""
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(settings.storage.redis_url)
        # Log without credentials
        logger.info(
            "redis_client_connected",
            url=settings.storage.redis_url.split("@")[-1],
        )
    return _redis_client


async def get_service(
    settings: Annotated[Settings, Depends(get_settings)],
) -> FormSessionService:
    """Get the FormSessionService instance.

    Args:
        settings: Application settings

    Returns:
        Service wired for the configured storage backend
    """
    global _service
    if _service is None:
        client = (
            get_redis_client(settings)
            if settings.storage.backend == "redis"
            else None
        )
        _service = build_service(settings, redis_client=client)
        logger.info("service_initialized", backend=settings.storage.backend)
    return _service


SettingsDep = Annotated[Settings, Depends(get_settings)]
ServiceDep = Annotated[FormSessionService, Depends(get_service)]


async def reset_dependencies() -> None:
    """Reset all cached dependencies.

    Used for testing to ensure fresh instances. Closes connections before
    resetting.
    """
    global _redis_client, _service

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None

    _service = None

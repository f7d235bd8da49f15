"""Configuration loading for agentforms.

Configuration is loaded from TOML files with environment variable overrides.

Usage:
    from agentforms.config import get_settings

    settings = get_settings()
    limit = settings.admission.limits["messages"].max_requests
"""

from functools import lru_cache

from agentforms.config.loader import load_config
from agentforms.config.settings import Settings, set_toml_config
from agentforms.observability.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the singleton settings instance.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. config/default.toml (base configuration)
    3. config/{AGENTFORMS_ENV}.toml (environment overrides)
    4. AGENTFORMS_* environment variables (runtime overrides)

    A missing config directory falls back to model defaults.
    Call `get_settings.cache_clear()` to reload configuration.
    """
    try:
        set_toml_config(load_config())
    except FileNotFoundError:
        logger.warning("config_file_not_found", msg="Using default configuration")
        set_toml_config({})

    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]

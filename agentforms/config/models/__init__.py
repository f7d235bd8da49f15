"""Configuration section models."""

from agentforms.config.models.admission import (
    AbuseConfig,
    AdmissionConfig,
    WindowLimitConfig,
)
from agentforms.config.models.api import APIConfig
from agentforms.config.models.generation import GenerationConfig
from agentforms.config.models.observability import ObservabilityConfig
from agentforms.config.models.storage import StorageConfig
from agentforms.config.models.turn import TurnConfig

__all__ = [
    "APIConfig",
    "AbuseConfig",
    "AdmissionConfig",
    "GenerationConfig",
    "ObservabilityConfig",
    "StorageConfig",
    "TurnConfig",
    "WindowLimitConfig",
]

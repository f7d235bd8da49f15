"""Test factories for creating test data."""

from tests.factories.api import agent_payload, parse_sse
from tests.factories.forms import AgentFactory, FieldFactory, MessageFactory

__all__ = [
    "AgentFactory",
    "FieldFactory",
    "MessageFactory",
    "agent_payload",
    "parse_sse",
]

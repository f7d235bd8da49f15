"""Turn orchestration: extraction, completion, prompt assembly and streaming."""

from agentforms.orchestration.cancellation import CancellationToken
from agentforms.orchestration.models import ConversationContext, PartialReply
from agentforms.orchestration.mutex import (
    InMemorySessionMutex,
    RedisSessionMutex,
    SessionMutex,
)
from agentforms.orchestration.orchestrator import TurnOrchestrator
from agentforms.orchestration.prompt_builder import PromptBuilder
from agentforms.orchestration.stream import TurnStream

__all__ = [
    "CancellationToken",
    "ConversationContext",
    "InMemorySessionMutex",
    "PartialReply",
    "PromptBuilder",
    "RedisSessionMutex",
    "SessionMutex",
    "TurnOrchestrator",
    "TurnStream",
]

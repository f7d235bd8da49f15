"""Completion tracking: next required field and completion rate."""

from agentforms.completion.tracker import (
    CompletionState,
    CompletionTracker,
    completion_rate,
    next_required_field,
)

__all__ = [
    "CompletionState",
    "CompletionTracker",
    "completion_rate",
    "next_required_field",
]

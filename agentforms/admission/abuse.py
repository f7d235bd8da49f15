"""Abuse heuristic over a visitor's recent messages."""

from collections import Counter
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

from agentforms.admission.models import AbuseCheckResult
from agentforms.config.models import AbuseConfig
from agentforms.conversation.models import Message, MessageRole

TOO_MANY_MESSAGES = "Too many messages in a short time"
REPETITIVE_MESSAGES = "Repetitive message pattern detected"
TOO_MANY_SHORT_MESSAGES = "Too many very short messages"


def normalize_content(content: str) -> str:
    """Lowercase and collapse whitespace so near-duplicates compare equal."""
    return " ".join(content.lower().split())


class AbuseDetector:
    """Flag windows of visitor messages that look like spam or flooding.

    Read-only: the result is advisory and never changes session state.
    """

    def __init__(self, config: AbuseConfig | None = None) -> None:
        self._config = config or AbuseConfig()

    def detect(
        self,
        messages: Sequence[Message],
        now: datetime | None = None,
    ) -> AbuseCheckResult:
        """Check the visitor messages inside the look-back window.

        Args:
            messages: Session transcript; non-visitor messages are ignored
            now: Evaluation time, defaults to the current UTC time

        Returns:
            AbuseCheckResult with the first rule that fired
        """
        now = now or datetime.now(UTC)
        cutoff = now - timedelta(seconds=self._config.window_seconds)
        recent = [
            m
            for m in messages
            if m.role == MessageRole.VISITOR and cutoff < m.created_at <= now
        ]
        count = len(recent)

        if count > self._config.threshold:
            return AbuseCheckResult(is_abuse=True, reason=TOO_MANY_MESSAGES, message_count=count)

        if recent:
            contents = Counter(normalize_content(m.content) for m in recent)
            _, most_common = contents.most_common(1)[0]
            if most_common > self._config.duplicate_limit:
                return AbuseCheckResult(
                    is_abuse=True, reason=REPETITIVE_MESSAGES, message_count=count
                )

        short = sum(
            1
            for m in recent
            if len(m.content.strip()) < self._config.short_message_length
        )
        if short > self._config.short_message_limit:
            return AbuseCheckResult(
                is_abuse=True, reason=TOO_MANY_SHORT_MESSAGES, message_count=count
            )

        return AbuseCheckResult(is_abuse=False, message_count=count)

"""Unit tests for the Session lifecycle."""

from uuid import uuid4

import pytest

from agentforms.conversation.models import Session, SessionStatus
from agentforms.exceptions import SessionClosedError


@pytest.fixture
def session() -> Session:
    return Session(agent_id=uuid4())


class TestSessionLifecycle:
    """Tests for Session status transitions."""

    def test_starts_active(self, session: Session) -> None:
        """New sessions are active with no end time."""
        assert session.status == SessionStatus.ACTIVE
        assert session.is_terminal is False
        assert session.ended_at is None

    @pytest.mark.parametrize(
        ("method", "status"),
        [
            ("complete", SessionStatus.COMPLETED),
            ("abandon", SessionStatus.ABANDONED),
            ("fail", SessionStatus.ERROR),
        ],
    )
    def test_terminal_transitions(
        self, session: Session, method: str, status: SessionStatus
    ) -> None:
        """Each transition sets the terminal status and ended_at."""
        getattr(session, method)()
        assert session.status == status
        assert session.is_terminal is True
        assert session.ended_at is not None

    def test_terminal_is_final(self, session: Session) -> None:
        """A terminal session never changes status again."""
        session.complete()
        with pytest.raises(SessionClosedError):
            session.abandon()
        assert session.status == SessionStatus.COMPLETED

    def test_ensure_active_raises_when_terminal(self, session: Session) -> None:
        """ensure_active rejects terminal sessions."""
        session.ensure_active()
        session.fail()
        with pytest.raises(SessionClosedError, match="error"):
            session.ensure_active()

    def test_transition_to_active_rejected(self, session: Session) -> None:
        """ACTIVE is not a valid transition target."""
        with pytest.raises(ValueError):
            session.transition(SessionStatus.ACTIVE)

    def test_flag(self, session: Session) -> None:
        """Flagging records the reason without changing status."""
        session.flag("Too many very short messages")
        assert session.flagged is True
        assert session.flag_reason == "Too many very short messages"
        assert session.status == SessionStatus.ACTIVE

    def test_completion_rate_bounded(self, session: Session) -> None:
        """completion_rate stays within 0..100."""
        with pytest.raises(ValueError):
            session.completion_rate = 120.0

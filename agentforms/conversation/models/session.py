"""Session model and its lifecycle state machine."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from agentforms.conversation.models.enums import SessionStatus
from agentforms.exceptions import SessionClosedError

TERMINAL_STATUSES: frozenset[SessionStatus] = frozenset({
    SessionStatus.COMPLETED,
    SessionStatus.ABANDONED,
    SessionStatus.ERROR,
})


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class Session(BaseModel):
    """Runtime state of one visitor's data-collection conversation.

    Status moves from ACTIVE to exactly one terminal state and never
    leaves it.
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    session_id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    agent_id: UUID = Field(..., description="Agent collecting the data")
    visitor_id: str | None = Field(default=None, description="Visitor identifier")
    status: SessionStatus = Field(default=SessionStatus.ACTIVE)
    completion_rate: float = Field(default=0.0, ge=0.0, le=100.0)
    required_fields_count: int = Field(default=0, ge=0)
    completed_fields_count: int = Field(default=0, ge=0)
    turn_count: int = Field(default=0, ge=0)
    flagged: bool = Field(default=False)
    flag_reason: str | None = Field(default=None)
    started_at: datetime = Field(default_factory=utc_now)
    ended_at: datetime | None = Field(default=None)
    last_activity_at: datetime = Field(default_factory=utc_now)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def ensure_active(self) -> None:
        """Raise SessionClosedError unless the session accepts turns."""
        if self.is_terminal:
            raise SessionClosedError(
                f"Session {self.session_id} is {self.status.value}"
            )

    def transition(self, status: SessionStatus) -> None:
        """Move to a terminal status.

        Raises:
            SessionClosedError: If the session is already terminal
            ValueError: If the target status is not terminal
        """
        self.ensure_active()
        if status not in TERMINAL_STATUSES:
            raise ValueError(f"Cannot transition session to {status.value}")
        self.status = status
        self.ended_at = utc_now()

    def complete(self) -> None:
        self.transition(SessionStatus.COMPLETED)

    def abandon(self) -> None:
        self.transition(SessionStatus.ABANDONED)

    def fail(self) -> None:
        self.transition(SessionStatus.ERROR)

    def flag(self, reason: str) -> None:
        self.flagged = True
        self.flag_reason = reason

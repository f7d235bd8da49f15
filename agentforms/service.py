"""FormSessionService: the caller-facing API of the engine.

Wires the stores, admission controller, session mutex and turn orchestrator
together. Every check that can reject a turn runs before any message is
appended; session state is only read for the turn and written while the
session lock is held.
"""

from datetime import UTC, datetime, timedelta
from uuid import UUID

from agentforms.admission import AbuseCheckResult, AdmissionController, RateLimitResult
from agentforms.completion import CompletionTracker
from agentforms.conversation.export import (
    ExportFormat,
    SessionExport,
    export_csv,
    export_json,
)
from agentforms.conversation.models import (
    ExtractedField,
    Message,
    MessageRole,
    Session,
)
from agentforms.conversation.store import SessionStore
from agentforms.exceptions import (
    AbuseDetectedError,
    AgentNotFoundError,
    FieldNotFoundError,
    InvalidRequestError,
    SessionNotFoundError,
    TurnInProgressError,
)
from agentforms.observability.logging import get_logger
from agentforms.orchestration import (
    CancellationToken,
    ConversationContext,
    SessionMutex,
    TurnOrchestrator,
    TurnStream,
)
from agentforms.schema.models import FormAgent
from agentforms.schema.store import AgentStore
from agentforms.validation import FieldValidator, ValidationResult

logger = get_logger(__name__)


class FormSessionService:
    """Start sessions, run turns and answer validation and admission queries."""

    def __init__(
        self,
        agent_store: AgentStore,
        session_store: SessionStore,
        orchestrator: TurnOrchestrator,
        admission: AdmissionController,
        mutex: SessionMutex,
        validator: FieldValidator | None = None,
        tracker: CompletionTracker | None = None,
        abuse_window_seconds: int = 60,
    ) -> None:
        self._agent_store = agent_store
        self._session_store = session_store
        self._orchestrator = orchestrator
        self._admission = admission
        self._mutex = mutex
        self._validator = validator or FieldValidator()
        self._tracker = tracker or CompletionTracker()
        self._abuse_window = timedelta(seconds=abuse_window_seconds)
        self._active_turns: dict[UUID, TurnStream] = {}

    @property
    def provider_name(self) -> str:
        return self._orchestrator.provider_name

    @property
    def active_turn_count(self) -> int:
        return len(self._active_turns)

    # ------------------------------------------------------------------
    # Agents
    # ------------------------------------------------------------------

    async def register_agent(self, agent: FormAgent) -> FormAgent:
        await self._agent_store.save(agent)
        logger.info(
            "agent_registered",
            agent_id=str(agent.id),
            field_count=len(agent.field_schema.fields),
        )
        return agent

    async def get_agent(self, agent_id: UUID) -> FormAgent:
        agent = await self._agent_store.get(agent_id)
        if agent is None:
            raise AgentNotFoundError(f"Agent {agent_id} not found")
        return agent

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def start_session(
        self,
        agent_id: UUID,
        visitor_id: str | None = None,
    ) -> Session:
        """Open a session for an agent.

        Counts against the "sessions" admission category, keyed by visitor
        (or by agent for anonymous visitors). Posts the agent's welcome
        message when it has one.

        Raises:
            AgentNotFoundError: If the agent doesn't exist
            RateLimitExceededError: If too many sessions were started
        """
        agent = await self.get_agent(agent_id)
        await self._admission.enforce(visitor_id or str(agent_id), "sessions")

        completion = self._tracker.evaluate({}, agent.field_schema.fields)
        session = Session(
            agent_id=agent.id,
            visitor_id=visitor_id,
            completion_rate=completion.rate,
            required_fields_count=completion.total,
        )
        await self._session_store.save(session)

        if agent.welcome_message:
            await self._session_store.append_message(
                Message(
                    session_id=session.session_id,
                    role=MessageRole.AGENT,
                    content=agent.welcome_message,
                    metadata={"type": "welcome"},
                )
            )

        logger.info(
            "session_started",
            session_id=str(session.session_id),
            agent_id=str(agent.id),
        )
        return session

    async def get_session(self, session_id: UUID) -> Session:
        session = await self._session_store.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return session

    async def get_messages(self, session_id: UUID) -> list[Message]:
        await self.get_session(session_id)
        return await self._session_store.get_messages(session_id)

    async def get_extracted_fields(self, session_id: UUID) -> dict[str, ExtractedField]:
        await self.get_session(session_id)
        return await self._session_store.get_extracted_fields(session_id)

    async def end_session(self, session_id: UUID) -> Session:
        """End an active session as abandoned.

        Any in-flight turn is cancelled and allowed to tear down first.

        Raises:
            SessionNotFoundError: If the session doesn't exist
            SessionClosedError: If the session is already terminal
            TurnInProgressError: If the in-flight turn does not finish in time
        """
        session = await self.get_session(session_id)
        session.ensure_active()
        self.cancel_turn(session_id)

        key = str(session_id)
        if not await self._mutex.acquire(key):
            raise TurnInProgressError(f"Session {session_id} has a turn in progress")
        try:
            session = await self.get_session(session_id)
            session.abandon()
            await self._session_store.save(session)
        finally:
            await self._mutex.release(key)

        logger.info("session_ended", session_id=key, status=session.status.value)
        return session

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------

    async def start_turn(self, session_id: UUID, visitor_text: str) -> TurnStream:
        """Admit a visitor message and return the stream of the agent's reply.

        The returned stream holds the session lock until it is exhausted or
        closed.

        Raises:
            InvalidTurnInputError: Empty or oversized text
            SessionNotFoundError: Unknown session
            SessionClosedError: Session is terminal
            RateLimitExceededError: Message budget exhausted
            AbuseDetectedError: Abuse heuristic fired and abuse_action is reject
            TurnInProgressError: Another turn kept the lock past the wait timeout
        """
        self._orchestrator.check_input(visitor_text)
        session = await self.get_session(session_id)
        session.ensure_active()
        agent = await self.get_agent(session.agent_id)

        await self._admission.enforce(str(session_id), "messages")

        key = str(session_id)
        if not await self._mutex.acquire(key):
            logger.info("turn_rejected_in_progress", session_id=key)
            raise TurnInProgressError(f"Session {session_id} has a turn in progress")

        try:
            # A turn that held the lock may have completed or flagged the session.
            session = await self.get_session(session_id)
            session.ensure_active()
            await self._screen_abuse(session)
            context = ConversationContext(
                session_id=session_id,
                agent=agent,
                messages=tuple(await self._session_store.get_messages(session_id)),
                extracted_fields=await self._session_store.get_extracted_fields(session_id),
            )
            token = CancellationToken()
            replies = self._orchestrator.respond(context, visitor_text, token)

            async def release() -> None:
                self._active_turns.pop(session_id, None)
                await self._mutex.release(key)

            stream = TurnStream(replies, token, on_close=release)
        except BaseException:
            await self._mutex.release(key)
            raise

        self._active_turns[session_id] = stream
        return stream

    def cancel_turn(self, session_id: UUID) -> bool:
        """Cancel the session's in-flight turn, if any.

        Returns:
            True if a turn was signalled
        """
        stream = self._active_turns.get(session_id)
        if stream is None:
            return False
        stream.cancel("caller_cancelled")
        logger.info("turn_cancel_requested", session_id=str(session_id))
        return True

    async def _screen_abuse(self, session: Session) -> None:
        result = await self.check_abuse(session.session_id)
        if not result.is_abuse:
            return
        if self._admission.abuse_action == "reject":
            raise AbuseDetectedError(
                f"Turn rejected: {result.reason}", reason=result.reason or ""
            )
        if not session.flagged:
            session.flag(result.reason or "abuse")
            await self._session_store.save(session)
            logger.warning(
                "session_flagged",
                session_id=str(session.session_id),
                reason=result.reason,
            )

    # ------------------------------------------------------------------
    # Validation and admission
    # ------------------------------------------------------------------

    async def validate_value(
        self,
        agent_id: UUID,
        field_id: str,
        value: str,
    ) -> ValidationResult:
        """Validate a value against one of an agent's fields, outside any turn.

        Raises:
            AgentNotFoundError: If the agent doesn't exist
            FieldNotFoundError: If the field is not in the agent's schema
        """
        agent = await self.get_agent(agent_id)
        field = agent.field_schema.get_field(field_id)
        if field is None:
            raise FieldNotFoundError(f"Field {field_id} not found on agent {agent_id}")
        return self._validator.validate(value, field)

    async def check_admission(self, key: str, category: str) -> RateLimitResult:
        """Count one request for (key, category) and report the window."""
        return await self._admission.check_admission(key, category)

    async def peek_admission(self, key: str, category: str) -> RateLimitResult:
        return await self._admission.peek(key, category)

    async def reset_admission(self, key: str, category: str) -> None:
        await self._admission.reset(key, category)

    async def check_abuse(self, session_id: UUID) -> AbuseCheckResult:
        """Run the abuse heuristic over the visitor's recent messages."""
        since = datetime.now(UTC) - self._abuse_window
        messages = await self._session_store.get_messages(
            session_id, role=MessageRole.VISITOR, since=since
        )
        return self._admission.check_abuse(messages)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    async def export_session(self, session_id: UUID, format: ExportFormat = "json") -> str:
        """Export a session's record as JSON or CSV.

        Raises:
            SessionNotFoundError: If the session doesn't exist
            InvalidRequestError: If the format is unknown
        """
        session = await self.get_session(session_id)
        export = SessionExport(
            session=session,
            messages=await self._session_store.get_messages(session_id),
            extracted_fields=await self._session_store.get_extracted_fields(session_id),
        )
        if format == "json":
            return export_json(export)
        if format == "csv":
            agent = await self.get_agent(session.agent_id)
            return export_csv(export, agent.field_schema)
        raise InvalidRequestError(f"Unknown export format: {format}")

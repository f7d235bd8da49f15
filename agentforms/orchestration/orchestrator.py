"""Turn orchestrator.

One turn: extract and validate fields from the transcript, work out what to
ask next, have the provider phrase it, and stream the reply back while
persisting the outcome.
"""

import asyncio
from collections.abc import AsyncIterator, Mapping
from contextlib import aclosing

from agentforms.completion import CompletionState, CompletionTracker
from agentforms.config.models import TurnConfig
from agentforms.conversation.models import (
    ExtractedField,
    Message,
    MessageRole,
    Session,
    ValidationState,
)
from agentforms.conversation.store import SessionStore
from agentforms.exceptions import (
    InvalidTurnInputError,
    SessionNotFoundError,
    TurnFailedError,
)
from agentforms.extraction import FieldExtractor
from agentforms.observability.logging import get_logger
from agentforms.orchestration.cancellation import CancellationToken
from agentforms.orchestration.models import ConversationContext, PartialReply
from agentforms.orchestration.prompt_builder import PromptBuilder
from agentforms.providers.llm.base import GenerationRequest, TextGenerationProvider
from agentforms.schema.models import BaseField
from agentforms.validation import FieldValidator

logger = get_logger(__name__)


async def _next_chunk(
    stream: AsyncIterator[str], cancel_token: CancellationToken
) -> str | None:
    """Wait for the provider's next chunk or for cancellation, whichever comes first.

    Returns None when the provider is exhausted or the turn was cancelled. A
    pull that loses the race is cancelled and awaited, so the provider
    generator is idle again before it is closed.
    """
    if cancel_token.is_cancelled:
        return None
    pull = asyncio.ensure_future(anext(stream, None))
    cancelled = asyncio.ensure_future(cancel_token.wait())
    try:
        await asyncio.wait({pull, cancelled}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        pending = [task for task in (pull, cancelled) if not task.done()]
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
    if pull.cancelled():
        return None
    return pull.result()


class TurnOrchestrator:
    """Run visitor turns against a session.

    Callers must hold the session mutex for the whole stream; the
    orchestrator itself is stateless between turns.
    """

    def __init__(
        self,
        session_store: SessionStore,
        provider: TextGenerationProvider,
        extractor: FieldExtractor | None = None,
        validator: FieldValidator | None = None,
        tracker: CompletionTracker | None = None,
        prompt_builder: PromptBuilder | None = None,
        config: TurnConfig | None = None,
    ) -> None:
        self._config = config or TurnConfig()
        self._session_store = session_store
        self._provider = provider
        self._extractor = extractor or FieldExtractor()
        self._validator = validator or FieldValidator()
        self._tracker = tracker or CompletionTracker()
        self._prompt_builder = prompt_builder or PromptBuilder(self._config.history_limit)

    @property
    def provider_name(self) -> str:
        return self._provider.provider_name

    def check_input(self, visitor_message: str) -> None:
        """Reject empty or oversized visitor text.

        Raises:
            InvalidTurnInputError: If the text is unusable
        """
        if not visitor_message.strip():
            raise InvalidTurnInputError("Message content cannot be empty")
        if len(visitor_message) > self._config.max_message_length:
            raise InvalidTurnInputError(
                f"Message exceeds {self._config.max_message_length} characters"
            )

    async def respond(
        self,
        context: ConversationContext,
        visitor_message: str,
        cancel_token: CancellationToken | None = None,
    ) -> AsyncIterator[PartialReply]:
        """Process one visitor message and stream the agent's reply.

        Args:
            context: Agent, prior transcript and current extracted fields
            visitor_message: The new visitor text
            cancel_token: Stops the stream, even while the provider is waiting
                on its next chunk

        Yields:
            PartialReply values with growing content; the last has done=True

        Raises:
            InvalidTurnInputError: Empty or oversized text, nothing appended
            SessionNotFoundError: Unknown session, nothing appended
            SessionClosedError: Session is terminal, nothing appended
            TurnFailedError: Provider fault; the session moves to error
        """
        self.check_input(visitor_message)
        cancel_token = cancel_token or CancellationToken()

        session = await self._session_store.get(context.session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {context.session_id} not found")
        session.ensure_active()

        fields = context.agent.field_schema.fields
        visitor = Message(
            session_id=context.session_id,
            role=MessageRole.VISITOR,
            content=visitor_message,
        )
        history = [*context.messages, visitor]

        fresh = self._validate_all(self._extractor.extract(history, fields), fields)
        visitor = visitor.model_copy(
            update={"validation_state": self._validation_state(fresh, visitor)}
        )
        await self._session_store.append_message(visitor)
        await self._session_store.save_extracted_fields(context.session_id, fresh)

        merged = {**context.extracted_fields, **fresh}
        completion = self._tracker.evaluate(merged, fields)

        logger.info(
            "turn_started",
            session_id=str(context.session_id),
            extracted_field_ids=list(fresh.keys()),
            next_field_id=completion.next_field.id if completion.next_field else None,
        )

        request = GenerationRequest(
            prompt=self._prompt_builder.build(
                context.agent, context.messages, visitor_message, completion.next_field
            ),
            persona=context.agent.persona,
            next_field=completion.next_field,
            session_id=str(context.session_id),
        )

        content = ""
        finished = False
        failed = False
        try:
            async with aclosing(self._provider.generate(request)) as stream:
                while (chunk := await _next_chunk(stream, cancel_token)) is not None:
                    content += chunk
                    yield PartialReply(content_so_far=content)
                finished = not cancel_token.is_cancelled
        except Exception as e:
            failed = True
            logger.error(
                "provider_stream_failed",
                session_id=str(context.session_id),
                provider=self._provider.provider_name,
                error=str(e),
                error_type=type(e).__name__,
            )
            await self._fail_turn(session, content)
            raise TurnFailedError(
                f"Text generation failed: {e}", partial_content=content
            ) from e
        finally:
            if not finished and not failed:
                await self._finish_turn(session, completion, content, partial=True)
                logger.info(
                    "turn_cancelled",
                    session_id=str(context.session_id),
                    reason=cancel_token.reason,
                    partial_length=len(content),
                )

        if not finished:
            return

        await self._finish_turn(session, completion, content, partial=False)
        logger.info(
            "turn_completed",
            session_id=str(context.session_id),
            status=session.status.value,
            completion_rate=session.completion_rate,
        )
        yield PartialReply(content_so_far=content, done=True, extracted_fields=merged)

    def _validate_all(
        self,
        extracted: Mapping[str, ExtractedField],
        fields: tuple[BaseField, ...],
    ) -> dict[str, ExtractedField]:
        by_id = {f.id: f for f in fields}
        validated: dict[str, ExtractedField] = {}
        for field_id, entry in extracted.items():
            result = self._validator.validate(entry.value, by_id[field_id])
            validated[field_id] = entry.model_copy(
                update={
                    "validated": result.valid,
                    "validation_errors": tuple(result.errors),
                }
            )
        return validated

    def _validation_state(
        self,
        fresh: Mapping[str, ExtractedField],
        message: Message,
    ) -> ValidationState | None:
        own = [e for e in fresh.values() if e.source_message_id == message.id]
        if not own:
            return None
        if all(e.validated for e in own):
            return ValidationState.VALID
        return ValidationState.INVALID

    async def _finish_turn(
        self,
        session: Session,
        completion: CompletionState,
        content: str,
        partial: bool,
    ) -> None:
        if content:
            await self._session_store.append_message(
                Message(
                    session_id=session.session_id,
                    role=MessageRole.AGENT,
                    content=content,
                    metadata={"partial": True} if partial else {},
                )
            )

        session.completion_rate = completion.rate
        session.required_fields_count = completion.total
        session.completed_fields_count = completion.completed
        session.turn_count += 1
        if completion.is_complete and not session.is_terminal:
            session.complete()
            logger.info("session_completed", session_id=str(session.session_id))
        await self._session_store.save(session)

    async def _fail_turn(self, session: Session, content: str) -> None:
        if content:
            await self._session_store.append_message(
                Message(
                    session_id=session.session_id,
                    role=MessageRole.AGENT,
                    content=content,
                    metadata={"partial": True, "error": True},
                )
            )
        session.turn_count += 1
        if not session.is_terminal:
            session.fail()
        await self._session_store.save(session)

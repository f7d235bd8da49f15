"""Session lifecycle and turn streaming endpoints."""

from collections.abc import AsyncIterator
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Query, status
from fastapi.responses import PlainTextResponse, Response, StreamingResponse

from agentforms.admission import AbuseCheckResult
from agentforms.api.dependencies import ServiceDep
from agentforms.api.models.sessions import (
    CancelResponse,
    DoneEvent,
    ErrorEvent,
    ReplyEvent,
    SessionResponse,
    StartSessionRequest,
    StreamEvent,
    TurnRequest,
)
from agentforms.exceptions import AgentFormsError
from agentforms.observability.logging import get_logger
from agentforms.orchestration import TurnStream
from agentforms.service import FormSessionService

logger = get_logger(__name__)

router = APIRouter(prefix="/sessions")


def _sse(event: StreamEvent) -> str:
    return f"data: {event.model_dump_json()}\n\n"


async def _stream_events(
    stream: TurnStream,
    session_id: UUID,
    service: FormSessionService,
) -> AsyncIterator[str]:
    """Translate PartialReply values into SSE events.

    Errors raised after the response has started are sent as an error
    event; the stream is always closed so the session lock is released.
    """
    try:
        async with stream:
            async for reply in stream:
                if not reply.done:
                    yield _sse(ReplyEvent(content_so_far=reply.content_so_far))
                    continue
                session = await service.get_session(session_id)
                yield _sse(
                    DoneEvent(
                        session_id=str(session_id),
                        content=reply.content_so_far,
                        status=session.status,
                        completion_rate=session.completion_rate,
                        extracted_fields=reply.extracted_fields or {},
                    )
                )
    except AgentFormsError as e:
        logger.warning(
            "turn_stream_error",
            session_id=str(session_id),
            error_code=e.error_code.value,
        )
        yield _sse(ErrorEvent(code=e.error_code.value, message=e.message))


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def start_session(body: StartSessionRequest, service: ServiceDep) -> SessionResponse:
    session = await service.start_session(body.agent_id, visitor_id=body.visitor_id)
    return SessionResponse.from_session(session)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session_id: UUID, service: ServiceDep) -> SessionResponse:
    session = await service.get_session(session_id)
    fields = await service.get_extracted_fields(session_id)
    return SessionResponse.from_session(session, fields)


@router.post("/{session_id}/turns")
async def create_turn(
    session_id: UUID,
    body: TurnRequest,
    service: ServiceDep,
) -> StreamingResponse:
    """Run one visitor turn and stream the reply as server-sent events.

    Admission, input and session-state errors are returned as regular error
    responses before the stream starts.
    """
    stream = await service.start_turn(session_id, body.message)
    return StreamingResponse(
        _stream_events(stream, session_id, service),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.post("/{session_id}/cancel", response_model=CancelResponse)
async def cancel_turn(session_id: UUID, service: ServiceDep) -> CancelResponse:
    await service.get_session(session_id)
    return CancelResponse(session_id=session_id, cancelled=service.cancel_turn(session_id))


@router.post("/{session_id}/end", response_model=SessionResponse)
async def end_session(session_id: UUID, service: ServiceDep) -> SessionResponse:
    session = await service.end_session(session_id)
    return SessionResponse.from_session(
        session, await service.get_extracted_fields(session_id)
    )


@router.get("/{session_id}/abuse", response_model=AbuseCheckResult)
async def check_abuse(session_id: UUID, service: ServiceDep) -> AbuseCheckResult:
    await service.get_session(session_id)
    return await service.check_abuse(session_id)


@router.get("/{session_id}/export")
async def export_session(
    session_id: UUID,
    service: ServiceDep,
    format: Literal["json", "csv"] = Query(default="json"),
) -> Response:
    content = await service.export_session(session_id, format)
    if format == "csv":
        return PlainTextResponse(
            content,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="session-{session_id}.csv"'},
        )
    return Response(content, media_type="application/json")

"""Request logging middleware.

Every log line emitted while a request is handled carries the request id,
the visitor id and, for session routes, the session id.
"""

import re
import time
from collections.abc import Awaitable, Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from structlog.contextvars import bind_contextvars, clear_contextvars

from agentforms.observability.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
VISITOR_ID_HEADER = "X-Visitor-ID"

_SESSION_PATH = re.compile(r"^/v1/sessions/([0-9a-fA-F-]{36})(?:/|$)")


def session_id_from_path(path: str) -> str | None:
    match = _SESSION_PATH.match(path)
    return match.group(1) if match else None


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Bind request_id, visitor_id and session_id to structlog contextvars.

    The request id is taken from X-Request-ID when the caller sends one and
    generated otherwise; it is echoed on the response. Streaming responses are
    logged as completed when their headers are sent.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        clear_contextvars()
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        bind_contextvars(
            request_id=request_id,
            visitor_id=request.headers.get(VISITOR_ID_HEADER),
            session_id=session_id_from_path(request.url.path),
        )

        started = time.perf_counter()
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id

        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return response

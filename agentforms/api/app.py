"""FastAPI application factory.

Creates and configures the FastAPI application with middleware,
exception handlers, and route registration.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agentforms import __version__
from agentforms.api.models.errors import ErrorBody, ErrorCode, ErrorDetail, ErrorResponse
from agentforms.api.routes import register_routes
from agentforms.config import get_settings
from agentforms.exceptions import AgentFormsError, RateLimitExceededError
from agentforms.observability.logging import get_logger, setup_logging
from agentforms.observability.middleware import LoggingContextMiddleware

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    setup_logging(
        level=settings.observability.log_level,
        format=settings.observability.log_format,
        redact_pii=settings.observability.redact_pii,
    )

    app = FastAPI(
        title="AgentForms API",
        description="Conversational data collection: turn orchestration and field extraction",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=settings.api.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingContextMiddleware)

    _register_exception_handlers(app)
    register_routes(app)

    logger.info(
        "app_created",
        debug=settings.debug,
        cors_origins=settings.api.cors_origins,
    )

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application
    """

    @app.exception_handler(AgentFormsError)
    async def agentforms_error_handler(
        request: Request, exc: AgentFormsError
    ) -> JSONResponse:
        """Handle AgentFormsError and its subclasses."""
        logger.warning(
            "api_error",
            error_code=exc.error_code.value,
            message=exc.message,
            path=request.url.path,
        )

        error_body = ErrorBody(code=exc.error_code, message=exc.message)
        headers = None
        if isinstance(exc, RateLimitExceededError) and exc.retry_after is not None:
            error_body.retry_after = exc.retry_after
            headers = {"Retry-After": str(exc.retry_after)}

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=error_body).model_dump(mode="json"),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle FastAPI request validation errors."""
        logger.warning(
            "validation_error",
            error_count=len(exc.errors()),
            path=request.url.path,
        )

        details = [
            ErrorDetail(
                field=".".join(str(loc) for loc in error["loc"]),
                message=error["msg"],
            )
            for error in exc.errors()
        ]
        error_body = ErrorBody(
            code=ErrorCode.INVALID_REQUEST,
            message="Request validation failed",
            details=details,
        )

        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error=error_body).model_dump(mode="json"),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )

        error_body = ErrorBody(
            code=ErrorCode.INTERNAL_ERROR,
            message="An unexpected error occurred",
        )

        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=error_body).model_dump(mode="json"),
        )

    logger.debug("exception_handlers_registered")

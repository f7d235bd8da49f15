"""API route registration."""

from fastapi import APIRouter, FastAPI

from agentforms.observability.logging import get_logger

logger = get_logger(__name__)


def create_v1_router() -> APIRouter:
    """Create the v1 API router with all routes.

    Returns:
        APIRouter with all v1 routes registered
    """
    router = APIRouter(prefix="/v1")

    from agentforms.api.routes.admission import router as admission_router
    from agentforms.api.routes.agents import router as agents_router
    from agentforms.api.routes.sessions import router as sessions_router

    router.include_router(agents_router, tags=["Agents"])
    router.include_router(sessions_router, tags=["Sessions"])
    router.include_router(admission_router, tags=["Admission"])

    logger.debug("v1_router_created", routes=["agents", "sessions", "admission"])

    return router


def register_routes(app: FastAPI) -> None:
    """Register all routes with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.include_router(create_v1_router())

    from agentforms.api.routes.health import router as health_router

    app.include_router(health_router, tags=["Health"])

    logger.info("routes_registered")

"""Health check endpoint."""

from fastapi import APIRouter

from agentforms import __version__
from agentforms.api.dependencies import ServiceDep, SettingsDep
from agentforms.api.models.health import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: SettingsDep, service: ServiceDep) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        storage_backend=settings.storage.backend,
        generation_provider=service.provider_name,
        active_turns=service.active_turn_count,
    )

"""Admission status endpoint."""

from fastapi import APIRouter

from agentforms.admission import RateLimitResult
from agentforms.api.dependencies import ServiceDep

router = APIRouter(prefix="/admission")


@router.get("/{key}/{category}", response_model=RateLimitResult)
async def get_admission_status(
    key: str,
    category: str,
    service: ServiceDep,
) -> RateLimitResult:
    """Report the rate-limit window for (key, category) without counting."""
    return await service.peek_admission(key, category)

"""Health check endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from turnaround import __version__
from turnaround.api.dependencies.turnaround import get_turnaround_service
from turnaround.api.models.health import HealthResponse
from turnaround.application.services.turnaround_service import TurnaroundService

router = APIRouter(prefix="/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    service: Annotated[TurnaroundService, Depends(get_turnaround_service)],
) -> HealthResponse:
    turnaround_ids = await service.list_turnarounds()
    return HealthResponse(
        status="healthy",
        version=__version__,
        turnarounds_tracked=len(turnaround_ids),
    )

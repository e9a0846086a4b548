"""Health check response model."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Service liveness plus the number of turnarounds held in memory."""

    status: str
    version: str
    turnarounds_tracked: int

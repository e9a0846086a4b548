"""FastAPI application for the turnaround checklist service.

ASGI entry point: ``turnaround.api.main:app``.
"""

from fastapi import FastAPI

from turnaround import __version__
from turnaround.api.middleware.logging_middleware import LoggingMiddleware
from turnaround.api.routes.health import router as health_router
from turnaround.api.routes.turnaround import router as turnaround_router
from turnaround.bootstrap.logging import configure_logging
from turnaround.bootstrap.turnaround import get_turnaround_config

configure_logging(get_turnaround_config())

app = FastAPI(
    title="Turnaround Checklist API",
    description=(
        "Aircraft turnaround tasks with role-based completion, delay "
        "justification, hash-sealed certification and a hash-chained audit log"
    ),
    version=__version__,
)

app.add_middleware(LoggingMiddleware)
app.include_router(health_router)
app.include_router(turnaround_router)

"""structlog configuration.

Production renders one JSON object per line; development renders coloured
console output. The level comes from TURNAROUND_LOG_LEVEL, falling back to
LOG_LEVEL, then INFO.

Example production line:
    {"event": "task_completed", "level": "info", "timestamp": "...",
     "service": "TurnaroundService", "operation": "complete_task",
     "turnaround_id": "TA-0001", "task_id": 5, "status": "LATE",
     "correlation_id": "...", "caller_id": "fuel-crew"}
"""

import logging
import os
from typing import cast

import structlog
from structlog.typing import Processor

from turnaround.infrastructure.observability.context import request_context_processor

LOG_LEVEL_ENV_VARS = ("TURNAROUND_LOG_LEVEL", "LOG_LEVEL")


def resolve_log_level() -> int:
    for name in LOG_LEVEL_ENV_VARS:
        value = os.getenv(name)
        if value:
            level = logging.getLevelName(value.strip().upper())
            if isinstance(level, int):
                return level
    return logging.INFO


def configure_structlog(environment: str = "production") -> None:
    """Configure structlog once at startup.

    Args:
        environment: "production" for JSON lines, anything else for the
            console renderer.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        cast(Processor, request_context_processor),
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if environment == "production":
        processors += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(resolve_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

"""Structured logging and request context shared by every layer."""

from turnaround.infrastructure.observability.context import (
    bind_request_context,
    clear_request_context,
    current_caller_id,
    current_correlation_id,
    new_correlation_id,
    request_context_processor,
)
from turnaround.infrastructure.observability.logging import (
    configure_structlog,
    resolve_log_level,
)

__all__ = [
    "bind_request_context",
    "clear_request_context",
    "configure_structlog",
    "current_caller_id",
    "current_correlation_id",
    "new_correlation_id",
    "request_context_processor",
    "resolve_log_level",
]

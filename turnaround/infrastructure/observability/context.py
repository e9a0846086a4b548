"""Request context carried into every log line.

A request (or one simulation run) binds its correlation id and, when
known, the caller identity. Both live in ContextVars, so they survive
``await`` points and never leak between concurrent requests.
"""

from contextvars import ContextVar
from typing import Any
from uuid import uuid4

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_caller_id: ContextVar[str | None] = ContextVar("caller_id", default=None)


def new_correlation_id() -> str:
    return str(uuid4())


def bind_request_context(correlation_id: str, caller_id: str | None = None) -> None:
    """Bind the ids of the current request."""
    _correlation_id.set(correlation_id)
    _caller_id.set(caller_id)


def clear_request_context() -> None:
    _correlation_id.set(None)
    _caller_id.set(None)


def current_correlation_id() -> str | None:
    return _correlation_id.get()


def current_caller_id() -> str | None:
    return _caller_id.get()


def request_context_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding the bound request ids.

    Values bound explicitly on the logger take precedence.
    """
    correlation_id = _correlation_id.get()
    if correlation_id is not None:
        event_dict.setdefault("correlation_id", correlation_id)
    caller_id = _caller_id.get()
    if caller_id is not None:
        event_dict.setdefault("caller_id", caller_id)
    return event_dict

"""Request logging middleware.

Binds the request context for the duration of one request:
- correlation id from X-Correlation-ID, or a fresh one
- caller identity from X-Caller-Id, when present

and logs one line per request with status and timing. The correlation id
is echoed back in the response headers.
"""

import time
from typing import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from turnaround.infrastructure.observability.context import (
    bind_request_context,
    clear_request_context,
    new_correlation_id,
)

CORRELATION_HEADER = "X-Correlation-ID"
CALLER_HEADER = "X-Caller-Id"

logger = structlog.get_logger()


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Binds request context and logs request outcomes."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or new_correlation_id()
        bind_request_context(correlation_id, request.headers.get(CALLER_HEADER))
        log = logger.bind(
            method=request.method, path=request.url.path, correlation_id=correlation_id
        )
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            log.exception(
                "request_failed",
                duration_ms=_elapsed_ms(started),
                error_type=type(exc).__name__,
            )
            raise
        finally:
            clear_request_context()

        log_method = log.warning if response.status_code >= 400 else log.info
        log_method(
            "request_completed",
            status_code=response.status_code,
            duration_ms=_elapsed_ms(started),
        )
        response.headers[CORRELATION_HEADER] = correlation_id
        return response

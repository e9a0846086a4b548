"""API middleware."""

from turnaround.api.middleware.logging_middleware import LoggingMiddleware

__all__ = ["LoggingMiddleware"]

"""Logging mixin shared by the application services.

Services call ``_init_logger`` once in ``__init__`` and open an
operation-scoped logger per command::

    log = self._log_operation("complete_task", turnaround_id=tid, task_id=5)
    log.info("task_completed", status="LATE")

Correlation and caller ids are added by the request context processor, so
they never need to be passed through service signatures.
"""

import structlog


class LoggingMixin:
    """Binds ``service`` and ``component`` once, ``operation`` per call."""

    _log: structlog.BoundLogger

    def _init_logger(self, component: str = "turnaround") -> None:
        self._log = structlog.get_logger().bind(
            service=type(self).__name__,
            component=component,
        )

    def _log_operation(self, operation: str, **context: object) -> structlog.BoundLogger:
        """Logger bound to one operation and its identifying context."""
        return self._log.bind(operation=operation, **context)

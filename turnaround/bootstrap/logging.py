"""Logging setup driven by TurnaroundConfig."""

from __future__ import annotations

import structlog

from turnaround.config.turnaround_config import TurnaroundConfig
from turnaround.infrastructure.observability import configure_structlog


def configure_logging(config: TurnaroundConfig) -> None:
    """Configure structlog for ``config.environment`` and log the active policy."""
    configure_structlog(environment=config.environment)
    structlog.get_logger().info(
        "logging_configured",
        environment=config.environment,
        max_justification_length=config.max_justification_length,
        allow_post_certification_justification=config.allow_post_certification_justification,
        allow_post_certification_mandatory_change=(
            config.allow_post_certification_mandatory_change
        ),
    )

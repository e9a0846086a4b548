"""Turnaround runtime configuration.

Environment Variables:
- TURNAROUND_ENVIRONMENT: "production" or "development" (default: production)
- TURNAROUND_MAX_JUSTIFICATION_LENGTH: Max characters in a delay
  justification (default: 2000, min: 1, max: 10000)
- TURNAROUND_ALLOW_POST_CERTIFICATION_JUSTIFICATION: Accept justifications
  after certification (default: false)
- TURNAROUND_ALLOW_POST_CERTIFICATION_MANDATORY_CHANGE: Accept mandatory
  flag changes after certification (default: false)
- TURNAROUND_BADGE_METADATA_BASE_URI: Base URI of badge metadata
  (default: ipfs://turnaround-badges)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from turnaround.domain.models.policy import TurnaroundPolicy

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean environment variable; unrecognized values give the default."""
    value = os.environ.get(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return default


# =============================================================================
# Defaults
# =============================================================================

ENVIRONMENTS = ("production", "development")
DEFAULT_ENVIRONMENT = "production"

DEFAULT_MAX_JUSTIFICATION_LENGTH = 2000
MIN_JUSTIFICATION_LENGTH_LIMIT = 1
MAX_JUSTIFICATION_LENGTH_LIMIT = 10000

DEFAULT_BADGE_METADATA_BASE_URI = "ipfs://turnaround-badges"


@dataclass(frozen=True)
class TurnaroundConfig:
    """Configuration for the turnaround service.

    Attributes:
        environment: Logging environment ("production" or "development").
        max_justification_length: Maximum delay justification length.
        allow_post_certification_justification: Accept justifications
            after the turnaround is sealed.
        allow_post_certification_mandatory_change: Accept mandatory flag
            changes after the turnaround is sealed.
        badge_metadata_base_uri: Base URI under which badge metadata lives.
    """

    environment: str = DEFAULT_ENVIRONMENT
    max_justification_length: int = DEFAULT_MAX_JUSTIFICATION_LENGTH
    allow_post_certification_justification: bool = False
    allow_post_certification_mandatory_change: bool = False
    badge_metadata_base_uri: str = DEFAULT_BADGE_METADATA_BASE_URI

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.environment not in ENVIRONMENTS:
            raise ValueError(
                f"environment must be one of {ENVIRONMENTS}, got {self.environment!r}"
            )
        if (
            not MIN_JUSTIFICATION_LENGTH_LIMIT
            <= self.max_justification_length
            <= MAX_JUSTIFICATION_LENGTH_LIMIT
        ):
            raise ValueError(
                f"max_justification_length must be between {MIN_JUSTIFICATION_LENGTH_LIMIT} "
                f"and {MAX_JUSTIFICATION_LENGTH_LIMIT}, got {self.max_justification_length}"
            )
        if not self.badge_metadata_base_uri.strip():
            raise ValueError("badge_metadata_base_uri must not be empty")

    def to_policy(self) -> TurnaroundPolicy:
        """Build the domain policy these settings describe."""
        return TurnaroundPolicy(
            allow_post_certification_justification=self.allow_post_certification_justification,
            allow_post_certification_mandatory_change=self.allow_post_certification_mandatory_change,
            max_justification_length=self.max_justification_length,
        )

    @classmethod
    def from_environment(cls) -> TurnaroundConfig:
        """Create config from environment variables with defaults.

        Out-of-range numbers are clamped; an unknown environment name falls
        back to production.
        """
        environment = os.environ.get("TURNAROUND_ENVIRONMENT", DEFAULT_ENVIRONMENT).strip().lower()
        if environment not in ENVIRONMENTS:
            environment = DEFAULT_ENVIRONMENT

        max_length = _get_int_env(
            "TURNAROUND_MAX_JUSTIFICATION_LENGTH",
            DEFAULT_MAX_JUSTIFICATION_LENGTH,
        )
        # Clamp to valid range
        max_length = max(
            MIN_JUSTIFICATION_LENGTH_LIMIT,
            min(max_length, MAX_JUSTIFICATION_LENGTH_LIMIT),
        )

        return cls(
            environment=environment,
            max_justification_length=max_length,
            allow_post_certification_justification=_get_bool_env(
                "TURNAROUND_ALLOW_POST_CERTIFICATION_JUSTIFICATION", False
            ),
            allow_post_certification_mandatory_change=_get_bool_env(
                "TURNAROUND_ALLOW_POST_CERTIFICATION_MANDATORY_CHANGE", False
            ),
            badge_metadata_base_uri=os.environ.get(
                "TURNAROUND_BADGE_METADATA_BASE_URI", DEFAULT_BADGE_METADATA_BASE_URI
            ).strip()
            or DEFAULT_BADGE_METADATA_BASE_URI,
        )


DEFAULT_TURNAROUND_CONFIG = TurnaroundConfig()

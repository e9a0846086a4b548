"""Turnaround policy: rule switches applied by the aggregate."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MAX_JUSTIFICATION_LENGTH: int = 2000


@dataclass(frozen=True)
class TurnaroundPolicy:
    """Rule switches for behavior after certification and input limits.

    Attributes:
        allow_post_certification_justification: Accept delay justifications
            on a certified turnaround. The sealed KPI snapshot is unaffected
            either way.
        allow_post_certification_mandatory_change: Accept mandatory-flag
            changes on a certified turnaround.
        max_justification_length: Upper bound on justification text length.
    """

    allow_post_certification_justification: bool = False
    allow_post_certification_mandatory_change: bool = False
    max_justification_length: int = DEFAULT_MAX_JUSTIFICATION_LENGTH

    def __post_init__(self) -> None:
        if self.max_justification_length < 1:
            raise ValueError(
                f"max_justification_length must be positive, got {self.max_justification_length}"
            )


DEFAULT_TURNAROUND_POLICY = TurnaroundPolicy()

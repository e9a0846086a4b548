"""Certification record domain model.

The certification record is the sealed KPI snapshot of a turnaround. It is
computed once, at certification, and retained unchanged on the turnaround
header afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from turnaround.domain.models.task import require_aware

CERTIFICATION_HASH_LENGTH: int = 64


@dataclass(frozen=True, eq=True)
class CertificationRecord:
    """Sealed snapshot of a certified turnaround.

    Attributes:
        actual_departure: Departure instant recorded at sealing.
        sealed_at: Instant the seal was applied.
        on_time: Tasks completed on time at sealing.
        late_unjustified: Late tasks without justification at sealing.
        certification_hash: SHA-256 commitment over the sealed inputs
            (64 lowercase hex characters).
    """

    actual_departure: datetime
    sealed_at: datetime
    on_time: int
    late_unjustified: int
    certification_hash: str

    def __post_init__(self) -> None:
        """Validate instants, counters and hash format."""
        require_aware(self.actual_departure, "actual_departure")
        require_aware(self.sealed_at, "sealed_at")
        if self.on_time < 0 or self.late_unjustified < 0:
            raise ValueError("KPI counters must be non-negative")
        if (
            not isinstance(self.certification_hash, str)
            or len(self.certification_hash) != CERTIFICATION_HASH_LENGTH
        ):
            raise ValueError(
                "certification_hash must be 64 character hex string (SHA-256)"
            )

    @property
    def sla_breached(self) -> bool:
        return self.late_unjustified > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "actual_departure": self.actual_departure.isoformat(),
            "sealed_at": self.sealed_at.isoformat(),
            "on_time": self.on_time,
            "late_unjustified": self.late_unjustified,
            "certification_hash": self.certification_hash,
        }

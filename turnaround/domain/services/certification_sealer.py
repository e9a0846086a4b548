"""CertificationSealer: preconditions, KPI freeze and the certification hash.

The certification hash is a SHA-256 commitment over the canonical JSON
encoding of {off_chain_id, actual_departure, on_time, late_unjustified,
sealed_at}. Any auditor holding the same five values can recompute it, and
a change to any of them changes the hash.
"""

from __future__ import annotations

import hmac
from collections.abc import Sequence
from datetime import datetime

from turnaround.domain.errors.certification import (
    AlreadyCertifiedError,
    CertificationHashMismatchError,
    MandatoryTaskIncompleteError,
)
from turnaround.domain.events.hash_utils import sha256_canonical
from turnaround.domain.models.certification import CertificationRecord
from turnaround.domain.models.task import TurnaroundTask
from turnaround.domain.models.turnaround import TurnaroundHeader
from turnaround.domain.services.kpi_engine import compute_kpis


def compute_certification_hash(
    off_chain_id: str,
    actual_departure: datetime,
    on_time: int,
    late_unjustified: int,
    sealed_at: datetime,
) -> str:
    """Compute the certification commitment.

    Args:
        off_chain_id: Turnaround identifier.
        actual_departure: Departure instant recorded at sealing.
        on_time: On-time count at sealing.
        late_unjustified: Unjustified late count at sealing.
        sealed_at: Instant the seal was applied.

    Returns:
        Lowercase hexadecimal SHA-256 hash (64 characters).
    """
    return sha256_canonical(
        {
            "off_chain_id": off_chain_id,
            "actual_departure": actual_departure.isoformat(),
            "on_time": on_time,
            "late_unjustified": late_unjustified,
            "sealed_at": sealed_at.isoformat(),
        }
    )


class CertificationSealer:
    """Validates certification preconditions and produces the sealed record."""

    def check_preconditions(
        self,
        header: TurnaroundHeader,
        tasks: Sequence[TurnaroundTask],
    ) -> None:
        """Check every precondition before anything is mutated.

        All tasks are inspected so the error lists every outstanding
        mandatory task, not just the first one.

        Raises:
            AlreadyCertifiedError: If the turnaround is already sealed.
            MandatoryTaskIncompleteError: If any mandatory task is pending.
        """
        if header.is_certified:
            raise AlreadyCertifiedError(header.off_chain_id)
        outstanding = [t.task_id for t in tasks if t.mandatory and not t.completed]
        if outstanding:
            raise MandatoryTaskIncompleteError(header.off_chain_id, outstanding)

    def seal(
        self,
        header: TurnaroundHeader,
        tasks: Sequence[TurnaroundTask],
        now: datetime,
    ) -> CertificationRecord:
        """Validate and compute the certification record.

        The actual departure and the sealing instant are both ``now``; they
        are kept as separate fields of the commitment.

        Returns:
            The sealed record. Applying it to the header is the caller's job.
        """
        self.check_preconditions(header, tasks)
        kpis = compute_kpis(tasks)
        return CertificationRecord(
            actual_departure=now,
            sealed_at=now,
            on_time=kpis.on_time,
            late_unjustified=kpis.late_unjustified,
            certification_hash=compute_certification_hash(
                header.off_chain_id, now, kpis.on_time, kpis.late_unjustified, now
            ),
        )


def verify_certification(off_chain_id: str, record: CertificationRecord) -> None:
    """Recompute a certification hash and compare it with the stored one.

    Raises:
        CertificationHashMismatchError: If the hashes differ.
    """
    computed = compute_certification_hash(
        off_chain_id,
        record.actual_departure,
        record.on_time,
        record.late_unjustified,
        record.sealed_at,
    )
    if not hmac.compare_digest(computed, record.certification_hash):
        raise CertificationHashMismatchError(off_chain_id, record.certification_hash, computed)

"""Certification domain errors.

This module defines error classes for certification-related failures:
sealing a turnaround twice, sealing with mandatory work outstanding, and
detecting a certification hash that no longer matches its inputs.
"""

from __future__ import annotations

from collections.abc import Iterable

from turnaround.domain.exceptions import TurnaroundError


class CertificationError(TurnaroundError):
    """Base exception for all certification-related errors.

    Example:
        >>> raise CertificationError("Certification operation failed")
        Traceback (most recent call last):
            ...
        CertificationError: Certification operation failed
    """

    pass


class AlreadyCertifiedError(CertificationError):
    """Raised when an operation needs an uncertified turnaround.

    Certification is terminal: the turnaround never returns to the
    uncertified state, and its tasks are frozen from then on.

    Attributes:
        turnaround_id: Off-chain identifier of the certified turnaround.
    """

    def __init__(self, turnaround_id: str) -> None:
        self.turnaround_id = turnaround_id
        super().__init__(f"Turnaround {turnaround_id} is already certified")


class MandatoryTaskIncompleteError(CertificationError):
    """Raised when certifying while mandatory tasks are still pending.

    Attributes:
        turnaround_id: Off-chain identifier of the turnaround.
        outstanding_task_ids: Sorted ids of the incomplete mandatory tasks.
    """

    def __init__(self, turnaround_id: str, outstanding_task_ids: Iterable[int]) -> None:
        """Initialize MandatoryTaskIncompleteError.

        Args:
            turnaround_id: Off-chain identifier of the turnaround.
            outstanding_task_ids: Ids of the incomplete mandatory tasks.
        """
        self.turnaround_id = turnaround_id
        self.outstanding_task_ids = tuple(sorted(outstanding_task_ids))
        super().__init__(
            f"Turnaround {turnaround_id} cannot be certified: "
            f"{len(self.outstanding_task_ids)} mandatory task(s) incomplete "
            f"{list(self.outstanding_task_ids)}"
        )


class CertificationHashMismatchError(CertificationError):
    """Raised when a stored certification hash does not match its inputs.

    This indicates tampering or corruption of either the hash or the
    sealed KPI snapshot.

    Attributes:
        turnaround_id: Off-chain identifier of the turnaround.
        stored_hash: The hash recorded at sealing time.
        computed_hash: The hash recomputed from the sealed inputs.
    """

    def __init__(self, turnaround_id: str, stored_hash: str, computed_hash: str) -> None:
        self.turnaround_id = turnaround_id
        self.stored_hash = stored_hash
        self.computed_hash = computed_hash
        super().__init__(
            f"Certification hash mismatch for turnaround {turnaround_id}. "
            f"Stored hash: {stored_hash[:16]}..., "
            f"computed hash: {computed_hash[:16]}... - possible tampering detected"
        )

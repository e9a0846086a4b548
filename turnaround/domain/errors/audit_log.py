"""Audit log integrity errors.

Raised when a sequence of audit records cannot be trusted: a gap in the
sequence numbers, a broken previous-hash link, a content hash that no
longer matches the record, or a log that does not open with the
turnaround creation record.
"""

from __future__ import annotations

from turnaround.domain.exceptions import TurnaroundError


class AuditChainBrokenError(TurnaroundError):
    """Raised when audit log verification or replay fails.

    This error should NEVER be caught and ignored: a broken chain means the
    log can no longer reconstruct the turnaround.

    Attributes:
        turnaround_id: Turnaround the log belongs to.
        sequence: Sequence number of the offending record (0 if none).
        reason: What failed.
    """

    def __init__(self, turnaround_id: str, sequence: int, reason: str) -> None:
        self.turnaround_id = turnaround_id
        self.sequence = sequence
        self.reason = reason
        super().__init__(
            f"Audit chain broken for turnaround {turnaround_id} "
            f"at sequence {sequence}: {reason}"
        )


class AuditRecordDeletionError(TurnaroundError):
    """Raised on any attempt to delete an audit record.

    The audit log is append-only; records are never mutated or removed.
    """

    def __init__(self, sequence: int | None = None) -> None:
        self.sequence = sequence
        target = f"record {sequence}" if sequence is not None else "records"
        super().__init__(f"Deletion prohibited - audit {target} are append-only")

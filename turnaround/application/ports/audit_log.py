"""Audit log port.

The audit log is the append-only, hash-chained record of every turnaround
transition and the sole ingestion source for downstream consumers
(reporting projection, badge issuance, external analytics).
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from turnaround.domain.events.audit_record import AuditRecord
from turnaround.domain.events.turnaround import TurnaroundEventPayload


class AuditLogProtocol(Protocol):
    """Append-only storage of audit records, one chain per turnaround.

    Implementations assign sequence numbers and hash links; records are
    never updated or deleted.
    """

    async def append(
        self,
        turnaround_id: str,
        payload: TurnaroundEventPayload,
        recorded_at: datetime,
    ) -> AuditRecord:
        """Append a payload as the next record of the turnaround's chain.

        Args:
            turnaround_id: Turnaround the record belongs to.
            payload: The event payload to record.
            recorded_at: Append instant.

        Returns:
            The stored record with sequence and hashes assigned.
        """
        ...

    async def read(self, turnaround_id: str) -> list[AuditRecord]:
        """Read the full chain of a turnaround, in append order.

        Returns:
            All records, or an empty list for an unknown turnaround.
        """
        ...

    async def read_since(self, turnaround_id: str, after_sequence: int) -> list[AuditRecord]:
        """Read records with sequence greater than ``after_sequence``."""
        ...

    async def head(self, turnaround_id: str) -> AuditRecord | None:
        """Return the latest record of a turnaround, None if empty."""
        ...

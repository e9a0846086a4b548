"""In-memory audit log (stub implementation of AuditLogProtocol).

Keeps one hash chain per turnaround in process memory. Suitable for tests,
the simulation script and single-process deployments.
"""

from __future__ import annotations

import asyncio
from datetime import datetime

from turnaround.application.ports.audit_log import AuditLogProtocol
from turnaround.domain.events.audit_record import AuditRecord
from turnaround.domain.events.turnaround import TurnaroundEventPayload


class AuditLogStub(AuditLogProtocol):
    """Append-only in-memory audit log.

    Thread-safety: Uses asyncio Lock so sequence assignment and hash
    linking happen atomically per append.

    Attributes:
        _chains: Map of turnaround id to its records, in append order.
        _lock: Async lock guarding appends.
    """

    def __init__(self) -> None:
        """Initialize the stub with empty storage."""
        self._chains: dict[str, list[AuditRecord]] = {}
        self._lock = asyncio.Lock()

    async def append(
        self,
        turnaround_id: str,
        payload: TurnaroundEventPayload,
        recorded_at: datetime,
    ) -> AuditRecord:
        """Append a payload as the next record of the turnaround's chain."""
        async with self._lock:
            chain = self._chains.setdefault(turnaround_id, [])
            previous = chain[-1] if chain else None
            record = AuditRecord.create(
                turnaround_id=turnaround_id,
                sequence=len(chain) + 1,
                payload=payload,
                recorded_at=recorded_at,
                previous_content_hash=previous.content_hash if previous else None,
            )
            chain.append(record)
            return record

    async def read(self, turnaround_id: str) -> list[AuditRecord]:
        return list(self._chains.get(turnaround_id, ()))

    async def read_since(self, turnaround_id: str, after_sequence: int) -> list[AuditRecord]:
        return [r for r in self._chains.get(turnaround_id, ()) if r.sequence > after_sequence]

    async def head(self, turnaround_id: str) -> AuditRecord | None:
        chain = self._chains.get(turnaround_id)
        return chain[-1] if chain else None

    def tamper(self, turnaround_id: str, sequence: int, record: AuditRecord) -> None:
        """Overwrite a stored record in place (test helper).

        Exists only so tests can prove that chain verification catches
        edits; production adapters have no equivalent.
        """
        self._chains[turnaround_id][sequence - 1] = record

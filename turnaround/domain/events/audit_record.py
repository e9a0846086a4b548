"""Audit record entity.

An AuditRecord is one entry of a turnaround's append-only audit log. Each
record is linked to its predecessor through ``prev_hash`` and carries a
``content_hash`` over its own fields, so a consumer replaying the log can
detect gaps and edits before trusting the reconstructed state.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any

from turnaround.domain.errors.audit_log import (
    AuditChainBrokenError,
    AuditRecordDeletionError,
)
from turnaround.domain.events.hash_utils import (
    GENESIS_HASH,
    HASH_ALG_VERSION,
    compute_record_hash,
    get_prev_hash,
)
from turnaround.domain.events.turnaround import (
    TURNAROUND_CREATED_EVENT_TYPE,
    TurnaroundEventPayload,
    payload_from_dict,
)


@dataclass(frozen=True, eq=True)
class AuditRecord:
    """One append-only, hash-chained audit log entry.

    Attributes:
        turnaround_id: Off-chain identifier of the turnaround.
        sequence: 1-based, gap-free position in the turnaround's log.
        event_type: Event type constant of the payload.
        payload: Serialized event payload, frozen on construction.
        recorded_at: When the record was appended.
        prev_hash: content_hash of the previous record, GENESIS_HASH first.
        content_hash: SHA-256 over all the fields above.
        hash_alg_version: Version of the hash algorithm used.
    """

    turnaround_id: str
    sequence: int
    event_type: str
    payload: MappingProxyType[str, Any] | dict[str, Any]
    recorded_at: datetime
    prev_hash: str
    content_hash: str
    hash_alg_version: int = field(default=HASH_ALG_VERSION)

    def __post_init__(self) -> None:
        """Validate fields and freeze the payload dict."""
        if not isinstance(self.sequence, int) or self.sequence < 1:
            raise ValueError(f"sequence must be a positive integer, got {self.sequence}")
        if not isinstance(self.event_type, str) or not self.event_type.strip():
            raise ValueError("event_type must be non-empty string")
        if isinstance(self.payload, dict):
            object.__setattr__(self, "payload", MappingProxyType(self.payload))
        elif not isinstance(self.payload, MappingProxyType):
            raise ValueError(
                f"payload must be dict, got {type(self.payload).__name__}"
            )

    @classmethod
    def create(
        cls,
        *,
        turnaround_id: str,
        sequence: int,
        payload: TurnaroundEventPayload,
        recorded_at: datetime,
        previous_content_hash: str | None,
    ) -> AuditRecord:
        """Build the next record of a chain, computing both hashes.

        Args:
            turnaround_id: Off-chain identifier of the turnaround.
            sequence: Position of the new record.
            payload: The event payload to record.
            recorded_at: Append instant.
            previous_content_hash: content_hash of record ``sequence - 1``.

        Returns:
            The new, fully hashed record.
        """
        prev_hash = get_prev_hash(sequence, previous_content_hash)
        data = payload.to_dict()
        content_hash = compute_record_hash(
            {
                "turnaround_id": turnaround_id,
                "sequence": sequence,
                "event_type": payload.event_type,
                "payload": data,
                "recorded_at": recorded_at,
                "prev_hash": prev_hash,
            }
        )
        return cls(
            turnaround_id=turnaround_id,
            sequence=sequence,
            event_type=payload.event_type,
            payload=data,
            recorded_at=recorded_at,
            prev_hash=prev_hash,
            content_hash=content_hash,
        )

    def compute_hash(self) -> str:
        """Recompute the content hash from the record's current fields."""
        return compute_record_hash(
            {
                "turnaround_id": self.turnaround_id,
                "sequence": self.sequence,
                "event_type": self.event_type,
                "payload": self.payload,
                "recorded_at": self.recorded_at,
                "prev_hash": self.prev_hash,
            }
        )

    def typed_payload(self) -> TurnaroundEventPayload:
        return payload_from_dict(self.event_type, dict(self.payload))

    def to_dict(self) -> dict[str, Any]:
        return {
            "turnaround_id": self.turnaround_id,
            "sequence": self.sequence,
            "event_type": self.event_type,
            "payload": dict(self.payload),
            "recorded_at": self.recorded_at.isoformat(),
            "prev_hash": self.prev_hash,
            "content_hash": self.content_hash,
            "hash_alg_version": self.hash_alg_version,
        }

    def delete(self) -> None:
        """Records are append-only; deletion always raises."""
        raise AuditRecordDeletionError(self.sequence)


def verify_chain(records: Sequence[AuditRecord]) -> None:
    """Verify a turnaround's audit log end to end.

    Checks that the log opens with the creation record, that sequence
    numbers run 1..n without gaps, that all records belong to the same
    turnaround, that each prev_hash links to its predecessor and that each
    content_hash matches the record.

    Args:
        records: The full log, in append order.

    Raises:
        AuditChainBrokenError: On the first inconsistency found.
    """
    if not records:
        raise AuditChainBrokenError("<unknown>", 0, "audit log is empty")

    turnaround_id = records[0].turnaround_id
    if records[0].event_type != TURNAROUND_CREATED_EVENT_TYPE:
        raise AuditChainBrokenError(
            turnaround_id,
            records[0].sequence,
            f"log must open with {TURNAROUND_CREATED_EVENT_TYPE}, got {records[0].event_type}",
        )

    expected_prev = GENESIS_HASH
    for expected_sequence, record in enumerate(records, start=1):
        if record.turnaround_id != turnaround_id:
            raise AuditChainBrokenError(
                turnaround_id,
                record.sequence,
                f"record belongs to turnaround {record.turnaround_id}",
            )
        if record.sequence != expected_sequence:
            raise AuditChainBrokenError(
                turnaround_id,
                record.sequence,
                f"sequence gap: expected {expected_sequence}",
            )
        if record.prev_hash != expected_prev:
            raise AuditChainBrokenError(
                turnaround_id, record.sequence, "prev_hash does not link to previous record"
            )
        if record.compute_hash() != record.content_hash:
            raise AuditChainBrokenError(
                turnaround_id, record.sequence, "content_hash does not match record"
            )
        expected_prev = record.content_hash

"""Rebuild a turnaround from its audit log.

Downstream consumers (reporting, auditors) own no state of their own: they
verify the chain, then replay the records from TurnaroundCreated forward
through the same ``apply`` the aggregate uses for live commands.
"""

from __future__ import annotations

from collections.abc import Sequence

from turnaround.domain.entities.turnaround_checklist import TurnaroundChecklist
from turnaround.domain.errors.audit_log import AuditChainBrokenError
from turnaround.domain.errors.certification import CertificationHashMismatchError
from turnaround.domain.events.audit_record import AuditRecord, verify_chain
from turnaround.domain.events.turnaround import (
    TurnaroundCreatedPayload,
    TurnaroundEventPayload,
)
from turnaround.domain.models.policy import DEFAULT_TURNAROUND_POLICY, TurnaroundPolicy
from turnaround.domain.services.certification_sealer import verify_certification


def _decode(record: AuditRecord) -> TurnaroundEventPayload:
    try:
        return record.typed_payload()
    except (KeyError, ValueError) as exc:
        raise AuditChainBrokenError(
            record.turnaround_id, record.sequence, f"record cannot be decoded: {exc}"
        ) from exc


def replay_audit_log(
    records: Sequence[AuditRecord],
    policy: TurnaroundPolicy = DEFAULT_TURNAROUND_POLICY,
) -> TurnaroundChecklist:
    """Verify a log and rebuild the turnaround it describes.

    Args:
        records: The full log of one turnaround, in append order.
        policy: Policy to attach to the rebuilt aggregate.

    Returns:
        The reconstructed aggregate.

    Raises:
        AuditChainBrokenError: If the chain does not verify, a record
            cannot be applied, or the recorded certification hash does not
            match its sealed inputs.
    """
    verify_chain(records)

    first = records[0]
    created = _decode(first)
    if not isinstance(created, TurnaroundCreatedPayload):
        raise AuditChainBrokenError(
            first.turnaround_id,
            first.sequence,
            f"log must start with TurnaroundCreated, got {first.event_type}",
        )
    checklist = TurnaroundChecklist(created.header, created.tasks, policy)

    for record in records[1:]:
        try:
            checklist.apply(_decode(record))
        except (KeyError, ValueError) as exc:
            raise AuditChainBrokenError(
                record.turnaround_id, record.sequence, f"record cannot be replayed: {exc}"
            ) from exc

    if checklist.certification is not None:
        try:
            verify_certification(checklist.turnaround_id, checklist.certification)
        except CertificationHashMismatchError as exc:
            raise AuditChainBrokenError(
                checklist.turnaround_id, len(records), str(exc)
            ) from exc

    return checklist

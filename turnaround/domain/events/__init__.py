"""Turnaround events and the hash-chained audit record."""

from turnaround.domain.events.audit_record import AuditRecord, verify_chain
from turnaround.domain.events.hash_utils import (
    GENESIS_HASH,
    HASH_ALG_NAME,
    HASH_ALG_VERSION,
    canonical_json,
    sha256_canonical,
)
from turnaround.domain.events.turnaround import (
    ACTOR_ASSIGNED_EVENT_TYPE,
    BADGE_ISSUED_EVENT_TYPE,
    DELAY_JUSTIFIED_EVENT_TYPE,
    MANDATORY_TASK_CHANGED_EVENT_TYPE,
    TASK_COMPLETED_EVENT_TYPE,
    TURNAROUND_CERTIFIED_EVENT_TYPE,
    TURNAROUND_CREATED_EVENT_TYPE,
    ActorAssignedPayload,
    BadgeIssuedPayload,
    DelayJustifiedPayload,
    MandatoryTaskChangedPayload,
    TaskCompletedPayload,
    TurnaroundCertifiedPayload,
    TurnaroundCreatedPayload,
    TurnaroundEventPayload,
    payload_from_dict,
)

__all__: list[str] = [
    "ACTOR_ASSIGNED_EVENT_TYPE",
    "BADGE_ISSUED_EVENT_TYPE",
    "DELAY_JUSTIFIED_EVENT_TYPE",
    "GENESIS_HASH",
    "HASH_ALG_NAME",
    "HASH_ALG_VERSION",
    "MANDATORY_TASK_CHANGED_EVENT_TYPE",
    "TASK_COMPLETED_EVENT_TYPE",
    "TURNAROUND_CERTIFIED_EVENT_TYPE",
    "TURNAROUND_CREATED_EVENT_TYPE",
    "ActorAssignedPayload",
    "AuditRecord",
    "BadgeIssuedPayload",
    "DelayJustifiedPayload",
    "MandatoryTaskChangedPayload",
    "TaskCompletedPayload",
    "TurnaroundCertifiedPayload",
    "TurnaroundCreatedPayload",
    "TurnaroundEventPayload",
    "canonical_json",
    "payload_from_dict",
    "sha256_canonical",
    "verify_chain",
]

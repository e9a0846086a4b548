"""Turnaround event types and payloads.

Every state transition of a turnaround is described by one payload from
this module. Payloads are what the aggregate emits, what the audit log
stores (via ``to_dict``) and what replay feeds back into the aggregate (via
``from_dict``). Together, starting from TurnaroundCreated, they are enough
to rebuild the full turnaround state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, Union

from turnaround.domain.models.actor import Actor
from turnaround.domain.models.badge import BadgeRecord
from turnaround.domain.models.task import TaskDefinition, TaskStatus
from turnaround.domain.models.turnaround import TurnaroundHeader

# Event type constants following lowercase.dot.notation convention
TURNAROUND_CREATED_EVENT_TYPE: str = "turnaround.created"
ACTOR_ASSIGNED_EVENT_TYPE: str = "turnaround.actor.assigned"
TASK_COMPLETED_EVENT_TYPE: str = "turnaround.task.completed"
DELAY_JUSTIFIED_EVENT_TYPE: str = "turnaround.task.delay_justified"
MANDATORY_TASK_CHANGED_EVENT_TYPE: str = "turnaround.task.mandatory_changed"
TURNAROUND_CERTIFIED_EVENT_TYPE: str = "turnaround.certified"
BADGE_ISSUED_EVENT_TYPE: str = "turnaround.badge.issued"


@dataclass(frozen=True, eq=True)
class TurnaroundCreatedPayload:
    """Payload for turnaround creation.

    Carries the full task template so that replay needs nothing beyond the
    log itself.

    Attributes:
        header: Identity and schedule of the new turnaround.
        tasks: The initial task definitions, ordered by task id.
        created_by: Identity that created the turnaround.
    """

    event_type: ClassVar[str] = TURNAROUND_CREATED_EVENT_TYPE

    header: TurnaroundHeader
    tasks: tuple[TaskDefinition, ...]
    created_by: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "header": self.header.to_dict(),
            "tasks": [t.to_dict() for t in self.tasks],
            "created_by": self.created_by,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TurnaroundCreatedPayload:
        return cls(
            header=TurnaroundHeader.from_dict(data["header"]),
            tasks=tuple(TaskDefinition.from_dict(t) for t in data["tasks"]),
            created_by=data["created_by"],
        )


@dataclass(frozen=True, eq=True)
class ActorAssignedPayload:
    """Payload for a role being (re)assigned to an identity."""

    event_type: ClassVar[str] = ACTOR_ASSIGNED_EVENT_TYPE

    actor: Actor
    identity: str
    assigned_by: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "actor": self.actor.value,
            "identity": self.identity,
            "assigned_by": self.assigned_by,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ActorAssignedPayload:
        return cls(
            actor=Actor(data["actor"]),
            identity=data["identity"],
            assigned_by=data["assigned_by"],
        )


@dataclass(frozen=True, eq=True)
class TaskCompletedPayload:
    """Payload for the single, irreversible completion of a task.

    Attributes:
        task_id: Completed task.
        actor: Role the task is assigned to.
        completed_at: Completion instant supplied by the caller.
        status: ON_TIME or LATE, fixed at this moment.
        completed_by: Identity that completed the task.
    """

    event_type: ClassVar[str] = TASK_COMPLETED_EVENT_TYPE

    task_id: int
    actor: Actor
    completed_at: datetime
    status: TaskStatus
    completed_by: str

    def __post_init__(self) -> None:
        if not self.status.is_terminal():
            raise ValueError("TaskCompleted status must be ON_TIME or LATE")

    def to_dict(self) -> dict[str, Any]:
        return {
            "task_id": self.task_id,
            "actor": self.actor.value,
            "completed_at": self.completed_at.isoformat(),
            "status": self.status.value,
            "completed_by": self.completed_by,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TaskCompletedPayload:
        return cls(
            task_id=int(data["task_id"]),
            actor=Actor(data["actor"]),
            completed_at=datetime.fromisoformat(data["completed_at"]),
            status=TaskStatus(data["status"]),
            completed_by=data["completed_by"],
        )


@dataclass(frozen=True, eq=True)
class DelayJustifiedPayload:
    """Payload for a delay justification stored on a late task."""

    event_type: ClassVar[str] = DELAY_JUSTIFIED_EVENT_TYPE

    task_id: int
    justification: str
    justified_by: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "task_id": self.task_id,
            "justification": self.justification,
            "justified_by": self.justified_by,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DelayJustifiedPayload:
        return cls(
            task_id=int(data["task_id"]),
            justification=data["justification"],
            justified_by=data["justified_by"],
        )


@dataclass(frozen=True, eq=True)
class MandatoryTaskChangedPayload:
    """Payload for a change of a task's mandatory flag."""

    event_type: ClassVar[str] = MANDATORY_TASK_CHANGED_EVENT_TYPE

    task_id: int
    mandatory: bool
    changed_by: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "task_id": self.task_id,
            "mandatory": self.mandatory,
            "changed_by": self.changed_by,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MandatoryTaskChangedPayload:
        return cls(
            task_id=int(data["task_id"]),
            mandatory=bool(data["mandatory"]),
            changed_by=data["changed_by"],
        )


@dataclass(frozen=True, eq=True)
class TurnaroundCertifiedPayload:
    """Payload for the one-way certification of a turnaround.

    Attributes:
        actual_departure: Departure instant recorded at sealing.
        sealed_at: Instant the seal was applied.
        on_time: On-time count at sealing.
        late_unjustified: Unjustified late count at sealing.
        certification_hash: SHA-256 commitment over the sealed inputs.
        certified_by: Identity that certified.
    """

    event_type: ClassVar[str] = TURNAROUND_CERTIFIED_EVENT_TYPE

    actual_departure: datetime
    sealed_at: datetime
    on_time: int
    late_unjustified: int
    certification_hash: str
    certified_by: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "actual_departure": self.actual_departure.isoformat(),
            "sealed_at": self.sealed_at.isoformat(),
            "on_time": self.on_time,
            "late_unjustified": self.late_unjustified,
            "certification_hash": self.certification_hash,
            "certified_by": self.certified_by,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TurnaroundCertifiedPayload:
        return cls(
            actual_departure=datetime.fromisoformat(data["actual_departure"]),
            sealed_at=datetime.fromisoformat(data["sealed_at"]),
            on_time=int(data["on_time"]),
            late_unjustified=int(data["late_unjustified"]),
            certification_hash=data["certification_hash"],
            certified_by=data["certified_by"],
        )


@dataclass(frozen=True, eq=True)
class BadgeIssuedPayload:
    """Payload recording a badge issued by the downstream issuer.

    Badge issuance does not change turnaround state; the record exists so
    that reporting consumers see issuance in the same ordered stream.
    """

    event_type: ClassVar[str] = BADGE_ISSUED_EVENT_TYPE

    badge: BadgeRecord

    def to_dict(self) -> dict[str, Any]:
        return {"badge": self.badge.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BadgeIssuedPayload:
        return cls(badge=BadgeRecord.from_dict(data["badge"]))


TurnaroundEventPayload = Union[
    TurnaroundCreatedPayload,
    ActorAssignedPayload,
    TaskCompletedPayload,
    DelayJustifiedPayload,
    MandatoryTaskChangedPayload,
    TurnaroundCertifiedPayload,
    BadgeIssuedPayload,
]

PAYLOAD_TYPES: dict[str, type[TurnaroundEventPayload]] = {
    TURNAROUND_CREATED_EVENT_TYPE: TurnaroundCreatedPayload,
    ACTOR_ASSIGNED_EVENT_TYPE: ActorAssignedPayload,
    TASK_COMPLETED_EVENT_TYPE: TaskCompletedPayload,
    DELAY_JUSTIFIED_EVENT_TYPE: DelayJustifiedPayload,
    MANDATORY_TASK_CHANGED_EVENT_TYPE: MandatoryTaskChangedPayload,
    TURNAROUND_CERTIFIED_EVENT_TYPE: TurnaroundCertifiedPayload,
    BADGE_ISSUED_EVENT_TYPE: BadgeIssuedPayload,
}


def payload_from_dict(event_type: str, data: dict[str, Any]) -> TurnaroundEventPayload:
    """Rebuild a typed payload from its stored dictionary.

    Raises:
        ValueError: If the event type is unknown.
    """
    payload_cls = PAYLOAD_TYPES.get(event_type)
    if payload_cls is None:
        raise ValueError(f"Unknown turnaround event type: {event_type!r}")
    return payload_cls.from_dict(data)

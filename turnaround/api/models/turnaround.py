"""Turnaround API request/response models.

Pydantic models for the turnaround checklist endpoints. Every instant
crossing the API must carry a timezone offset.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AwareDatetime, BaseModel, Field

from turnaround.domain.events.audit_record import AuditRecord
from turnaround.domain.models.badge import BadgeRecord
from turnaround.domain.models.kpi import ActorPerformance, KpiSnapshot
from turnaround.domain.models.task import TurnaroundTask

# =============================================================================
# Requests
# =============================================================================


class CreateTurnaroundRequest(BaseModel):
    """Request to open a new turnaround with the standard task template."""

    off_chain_id: str = Field(
        ...,
        min_length=1,
        description="Opaque turnaround identifier",
        examples=["TA-2024-0001"],
    )
    airport_code: str = Field(
        ...,
        description="IATA airport code",
        examples=["LIS"],
    )
    scheduled_arrival: AwareDatetime = Field(..., description="Scheduled on-block time")
    scheduled_departure: AwareDatetime = Field(..., description="Scheduled off-block time")
    flight_number: str | None = Field(default=None, examples=["TP1234"])
    airline_code: str | None = Field(default=None, examples=["TP"])


class AssignActorRequest(BaseModel):
    identity: str = Field(..., min_length=1, description="Identity to act for the role")


class CompleteTaskRequest(BaseModel):
    completed_at: AwareDatetime | None = Field(
        default=None,
        description="Completion instant; defaults to the server clock",
    )


class JustifyDelayRequest(BaseModel):
    justification: str = Field(..., description="Reason for the delay")


class SetMandatoryRequest(BaseModel):
    mandatory: bool


class CertifyRequest(BaseModel):
    certified_at: AwareDatetime | None = Field(
        default=None,
        description="Sealing instant and actual departure; defaults to the server clock",
    )


# =============================================================================
# Responses
# =============================================================================


class TaskResponse(BaseModel):
    """One task record."""

    task_id: int
    name: str
    actor: str
    deadline: datetime
    mandatory: bool
    status: str
    completed_at: datetime | None = None
    completed_by: str | None = None
    justification: str = ""

    @classmethod
    def from_task(cls, task: TurnaroundTask) -> TaskResponse:
        return cls(
            task_id=task.task_id,
            name=task.name,
            actor=task.actor.value,
            deadline=task.deadline,
            mandatory=task.mandatory,
            status=task.status.value,
            completed_at=task.completed_at,
            completed_by=task.completed_by,
            justification=task.justification,
        )


class CertificationResponse(BaseModel):
    actual_departure: datetime
    sealed_at: datetime
    on_time: int
    late_unjustified: int
    certification_hash: str
    sla_breached: bool


class TurnaroundResponse(BaseModel):
    """Header, role assignment and tasks of a turnaround."""

    off_chain_id: str
    airport_code: str
    flight_number: str | None = None
    airline_code: str | None = None
    scheduled_arrival: datetime
    scheduled_departure: datetime
    is_certified: bool
    certification: CertificationResponse | None = None
    roles: dict[str, str] = Field(default_factory=dict)
    tasks: list[TaskResponse] = Field(default_factory=list)


class TurnaroundListResponse(BaseModel):
    turnaround_ids: list[str]
    total_count: int


class ActorAssignmentResponse(BaseModel):
    actor: str
    identity: str
    assigned_by: str


class KpiResponse(BaseModel):
    """Live KPI counters."""

    total: int
    mandatory_tasks: int
    completed: int
    pending: int
    on_time: int
    late: int
    late_justified: int
    late_unjustified: int
    mandatory_incomplete: int
    sla_breached: bool
    on_time_percentage: float

    @classmethod
    def from_snapshot(cls, snapshot: KpiSnapshot) -> KpiResponse:
        return cls(**snapshot.to_dict(), on_time_percentage=snapshot.on_time_percentage)


class OperationalDurationResponse(BaseModel):
    is_certified: bool
    duration_seconds: float
    duration_minutes: float


class ActorPerformanceResponse(BaseModel):
    actor: str
    identity: str | None = None
    tasks_assigned: int
    tasks_completed: int
    tasks_on_time: int
    tasks_late: int
    tasks_justified: int
    tasks_unjustified_late: int
    participated: bool
    badge_eligible: bool

    @classmethod
    def from_performance(cls, performance: ActorPerformance) -> ActorPerformanceResponse:
        return cls(**performance.to_dict())


class AuditRecordResponse(BaseModel):
    """One audit log record."""

    turnaround_id: str
    sequence: int
    event_type: str
    payload: dict[str, Any]
    recorded_at: datetime
    prev_hash: str
    content_hash: str
    hash_alg_version: int

    @classmethod
    def from_record(cls, record: AuditRecord) -> AuditRecordResponse:
        return cls(
            turnaround_id=record.turnaround_id,
            sequence=record.sequence,
            event_type=record.event_type,
            payload=dict(record.payload),
            recorded_at=record.recorded_at,
            prev_hash=record.prev_hash,
            content_hash=record.content_hash,
            hash_alg_version=record.hash_alg_version,
        )


class BadgeResponse(BaseModel):
    token_id: int
    turnaround_id: str
    actor: str
    identity: str
    metadata_uri: str
    issued_at: datetime

    @classmethod
    def from_badge(cls, badge: BadgeRecord) -> BadgeResponse:
        return cls(
            token_id=badge.token_id,
            turnaround_id=badge.turnaround_id,
            actor=badge.actor.value,
            identity=badge.identity,
            metadata_uri=badge.metadata_uri,
            issued_at=badge.issued_at,
        )


class ReportResponse(BaseModel):
    """Reporting projection rebuilt from the audit log."""

    turnaround: dict[str, Any]
    tasks: list[dict[str, Any]]
    actor_performance: list[dict[str, Any]]
    kpi_summary: dict[str, Any]
    badges: list[dict[str, Any]]
    audit_sequence: int


class TurnaroundErrorResponse(BaseModel):
    """Error body returned for rejected requests.

    Attributes:
        error: Name of the domain error.
        message: Human-readable description.
        outstanding_task_ids: Incomplete mandatory tasks, when certification
            was refused for that reason.
    """

    error: str
    message: str
    outstanding_task_ids: list[int] | None = None

"""Reporting projection service.

Builds the flat reporting view of a turnaround (header, task executions,
actor performance, KPI summary, badges) purely from its audit log. The
log is verified and replayed first, so the projection can never show a
state the log does not prove.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from turnaround.application.ports.audit_log import AuditLogProtocol
from turnaround.application.services.base import LoggingMixin
from turnaround.domain.errors.turnaround import TurnaroundNotFoundError
from turnaround.domain.events.turnaround import BadgeIssuedPayload
from turnaround.domain.models.badge import BadgeRecord
from turnaround.domain.models.kpi import ActorPerformance
from turnaround.domain.models.policy import DEFAULT_TURNAROUND_POLICY, TurnaroundPolicy
from turnaround.domain.services.audit_replay import replay_audit_log

SLA_BREACHED = "Breached"
SLA_COMPLIANT = "Compliant"


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class TurnaroundRow:
    """One row per turnaround."""

    turnaround_id: str
    airport_code: str
    flight_number: str | None
    airline_code: str | None
    scheduled_arrival: datetime
    scheduled_departure: datetime
    actual_departure: datetime | None
    is_certified: bool
    certification_hash: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "turnaround_id": self.turnaround_id,
            "airport_code": self.airport_code,
            "flight_number": self.flight_number,
            "airline_code": self.airline_code,
            "scheduled_arrival": self.scheduled_arrival.isoformat(),
            "scheduled_departure": self.scheduled_departure.isoformat(),
            "actual_departure": _iso(self.actual_departure),
            "is_certified": self.is_certified,
            "certification_hash": self.certification_hash,
        }


@dataclass(frozen=True)
class TaskExecutionRow:
    """One row per task of a turnaround."""

    turnaround_id: str
    task_id: int
    name: str
    actor: str
    mandatory: bool
    deadline: datetime
    status: str
    completed_at: datetime | None
    completed_by: str | None
    delay_minutes: float | None
    justification: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "turnaround_id": self.turnaround_id,
            "task_id": self.task_id,
            "name": self.name,
            "actor": self.actor,
            "mandatory": self.mandatory,
            "deadline": self.deadline.isoformat(),
            "status": self.status,
            "completed_at": _iso(self.completed_at),
            "completed_by": self.completed_by,
            "delay_minutes": self.delay_minutes,
            "justification": self.justification,
        }


@dataclass(frozen=True)
class KpiSummaryRow:
    """Headline KPIs of a turnaround."""

    turnaround_id: str
    total_tasks: int
    mandatory_tasks: int
    completed_tasks: int
    on_time_tasks: int
    late_tasks: int
    late_unjustified_tasks: int
    on_time_percentage: float
    operational_duration_min: float
    sla_status: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "turnaround_id": self.turnaround_id,
            "total_tasks": self.total_tasks,
            "mandatory_tasks": self.mandatory_tasks,
            "completed_tasks": self.completed_tasks,
            "on_time_tasks": self.on_time_tasks,
            "late_tasks": self.late_tasks,
            "late_unjustified_tasks": self.late_unjustified_tasks,
            "on_time_percentage": self.on_time_percentage,
            "operational_duration_min": self.operational_duration_min,
            "sla_status": self.sla_status,
        }


@dataclass(frozen=True)
class TurnaroundReport:
    """The complete projection of one turnaround."""

    turnaround: TurnaroundRow
    tasks: tuple[TaskExecutionRow, ...]
    actor_performance: tuple[ActorPerformance, ...]
    kpi_summary: KpiSummaryRow
    badges: tuple[BadgeRecord, ...]
    audit_sequence: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "turnaround": self.turnaround.to_dict(),
            "tasks": [row.to_dict() for row in self.tasks],
            "actor_performance": [row.to_dict() for row in self.actor_performance],
            "kpi_summary": self.kpi_summary.to_dict(),
            "badges": [badge.to_dict() for badge in self.badges],
            "audit_sequence": self.audit_sequence,
        }


class ReportingProjectionService(LoggingMixin):
    """Projects audit logs into reporting rows."""

    def __init__(
        self,
        audit_log: AuditLogProtocol,
        policy: TurnaroundPolicy = DEFAULT_TURNAROUND_POLICY,
    ) -> None:
        self._audit_log = audit_log
        self._policy = policy
        self._init_logger(component="reporting")

    async def build_report(self, turnaround_id: str) -> TurnaroundReport:
        """Verify, replay and project the log of one turnaround.

        Raises:
            TurnaroundNotFoundError: If the log holds no such turnaround.
            AuditChainBrokenError: If the log does not verify.
        """
        log = self._log_operation("build_report", turnaround_id=turnaround_id)
        records = await self._audit_log.read(turnaround_id)
        if not records:
            raise TurnaroundNotFoundError(turnaround_id)

        checklist = replay_audit_log(records, self._policy)
        header = checklist.header
        kpis = checklist.get_kpis()

        task_rows = []
        for task in checklist.list_tasks():
            delay = None
            if task.completed_at is not None and task.is_late:
                delay = round((task.completed_at - task.deadline).total_seconds() / 60, 2)
            task_rows.append(
                TaskExecutionRow(
                    turnaround_id=turnaround_id,
                    task_id=task.task_id,
                    name=task.name,
                    actor=task.actor.value,
                    mandatory=task.mandatory,
                    deadline=task.deadline,
                    status=task.status.value,
                    completed_at=task.completed_at,
                    completed_by=task.completed_by,
                    delay_minutes=delay,
                    justification=task.justification,
                )
            )

        badges = tuple(
            payload.badge
            for payload in (record.typed_payload() for record in records)
            if isinstance(payload, BadgeIssuedPayload)
        )

        report = TurnaroundReport(
            turnaround=TurnaroundRow(
                turnaround_id=turnaround_id,
                airport_code=header.airport_code,
                flight_number=header.flight_number,
                airline_code=header.airline_code,
                scheduled_arrival=header.scheduled_arrival,
                scheduled_departure=header.scheduled_departure,
                actual_departure=header.actual_departure,
                is_certified=header.is_certified,
                certification_hash=header.certification_hash,
            ),
            tasks=tuple(task_rows),
            actor_performance=checklist.get_actor_performance(),
            kpi_summary=KpiSummaryRow(
                turnaround_id=turnaround_id,
                total_tasks=kpis.total,
                mandatory_tasks=kpis.mandatory_tasks,
                completed_tasks=kpis.completed,
                on_time_tasks=kpis.on_time,
                late_tasks=kpis.late,
                late_unjustified_tasks=kpis.late_unjustified,
                on_time_percentage=kpis.on_time_percentage,
                operational_duration_min=round(
                    checklist.get_operational_duration().total_seconds() / 60, 2
                ),
                sla_status=SLA_BREACHED if kpis.sla_breached else SLA_COMPLIANT,
            ),
            badges=badges,
            audit_sequence=records[-1].sequence,
        )
        log.info(
            "report_built",
            audit_sequence=report.audit_sequence,
            sla_status=report.kpi_summary.sla_status,
        )
        return report

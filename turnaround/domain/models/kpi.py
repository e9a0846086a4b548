"""KPI domain models.

KpiSnapshot holds the aggregate counters over all tasks of a turnaround.
ActorPerformance holds the same outcomes rolled up per role; it is what the
badge issuance and reporting collaborators consume.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from turnaround.domain.models.actor import Actor


@dataclass(frozen=True, eq=True)
class KpiSnapshot:
    """Aggregate task counters at one point in time.

    Attributes:
        total: Number of tasks.
        mandatory_tasks: Tasks currently flagged mandatory.
        completed: Tasks in a terminal status.
        pending: Tasks still pending.
        on_time: Tasks completed at or before their deadline.
        late: Tasks completed after their deadline.
        late_justified: Late tasks carrying a justification.
        late_unjustified: Late tasks without justification.
        mandatory_incomplete: Mandatory tasks still pending.
    """

    total: int
    mandatory_tasks: int
    completed: int
    pending: int
    on_time: int
    late: int
    late_justified: int
    late_unjustified: int
    mandatory_incomplete: int

    @property
    def sla_breached(self) -> bool:
        """At least one completed task is late and lacks justification."""
        return self.late_unjustified > 0

    @property
    def on_time_percentage(self) -> float:
        if self.total == 0:
            return 0.0
        return round(self.on_time * 100 / self.total, 2)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "mandatory_tasks": self.mandatory_tasks,
            "completed": self.completed,
            "pending": self.pending,
            "on_time": self.on_time,
            "late": self.late,
            "late_justified": self.late_justified,
            "late_unjustified": self.late_unjustified,
            "mandatory_incomplete": self.mandatory_incomplete,
            "sla_breached": self.sla_breached,
        }


@dataclass(frozen=True, eq=True)
class ActorPerformance:
    """Task outcomes of one role in one turnaround.

    Attributes:
        actor: The role.
        identity: Identity assigned to the role, None if unassigned.
        tasks_assigned: Tasks assigned to the role.
        tasks_completed: Of those, completed.
        tasks_on_time: Of those, on time.
        tasks_late: Of those, late.
        tasks_justified: Late tasks carrying a justification.
        tasks_unjustified_late: Late tasks without justification.
    """

    actor: Actor
    identity: str | None
    tasks_assigned: int
    tasks_completed: int
    tasks_on_time: int
    tasks_late: int
    tasks_justified: int
    tasks_unjustified_late: int

    @property
    def participated(self) -> bool:
        return self.tasks_completed > 0

    @property
    def badge_eligible(self) -> bool:
        """Participated with zero unjustified late tasks."""
        return self.participated and self.tasks_unjustified_late == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "actor": self.actor.value,
            "identity": self.identity,
            "tasks_assigned": self.tasks_assigned,
            "tasks_completed": self.tasks_completed,
            "tasks_on_time": self.tasks_on_time,
            "tasks_late": self.tasks_late,
            "tasks_justified": self.tasks_justified,
            "tasks_unjustified_late": self.tasks_unjustified_late,
            "participated": self.participated,
            "badge_eligible": self.badge_eligible,
        }

"""Domain models for the turnaround checklist."""

from turnaround.domain.models.actor import Actor, CallerContext, Privilege
from turnaround.domain.models.badge import BadgeRecord
from turnaround.domain.models.certification import CertificationRecord
from turnaround.domain.models.kpi import ActorPerformance, KpiSnapshot
from turnaround.domain.models.policy import DEFAULT_TURNAROUND_POLICY, TurnaroundPolicy
from turnaround.domain.models.role_assignment import RoleAssignment
from turnaround.domain.models.task import (
    TASK_COUNT,
    TaskDefinition,
    TaskStatus,
    TurnaroundTask,
)
from turnaround.domain.models.turnaround import TurnaroundHeader

__all__: list[str] = [
    "DEFAULT_TURNAROUND_POLICY",
    "TASK_COUNT",
    "Actor",
    "ActorPerformance",
    "BadgeRecord",
    "CallerContext",
    "CertificationRecord",
    "KpiSnapshot",
    "Privilege",
    "RoleAssignment",
    "TaskDefinition",
    "TaskStatus",
    "TurnaroundHeader",
    "TurnaroundPolicy",
    "TurnaroundTask",
]

"""Pure domain services for the turnaround checklist.

- TaskRegistry: the fixed fleet of 27 task records
- AuthorizationGuard: role identity OR operational privilege
- KpiEngine (compute_kpis, compute_actor_performance): aggregate counters
- CertificationSealer: preconditions, KPI freeze, certification hash
- generate_tasks: the default 27-task template
"""

from turnaround.domain.services.authorization_guard import AuthorizationGuard
from turnaround.domain.services.certification_sealer import (
    CertificationSealer,
    compute_certification_hash,
    verify_certification,
)
from turnaround.domain.services.kpi_engine import compute_actor_performance, compute_kpis
from turnaround.domain.services.task_registry import TaskRegistry
from turnaround.domain.services.task_templates import DEFAULT_TEMPLATE, generate_tasks

__all__: list[str] = [
    "DEFAULT_TEMPLATE",
    "AuthorizationGuard",
    "CertificationSealer",
    "TaskRegistry",
    "compute_actor_performance",
    "compute_certification_hash",
    "compute_kpis",
    "generate_tasks",
    "verify_certification",
]

"""KpiEngine: aggregate counters derived from task state.

Both reductions are pure and order-independent: the result depends only on
the set of task records passed in, never on the order they were completed
or listed. Recomputing over the same snapshot always gives the same result.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from turnaround.domain.models.actor import Actor
from turnaround.domain.models.kpi import ActorPerformance, KpiSnapshot
from turnaround.domain.models.role_assignment import RoleAssignment
from turnaround.domain.models.task import TaskStatus, TurnaroundTask


def compute_kpis(tasks: Iterable[TurnaroundTask]) -> KpiSnapshot:
    """Compute the aggregate KPI counters in a single pass.

    Pending tasks contribute to neither the on-time nor the late counters.

    Args:
        tasks: Task records of one turnaround.

    Returns:
        The KPI snapshot.
    """
    counts: Counter[str] = Counter()
    for task in tasks:
        counts["total"] += 1
        if task.mandatory:
            counts["mandatory_tasks"] += 1
            if not task.completed:
                counts["mandatory_incomplete"] += 1
        if task.status is TaskStatus.PENDING:
            counts["pending"] += 1
            continue
        counts["completed"] += 1
        if task.status is TaskStatus.ON_TIME:
            counts["on_time"] += 1
        elif task.is_justified:
            counts["late"] += 1
            counts["late_justified"] += 1
        else:
            counts["late"] += 1
            counts["late_unjustified"] += 1

    return KpiSnapshot(
        total=counts["total"],
        mandatory_tasks=counts["mandatory_tasks"],
        completed=counts["completed"],
        pending=counts["pending"],
        on_time=counts["on_time"],
        late=counts["late"],
        late_justified=counts["late_justified"],
        late_unjustified=counts["late_unjustified"],
        mandatory_incomplete=counts["mandatory_incomplete"],
    )


def compute_actor_performance(
    tasks: Iterable[TurnaroundTask],
    role_assignment: RoleAssignment,
) -> tuple[ActorPerformance, ...]:
    """Roll task outcomes up per role.

    Every role appears in the result, in Actor declaration order, even
    when it has no tasks in the template.

    Args:
        tasks: Task records of one turnaround.
        role_assignment: Current role to identity mapping.

    Returns:
        One ActorPerformance per role.
    """
    per_actor: dict[Actor, Counter[str]] = {actor: Counter() for actor in Actor}
    for task in tasks:
        counts = per_actor[task.actor]
        counts["assigned"] += 1
        if not task.completed:
            continue
        counts["completed"] += 1
        if task.status is TaskStatus.ON_TIME:
            counts["on_time"] += 1
            continue
        counts["late"] += 1
        if task.is_justified:
            counts["justified"] += 1
        else:
            counts["unjustified_late"] += 1

    return tuple(
        ActorPerformance(
            actor=actor,
            identity=role_assignment.identity_for(actor),
            tasks_assigned=counts["assigned"],
            tasks_completed=counts["completed"],
            tasks_on_time=counts["on_time"],
            tasks_late=counts["late"],
            tasks_justified=counts["justified"],
            tasks_unjustified_late=counts["unjustified_late"],
        )
        for actor, counts in per_actor.items()
    )

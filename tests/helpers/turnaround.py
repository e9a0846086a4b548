"""Builders shared by turnaround tests.

``uniform_template`` gives 27 mandatory tasks with deadlines at
T0, T0+5min, ... T0+130min, so deadline arithmetic in tests stays simple.
Roles cycle through Actor in declaration order.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from turnaround.application.services.turnaround_service import TurnaroundService
from turnaround.domain.entities.turnaround_checklist import TurnaroundChecklist
from turnaround.domain.models.actor import Actor, CallerContext, Privilege
from turnaround.domain.models.policy import DEFAULT_TURNAROUND_POLICY, TurnaroundPolicy
from turnaround.domain.models.task import TASK_COUNT, TaskDefinition

ADMIN_ID = "admin-1"
SUPERVISOR_ID = "supervisor-1"
OUTSIDER_ID = "outsider-1"

_ACTORS = tuple(Actor)


def identity_for(actor: Actor) -> str:
    """Identity the helpers assign to ``actor``."""
    return f"{actor.value.lower()}-crew"


def uniform_template(t0: datetime, mandatory: bool = True) -> tuple[TaskDefinition, ...]:
    return tuple(
        TaskDefinition(
            task_id=i,
            name=f"Task {i}",
            actor=_ACTORS[i % len(_ACTORS)],
            deadline=t0 + timedelta(minutes=5 * i),
            mandatory=mandatory,
        )
        for i in range(TASK_COUNT)
    )


def build_checklist(
    t0: datetime,
    *,
    off_chain_id: str = "TA-0001",
    tasks: tuple[TaskDefinition, ...] | None = None,
    policy: TurnaroundPolicy = DEFAULT_TURNAROUND_POLICY,
    assign_roles: bool = True,
) -> TurnaroundChecklist:
    """Create a checklist on the uniform template, roles assigned by default."""
    admin = CallerContext(ADMIN_ID, frozenset({Privilege.ADMINISTRATIVE}))
    checklist, _ = TurnaroundChecklist.create(
        off_chain_id=off_chain_id,
        airport_code="LIS",
        scheduled_arrival=t0,
        scheduled_departure=t0 + timedelta(minutes=150),
        creator=admin,
        tasks=tasks if tasks is not None else uniform_template(t0),
        policy=policy,
    )
    if assign_roles:
        assign_all_roles(checklist)
    return checklist


def assign_all_roles(checklist: TurnaroundChecklist) -> None:
    admin = CallerContext(ADMIN_ID, frozenset({Privilege.ADMINISTRATIVE}))
    for actor in Actor:
        checklist.assign_actor(admin, actor, identity_for(actor))


async def run_turnaround(
    service: TurnaroundService,
    t0: datetime,
    *,
    off_chain_id: str = "TA-0001",
    late_task_ids: Iterable[int] = (),
    justification: str | None = None,
    assign_roles: bool = True,
    certify: bool = True,
) -> None:
    """Drive a service through a whole turnaround on the uniform template.

    Each role's tasks are completed by that role's identity when roles are
    assigned, otherwise by the supervisor. Tasks in ``late_task_ids`` finish
    ten minutes past their deadline, the rest exactly on it.
    """
    late = set(late_task_ids)
    await service.create_turnaround(
        off_chain_id=off_chain_id,
        airport_code="LIS",
        scheduled_arrival=t0,
        scheduled_departure=t0 + timedelta(minutes=150),
        caller_id=ADMIN_ID,
        flight_number="TP1234",
        airline_code="TP",
        tasks=uniform_template(t0),
    )
    if assign_roles:
        for actor in Actor:
            await service.assign_actor(off_chain_id, actor, identity_for(actor), ADMIN_ID)

    for task in await service.list_tasks(off_chain_id):
        caller = identity_for(task.actor) if assign_roles else SUPERVISOR_ID
        finished = task.deadline + timedelta(minutes=10) if task.task_id in late else task.deadline
        await service.complete_task(off_chain_id, task.task_id, caller, finished)
        if task.task_id in late and justification is not None:
            await service.justify_delay(off_chain_id, task.task_id, caller, justification)

    if certify:
        await service.certify(off_chain_id, SUPERVISOR_ID, t0 + timedelta(minutes=140))

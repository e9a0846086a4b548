"""Turnaround service.

Orchestrates the TurnaroundChecklist aggregate: resolves caller privileges,
serializes every mutation of a turnaround behind that turnaround's lock, and
appends each emitted event to the audit log.

Rules:
1. VALIDATE BEFORE MUTATE - the aggregate checks everything first, so a
   rejected call leaves the turnaround untouched and logs nothing.
2. ONE WRITER PER TURNAROUND - commands on the same turnaround run one at a
   time; different turnarounds never contend.
3. RECORD BEFORE APPLY - an accepted command is appended to the audit log
   first and applied to the live aggregate only once the append succeeds,
   so live state never runs ahead of the log.
4. LOG EVERY REJECTION - domain errors and malformed input are logged at
   warning level and re-raised unchanged.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone

from turnaround.application.ports.audit_log import AuditLogProtocol
from turnaround.application.ports.privilege_registry import PrivilegeRegistryProtocol
from turnaround.application.ports.turnaround_repository import (
    TurnaroundRepositoryProtocol,
)
from turnaround.application.services.base import LoggingMixin
from turnaround.domain.entities.turnaround_checklist import TurnaroundChecklist
from turnaround.domain.errors.turnaround import (
    TurnaroundAlreadyExistsError,
    TurnaroundNotFoundError,
)
from turnaround.domain.events.audit_record import AuditRecord
from turnaround.domain.events.turnaround import (
    ActorAssignedPayload,
    DelayJustifiedPayload,
    MandatoryTaskChangedPayload,
    TaskCompletedPayload,
    TurnaroundCertifiedPayload,
)
from turnaround.domain.exceptions import TurnaroundError
from turnaround.domain.models.actor import Actor, CallerContext
from turnaround.domain.models.kpi import ActorPerformance, KpiSnapshot
from turnaround.domain.models.policy import DEFAULT_TURNAROUND_POLICY, TurnaroundPolicy
from turnaround.domain.models.task import TaskDefinition, TurnaroundTask


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TurnaroundService(LoggingMixin):
    """Application entry point for turnaround commands and queries."""

    def __init__(
        self,
        repository: TurnaroundRepositoryProtocol,
        audit_log: AuditLogProtocol,
        privileges: PrivilegeRegistryProtocol,
        policy: TurnaroundPolicy = DEFAULT_TURNAROUND_POLICY,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the service.

        Args:
            repository: Storage of live aggregates.
            audit_log: Append-only log receiving every emitted event.
            privileges: Lookup of caller privilege tiers.
            policy: Rule switches applied to new turnarounds.
            clock: Source of "now" when a caller does not supply an instant,
                and of audit record timestamps.
        """
        self._repository = repository
        self._audit_log = audit_log
        self._privileges = privileges
        self._policy = policy
        self._clock = clock
        self._locks: dict[str, asyncio.Lock] = {}
        self._init_logger()

    @property
    def policy(self) -> TurnaroundPolicy:
        return self._policy

    def _lock_for(self, turnaround_id: str) -> asyncio.Lock:
        lock = self._locks.get(turnaround_id)
        if lock is None:
            lock = self._locks[turnaround_id] = asyncio.Lock()
        return lock

    async def _resolve_caller(self, caller_id: str) -> CallerContext:
        privileges = await self._privileges.privileges_for(caller_id)
        return CallerContext(identity=caller_id, privileges=privileges)

    async def _load(self, turnaround_id: str) -> TurnaroundChecklist:
        checklist = await self._repository.get(turnaround_id)
        if checklist is None:
            raise TurnaroundNotFoundError(turnaround_id)
        return checklist

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def create_turnaround(
        self,
        *,
        off_chain_id: str,
        airport_code: str,
        scheduled_arrival: datetime,
        scheduled_departure: datetime,
        caller_id: str,
        flight_number: str | None = None,
        airline_code: str | None = None,
        tasks: Iterable[TaskDefinition] | None = None,
    ) -> TurnaroundChecklist:
        """Create a turnaround and record TurnaroundCreated.

        Args:
            off_chain_id: Opaque turnaround identifier, unique per service.
            airport_code: IATA airport code.
            scheduled_arrival: Scheduled on-block time.
            scheduled_departure: Scheduled off-block time.
            caller_id: Identity of the caller; needs administrative privilege.
            flight_number: Optional flight designator.
            airline_code: Optional IATA airline code.
            tasks: Task definitions; defaults to the standard template.

        Returns:
            The new aggregate.

        Raises:
            TurnaroundAlreadyExistsError: If off_chain_id is taken.
            UnauthorizedError: If the caller is not administrative.
            InvalidScheduleError: If arrival is not before departure.
        """
        log = self._log_operation(
            "create_turnaround", turnaround_id=off_chain_id, caller_id=caller_id
        )
        async with self._lock_for(off_chain_id):
            try:
                if await self._repository.get(off_chain_id) is not None:
                    raise TurnaroundAlreadyExistsError(off_chain_id)
                caller = await self._resolve_caller(caller_id)
                checklist, payload = TurnaroundChecklist.create(
                    off_chain_id=off_chain_id,
                    airport_code=airport_code,
                    scheduled_arrival=scheduled_arrival,
                    scheduled_departure=scheduled_departure,
                    creator=caller,
                    tasks=tasks,
                    flight_number=flight_number,
                    airline_code=airline_code,
                    policy=self._policy,
                )
            except (TurnaroundError, ValueError) as exc:
                log.warning("turnaround_creation_rejected", error=type(exc).__name__, reason=str(exc))
                raise

            record = await self._audit_log.append(off_chain_id, payload, self._clock())
            await self._repository.add(checklist)

        log.info(
            "turnaround_created",
            airport_code=checklist.header.airport_code,
            sequence=record.sequence,
        )
        return checklist

    async def assign_actor(
        self, turnaround_id: str, actor: Actor, identity: str, caller_id: str
    ) -> ActorAssignedPayload:
        """Assign an identity to a role (administrative privilege)."""
        log = self._log_operation(
            "assign_actor",
            turnaround_id=turnaround_id,
            actor=actor.value,
            caller_id=caller_id,
        )
        async with self._lock_for(turnaround_id):
            checklist = await self._load(turnaround_id)
            caller = await self._resolve_caller(caller_id)
            try:
                payload = checklist.prepare_assign_actor(caller, actor, identity)
            except (TurnaroundError, ValueError) as exc:
                log.warning("actor_assignment_rejected", error=type(exc).__name__, reason=str(exc))
                raise
            await self._audit_log.append(turnaround_id, payload, self._clock())
            checklist.apply(payload)

        log.info("actor_assigned", identity=identity)
        return payload

    async def complete_task(
        self,
        turnaround_id: str,
        task_id: int,
        caller_id: str,
        now: datetime | None = None,
    ) -> TaskCompletedPayload:
        """Complete a task; the status is classified against ``now``.

        Args:
            turnaround_id: Target turnaround.
            task_id: Task index in [0, 27).
            caller_id: Identity of the caller.
            now: Completion instant; defaults to the service clock.

        Returns:
            The recorded TaskCompleted payload, carrying the status.
        """
        log = self._log_operation(
            "complete_task", turnaround_id=turnaround_id, task_id=task_id, caller_id=caller_id
        )
        async with self._lock_for(turnaround_id):
            checklist = await self._load(turnaround_id)
            caller = await self._resolve_caller(caller_id)
            completed_at = now if now is not None else self._clock()
            try:
                payload = checklist.prepare_complete_task(task_id, caller, completed_at)
            except (TurnaroundError, ValueError) as exc:
                log.warning("task_completion_rejected", error=type(exc).__name__, reason=str(exc))
                raise
            await self._audit_log.append(turnaround_id, payload, self._clock())
            checklist.apply(payload)

        log.info("task_completed", status=payload.status.value)
        return payload

    async def justify_delay(
        self, turnaround_id: str, task_id: int, caller_id: str, text: str
    ) -> DelayJustifiedPayload:
        log = self._log_operation(
            "justify_delay", turnaround_id=turnaround_id, task_id=task_id, caller_id=caller_id
        )
        async with self._lock_for(turnaround_id):
            checklist = await self._load(turnaround_id)
            caller = await self._resolve_caller(caller_id)
            try:
                payload = checklist.prepare_justify_delay(task_id, caller, text)
            except (TurnaroundError, ValueError) as exc:
                log.warning("delay_justification_rejected", error=type(exc).__name__, reason=str(exc))
                raise
            await self._audit_log.append(turnaround_id, payload, self._clock())
            checklist.apply(payload)

        log.info("delay_justified")
        return payload

    async def set_mandatory(
        self, turnaround_id: str, task_id: int, mandatory: bool, caller_id: str
    ) -> MandatoryTaskChangedPayload:
        log = self._log_operation(
            "set_mandatory",
            turnaround_id=turnaround_id,
            task_id=task_id,
            mandatory=mandatory,
            caller_id=caller_id,
        )
        async with self._lock_for(turnaround_id):
            checklist = await self._load(turnaround_id)
            caller = await self._resolve_caller(caller_id)
            try:
                payload = checklist.prepare_set_mandatory(task_id, caller, mandatory)
            except (TurnaroundError, ValueError) as exc:
                log.warning("mandatory_change_rejected", error=type(exc).__name__, reason=str(exc))
                raise
            await self._audit_log.append(turnaround_id, payload, self._clock())
            checklist.apply(payload)

        log.info("mandatory_changed")
        return payload

    async def certify(
        self, turnaround_id: str, caller_id: str, now: datetime | None = None
    ) -> TurnaroundCertifiedPayload:
        """Seal the turnaround.

        Raises:
            UnauthorizedError: If the caller is not operational.
            AlreadyCertifiedError: If already sealed.
            MandatoryTaskIncompleteError: If mandatory tasks are pending.
        """
        log = self._log_operation("certify", turnaround_id=turnaround_id, caller_id=caller_id)
        async with self._lock_for(turnaround_id):
            checklist = await self._load(turnaround_id)
            caller = await self._resolve_caller(caller_id)
            sealed_at = now if now is not None else self._clock()
            try:
                payload = checklist.prepare_certify(caller, sealed_at)
            except (TurnaroundError, ValueError) as exc:
                log.warning("certification_rejected", error=type(exc).__name__, reason=str(exc))
                raise
            await self._audit_log.append(turnaround_id, payload, self._clock())
            checklist.apply(payload)

        log.info(
            "turnaround_certified",
            on_time=payload.on_time,
            late_unjustified=payload.late_unjustified,
            certification_hash=payload.certification_hash,
        )
        return payload

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_turnaround(self, turnaround_id: str) -> TurnaroundChecklist:
        return await self._load(turnaround_id)

    async def list_turnarounds(self) -> list[str]:
        return await self._repository.list_ids()

    async def get_task(self, turnaround_id: str, task_id: int) -> TurnaroundTask:
        checklist = await self._load(turnaround_id)
        return checklist.get_task(task_id)

    async def list_tasks(self, turnaround_id: str) -> tuple[TurnaroundTask, ...]:
        checklist = await self._load(turnaround_id)
        return checklist.list_tasks()

    async def get_kpis(self, turnaround_id: str) -> KpiSnapshot:
        checklist = await self._load(turnaround_id)
        return checklist.get_kpis()

    async def get_actor_performance(self, turnaround_id: str) -> tuple[ActorPerformance, ...]:
        checklist = await self._load(turnaround_id)
        return checklist.get_actor_performance()

    async def get_operational_duration(self, turnaround_id: str) -> timedelta:
        checklist = await self._load(turnaround_id)
        return checklist.get_operational_duration()

    async def get_audit_log(self, turnaround_id: str) -> list[AuditRecord]:
        await self._load(turnaround_id)
        return await self._audit_log.read(turnaround_id)

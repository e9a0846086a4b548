"""Unit tests for TurnaroundService.

Key Test Scenarios:
1. Every accepted command lands in the audit log, in order
2. Rejected commands leave both the aggregate and the log untouched
3. Caller privileges come from the privilege registry
4. Commands on one turnaround are serialized
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

import pytest

from tests.helpers import (
    ADMIN_ID,
    OUTSIDER_ID,
    SUPERVISOR_ID,
    identity_for,
    uniform_template,
)
from turnaround.application.services.turnaround_service import TurnaroundService
from turnaround.domain.errors import (
    AlreadyCompletedError,
    MandatoryTaskIncompleteError,
    TurnaroundAlreadyExistsError,
    TurnaroundNotFoundError,
    UnauthorizedError,
)
from turnaround.domain.events.audit_record import AuditRecord, verify_chain
from turnaround.domain.events.turnaround import (
    ACTOR_ASSIGNED_EVENT_TYPE,
    TASK_COMPLETED_EVENT_TYPE,
    TURNAROUND_CERTIFIED_EVENT_TYPE,
    TURNAROUND_CREATED_EVENT_TYPE,
    TurnaroundEventPayload,
)
from turnaround.domain.models.actor import Actor, Privilege
from turnaround.domain.models.task import TaskStatus
from turnaround.infrastructure.stubs import (
    AuditLogStub,
    PrivilegeRegistryStub,
    TurnaroundRepositoryStub,
)

TURNAROUND_ID = "TA-0001"


class UnavailableAuditLog(AuditLogStub):
    """Audit log whose appends fail while ``available`` is False."""

    def __init__(self) -> None:
        super().__init__()
        self.available = True

    async def append(
        self,
        turnaround_id: str,
        payload: TurnaroundEventPayload,
        recorded_at: datetime,
    ) -> AuditRecord:
        if not self.available:
            raise ConnectionError("audit store unavailable")
        return await super().append(turnaround_id, payload, recorded_at)


@pytest.fixture
def service(
    turnaround_repository: TurnaroundRepositoryStub,
    audit_log: AuditLogStub,
    privilege_registry: PrivilegeRegistryStub,
    t0: datetime,
) -> TurnaroundService:
    """Service whose clock is fixed three hours after t0."""
    return TurnaroundService(
        repository=turnaround_repository,
        audit_log=audit_log,
        privileges=privilege_registry,
        clock=lambda: t0 + timedelta(hours=3),
    )


async def _create(service: TurnaroundService, t0: datetime) -> None:
    await service.create_turnaround(
        off_chain_id=TURNAROUND_ID,
        airport_code="LIS",
        scheduled_arrival=t0,
        scheduled_departure=t0 + timedelta(hours=3),
        caller_id=ADMIN_ID,
        tasks=uniform_template(t0),
    )


class TestCreateTurnaround:
    """Tests for create_turnaround()."""

    @pytest.mark.asyncio
    async def test_creation_is_logged(
        self, service: TurnaroundService, audit_log: AuditLogStub, t0: datetime
    ) -> None:
        await _create(service, t0)
        records = await audit_log.read(TURNAROUND_ID)
        assert [r.event_type for r in records] == [TURNAROUND_CREATED_EVENT_TYPE]
        assert records[0].recorded_at == t0 + timedelta(hours=3)
        assert await service.list_turnarounds() == [TURNAROUND_ID]

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, service: TurnaroundService, t0: datetime) -> None:
        await _create(service, t0)
        with pytest.raises(TurnaroundAlreadyExistsError):
            await _create(service, t0)

    @pytest.mark.asyncio
    async def test_non_admin_rejected_and_nothing_logged(
        self, service: TurnaroundService, audit_log: AuditLogStub, t0: datetime
    ) -> None:
        with pytest.raises(UnauthorizedError):
            await service.create_turnaround(
                off_chain_id=TURNAROUND_ID,
                airport_code="LIS",
                scheduled_arrival=t0,
                scheduled_departure=t0 + timedelta(hours=3),
                caller_id=SUPERVISOR_ID,
            )
        assert await audit_log.read(TURNAROUND_ID) == []
        with pytest.raises(TurnaroundNotFoundError):
            await service.get_turnaround(TURNAROUND_ID)


class TestCommands:
    """Tests for the task commands."""

    @pytest.mark.asyncio
    async def test_unknown_turnaround(self, service: TurnaroundService, t0: datetime) -> None:
        with pytest.raises(TurnaroundNotFoundError):
            await service.complete_task("TA-404", 0, SUPERVISOR_ID, t0)

    @pytest.mark.asyncio
    async def test_role_identity_completes_after_assignment(
        self, service: TurnaroundService, audit_log: AuditLogStub, t0: datetime
    ) -> None:
        await _create(service, t0)
        fuel_crew = identity_for(Actor.FUEL)
        with pytest.raises(UnauthorizedError):
            await service.complete_task(TURNAROUND_ID, 2, fuel_crew, t0)

        await service.assign_actor(TURNAROUND_ID, Actor.FUEL, fuel_crew, ADMIN_ID)
        payload = await service.complete_task(TURNAROUND_ID, 2, fuel_crew, t0)

        assert payload.status is TaskStatus.ON_TIME
        records = await audit_log.read(TURNAROUND_ID)
        assert [r.event_type for r in records] == [
            TURNAROUND_CREATED_EVENT_TYPE,
            ACTOR_ASSIGNED_EVENT_TYPE,
            TASK_COMPLETED_EVENT_TYPE,
        ]
        verify_chain(records)

    @pytest.mark.asyncio
    async def test_completion_defaults_to_clock(
        self, service: TurnaroundService, t0: datetime
    ) -> None:
        await _create(service, t0)
        payload = await service.complete_task(TURNAROUND_ID, 0, SUPERVISOR_ID)
        assert payload.completed_at == t0 + timedelta(hours=3)
        assert payload.status is TaskStatus.LATE

    @pytest.mark.asyncio
    async def test_rejection_does_not_log(
        self, service: TurnaroundService, audit_log: AuditLogStub, t0: datetime
    ) -> None:
        await _create(service, t0)
        await service.complete_task(TURNAROUND_ID, 0, SUPERVISOR_ID, t0)
        with pytest.raises(AlreadyCompletedError):
            await service.complete_task(TURNAROUND_ID, 0, SUPERVISOR_ID, t0)
        assert len(await audit_log.read(TURNAROUND_ID)) == 2

    @pytest.mark.asyncio
    async def test_revoked_privilege_takes_effect(
        self,
        service: TurnaroundService,
        privilege_registry: PrivilegeRegistryStub,
        t0: datetime,
    ) -> None:
        await _create(service, t0)
        privilege_registry.revoke(SUPERVISOR_ID, Privilege.OPERATIONAL)
        with pytest.raises(UnauthorizedError):
            await service.complete_task(TURNAROUND_ID, 0, SUPERVISOR_ID, t0)

    @pytest.mark.asyncio
    async def test_justify_and_set_mandatory(
        self, service: TurnaroundService, t0: datetime
    ) -> None:
        await _create(service, t0)
        await service.complete_task(TURNAROUND_ID, 5, SUPERVISOR_ID, t0 + timedelta(hours=1))
        assert (await service.get_kpis(TURNAROUND_ID)).sla_breached

        await service.justify_delay(TURNAROUND_ID, 5, SUPERVISOR_ID, "pushback tug failure")
        await service.set_mandatory(TURNAROUND_ID, 6, False, SUPERVISOR_ID)

        assert not (await service.get_kpis(TURNAROUND_ID)).sla_breached
        assert not (await service.get_task(TURNAROUND_ID, 6)).mandatory
        with pytest.raises(UnauthorizedError):
            await service.set_mandatory(TURNAROUND_ID, 7, False, OUTSIDER_ID)


class TestCertify:
    """Tests for certify() and the read side."""

    @pytest.mark.asyncio
    async def test_certify_lists_outstanding(
        self, service: TurnaroundService, t0: datetime
    ) -> None:
        await _create(service, t0)
        with pytest.raises(MandatoryTaskIncompleteError) as exc_info:
            await service.certify(TURNAROUND_ID, SUPERVISOR_ID, t0)
        assert len(exc_info.value.outstanding_task_ids) == 27

    @pytest.mark.asyncio
    async def test_full_run(
        self, service: TurnaroundService, audit_log: AuditLogStub, t0: datetime
    ) -> None:
        await _create(service, t0)
        for task in await service.list_tasks(TURNAROUND_ID):
            await service.complete_task(TURNAROUND_ID, task.task_id, SUPERVISOR_ID, task.deadline)

        assert await service.get_operational_duration(TURNAROUND_ID) == timedelta(0)
        payload = await service.certify(TURNAROUND_ID, SUPERVISOR_ID, t0 + timedelta(minutes=140))

        assert payload.on_time == 27
        assert await service.get_operational_duration(TURNAROUND_ID) == timedelta(minutes=140)
        performance = await service.get_actor_performance(TURNAROUND_ID)
        assert sum(p.tasks_on_time for p in performance) == 27
        records = await service.get_audit_log(TURNAROUND_ID)
        assert records[-1].event_type == TURNAROUND_CERTIFIED_EVENT_TYPE
        assert len(records) == 29


class TestConcurrency:
    """Tests for per-turnaround serialization."""

    @pytest.mark.asyncio
    async def test_concurrent_completion_of_same_task_applies_once(
        self, service: TurnaroundService, audit_log: AuditLogStub, t0: datetime
    ) -> None:
        await _create(service, t0)
        results = await asyncio.gather(
            *(service.complete_task(TURNAROUND_ID, 0, SUPERVISOR_ID, t0) for _ in range(5)),
            return_exceptions=True,
        )
        assert sum(1 for r in results if not isinstance(r, Exception)) == 1
        assert sum(1 for r in results if isinstance(r, AlreadyCompletedError)) == 4
        records = await audit_log.read(TURNAROUND_ID)
        assert len(records) == 2
        verify_chain(records)

    @pytest.mark.asyncio
    async def test_concurrent_distinct_tasks_all_land(
        self, service: TurnaroundService, audit_log: AuditLogStub, t0: datetime
    ) -> None:
        await _create(service, t0)
        await asyncio.gather(
            *(
                service.complete_task(TURNAROUND_ID, task_id, SUPERVISOR_ID, t0)
                for task_id in range(27)
            )
        )
        assert (await service.get_kpis(TURNAROUND_ID)).completed == 27
        records = await audit_log.read(TURNAROUND_ID)
        assert [r.sequence for r in records] == list(range(1, 29))
        verify_chain(records)


class TestTimezones:
    """Tests for rejecting naive datetimes."""

    @pytest.mark.asyncio
    async def test_naive_schedule_rejected_and_nothing_logged(
        self, service: TurnaroundService, audit_log: AuditLogStub, t0: datetime
    ) -> None:
        naive = t0.replace(tzinfo=None)
        with pytest.raises(ValueError, match="timezone-aware"):
            await service.create_turnaround(
                off_chain_id=TURNAROUND_ID,
                airport_code="LIS",
                scheduled_arrival=naive,
                scheduled_departure=naive + timedelta(hours=3),
                caller_id=ADMIN_ID,
            )
        assert await audit_log.read(TURNAROUND_ID) == []
        assert await service.list_turnarounds() == []

    @pytest.mark.asyncio
    async def test_naive_completion_rejected_and_nothing_logged(
        self, service: TurnaroundService, audit_log: AuditLogStub, t0: datetime
    ) -> None:
        await _create(service, t0)
        with pytest.raises(ValueError, match="timezone-aware"):
            await service.complete_task(TURNAROUND_ID, 0, SUPERVISOR_ID, t0.replace(tzinfo=None))
        assert (await service.get_task(TURNAROUND_ID, 0)).status is TaskStatus.PENDING
        assert len(await audit_log.read(TURNAROUND_ID)) == 1


class TestAuditAppendFailure:
    """Live state only changes once the audit append succeeded."""

    @pytest.fixture
    def unavailable_log(self) -> UnavailableAuditLog:
        return UnavailableAuditLog()

    @pytest.fixture
    def fragile_service(
        self,
        turnaround_repository: TurnaroundRepositoryStub,
        unavailable_log: UnavailableAuditLog,
        privilege_registry: PrivilegeRegistryStub,
        t0: datetime,
    ) -> TurnaroundService:
        return TurnaroundService(
            repository=turnaround_repository,
            audit_log=unavailable_log,
            privileges=privilege_registry,
            clock=lambda: t0 + timedelta(hours=3),
        )

    @pytest.mark.asyncio
    async def test_failed_creation_is_not_stored(
        self,
        fragile_service: TurnaroundService,
        unavailable_log: UnavailableAuditLog,
        t0: datetime,
    ) -> None:
        unavailable_log.available = False
        with pytest.raises(ConnectionError):
            await _create(fragile_service, t0)
        assert await fragile_service.list_turnarounds() == []

    @pytest.mark.asyncio
    async def test_failed_append_leaves_aggregate_unchanged(
        self,
        fragile_service: TurnaroundService,
        unavailable_log: UnavailableAuditLog,
        t0: datetime,
    ) -> None:
        await _create(fragile_service, t0)
        for task_id in range(27):
            await fragile_service.complete_task(TURNAROUND_ID, task_id, SUPERVISOR_ID, t0)
        unavailable_log.available = False

        with pytest.raises(ConnectionError):
            await fragile_service.certify(TURNAROUND_ID, SUPERVISOR_ID, t0 + timedelta(hours=2))
        with pytest.raises(ConnectionError):
            await fragile_service.assign_actor(TURNAROUND_ID, Actor.FUEL, "fuel-crew", ADMIN_ID)

        checklist = await fragile_service.get_turnaround(TURNAROUND_ID)
        assert not checklist.is_certified
        assert checklist.role_assignment.identity_for(Actor.FUEL) is None

        unavailable_log.available = True
        payload = await fragile_service.certify(
            TURNAROUND_ID, SUPERVISOR_ID, t0 + timedelta(hours=2)
        )
        records = await unavailable_log.read(TURNAROUND_ID)
        assert len(records) == 29
        assert records[-1].event_type == TURNAROUND_CERTIFIED_EVENT_TYPE
        assert checklist.header.certification_hash == payload.certification_hash

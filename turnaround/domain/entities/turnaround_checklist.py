"""TurnaroundChecklist aggregate.

The aggregate owns one turnaround: its header, its 27 tasks and its role
assignment. No other object holds a mutable reference into this state.

Every command follows the same shape:

1. ``prepare_*`` validates all preconditions (range, certification state,
   authorization, task state) without touching state and builds the event
   payload describing the transition.
2. The caller records the payload (the service appends it to the audit log).
3. ``apply`` the payload, which is the only place state changes.

The plain command methods run steps 1 and 3 together. Because step 3 is
also what log replay uses, replaying the recorded payloads from
TurnaroundCreated onwards rebuilds exactly the same state.
The aggregate never reads the clock: every instant arrives as a parameter.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from turnaround.domain.errors.certification import AlreadyCertifiedError
from turnaround.domain.errors.task import InvalidJustificationError
from turnaround.domain.events.turnaround import (
    ActorAssignedPayload,
    BadgeIssuedPayload,
    DelayJustifiedPayload,
    MandatoryTaskChangedPayload,
    TaskCompletedPayload,
    TurnaroundCertifiedPayload,
    TurnaroundCreatedPayload,
    TurnaroundEventPayload,
)
from turnaround.domain.models.actor import Actor, CallerContext
from turnaround.domain.models.certification import CertificationRecord
from turnaround.domain.models.kpi import ActorPerformance, KpiSnapshot
from turnaround.domain.models.policy import DEFAULT_TURNAROUND_POLICY, TurnaroundPolicy
from turnaround.domain.models.role_assignment import RoleAssignment
from turnaround.domain.models.task import TaskDefinition, TurnaroundTask, require_aware
from turnaround.domain.models.turnaround import TurnaroundHeader
from turnaround.domain.services.authorization_guard import AuthorizationGuard
from turnaround.domain.services.certification_sealer import CertificationSealer
from turnaround.domain.services.kpi_engine import compute_actor_performance, compute_kpis
from turnaround.domain.services.task_registry import TaskRegistry
from turnaround.domain.services.task_templates import generate_tasks


class TurnaroundChecklist:
    """Aggregate root for one aircraft turnaround."""

    def __init__(
        self,
        header: TurnaroundHeader,
        tasks: Iterable[TaskDefinition],
        policy: TurnaroundPolicy = DEFAULT_TURNAROUND_POLICY,
    ) -> None:
        """Build an uncertified turnaround with pending tasks.

        Prefer ``create`` for new turnarounds; this constructor performs no
        authorization and emits no event.

        Raises:
            ValueError: If the header is already certified or the task
                definitions are not exactly ids 0..26.
        """
        if header.is_certified:
            raise ValueError("A new turnaround cannot start certified")
        self._header = header
        self._registry = TaskRegistry(tasks)
        self._roles = RoleAssignment()
        self._policy = policy
        self._sealer = CertificationSealer()

    @classmethod
    def create(
        cls,
        *,
        off_chain_id: str,
        airport_code: str,
        scheduled_arrival: datetime,
        scheduled_departure: datetime,
        creator: CallerContext,
        tasks: Iterable[TaskDefinition] | None = None,
        flight_number: str | None = None,
        airline_code: str | None = None,
        policy: TurnaroundPolicy = DEFAULT_TURNAROUND_POLICY,
    ) -> tuple[TurnaroundChecklist, TurnaroundCreatedPayload]:
        """Create a turnaround and its creation event.

        Args:
            off_chain_id: Opaque turnaround identifier.
            airport_code: IATA airport code.
            scheduled_arrival: Scheduled on-block time.
            scheduled_departure: Scheduled off-block time.
            creator: Caller; must hold administrative privilege.
            tasks: Task definitions; defaults to the standard template
                generated from scheduled_arrival.
            flight_number: Optional flight designator.
            airline_code: Optional IATA airline code.
            policy: Rule switches for this turnaround.

        Returns:
            The new aggregate and its TurnaroundCreated payload.

        Raises:
            UnauthorizedError: If the creator lacks administrative privilege.
            InvalidScheduleError: If arrival is not before departure.
            ValueError: If identifiers or task definitions are malformed.
        """
        AuthorizationGuard.require_administrative(creator)
        header = TurnaroundHeader(
            off_chain_id=off_chain_id,
            airport_code=airport_code,
            scheduled_arrival=scheduled_arrival,
            scheduled_departure=scheduled_departure,
            flight_number=flight_number,
            airline_code=airline_code,
        )
        definitions = tuple(
            sorted(
                tasks if tasks is not None else generate_tasks(scheduled_arrival),
                key=lambda d: d.task_id,
            )
        )
        checklist = cls(header, definitions, policy)
        payload = TurnaroundCreatedPayload(
            header=header,
            tasks=definitions,
            created_by=creator.identity,
        )
        return checklist, payload

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def turnaround_id(self) -> str:
        return self._header.off_chain_id

    @property
    def header(self) -> TurnaroundHeader:
        return self._header

    @property
    def policy(self) -> TurnaroundPolicy:
        return self._policy

    @property
    def role_assignment(self) -> RoleAssignment:
        return self._roles

    @property
    def is_certified(self) -> bool:
        return self._header.is_certified

    @property
    def certification(self) -> CertificationRecord | None:
        return self._header.certification

    def get_task(self, task_id: int) -> TurnaroundTask:
        """Return a task record.

        Raises:
            InvalidTaskError: If task_id is outside [0, 27).
        """
        return self._registry.get(task_id)

    def list_tasks(self) -> tuple[TurnaroundTask, ...]:
        return self._registry.snapshot()

    def get_kpis(self) -> KpiSnapshot:
        """Live KPI counters, available before and after certification."""
        return compute_kpis(self._registry.snapshot())

    def get_actor_performance(self) -> tuple[ActorPerformance, ...]:
        return compute_actor_performance(self._registry.snapshot(), self._roles)

    def get_operational_duration(self) -> timedelta:
        """Actual departure minus scheduled arrival; zero until certified."""
        certification = self._header.certification
        if certification is None:
            return timedelta(0)
        return certification.actual_departure - self._header.scheduled_arrival

    # ------------------------------------------------------------------
    # Command validation
    #
    # prepare_* checks a command and returns its payload without changing
    # state. The service appends the payload to the audit log and only then
    # applies it.
    # ------------------------------------------------------------------

    def prepare_assign_actor(
        self, caller: CallerContext, actor: Actor, identity: str
    ) -> ActorAssignedPayload:
        """Assign ``identity`` to a role, overwriting any previous identity.

        Allowed at any time, including after certification; the sealed
        record is not affected.

        Raises:
            UnauthorizedError: If the caller lacks administrative privilege.
            ValueError: If identity is empty.
        """
        AuthorizationGuard.require_administrative(caller)
        if not isinstance(identity, str) or not identity.strip():
            raise ValueError("Assigned identity must be a non-empty string")
        payload = ActorAssignedPayload(actor=actor, identity=identity, assigned_by=caller.identity)
        return payload

    def prepare_complete_task(
        self, task_id: int, caller: CallerContext, now: datetime
    ) -> TaskCompletedPayload:
        """Complete a task at ``now``; ON_TIME iff ``now <= deadline``.

        Raises:
            InvalidTaskError: If task_id is outside [0, 27).
            AlreadyCertifiedError: If the turnaround is sealed.
            AlreadyCompletedError: If the task is already completed.
            UnauthorizedError: If the caller is neither the role's identity
                nor operational.
            ValueError: If ``now`` is naive.
        """
        task = self._registry.get(task_id)
        self._require_uncertified()
        self._registry.check_completable(task_id)
        AuthorizationGuard(self._roles).require_role(caller, task.actor)
        require_aware(now, "completed_at")

        payload = TaskCompletedPayload(
            task_id=task_id,
            actor=task.actor,
            completed_at=now,
            status=task.classify(now),
            completed_by=caller.identity,
        )
        return payload

    def prepare_justify_delay(
        self, task_id: int, caller: CallerContext, text: str
    ) -> DelayJustifiedPayload:
        """Store a justification on a late task.

        A later justification replaces an earlier one; each revision is its
        own event.

        Raises:
            InvalidTaskError: If task_id is outside [0, 27).
            UnauthorizedError: If the caller is neither the role's identity
                nor operational.
            AlreadyCertifiedError: If sealed and the policy forbids
                post-certification justification.
            NotCompletedError: If the task is still pending.
            NotLateError: If the task was completed on time.
            InvalidJustificationError: If the text is blank or too long.
        """
        task = self._registry.get(task_id)
        AuthorizationGuard(self._roles).require_role(caller, task.actor)
        if not self._policy.allow_post_certification_justification:
            self._require_uncertified()
        self._registry.check_justifiable(task_id)
        self._validate_justification(task_id, text)

        payload = DelayJustifiedPayload(
            task_id=task_id, justification=text, justified_by=caller.identity
        )
        return payload

    def prepare_set_mandatory(
        self, task_id: int, caller: CallerContext, mandatory: bool
    ) -> MandatoryTaskChangedPayload:
        """Change whether a task blocks certification.

        Raises:
            UnauthorizedError: If the caller lacks operational privilege.
            InvalidTaskError: If task_id is outside [0, 27).
            AlreadyCertifiedError: If sealed and the policy forbids
                post-certification changes.
        """
        AuthorizationGuard.require_operational(caller)
        self._registry.get(task_id)
        if not self._policy.allow_post_certification_mandatory_change:
            self._require_uncertified()

        payload = MandatoryTaskChangedPayload(
            task_id=task_id, mandatory=bool(mandatory), changed_by=caller.identity
        )
        return payload

    def prepare_certify(self, caller: CallerContext, now: datetime) -> TurnaroundCertifiedPayload:
        """Seal the turnaround at ``now``.

        Every mandatory task is checked before anything changes, so a
        failing call leaves the turnaround exactly as it was.

        Raises:
            UnauthorizedError: If the caller lacks operational privilege.
            AlreadyCertifiedError: If already sealed.
            MandatoryTaskIncompleteError: If mandatory tasks are pending;
                ``outstanding_task_ids`` lists them.
            ValueError: If ``now`` is naive.
        """
        AuthorizationGuard.require_operational(caller)
        require_aware(now, "sealed_at")
        record = self._sealer.seal(self._header, self._registry.snapshot(), now)
        payload = TurnaroundCertifiedPayload(
            actual_departure=record.actual_departure,
            sealed_at=record.sealed_at,
            on_time=record.on_time,
            late_unjustified=record.late_unjustified,
            certification_hash=record.certification_hash,
            certified_by=caller.identity,
        )
        return payload

    # ------------------------------------------------------------------
    # Commands (validate and apply in one step)
    # ------------------------------------------------------------------

    def assign_actor(
        self, caller: CallerContext, actor: Actor, identity: str
    ) -> ActorAssignedPayload:
        payload = self.prepare_assign_actor(caller, actor, identity)
        self.apply(payload)
        return payload

    def complete_task(
        self, task_id: int, caller: CallerContext, now: datetime
    ) -> TaskCompletedPayload:
        payload = self.prepare_complete_task(task_id, caller, now)
        self.apply(payload)
        return payload

    def justify_delay(
        self, task_id: int, caller: CallerContext, text: str
    ) -> DelayJustifiedPayload:
        payload = self.prepare_justify_delay(task_id, caller, text)
        self.apply(payload)
        return payload

    def set_mandatory(
        self, task_id: int, caller: CallerContext, mandatory: bool
    ) -> MandatoryTaskChangedPayload:
        payload = self.prepare_set_mandatory(task_id, caller, mandatory)
        self.apply(payload)
        return payload

    def certify(self, caller: CallerContext, now: datetime) -> TurnaroundCertifiedPayload:
        payload = self.prepare_certify(caller, now)
        self.apply(payload)
        return payload

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def apply(self, payload: TurnaroundEventPayload) -> None:
        """Apply an already validated event payload to the state.

        Raises:
            ValueError: If the payload cannot be applied to the current
                state (only reachable when replaying an inconsistent log).
        """
        if isinstance(payload, TaskCompletedPayload):
            self._registry.record_completion(
                payload.task_id, payload.completed_at, payload.completed_by, payload.status
            )
        elif isinstance(payload, DelayJustifiedPayload):
            self._registry.justify(payload.task_id, payload.justification)
        elif isinstance(payload, MandatoryTaskChangedPayload):
            self._registry.set_mandatory(payload.task_id, payload.mandatory)
        elif isinstance(payload, ActorAssignedPayload):
            self._roles = self._roles.with_assignment(payload.actor, payload.identity)
        elif isinstance(payload, TurnaroundCertifiedPayload):
            self._header = self._header.with_certification(
                CertificationRecord(
                    actual_departure=payload.actual_departure,
                    sealed_at=payload.sealed_at,
                    on_time=payload.on_time,
                    late_unjustified=payload.late_unjustified,
                    certification_hash=payload.certification_hash,
                )
            )
        elif isinstance(payload, BadgeIssuedPayload):
            # Downstream notification only.
            return
        else:
            raise ValueError(f"Cannot apply {type(payload).__name__} to an existing turnaround")

    def _require_uncertified(self) -> None:
        if self._header.is_certified:
            raise AlreadyCertifiedError(self._header.off_chain_id)

    def _validate_justification(self, task_id: int, text: str) -> None:
        if not isinstance(text, str) or not text.strip():
            raise InvalidJustificationError(task_id, "justification must not be blank")
        if len(text) > self._policy.max_justification_length:
            raise InvalidJustificationError(
                task_id,
                f"justification exceeds {self._policy.max_justification_length} characters",
            )

"""Turnaround API routes.

FastAPI router for the turnaround checklist: creation, role assignment,
task completion, delay justification, mandatory flags, certification,
KPIs, the audit log, badges and the reporting projection.

Callers identify themselves with the X-Caller-Id header. What the caller
may do is decided by the services from the role assignment and the
caller's privileges, never by the route.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, status

from turnaround.api.dependencies.turnaround import (
    get_badge_issuance_service,
    get_reporting_projection_service,
    get_turnaround_service,
)
from turnaround.api.models.turnaround import (
    ActorAssignmentResponse,
    ActorPerformanceResponse,
    AssignActorRequest,
    AuditRecordResponse,
    BadgeResponse,
    CertificationResponse,
    CertifyRequest,
    CompleteTaskRequest,
    CreateTurnaroundRequest,
    JustifyDelayRequest,
    KpiResponse,
    OperationalDurationResponse,
    ReportResponse,
    SetMandatoryRequest,
    TaskResponse,
    TurnaroundErrorResponse,
    TurnaroundListResponse,
    TurnaroundResponse,
)
from turnaround.application.services.badge_issuance_service import BadgeIssuanceService
from turnaround.application.services.reporting_projection_service import (
    ReportingProjectionService,
)
from turnaround.application.services.turnaround_service import TurnaroundService
from turnaround.domain.entities.turnaround_checklist import TurnaroundChecklist
from turnaround.domain.errors import (
    AlreadyCertifiedError,
    AlreadyCompletedError,
    AuditChainBrokenError,
    CertificationHashMismatchError,
    InvalidJustificationError,
    InvalidScheduleError,
    InvalidTaskError,
    MandatoryTaskIncompleteError,
    NotCompletedError,
    NotLateError,
    TurnaroundAlreadyExistsError,
    TurnaroundNotCertifiedError,
    TurnaroundNotFoundError,
    UnauthorizedError,
)
from turnaround.domain.exceptions import TurnaroundError
from turnaround.domain.models.actor import Actor

router = APIRouter(prefix="/v1/turnarounds", tags=["turnarounds"])

_ERROR_RESPONSES = {
    401: {"model": TurnaroundErrorResponse, "description": "Missing caller identity"},
    403: {"model": TurnaroundErrorResponse, "description": "Caller not authorized"},
    404: {"model": TurnaroundErrorResponse, "description": "Turnaround or task not found"},
    409: {"model": TurnaroundErrorResponse, "description": "Conflicts with current state"},
    422: {"model": TurnaroundErrorResponse, "description": "Validation Error"},
}

_STATUS_BY_ERROR: tuple[tuple[type[TurnaroundError], int], ...] = (
    (UnauthorizedError, status.HTTP_403_FORBIDDEN),
    (TurnaroundNotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidTaskError, status.HTTP_404_NOT_FOUND),
    (TurnaroundAlreadyExistsError, status.HTTP_409_CONFLICT),
    (AlreadyCompletedError, status.HTTP_409_CONFLICT),
    (AlreadyCertifiedError, status.HTTP_409_CONFLICT),
    (MandatoryTaskIncompleteError, status.HTTP_409_CONFLICT),
    (NotCompletedError, status.HTTP_409_CONFLICT),
    (NotLateError, status.HTTP_409_CONFLICT),
    (TurnaroundNotCertifiedError, status.HTTP_409_CONFLICT),
    (InvalidJustificationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InvalidScheduleError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (AuditChainBrokenError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (CertificationHashMismatchError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def _http_error(exc: TurnaroundError) -> HTTPException:
    """Translate a domain error into its HTTP response."""
    status_code = next(
        (code for error_type, code in _STATUS_BY_ERROR if isinstance(exc, error_type)),
        status.HTTP_400_BAD_REQUEST,
    )
    detail = TurnaroundErrorResponse(
        error=type(exc).__name__,
        message=str(exc),
        outstanding_task_ids=(
            list(exc.outstanding_task_ids)
            if isinstance(exc, MandatoryTaskIncompleteError)
            else None
        ),
    )
    return HTTPException(status_code=status_code, detail=detail.model_dump(exclude_none=True))


def get_caller_id(
    x_caller_id: Annotated[
        str | None,
        Header(description="Identity of the caller (wallet address, staff id, ...)"),
    ] = None,
) -> str:
    """Extract the caller identity from the X-Caller-Id header.

    Raises:
        HTTPException: 401 if the header is missing or blank.
    """
    if not x_caller_id or not x_caller_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Caller-Id header is required",
        )
    return x_caller_id.strip()


CallerId = Annotated[str, Depends(get_caller_id)]
Service = Annotated[TurnaroundService, Depends(get_turnaround_service)]


def _turnaround_response(checklist: TurnaroundChecklist) -> TurnaroundResponse:
    header = checklist.header
    certification = header.certification
    return TurnaroundResponse(
        off_chain_id=header.off_chain_id,
        airport_code=header.airport_code,
        flight_number=header.flight_number,
        airline_code=header.airline_code,
        scheduled_arrival=header.scheduled_arrival,
        scheduled_departure=header.scheduled_departure,
        is_certified=header.is_certified,
        certification=(
            CertificationResponse(
                actual_departure=certification.actual_departure,
                sealed_at=certification.sealed_at,
                on_time=certification.on_time,
                late_unjustified=certification.late_unjustified,
                certification_hash=certification.certification_hash,
                sla_breached=certification.sla_breached,
            )
            if certification is not None
            else None
        ),
        roles={
            actor.value: identity
            for actor, identity in checklist.role_assignment.assignments.items()
        },
        tasks=[TaskResponse.from_task(task) for task in checklist.list_tasks()],
    )


# =============================================================================
# Turnarounds
# =============================================================================


@router.post(
    "",
    response_model=TurnaroundResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
    summary="Create a turnaround",
    description="""
Open a turnaround with the standard 27-task template.

**Requires administrative privilege.**
""",
)
async def create_turnaround(
    request: CreateTurnaroundRequest,
    caller_id: CallerId,
    service: Service,
) -> TurnaroundResponse:
    try:
        checklist = await service.create_turnaround(
            off_chain_id=request.off_chain_id,
            airport_code=request.airport_code,
            scheduled_arrival=request.scheduled_arrival,
            scheduled_departure=request.scheduled_departure,
            caller_id=caller_id,
            flight_number=request.flight_number,
            airline_code=request.airline_code,
        )
    except TurnaroundError as e:
        raise _http_error(e) from e
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e
    return _turnaround_response(checklist)


@router.get("", response_model=TurnaroundListResponse, summary="List turnarounds")
async def list_turnarounds(service: Service) -> TurnaroundListResponse:
    ids = await service.list_turnarounds()
    return TurnaroundListResponse(turnaround_ids=ids, total_count=len(ids))


@router.get(
    "/{turnaround_id}",
    response_model=TurnaroundResponse,
    responses=_ERROR_RESPONSES,
    summary="Get a turnaround",
)
async def get_turnaround(turnaround_id: str, service: Service) -> TurnaroundResponse:
    try:
        checklist = await service.get_turnaround(turnaround_id)
    except TurnaroundError as e:
        raise _http_error(e) from e
    return _turnaround_response(checklist)


@router.put(
    "/{turnaround_id}/actors/{actor}",
    response_model=ActorAssignmentResponse,
    responses=_ERROR_RESPONSES,
    summary="Assign an identity to a role",
    description="**Requires administrative privilege.** Overwrites any previous identity.",
)
async def assign_actor(
    turnaround_id: str,
    actor: Actor,
    request: AssignActorRequest,
    caller_id: CallerId,
    service: Service,
) -> ActorAssignmentResponse:
    try:
        payload = await service.assign_actor(turnaround_id, actor, request.identity, caller_id)
    except TurnaroundError as e:
        raise _http_error(e) from e
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e
    return ActorAssignmentResponse(
        actor=payload.actor.value,
        identity=payload.identity,
        assigned_by=payload.assigned_by,
    )


# =============================================================================
# Tasks
# =============================================================================


@router.get(
    "/{turnaround_id}/tasks",
    response_model=list[TaskResponse],
    responses=_ERROR_RESPONSES,
    summary="List all 27 tasks",
)
async def list_tasks(turnaround_id: str, service: Service) -> list[TaskResponse]:
    try:
        tasks = await service.list_tasks(turnaround_id)
    except TurnaroundError as e:
        raise _http_error(e) from e
    return [TaskResponse.from_task(task) for task in tasks]


@router.get(
    "/{turnaround_id}/tasks/{task_id}",
    response_model=TaskResponse,
    responses=_ERROR_RESPONSES,
    summary="Get a task",
)
async def get_task(turnaround_id: str, task_id: int, service: Service) -> TaskResponse:
    try:
        task = await service.get_task(turnaround_id, task_id)
    except TurnaroundError as e:
        raise _http_error(e) from e
    return TaskResponse.from_task(task)


@router.post(
    "/{turnaround_id}/tasks/{task_id}/complete",
    response_model=TaskResponse,
    responses=_ERROR_RESPONSES,
    summary="Complete a task",
    description="""
Complete a task. The task is ON_TIME when completed at or before its
deadline, LATE otherwise.

**Requires the role's assigned identity or operational privilege.**
""",
)
async def complete_task(
    turnaround_id: str,
    task_id: int,
    caller_id: CallerId,
    service: Service,
    request: CompleteTaskRequest | None = None,
) -> TaskResponse:
    completed_at = request.completed_at if request is not None else None
    try:
        await service.complete_task(turnaround_id, task_id, caller_id, completed_at)
        task = await service.get_task(turnaround_id, task_id)
    except TurnaroundError as e:
        raise _http_error(e) from e
    return TaskResponse.from_task(task)


@router.post(
    "/{turnaround_id}/tasks/{task_id}/justification",
    response_model=TaskResponse,
    responses=_ERROR_RESPONSES,
    summary="Justify a late task",
    description="**Requires the role's assigned identity or operational privilege.**",
)
async def justify_delay(
    turnaround_id: str,
    task_id: int,
    request: JustifyDelayRequest,
    caller_id: CallerId,
    service: Service,
) -> TaskResponse:
    try:
        await service.justify_delay(turnaround_id, task_id, caller_id, request.justification)
        task = await service.get_task(turnaround_id, task_id)
    except TurnaroundError as e:
        raise _http_error(e) from e
    return TaskResponse.from_task(task)


@router.put(
    "/{turnaround_id}/tasks/{task_id}/mandatory",
    response_model=TaskResponse,
    responses=_ERROR_RESPONSES,
    summary="Change whether a task blocks certification",
    description="**Requires operational privilege.**",
)
async def set_mandatory(
    turnaround_id: str,
    task_id: int,
    request: SetMandatoryRequest,
    caller_id: CallerId,
    service: Service,
) -> TaskResponse:
    try:
        await service.set_mandatory(turnaround_id, task_id, request.mandatory, caller_id)
        task = await service.get_task(turnaround_id, task_id)
    except TurnaroundError as e:
        raise _http_error(e) from e
    return TaskResponse.from_task(task)


# =============================================================================
# Certification and KPIs
# =============================================================================


@router.post(
    "/{turnaround_id}/certify",
    response_model=CertificationResponse,
    responses=_ERROR_RESPONSES,
    summary="Certify the turnaround",
    description="""
Seal the turnaround. Fails with 409 and the outstanding task ids while any
mandatory task is incomplete. Certification is one-way.

**Requires operational privilege.**
""",
)
async def certify(
    turnaround_id: str,
    caller_id: CallerId,
    service: Service,
    request: CertifyRequest | None = None,
) -> CertificationResponse:
    certified_at = request.certified_at if request is not None else None
    try:
        payload = await service.certify(turnaround_id, caller_id, certified_at)
    except TurnaroundError as e:
        raise _http_error(e) from e
    return CertificationResponse(
        actual_departure=payload.actual_departure,
        sealed_at=payload.sealed_at,
        on_time=payload.on_time,
        late_unjustified=payload.late_unjustified,
        certification_hash=payload.certification_hash,
        sla_breached=payload.late_unjustified > 0,
    )


@router.get(
    "/{turnaround_id}/kpis",
    response_model=KpiResponse,
    responses=_ERROR_RESPONSES,
    summary="Live KPI counters",
)
async def get_kpis(turnaround_id: str, service: Service) -> KpiResponse:
    try:
        snapshot = await service.get_kpis(turnaround_id)
    except TurnaroundError as e:
        raise _http_error(e) from e
    return KpiResponse.from_snapshot(snapshot)


@router.get(
    "/{turnaround_id}/duration",
    response_model=OperationalDurationResponse,
    responses=_ERROR_RESPONSES,
    summary="Operational duration (actual departure minus scheduled arrival)",
)
async def get_operational_duration(
    turnaround_id: str, service: Service
) -> OperationalDurationResponse:
    try:
        checklist = await service.get_turnaround(turnaround_id)
        duration = await service.get_operational_duration(turnaround_id)
    except TurnaroundError as e:
        raise _http_error(e) from e
    seconds = duration.total_seconds()
    return OperationalDurationResponse(
        is_certified=checklist.is_certified,
        duration_seconds=seconds,
        duration_minutes=round(seconds / 60, 2),
    )


@router.get(
    "/{turnaround_id}/actors",
    response_model=list[ActorPerformanceResponse],
    responses=_ERROR_RESPONSES,
    summary="Per-role performance",
)
async def get_actor_performance(
    turnaround_id: str, service: Service
) -> list[ActorPerformanceResponse]:
    try:
        rows = await service.get_actor_performance(turnaround_id)
    except TurnaroundError as e:
        raise _http_error(e) from e
    return [ActorPerformanceResponse.from_performance(row) for row in rows]


# =============================================================================
# Audit log, badges and reporting
# =============================================================================


@router.get(
    "/{turnaround_id}/audit-log",
    response_model=list[AuditRecordResponse],
    responses=_ERROR_RESPONSES,
    summary="Hash-chained audit log",
)
async def get_audit_log(turnaround_id: str, service: Service) -> list[AuditRecordResponse]:
    try:
        records = await service.get_audit_log(turnaround_id)
    except TurnaroundError as e:
        raise _http_error(e) from e
    return [AuditRecordResponse.from_record(record) for record in records]


@router.post(
    "/{turnaround_id}/badges",
    response_model=list[BadgeResponse],
    responses=_ERROR_RESPONSES,
    summary="Issue badges for a certified turnaround",
    description="Idempotent: returns only the badges issued by this call.",
)
async def issue_badges(
    turnaround_id: str,
    badge_service: Annotated[BadgeIssuanceService, Depends(get_badge_issuance_service)],
) -> list[BadgeResponse]:
    try:
        badges = await badge_service.issue_badges(turnaround_id)
    except TurnaroundError as e:
        raise _http_error(e) from e
    return [BadgeResponse.from_badge(badge) for badge in badges]


@router.get(
    "/{turnaround_id}/badges",
    response_model=list[BadgeResponse],
    summary="List issued badges",
)
async def list_badges(
    turnaround_id: str,
    badge_service: Annotated[BadgeIssuanceService, Depends(get_badge_issuance_service)],
) -> list[BadgeResponse]:
    badges = await badge_service.list_badges(turnaround_id)
    return [BadgeResponse.from_badge(badge) for badge in badges]


@router.get(
    "/{turnaround_id}/report",
    response_model=ReportResponse,
    responses=_ERROR_RESPONSES,
    summary="Reporting projection rebuilt from the audit log",
)
async def get_report(
    turnaround_id: str,
    reporting_service: Annotated[
        ReportingProjectionService, Depends(get_reporting_projection_service)
    ],
) -> ReportResponse:
    try:
        report = await reporting_service.build_report(turnaround_id)
    except TurnaroundError as e:
        raise _http_error(e) from e
    return ReportResponse(**report.to_dict())

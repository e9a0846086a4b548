"""Unit tests for the turnaround API routes.

Every service is backed by fresh in-memory stubs through
``app.dependency_overrides``; the turnarounds use the standard template
with deadlines from T0+2min to T0+55min.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tests.helpers import ADMIN_ID, OUTSIDER_ID, SUPERVISOR_ID, identity_for
from turnaround.api.dependencies.turnaround import (
    get_badge_issuance_service,
    get_reporting_projection_service,
    get_turnaround_service,
)
from turnaround.api.routes.turnaround import router
from turnaround.application.services.badge_issuance_service import BadgeIssuanceService
from turnaround.application.services.reporting_projection_service import (
    ReportingProjectionService,
)
from turnaround.application.services.turnaround_service import TurnaroundService
from turnaround.domain.models.actor import Actor
from turnaround.infrastructure.stubs import (
    AuditLogStub,
    BadgeIssuerStub,
    BadgeRepositoryStub,
    PrivilegeRegistryStub,
    TurnaroundRepositoryStub,
)

T0 = datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc)
TURNAROUND_ID = "TA-0001"
BASE = f"/v1/turnarounds/{TURNAROUND_ID}"

ADMIN = {"X-Caller-Id": ADMIN_ID}
SUPERVISOR = {"X-Caller-Id": SUPERVISOR_ID}
OUTSIDER = {"X-Caller-Id": OUTSIDER_ID}


@pytest.fixture
def app(
    privilege_registry: PrivilegeRegistryStub,
    audit_log: AuditLogStub,
    turnaround_repository: TurnaroundRepositoryStub,
    badge_issuer: BadgeIssuerStub,
    badge_repository: BadgeRepositoryStub,
) -> FastAPI:
    """Create a test app wired to in-memory services."""
    service = TurnaroundService(
        repository=turnaround_repository,
        audit_log=audit_log,
        privileges=privilege_registry,
        clock=lambda: T0 + timedelta(hours=2),
    )
    badge_service = BadgeIssuanceService(audit_log, badge_issuer, badge_repository)
    reporting = ReportingProjectionService(audit_log)

    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_turnaround_service] = lambda: service
    app.dependency_overrides[get_badge_issuance_service] = lambda: badge_service
    app.dependency_overrides[get_reporting_projection_service] = lambda: reporting
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client for the app."""
    return TestClient(app)


def _iso(minutes: int) -> str:
    return (T0 + timedelta(minutes=minutes)).isoformat()


def _create(client: TestClient, off_chain_id: str = TURNAROUND_ID):
    return client.post(
        "/v1/turnarounds",
        json={
            "off_chain_id": off_chain_id,
            "airport_code": "LIS",
            "scheduled_arrival": _iso(0),
            "scheduled_departure": _iso(60),
            "flight_number": "TP1234",
        },
        headers=ADMIN,
    )


def _assign_all(client: TestClient) -> None:
    for actor in Actor:
        response = client.put(
            f"{BASE}/actors/{actor.value}",
            json={"identity": identity_for(actor)},
            headers=ADMIN,
        )
        assert response.status_code == 200


def _complete_all(client: TestClient, late_task_ids: tuple[int, ...] = ()) -> None:
    tasks = client.get(f"{BASE}/tasks").json()
    for task in tasks:
        deadline = datetime.fromisoformat(task["deadline"])
        if task["task_id"] in late_task_ids:
            deadline += timedelta(minutes=10)
        response = client.post(
            f"{BASE}/tasks/{task['task_id']}/complete",
            json={"completed_at": deadline.isoformat()},
            headers={"X-Caller-Id": identity_for(Actor(task["actor"]))},
        )
        assert response.status_code == 200


class TestCreateTurnaround:
    """Tests for POST /v1/turnarounds."""

    def test_created_with_standard_template(self, client: TestClient) -> None:
        response = _create(client)

        assert response.status_code == 201
        body = response.json()
        assert body["off_chain_id"] == TURNAROUND_ID
        assert body["is_certified"] is False
        assert body["certification"] is None
        assert len(body["tasks"]) == 27
        assert {t["status"] for t in body["tasks"]} == {"PENDING"}
        assert client.get("/v1/turnarounds").json() == {
            "turnaround_ids": [TURNAROUND_ID],
            "total_count": 1,
        }

    def test_missing_caller_header_is_401(self, client: TestClient) -> None:
        response = client.post(
            "/v1/turnarounds",
            json={
                "off_chain_id": TURNAROUND_ID,
                "airport_code": "LIS",
                "scheduled_arrival": _iso(0),
                "scheduled_departure": _iso(60),
            },
        )
        assert response.status_code == 401

    def test_non_admin_is_403(self, client: TestClient) -> None:
        response = client.post(
            "/v1/turnarounds",
            json={
                "off_chain_id": TURNAROUND_ID,
                "airport_code": "LIS",
                "scheduled_arrival": _iso(0),
                "scheduled_departure": _iso(60),
            },
            headers=SUPERVISOR,
        )
        assert response.status_code == 403
        assert response.json()["detail"]["error"] == "UnauthorizedError"

    def test_duplicate_is_409(self, client: TestClient) -> None:
        _create(client)
        response = _create(client)
        assert response.status_code == 409
        assert response.json()["detail"]["error"] == "TurnaroundAlreadyExistsError"

    def test_inverted_schedule_is_422(self, client: TestClient) -> None:
        response = client.post(
            "/v1/turnarounds",
            json={
                "off_chain_id": TURNAROUND_ID,
                "airport_code": "LIS",
                "scheduled_arrival": _iso(60),
                "scheduled_departure": _iso(0),
            },
            headers=ADMIN,
        )
        assert response.status_code == 422
        assert response.json()["detail"]["error"] == "InvalidScheduleError"

    def test_naive_datetime_is_422(self, client: TestClient) -> None:
        response = client.post(
            "/v1/turnarounds",
            json={
                "off_chain_id": TURNAROUND_ID,
                "airport_code": "LIS",
                "scheduled_arrival": "2024-06-01T10:00:00",
                "scheduled_departure": "2024-06-01T11:00:00",
            },
            headers=ADMIN,
        )
        assert response.status_code == 422

    def test_unknown_turnaround_is_404(self, client: TestClient) -> None:
        response = client.get("/v1/turnarounds/TA-404")
        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "TurnaroundNotFoundError"


class TestTasks:
    """Tests for the task endpoints."""

    def test_assigned_identity_completes_its_task(self, client: TestClient) -> None:
        _create(client)
        # Task 5 (fuel truck positioned) belongs to FUEL, deadline T0+10min.
        fuel = {"X-Caller-Id": identity_for(Actor.FUEL)}
        denied = client.post(
            f"{BASE}/tasks/5/complete", json={"completed_at": _iso(9)}, headers=fuel
        )
        assert denied.status_code == 403

        client.put(f"{BASE}/actors/FUEL", json={"identity": identity_for(Actor.FUEL)}, headers=ADMIN)
        response = client.post(
            f"{BASE}/tasks/5/complete", json={"completed_at": _iso(9)}, headers=fuel
        )

        assert response.status_code == 200
        assert response.json()["status"] == "ON_TIME"
        assert response.json()["completed_by"] == identity_for(Actor.FUEL)
        assert client.get(BASE).json()["roles"] == {"FUEL": identity_for(Actor.FUEL)}

    def test_outsider_cannot_complete(self, client: TestClient) -> None:
        _create(client)
        response = client.post(f"{BASE}/tasks/0/complete", headers=OUTSIDER)
        assert response.status_code == 403

    def test_completion_without_body_uses_service_clock(self, client: TestClient) -> None:
        _create(client)
        response = client.post(f"{BASE}/tasks/0/complete", headers=SUPERVISOR)
        assert response.status_code == 200
        assert response.json()["status"] == "LATE"

    def test_unknown_task_is_404(self, client: TestClient) -> None:
        _create(client)
        response = client.post(f"{BASE}/tasks/27/complete", headers=SUPERVISOR)
        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "InvalidTaskError"
        assert client.get(f"{BASE}/tasks/99").status_code == 404

    def test_second_completion_is_409(self, client: TestClient) -> None:
        _create(client)
        client.post(f"{BASE}/tasks/0/complete", json={"completed_at": _iso(1)}, headers=SUPERVISOR)
        response = client.post(
            f"{BASE}/tasks/0/complete", json={"completed_at": _iso(1)}, headers=SUPERVISOR
        )
        assert response.status_code == 409
        assert response.json()["detail"]["error"] == "AlreadyCompletedError"

    def test_justification_flow(self, client: TestClient) -> None:
        _create(client)
        pending = client.post(
            f"{BASE}/tasks/1/justification", json={"justification": "gpu fault"}, headers=SUPERVISOR
        )
        assert pending.status_code == 409
        assert pending.json()["detail"]["error"] == "NotCompletedError"

        client.post(f"{BASE}/tasks/0/complete", json={"completed_at": _iso(1)}, headers=SUPERVISOR)
        on_time = client.post(
            f"{BASE}/tasks/0/justification", json={"justification": "n/a"}, headers=SUPERVISOR
        )
        assert on_time.status_code == 409
        assert on_time.json()["detail"]["error"] == "NotLateError"

        client.post(f"{BASE}/tasks/1/complete", json={"completed_at": _iso(20)}, headers=SUPERVISOR)
        blank = client.post(
            f"{BASE}/tasks/1/justification", json={"justification": "   "}, headers=SUPERVISOR
        )
        assert blank.status_code == 422
        assert blank.json()["detail"]["error"] == "InvalidJustificationError"

        response = client.post(
            f"{BASE}/tasks/1/justification", json={"justification": "gpu fault"}, headers=SUPERVISOR
        )
        assert response.status_code == 200
        assert response.json()["justification"] == "gpu fault"
        assert client.get(f"{BASE}/kpis").json()["sla_breached"] is False

    def test_set_mandatory(self, client: TestClient) -> None:
        _create(client)
        denied = client.put(f"{BASE}/tasks/3/mandatory", json={"mandatory": False}, headers=OUTSIDER)
        assert denied.status_code == 403

        response = client.put(
            f"{BASE}/tasks/3/mandatory", json={"mandatory": False}, headers=SUPERVISOR
        )
        assert response.status_code == 200
        assert response.json()["mandatory"] is False


class TestCertification:
    """Tests for certification, KPIs, badges and the report."""

    def test_outstanding_tasks_are_listed(self, client: TestClient) -> None:
        _create(client)
        response = client.post(f"{BASE}/certify", headers=SUPERVISOR)

        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["error"] == "MandatoryTaskIncompleteError"
        # Tasks 11, 13 and 21 are optional in the standard template.
        assert detail["outstanding_task_ids"] == [i for i in range(27) if i not in (11, 13, 21)]

    def test_full_turnaround(self, client: TestClient) -> None:
        _create(client)
        _assign_all(client)
        _complete_all(client)

        response = client.post(
            f"{BASE}/certify", json={"certified_at": _iso(58)}, headers=SUPERVISOR
        )

        assert response.status_code == 200
        certification = response.json()
        assert certification["on_time"] == 27
        assert certification["late_unjustified"] == 0
        assert certification["sla_breached"] is False
        assert len(certification["certification_hash"]) == 64

        duration = client.get(f"{BASE}/duration").json()
        assert duration == {
            "is_certified": True,
            "duration_seconds": 58 * 60.0,
            "duration_minutes": 58.0,
        }
        assert client.post(f"{BASE}/certify", headers=SUPERVISOR).status_code == 409

        actors = client.get(f"{BASE}/actors").json()
        assert [row["actor"] for row in actors] == [a.value for a in Actor]
        assert all(row["badge_eligible"] for row in actors)

        badges = client.post(f"{BASE}/badges")
        assert badges.status_code == 200
        assert len(badges.json()) == 6
        assert client.post(f"{BASE}/badges").json() == []
        assert len(client.get(f"{BASE}/badges").json()) == 6

        report = client.get(f"{BASE}/report").json()
        assert report["kpi_summary"]["sla_status"] == "Compliant"
        assert report["turnaround"]["certification_hash"] == certification["certification_hash"]
        assert len(report["badges"]) == 6

        audit_log = client.get(f"{BASE}/audit-log").json()
        # created + 6 assignments + 27 completions + certified + 6 badges
        assert len(audit_log) == 41
        assert audit_log[0]["event_type"] == "turnaround.created"
        assert audit_log[0]["prev_hash"] == "0" * 64
        assert all(
            later["prev_hash"] == earlier["content_hash"]
            for earlier, later in zip(audit_log, audit_log[1:])
        )

    def test_late_task_breaches_sla(self, client: TestClient) -> None:
        _create(client)
        _assign_all(client)
        _complete_all(client, late_task_ids=(5,))

        kpis = client.get(f"{BASE}/kpis").json()
        assert kpis["late_unjustified"] == 1
        assert kpis["sla_breached"] is True

        certification = client.post(f"{BASE}/certify", headers=SUPERVISOR).json()
        assert certification["sla_breached"] is True

        issued = client.post(f"{BASE}/badges").json()
        assert Actor.FUEL.value not in {badge["actor"] for badge in issued}

    def test_badges_before_certification_is_409(self, client: TestClient) -> None:
        _create(client)
        response = client.post(f"{BASE}/badges")
        assert response.status_code == 409
        assert response.json()["detail"]["error"] == "TurnaroundNotCertifiedError"

    def test_report_for_unknown_turnaround_is_404(self, client: TestClient) -> None:
        assert client.get("/v1/turnarounds/TA-404/report").status_code == 404

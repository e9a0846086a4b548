"""Turnaround API dependencies.

Resolve the process-wide service singletons built in
``turnaround.bootstrap.turnaround``. Tests replace these through
``app.dependency_overrides``.
"""

from turnaround.application.services.badge_issuance_service import BadgeIssuanceService
from turnaround.application.services.reporting_projection_service import (
    ReportingProjectionService,
)
from turnaround.application.services.turnaround_service import TurnaroundService
from turnaround.bootstrap.turnaround import (
    get_badge_issuance_service as _get_badge_issuance_service,
)
from turnaround.bootstrap.turnaround import (
    get_reporting_projection_service as _get_reporting_projection_service,
)
from turnaround.bootstrap.turnaround import (
    get_turnaround_service as _get_turnaround_service,
)


def get_turnaround_service() -> TurnaroundService:
    return _get_turnaround_service()


def get_badge_issuance_service() -> BadgeIssuanceService:
    return _get_badge_issuance_service()


def get_reporting_projection_service() -> ReportingProjectionService:
    return _get_reporting_projection_service()

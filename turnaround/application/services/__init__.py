"""Application services."""

from turnaround.application.services.badge_issuance_service import BadgeIssuanceService
from turnaround.application.services.base import LoggingMixin
from turnaround.application.services.reporting_projection_service import (
    SLA_BREACHED,
    SLA_COMPLIANT,
    KpiSummaryRow,
    ReportingProjectionService,
    TaskExecutionRow,
    TurnaroundReport,
    TurnaroundRow,
)
from turnaround.application.services.turnaround_service import TurnaroundService

__all__: list[str] = [
    "SLA_BREACHED",
    "SLA_COMPLIANT",
    "BadgeIssuanceService",
    "KpiSummaryRow",
    "LoggingMixin",
    "ReportingProjectionService",
    "TaskExecutionRow",
    "TurnaroundReport",
    "TurnaroundRow",
    "TurnaroundService",
]

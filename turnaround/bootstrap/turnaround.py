"""Bootstrap wiring for turnaround dependencies.

Builds one process-wide set of in-memory adapters and the services on top
of them. ``reset_turnaround_dependencies`` drops everything so tests start
from a clean state.
"""

from __future__ import annotations

from structlog import get_logger

from turnaround.application.services.badge_issuance_service import BadgeIssuanceService
from turnaround.application.services.reporting_projection_service import (
    ReportingProjectionService,
)
from turnaround.application.services.turnaround_service import TurnaroundService
from turnaround.config.turnaround_config import TurnaroundConfig
from turnaround.infrastructure.stubs.audit_log_stub import AuditLogStub
from turnaround.infrastructure.stubs.badge_stub import BadgeIssuerStub, BadgeRepositoryStub
from turnaround.infrastructure.stubs.privilege_registry_stub import PrivilegeRegistryStub
from turnaround.infrastructure.stubs.turnaround_repository_stub import (
    TurnaroundRepositoryStub,
)

logger = get_logger()

_config: TurnaroundConfig | None = None
_audit_log: AuditLogStub | None = None
_privilege_registry: PrivilegeRegistryStub | None = None
_turnaround_service: TurnaroundService | None = None
_badge_service: BadgeIssuanceService | None = None
_reporting_service: ReportingProjectionService | None = None


def get_turnaround_config() -> TurnaroundConfig:
    global _config
    if _config is None:
        _config = TurnaroundConfig.from_environment()
    return _config


def get_audit_log() -> AuditLogStub:
    global _audit_log
    if _audit_log is None:
        _audit_log = AuditLogStub()
        logger.warning(
            "audit_log_initialized",
            adapter="AuditLogStub",
            message="Audit log is held in memory and lost on restart",
        )
    return _audit_log


def get_privilege_registry() -> PrivilegeRegistryStub:
    global _privilege_registry
    if _privilege_registry is None:
        _privilege_registry = PrivilegeRegistryStub()
    return _privilege_registry


def get_turnaround_service() -> TurnaroundService:
    global _turnaround_service
    if _turnaround_service is None:
        _turnaround_service = TurnaroundService(
            repository=TurnaroundRepositoryStub(),
            audit_log=get_audit_log(),
            privileges=get_privilege_registry(),
            policy=get_turnaround_config().to_policy(),
        )
    return _turnaround_service


def get_badge_issuance_service() -> BadgeIssuanceService:
    global _badge_service
    if _badge_service is None:
        _badge_service = BadgeIssuanceService(
            audit_log=get_audit_log(),
            issuer=BadgeIssuerStub(get_turnaround_config().badge_metadata_base_uri),
            badges=BadgeRepositoryStub(),
        )
    return _badge_service


def get_reporting_projection_service() -> ReportingProjectionService:
    global _reporting_service
    if _reporting_service is None:
        _reporting_service = ReportingProjectionService(
            audit_log=get_audit_log(),
            policy=get_turnaround_config().to_policy(),
        )
    return _reporting_service


def reset_turnaround_dependencies() -> None:
    """Reset all singletons (for testing)."""
    global _config, _audit_log, _privilege_registry
    global _turnaround_service, _badge_service, _reporting_service
    _config = None
    _audit_log = None
    _privilege_registry = None
    _turnaround_service = None
    _badge_service = None
    _reporting_service = None

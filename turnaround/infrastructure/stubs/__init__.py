"""In-memory stub adapters for every application port."""

from turnaround.infrastructure.stubs.audit_log_stub import AuditLogStub
from turnaround.infrastructure.stubs.badge_stub import (
    DEFAULT_METADATA_BASE_URI,
    BadgeIssuerStub,
    BadgeRepositoryStub,
)
from turnaround.infrastructure.stubs.privilege_registry_stub import PrivilegeRegistryStub
from turnaround.infrastructure.stubs.turnaround_repository_stub import (
    TurnaroundRepositoryStub,
)

__all__: list[str] = [
    "DEFAULT_METADATA_BASE_URI",
    "AuditLogStub",
    "BadgeIssuerStub",
    "BadgeRepositoryStub",
    "PrivilegeRegistryStub",
    "TurnaroundRepositoryStub",
]

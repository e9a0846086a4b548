"""Ports (interfaces) implemented by infrastructure adapters."""

from turnaround.application.ports.audit_log import AuditLogProtocol
from turnaround.application.ports.badge_issuer import (
    BadgeIssuerProtocol,
    BadgeRepositoryProtocol,
)
from turnaround.application.ports.privilege_registry import PrivilegeRegistryProtocol
from turnaround.application.ports.turnaround_repository import (
    TurnaroundRepositoryProtocol,
)

__all__: list[str] = [
    "AuditLogProtocol",
    "BadgeIssuerProtocol",
    "BadgeRepositoryProtocol",
    "PrivilegeRegistryProtocol",
    "TurnaroundRepositoryProtocol",
]

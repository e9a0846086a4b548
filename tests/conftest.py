"""
Pytest configuration and shared fixtures for turnaround tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

from datetime import datetime, timezone

import pytest

from tests.helpers.turnaround import ADMIN_ID, SUPERVISOR_ID
from turnaround.domain.models.actor import CallerContext, Privilege
from turnaround.infrastructure.stubs import (
    AuditLogStub,
    BadgeIssuerStub,
    BadgeRepositoryStub,
    PrivilegeRegistryStub,
    TurnaroundRepositoryStub,
)


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from turnaround import __version__

    return __version__


@pytest.fixture
def t0() -> datetime:
    """Scheduled arrival used by most tests."""
    return datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def admin() -> CallerContext:
    return CallerContext(ADMIN_ID, frozenset({Privilege.ADMINISTRATIVE}))


@pytest.fixture
def supervisor() -> CallerContext:
    return CallerContext(SUPERVISOR_ID, frozenset({Privilege.OPERATIONAL}))


@pytest.fixture
def privilege_registry() -> PrivilegeRegistryStub:
    registry = PrivilegeRegistryStub()
    registry.grant(ADMIN_ID, Privilege.ADMINISTRATIVE)
    registry.grant(SUPERVISOR_ID, Privilege.OPERATIONAL)
    return registry


@pytest.fixture
def audit_log() -> AuditLogStub:
    return AuditLogStub()


@pytest.fixture
def turnaround_repository() -> TurnaroundRepositoryStub:
    return TurnaroundRepositoryStub()


@pytest.fixture
def badge_issuer() -> BadgeIssuerStub:
    return BadgeIssuerStub()


@pytest.fixture
def badge_repository() -> BadgeRepositoryStub:
    return BadgeRepositoryStub()

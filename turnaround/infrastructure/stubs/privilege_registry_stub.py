"""In-memory privilege registry (stub implementation).

Stands in for the identity provisioning collaborator: tests and the
simulation grant privileges directly with ``grant``/``revoke``.
"""

from __future__ import annotations

from turnaround.application.ports.privilege_registry import PrivilegeRegistryProtocol
from turnaround.domain.models.actor import Privilege


class PrivilegeRegistryStub(PrivilegeRegistryProtocol):
    """Privilege grants held in memory."""

    def __init__(self, grants: dict[str, set[Privilege]] | None = None) -> None:
        """Initialize the stub.

        Args:
            grants: Optional initial mapping of identity to privileges.
        """
        self._grants: dict[str, set[Privilege]] = {
            identity: set(privileges) for identity, privileges in (grants or {}).items()
        }

    def grant(self, identity: str, privilege: Privilege) -> None:
        self._grants.setdefault(identity, set()).add(privilege)

    def revoke(self, identity: str, privilege: Privilege) -> None:
        self._grants.get(identity, set()).discard(privilege)

    def clear(self) -> None:
        """Clear all stored data."""
        self._grants.clear()

    async def privileges_for(self, identity: str) -> frozenset[Privilege]:
        return frozenset(self._grants.get(identity, ()))

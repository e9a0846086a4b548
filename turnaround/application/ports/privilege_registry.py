"""Privilege registry port.

Identity provisioning grants administrative and operational privilege to
identities; the turnaround services only consume the resulting lookup.
"""

from __future__ import annotations

from typing import Protocol

from turnaround.domain.models.actor import Privilege


class PrivilegeRegistryProtocol(Protocol):
    """Lookup of privilege tiers held by an identity."""

    async def privileges_for(self, identity: str) -> frozenset[Privilege]:
        """Return the privileges of ``identity`` (empty if none)."""
        ...

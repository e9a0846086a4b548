"""Badge issuance ports.

The issuer mints a reputation badge for one role of a certified
turnaround; the repository remembers which (turnaround, role) pairs
already hold one so that issuance stays at most once per pair.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from turnaround.domain.models.actor import Actor
from turnaround.domain.models.badge import BadgeRecord


class BadgeIssuerProtocol(Protocol):
    """Mints badges."""

    async def mint(
        self,
        turnaround_id: str,
        actor: Actor,
        identity: str,
        issued_at: datetime,
    ) -> BadgeRecord:
        """Mint a badge for ``actor`` of ``turnaround_id`` held by ``identity``.

        Returns:
            The issued badge with its token id and metadata URI.
        """
        ...


class BadgeRepositoryProtocol(Protocol):
    """Record of issued badges."""

    async def save(self, badge: BadgeRecord) -> None:
        ...

    async def get(self, turnaround_id: str, actor: Actor) -> BadgeRecord | None:
        ...

    async def list_for_turnaround(self, turnaround_id: str) -> list[BadgeRecord]:
        ...

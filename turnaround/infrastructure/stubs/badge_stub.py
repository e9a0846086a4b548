"""In-memory badge issuer and badge repository (stub implementations).

The issuer hands out sequential token ids and builds metadata URIs under a
configurable base, in place of an external minting service.
"""

from __future__ import annotations

import asyncio
from datetime import datetime

from turnaround.application.ports.badge_issuer import (
    BadgeIssuerProtocol,
    BadgeRepositoryProtocol,
)
from turnaround.domain.models.actor import Actor
from turnaround.domain.models.badge import BadgeRecord

DEFAULT_METADATA_BASE_URI = "ipfs://turnaround-badges"


class BadgeIssuerStub(BadgeIssuerProtocol):
    """Issues badges with sequential token ids starting at 1.

    Attributes:
        minted: Every badge minted, in order (for test assertions).
    """

    def __init__(self, metadata_base_uri: str = DEFAULT_METADATA_BASE_URI) -> None:
        self._metadata_base_uri = metadata_base_uri.rstrip("/")
        self._next_token_id = 1
        self._lock = asyncio.Lock()
        self.minted: list[BadgeRecord] = []

    async def mint(
        self,
        turnaround_id: str,
        actor: Actor,
        identity: str,
        issued_at: datetime,
    ) -> BadgeRecord:
        async with self._lock:
            token_id = self._next_token_id
            self._next_token_id += 1
            badge = BadgeRecord(
                token_id=token_id,
                turnaround_id=turnaround_id,
                actor=actor,
                identity=identity,
                metadata_uri=f"{self._metadata_base_uri}/{token_id}.json",
                issued_at=issued_at,
            )
            self.minted.append(badge)
            return badge


class BadgeRepositoryStub(BadgeRepositoryProtocol):
    """Issued badges keyed by (turnaround id, actor)."""

    def __init__(self) -> None:
        self._badges: dict[tuple[str, Actor], BadgeRecord] = {}

    def clear(self) -> None:
        """Clear all stored data."""
        self._badges.clear()

    async def save(self, badge: BadgeRecord) -> None:
        self._badges[(badge.turnaround_id, badge.actor)] = badge

    async def get(self, turnaround_id: str, actor: Actor) -> BadgeRecord | None:
        return self._badges.get((turnaround_id, actor))

    async def list_for_turnaround(self, turnaround_id: str) -> list[BadgeRecord]:
        return sorted(
            (b for (tid, _), b in self._badges.items() if tid == turnaround_id),
            key=lambda b: b.token_id,
        )

"""Turnaround repository port."""

from __future__ import annotations

from typing import Protocol

from turnaround.domain.entities.turnaround_checklist import TurnaroundChecklist


class TurnaroundRepositoryProtocol(Protocol):
    """Storage for live turnaround aggregates, keyed by off-chain id."""

    async def add(self, checklist: TurnaroundChecklist) -> None:
        """Store a new aggregate.

        Raises:
            TurnaroundAlreadyExistsError: If the id is already stored.
        """
        ...

    async def get(self, turnaround_id: str) -> TurnaroundChecklist | None:
        """Return the aggregate, or None if unknown."""
        ...

    async def list_ids(self) -> list[str]:
        """Return all stored turnaround ids in insertion order."""
        ...

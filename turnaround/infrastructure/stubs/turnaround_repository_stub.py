"""In-memory turnaround repository (stub implementation)."""

from __future__ import annotations

from turnaround.application.ports.turnaround_repository import (
    TurnaroundRepositoryProtocol,
)
from turnaround.domain.entities.turnaround_checklist import TurnaroundChecklist
from turnaround.domain.errors.turnaround import TurnaroundAlreadyExistsError


class TurnaroundRepositoryStub(TurnaroundRepositoryProtocol):
    """Stores live aggregates in a dict keyed by off-chain id."""

    def __init__(self) -> None:
        self._turnarounds: dict[str, TurnaroundChecklist] = {}

    def clear(self) -> None:
        """Clear all stored data."""
        self._turnarounds.clear()

    async def add(self, checklist: TurnaroundChecklist) -> None:
        if checklist.turnaround_id in self._turnarounds:
            raise TurnaroundAlreadyExistsError(checklist.turnaround_id)
        self._turnarounds[checklist.turnaround_id] = checklist

    async def get(self, turnaround_id: str) -> TurnaroundChecklist | None:
        return self._turnarounds.get(turnaround_id)

    async def list_ids(self) -> list[str]:
        return list(self._turnarounds)

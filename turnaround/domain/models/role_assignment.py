"""Role assignment: which identity acts for each operational role."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from turnaround.domain.models.actor import Actor


@dataclass(frozen=True)
class RoleAssignment:
    """Mapping from each role to at most one authorized identity.

    Unassigned roles have no identity, so only operational privilege can act
    on their tasks. Assigning a role again overwrites the previous identity.
    """

    assignments: Mapping[Actor, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "assignments", MappingProxyType(dict(self.assignments)))

    def identity_for(self, actor: Actor) -> str | None:
        return self.assignments.get(actor)

    def roles_of(self, identity: str) -> frozenset[Actor]:
        """All roles currently assigned to ``identity``."""
        return frozenset(a for a, i in self.assignments.items() if i == identity)

    def with_assignment(self, actor: Actor, identity: str) -> RoleAssignment:
        """Return a copy with ``actor`` assigned to ``identity``.

        Raises:
            ValueError: If identity is empty.
        """
        if not identity or not identity.strip():
            raise ValueError("Assigned identity must be a non-empty string")
        updated = dict(self.assignments)
        updated[actor] = identity
        return replace(self, assignments=updated)

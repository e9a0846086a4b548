"""Badge record domain model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from turnaround.domain.models.actor import Actor


@dataclass(frozen=True, eq=True)
class BadgeRecord:
    """A reputation badge issued to one role of a certified turnaround.

    At most one badge exists per (turnaround_id, actor) pair.

    Attributes:
        token_id: Issuer-assigned token number, unique across turnarounds.
        turnaround_id: Off-chain identifier of the certified turnaround.
        actor: Role the badge was earned by.
        identity: Identity assigned to the role at issuance.
        metadata_uri: Location of the badge metadata.
        issued_at: Issuance instant.
    """

    token_id: int
    turnaround_id: str
    actor: Actor
    identity: str
    metadata_uri: str
    issued_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "token_id": self.token_id,
            "turnaround_id": self.turnaround_id,
            "actor": self.actor.value,
            "identity": self.identity,
            "metadata_uri": self.metadata_uri,
            "issued_at": self.issued_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BadgeRecord:
        return cls(
            token_id=int(data["token_id"]),
            turnaround_id=data["turnaround_id"],
            actor=Actor(data["actor"]),
            identity=data["identity"],
            metadata_uri=data["metadata_uri"],
            issued_at=datetime.fromisoformat(data["issued_at"]),
        )

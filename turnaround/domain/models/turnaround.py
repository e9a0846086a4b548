"""Turnaround header domain model.

The header carries the identity and schedule of one turnaround plus the
certification fields that stay unset until it is sealed. The schedule
invariant (arrival strictly before departure) is checked once, here, at
creation and never revisited.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from turnaround.domain.errors.turnaround import InvalidScheduleError
from turnaround.domain.models.certification import CertificationRecord
from turnaround.domain.models.task import require_aware

_IATA_AIRPORT = re.compile(r"^[A-Z]{3}$")


@dataclass(frozen=True, eq=True)
class TurnaroundHeader:
    """Identity, schedule and certification state of a turnaround.

    Attributes:
        off_chain_id: Opaque human-readable identifier
            (e.g. "BCN-VY8123-2026-01-09").
        airport_code: IATA airport code (3 uppercase letters).
        scheduled_arrival: Scheduled on-block time.
        scheduled_departure: Scheduled off-block time.
        flight_number: Optional flight designator.
        airline_code: Optional IATA airline code.
        certification: Sealed record, None until certified.
    """

    off_chain_id: str
    airport_code: str
    scheduled_arrival: datetime
    scheduled_departure: datetime
    flight_number: str | None = field(default=None)
    airline_code: str | None = field(default=None)
    certification: CertificationRecord | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate identifier, airport code and schedule.

        Raises:
            ValueError: If the identifier or airport code is malformed, or
                either scheduled instant is naive.
            InvalidScheduleError: If arrival is not before departure.
        """
        if not isinstance(self.off_chain_id, str) or not self.off_chain_id.strip():
            raise ValueError("off_chain_id must be a non-empty string")
        if not isinstance(self.airport_code, str) or not _IATA_AIRPORT.match(self.airport_code):
            raise ValueError(
                f"airport_code must be a 3-letter uppercase IATA code, got {self.airport_code!r}"
            )
        require_aware(self.scheduled_arrival, "scheduled_arrival")
        require_aware(self.scheduled_departure, "scheduled_departure")
        if self.scheduled_arrival >= self.scheduled_departure:
            raise InvalidScheduleError(self.scheduled_arrival, self.scheduled_departure)

    @property
    def is_certified(self) -> bool:
        return self.certification is not None

    @property
    def actual_departure(self) -> datetime | None:
        if self.certification is None:
            return None
        return self.certification.actual_departure

    @property
    def certification_hash(self) -> str | None:
        if self.certification is None:
            return None
        return self.certification.certification_hash

    def with_certification(self, certification: CertificationRecord) -> TurnaroundHeader:
        """Return the sealed header.

        Raises:
            ValueError: If the header already carries a certification.
        """
        if self.certification is not None:
            raise ValueError(f"Turnaround {self.off_chain_id} already sealed")
        return replace(self, certification=certification)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the uncertified part of the header.

        Certification fields travel in their own audit record.
        """
        return {
            "off_chain_id": self.off_chain_id,
            "airport_code": self.airport_code,
            "scheduled_arrival": self.scheduled_arrival.isoformat(),
            "scheduled_departure": self.scheduled_departure.isoformat(),
            "flight_number": self.flight_number,
            "airline_code": self.airline_code,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TurnaroundHeader:
        return cls(
            off_chain_id=data["off_chain_id"],
            airport_code=data["airport_code"],
            scheduled_arrival=datetime.fromisoformat(data["scheduled_arrival"]),
            scheduled_departure=datetime.fromisoformat(data["scheduled_departure"]),
            flight_number=data.get("flight_number"),
            airline_code=data.get("airline_code"),
        )

"""Turnaround-level errors: schedule validation and lookup."""

from __future__ import annotations

from datetime import datetime

from turnaround.domain.exceptions import TurnaroundError


class InvalidScheduleError(TurnaroundError):
    """Raised at creation when scheduled arrival is not before departure.

    Attributes:
        scheduled_arrival: The rejected arrival time.
        scheduled_departure: The rejected departure time.
    """

    def __init__(self, scheduled_arrival: datetime, scheduled_departure: datetime) -> None:
        self.scheduled_arrival = scheduled_arrival
        self.scheduled_departure = scheduled_departure
        super().__init__(
            "Scheduled arrival must be before scheduled departure: "
            f"arrival={scheduled_arrival.isoformat()}, "
            f"departure={scheduled_departure.isoformat()}"
        )


class TurnaroundNotFoundError(TurnaroundError):
    """Raised when no turnaround exists for an identifier."""

    def __init__(self, turnaround_id: str) -> None:
        self.turnaround_id = turnaround_id
        super().__init__(f"Turnaround {turnaround_id} not found")


class TurnaroundAlreadyExistsError(TurnaroundError):
    """Raised when creating a turnaround under an identifier already in use."""

    def __init__(self, turnaround_id: str) -> None:
        self.turnaround_id = turnaround_id
        super().__init__(f"Turnaround {turnaround_id} already exists")


class TurnaroundNotCertifiedError(TurnaroundError):
    """Raised when an operation needs a certified turnaround.

    Badge issuance only reacts to a sealed turnaround.
    """

    def __init__(self, turnaround_id: str) -> None:
        self.turnaround_id = turnaround_id
        super().__init__(f"Turnaround {turnaround_id} is not certified")

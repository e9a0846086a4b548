"""Turnaround task domain model.

Each turnaround carries a fixed fleet of 27 tasks with identities 0..26.
A task starts PENDING and reaches exactly one terminal status the moment it
is completed: ON_TIME when completed at or before its deadline, LATE
otherwise. Task records are frozen; every mutation returns a new instance.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any

from turnaround.domain.models.actor import Actor

TASK_COUNT: int = 27


def require_aware(value: datetime, name: str) -> None:
    """Reject naive datetimes; every instant in a turnaround carries a zone.

    Raises:
        ValueError: If ``value`` is not a timezone-aware datetime.
    """
    if not isinstance(value, datetime) or value.utcoffset() is None:
        raise ValueError(f"{name} must be a timezone-aware datetime, got {value!r}")


class TaskStatus(Enum):
    """Status in the task lifecycle.

    State Machine:
        PENDING -> ON_TIME (completed at or before deadline)
        PENDING -> LATE (completed after deadline)

    ON_TIME and LATE are terminal.
    """

    PENDING = "PENDING"
    ON_TIME = "ON_TIME"
    LATE = "LATE"

    def is_terminal(self) -> bool:
        """Check whether no further transition is possible from this status."""
        return self is not TaskStatus.PENDING


@dataclass(frozen=True, eq=True)
class TaskDefinition:
    """Initial definition of one task slot, as supplied by a template.

    Attributes:
        task_id: Slot index in [0, TASK_COUNT).
        name: Human-readable task name.
        actor: Role the task is assigned to.
        deadline: Absolute deadline.
        mandatory: Whether completion is required for certification.
    """

    task_id: int
    name: str
    actor: Actor
    deadline: datetime
    mandatory: bool = True

    def __post_init__(self) -> None:
        require_aware(self.deadline, "deadline")

    def to_dict(self) -> dict[str, Any]:
        return {
            "task_id": self.task_id,
            "name": self.name,
            "actor": self.actor.value,
            "deadline": self.deadline.isoformat(),
            "mandatory": self.mandatory,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TaskDefinition:
        return cls(
            task_id=int(data["task_id"]),
            name=str(data["name"]),
            actor=Actor(data["actor"]),
            deadline=datetime.fromisoformat(data["deadline"]),
            mandatory=bool(data["mandatory"]),
        )


@dataclass(frozen=True, eq=True)
class TurnaroundTask:
    """Current state of one task.

    Attributes:
        task_id: Slot index in [0, TASK_COUNT).
        name: Human-readable task name.
        actor: Role the task is assigned to.
        deadline: Absolute deadline.
        mandatory: Whether completion is required for certification.
        status: PENDING until completed, then ON_TIME or LATE forever.
        completed_at: Completion instant, None while pending.
        completed_by: Identity that completed the task, None while pending.
        justification: Delay justification, empty until supplied.
    """

    task_id: int
    name: str
    actor: Actor
    deadline: datetime
    mandatory: bool = True
    status: TaskStatus = field(default=TaskStatus.PENDING)
    completed_at: datetime | None = field(default=None)
    completed_by: str | None = field(default=None)
    justification: str = field(default="")

    @classmethod
    def from_definition(cls, definition: TaskDefinition) -> TurnaroundTask:
        """Create a pending task from its template definition."""
        return cls(
            task_id=definition.task_id,
            name=definition.name,
            actor=definition.actor,
            deadline=definition.deadline,
            mandatory=definition.mandatory,
        )

    @property
    def completed(self) -> bool:
        return self.status.is_terminal()

    @property
    def is_late(self) -> bool:
        return self.status is TaskStatus.LATE

    @property
    def is_justified(self) -> bool:
        return bool(self.justification)

    @property
    def is_unjustified_late(self) -> bool:
        return self.is_late and not self.is_justified

    def classify(self, completed_at: datetime) -> TaskStatus:
        """Status this task would take if completed at ``completed_at``.

        The deadline itself still counts as on time.
        """
        return TaskStatus.ON_TIME if completed_at <= self.deadline else TaskStatus.LATE

    def with_completion(self, completed_at: datetime, completed_by: str) -> TurnaroundTask:
        """Return the completed version of this task.

        Callers are responsible for rejecting already completed tasks first;
        this only guards the transition itself.

        Raises:
            ValueError: If the task is already in a terminal status.
        """
        if self.completed:
            raise ValueError(f"Task {self.task_id} already has terminal status {self.status.value}")
        return replace(
            self,
            status=self.classify(completed_at),
            completed_at=completed_at,
            completed_by=completed_by,
        )

    def with_justification(self, text: str) -> TurnaroundTask:
        """Return this task with its justification replaced by ``text``.

        Raises:
            ValueError: If the task is not LATE.
        """
        if not self.is_late:
            raise ValueError(f"Task {self.task_id} is not late")
        return replace(self, justification=text)

    def with_mandatory(self, mandatory: bool) -> TurnaroundTask:
        return replace(self, mandatory=mandatory)

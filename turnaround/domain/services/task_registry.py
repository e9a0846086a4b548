"""TaskRegistry: the fixed fleet of 27 task records.

The registry owns the task records of one turnaround and enforces the
per-task transition rules. Records are frozen; each mutation swaps the
slot for a new record, so any snapshot handed out earlier stays consistent.
Turnaround-level rules (certification state, authorization) belong to the
aggregate and are checked before the registry is asked to mutate.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import datetime

from turnaround.domain.errors.task import (
    AlreadyCompletedError,
    InvalidTaskError,
    NotCompletedError,
    NotLateError,
)
from turnaround.domain.models.task import (
    TASK_COUNT,
    TaskDefinition,
    TaskStatus,
    TurnaroundTask,
)


class TaskRegistry:
    """Indexed collection of exactly TASK_COUNT task records."""

    def __init__(self, definitions: Iterable[TaskDefinition]) -> None:
        """Build pending tasks from their definitions.

        Args:
            definitions: Exactly TASK_COUNT definitions with ids 0..26.

        Raises:
            ValueError: If the count or the ids are wrong.
        """
        ordered = sorted(definitions, key=lambda d: d.task_id)
        if len(ordered) != TASK_COUNT:
            raise ValueError(f"A turnaround needs exactly {TASK_COUNT} tasks, got {len(ordered)}")
        if [d.task_id for d in ordered] != list(range(TASK_COUNT)):
            raise ValueError(f"Task ids must be exactly 0..{TASK_COUNT - 1}")
        self._tasks: list[TurnaroundTask] = [
            TurnaroundTask.from_definition(d) for d in ordered
        ]

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[TurnaroundTask]:
        return iter(self.snapshot())

    def get(self, task_id: int) -> TurnaroundTask:
        """Return the current record of a task.

        Raises:
            InvalidTaskError: If task_id is outside [0, TASK_COUNT).
        """
        if not isinstance(task_id, int) or isinstance(task_id, bool) or not 0 <= task_id < TASK_COUNT:
            raise InvalidTaskError(task_id, TASK_COUNT)
        return self._tasks[task_id]

    def snapshot(self) -> tuple[TurnaroundTask, ...]:
        return tuple(self._tasks)

    def outstanding_mandatory(self) -> tuple[int, ...]:
        """Ids of mandatory tasks that are not completed yet."""
        return tuple(t.task_id for t in self._tasks if t.mandatory and not t.completed)

    def check_completable(self, task_id: int) -> TurnaroundTask:
        """Return the task if it may still be completed.

        Raises:
            InvalidTaskError: If task_id is out of range.
            AlreadyCompletedError: If the task is already completed.
        """
        task = self.get(task_id)
        if task.completed:
            raise AlreadyCompletedError(task_id)
        return task

    def check_justifiable(self, task_id: int) -> TurnaroundTask:
        """Return the task if a delay justification may be stored on it.

        Raises:
            InvalidTaskError: If task_id is out of range.
            NotCompletedError: If the task is still pending.
            NotLateError: If the task was completed on time.
        """
        task = self.get(task_id)
        if not task.completed:
            raise NotCompletedError(task_id)
        if task.status is not TaskStatus.LATE:
            raise NotLateError(task_id, task.status.value)
        return task

    def complete(self, task_id: int, completed_at: datetime, completed_by: str) -> TurnaroundTask:
        """Complete a task and classify it against its deadline."""
        task = self.check_completable(task_id).with_completion(completed_at, completed_by)
        self._tasks[task_id] = task
        return task

    def record_completion(
        self,
        task_id: int,
        completed_at: datetime,
        completed_by: str,
        status: TaskStatus,
    ) -> TurnaroundTask:
        """Re-apply a completion whose status was already decided.

        Used when replaying a log: the recorded status must agree with the
        deadline, otherwise the log is inconsistent.

        Raises:
            ValueError: If the recorded status disagrees with the deadline.
        """
        expected = self.check_completable(task_id).classify(completed_at)
        if expected is not status:
            raise ValueError(
                f"Task {task_id} recorded as {status.value} but classifies as {expected.value}"
            )
        return self.complete(task_id, completed_at, completed_by)

    def justify(self, task_id: int, text: str) -> TurnaroundTask:
        task = self.check_justifiable(task_id).with_justification(text)
        self._tasks[task_id] = task
        return task

    def set_mandatory(self, task_id: int, mandatory: bool) -> TurnaroundTask:
        task = self.get(task_id).with_mandatory(mandatory)
        self._tasks[task_id] = task
        return task

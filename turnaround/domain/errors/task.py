"""Task lifecycle errors.

This module defines the errors raised by the per-task state machine
(Pending -> OnTime | Late). Each error names the task it was raised for so
the caller can pick a different task or wait for the missing precondition.
"""

from __future__ import annotations

from turnaround.domain.exceptions import TurnaroundError


class TaskError(TurnaroundError):
    """Base exception for task lifecycle failures."""

    pass


class InvalidTaskError(TaskError):
    """Raised when a task id falls outside the fixed task range.

    Attributes:
        task_id: The rejected task id.
        task_count: Number of tasks in the turnaround.
    """

    def __init__(self, task_id: int, task_count: int) -> None:
        """Initialize InvalidTaskError.

        Args:
            task_id: The rejected task id.
            task_count: Number of tasks in the turnaround.
        """
        self.task_id = task_id
        self.task_count = task_count
        super().__init__(
            f"Invalid task id {task_id}: must be in range [0, {task_count})"
        )


class AlreadyCompletedError(TaskError):
    """Raised when completing a task that has already been completed.

    Completion is a one-way transition; the recorded status never changes.

    Attributes:
        task_id: The task that is already completed.
    """

    def __init__(self, task_id: int) -> None:
        self.task_id = task_id
        super().__init__(f"Task {task_id} is already completed")


class NotCompletedError(TaskError):
    """Raised when justifying a delay on a task that is still pending.

    Attributes:
        task_id: The pending task.
    """

    def __init__(self, task_id: int) -> None:
        self.task_id = task_id
        super().__init__(f"Task {task_id} is not completed")


class NotLateError(TaskError):
    """Raised when justifying a delay on a task that was completed on time.

    Attributes:
        task_id: The task.
        status: The task's current status value.
    """

    def __init__(self, task_id: int, status: str) -> None:
        self.task_id = task_id
        self.status = status
        super().__init__(
            f"Task {task_id} is not late (status: {status}); "
            "only late tasks accept a delay justification"
        )


class InvalidJustificationError(TaskError):
    """Raised when a delay justification is empty or too long.

    Attributes:
        task_id: The task being justified.
        reason: Why the text was rejected.
    """

    def __init__(self, task_id: int, reason: str) -> None:
        self.task_id = task_id
        self.reason = reason
        super().__init__(f"Invalid justification for task {task_id}: {reason}")

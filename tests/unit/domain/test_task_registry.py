"""Unit tests for TaskRegistry and the task status machine.

Key Test Scenarios:
1. Completion at or before the deadline is ON_TIME, after it LATE
2. Terminal statuses never change
3. Justification only on completed late tasks
4. Out-of-range ids are rejected with InvalidTaskError
"""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from tests.helpers import uniform_template
from turnaround.domain.errors import (
    AlreadyCompletedError,
    InvalidTaskError,
    NotCompletedError,
    NotLateError,
)
from turnaround.domain.models.task import TASK_COUNT, TaskStatus
from turnaround.domain.services.task_registry import TaskRegistry


@pytest.fixture
def registry(t0: datetime) -> TaskRegistry:
    return TaskRegistry(uniform_template(t0))


class TestConstruction:
    """Tests for building the registry from definitions."""

    def test_holds_exactly_27_pending_tasks(self, registry: TaskRegistry) -> None:
        assert len(registry) == TASK_COUNT
        assert all(t.status is TaskStatus.PENDING for t in registry)

    def test_rejects_wrong_task_count(self, t0: datetime) -> None:
        with pytest.raises(ValueError, match="exactly 27"):
            TaskRegistry(uniform_template(t0)[:-1])

    def test_rejects_non_contiguous_ids(self, t0: datetime) -> None:
        definitions = list(uniform_template(t0))
        definitions[5] = definitions[4]
        with pytest.raises(ValueError, match="ids"):
            TaskRegistry(definitions)

    def test_definitions_are_ordered_by_id(self, t0: datetime) -> None:
        registry = TaskRegistry(reversed(uniform_template(t0)))
        assert [t.task_id for t in registry] == list(range(TASK_COUNT))


class TestGet:
    """Tests for task lookup."""

    @pytest.mark.parametrize("task_id", [-1, 27, 100])
    def test_out_of_range_raises_invalid_task(self, registry: TaskRegistry, task_id: int) -> None:
        with pytest.raises(InvalidTaskError) as exc_info:
            registry.get(task_id)
        assert exc_info.value.task_id == task_id

    def test_bool_is_not_a_task_id(self, registry: TaskRegistry) -> None:
        with pytest.raises(InvalidTaskError):
            registry.get(True)

    def test_boundaries_are_valid(self, registry: TaskRegistry) -> None:
        assert registry.get(0).task_id == 0
        assert registry.get(26).task_id == 26


class TestComplete:
    """Tests for task completion and classification."""

    def test_completion_at_deadline_is_on_time(self, registry: TaskRegistry) -> None:
        deadline = registry.get(3).deadline
        task = registry.complete(3, deadline, "crew")
        assert task.status is TaskStatus.ON_TIME
        assert task.completed_at == deadline
        assert task.completed_by == "crew"

    def test_completion_before_deadline_is_on_time(self, registry: TaskRegistry) -> None:
        deadline = registry.get(3).deadline
        assert registry.complete(3, deadline - timedelta(minutes=1), "crew").status is TaskStatus.ON_TIME

    def test_completion_after_deadline_is_late(self, registry: TaskRegistry) -> None:
        deadline = registry.get(3).deadline
        task = registry.complete(3, deadline + timedelta(seconds=1), "crew")
        assert task.status is TaskStatus.LATE
        assert task.is_unjustified_late

    def test_second_completion_raises_and_keeps_status(self, registry: TaskRegistry) -> None:
        deadline = registry.get(3).deadline
        registry.complete(3, deadline, "crew")
        with pytest.raises(AlreadyCompletedError):
            registry.complete(3, deadline + timedelta(hours=1), "other")
        assert registry.get(3).status is TaskStatus.ON_TIME
        assert registry.get(3).completed_by == "crew"

    def test_snapshot_is_not_affected_by_later_mutation(self, registry: TaskRegistry) -> None:
        before = registry.snapshot()
        registry.complete(0, before[0].deadline, "crew")
        assert before[0].status is TaskStatus.PENDING
        assert registry.get(0).status is TaskStatus.ON_TIME


class TestRecordCompletion:
    """Tests for re-applying a recorded completion."""

    def test_matching_status_is_applied(self, registry: TaskRegistry) -> None:
        deadline = registry.get(2).deadline
        task = registry.record_completion(2, deadline, "crew", TaskStatus.ON_TIME)
        assert task.status is TaskStatus.ON_TIME

    def test_mismatched_status_raises_without_mutating(self, registry: TaskRegistry) -> None:
        deadline = registry.get(2).deadline
        with pytest.raises(ValueError, match="classifies as ON_TIME"):
            registry.record_completion(2, deadline, "crew", TaskStatus.LATE)
        assert registry.get(2).status is TaskStatus.PENDING


class TestJustify:
    """Tests for delay justification rules."""

    def test_pending_task_raises_not_completed(self, registry: TaskRegistry) -> None:
        with pytest.raises(NotCompletedError):
            registry.justify(4, "weather")

    def test_on_time_task_raises_not_late(self, registry: TaskRegistry) -> None:
        registry.complete(4, registry.get(4).deadline, "crew")
        with pytest.raises(NotLateError) as exc_info:
            registry.justify(4, "weather")
        assert exc_info.value.task_id == 4

    def test_late_task_stores_justification(self, registry: TaskRegistry) -> None:
        registry.complete(4, registry.get(4).deadline + timedelta(minutes=3), "crew")
        task = registry.justify(4, "late fuel truck")
        assert task.justification == "late fuel truck"
        assert task.is_late
        assert not task.is_unjustified_late

    def test_justification_can_be_revised(self, registry: TaskRegistry) -> None:
        registry.complete(4, registry.get(4).deadline + timedelta(minutes=3), "crew")
        registry.justify(4, "first")
        assert registry.justify(4, "second").justification == "second"


class TestOutstandingMandatory:
    """Tests for the mandatory outstanding list."""

    def test_lists_pending_mandatory_only(self, registry: TaskRegistry) -> None:
        registry.complete(0, registry.get(0).deadline, "crew")
        registry.set_mandatory(1, False)
        outstanding = registry.outstanding_mandatory()
        assert 0 not in outstanding
        assert 1 not in outstanding
        assert outstanding == tuple(range(2, TASK_COUNT))

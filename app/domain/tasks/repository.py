"""
Care Task Repository Protocol
=============================

Defines the interface for care task persistence.
Implementations can use SQLite, PostgreSQL, or other storage.
"""

from __future__ import annotations

import datetime
from abc import abstractmethod
from typing import Protocol

from app.domain.tasks.task_entity import CareTask, TaskCompletion


class CareTaskRepository(Protocol):
    """Protocol for care task persistence operations."""

    @abstractmethod
    def create(self, task: CareTask) -> CareTask:
        """
        Create a new task.

        Args:
            task: Task to create (task_id should be None)

        Returns:
            Created task with assigned task_id
        """
        ...

    @abstractmethod
    def get_by_id(self, task_id: int) -> CareTask | None:
        """Get a task by ID, or None if it does not exist."""
        ...

    @abstractmethod
    def list_by_plant(self, plant_id: int) -> list[CareTask]:
        """List a plant's tasks ordered by due date (unscheduled last)."""
        ...

    @abstractmethod
    def list_due_between(
        self,
        plant_ids: list[int],
        start: datetime.datetime | None,
        end: datetime.datetime,
    ) -> list[CareTask]:
        """
        List tasks whose due date falls in ``[start, end]``.

        Args:
            plant_ids: Plants to search
            start: Lower bound, or None for no lower bound
            end: Upper bound (inclusive)
        """
        ...

    @abstractmethod
    def list_assigned_to(self, user_id: int, plant_ids: list[int]) -> list[CareTask]:
        """Tasks on ``plant_ids`` assigned to ``user_id``, ordered by due date."""
        ...

    @abstractmethod
    def update(self, task: CareTask) -> CareTask | None:
        """Persist every mutable field of ``task``. Returns None if not found."""
        ...

    @abstractmethod
    def delete(self, task_id: int) -> bool:
        """Delete a task and, by cascade, its completions."""
        ...

    @abstractmethod
    def add_completion(self, completion: TaskCompletion) -> TaskCompletion:
        """Append a completion record."""
        ...

    @abstractmethod
    def list_completions(self, task_id: int, limit: int) -> list[TaskCompletion]:
        """Most recent completions first."""
        ...

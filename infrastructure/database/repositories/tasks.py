"""
Care Task Repository
====================

Concrete implementation of the CareTaskRepository protocol using SQLite.
Wraps the CareTaskOperations mixin from the infrastructure layer.
"""
from __future__ import annotations

import datetime

from app.domain.tasks import CareTask, TaskCompletion
from infrastructure.database.ops.tasks import CareTaskOperations


class SQLiteCareTaskRepository:
    """Task and completion persistence used by CareTaskService."""

    def __init__(self, backend: CareTaskOperations) -> None:
        self._backend = backend

    # ==================== Tasks ====================

    def create(self, task: CareTask) -> CareTask:
        return self._backend.create_care_task(task)

    def get_by_id(self, task_id: int) -> CareTask | None:
        return self._backend.get_care_task(task_id)

    def list_by_plant(self, plant_id: int) -> list[CareTask]:
        return self._backend.get_care_tasks_by_plant(plant_id)

    def list_due_between(
        self,
        plant_ids: list[int],
        start: datetime.datetime | None,
        end: datetime.datetime,
    ) -> list[CareTask]:
        return self._backend.get_care_tasks_due_between(plant_ids, start, end)

    def list_assigned_to(self, user_id: int, plant_ids: list[int]) -> list[CareTask]:
        return self._backend.get_care_tasks_assigned_to(user_id, plant_ids)

    def update(self, task: CareTask) -> CareTask | None:
        return self._backend.update_care_task(task)

    def delete(self, task_id: int) -> bool:
        return self._backend.delete_care_task(task_id)

    # ==================== Completions ====================

    def add_completion(self, completion: TaskCompletion) -> TaskCompletion:
        return self._backend.create_task_completion(completion)

    def list_completions(self, task_id: int, limit: int) -> list[TaskCompletion]:
        return self._backend.get_task_completions(task_id, limit)

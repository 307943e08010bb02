"""
Care Task Service
=================
Application-level service for care tasks and their recurrence lifecycle.

This service provides:
- Task creation in recurring, one-time or unscheduled mode
- Completion, skip, due-date and schedule edits
- Default task seeding for new plants
- Task listings: per plant, upcoming, overdue, assigned, history

Responsibilities:
- Enforce plant access (owner or plant group member) before every operation
- Apply the pure schedule transitions from ``app.domain.tasks`` and persist them
- Stamp the plant's last-care fields when a task is completed
- Record completions and edits in the audit log

Every method takes the acting ``user_id`` explicitly.
"""
from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING, Any, Optional

from app.constants import AUTO_GENERATED_TASK_TYPES, TASK_TYPE_CARE_FIELDS, TaskQueries
from app.domain.exceptions import (
    AccessDeniedError,
    NotFoundError,
    PlantCareError,
    ValidationError,
)
from app.domain.plants import Plant, PlantRepository
from app.domain.tasks import (
    CareTask,
    CareTaskRepository,
    RecurrencePattern,
    TaskCompletion,
    TaskDefaults,
    build_schedule,
    get_task_defaults,
    schedule_after_completion,
    skip_schedule,
    with_due_date,
    without_recurrence,
)
from app.enums.care import CareTaskType, ScheduleMode
from app.utils.time import coerce_datetime, utc_now

if TYPE_CHECKING:
    from infrastructure.logging.audit import AuditLogger

logger = logging.getLogger(__name__)

_UNSET: Any = object()


def _coerce_pattern(pattern: RecurrencePattern | dict | None) -> RecurrencePattern | None:
    if pattern is None or isinstance(pattern, RecurrencePattern):
        return pattern
    return RecurrencePattern.from_dict(pattern)


def _plant_summary(plant: Plant) -> dict[str, Any]:
    return {
        "plant_id": plant.plant_id,
        "name": plant.name,
        "species_type": plant.species_type,
    }


class CareTaskService:
    """Application service for care tasks."""

    def __init__(
        self,
        task_repo: CareTaskRepository,
        plant_repo: PlantRepository,
        audit_logger: Optional["AuditLogger"] = None,
        *,
        upcoming_days_default: int = TaskQueries.UPCOMING_DAYS_DEFAULT,
    ) -> None:
        self.task_repo = task_repo
        self.plant_repo = plant_repo
        self.audit_logger = audit_logger
        self.upcoming_days_default = upcoming_days_default

    # ------------------------------------------------------------------ access

    def verify_plant_access(self, plant_id: int, user_id: int) -> Plant:
        """
        Return the plant if ``user_id`` owns it or belongs to its group.

        Raises:
            NotFoundError: If the plant does not exist
            AccessDeniedError: If the user may not act on it
        """
        plant = self.plant_repo.get_by_id(plant_id)
        if plant is None:
            raise NotFoundError(f"Plant {plant_id} not found")
        if plant.user_id == user_id:
            return plant
        if plant.plant_group_id is not None and self.plant_repo.is_group_member(plant.plant_group_id, user_id):
            return plant
        raise AccessDeniedError("You don't have access to this plant")

    def _get_task(self, task_id: int, user_id: int) -> CareTask:
        task = self.task_repo.get_by_id(task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")
        self.verify_plant_access(task.plant_id, user_id)
        return task

    def _save(self, task: CareTask) -> CareTask:
        saved = self.task_repo.update(task)
        if saved is None:
            raise NotFoundError(f"Task {task.task_id} not found")
        return saved

    def _audit(self, user_id: int, action: str, task_id: int, **metadata: Any) -> None:
        if self.audit_logger:
            self.audit_logger.log_task_action(user_id, action, task_id, **metadata)

    # ---------------------------------------------------------------- defaults

    @staticmethod
    def get_task_defaults(task_type: CareTaskType | str) -> TaskDefaults:
        return get_task_defaults(task_type)

    def create_default_tasks_for_plant(
        self,
        plant_id: int,
        user_id: int,
        last_care_dates: dict[str, datetime.datetime | None] | None = None,
    ) -> list[int]:
        """
        Seed the automatic recurring tasks for a new plant.

        For water, fertilize, mist and repot_check the first due date is one
        cadence step after the matching last-care date (or now). A failure
        for one type is logged and the others are still created.

        Returns:
            IDs of the tasks that were created
        """
        last_care_dates = last_care_dates or {}
        now = utc_now()
        created: list[int] = []

        for task_type, care_field in AUTO_GENERATED_TASK_TYPES.items():
            defaults = get_task_defaults(task_type)
            last_care = coerce_datetime(last_care_dates.get(care_field))
            try:
                task = self.task_repo.create(
                    CareTask(
                        plant_id=plant_id,
                        user_id=user_id,
                        task_type=task_type,
                        title=defaults.title,
                        description=f"Automatically created {defaults.title.lower()} task",
                        schedule=build_schedule(
                            ScheduleMode.RECURRING,
                            base_date=last_care or now,
                            pattern=defaults.pattern,
                        ),
                        last_completed_at=last_care,
                        assigned_user_id=user_id,
                        created_by_user_id=user_id,
                    )
                )
                created.append(task.task_id)
            except Exception as e:
                logger.error("Failed to create %s task for plant %s: %s", task_type, plant_id, e)

        logger.info("Seeded %s default tasks for plant %s", len(created), plant_id)
        return created

    # ------------------------------------------------------------------ create

    def create_task(
        self,
        user_id: int,
        *,
        plant_id: int,
        task_type: CareTaskType | str,
        title: str,
        description: str | None = None,
        schedule_mode: ScheduleMode | str = ScheduleMode.RECURRING,
        recurrence_pattern: RecurrencePattern | dict | None = None,
        due_date: datetime.datetime | None = None,
        start_date: datetime.datetime | None = None,
        assigned_user_id: Any = _UNSET,
    ) -> CareTask:
        """
        Create a care task.

        Recurring tasks are first due one cadence step after ``start_date``
        (default now). One-time tasks keep ``due_date`` exactly.

        Raises:
            InvalidScheduleConfiguration: If the mode's required input is missing
            NotFoundError / AccessDeniedError: From the plant access check
        """
        plant = self.verify_plant_access(plant_id, user_id)

        schedule = build_schedule(
            schedule_mode,
            base_date=coerce_datetime(start_date) or utc_now(),
            pattern=_coerce_pattern(recurrence_pattern),
            due_date=coerce_datetime(due_date),
        )

        if assigned_user_id is _UNSET:
            assigned_user_id = plant.assigned_user_id or user_id

        task = self.task_repo.create(
            CareTask(
                plant_id=plant_id,
                user_id=user_id,
                task_type=task_type,
                title=title,
                description=description or None,
                schedule=schedule,
                assigned_user_id=assigned_user_id,
                created_by_user_id=user_id,
            )
        )
        logger.info("Created %s task %s for plant %s", task.schedule_mode, task.task_id, plant_id)
        return task

    # ---------------------------------------------------------------- complete

    def complete_task(
        self,
        task_id: int,
        user_id: int,
        notes: str | None = None,
        *,
        completed_at: datetime.datetime | None = None,
    ) -> CareTask | None:
        """
        Complete a task.

        Records a TaskCompletion, stamps the plant's last-care field(s) for
        the task type, then advances a recurring task, deletes a one-time
        task, or just stamps ``last_completed_at`` on an unscheduled task.

        Returns:
            The updated task, or None when a one-time task was removed
        """
        task = self._get_task(task_id, user_id)
        completed_at = completed_at or utc_now()

        self.task_repo.add_completion(
            TaskCompletion(task_id=task_id, user_id=user_id, completed_at=completed_at, notes=notes or None)
        )

        care_fields = TASK_TYPE_CARE_FIELDS.get(task.task_type)
        if care_fields:
            self.plant_repo.update_by_id(task.plant_id, {f: completed_at for f in care_fields})

        next_schedule = schedule_after_completion(task.schedule, completed_at)
        if next_schedule is None:
            self.task_repo.delete(task_id)
            logger.info("Completed one-time task %s; removed", task_id)
            self._audit(user_id, "complete_task", task_id, removed=True)
            return None

        task.schedule = next_schedule
        task.last_completed_at = completed_at
        saved = self._save(task)
        logger.info("Completed task %s; next due %s", task_id, saved.next_due_date)
        self._audit(user_id, "complete_task", task_id, next_due_date=saved.next_due_date)
        return saved

    def bulk_complete(self, task_ids: list[int], user_id: int, notes: str | None = None) -> dict[str, Any]:
        """
        Complete several tasks independently.

        Returns:
            ``{"completed": int, "failed": int, "errors": [str, ...]}``
        """
        if not task_ids:
            raise ValidationError("No tasks provided")

        completed_at = utc_now()
        results: dict[str, Any] = {"completed": 0, "failed": 0, "errors": []}
        for task_id in task_ids:
            try:
                self.complete_task(task_id, user_id, notes, completed_at=completed_at)
                results["completed"] += 1
            except PlantCareError as e:
                results["failed"] += 1
                results["errors"].append(f"Task {task_id}: {e}")
            except Exception as e:
                logger.error("Unexpected error completing task %s: %s", task_id, e, exc_info=True)
                results["failed"] += 1
                results["errors"].append(f"Task {task_id}: failed to complete")
        return results

    # -------------------------------------------------------------------- skip

    def skip_task(self, task_id: int, user_id: int, days: int) -> CareTask:
        """
        Push a task's due date back by ``days`` without recording a completion.

        Raises:
            CannotSkipUnscheduled: If the task has no due date
        """
        if days < 1:
            raise ValidationError("Days to skip must be at least 1")
        task = self._get_task(task_id, user_id)
        task.schedule = skip_schedule(task.schedule, days)
        saved = self._save(task)
        logger.info("Skipped task %s by %s days", task_id, days)
        return saved

    # -------------------------------------------------------------------- edit

    def update_task(
        self,
        task_id: int,
        user_id: int,
        *,
        title: str | None = None,
        description: str | None = None,
        schedule_mode: ScheduleMode | str | None = None,
        recurrence_pattern: RecurrencePattern | dict | None = None,
        due_date: datetime.datetime | None = None,
        assigned_user_id: Any = _UNSET,
    ) -> CareTask:
        """
        Edit a task's content and/or schedule.

        A mode change rebuilds the schedule (recurring is recomputed from the
        later of the last completion and creation). A pattern without a
        mode re-patterns the task as recurring from the same base date.
        """
        task = self._get_task(task_id, user_id)

        if title is not None:
            task.title = title
        if description is not None:
            task.description = description or None
        if assigned_user_id is not _UNSET:
            task.assigned_user_id = assigned_user_id

        pattern = _coerce_pattern(recurrence_pattern)
        base_date = max(d for d in (task.last_completed_at, task.created_at) if d is not None)
        if schedule_mode is not None:
            task.schedule = build_schedule(
                schedule_mode,
                base_date=base_date,
                pattern=pattern,
                due_date=coerce_datetime(due_date),
            )
        elif pattern is not None:
            task.schedule = build_schedule(ScheduleMode.RECURRING, base_date=base_date, pattern=pattern)

        task.last_modified_by_user_id = user_id
        saved = self._save(task)
        self._audit(user_id, "update_task", task_id, schedule_mode=saved.schedule_mode.value)
        return saved

    def convert_to_unscheduled(self, task_id: int, user_id: int) -> CareTask:
        """Drop the recurrence pattern. A stored due date is kept as a one-time date."""
        task = self._get_task(task_id, user_id)
        task.schedule = without_recurrence(task.schedule)
        return self._save(task)

    def update_due_date(self, task_id: int, user_id: int, due_date: datetime.datetime) -> CareTask:
        """Move the current due date; recurring tasks keep their pattern."""
        due = coerce_datetime(due_date)
        if due is None:
            raise ValidationError("A valid due date is required")
        task = self._get_task(task_id, user_id)
        task.schedule = with_due_date(task.schedule, due)
        return self._save(task)

    def assign_task(self, task_id: int, user_id: int, assigned_user_id: int | None) -> CareTask:
        task = self._get_task(task_id, user_id)
        task.assigned_user_id = assigned_user_id
        task.last_modified_by_user_id = user_id
        saved = self._save(task)
        self._audit(user_id, "assign_task", task_id, assigned_user_id=assigned_user_id)
        return saved

    def delete_task(self, task_id: int, user_id: int) -> None:
        task = self._get_task(task_id, user_id)
        self.task_repo.delete(task.task_id)
        logger.info("Deleted task %s from plant %s", task_id, task.plant_id)
        self._audit(user_id, "delete_task", task_id)

    # ---------------------------------------------------------------- listings

    def get_plant_tasks(self, plant_id: int, user_id: int) -> list[dict[str, Any]]:
        """A plant's tasks by due date, each with its most recent completions."""
        self.verify_plant_access(plant_id, user_id)
        tasks = []
        for task in self.task_repo.list_by_plant(plant_id):
            data = task.to_dict()
            data["completions"] = [
                c.to_dict()
                for c in self.task_repo.list_completions(task.task_id, TaskQueries.RECENT_COMPLETIONS)
            ]
            tasks.append(data)
        return tasks

    def _accessible_plants(self, user_id: int, species_type: str | None) -> dict[int, Plant]:
        plants = self.plant_repo.find_accessible(user_id)
        if species_type and species_type != "all":
            plants = [p for p in plants if p.species_type == species_type]
        return {p.plant_id: p for p in plants}

    def _with_plant(self, tasks: list[CareTask], plants: dict[int, Plant]) -> list[dict[str, Any]]:
        results = []
        for task in tasks:
            data = task.to_dict()
            data["plant"] = _plant_summary(plants[task.plant_id])
            results.append(data)
        return results

    def get_upcoming_tasks(
        self,
        user_id: int,
        days_ahead: int | None = None,
        species_type: str | None = None,
    ) -> list[dict[str, Any]]:
        """Tasks due between now and ``days_ahead`` days from now on accessible plants."""
        days_ahead = self.upcoming_days_default if days_ahead is None else days_ahead
        plants = self._accessible_plants(user_id, species_type)
        now = utc_now()
        tasks = self.task_repo.list_due_between(
            list(plants), now, now + datetime.timedelta(days=days_ahead)
        )
        return self._with_plant(tasks, plants)

    def get_overdue_tasks(self, user_id: int, species_type: str | None = None) -> list[dict[str, Any]]:
        """Tasks due now or earlier on accessible plants."""
        plants = self._accessible_plants(user_id, species_type)
        tasks = self.task_repo.list_due_between(list(plants), None, utc_now())
        return self._with_plant(tasks, plants)

    def get_assigned_tasks(self, user_id: int) -> list[dict[str, Any]]:
        """Tasks assigned to the user on plants they can access."""
        plants = self._accessible_plants(user_id, None)
        return self._with_plant(self.task_repo.list_assigned_to(user_id, list(plants)), plants)

    def get_task_history(self, task_id: int, user_id: int) -> dict[str, Any]:
        """A task with its last ten completions."""
        task = self._get_task(task_id, user_id)
        data = task.to_dict()
        data["completions"] = [
            c.to_dict() for c in self.task_repo.list_completions(task_id, TaskQueries.HISTORY_COMPLETIONS)
        ]
        return data

"""
Care Task Database Operations
=============================

Database operations for the CareTasks and TaskCompletions tables.
Implements the CareTaskRepository protocol.

The task schedule is flattened into the ``is_recurring``,
``recurrence_pattern`` (JSON) and ``next_due_date`` columns on write and
rebuilt on read.
"""

from __future__ import annotations

import datetime
import json
import logging
import sqlite3
from typing import TYPE_CHECKING, Any

from app.domain.exceptions import InvalidScheduleConfiguration, RepositoryError
from app.domain.tasks import CareTask, RecurrencePattern, TaskCompletion
from app.domain.tasks.schedule import schedule_from_columns, schedule_to_columns
from app.utils.time import coerce_datetime, iso_now, to_iso, utc_now

if TYPE_CHECKING:
    from sqlite3 import Connection

logger = logging.getLogger(__name__)

# Unscheduled tasks (NULL due date) sort after everything else
_ORDER_BY_DUE = "ORDER BY next_due_date IS NULL, next_due_date, task_id"


class CareTaskOperations:
    """Care-task CRUD helpers for database handlers."""

    def get_db(self) -> "Connection":
        """Get database connection. Must be implemented by mixing class."""
        raise NotImplementedError("Subclass must implement get_db()")

    # =========================================================================
    # Tasks
    # =========================================================================

    def create_care_task(self, task: CareTask) -> CareTask:
        """
        Insert a task.

        Returns:
            The task with ``task_id`` assigned

        Raises:
            RepositoryError: On database failure
        """
        columns = schedule_to_columns(task.schedule)
        db = self.get_db()
        try:
            cursor = db.execute(
                """
                INSERT INTO CareTasks (
                    plant_id, user_id, type, title, description,
                    is_recurring, recurrence_pattern, next_due_date, last_completed_at,
                    assigned_user_id, created_by_user_id, last_modified_by_user_id,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task.plant_id,
                    task.user_id,
                    task.task_type.value,
                    task.title,
                    task.description,
                    int(columns["is_recurring"]),
                    self._pattern_to_json(columns["recurrence_pattern"]),
                    to_iso(columns["next_due_date"]),
                    to_iso(task.last_completed_at),
                    task.assigned_user_id,
                    task.created_by_user_id,
                    task.last_modified_by_user_id,
                    to_iso(task.created_at),
                    to_iso(task.updated_at),
                ),
            )
            db.commit()
        except sqlite3.Error as e:
            db.rollback()
            logger.error("Error creating %s task for plant %s: %s", task.task_type, task.plant_id, e)
            raise RepositoryError(f"Failed to create task: {e}") from e

        task.task_id = cursor.lastrowid
        logger.debug("Created task %s (%s) for plant %s", task.task_id, task.task_type, task.plant_id)
        return task

    def get_care_task(self, task_id: int) -> CareTask | None:
        db = self.get_db()
        try:
            row = db.execute("SELECT * FROM CareTasks WHERE task_id = ?", (task_id,)).fetchone()
        except sqlite3.Error as e:
            logger.error("Error fetching task %s: %s", task_id, e)
            return None
        return self._row_to_task(dict(row)) if row else None

    def get_care_tasks_by_plant(self, plant_id: int) -> list[CareTask]:
        db = self.get_db()
        try:
            rows = db.execute(
                f"SELECT * FROM CareTasks WHERE plant_id = ? {_ORDER_BY_DUE}",
                (plant_id,),
            ).fetchall()
        except sqlite3.Error as e:
            logger.error("Error listing tasks for plant %s: %s", plant_id, e)
            return []
        return [self._row_to_task(dict(r)) for r in rows]

    def get_care_tasks_due_between(
        self,
        plant_ids: list[int],
        start: datetime.datetime | None,
        end: datetime.datetime,
    ) -> list[CareTask]:
        """Tasks on the given plants with a due date in ``[start, end]``."""
        if not plant_ids:
            return []

        placeholders = ", ".join("?" for _ in plant_ids)
        clauses = [f"plant_id IN ({placeholders})", "next_due_date IS NOT NULL", "next_due_date <= ?"]
        params: list[Any] = [*plant_ids, to_iso(end)]
        if start is not None:
            clauses.append("next_due_date >= ?")
            params.append(to_iso(start))

        db = self.get_db()
        try:
            rows = db.execute(
                f"SELECT * FROM CareTasks WHERE {' AND '.join(clauses)} {_ORDER_BY_DUE}",
                params,
            ).fetchall()
        except sqlite3.Error as e:
            logger.error("Error listing due tasks: %s", e)
            return []
        return [self._row_to_task(dict(r)) for r in rows]

    def get_care_tasks_assigned_to(self, user_id: int, plant_ids: list[int]) -> list[CareTask]:
        if not plant_ids:
            return []
        placeholders = ", ".join("?" for _ in plant_ids)
        db = self.get_db()
        try:
            rows = db.execute(
                f"SELECT * FROM CareTasks WHERE assigned_user_id = ? AND plant_id IN ({placeholders}) {_ORDER_BY_DUE}",
                (user_id, *plant_ids),
            ).fetchall()
        except sqlite3.Error as e:
            logger.error("Error listing tasks assigned to user %s: %s", user_id, e)
            return []
        return [self._row_to_task(dict(r)) for r in rows]

    def update_care_task(self, task: CareTask) -> CareTask | None:
        """
        Persist every mutable field of ``task``.

        Returns:
            The stored task, or None if it no longer exists

        Raises:
            RepositoryError: On database failure
        """
        columns = schedule_to_columns(task.schedule)
        task.updated_at = utc_now()
        db = self.get_db()
        try:
            cursor = db.execute(
                """
                UPDATE CareTasks SET
                    type = ?, title = ?, description = ?,
                    is_recurring = ?, recurrence_pattern = ?, next_due_date = ?,
                    last_completed_at = ?, assigned_user_id = ?,
                    last_modified_by_user_id = ?, updated_at = ?
                WHERE task_id = ?
                """,
                (
                    task.task_type.value,
                    task.title,
                    task.description,
                    int(columns["is_recurring"]),
                    self._pattern_to_json(columns["recurrence_pattern"]),
                    to_iso(columns["next_due_date"]),
                    to_iso(task.last_completed_at),
                    task.assigned_user_id,
                    task.last_modified_by_user_id,
                    to_iso(task.updated_at),
                    task.task_id,
                ),
            )
            db.commit()
        except sqlite3.Error as e:
            db.rollback()
            logger.error("Error updating task %s: %s", task.task_id, e)
            raise RepositoryError(f"Failed to update task {task.task_id}: {e}") from e

        if cursor.rowcount == 0:
            return None
        return self.get_care_task(task.task_id)

    def delete_care_task(self, task_id: int) -> bool:
        """Delete a task; its completions go with it (ON DELETE CASCADE)."""
        db = self.get_db()
        try:
            cursor = db.execute("DELETE FROM CareTasks WHERE task_id = ?", (task_id,))
            db.commit()
        except sqlite3.Error as e:
            db.rollback()
            logger.error("Error deleting task %s: %s", task_id, e)
            raise RepositoryError(f"Failed to delete task {task_id}: {e}") from e
        return cursor.rowcount > 0

    # =========================================================================
    # Completions
    # =========================================================================

    def create_task_completion(self, completion: TaskCompletion) -> TaskCompletion:
        db = self.get_db()
        try:
            cursor = db.execute(
                """
                INSERT INTO TaskCompletions (task_id, user_id, completed_at, notes, skipped, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    completion.task_id,
                    completion.user_id,
                    to_iso(completion.completed_at),
                    completion.notes,
                    int(completion.skipped),
                    iso_now(),
                ),
            )
            db.commit()
        except sqlite3.Error as e:
            db.rollback()
            logger.error("Error recording completion for task %s: %s", completion.task_id, e)
            raise RepositoryError(f"Failed to record completion: {e}") from e

        return TaskCompletion(
            task_id=completion.task_id,
            user_id=completion.user_id,
            completed_at=completion.completed_at,
            notes=completion.notes,
            skipped=completion.skipped,
            completion_id=cursor.lastrowid,
        )

    def get_task_completions(self, task_id: int, limit: int) -> list[TaskCompletion]:
        """Most recent completions first."""
        db = self.get_db()
        try:
            rows = db.execute(
                """
                SELECT * FROM TaskCompletions WHERE task_id = ?
                ORDER BY completed_at DESC, completion_id DESC
                LIMIT ?
                """,
                (task_id, limit),
            ).fetchall()
        except sqlite3.Error as e:
            logger.error("Error listing completions for task %s: %s", task_id, e)
            return []
        return [
            TaskCompletion(
                completion_id=r["completion_id"],
                task_id=r["task_id"],
                user_id=r["user_id"],
                completed_at=coerce_datetime(r["completed_at"]),
                notes=r["notes"],
                skipped=bool(r["skipped"]),
            )
            for r in rows
        ]

    # =========================================================================
    # Mapping
    # =========================================================================

    @staticmethod
    def _pattern_to_json(pattern: RecurrencePattern | None) -> str | None:
        return json.dumps(pattern.to_dict()) if pattern else None

    def _row_to_task(self, row: dict[str, Any]) -> CareTask:
        """Convert database row to CareTask object."""
        pattern = None
        if row.get("recurrence_pattern"):
            try:
                pattern = RecurrencePattern.from_dict(json.loads(row["recurrence_pattern"]))
            except (json.JSONDecodeError, TypeError, InvalidScheduleConfiguration) as e:
                logger.warning("Task %s has an unreadable recurrence pattern: %s", row.get("task_id"), e)

        created_at = coerce_datetime(row.get("created_at")) or utc_now()
        last_completed_at = coerce_datetime(row.get("last_completed_at"))
        schedule = schedule_from_columns(
            is_recurring=bool(row.get("is_recurring")),
            pattern=pattern,
            next_due_date=coerce_datetime(row.get("next_due_date")),
            base_date=max(d for d in (last_completed_at, created_at) if d is not None),
        )

        return CareTask(
            task_id=row.get("task_id"),
            plant_id=row.get("plant_id", 0),
            user_id=row.get("user_id", 0),
            task_type=row.get("type", "custom"),
            title=row.get("title", ""),
            description=row.get("description"),
            schedule=schedule,
            last_completed_at=last_completed_at,
            assigned_user_id=row.get("assigned_user_id"),
            created_by_user_id=row.get("created_by_user_id"),
            last_modified_by_user_id=row.get("last_modified_by_user_id"),
            created_at=created_at,
            updated_at=coerce_datetime(row.get("updated_at")) or created_at,
        )

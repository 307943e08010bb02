"""
Care Task Domain Entities
=========================

CareTask: a schedulable unit of plant maintenance.
TaskCompletion: immutable log entry written once per completion.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Any

from app.domain.tasks.recurrence import RecurrencePattern
from app.domain.tasks.schedule import (
    RecurringSchedule,
    TaskSchedule,
    UnscheduledSchedule,
    due_date_of,
)
from app.enums.care import CareTaskType, ScheduleMode
from app.utils.time import to_iso, utc_now


@dataclass
class CareTask:
    """
    Care task entity.

    The ``schedule`` field is the single source of truth for recurrence and
    due date; ``is_recurring``, ``recurrence_pattern`` and ``next_due_date``
    are read-only views over it.

    Attributes:
        task_id: Unique identifier (None for new tasks)
        plant_id: Plant this task belongs to
        user_id: User who owns the task
        task_type: Care category (water, fertilize, ...)
        title: Display title
        description: Optional free text
        schedule: Recurring, one-time or unscheduled
        last_completed_at: Timestamp of the most recent completion
        assigned_user_id: User responsible for the task
        created_by_user_id: User who created the task
        last_modified_by_user_id: User who last edited the task
    """

    # Identity
    task_id: int | None = None
    plant_id: int = 0
    user_id: int = 0

    # Content
    task_type: CareTaskType = CareTaskType.CUSTOM
    title: str = ""
    description: str | None = None

    # Scheduling
    schedule: TaskSchedule = field(default_factory=UnscheduledSchedule)
    last_completed_at: datetime.datetime | None = None

    # Assignment and audit trail
    assigned_user_id: int | None = None
    created_by_user_id: int | None = None
    last_modified_by_user_id: int | None = None
    created_at: datetime.datetime = field(default_factory=utc_now)
    updated_at: datetime.datetime = field(default_factory=utc_now)

    def __post_init__(self):
        if isinstance(self.task_type, str):
            self.task_type = CareTaskType(self.task_type)

    @property
    def schedule_mode(self) -> ScheduleMode:
        return self.schedule.mode

    @property
    def is_recurring(self) -> bool:
        return isinstance(self.schedule, RecurringSchedule)

    @property
    def recurrence_pattern(self) -> RecurrencePattern | None:
        if isinstance(self.schedule, RecurringSchedule):
            return self.schedule.pattern
        return None

    @property
    def next_due_date(self) -> datetime.datetime | None:
        return due_date_of(self.schedule)

    def to_dict(self) -> dict[str, Any]:
        pattern = self.recurrence_pattern
        return {
            "task_id": self.task_id,
            "plant_id": self.plant_id,
            "user_id": self.user_id,
            "type": self.task_type.value,
            "title": self.title,
            "description": self.description,
            "schedule_mode": self.schedule_mode.value,
            "is_recurring": self.is_recurring,
            "recurrence_pattern": pattern.to_dict() if pattern else None,
            "next_due_date": to_iso(self.next_due_date),
            "last_completed_at": to_iso(self.last_completed_at),
            "assigned_user_id": self.assigned_user_id,
            "created_by_user_id": self.created_by_user_id,
            "last_modified_by_user_id": self.last_modified_by_user_id,
            "created_at": to_iso(self.created_at),
            "updated_at": to_iso(self.updated_at),
        }


@dataclass(frozen=True)
class TaskCompletion:
    """Immutable record of one completion of a task."""

    task_id: int
    user_id: int
    completed_at: datetime.datetime
    notes: str | None = None
    skipped: bool = False
    completion_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "completion_id": self.completion_id,
            "task_id": self.task_id,
            "user_id": self.user_id,
            "completed_at": to_iso(self.completed_at),
            "notes": self.notes,
            "skipped": self.skipped,
        }

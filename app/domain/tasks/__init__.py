"""
Care Task Domain Module
=======================

This module provides:
- CareTask / TaskCompletion: task entities
- RecurrencePattern and the next-due-date arithmetic
- The three-state schedule (recurring, one-time, unscheduled) and its transitions
- CareTaskRepository: Protocol for task persistence
"""
from app.domain.tasks.recurrence import (
    RecurrencePattern,
    TaskDefaults,
    calculate_next_due_date,
    get_default_cadence,
    get_task_defaults,
)
from app.domain.tasks.repository import CareTaskRepository
from app.domain.tasks.schedule import (
    OneTimeSchedule,
    RecurringSchedule,
    TaskSchedule,
    UnscheduledSchedule,
    build_schedule,
    due_date_of,
    schedule_after_completion,
    skip_schedule,
    with_due_date,
    without_recurrence,
)
from app.domain.tasks.task_entity import CareTask, TaskCompletion

__all__ = [
    "CareTask",
    "TaskCompletion",
    "RecurrencePattern",
    "TaskDefaults",
    "calculate_next_due_date",
    "get_task_defaults",
    "get_default_cadence",
    "TaskSchedule",
    "RecurringSchedule",
    "OneTimeSchedule",
    "UnscheduledSchedule",
    "build_schedule",
    "due_date_of",
    "schedule_after_completion",
    "skip_schedule",
    "with_due_date",
    "without_recurrence",
    "CareTaskRepository",
]

"""
Task Schedule
=============

A care task is always in exactly one of three schedule states:

- RecurringSchedule: repeats on a pattern and always has a next due date
- OneTimeSchedule: a single due date; the task is removed once completed
- UnscheduledSchedule: no due date; completing only records the timestamp

The transition functions below are pure. They return the new schedule (or
``None`` when completion finishes the task) and leave persistence to the
caller.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any, ClassVar, Union

from app.domain.exceptions import CannotSkipUnscheduled, InvalidScheduleConfiguration
from app.domain.tasks.recurrence import RecurrencePattern, calculate_next_due_date
from app.enums.care import ScheduleMode


@dataclass(frozen=True)
class RecurringSchedule:
    pattern: RecurrencePattern
    next_due_date: datetime.datetime

    mode: ClassVar[ScheduleMode] = ScheduleMode.RECURRING


@dataclass(frozen=True)
class OneTimeSchedule:
    due_date: datetime.datetime

    mode: ClassVar[ScheduleMode] = ScheduleMode.ONE_TIME


@dataclass(frozen=True)
class UnscheduledSchedule:
    mode: ClassVar[ScheduleMode] = ScheduleMode.UNSCHEDULED


TaskSchedule = Union[RecurringSchedule, OneTimeSchedule, UnscheduledSchedule]


def due_date_of(schedule: TaskSchedule) -> datetime.datetime | None:
    """Return the schedule's due date, or None when unscheduled."""
    if isinstance(schedule, RecurringSchedule):
        return schedule.next_due_date
    if isinstance(schedule, OneTimeSchedule):
        return schedule.due_date
    return None


def build_schedule(
    mode: ScheduleMode | str,
    *,
    base_date: datetime.datetime,
    pattern: RecurrencePattern | None = None,
    due_date: datetime.datetime | None = None,
) -> TaskSchedule:
    """
    Build a schedule for the requested mode.

    Args:
        mode: recurring, one-time or unscheduled
        base_date: Date a recurring schedule is computed from
        pattern: Required for recurring schedules
        due_date: Required for one-time schedules, stored verbatim

    Raises:
        InvalidScheduleConfiguration: If the mode's required input is missing
    """
    try:
        mode = ScheduleMode(mode)
    except ValueError:
        raise InvalidScheduleConfiguration(f"Unknown schedule mode: {mode!r}") from None

    if mode == ScheduleMode.RECURRING:
        if pattern is None:
            raise InvalidScheduleConfiguration("Recurrence pattern is required for recurring tasks")
        return RecurringSchedule(pattern=pattern, next_due_date=calculate_next_due_date(base_date, pattern))

    if mode == ScheduleMode.ONE_TIME:
        if due_date is None:
            raise InvalidScheduleConfiguration("Due date is required for one-time tasks")
        return OneTimeSchedule(due_date=due_date)

    return UnscheduledSchedule()


def schedule_after_completion(
    schedule: TaskSchedule, completed_at: datetime.datetime
) -> TaskSchedule | None:
    """Return the schedule that follows a completion, or None if the task is done."""
    if isinstance(schedule, RecurringSchedule):
        return RecurringSchedule(
            pattern=schedule.pattern,
            next_due_date=calculate_next_due_date(completed_at, schedule.pattern),
        )
    if isinstance(schedule, OneTimeSchedule):
        return None
    return schedule


def skip_schedule(schedule: TaskSchedule, days: int) -> TaskSchedule:
    """Push the due date back by ``days``.

    Raises:
        CannotSkipUnscheduled: If the schedule has no due date
    """
    delta = datetime.timedelta(days=days)
    if isinstance(schedule, RecurringSchedule):
        return RecurringSchedule(pattern=schedule.pattern, next_due_date=schedule.next_due_date + delta)
    if isinstance(schedule, OneTimeSchedule):
        return OneTimeSchedule(due_date=schedule.due_date + delta)
    raise CannotSkipUnscheduled()


def with_due_date(schedule: TaskSchedule, due_date: datetime.datetime) -> TaskSchedule:
    """Move the current due date; an unscheduled task becomes one-time."""
    if isinstance(schedule, RecurringSchedule):
        return RecurringSchedule(pattern=schedule.pattern, next_due_date=due_date)
    return OneTimeSchedule(due_date=due_date)


def without_recurrence(schedule: TaskSchedule) -> TaskSchedule:
    """Drop the recurrence pattern, keeping whatever due date is stored."""
    if isinstance(schedule, RecurringSchedule):
        return OneTimeSchedule(due_date=schedule.next_due_date)
    return schedule


# =============================================================================
# Column mapping
# =============================================================================


def schedule_to_columns(schedule: TaskSchedule) -> dict[str, Any]:
    """Flatten a schedule into the persisted is_recurring/pattern/due columns."""
    if isinstance(schedule, RecurringSchedule):
        return {
            "is_recurring": True,
            "recurrence_pattern": schedule.pattern,
            "next_due_date": schedule.next_due_date,
        }
    return {
        "is_recurring": False,
        "recurrence_pattern": None,
        "next_due_date": due_date_of(schedule),
    }


def schedule_from_columns(
    *,
    is_recurring: bool,
    pattern: RecurrencePattern | None,
    next_due_date: datetime.datetime | None,
    base_date: datetime.datetime,
) -> TaskSchedule:
    """Rebuild a schedule from stored columns.

    A recurring row without a pattern is read by its due date alone; a
    recurring row missing its due date has it recomputed from ``base_date``.
    """
    if is_recurring and pattern is not None:
        if next_due_date is None:
            next_due_date = calculate_next_due_date(base_date, pattern)
        return RecurringSchedule(pattern=pattern, next_due_date=next_due_date)
    if next_due_date is not None:
        return OneTimeSchedule(due_date=next_due_date)
    return UnscheduledSchedule()

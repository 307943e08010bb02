"""
Recurrence Engine
=================

Pure date arithmetic for recurring care tasks:
- RecurrencePattern: how often a task repeats
- calculate_next_due_date: advance a date by one pattern step
- get_task_defaults / get_default_cadence: per task type cadence lookup
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any

from app.constants import TASK_DEFAULTS
from app.domain.exceptions import InvalidScheduleConfiguration
from app.enums.care import CareTaskType, RecurrenceUnit


@dataclass(frozen=True)
class RecurrencePattern:
    """How often a task repeats.

    Attributes:
        frequency: Number of units between occurrences (> 0)
        unit: days, weeks or months
        specific_days: Weekdays for weekly patterns (0=Sunday .. 6=Saturday).
            Stored with the task but not used when computing due dates.
    """

    frequency: int
    unit: RecurrenceUnit
    specific_days: tuple[int, ...] | None = None

    def __post_init__(self) -> None:
        try:
            unit = RecurrenceUnit(self.unit)
        except ValueError:
            raise InvalidScheduleConfiguration(f"Unknown recurrence unit: {self.unit!r}") from None
        object.__setattr__(self, "unit", unit)

        if isinstance(self.frequency, bool) or not isinstance(self.frequency, int) or self.frequency <= 0:
            raise InvalidScheduleConfiguration("Recurrence frequency must be a positive integer")

        if self.specific_days is not None:
            days = tuple(int(d) for d in self.specific_days)
            if any(d < 0 or d > 6 for d in days):
                raise InvalidScheduleConfiguration("specific_days must be between 0 and 6")
            object.__setattr__(self, "specific_days", days)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"frequency": self.frequency, "unit": self.unit.value}
        if self.specific_days is not None:
            data["specific_days"] = list(self.specific_days)
        return data

    @staticmethod
    def from_dict(data: dict[str, Any] | None) -> "RecurrencePattern" | None:
        if not data:
            return None
        days = data.get("specific_days", data.get("specificDays"))
        return RecurrencePattern(
            frequency=data.get("frequency"),
            unit=data.get("unit"),
            specific_days=tuple(days) if days is not None else None,
        )


@dataclass(frozen=True)
class TaskDefaults:
    """Default cadence and title for a task type."""

    frequency: int
    unit: RecurrenceUnit
    title: str

    @property
    def pattern(self) -> RecurrencePattern:
        return RecurrencePattern(frequency=self.frequency, unit=self.unit)

    def to_dict(self) -> dict[str, Any]:
        return {"frequency": self.frequency, "unit": self.unit.value, "title": self.title}


def _add_months(value: datetime.datetime, months: int) -> datetime.datetime:
    """Add calendar months, letting day-of-month overflow roll forward.

    The day is carried over unchanged and any excess spills into the next
    month, so Jan 31 + 1 month lands on Mar 3 (Mar 2 in a leap year).
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    first_of_month = value.replace(year=year, month=month, day=1)
    return first_of_month + datetime.timedelta(days=value.day - 1)


def calculate_next_due_date(from_date: datetime.datetime, pattern: RecurrencePattern) -> datetime.datetime:
    """
    Calculate the next due date from a starting date and recurrence pattern.

    Weekly patterns always add ``frequency * 7`` days regardless of
    ``specific_days``.

    Args:
        from_date: Starting date to calculate from
        pattern: Recurrence pattern with frequency and unit

    Returns:
        Next due date
    """
    if pattern.unit == RecurrenceUnit.DAYS:
        return from_date + datetime.timedelta(days=pattern.frequency)
    if pattern.unit == RecurrenceUnit.WEEKS:
        return from_date + datetime.timedelta(days=pattern.frequency * 7)
    return _add_months(from_date, pattern.frequency)


def get_task_defaults(task_type: CareTaskType | str) -> TaskDefaults:
    """Return the default cadence for a task type, falling back to ``custom``."""
    try:
        defaults = TASK_DEFAULTS[CareTaskType(task_type)]
    except ValueError:
        defaults = TASK_DEFAULTS[CareTaskType.CUSTOM]
    return TaskDefaults(frequency=defaults["frequency"], unit=defaults["unit"], title=defaults["title"])


def get_default_cadence(task_type: CareTaskType | str) -> RecurrencePattern | None:
    """Return the default recurrence pattern for a known task type, else None."""
    try:
        defaults = TASK_DEFAULTS[CareTaskType(task_type)]
    except ValueError:
        return None
    return RecurrencePattern(frequency=defaults["frequency"], unit=defaults["unit"])

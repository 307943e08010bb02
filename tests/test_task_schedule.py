"""
Task Schedule Tests
===================
Tests for the recurring / one-time / unscheduled state transitions and the
column mapping used for persistence.
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.domain.exceptions import CannotSkipUnscheduled, InvalidScheduleConfiguration
from app.domain.tasks import RecurrencePattern
from app.domain.tasks.schedule import (
    OneTimeSchedule,
    RecurringSchedule,
    UnscheduledSchedule,
    build_schedule,
    schedule_after_completion,
    schedule_from_columns,
    schedule_to_columns,
    skip_schedule,
    with_due_date,
    without_recurrence,
)

BASE = datetime(2024, 6, 1, 8, 0, tzinfo=timezone.utc)
WEEKLY = RecurrencePattern(frequency=1, unit="weeks")


class TestBuildSchedule:
    def test_recurring_is_one_step_after_base(self):
        schedule = build_schedule("recurring", base_date=BASE, pattern=WEEKLY)
        assert schedule == RecurringSchedule(pattern=WEEKLY, next_due_date=BASE + timedelta(days=7))

    def test_recurring_requires_pattern(self):
        with pytest.raises(InvalidScheduleConfiguration):
            build_schedule("recurring", base_date=BASE)

    def test_one_time_keeps_due_date_verbatim(self):
        due = BASE + timedelta(days=3, hours=5)
        assert build_schedule("one-time", base_date=BASE, pattern=WEEKLY, due_date=due) == OneTimeSchedule(due)

    def test_one_time_requires_due_date(self):
        with pytest.raises(InvalidScheduleConfiguration):
            build_schedule("one-time", base_date=BASE)

    def test_unscheduled_ignores_inputs(self):
        schedule = build_schedule("unscheduled", base_date=BASE, pattern=WEEKLY, due_date=BASE)
        assert isinstance(schedule, UnscheduledSchedule)

    def test_unknown_mode(self):
        with pytest.raises(InvalidScheduleConfiguration):
            build_schedule("sometimes", base_date=BASE)


class TestTransitions:
    def test_completion_advances_recurring_from_completion_time(self):
        schedule = RecurringSchedule(pattern=WEEKLY, next_due_date=BASE)
        completed = BASE + timedelta(days=2)
        assert schedule_after_completion(schedule, completed).next_due_date == completed + timedelta(days=7)

    def test_completion_finishes_one_time(self):
        assert schedule_after_completion(OneTimeSchedule(BASE), BASE) is None

    def test_completion_leaves_unscheduled(self):
        assert schedule_after_completion(UnscheduledSchedule(), BASE) == UnscheduledSchedule()

    def test_skip_recurring_keeps_pattern(self):
        skipped = skip_schedule(RecurringSchedule(pattern=WEEKLY, next_due_date=BASE), 3)
        assert skipped == RecurringSchedule(pattern=WEEKLY, next_due_date=BASE + timedelta(days=3))

    def test_skip_one_time(self):
        assert skip_schedule(OneTimeSchedule(BASE), 1) == OneTimeSchedule(BASE + timedelta(days=1))

    def test_skip_unscheduled_raises(self):
        with pytest.raises(CannotSkipUnscheduled, match="Cannot skip unscheduled task"):
            skip_schedule(UnscheduledSchedule(), 1)

    def test_due_date_edit_keeps_recurrence(self):
        moved = with_due_date(RecurringSchedule(pattern=WEEKLY, next_due_date=BASE), BASE + timedelta(days=10))
        assert isinstance(moved, RecurringSchedule)
        assert moved.pattern == WEEKLY

    def test_due_date_edit_schedules_unscheduled_once(self):
        assert with_due_date(UnscheduledSchedule(), BASE) == OneTimeSchedule(BASE)

    def test_dropping_recurrence_keeps_due_date(self):
        assert without_recurrence(RecurringSchedule(pattern=WEEKLY, next_due_date=BASE)) == OneTimeSchedule(BASE)
        assert without_recurrence(UnscheduledSchedule()) == UnscheduledSchedule()


class TestColumnMapping:
    @pytest.mark.parametrize(
        "schedule",
        [
            RecurringSchedule(pattern=WEEKLY, next_due_date=BASE),
            OneTimeSchedule(BASE),
            UnscheduledSchedule(),
        ],
    )
    def test_columns_rebuild_the_same_schedule(self, schedule):
        columns = schedule_to_columns(schedule)
        rebuilt = schedule_from_columns(
            is_recurring=columns["is_recurring"],
            pattern=columns["recurrence_pattern"],
            next_due_date=columns["next_due_date"],
            base_date=BASE,
        )
        assert rebuilt == schedule

    def test_recurring_row_without_due_date_is_recomputed(self):
        schedule = schedule_from_columns(is_recurring=True, pattern=WEEKLY, next_due_date=None, base_date=BASE)
        assert schedule == RecurringSchedule(pattern=WEEKLY, next_due_date=BASE + timedelta(days=7))

    def test_recurring_flag_without_pattern_reads_as_due_date(self):
        schedule = schedule_from_columns(is_recurring=True, pattern=None, next_due_date=BASE, base_date=BASE)
        assert schedule == OneTimeSchedule(BASE)

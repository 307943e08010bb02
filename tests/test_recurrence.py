"""
Recurrence Engine Tests
=======================
Tests for next-due-date arithmetic and per-type task defaults.
"""

from datetime import datetime, timezone

import pytest

from app.domain.exceptions import InvalidScheduleConfiguration
from app.domain.tasks import RecurrencePattern
from app.domain.tasks.recurrence import calculate_next_due_date, get_default_cadence, get_task_defaults
from app.enums.care import CareTaskType, RecurrenceUnit


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class TestCalculateNextDueDate:
    def test_days(self):
        pattern = RecurrencePattern(frequency=3, unit=RecurrenceUnit.DAYS)
        assert calculate_next_due_date(_utc(2024, 1, 1, 9, 30), pattern) == _utc(2024, 1, 4, 9, 30)

    def test_weeks_ignore_specific_days(self):
        pattern = RecurrencePattern(frequency=2, unit="weeks", specific_days=(1, 3))
        assert calculate_next_due_date(_utc(2024, 1, 1), pattern) == _utc(2024, 1, 15)

    def test_months_keep_day_of_month(self):
        pattern = RecurrencePattern(frequency=1, unit="months")
        assert calculate_next_due_date(_utc(2024, 3, 15), pattern) == _utc(2024, 4, 15)

    def test_months_cross_year(self):
        pattern = RecurrencePattern(frequency=6, unit="months")
        assert calculate_next_due_date(_utc(2024, 9, 10), pattern) == _utc(2025, 3, 10)

    @pytest.mark.parametrize(
        "start, expected",
        [
            (_utc(2023, 1, 31), _utc(2023, 3, 3)),
            (_utc(2024, 1, 31), _utc(2024, 3, 2)),
        ],
    )
    def test_month_overflow_rolls_forward(self, start, expected):
        pattern = RecurrencePattern(frequency=1, unit="months")
        assert calculate_next_due_date(start, pattern) == expected

    def test_result_is_strictly_later(self):
        start = _utc(2024, 5, 5)
        for unit in RecurrenceUnit:
            assert calculate_next_due_date(start, RecurrencePattern(frequency=1, unit=unit)) > start


class TestRecurrencePattern:
    @pytest.mark.parametrize("frequency", [0, -1, 1.5, True])
    def test_rejects_non_positive_frequency(self, frequency):
        with pytest.raises(InvalidScheduleConfiguration):
            RecurrencePattern(frequency=frequency, unit="days")

    def test_rejects_unknown_unit(self):
        with pytest.raises(InvalidScheduleConfiguration):
            RecurrencePattern(frequency=1, unit="years")

    def test_rejects_out_of_range_weekday(self):
        with pytest.raises(InvalidScheduleConfiguration):
            RecurrencePattern(frequency=1, unit="weeks", specific_days=(0, 7))

    def test_dict_conversion(self):
        pattern = RecurrencePattern.from_dict({"frequency": 2, "unit": "weeks", "specificDays": [1, 5]})
        assert pattern.unit is RecurrenceUnit.WEEKS
        assert pattern.specific_days == (1, 5)
        assert pattern.to_dict() == {"frequency": 2, "unit": "weeks", "specific_days": [1, 5]}

    def test_from_empty_dict_is_none(self):
        assert RecurrencePattern.from_dict(None) is None
        assert RecurrencePattern.from_dict({}) is None


class TestTaskDefaults:
    @pytest.mark.parametrize(
        "task_type, frequency, unit, title",
        [
            ("water", 6, RecurrenceUnit.DAYS, "Water"),
            ("fertilize", 12, RecurrenceUnit.DAYS, "Fertilize"),
            ("mist", 3, RecurrenceUnit.DAYS, "Mist"),
            ("repot_check", 6, RecurrenceUnit.MONTHS, "Check for Repotting"),
            ("water_fertilize", 12, RecurrenceUnit.DAYS, "Water & Fertilize"),
            ("prune", 30, RecurrenceUnit.DAYS, "Prune"),
            ("rotate", 7, RecurrenceUnit.DAYS, "Rotate"),
            ("custom", 7, RecurrenceUnit.DAYS, "Custom Task"),
        ],
    )
    def test_defaults_per_type(self, task_type, frequency, unit, title):
        defaults = get_task_defaults(task_type)
        assert (defaults.frequency, defaults.unit, defaults.title) == (frequency, unit, title)

    def test_unknown_type_falls_back_to_custom(self):
        assert get_task_defaults("sing_to_it") == get_task_defaults(CareTaskType.CUSTOM)

    def test_default_cadence(self):
        assert get_default_cadence("mist") == RecurrencePattern(frequency=3, unit="days")
        assert get_default_cadence("sing_to_it") is None

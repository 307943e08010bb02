"""
Care-related Enumerations
=========================

This module contains the enums used by care tasks and plant records.
"""

from enum import Enum


class CareTaskType(str, Enum):
    """Categories of plant maintenance tasks."""

    WATER = "water"
    FERTILIZE = "fertilize"
    WATER_FERTILIZE = "water_fertilize"
    MIST = "mist"
    REPOT_CHECK = "repot_check"
    PRUNE = "prune"
    ROTATE = "rotate"
    CUSTOM = "custom"

    def __str__(self) -> str:
        return self.value


class RecurrenceUnit(str, Enum):
    """Unit of a recurrence pattern's frequency."""

    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"

    def __str__(self) -> str:
        return self.value


class ScheduleMode(str, Enum):
    """The three mutually exclusive task states.

    - RECURRING: repeats on a pattern, always has a next due date
    - ONE_TIME: single due date, deleted once completed
    - UNSCHEDULED: no due date, completion only records the timestamp
    """

    RECURRING = "recurring"
    ONE_TIME = "one-time"
    UNSCHEDULED = "unscheduled"

    def __str__(self) -> str:
        return self.value


# =============================================================================
# Plant attribute enumerations
# =============================================================================


class LightLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    BRIGHT_INDIRECT = "bright-indirect"
    BRIGHT_DIRECT = "bright-direct"

    def __str__(self) -> str:
        return self.value


class HumidityPreference(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    def __str__(self) -> str:
        return self.value


class GrowthStage(str, Enum):
    SEEDLING = "seedling"
    JUVENILE = "juvenile"
    MATURE = "mature"
    FLOWERING = "flowering"

    def __str__(self) -> str:
        return self.value


class GrowthRate(str, Enum):
    SLOW = "slow"
    MEDIUM = "medium"
    FAST = "fast"

    def __str__(self) -> str:
        return self.value


class DifficultyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    def __str__(self) -> str:
        return self.value

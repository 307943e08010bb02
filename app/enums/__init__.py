"""
Enums Module
============

This module provides enumeration types for the plant care application.
Enums ensure type safety and consistency across the codebase.
"""

from app.enums.care import (
    CareTaskType,
    DifficultyLevel,
    GrowthRate,
    GrowthStage,
    HumidityPreference,
    LightLevel,
    RecurrenceUnit,
    ScheduleMode,
)

__all__ = [
    # Task enums
    "CareTaskType",
    "RecurrenceUnit",
    "ScheduleMode",
    # Plant attribute enums
    "LightLevel",
    "HumidityPreference",
    "GrowthStage",
    "GrowthRate",
    "DifficultyLevel",
]

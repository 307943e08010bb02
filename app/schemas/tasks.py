"""
Care Task Schemas
=================

Request schemas for care-task endpoints.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.enums.care import CareTaskType, RecurrenceUnit, ScheduleMode


class RecurrencePatternSchema(BaseModel):
    """Recurrence cadence as sent by clients."""

    frequency: int = Field(..., gt=0, description="Repeat every N units")
    unit: RecurrenceUnit = Field(..., description="days, weeks or months")
    specific_days: list[int] | None = Field(
        default=None, description="Weekdays 0-6; stored but not used for scheduling"
    )

    @field_validator("specific_days")
    @classmethod
    def check_weekdays(cls, v):
        if v is not None and any(d < 0 or d > 6 for d in v):
            raise ValueError("specific_days must contain values 0-6")
        return v

    def to_pattern_dict(self) -> dict:
        return self.model_dump(exclude_none=True)


class CreateCareTaskRequest(BaseModel):
    """Request schema for creating a care task."""

    plant_id: int = Field(..., gt=0)
    type: CareTaskType
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    schedule_mode: ScheduleMode = Field(default=ScheduleMode.RECURRING)
    recurrence_pattern: RecurrencePatternSchema | None = None
    due_date: datetime | None = Field(default=None, description="Required for one-time tasks")
    start_date: datetime | None = Field(default=None, description="Base date for recurring tasks")
    assigned_user_id: int | None = None


class UpdateCareTaskRequest(BaseModel):
    """Partial update; only supplied fields are applied."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    schedule_mode: ScheduleMode | None = None
    recurrence_pattern: RecurrencePatternSchema | None = None
    due_date: datetime | None = None
    assigned_user_id: int | None = None


class CompleteCareTaskRequest(BaseModel):
    notes: str | None = Field(default=None, max_length=2000)


class SkipCareTaskRequest(BaseModel):
    days: int = Field(default=1, ge=1, le=365, description="Days to push the due date")


class UpdateDueDateRequest(BaseModel):
    due_date: datetime


class AssignCareTaskRequest(BaseModel):
    assigned_user_id: int | None = Field(default=None, description="None clears the assignee")


class BulkCompleteRequest(BaseModel):
    task_ids: list[int] = Field(..., min_length=1)
    notes: str | None = None


class CreatePlantRequest(BaseModel):
    """Request schema for creating a plant from the form."""

    name: str = Field(..., min_length=1, max_length=100)
    species_type: str = Field(..., min_length=1, max_length=50)
    species_name: str = Field(..., min_length=1, max_length=100)
    location: str = Field(..., min_length=1, max_length=100)
    date_acquired: datetime
    plant_group_id: int | None = None
    assigned_user_id: int | None = None
    notes: str | None = None
    last_watered_at: datetime | None = None
    last_fertilized_at: datetime | None = None
    last_misted_at: datetime | None = None
    last_repotted_at: datetime | None = None

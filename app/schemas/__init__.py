"""
Schemas Module
==============

This module provides Pydantic models for request validation and for
parsing uploaded CSV rows into typed records.
"""

from app.schemas.bulk_import import BulkPlantRow
from app.schemas.tasks import (
    AssignCareTaskRequest,
    BulkCompleteRequest,
    CompleteCareTaskRequest,
    CreateCareTaskRequest,
    CreatePlantRequest,
    RecurrencePatternSchema,
    SkipCareTaskRequest,
    UpdateCareTaskRequest,
    UpdateDueDateRequest,
)

__all__ = [
    # Bulk import
    "BulkPlantRow",
    # Plants / tasks
    "CreatePlantRequest",
    "CreateCareTaskRequest",
    "UpdateCareTaskRequest",
    "CompleteCareTaskRequest",
    "SkipCareTaskRequest",
    "UpdateDueDateRequest",
    "AssignCareTaskRequest",
    "BulkCompleteRequest",
    "RecurrencePatternSchema",
]

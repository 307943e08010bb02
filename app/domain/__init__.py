"""
Domain Package
==============
Entities, value objects and pure rules for plant care tracking.

Nothing here touches the database or Flask; persistence is expressed
through the repository Protocols in ``plants`` and ``tasks``.
"""

from .bulk_import import (
    BulkUploadError,
    BulkUploadResult,
    BulkUploadStats,
    CSVParseResult,
    FieldError,
    InvalidRow,
    ParsedRow,
    ValidRow,
)
from .exceptions import (
    AccessDeniedError,
    AuthenticationError,
    CannotSkipUnscheduled,
    FileError,
    InvalidScheduleConfiguration,
    NotFoundError,
    PlantCareError,
    RepositoryError,
    ServiceError,
    ValidationError,
)
from .plants import Plant, plant_dedup_key
from .tasks import CareTask, RecurrencePattern, TaskCompletion

__all__ = [
    # Bulk import
    "FieldError",
    "ValidRow",
    "InvalidRow",
    "ParsedRow",
    "CSVParseResult",
    "BulkUploadError",
    "BulkUploadStats",
    "BulkUploadResult",
    # Errors
    "PlantCareError",
    "ValidationError",
    "InvalidScheduleConfiguration",
    "CannotSkipUnscheduled",
    "FileError",
    "AccessDeniedError",
    "AuthenticationError",
    "NotFoundError",
    "ServiceError",
    "RepositoryError",
    # Entities
    "Plant",
    "plant_dedup_key",
    "CareTask",
    "TaskCompletion",
    "RecurrencePattern",
]

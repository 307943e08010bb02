"""
Service Organization
====================
**application/**
  Singleton services managed by ServiceContainer. One instance per application.
  CareTaskService, PlantService, BulkPlantImportService
"""

from .application.bulk_import_service import BulkPlantImportService
from .application.care_task_service import CareTaskService
from .application.plant_service import PlantService

__all__ = [
    "BulkPlantImportService",
    "CareTaskService",
    "PlantService",
]

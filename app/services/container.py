from __future__ import annotations

import logging
from dataclasses import dataclass

from app.config import AppConfig
from app.services.application.bulk_import_service import BulkPlantImportService
from app.services.application.care_task_service import CareTaskService
from app.services.application.plant_service import PlantService
from infrastructure.database.repositories import SQLiteCareTaskRepository, SQLitePlantRepository
from infrastructure.database.sqlite_handler import SQLiteDatabaseHandler
from infrastructure.logging.audit import AuditLogger

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Aggregate and manage core backend services."""

    config: AppConfig
    database: SQLiteDatabaseHandler
    plant_repo: SQLitePlantRepository
    task_repo: SQLiteCareTaskRepository
    audit_logger: AuditLogger
    care_task_service: CareTaskService
    plant_service: PlantService
    bulk_import_service: BulkPlantImportService

    @classmethod
    def build(cls, config: AppConfig) -> "ServiceContainer":
        """Construct the service container with all dependencies.

        Args:
            config: Application configuration
        """
        logger.info("Building ServiceContainer...")
        audit_logger = AuditLogger(config.audit_log_path, config.log_level)
        database = SQLiteDatabaseHandler(config.database_path)
        database.init_app(None)

        plant_repo = SQLitePlantRepository(database)
        task_repo = SQLiteCareTaskRepository(database)

        care_task_service = CareTaskService(
            task_repo,
            plant_repo,
            audit_logger,
            upcoming_days_default=config.upcoming_window_days,
        )
        plant_service = PlantService(plant_repo, care_task_service)
        bulk_import_service = BulkPlantImportService(
            plant_repo,
            care_task_service,
            audit_logger,
            max_rows=config.bulk_upload_max_rows,
            max_bytes=config.bulk_upload_max_bytes,
        )

        container = cls(
            config=config,
            database=database,
            plant_repo=plant_repo,
            task_repo=task_repo,
            audit_logger=audit_logger,
            care_task_service=care_task_service,
            plant_service=plant_service,
            bulk_import_service=bulk_import_service,
        )
        logger.info("ServiceContainer built successfully.")
        return container

    def shutdown(self) -> None:
        """Release external resources before process exit."""
        self.database.close_db()
        logger.info("ServiceContainer shutdown complete.")

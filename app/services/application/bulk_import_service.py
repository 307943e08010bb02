"""
Bulk Plant Import Service
=========================
Reconciles a parsed plant CSV against the importing user's existing plants.

Each valid row is classified by its dedup key (name, species type and
location, compared case- and whitespace-insensitively):

- key already seen earlier in the same file: duplicate, skipped
- key matches an existing plant: queued update (ownership, acquisition
  date and creation audit fields are preserved)
- otherwise: queued insert, owned and assigned to the importing user

Inserts are written in one atomic batch, then default care tasks are
seeded per new plant. Updates are applied one at a time so a failure is
reported against its own row. Nothing in a run raises: every failure is
collected into the returned BulkUploadResult.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Protocol

from app.constants import BulkUpload
from app.domain.bulk_import import (
    BulkUploadError,
    BulkUploadResult,
    BulkUploadStats,
    CSVParseResult,
    FieldError,
    InvalidRow,
    ValidRow,
)
from app.domain.plants import Plant, PlantRepository, plant_dedup_key
from app.utils.plant_csv import generate_error_csv, parse_plant_csv
from app.utils.time import utc_now

if TYPE_CHECKING:
    from infrastructure.logging.audit import AuditLogger

logger = logging.getLogger(__name__)


class DefaultTaskSeeder(Protocol):
    def create_default_tasks_for_plant(
        self, plant_id: int, user_id: int, last_care_dates: dict[str, Any] | None = None
    ) -> list[int]: ...


@dataclass
class _QueuedInsert:
    row: ValidRow
    record: dict[str, Any]


@dataclass
class _QueuedUpdate:
    row: ValidRow
    plant_id: int
    patch: dict[str, Any]


def _validation_errors(invalid_rows: list[InvalidRow]) -> list[BulkUploadError]:
    return [
        BulkUploadError(row=r.row, field=e.field, message=e.message, data=r.data)
        for r in invalid_rows
        for e in r.errors
    ]


class BulkPlantImportService:
    """Applies CSV plant uploads for one user at a time."""

    def __init__(
        self,
        plant_repo: PlantRepository,
        task_seeder: DefaultTaskSeeder,
        audit_logger: Optional["AuditLogger"] = None,
        *,
        max_rows: int = BulkUpload.MAX_ROWS,
        max_bytes: int = BulkUpload.MAX_FILE_BYTES,
    ) -> None:
        self.plant_repo = plant_repo
        self.task_seeder = task_seeder
        self.audit_logger = audit_logger
        self.max_rows = max_rows
        self.max_bytes = max_bytes

    # ------------------------------------------------------------------ entry

    def import_csv(self, content: bytes, filename: str, user_id: int) -> BulkUploadResult:
        """Parse an uploaded file and reconcile it. Never raises."""
        try:
            parse_result = parse_plant_csv(content, filename, self.max_rows, max_bytes=self.max_bytes)
            if not parse_result.success:
                result = BulkUploadResult(
                    success=False,
                    errors=[BulkUploadError(row=0, message=parse_result.error or "Failed to parse CSV file")],
                )
            else:
                result = self.reconcile(parse_result, user_id)
        except Exception as e:
            logger.error("Bulk upload error for user %s: %s", user_id, e, exc_info=True)
            result = BulkUploadResult(
                success=False,
                errors=[
                    BulkUploadError(
                        row=0,
                        message=str(e) or "An unexpected error occurred during bulk upload",
                    )
                ],
            )

        self._audit(user_id, filename, result)
        return result

    # -------------------------------------------------------------- reconcile

    def reconcile(self, parse_result: CSVParseResult, user_id: int) -> BulkUploadResult:
        """
        Classify and persist the rows of an already parsed upload.

        Args:
            parse_result: Successful parse of the uploaded file
            user_id: Importing user; only their own plants are matched

        Returns:
            BulkUploadResult with stats, per-row errors and an error CSV
            whenever anything failed
        """
        valid_rows = parse_result.valid_rows
        invalid_rows = parse_result.invalid_rows

        if not valid_rows:
            logger.info("Bulk upload for user %s has no valid rows (%s invalid)", user_id, len(invalid_rows))
            errors = _validation_errors(invalid_rows)
            if not invalid_rows:
                errors = [BulkUploadError(row=0, message="No data rows found in CSV file")]
            return BulkUploadResult(
                success=False,
                stats=BulkUploadStats(total_rows=parse_result.total_rows, failed_rows=len(invalid_rows)),
                errors=errors,
                error_csv=generate_error_csv(invalid_rows),
            )

        existing = {plant.dedup_key: plant for plant in self.plant_repo.find_many_by_user(user_id)}

        inserts, updates, duplicates, processing_errors = self._classify(valid_rows, existing, user_id)

        inserted = self._apply_inserts(inserts, user_id, processing_errors)
        updated = self._apply_updates(updates, processing_errors)

        all_errors = _validation_errors(invalid_rows) + processing_errors
        persisted = bool(inserted or updated)

        error_csv = None
        if all_errors:
            failed = [
                InvalidRow(row=e.row, data=e.data or {}, errors=(FieldError("general", e.message),))
                for e in processing_errors
            ]
            error_csv = generate_error_csv([*invalid_rows, *failed])

        stats = BulkUploadStats(
            total_rows=parse_result.total_rows,
            successful_inserts=len(inserted),
            updated_plants=len(updated),
            duplicates_skipped=duplicates,
            failed_rows=len(all_errors),
        )
        logger.info(
            "Bulk upload for user %s: %s inserted, %s updated, %s duplicates, %s errors",
            user_id,
            stats.successful_inserts,
            stats.updated_plants,
            stats.duplicates_skipped,
            stats.failed_rows,
        )
        return BulkUploadResult(
            success=not all_errors or persisted,
            stats=stats,
            errors=all_errors,
            inserted_plants=inserted,
            updated_plants=updated,
            error_csv=error_csv,
        )

    def _classify(
        self,
        valid_rows: list[ValidRow],
        existing: dict[str, Plant],
        user_id: int,
    ) -> tuple[list[_QueuedInsert], list[_QueuedUpdate], int, list[BulkUploadError]]:
        seen: set[str] = set()
        inserts: list[_QueuedInsert] = []
        updates: list[_QueuedUpdate] = []
        duplicates = 0
        errors: list[BulkUploadError] = []

        for row in valid_rows:
            try:
                record = row.record
                key = plant_dedup_key(record.name, record.species_type, record.location)
                if key in seen:
                    duplicates += 1
                    continue
                seen.add(key)

                fields = record.to_plant_fields()
                match = existing.get(key)
                if match is not None:
                    fields.update(
                        date_acquired=match.date_acquired,
                        last_modified_by_user_id=user_id,
                        updated_at=utc_now(),
                    )
                    updates.append(_QueuedUpdate(row=row, plant_id=match.plant_id, patch=fields))
                else:
                    fields.update(
                        user_id=user_id,
                        created_by_user_id=user_id,
                        assigned_user_id=user_id,
                    )
                    inserts.append(_QueuedInsert(row=row, record=fields))
            except Exception as e:
                logger.error("Error processing row %s: %s", row.row, e)
                errors.append(
                    BulkUploadError(row=row.row, message=str(e) or "Failed to process plant", data=row.data)
                )

        return inserts, updates, duplicates, errors

    def _apply_inserts(
        self, inserts: list[_QueuedInsert], user_id: int, errors: list[BulkUploadError]
    ) -> list[Plant]:
        if not inserts:
            return []
        try:
            inserted = self.plant_repo.insert_many([q.record for q in inserts])
        except Exception as e:
            logger.error("Batch insert error: %s", e)
            errors.append(BulkUploadError(row=0, message=f"Batch insert failed: {e}"))
            return []

        for plant in inserted:
            try:
                self.task_seeder.create_default_tasks_for_plant(plant.plant_id, user_id, plant.last_care_dates())
            except Exception as e:
                logger.error("Error creating tasks for plant %s: %s", plant.plant_id, e)
        return inserted

    def _apply_updates(self, updates: list[_QueuedUpdate], errors: list[BulkUploadError]) -> list[Plant]:
        updated: list[Plant] = []
        for item in updates:
            try:
                plant = self.plant_repo.update_by_id(item.plant_id, item.patch)
            except Exception as e:
                logger.error("Error updating plant %s: %s", item.plant_id, e)
                errors.append(
                    BulkUploadError(row=item.row.row, message=f"Update failed: {e}", data=item.row.data)
                )
                continue
            if plant is None:
                errors.append(
                    BulkUploadError(
                        row=item.row.row,
                        message=f"Update failed: plant {item.plant_id} no longer exists",
                        data=item.row.data,
                    )
                )
                continue
            updated.append(plant)
        return updated

    # ------------------------------------------------------------------ audit

    def _audit(self, user_id: int, filename: str, result: BulkUploadResult) -> None:
        if not self.audit_logger:
            return
        stats = result.stats.to_dict() if result.stats else {}
        self.audit_logger.log_bulk_import(
            user_id,
            filename,
            "success" if result.success else "failure",
            **stats,
        )

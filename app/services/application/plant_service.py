"""
Plant Service
=============
Application-level service for creating and viewing plants.

Creating a plant also seeds its default care tasks through
CareTaskService; a seeding failure never fails plant creation.
"""
from __future__ import annotations

import logging
from typing import Any

from app.domain.exceptions import AccessDeniedError, ValidationError
from app.domain.plants import PLANT_WRITABLE_FIELDS, Plant, PlantRepository
from app.services.application.care_task_service import CareTaskService

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("name", "species_type", "species_name", "location", "date_acquired")


class PlantService:
    """Plant creation and listing for a single acting user."""

    def __init__(self, plant_repo: PlantRepository, care_task_service: CareTaskService) -> None:
        self.plant_repo = plant_repo
        self.care_task_service = care_task_service

    def create_plant(self, user_id: int, /, **fields: Any) -> Plant:
        """
        Create a plant owned by ``user_id`` and seed its default tasks.

        Args:
            user_id: Acting user, who becomes owner and creator
            **fields: Plant attributes (see PLANT_WRITABLE_FIELDS)

        Raises:
            ValidationError: If a required attribute is missing or unknown
            AccessDeniedError: If ``plant_group_id`` names a group the user is not in
        """
        unknown = sorted(set(fields) - set(PLANT_WRITABLE_FIELDS))
        if unknown:
            raise ValidationError(f"Unknown plant fields: {', '.join(unknown)}")
        missing = [f for f in _REQUIRED_FIELDS if not fields.get(f)]
        if missing:
            raise ValidationError(f"Missing required plant fields: {', '.join(missing)}")

        group_id = fields.get("plant_group_id")
        if group_id is not None and not self.plant_repo.is_group_member(group_id, user_id):
            raise AccessDeniedError("You are not a member of this plant group")

        record = {
            **fields,
            "user_id": user_id,
            "created_by_user_id": user_id,
            "assigned_user_id": fields.get("assigned_user_id") or user_id,
        }
        plant = self.plant_repo.insert_many([record])[0]
        logger.info("Created plant %s (%s) for user %s", plant.plant_id, plant.name, user_id)

        try:
            self.care_task_service.create_default_tasks_for_plant(
                plant.plant_id, user_id, plant.last_care_dates()
            )
        except Exception as e:
            logger.error("Error creating tasks for plant %s: %s", plant.plant_id, e, exc_info=True)

        return plant

    def get_plant(self, plant_id: int, user_id: int) -> Plant:
        return self.care_task_service.verify_plant_access(plant_id, user_id)

    def list_plants(self, user_id: int, *, include_shared: bool = True) -> list[Plant]:
        """Plants owned by the user, plus group plants unless ``include_shared`` is False."""
        if include_shared:
            return self.plant_repo.find_accessible(user_id)
        return self.plant_repo.find_many_by_user(user_id)

"""
Plant Repository
================

Concrete implementation of the PlantRepository protocol using SQLite.
Wraps the PlantOperations mixin from the infrastructure layer.
"""
from __future__ import annotations

from typing import Any

from app.domain.plants import Plant
from app.utils.time import utc_now
from infrastructure.database.ops.plants import PlantOperations


class SQLitePlantRepository:
    """Plant persistence used by the plant, care-task and bulk import services."""

    def __init__(self, backend: PlantOperations) -> None:
        self._backend = backend

    # Reads --------------------------------------------------------------------
    def get_by_id(self, plant_id: int) -> Plant | None:
        return self._backend.get_plant_by_id(plant_id)

    def find_many_by_user(self, user_id: int) -> list[Plant]:
        return self._backend.get_plants_by_user(user_id)

    def find_accessible(self, user_id: int) -> list[Plant]:
        return self._backend.get_accessible_plants(user_id)

    def is_group_member(self, group_id: int, user_id: int) -> bool:
        return self._backend.is_plant_group_member(group_id, user_id)

    # Writes -------------------------------------------------------------------
    def insert_many(self, records: list[dict[str, Any]]) -> list[Plant]:
        """Insert every record atomically (see PlantOperations.insert_plants)."""
        now = utc_now()
        plants = [
            Plant(**{"created_at": now, "updated_at": now, **record})
            for record in records
        ]
        return self._backend.insert_plants(plants)

    def insert(self, record: dict[str, Any]) -> Plant:
        return self.insert_many([record])[0]

    def update_by_id(self, plant_id: int, patch: dict[str, Any]) -> Plant | None:
        return self._backend.update_plant_fields(plant_id, patch)

    # Groups -------------------------------------------------------------------
    def create_group(self, name: str, owner_user_id: int) -> int:
        return self._backend.create_plant_group(name, owner_user_id)

    def add_group_member(self, group_id: int, user_id: int) -> None:
        self._backend.add_plant_group_member(group_id, user_id)

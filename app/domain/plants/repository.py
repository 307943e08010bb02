"""
Plant Repository Protocol
=========================

Persistence operations the care-task and bulk import logic consume.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Protocol

from app.domain.plants.plant_entity import Plant


class PlantRepository(Protocol):
    """Protocol for plant persistence operations."""

    @abstractmethod
    def get_by_id(self, plant_id: int) -> Plant | None:
        """Get a plant by ID, or None if it does not exist."""
        ...

    @abstractmethod
    def find_many_by_user(self, user_id: int) -> list[Plant]:
        """All plants owned by ``user_id``."""
        ...

    @abstractmethod
    def find_accessible(self, user_id: int) -> list[Plant]:
        """Plants the user owns or shares through a plant group."""
        ...

    @abstractmethod
    def insert_many(self, records: list[dict[str, Any]]) -> list[Plant]:
        """
        Insert every record in one atomic batch.

        Args:
            records: Plant attribute dicts (see PLANT_WRITABLE_FIELDS)

        Returns:
            The persisted plants, in input order, with generated IDs

        Raises:
            RepositoryError: If any record fails; nothing is written
        """
        ...

    @abstractmethod
    def update_by_id(self, plant_id: int, patch: dict[str, Any]) -> Plant | None:
        """
        Apply ``patch`` to one plant.

        Returns:
            The updated plant, or None if it does not exist

        Raises:
            RepositoryError: On database failure
        """
        ...

    @abstractmethod
    def is_group_member(self, group_id: int, user_id: int) -> bool:
        """Whether ``user_id`` belongs to plant group ``group_id``."""
        ...

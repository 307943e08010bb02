"""
Plant Database Operations
=========================

Database operations for the Plants, PlantGroups and PlantGroupMembers tables.
Implements the PlantRepository protocol.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

from app.domain.exceptions import RepositoryError
from app.domain.plants import PLANT_WRITABLE_FIELDS, Plant
from app.domain.plants.plant_entity import PLANT_DATETIME_FIELDS
from app.utils.time import coerce_datetime, iso_now, to_iso
from infrastructure.database.sql_safety import build_set_clause, safe_columns

if TYPE_CHECKING:
    from sqlite3 import Connection

logger = logging.getLogger(__name__)

_INSERT_COLUMNS: tuple[str, ...] = (
    "user_id",
    *PLANT_WRITABLE_FIELDS,
    "created_by_user_id",
    "last_modified_by_user_id",
    "created_at",
    "updated_at",
)

_UPDATABLE_COLUMNS: frozenset[str] = frozenset(
    {*PLANT_WRITABLE_FIELDS, "last_modified_by_user_id", "updated_at"}
)


def _to_db_value(column: str, value: Any) -> Any:
    if column in PLANT_DATETIME_FIELDS:
        return to_iso(coerce_datetime(value))
    if column == "has_drainage" and value is not None:
        return int(bool(value))
    return value


class PlantOperations:
    """Plant-related CRUD helpers for database handlers."""

    def get_db(self) -> "Connection":
        """Get database connection. Must be implemented by mixing class."""
        raise NotImplementedError("Subclass must implement get_db()")

    # =========================================================================
    # Reads
    # =========================================================================

    def get_plant_by_id(self, plant_id: int) -> Plant | None:
        db = self.get_db()
        try:
            row = db.execute("SELECT * FROM Plants WHERE plant_id = ?", (plant_id,)).fetchone()
        except sqlite3.Error as e:
            logger.error("Error fetching plant %s: %s", plant_id, e)
            return None
        return self._row_to_plant(dict(row)) if row else None

    def get_plants_by_user(self, user_id: int) -> list[Plant]:
        """All plants owned by a user, oldest first."""
        db = self.get_db()
        try:
            rows = db.execute(
                "SELECT * FROM Plants WHERE user_id = ? ORDER BY plant_id",
                (user_id,),
            ).fetchall()
        except sqlite3.Error as e:
            logger.error("Error listing plants for user %s: %s", user_id, e)
            return []
        return [self._row_to_plant(dict(r)) for r in rows]

    def get_accessible_plants(self, user_id: int) -> list[Plant]:
        """Plants the user owns plus plants in any group they belong to."""
        db = self.get_db()
        try:
            rows = db.execute(
                """
                SELECT DISTINCT p.* FROM Plants p
                LEFT JOIN PlantGroupMembers m ON m.group_id = p.plant_group_id
                WHERE p.user_id = ? OR m.user_id = ?
                ORDER BY p.plant_id
                """,
                (user_id, user_id),
            ).fetchall()
        except sqlite3.Error as e:
            logger.error("Error listing accessible plants for user %s: %s", user_id, e)
            return []
        return [self._row_to_plant(dict(r)) for r in rows]

    def is_plant_group_member(self, group_id: int, user_id: int) -> bool:
        db = self.get_db()
        try:
            row = db.execute(
                "SELECT 1 FROM PlantGroupMembers WHERE group_id = ? AND user_id = ?",
                (group_id, user_id),
            ).fetchone()
        except sqlite3.Error as e:
            logger.error("Error checking membership of user %s in group %s: %s", user_id, group_id, e)
            return False
        return row is not None

    # =========================================================================
    # Writes
    # =========================================================================

    def insert_plants(self, plants: list[Plant]) -> list[Plant]:
        """
        Insert plants in a single transaction.

        Returns:
            The plants with ``plant_id`` assigned, in input order

        Raises:
            RepositoryError: If any insert fails; the whole batch is rolled back
        """
        if not plants:
            return []

        db = self.get_db()
        placeholders = ", ".join("?" for _ in _INSERT_COLUMNS)
        sql = f"INSERT INTO Plants ({', '.join(_INSERT_COLUMNS)}) VALUES ({placeholders})"

        created: list[int] = []
        try:
            for plant in plants:
                values = asdict(plant)
                cursor = db.execute(
                    sql, tuple(_to_db_value(c, values.get(c)) for c in _INSERT_COLUMNS)
                )
                created.append(cursor.lastrowid)
            db.commit()
        except sqlite3.Error as e:
            db.rollback()
            logger.error("Batch insert of %s plants failed: %s", len(plants), e)
            raise RepositoryError(f"Failed to insert plants: {e}") from e

        logger.info("Inserted %s plants", len(created))
        return [p for p in (self.get_plant_by_id(pid) for pid in created) if p is not None]

    def update_plant_fields(self, plant_id: int, patch: dict[str, Any]) -> Plant | None:
        """
        Apply a partial update to one plant.

        Returns:
            The updated plant, or None if no row matched

        Raises:
            RepositoryError: On database failure
        """
        cols = safe_columns(patch, _UPDATABLE_COLUMNS, context="update_plant_fields")
        cols.setdefault("updated_at", iso_now())
        set_clause, values = build_set_clause({k: _to_db_value(k, v) for k, v in cols.items()})

        db = self.get_db()
        try:
            cursor = db.execute(
                f"UPDATE Plants SET {set_clause} WHERE plant_id = ?",
                (*values, plant_id),
            )
            db.commit()
        except sqlite3.Error as e:
            db.rollback()
            logger.error("Error updating plant %s: %s", plant_id, e)
            raise RepositoryError(f"Failed to update plant {plant_id}: {e}") from e

        if cursor.rowcount == 0:
            return None
        return self.get_plant_by_id(plant_id)

    def create_plant_group(self, name: str, owner_user_id: int) -> int:
        """Create a group owned by ``owner_user_id``, who also becomes a member."""
        db = self.get_db()
        try:
            cursor = db.execute(
                "INSERT INTO PlantGroups (name, owner_user_id, created_at) VALUES (?, ?, ?)",
                (name, owner_user_id, iso_now()),
            )
            group_id = cursor.lastrowid
            db.execute(
                "INSERT INTO PlantGroupMembers (group_id, user_id) VALUES (?, ?)",
                (group_id, owner_user_id),
            )
            db.commit()
        except sqlite3.Error as e:
            db.rollback()
            raise RepositoryError(f"Failed to create plant group: {e}") from e
        return group_id

    def add_plant_group_member(self, group_id: int, user_id: int) -> None:
        db = self.get_db()
        try:
            db.execute(
                "INSERT OR IGNORE INTO PlantGroupMembers (group_id, user_id) VALUES (?, ?)",
                (group_id, user_id),
            )
            db.commit()
        except sqlite3.Error as e:
            db.rollback()
            raise RepositoryError(f"Failed to add user {user_id} to group {group_id}: {e}") from e

    # =========================================================================
    # Mapping
    # =========================================================================

    def _row_to_plant(self, row: dict[str, Any]) -> Plant:
        """Convert database row to Plant object."""
        values: dict[str, Any] = {}
        for key, value in row.items():
            if key in PLANT_DATETIME_FIELDS:
                value = coerce_datetime(value)
            elif key == "has_drainage" and value is not None:
                value = bool(value)
            values[key] = value

        # NOT NULL columns always carry a timestamp; drop a stray NULL so the
        # entity default applies
        for key in ("date_acquired", "created_at", "updated_at"):
            if values.get(key) is None:
                values.pop(key, None)
        return Plant(**values)

import logging
import shutil
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

from flask import Flask

from app.domain.exceptions import RepositoryError
from app.utils.time import iso_now
from infrastructure.database.ops.plants import PlantOperations
from infrastructure.database.ops.tasks import CareTaskOperations

logger = logging.getLogger(__name__)


class SQLiteDatabaseHandler(PlantOperations, CareTaskOperations):
    """Thread-safe SQLite handler decoupled from Flask globals."""

    def __init__(self, database_path: str) -> None:
        self._database_path = database_path
        self._local = threading.local()

        # Ensure the directory for the database file exists
        db_path = Path(database_path)
        if database_path != ":memory:" and not db_path.parent.exists():
            db_path.parent.mkdir(parents=True, exist_ok=True)
            logger.info("Created database directory: %s", db_path.parent)

    @property
    def database_path(self) -> str:
        return self._database_path

    # --- Lifecycle ------------------------------------------------------------
    def init_app(self, app: Flask | None = None) -> None:
        if app is not None:
            app.teardown_appcontext(self.close_db)
        self.create_tables()

    def get_db(self) -> sqlite3.Connection:
        connection: Optional[sqlite3.Connection] = getattr(self._local, "connection", None)
        if connection is None:
            try:
                connection = self._open_connection()
            except sqlite3.DatabaseError as exc:
                if self._is_corruption_error(exc):
                    logger.error("Database appears corrupt (%s). Recreating a fresh database.", exc)
                    self._quarantine_corrupt_db()
                    connection = self._open_connection()
                else:
                    raise
            self._local.connection = connection
        return connection

    def _open_connection(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self._database_path, check_same_thread=False)
        try:
            connection.row_factory = sqlite3.Row
            self._configure_connection(connection)
            return connection
        except Exception:
            connection.close()
            raise

    def _is_corruption_error(self, exc: sqlite3.Error) -> bool:
        message = str(exc).lower()
        return (
            "database disk image is malformed" in message
            or "file is not a database" in message
            or "file is encrypted or is not a database" in message
        )

    def _quarantine_corrupt_db(self) -> Optional[Path]:
        db_path = Path(self._database_path)
        if not db_path.exists():
            return None

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        quarantine_dir = db_path.parent / "corrupt"
        quarantine_dir.mkdir(parents=True, exist_ok=True)

        suffix = db_path.suffix or ".db"
        quarantined = quarantine_dir / f"{db_path.stem}_corrupt_{timestamp}{suffix}"
        try:
            shutil.move(str(db_path), str(quarantined))
            for sidecar_suffix in ("-wal", "-shm"):
                sidecar = Path(f"{db_path}{sidecar_suffix}")
                if sidecar.exists():
                    shutil.move(str(sidecar), str(quarantine_dir / f"{sidecar.name}_{timestamp}"))
            logger.warning("Quarantined corrupt database to %s", quarantined)
            return quarantined
        except OSError as exc:
            logger.error("Failed to quarantine corrupt database %s: %s", db_path, exc)
            return None

    def _configure_connection(self, connection: sqlite3.Connection) -> None:
        """Enable foreign keys (cascading deletes) and WAL for concurrent reads."""
        connection.execute("PRAGMA foreign_keys=ON")
        connection.execute("PRAGMA journal_mode=WAL")
        connection.execute("PRAGMA synchronous=NORMAL")
        connection.commit()

    def close_db(self, _e: Optional[BaseException] = None) -> None:
        connection: Optional[sqlite3.Connection] = getattr(self._local, "connection", None)
        if connection is not None:
            connection.close()
            delattr(self._local, "connection")

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        conn = self.get_db()
        try:
            yield conn
        finally:
            conn.commit()

    # --- Schema ----------------------------------------------------------------
    def create_tables(self) -> None:
        """Creates the necessary tables in the database if they do not already exist."""
        with self.connection() as db:
            db.execute(
                """
                CREATE TABLE IF NOT EXISTS Users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT UNIQUE NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
            db.execute(
                """
                CREATE TABLE IF NOT EXISTS PlantGroups (
                    group_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    owner_user_id INTEGER NOT NULL,
                    created_at TIMESTAMP,
                    FOREIGN KEY (owner_user_id) REFERENCES Users(id) ON DELETE CASCADE
                )
                """
            )
            db.execute(
                """
                CREATE TABLE IF NOT EXISTS PlantGroupMembers (
                    group_id INTEGER NOT NULL,
                    user_id INTEGER NOT NULL,
                    PRIMARY KEY (group_id, user_id),
                    FOREIGN KEY (group_id) REFERENCES PlantGroups(group_id) ON DELETE CASCADE,
                    FOREIGN KEY (user_id) REFERENCES Users(id) ON DELETE CASCADE
                )
                """
            )
            # No uniqueness on (name, species_type, location): the import
            # dedup key is lossy and form-created duplicates are legitimate
            db.execute(
                """
                CREATE TABLE IF NOT EXISTS Plants (
                    plant_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    plant_group_id INTEGER,
                    name TEXT NOT NULL,
                    species_type TEXT NOT NULL,
                    species_name TEXT NOT NULL,
                    location TEXT NOT NULL,
                    date_acquired TIMESTAMP NOT NULL,
                    pot_size TEXT,
                    pot_type TEXT,
                    pot_color TEXT,
                    soil_type TEXT,
                    has_drainage BOOLEAN DEFAULT 1,
                    current_height_in REAL,
                    current_width_in REAL,
                    light_level TEXT,
                    humidity_preference TEXT,
                    min_temperature_f REAL,
                    max_temperature_f REAL,
                    fertilizer_type TEXT,
                    growth_stage TEXT,
                    toxicity TEXT,
                    native_region TEXT,
                    growth_rate TEXT,
                    difficulty_level TEXT,
                    purchase_location TEXT,
                    purchase_price_cents INTEGER,
                    notes TEXT,
                    last_watered_at TIMESTAMP,
                    last_fertilized_at TIMESTAMP,
                    last_misted_at TIMESTAMP,
                    last_repotted_at TIMESTAMP,
                    created_by_user_id INTEGER,
                    assigned_user_id INTEGER,
                    last_modified_by_user_id INTEGER,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL,
                    FOREIGN KEY (user_id) REFERENCES Users(id) ON DELETE CASCADE,
                    FOREIGN KEY (plant_group_id) REFERENCES PlantGroups(group_id) ON DELETE SET NULL
                )
                """
            )
            db.execute("CREATE INDEX IF NOT EXISTS idx_plants_user ON Plants(user_id)")
            db.execute("CREATE INDEX IF NOT EXISTS idx_plants_group ON Plants(plant_group_id)")
            db.execute(
                """
                CREATE TABLE IF NOT EXISTS CareTasks (
                    task_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    plant_id INTEGER NOT NULL,
                    user_id INTEGER NOT NULL,
                    type TEXT NOT NULL,
                    title TEXT NOT NULL,
                    description TEXT,
                    is_recurring BOOLEAN NOT NULL DEFAULT 0,
                    recurrence_pattern TEXT,
                    next_due_date TIMESTAMP,
                    last_completed_at TIMESTAMP,
                    assigned_user_id INTEGER,
                    created_by_user_id INTEGER,
                    last_modified_by_user_id INTEGER,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL,
                    FOREIGN KEY (plant_id) REFERENCES Plants(plant_id) ON DELETE CASCADE,
                    CHECK (is_recurring = 0 OR (recurrence_pattern IS NOT NULL AND next_due_date IS NOT NULL))
                )
                """
            )
            db.execute("CREATE INDEX IF NOT EXISTS idx_care_tasks_plant ON CareTasks(plant_id)")
            db.execute("CREATE INDEX IF NOT EXISTS idx_care_tasks_due ON CareTasks(next_due_date)")
            db.execute(
                """
                CREATE TABLE IF NOT EXISTS TaskCompletions (
                    completion_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    task_id INTEGER NOT NULL,
                    user_id INTEGER NOT NULL,
                    completed_at TIMESTAMP NOT NULL,
                    notes TEXT,
                    skipped BOOLEAN NOT NULL DEFAULT 0,
                    created_at TIMESTAMP NOT NULL,
                    FOREIGN KEY (task_id) REFERENCES CareTasks(task_id) ON DELETE CASCADE
                )
                """
            )
            db.execute("CREATE INDEX IF NOT EXISTS idx_completions_task ON TaskCompletions(task_id)")
        logger.info("Database schema ready at %s", self._database_path)

    # --- Users -----------------------------------------------------------------
    def create_user(self, username: str) -> int:
        """Insert a user and return its id."""
        try:
            with self.connection() as db:
                cursor = db.execute(
                    "INSERT INTO Users (username, created_at) VALUES (?, ?)",
                    (username, iso_now()),
                )
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to create user {username!r}: {exc}") from exc
        return cursor.lastrowid

    def get_user_by_username(self, username: str):
        """Fetches a user by username."""
        try:
            db = self.get_db()
            return db.execute("SELECT * FROM Users WHERE username = ?", (username,)).fetchone()
        except sqlite3.Error as exc:
            logger.error("Error fetching user: %s", exc)
            return None

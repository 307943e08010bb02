"""
Shared test fixtures for the houseplant care tracker test suite.

Provides:
- In-memory SQLite database with all tables created
- Two users (``user_id`` and ``other_user_id``)
- Repository instances wired to the test database
- Services with a mock audit logger
- A Flask app backed by a temporary database, plus signed-in clients
- Helper utilities for seeding test data

Usage:
    def test_example(seed, care_task_service, user_id):
        plant = seed.create_plant(user_id, "Fern")
        tasks = care_task_service.get_plant_tasks(plant.plant_id, user_id)
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from unittest.mock import MagicMock

import pytest

from app.domain.plants import Plant
from infrastructure.database.repositories import SQLiteCareTaskRepository, SQLitePlantRepository
from infrastructure.database.sqlite_handler import SQLiteDatabaseHandler


# ---------------------------------------------------------------------------
# Logging: keep test output clean
# ---------------------------------------------------------------------------
logging.getLogger("infrastructure").setLevel(logging.WARNING)
logging.getLogger("app").setLevel(logging.WARNING)


# ========================== Database Fixtures ==============================


@pytest.fixture()
def db_handler():
    """In-memory SQLite database with all tables created.

    Each test gets a fresh database with no cross-test contamination.
    """
    handler = SQLiteDatabaseHandler(":memory:")
    handler.create_tables()
    yield handler
    handler.close_db()


@pytest.fixture()
def user_id(db_handler) -> int:
    return db_handler.create_user("alice")


@pytest.fixture()
def other_user_id(db_handler) -> int:
    return db_handler.create_user("bob")


# ========================== Repository Fixtures ============================


@pytest.fixture()
def plant_repo(db_handler):
    """SQLitePlantRepository backed by the in-memory DB."""
    return SQLitePlantRepository(db_handler)


@pytest.fixture()
def task_repo(db_handler):
    """SQLiteCareTaskRepository backed by the in-memory DB."""
    return SQLiteCareTaskRepository(db_handler)


# ========================== Mock Service Fixtures ==========================


@pytest.fixture()
def mock_audit_logger():
    """Mock AuditLogger."""
    logger = MagicMock()
    logger.log_bulk_import = MagicMock()
    logger.log_task_action = MagicMock()
    return logger


# ========================== Service Factory Fixtures =======================


@pytest.fixture()
def care_task_service(task_repo, plant_repo, mock_audit_logger):
    from app.services.application.care_task_service import CareTaskService

    return CareTaskService(task_repo, plant_repo, mock_audit_logger)


@pytest.fixture()
def plant_service(plant_repo, care_task_service):
    from app.services.application.plant_service import PlantService

    return PlantService(plant_repo, care_task_service)


@pytest.fixture()
def bulk_import_service(plant_repo, care_task_service, mock_audit_logger):
    from app.services.application.bulk_import_service import BulkPlantImportService

    return BulkPlantImportService(plant_repo, care_task_service, mock_audit_logger)


# ========================== Seed Helpers ===================================


class SeedData:
    """Helper to create commonly needed test data.

    Usage in tests::

        def test_something(seed, user_id):
            plant = seed.create_plant(user_id, "Monstera", location="Kitchen")
            group_id = seed.create_group(user_id, members=[other_user_id])
    """

    def __init__(self, plant_repo: SQLitePlantRepository):
        self._plants = plant_repo

    def create_plant(
        self,
        user_id: int,
        name: str = "Monstera",
        species_type: str = "tropical",
        location: str = "Living Room",
        **fields: Any,
    ) -> Plant:
        """Insert a plant directly (no default tasks)."""
        record = {
            "user_id": user_id,
            "name": name,
            "species_type": species_type,
            "species_name": fields.pop("species_name", "Monstera deliciosa"),
            "location": location,
            "date_acquired": fields.pop("date_acquired", datetime(2024, 1, 15, tzinfo=timezone.utc)),
            "created_by_user_id": user_id,
            "assigned_user_id": user_id,
            **fields,
        }
        return self._plants.insert(record)

    def create_group(self, owner_user_id: int, name: str = "Household", members: list[int] | None = None) -> int:
        group_id = self._plants.create_group(name, owner_user_id)
        for member in members or []:
            self._plants.add_group_member(group_id, member)
        return group_id


@pytest.fixture()
def seed(plant_repo):
    """SeedData helper for quickly populating the test database."""
    return SeedData(plant_repo)


# ========================== Flask Fixtures =================================


@pytest.fixture()
def app(tmp_path):
    from app import create_app

    flask_app = create_app(
        {
            "database_path": str(tmp_path / "plantcare.db"),
            "audit_log_path": str(tmp_path / "audit.log"),
            "log_path": str(tmp_path / "plantcare.log"),
            "environment": "testing",
        }
    )
    flask_app.config["TESTING"] = True
    yield flask_app
    flask_app.config["CONTAINER"].shutdown()


@pytest.fixture()
def container(app):
    return app.config["CONTAINER"]


@pytest.fixture()
def api_user_id(container) -> int:
    return container.database.create_user("api-user")


@pytest.fixture()
def client(app, api_user_id):
    """Test client signed in as ``api_user_id``."""
    test_client = app.test_client()
    with test_client.session_transaction() as sess:
        sess["user_id"] = api_user_id
    return test_client


@pytest.fixture()
def anonymous_client(app):
    return app.test_client()

"""
Plant Service Tests
===================
Plant creation (with default task seeding), access checks and listings.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from app.domain.exceptions import AccessDeniedError, NotFoundError, ValidationError
from app.enums.care import CareTaskType
from app.services.application.plant_service import PlantService

ACQUIRED = datetime(2024, 2, 1, tzinfo=timezone.utc)


def _fields(**overrides):
    return {
        "name": "Pilea",
        "species_type": "Pilea",
        "species_name": "Peperomioides",
        "location": "Desk",
        "date_acquired": ACQUIRED,
        **overrides,
    }


class TestCreatePlant:
    def test_owner_creator_and_assignee(self, plant_service, user_id):
        plant = plant_service.create_plant(user_id, **_fields())

        assert plant.plant_id is not None
        assert (plant.user_id, plant.created_by_user_id, plant.assigned_user_id) == (user_id, user_id, user_id)
        assert plant.date_acquired == ACQUIRED

    def test_default_tasks_follow_last_care_dates(self, plant_service, task_repo, user_id):
        watered = datetime(2024, 5, 10, 7, 0, tzinfo=timezone.utc)

        plant = plant_service.create_plant(user_id, **_fields(last_watered_at=watered))

        tasks = {t.task_type: t for t in task_repo.list_by_plant(plant.plant_id)}
        assert len(tasks) == 4
        assert tasks[CareTaskType.WATER].next_due_date == watered + timedelta(days=6)
        assert tasks[CareTaskType.WATER].last_completed_at == watered
        assert tasks[CareTaskType.MIST].last_completed_at is None

    def test_explicit_assignee(self, plant_service, user_id, other_user_id):
        plant = plant_service.create_plant(user_id, **_fields(assigned_user_id=other_user_id))
        assert plant.assigned_user_id == other_user_id

    def test_missing_required_field(self, plant_service, user_id):
        fields = _fields()
        del fields["location"]
        with pytest.raises(ValidationError, match="location"):
            plant_service.create_plant(user_id, **fields)

    def test_unknown_field(self, plant_service, user_id):
        with pytest.raises(ValidationError, match="Unknown plant fields: colour"):
            plant_service.create_plant(user_id, **_fields(colour="green"))

    def test_ownership_cannot_be_supplied(self, plant_service, user_id, other_user_id):
        with pytest.raises(ValidationError, match="Unknown plant fields: user_id"):
            plant_service.create_plant(user_id, **_fields(user_id=other_user_id))

    def test_group_membership_required(self, plant_service, seed, user_id, other_user_id):
        group_id = seed.create_group(other_user_id)
        with pytest.raises(AccessDeniedError):
            plant_service.create_plant(user_id, **_fields(plant_group_id=group_id))

    def test_group_member_may_add_plants(self, plant_service, seed, user_id, other_user_id):
        group_id = seed.create_group(other_user_id, members=[user_id])
        plant = plant_service.create_plant(user_id, **_fields(plant_group_id=group_id))
        assert plant.plant_group_id == group_id

    def test_task_seeding_failure_is_logged_not_raised(self, plant_repo, user_id):
        seeder = MagicMock()
        seeder.create_default_tasks_for_plant.side_effect = RuntimeError("no tasks today")
        service = PlantService(plant_repo, seeder)

        plant = service.create_plant(user_id, **_fields())

        assert plant_repo.get_by_id(plant.plant_id) is not None


class TestAccessAndListing:
    def test_get_plant(self, plant_service, seed, user_id, other_user_id):
        plant = seed.create_plant(user_id)

        assert plant_service.get_plant(plant.plant_id, user_id) == plant
        with pytest.raises(AccessDeniedError):
            plant_service.get_plant(plant.plant_id, other_user_id)
        with pytest.raises(NotFoundError):
            plant_service.get_plant(424242, user_id)

    def test_group_member_can_read(self, plant_service, seed, user_id, other_user_id):
        group_id = seed.create_group(user_id, members=[other_user_id])
        plant = seed.create_plant(user_id, plant_group_id=group_id)
        assert plant_service.get_plant(plant.plant_id, other_user_id).plant_id == plant.plant_id

    def test_list_scopes(self, plant_service, seed, user_id, other_user_id):
        group_id = seed.create_group(other_user_id, members=[user_id])
        own = seed.create_plant(user_id, "Own")
        shared = seed.create_plant(other_user_id, "Shared", plant_group_id=group_id)

        assert [p.plant_id for p in plant_service.list_plants(user_id)] == [own.plant_id, shared.plant_id]
        assert [p.plant_id for p in plant_service.list_plants(user_id, include_shared=False)] == [own.plant_id]

"""
Plant Domain Entity
===================

Plant record as seen by the care-task and bulk import logic, plus the
normalized identity key used to match imported rows to existing plants.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field, fields
from typing import Any

from app.utils.time import to_iso, utc_now

# Attributes a caller may set when creating or updating a plant
PLANT_WRITABLE_FIELDS: tuple[str, ...] = (
    "plant_group_id",
    "name",
    "species_type",
    "species_name",
    "location",
    "date_acquired",
    "pot_size",
    "pot_type",
    "pot_color",
    "soil_type",
    "has_drainage",
    "current_height_in",
    "current_width_in",
    "light_level",
    "humidity_preference",
    "min_temperature_f",
    "max_temperature_f",
    "fertilizer_type",
    "growth_stage",
    "toxicity",
    "native_region",
    "growth_rate",
    "difficulty_level",
    "purchase_location",
    "purchase_price_cents",
    "notes",
    "last_watered_at",
    "last_fertilized_at",
    "last_misted_at",
    "last_repotted_at",
    "assigned_user_id",
)

PLANT_DATETIME_FIELDS: frozenset[str] = frozenset(
    {
        "date_acquired",
        "last_watered_at",
        "last_fertilized_at",
        "last_misted_at",
        "last_repotted_at",
        "created_at",
        "updated_at",
    }
)


def plant_dedup_key(name: str, species_type: str, location: str) -> str:
    """Case- and whitespace-insensitive identity of a plant for imports."""
    return f"{name.strip().lower()}|{species_type.strip().lower()}|{location.strip().lower()}"


@dataclass
class Plant:
    """
    Plant entity.

    Attributes:
        plant_id: Unique identifier (None for new plants)
        user_id: Owner
        plant_group_id: Shared group the plant belongs to, if any
        name / species_type / species_name / location: Core attributes
        date_acquired: When the owner got the plant
        last_*_at: Last-care timestamps, seeds for auto-generated tasks
    """

    # Identity
    plant_id: int | None = None
    user_id: int = 0
    plant_group_id: int | None = None

    # Core attributes
    name: str = ""
    species_type: str = ""
    species_name: str = ""
    location: str = ""
    date_acquired: datetime.datetime = field(default_factory=utc_now)

    # Physical attributes
    pot_size: str | None = None
    pot_type: str | None = None
    pot_color: str | None = None
    soil_type: str | None = None
    has_drainage: bool | None = True
    current_height_in: float | None = None
    current_width_in: float | None = None

    # Care requirements
    light_level: str | None = None
    humidity_preference: str | None = None
    min_temperature_f: float | None = None
    max_temperature_f: float | None = None
    fertilizer_type: str | None = None
    growth_stage: str | None = None

    # Additional info
    toxicity: str | None = None
    native_region: str | None = None
    growth_rate: str | None = None
    difficulty_level: str | None = None
    purchase_location: str | None = None
    purchase_price_cents: int | None = None
    notes: str | None = None

    # Last care dates
    last_watered_at: datetime.datetime | None = None
    last_fertilized_at: datetime.datetime | None = None
    last_misted_at: datetime.datetime | None = None
    last_repotted_at: datetime.datetime | None = None

    # Assignment and audit trail
    created_by_user_id: int | None = None
    assigned_user_id: int | None = None
    last_modified_by_user_id: int | None = None
    created_at: datetime.datetime = field(default_factory=utc_now)
    updated_at: datetime.datetime = field(default_factory=utc_now)

    @property
    def dedup_key(self) -> str:
        return plant_dedup_key(self.name, self.species_type, self.location)

    def last_care_dates(self) -> dict[str, datetime.datetime | None]:
        return {
            "last_watered_at": self.last_watered_at,
            "last_fertilized_at": self.last_fertilized_at,
            "last_misted_at": self.last_misted_at,
            "last_repotted_at": self.last_repotted_at,
        }

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            data[f.name] = to_iso(value) if f.name in PLANT_DATETIME_FIELDS else value
        return data

"""
Bulk Import Schemas
===================

Validation schema for one row of a plant CSV upload. A row either parses
into a fully typed ``BulkPlantRow`` or is rejected with field errors.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from app.constants import CSV_TO_PLANT_FIELDS
from app.enums.care import DifficultyLevel, GrowthRate, GrowthStage, HumidityPreference, LightLevel
from app.utils.time import coerce_datetime

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_REQUIRED_MESSAGES = {
    "name": "Plant name is required",
    "species_type": "Species type is required",
    "species_name": "Species name is required",
    "location": "Location is required",
}

_TRUE_VALUES = {"true", "yes", "1"}
_FALSE_VALUES = {"false", "no", "0"}


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


class BulkPlantRow(BaseModel):
    """One validated plant row from a CSV upload (CSV column names)."""

    model_config = ConfigDict(extra="ignore", validate_default=True)

    # Required fields
    name: str = ""
    species_type: str = ""
    species_name: str = ""
    location: str = ""
    date_acquired: datetime | None = None

    # Optional physical attributes
    pot_size: str | None = None
    pot_type: str | None = None
    pot_color: str | None = None
    soil_type: str | None = None
    has_drainage: bool | None = None
    current_height_in: float | None = None
    current_width_in: float | None = None

    # Optional care requirements
    light_level: LightLevel | None = None
    humidity_preference: HumidityPreference | None = None
    min_temperature_f: float | None = None
    max_temperature_f: float | None = None
    fertilizer_type: str | None = None
    growth_stage: GrowthStage | None = None

    # Optional additional info
    toxicity: str | None = None
    native_region: str | None = None
    growth_rate: GrowthRate | None = None
    difficulty_level: DifficultyLevel | None = None
    purchase_location: str | None = None
    purchase_price: int | None = None  # cents
    notes: str | None = None

    # Last care dates for auto-task generation
    last_watered: datetime | None = None
    last_fertilized: datetime | None = None
    last_misted: datetime | None = None
    last_repotted: datetime | None = None

    @field_validator("name", "species_type", "species_name", "location", mode="before")
    @classmethod
    def require_text(cls, v, info: ValidationInfo):
        if _blank(v):
            raise PydanticCustomError("required", _REQUIRED_MESSAGES[info.field_name])
        return str(v).strip()

    @field_validator("date_acquired", mode="before")
    @classmethod
    def parse_date_acquired(cls, v):
        if _blank(v):
            raise PydanticCustomError("required", "Date acquired is required")
        if isinstance(v, datetime):
            return v
        raw = str(v).strip()
        if not _DATE_RE.match(raw):
            raise PydanticCustomError(
                "date_format", "Date must be in YYYY-MM-DD format (e.g., 2024-01-15)"
            )
        try:
            return datetime.strptime(raw, "%Y-%m-%d").replace(tzinfo=timezone.utc)
        except ValueError:
            raise PydanticCustomError("invalid_date", "Invalid date") from None

    @field_validator(
        "pot_size",
        "pot_type",
        "pot_color",
        "soil_type",
        "fertilizer_type",
        "toxicity",
        "native_region",
        "purchase_location",
        "notes",
        mode="before",
    )
    @classmethod
    def empty_to_none(cls, v):
        if _blank(v):
            return None
        return str(v).strip()

    @field_validator("has_drainage", mode="before")
    @classmethod
    def parse_boolean(cls, v):
        if isinstance(v, bool):
            return v
        if _blank(v):
            return None
        lowered = str(v).strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        return None

    @field_validator(
        "current_height_in",
        "current_width_in",
        "min_temperature_f",
        "max_temperature_f",
        mode="before",
    )
    @classmethod
    def parse_number(cls, v):
        if _blank(v):
            return None
        try:
            number = float(str(v).strip())
        except ValueError:
            return None
        return None if math.isnan(number) or math.isinf(number) else number

    @field_validator(
        "light_level",
        "humidity_preference",
        "growth_stage",
        "growth_rate",
        "difficulty_level",
        mode="before",
    )
    @classmethod
    def normalize_choice(cls, v):
        if _blank(v):
            return None
        return str(v).strip().lower()

    @field_validator("purchase_price", mode="before")
    @classmethod
    def parse_price_cents(cls, v):
        """Strip currency symbols and convert dollars to integer cents."""
        if _blank(v):
            return None
        cleaned = str(v).replace("$", "").replace(",", "").strip()
        try:
            dollars = float(cleaned)
        except ValueError:
            return None
        if math.isnan(dollars) or math.isinf(dollars):
            return None
        return int(math.floor(dollars * 100 + 0.5))

    @field_validator("last_watered", "last_fertilized", "last_misted", "last_repotted", mode="before")
    @classmethod
    def parse_care_date(cls, v):
        if _blank(v):
            return None
        parsed = coerce_datetime(v)
        if parsed is None:
            raise PydanticCustomError("invalid_date", "Invalid date format (use YYYY-MM-DD)")
        return parsed

    def to_plant_fields(self) -> dict[str, Any]:
        """Map CSV columns onto Plant attribute names, omitting empty values."""
        mapped: dict[str, Any] = {}
        for csv_field, plant_field in CSV_TO_PLANT_FIELDS.items():
            value = getattr(self, csv_field)
            if value is None:
                continue
            if hasattr(value, "value"):
                value = value.value
            mapped[plant_field] = value
        return mapped

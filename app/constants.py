"""
Application Constants
=====================

Centralized constants to replace magic numbers throughout the codebase.
Organized by domain for easy discovery and maintenance.

Usage:
    from app.constants import TASK_DEFAULTS, CSV_HEADERS
    from app.constants import BulkUpload, TaskQueries
"""

from app.enums.care import CareTaskType, RecurrenceUnit

# =============================================================================
# Care Task Defaults
# =============================================================================

# Default cadence and title for each task type. Used for auto-generated tasks
# and as form defaults when a user creates a task by hand.
TASK_DEFAULTS: dict[CareTaskType, dict] = {
    CareTaskType.WATER: {"frequency": 6, "unit": RecurrenceUnit.DAYS, "title": "Water"},
    CareTaskType.FERTILIZE: {"frequency": 12, "unit": RecurrenceUnit.DAYS, "title": "Fertilize"},
    CareTaskType.MIST: {"frequency": 3, "unit": RecurrenceUnit.DAYS, "title": "Mist"},
    CareTaskType.REPOT_CHECK: {"frequency": 6, "unit": RecurrenceUnit.MONTHS, "title": "Check for Repotting"},
    CareTaskType.WATER_FERTILIZE: {"frequency": 12, "unit": RecurrenceUnit.DAYS, "title": "Water & Fertilize"},
    CareTaskType.PRUNE: {"frequency": 30, "unit": RecurrenceUnit.DAYS, "title": "Prune"},
    CareTaskType.ROTATE: {"frequency": 7, "unit": RecurrenceUnit.DAYS, "title": "Rotate"},
    CareTaskType.CUSTOM: {"frequency": 7, "unit": RecurrenceUnit.DAYS, "title": "Custom Task"},
}

# Task types created automatically for every new plant, and the plant
# last-care field each one is seeded from.
AUTO_GENERATED_TASK_TYPES: dict[CareTaskType, str] = {
    CareTaskType.WATER: "last_watered_at",
    CareTaskType.FERTILIZE: "last_fertilized_at",
    CareTaskType.MIST: "last_misted_at",
    CareTaskType.REPOT_CHECK: "last_repotted_at",
}

# Plant fields stamped when a task of the given type is completed
TASK_TYPE_CARE_FIELDS: dict[CareTaskType, tuple[str, ...]] = {
    CareTaskType.WATER: ("last_watered_at",),
    CareTaskType.FERTILIZE: ("last_fertilized_at",),
    CareTaskType.MIST: ("last_misted_at",),
    CareTaskType.REPOT_CHECK: ("last_repotted_at",),
    CareTaskType.WATER_FERTILIZE: ("last_watered_at", "last_fertilized_at"),
}


class TaskQueries:
    """Limits for task listing queries."""
    RECENT_COMPLETIONS = 5
    HISTORY_COMPLETIONS = 10
    UPCOMING_DAYS_DEFAULT = 7


# =============================================================================
# Bulk Upload
# =============================================================================

class BulkUpload:
    """Limits applied to CSV plant uploads."""
    MAX_ROWS = 100
    MAX_FILE_BYTES = 5 * 1024 * 1024  # 5 MB


# Expected CSV headers (in order)
CSV_HEADERS: tuple[str, ...] = (
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
    "purchase_price",
    "notes",
    "last_watered",
    "last_fertilized",
    "last_misted",
    "last_repotted",
)

# Common header variations mapped to the standard field names.
# Applied after headers are trimmed, lowercased and spaces/asterisks become "_".
CSV_HEADER_ALIASES: dict[str, str] = {
    "plant_name": "name",
    "type": "species_type",
    "species": "species_name",
    "date": "date_acquired",
    "acquired": "date_acquired",
    "drainage": "has_drainage",
    "height": "current_height_in",
    "width": "current_width_in",
    "light": "light_level",
    "humidity": "humidity_preference",
    "min_temp": "min_temperature_f",
    "max_temp": "max_temperature_f",
    "fertilizer": "fertilizer_type",
    "stage": "growth_stage",
    "native": "native_region",
    "growth": "growth_rate",
    "difficulty": "difficulty_level",
    "price": "purchase_price",
    "purchase": "purchase_location",
}

# CSV column -> Plant attribute. Explicit because several columns are renamed
# (purchase_price holds dollars in the file and cents on the plant).
CSV_TO_PLANT_FIELDS: dict[str, str] = {
    "name": "name",
    "species_type": "species_type",
    "species_name": "species_name",
    "location": "location",
    "date_acquired": "date_acquired",
    "pot_size": "pot_size",
    "pot_type": "pot_type",
    "pot_color": "pot_color",
    "soil_type": "soil_type",
    "has_drainage": "has_drainage",
    "current_height_in": "current_height_in",
    "current_width_in": "current_width_in",
    "light_level": "light_level",
    "humidity_preference": "humidity_preference",
    "min_temperature_f": "min_temperature_f",
    "max_temperature_f": "max_temperature_f",
    "fertilizer_type": "fertilizer_type",
    "growth_stage": "growth_stage",
    "toxicity": "toxicity",
    "native_region": "native_region",
    "growth_rate": "growth_rate",
    "difficulty_level": "difficulty_level",
    "purchase_location": "purchase_location",
    "purchase_price": "purchase_price_cents",
    "notes": "notes",
    "last_watered": "last_watered_at",
    "last_fertilized": "last_fertilized_at",
    "last_misted": "last_misted_at",
    "last_repotted": "last_repotted_at",
}

# Human-readable header labels for the template
CSV_HEADER_LABELS: dict[str, str] = {
    "name": "Plant Name *",
    "species_type": "Species Type * (e.g., Philodendron, Monstera, Pothos)",
    "species_name": "Species Name * (e.g., Pink Princess, Deliciosa)",
    "location": "Location * (e.g., Living Room, Kitchen)",
    "date_acquired": "Date Acquired * (YYYY-MM-DD)",
    "pot_size": "Pot Size (e.g., 6 inch, 10 inch)",
    "pot_type": "Pot Type (e.g., Ceramic, Plastic, Terracotta)",
    "pot_color": "Pot Color",
    "soil_type": "Soil Type",
    "has_drainage": "Has Drainage? (yes/no)",
    "current_height_in": "Current Height (inches)",
    "current_width_in": "Current Width (inches)",
    "light_level": "Light Level (low, medium, bright-indirect, bright-direct)",
    "humidity_preference": "Humidity (low, medium, high)",
    "min_temperature_f": "Min Temperature (°F)",
    "max_temperature_f": "Max Temperature (°F)",
    "fertilizer_type": "Fertilizer Type",
    "growth_stage": "Growth Stage (seedling, juvenile, mature, flowering)",
    "toxicity": "Toxicity Info",
    "native_region": "Native Region",
    "growth_rate": "Growth Rate (slow, medium, fast)",
    "difficulty_level": "Difficulty (beginner, intermediate, advanced)",
    "purchase_location": "Purchase Location",
    "purchase_price": "Purchase Price (e.g., 25.99)",
    "notes": "Notes",
    "last_watered": "Last Watered (YYYY-MM-DD, optional)",
    "last_fertilized": "Last Fertilized (YYYY-MM-DD, optional)",
    "last_misted": "Last Misted (YYYY-MM-DD, optional)",
    "last_repotted": "Last Repotted (YYYY-MM-DD, optional)",
}

# Example row for the template
CSV_EXAMPLE_ROW: dict[str, str] = {
    "name": "My Pink Princess",
    "species_type": "Philodendron",
    "species_name": "Pink Princess",
    "location": "Living Room",
    "date_acquired": "2024-01-15",
    "pot_size": "6 inch",
    "pot_type": "Ceramic",
    "pot_color": "White",
    "soil_type": "Well-draining potting mix",
    "has_drainage": "yes",
    "current_height_in": "12",
    "current_width_in": "8",
    "light_level": "bright-indirect",
    "humidity_preference": "high",
    "min_temperature_f": "65",
    "max_temperature_f": "80",
    "fertilizer_type": "Liquid 20-20-20",
    "growth_stage": "juvenile",
    "toxicity": "Toxic to pets",
    "native_region": "South America",
    "growth_rate": "medium",
    "difficulty_level": "intermediate",
    "purchase_location": "Local nursery",
    "purchase_price": "45.99",
    "notes": "Needs consistent watering and humidity",
    "last_watered": "2024-10-20",
    "last_fertilized": "2024-10-15",
    "last_misted": "2024-10-22",
    "last_repotted": "2024-06-01",
}

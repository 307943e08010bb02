"""
Plant Domain Module
===================

This module provides:
- Plant: plant entity and its import identity key
- PlantRepository: Protocol for plant persistence
"""
from app.domain.plants.plant_entity import (
    PLANT_WRITABLE_FIELDS,
    Plant,
    plant_dedup_key,
)
from app.domain.plants.repository import PlantRepository

__all__ = [
    "Plant",
    "PLANT_WRITABLE_FIELDS",
    "plant_dedup_key",
    "PlantRepository",
]

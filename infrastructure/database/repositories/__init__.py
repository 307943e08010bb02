"""Repository facades exposing typed accessors over low-level mixins.

The domain Protocols they satisfy live next to the entities::

    from app.domain.plants import PlantRepository
    from app.domain.tasks import CareTaskRepository
"""

from infrastructure.database.repositories.plants import SQLitePlantRepository
from infrastructure.database.repositories.tasks import SQLiteCareTaskRepository

__all__ = [
    "SQLitePlantRepository",
    "SQLiteCareTaskRepository",
]

"""
Plant CRUD Operations
=====================

Endpoints for creating, listing and reading plants. Creating a plant also
seeds its default care tasks.
"""

from __future__ import annotations

import logging

from flask import Response, request
from pydantic import ValidationError

from app.blueprints.api._common import (
    get_json as _get_json,
    get_plant_service as _plant_service,
    require_user_id as _require_user_id,
    success as _success,
)
from app.schemas import CreatePlantRequest
from app.utils.http import safe_route, validation_error_response

from . import plants_api

logger = logging.getLogger("plants_api.crud")


# ============================================================================
# PLANT CRUD OPERATIONS
# ============================================================================


@plants_api.get("")
@safe_route("Failed to list plants")
def list_plants() -> Response:
    """List the user's plants; ``?scope=own`` excludes group plants"""
    user_id = _require_user_id()
    include_shared = request.args.get("scope", "all") != "own"
    plants = _plant_service().list_plants(user_id, include_shared=include_shared)
    return _success({"plants": [p.to_dict() for p in plants], "count": len(plants)})


@plants_api.post("")
@safe_route("Failed to create plant")
def create_plant() -> Response:
    """Create a plant and its default care tasks"""
    user_id = _require_user_id()

    try:
        body = CreatePlantRequest(**_get_json())
    except ValidationError as ve:
        return validation_error_response(ve)

    plant = _plant_service().create_plant(user_id, **body.model_dump(exclude_none=True))
    logger.info("Created plant %s for user %s", plant.plant_id, user_id)
    return _success(plant.to_dict(), 201)


@plants_api.get("/<int:plant_id>")
@safe_route("Failed to get plant")
def get_plant(plant_id: int) -> Response:
    user_id = _require_user_id()
    plant = _plant_service().get_plant(plant_id, user_id)
    return _success(plant.to_dict())

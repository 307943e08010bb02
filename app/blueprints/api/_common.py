"""
Blueprint Common Utilities
==========================

Shared helper functions for all API blueprints.
Import these instead of duplicating helper code in each blueprint.

Usage:
    from app.blueprints.api._common import (
        get_container, get_json, success, fail, require_user_id,
        get_care_task_service, get_plant_service, ...
    )
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from flask import current_app, request, session

from app.domain.exceptions import AuthenticationError
from app.utils.http import error_response, success_response

if TYPE_CHECKING:
    from app.services.application.bulk_import_service import BulkPlantImportService
    from app.services.application.care_task_service import CareTaskService
    from app.services.application.plant_service import PlantService
    from app.services.container import ServiceContainer

logger = logging.getLogger("api._common")


# ============================================================================
# User Session Utilities
# ============================================================================


def get_user_id() -> Optional[int]:
    """Get current user ID from session, or None when signed out."""
    user_id = session.get("user_id")
    return int(user_id) if user_id is not None else None


def require_user_id() -> int:
    """
    Get current user ID from session.

    Raises:
        AuthenticationError: If no user is signed in (mapped to 401)
    """
    user_id = get_user_id()
    if user_id is None:
        raise AuthenticationError("Authentication required")
    return user_id


# ============================================================================
# CONTAINER ACCESS
# ============================================================================


def get_container() -> "ServiceContainer":
    """
    Get the service container from Flask app config.

    Raises:
        RuntimeError: If container is not configured
    """
    container = current_app.config.get("CONTAINER")
    if not container:
        raise RuntimeError("ServiceContainer not found in app config")
    return container


def get_care_task_service() -> "CareTaskService":
    return get_container().care_task_service


def get_plant_service() -> "PlantService":
    return get_container().plant_service


def get_bulk_import_service() -> "BulkPlantImportService":
    return get_container().bulk_import_service


# ============================================================================
# REQUEST HELPERS
# ============================================================================


def get_json() -> dict:
    """
    Get JSON request body with silent failure.

    Returns:
        dict: Parsed JSON body or empty dict if not available
    """
    return request.get_json(silent=True) or {}


# ============================================================================
# RESPONSE HELPERS
# ============================================================================


def success(data: dict | list | None = None, status: int = 200, *, message: str | None = None):
    """
    Standard success response wrapper.

    Returns:
        Flask Response with format: {"ok": true, "data": ..., "error": null}
    """
    return success_response(data, status, message=message)


def fail(message: str, status: int = 400, *, details: dict | None = None):
    """
    Standard error response wrapper.

    Returns:
        Flask Response with format: {"ok": false, "data": null, "error": {...}}
    """
    return error_response(message, status, details=details)

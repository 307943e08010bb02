"""
HTTP Response Helpers
=====================

Every API response uses the same JSON envelope::

    {"ok": true,  "data": {...}, "error": null}
    {"ok": false, "data": null,  "error": {"message": ..., "timestamp": ...}}

Routes return ``success_response`` / ``error_response`` directly, or raise a
``PlantCareError`` and let ``safe_route`` pick the status from the
exception's ``http_status``.
"""
from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING, Any, Callable

from flask import Blueprint, Response, jsonify

from app.utils.time import iso_now

if TYPE_CHECKING:
    import pydantic

_log = logging.getLogger(__name__)

# Messages sent for server-side failures; the exception text stays in the log
_GENERIC_MESSAGES: dict[int, str] = {
    400: "Invalid request",
    401: "Authentication required",
    403: "Access denied",
    404: "Resource not found",
    405: "Method not allowed",
    413: "Upload too large",
    500: "An internal error occurred",
}


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------


def success_response(
    data: dict | list | None = None,
    status: int = 200,
    *,
    message: str | None = None,
) -> Response:
    payload: dict[str, Any] = {"ok": True, "data": data, "error": None}
    if message is not None:
        payload["message"] = message
    response = jsonify(payload)
    response.status_code = status
    return response


def error_response(
    message: str,
    status: int = 500,
    *,
    details: dict | None = None,
) -> Response:
    """
    Build a failure envelope.

    ``details`` is merged into ``error`` and also repeated at the top level
    so clients can read e.g. ``details.result`` of a failed bulk upload.
    """
    error: dict[str, Any] = {"message": message, "timestamp": iso_now()}
    body: dict[str, Any] = {"ok": False, "data": None, "error": error, "message": message}
    if details:
        error.update(details)
        body["details"] = details
    response = jsonify(body)
    response.status_code = status
    return response


def validation_error_response(exc: "pydantic.ValidationError") -> Response:
    """400 envelope listing pydantic errors (without URLs or raw contexts)."""
    errors = exc.errors(include_url=False, include_context=False)
    return error_response("Invalid request", 400, details={"errors": errors})


def safe_error(exc: BaseException, status: int = 500, *, context: str = "") -> Response:
    """Log ``exc`` in full and answer with the generic message for ``status``."""
    _log.error("API error [%s] %s: %s", status, context, exc, exc_info=exc)
    return error_response(_GENERIC_MESSAGES.get(status, _GENERIC_MESSAGES[500]), status)


def csv_attachment(content: str, filename: str) -> Response:
    return Response(
        content,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


# ---------------------------------------------------------------------------
# Route plumbing
# ---------------------------------------------------------------------------


def safe_route(error_message: str = "An internal error occurred", *, error_status: int = 500) -> Callable:
    """Wrap a route so domain errors become JSON envelopes.

    Usage::

        @tasks_api.get("/upcoming")
        @safe_route("Failed to get upcoming tasks")
        def upcoming_tasks():
            ...

    A ``PlantCareError`` below 500 is answered with its own message and
    ``http_status``. Anything else is logged and answered with
    ``error_status`` and a generic message.
    """
    from app.domain.exceptions import PlantCareError

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Response:
            try:
                return fn(*args, **kwargs)
            except PlantCareError as exc:
                if exc.http_status >= 500:
                    return safe_error(exc, exc.http_status, context=error_message)
                return error_response(str(exc) or error_message, exc.http_status)
            except Exception as exc:
                return safe_error(exc, error_status, context=error_message)

        return wrapper

    return decorator


def register_error_handlers(blueprint: Blueprint) -> None:
    """JSON 404/405 responses for routes inside ``blueprint``."""

    @blueprint.errorhandler(404)
    def _not_found(_error):
        return error_response(_GENERIC_MESSAGES[404], 404)

    @blueprint.errorhandler(405)
    def _method_not_allowed(_error):
        return error_response(_GENERIC_MESSAGES[405], 405)

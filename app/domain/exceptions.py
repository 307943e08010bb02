"""Centralized exception hierarchy for the plant care backend.

All domain and service exceptions inherit from :class:`PlantCareError` so that
callers can catch a single base class when they need a broad safety net, yet
still match on specific subclasses where narrower handling is appropriate.

Blueprint-level error handling (see ``app/utils/http.safe_route``) maps these
to the correct HTTP status codes automatically.

Hierarchy
---------
::

    PlantCareError (base, maps to 500)
    ├── ValidationError                  (400, bad input from caller)
    │   ├── InvalidScheduleConfiguration (400, mode without its required fields)
    │   └── CannotSkipUnscheduled        (400, skip on a task with no due date)
    ├── FileError                        (400, upload could not be read/parsed)
    ├── AuthenticationError              (401, no signed-in user)
    ├── AccessDeniedError                (403, plant not owned / not in group)
    ├── NotFoundError                    (404, entity does not exist)
    └── ServiceError                     (500, business-logic failure)
        └── RepositoryError              (500, database / persistence)
"""

from __future__ import annotations


class PlantCareError(Exception):
    """Base exception for all plant care application errors.

    Parameters
    ----------
    message:
        Human-readable description (logged server-side, **not** leaked to
        the HTTP client unless the exception class opts in).
    detail:
        Optional machine-readable context dict attached to the error for
        structured logging.
    """

    http_status: int = 500

    def __init__(self, message: str = "", *, detail: dict | None = None) -> None:
        super().__init__(message)
        self.detail = detail or {}


# ── Client errors (4xx) ──────────────────────────────────────────────


class ValidationError(PlantCareError):
    """Caller supplied invalid or incomplete input (HTTP 400)."""

    http_status: int = 400


class InvalidScheduleConfiguration(ValidationError):
    """A schedule mode was requested without the fields it requires."""


class CannotSkipUnscheduled(ValidationError):
    """Only tasks with a due date can be skipped."""

    def __init__(self, message: str = "Cannot skip unscheduled task", **kwargs) -> None:
        super().__init__(message, **kwargs)


class FileError(PlantCareError):
    """Uploaded file is missing, too large, or not parseable (HTTP 400)."""

    http_status: int = 400


class AuthenticationError(PlantCareError):
    """No signed-in user for a request that needs one (HTTP 401)."""

    http_status: int = 401


class AccessDeniedError(PlantCareError):
    """User may not act on the requested plant or task (HTTP 403)."""

    http_status: int = 403


class NotFoundError(PlantCareError):
    """Requested entity does not exist (HTTP 404)."""

    http_status: int = 404


# ── Server errors (5xx) ──────────────────────────────────────────────


class ServiceError(PlantCareError):
    """Business-logic failure in a service method (HTTP 500)."""

    http_status: int = 500


class RepositoryError(ServiceError):
    """Database / persistence layer failure (HTTP 500)."""

    http_status: int = 500

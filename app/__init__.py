from __future__ import annotations

import logging
from typing import Any

from flask import Flask, request
from werkzeug.exceptions import HTTPException

from app.blueprints.api.plants import plants_api
from app.blueprints.api.tasks import tasks_api
from app.config import load_config, setup_logging


def create_app(config_overrides: dict[str, Any] | None = None) -> Flask:
    config = load_config()
    if config_overrides:
        for key, value in config_overrides.items():
            attr = key if hasattr(config, key) else key.lower()
            setattr(config, attr, value)

    # Configure logging early so container startup is visible in the terminal and log file.
    setup_logging(debug=config.DEBUG, level=config.log_level, log_path=config.log_path)

    flask_app = Flask(__name__)
    flask_app.config.update(config.as_flask_config())
    flask_app.config["SESSION_COOKIE_HTTPONLY"] = True
    flask_app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    flask_app.config["SESSION_COOKIE_SECURE"] = config.environment == "production"

    from app.services.container import ServiceContainer

    container = ServiceContainer.build(config)
    flask_app.config["CONTAINER"] = container
    flask_app.teardown_appcontext(container.database.close_db)

    # Global JSON error handler: domain exceptions carry their own
    # ``http_status``; anything else becomes a generic 500.
    @flask_app.errorhandler(Exception)
    def _handle_unhandled(exc):
        if not request.path.startswith("/api/"):
            if isinstance(exc, HTTPException):
                return exc
            raise exc
        from app.domain.exceptions import PlantCareError
        from app.utils.http import error_response, safe_error

        if isinstance(exc, HTTPException):
            status = int(exc.code or 500)
            if status >= 500:
                return safe_error(exc, status, context="http-exception")
            return error_response(exc.description or "Request failed", status)

        if isinstance(exc, PlantCareError):
            status = exc.http_status
            if status >= 500:
                return safe_error(exc, status, context=type(exc).__name__)
            return error_response(str(exc) or "Request failed", status)

        return safe_error(exc, 500, context="unhandled")

    @flask_app.errorhandler(413)
    def _handle_too_large(_exc):
        from app.utils.http import error_response

        max_mb = config.bulk_upload_max_bytes / (1024 * 1024)
        return error_response(f"File too large. Maximum size is {max_mb:g}MB.", 413)

    V1 = "/api/v1"
    flask_app.register_blueprint(plants_api, url_prefix=f"{V1}/plants")
    flask_app.register_blueprint(tasks_api, url_prefix=f"{V1}/tasks")

    for bp_name in flask_app.blueprints:
        logging.info("Registered blueprint: %s", bp_name)

    logger = logging.getLogger(__name__)
    logger.info("Houseplant care tracker initialized.")
    return flask_app


__all__ = ["create_app"]

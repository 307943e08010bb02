"""
Configuration for the Houseplant Care Tracker
=============================================
Main application runtime settings, read from ``PLANTCARE_*`` environment
variables. Sets up the logging configuration as well.
"""

import os
from contextlib import suppress
from dataclasses import dataclass, field
from typing import Any


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer.") from None


@dataclass
class AppConfig:
    """Runtime configuration loaded from environment variables."""

    environment: str = field(default_factory=lambda: os.getenv("PLANTCARE_ENV", "development"))
    secret_key: str = field(default_factory=lambda: os.getenv("PLANTCARE_SECRET_KEY", "PlantCareDevSecretKey"))
    database_path: str = field(default_factory=lambda: os.getenv("PLANTCARE_DATABASE_PATH", "database/plantcare.db"))

    DEBUG: bool = field(default_factory=lambda: _env_bool("PLANTCARE_DEBUG", False))
    log_level: str = field(default_factory=lambda: os.getenv("PLANTCARE_LOG_LEVEL", "INFO"))
    log_path: str = field(default_factory=lambda: os.getenv("PLANTCARE_LOG_PATH", "logs/plantcare.log"))
    audit_log_path: str = field(default_factory=lambda: os.getenv("PLANTCARE_AUDIT_LOG_PATH", "logs/audit.log"))

    # Bulk CSV upload limits
    bulk_upload_max_rows: int = field(default_factory=lambda: _env_int("PLANTCARE_BULK_UPLOAD_MAX_ROWS", 100))
    bulk_upload_max_bytes: int = field(
        default_factory=lambda: _env_int("PLANTCARE_BULK_UPLOAD_MAX_BYTES", 5 * 1024 * 1024)
    )

    upcoming_window_days: int = field(default_factory=lambda: _env_int("PLANTCARE_UPCOMING_WINDOW_DAYS", 7))

    # Default insecure secret key - used only for detection
    _DEFAULT_SECRET_KEY: str = field(default="PlantCareDevSecretKey", init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.environment == "production" and self.secret_key == self._DEFAULT_SECRET_KEY:
            raise RuntimeError(
                "SECURITY ERROR: Cannot use default secret key in production!\n"
                "Set PLANTCARE_SECRET_KEY environment variable to a secure random value."
            )
        if self.bulk_upload_max_rows < 1:
            raise ValueError("PLANTCARE_BULK_UPLOAD_MAX_ROWS must be at least 1.")
        if self.upcoming_window_days < 1:
            raise ValueError("PLANTCARE_UPCOMING_WINDOW_DAYS must be at least 1.")

    def as_flask_config(self) -> dict[str, Any]:
        """Render configuration values for Flask application."""
        return {
            "ENV": self.environment,
            "SECRET_KEY": self.secret_key,
            "DATABASE_PATH": self.database_path,
            "AUDIT_LOG_PATH": self.audit_log_path,
            "DEBUG": self.DEBUG,
            # Leave headroom over the CSV limit so the upload check reports the real size
            "MAX_CONTENT_LENGTH": self.bulk_upload_max_bytes * 2,
        }


def setup_logging(debug: bool = False, *, level: str = "INFO", log_path: str = "logs/plantcare.log") -> None:
    """Setup logging configuration."""
    import logging
    import sys
    from logging.handlers import RotatingFileHandler

    log_level = logging.DEBUG if debug else logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    root = logging.getLogger()
    root.setLevel(log_level)

    # Avoid adding duplicates when create_app is called multiple times
    has_console = any(getattr(h, "name", "") == "plantcare_console" for h in root.handlers)
    has_file = any(getattr(h, "name", "") == "plantcare_file" for h in root.handlers)
    added_handler = False

    stream = sys.stdout
    with suppress(AttributeError, ValueError):
        stream.reconfigure(encoding="utf-8", errors="replace")
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if not has_console:
        console_handler = logging.StreamHandler(stream=stream)
        console_handler.name = "plantcare_console"
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)
        added_handler = True

    if not has_file:
        log_dir = os.path.dirname(log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.name = "plantcare_file"
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        added_handler = True

    for handler in root.handlers:
        if getattr(handler, "name", "") in {"plantcare_console", "plantcare_file"}:
            handler.setLevel(log_level)

    if added_handler:
        root.info("Logging initialized at level: %s", logging.getLevelName(log_level))

    if _env_bool("PLANTCARE_SILENCE_WERKZEUG", True):
        logging.getLogger("werkzeug").setLevel(logging.WARNING)


def load_config() -> AppConfig:
    """Helper for callers to load and validate configuration."""
    return AppConfig()

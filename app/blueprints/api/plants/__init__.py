"""
Plants API Module
=================

- crud.py: Plant creation (with default task seeding), listing and lookup
- bulk.py: CSV bulk upload and template download
"""

from flask import Blueprint

from app.utils.http import register_error_handlers

# Create blueprint here to avoid circular imports
plants_api = Blueprint("plants_api", __name__)
register_error_handlers(plants_api)

# Import submodules to register routes (must be after blueprint creation)
from . import bulk, crud  # noqa: E402

__all__ = ["plants_api"]

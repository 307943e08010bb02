"""
Care Tasks API Module
=====================

- routes.py: Task lifecycle (create, edit, complete, skip, convert, assign,
  delete) and the upcoming / overdue / assigned / history views
"""

from flask import Blueprint

from app.utils.http import register_error_handlers

tasks_api = Blueprint("tasks_api", __name__)
register_error_handlers(tasks_api)

from . import routes  # noqa: E402

__all__ = ["tasks_api"]

"""
Care Task Endpoints
===================

All endpoints act for the signed-in user and require access to the task's
plant (owner or plant group member).
"""

from __future__ import annotations

import logging
from typing import Type, TypeVar

from flask import Response, request
from pydantic import BaseModel, ValidationError

from app.blueprints.api._common import (
    fail as _fail,
    get_care_task_service as _task_service,
    get_json as _get_json,
    require_user_id as _require_user_id,
    success as _success,
)
from app.schemas import (
    AssignCareTaskRequest,
    BulkCompleteRequest,
    CompleteCareTaskRequest,
    CreateCareTaskRequest,
    SkipCareTaskRequest,
    UpdateCareTaskRequest,
    UpdateDueDateRequest,
)
from app.utils.http import safe_route, validation_error_response

from . import tasks_api

logger = logging.getLogger("tasks_api.routes")

_Body = TypeVar("_Body", bound=BaseModel)


def _parse(schema: Type[_Body]) -> _Body | Response:
    try:
        return schema(**_get_json())
    except ValidationError as ve:
        return validation_error_response(ve)


# ============================================================================
# CREATE / LIST
# ============================================================================


@tasks_api.post("")
@safe_route("Failed to create task")
def create_task() -> Response:
    user_id = _require_user_id()
    body = _parse(CreateCareTaskRequest)
    if isinstance(body, Response):
        return body

    kwargs = {}
    if "assigned_user_id" in body.model_fields_set:
        kwargs["assigned_user_id"] = body.assigned_user_id

    task = _task_service().create_task(
        user_id,
        plant_id=body.plant_id,
        task_type=body.type,
        title=body.title,
        description=body.description,
        schedule_mode=body.schedule_mode,
        recurrence_pattern=body.recurrence_pattern.to_pattern_dict() if body.recurrence_pattern else None,
        due_date=body.due_date,
        start_date=body.start_date,
        **kwargs,
    )
    return _success(task.to_dict(), 201)


@tasks_api.get("/plant/<int:plant_id>")
@safe_route("Failed to list plant tasks")
def list_plant_tasks(plant_id: int) -> Response:
    """Tasks for one plant with their recent completions"""
    user_id = _require_user_id()
    tasks = _task_service().get_plant_tasks(plant_id, user_id)
    return _success({"tasks": tasks, "count": len(tasks)})


@tasks_api.get("/upcoming")
@safe_route("Failed to get upcoming tasks")
def upcoming_tasks() -> Response:
    """Tasks due in the next ``?days=`` days (default from config)"""
    user_id = _require_user_id()
    days = request.args.get("days", type=int)
    if days is not None and days < 1:
        return _fail("days must be at least 1", 400)
    tasks = _task_service().get_upcoming_tasks(
        user_id, days_ahead=days, species_type=request.args.get("species_type")
    )
    return _success({"tasks": tasks, "count": len(tasks)})


@tasks_api.get("/overdue")
@safe_route("Failed to get overdue tasks")
def overdue_tasks() -> Response:
    user_id = _require_user_id()
    tasks = _task_service().get_overdue_tasks(user_id, species_type=request.args.get("species_type"))
    return _success({"tasks": tasks, "count": len(tasks)})


@tasks_api.get("/assigned")
@safe_route("Failed to get assigned tasks")
def assigned_tasks() -> Response:
    user_id = _require_user_id()
    tasks = _task_service().get_assigned_tasks(user_id)
    return _success({"tasks": tasks, "count": len(tasks)})


@tasks_api.get("/defaults/<task_type>")
@safe_route("Failed to get task defaults")
def task_defaults(task_type: str) -> Response:
    """Default cadence and title; unknown types fall back to custom"""
    return _success(_task_service().get_task_defaults(task_type).to_dict())


@tasks_api.get("/<int:task_id>/history")
@safe_route("Failed to get task history")
def task_history(task_id: int) -> Response:
    user_id = _require_user_id()
    return _success(_task_service().get_task_history(task_id, user_id))


# ============================================================================
# EDIT / DELETE
# ============================================================================


@tasks_api.patch("/<int:task_id>")
@safe_route("Failed to update task")
def update_task(task_id: int) -> Response:
    user_id = _require_user_id()
    body = _parse(UpdateCareTaskRequest)
    if isinstance(body, Response):
        return body

    kwargs = {}
    if "assigned_user_id" in body.model_fields_set:
        kwargs["assigned_user_id"] = body.assigned_user_id

    task = _task_service().update_task(
        task_id,
        user_id,
        title=body.title,
        description=body.description,
        schedule_mode=body.schedule_mode,
        recurrence_pattern=body.recurrence_pattern.to_pattern_dict() if body.recurrence_pattern else None,
        due_date=body.due_date,
        **kwargs,
    )
    return _success(task.to_dict())


@tasks_api.delete("/<int:task_id>")
@safe_route("Failed to delete task")
def delete_task(task_id: int) -> Response:
    user_id = _require_user_id()
    _task_service().delete_task(task_id, user_id)
    return _success({"task_id": task_id}, message="Task deleted")


@tasks_api.post("/<int:task_id>/convert-to-unscheduled")
@safe_route("Failed to convert task")
def convert_to_unscheduled(task_id: int) -> Response:
    user_id = _require_user_id()
    task = _task_service().convert_to_unscheduled(task_id, user_id)
    return _success(task.to_dict())


@tasks_api.put("/<int:task_id>/due-date")
@safe_route("Failed to update due date")
def update_due_date(task_id: int) -> Response:
    user_id = _require_user_id()
    body = _parse(UpdateDueDateRequest)
    if isinstance(body, Response):
        return body
    task = _task_service().update_due_date(task_id, user_id, body.due_date)
    return _success(task.to_dict())


@tasks_api.put("/<int:task_id>/assign")
@safe_route("Failed to assign task")
def assign_task(task_id: int) -> Response:
    user_id = _require_user_id()
    body = _parse(AssignCareTaskRequest)
    if isinstance(body, Response):
        return body
    task = _task_service().assign_task(task_id, user_id, body.assigned_user_id)
    return _success(task.to_dict())


# ============================================================================
# COMPLETE / SKIP
# ============================================================================


@tasks_api.post("/<int:task_id>/complete")
@safe_route("Failed to complete task")
def complete_task(task_id: int) -> Response:
    """Complete a task; one-time tasks are removed and return ``task: null``"""
    user_id = _require_user_id()
    body = _parse(CompleteCareTaskRequest)
    if isinstance(body, Response):
        return body
    task = _task_service().complete_task(task_id, user_id, body.notes)
    return _success({"task": task.to_dict() if task else None, "removed": task is None})


@tasks_api.post("/<int:task_id>/skip")
@safe_route("Failed to skip task")
def skip_task(task_id: int) -> Response:
    user_id = _require_user_id()
    body = _parse(SkipCareTaskRequest)
    if isinstance(body, Response):
        return body
    task = _task_service().skip_task(task_id, user_id, body.days)
    return _success(task.to_dict())


@tasks_api.post("/bulk-complete")
@safe_route("Failed to complete tasks")
def bulk_complete() -> Response:
    user_id = _require_user_id()
    body = _parse(BulkCompleteRequest)
    if isinstance(body, Response):
        return body
    results = _task_service().bulk_complete(body.task_ids, user_id, body.notes)
    logger.info("Bulk completed %s tasks for user %s (%s failed)", results["completed"], user_id, results["failed"])
    return _success(results)

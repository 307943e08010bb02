"""
Plant Bulk Upload
=================

CSV upload (multipart field ``file``) and template download.
"""

from __future__ import annotations

import logging

from flask import Response, request

from app.blueprints.api._common import (
    fail as _fail,
    get_bulk_import_service as _bulk_import_service,
    require_user_id as _require_user_id,
    success as _success,
)
from app.domain.exceptions import FileError
from app.utils.http import csv_attachment, safe_route
from app.utils.plant_csv import generate_plant_csv_template, template_filename

from . import plants_api

logger = logging.getLogger("plants_api.bulk")


@plants_api.post("/bulk-upload")
@safe_route("Failed to process bulk upload")
def bulk_upload() -> Response:
    """Import plants from an uploaded CSV file"""
    user_id = _require_user_id()

    upload = request.files.get("file")
    if upload is None or not upload.filename:
        raise FileError("No file provided")

    result = _bulk_import_service().import_csv(upload.read(), upload.filename, user_id)
    payload = result.to_dict()
    if not result.success:
        message = result.errors[0].message if result.errors else "Bulk upload failed"
        return _fail(message, 400, details={"result": payload})
    return _success(payload)


@plants_api.get("/bulk-upload/template")
@safe_route("Failed to generate template")
def download_template() -> Response:
    """CSV template; ``?simple=true`` drops the label row"""
    simple = request.args.get("simple", "false").lower() in {"1", "true", "yes"}
    return csv_attachment(generate_plant_csv_template(simple=simple), template_filename())

"""
Plant CSV Utilities
===================

Parsing and validation of bulk plant uploads, plus the downloadable error
report and upload templates.

Usage:
    from app.utils.plant_csv import parse_plant_csv, generate_error_csv

    result = parse_plant_csv(file.read(), file.filename)
    if not result.success:
        return fail(result.error)
"""

from __future__ import annotations

import csv
import io
import logging
import re
from typing import Iterable

from pydantic import ValidationError

from app.constants import (
    CSV_EXAMPLE_ROW,
    CSV_HEADER_ALIASES,
    CSV_HEADER_LABELS,
    CSV_HEADERS,
    BulkUpload,
)
from app.domain.bulk_import import CSVParseResult, FieldError, InvalidRow, ParsedRow, ValidRow
from app.schemas.bulk_import import BulkPlantRow
from app.utils.time import utc_now

logger = logging.getLogger(__name__)

_HEADER_SEPARATORS = re.compile(r"[*\s]+")

ERROR_CSV_PREFIX: tuple[str, ...] = ("Row", "Error Field", "Error Message")


def normalize_header(header: str) -> str:
    """Trim, lowercase, collapse spaces/asterisks to ``_`` and apply aliases."""
    normalized = _HEADER_SEPARATORS.sub("_", header.strip().lower()).strip("_")
    return CSV_HEADER_ALIASES.get(normalized, normalized)


def check_upload(filename: str, size: int, max_bytes: int = BulkUpload.MAX_FILE_BYTES) -> str | None:
    """Return a user-facing error for an unacceptable upload, else None."""
    if not filename or not filename.endswith(".csv"):
        return "Invalid file type. Please upload a CSV file (.csv extension required)."
    if size > max_bytes:
        return (
            f"File too large. Maximum size is {max_bytes / 1024 / 1024:.0f}MB. "
            f"Your file is {size / 1024 / 1024:.2f}MB."
        )
    if size == 0:
        return "File is empty. Please upload a valid CSV file."
    return None


def validate_row(row_number: int, raw: dict[str, str]) -> ParsedRow:
    """Parse one raw CSV row into a ValidRow or an InvalidRow."""
    try:
        record = BulkPlantRow.model_validate(raw)
    except ValidationError as exc:
        errors = tuple(
            FieldError(
                field=".".join(str(part) for part in err["loc"]) or "general",
                message=err["msg"],
            )
            for err in exc.errors()
        )
        return InvalidRow(row=row_number, data=raw, errors=errors)
    return ValidRow(row=row_number, data=raw, record=record)


def _read_rows(text: str) -> list[dict[str, str]]:
    reader = csv.reader(io.StringIO(text))
    try:
        header_row = next(reader)
    except StopIteration:
        return []
    headers = [normalize_header(h) for h in header_row]

    rows: list[dict[str, str]] = []
    for values in reader:
        if not values or all(not v.strip() for v in values):
            continue
        raw = {h: (values[i] if i < len(values) else "") for i, h in enumerate(headers) if h}
        rows.append(raw)
    return rows


def parse_plant_csv(
    content: bytes,
    filename: str,
    max_rows: int = BulkUpload.MAX_ROWS,
    *,
    max_bytes: int = BulkUpload.MAX_FILE_BYTES,
) -> CSVParseResult:
    """
    Parse and validate an uploaded plant CSV.

    Args:
        content: Raw file bytes
        filename: Client-supplied filename (must end in .csv)
        max_rows: Rows beyond this are ignored
        max_bytes: Size limit for the upload

    Returns:
        CSVParseResult. Rows are numbered from 1, excluding the header.
    """
    problem = check_upload(filename, len(content), max_bytes)
    if problem:
        return CSVParseResult.failure(problem)

    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        logger.warning("Rejected non UTF-8 upload %s: %s", filename, exc)
        return CSVParseResult.failure("CSV parsing error: file is not valid UTF-8 text")

    try:
        raw_rows = _read_rows(text)
    except csv.Error as exc:
        logger.warning("Malformed CSV upload %s: %s", filename, exc)
        return CSVParseResult.failure(f"CSV parsing error: {exc}")

    if len(raw_rows) > max_rows:
        logger.info("Truncating upload %s from %s to %s rows", filename, len(raw_rows), max_rows)

    rows = [validate_row(index + 1, raw) for index, raw in enumerate(raw_rows[:max_rows])]
    result = CSVParseResult(success=True, rows=rows)
    logger.debug(
        "Parsed %s: %s rows, %s valid, %s invalid",
        filename,
        result.total_rows,
        len(result.valid_rows),
        len(result.invalid_rows),
    )
    return result


def generate_error_csv(rows: Iterable[InvalidRow]) -> str:
    """One line per field error: row number, field, message, then the row's values."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow([*ERROR_CSV_PREFIX, *CSV_HEADERS])

    for row in rows:
        values = [row.data.get(h) or "" for h in CSV_HEADERS]
        for error in row.errors:
            writer.writerow([str(row.row), error.field, error.message, *values])

    return output.getvalue().rstrip("\n")


def generate_plant_csv_template(simple: bool = False) -> str:
    """
    Build the downloadable upload template.

    The full template has a human-readable label row, the field-name row
    the parser expects, and one example row. The simple template drops the
    label row.
    """
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    if not simple:
        writer.writerow([CSV_HEADER_LABELS[h] for h in CSV_HEADERS])
    writer.writerow(CSV_HEADERS)
    writer.writerow([CSV_EXAMPLE_ROW.get(h, "") for h in CSV_HEADERS])
    return output.getvalue().rstrip("\n")


def template_filename() -> str:
    return f"plant-upload-template-{utc_now().date().isoformat()}.csv"

"""
SQL Safety Utilities
====================

Column names taken from a dict (an update patch, a mapped CSV row) are
interpolated into SQL text, so they are filtered against an explicit
allowlist first. Values always go through ``?`` placeholders.

Usage::

    from infrastructure.database.sql_safety import safe_columns

    cols = safe_columns(patch, ALLOWED, context="update_plant_fields")
    set_clause, values = build_set_clause(cols)
    db.execute(f"UPDATE Plants SET {set_clause} WHERE plant_id = ?", [*values, pid])
"""

from __future__ import annotations

import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def safe_columns(
    data: dict[str, Any],
    allowed: frozenset[str] | set[str],
    *,
    context: str = "",
) -> dict[str, Any]:
    """Return a copy of *data* holding only allowlisted identifier keys.

    Dropped keys are logged at WARNING with *context* as the label.
    """
    filtered: dict[str, Any] = {}
    rejected: list[str] = []

    for key, value in data.items():
        if key in allowed and _IDENT_RE.match(key):
            filtered[key] = value
        else:
            rejected.append(key)

    if rejected:
        logger.warning("safe_columns(%s): dropped non-allowed keys: %s", context or "?", rejected)

    return filtered


def build_set_clause(cols: dict[str, Any]) -> tuple[str, list[Any]]:
    """Build a ``col1 = ?, col2 = ?`` fragment and its values from *cols*.

    >>> build_set_clause({"name": "Fern", "location": "Hall"})
    ('name = ?, location = ?', ['Fern', 'Hall'])
    """
    clause = ", ".join(f"{k} = ?" for k in cols)
    return clause, list(cols.values())

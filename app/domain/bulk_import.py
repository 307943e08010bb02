"""
Bulk Import Value Objects
=========================

Parse results for CSV uploads and the outcome of reconciling them
against a user's existing plants.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Union

if TYPE_CHECKING:
    from app.domain.plants import Plant
    from app.schemas.bulk_import import BulkPlantRow


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class ValidRow:
    """A CSV row that passed validation. ``row`` is 1-based."""

    row: int
    data: dict[str, str]
    record: "BulkPlantRow"

    is_valid: ClassVar[bool] = True


@dataclass(frozen=True)
class InvalidRow:
    """A CSV row rejected by validation, with every field error found."""

    row: int
    data: dict[str, str]
    errors: tuple[FieldError, ...]

    is_valid: ClassVar[bool] = False


ParsedRow = Union[ValidRow, InvalidRow]


@dataclass
class CSVParseResult:
    """
    Outcome of parsing an uploaded CSV file.

    A file-level failure (wrong extension, empty, too large, unreadable)
    sets ``success`` False with ``error``; per-row problems live in
    ``rows`` as InvalidRow entries.
    """

    success: bool
    rows: list[ParsedRow] = field(default_factory=list)
    error: str | None = None

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    @property
    def valid_rows(self) -> list[ValidRow]:
        return [r for r in self.rows if isinstance(r, ValidRow)]

    @property
    def invalid_rows(self) -> list[InvalidRow]:
        return [r for r in self.rows if isinstance(r, InvalidRow)]

    @classmethod
    def failure(cls, error: str) -> "CSVParseResult":
        return cls(success=False, error=error)


@dataclass(frozen=True)
class BulkUploadError:
    row: int
    message: str
    field: str | None = None
    data: dict[str, str] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"row": self.row, "message": self.message}
        if self.field is not None:
            payload["field"] = self.field
        if self.data is not None:
            payload["data"] = self.data
        return payload


@dataclass
class BulkUploadStats:
    total_rows: int = 0
    successful_inserts: int = 0
    updated_plants: int = 0
    duplicates_skipped: int = 0
    failed_rows: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total_rows": self.total_rows,
            "successful_inserts": self.successful_inserts,
            "updated_plants": self.updated_plants,
            "duplicates_skipped": self.duplicates_skipped,
            "failed_rows": self.failed_rows,
        }


@dataclass
class BulkUploadResult:
    success: bool
    stats: BulkUploadStats | None = None
    errors: list[BulkUploadError] = field(default_factory=list)
    inserted_plants: list["Plant"] = field(default_factory=list)
    updated_plants: list["Plant"] = field(default_factory=list)
    error_csv: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "stats": self.stats.to_dict() if self.stats else None,
            "errors": [e.to_dict() for e in self.errors],
            "inserted_plants": [p.to_dict() for p in self.inserted_plants],
            "updated_plants": [p.to_dict() for p in self.updated_plants],
            "error_csv": self.error_csv,
        }

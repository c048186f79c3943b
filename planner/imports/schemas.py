"""Pydantic schemas for drill import."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class BatchPolicy(str, Enum):
    """How accepted drills are written at the end of an import.

    ATOMIC: one insert for the whole batch; all rows succeed or all are errors.
    PER_ROW: chunked inserts, falling back to one row at a time when a chunk
        fails, so only the failing rows are reported.
    """

    ATOMIC = "atomic"
    PER_ROW = "per_row"


class TemplateFormat(str, Enum):
    """Download formats for the import template."""

    CSV = "csv"
    XLSX = "xlsx"


class RowError(BaseModel):
    """A failure tied to one input row.

    Attributes:
        row: 1-based row number in the uploaded file.
        error: Human-readable reason.
    """

    row: int
    error: str


class ImportResult(BaseModel):
    """Outcome of an import run.

    Every input row is counted exactly once in ``imported``, ``skipped`` or
    ``errors``.

    Attributes:
        success: True when no row failed.
        total_rows: Number of rows in the input.
        imported: Rows persisted as new drills.
        skipped: Rows skipped as duplicates.
        errors: Row errors in row order.
        message: Summary for display.
        categories_created: Names of categories created during the run.
    """

    success: bool
    total_rows: int
    imported: int = 0
    skipped: int = 0
    errors: list[RowError] = Field(default_factory=list)
    message: str | None = None
    categories_created: list[str] = Field(default_factory=list)


class CandidateRow(BaseModel):
    """A normalized row as shown in the import preview."""

    row: int
    category: str
    name: str
    minutes: int = 0
    notes: str | None = None
    media_links: str | None = None


class ImportPreview(BaseModel):
    """Preview of an uploaded file before anything is written.

    Attributes:
        total_rows: Number of data rows in the file.
        valid_rows: Rows that would be imported.
        invalid_rows: Rows failing validation.
        duplicate_rows: Rows that would be skipped as duplicates.
        rows: Normalized rows that would be imported.
        errors: Validation errors.
        duplicates: Duplicate rows with the reason.
    """

    total_rows: int = 0
    valid_rows: int = 0
    invalid_rows: int = 0
    duplicate_rows: int = 0
    rows: list[CandidateRow] = Field(default_factory=list)
    errors: list[RowError] = Field(default_factory=list)
    duplicates: list[RowError] = Field(default_factory=list)


class ImportConfirmRequest(BaseModel):
    """Request body for importing already-reviewed rows.

    Attributes:
        rows: Row dicts keyed by column name (category, name, minutes, notes,
            media links). Row numbers in the result follow list order.
        batch_policy: Overrides the configured batch policy.
    """

    rows: list[dict[str, Any]] = Field(..., min_length=1)
    batch_policy: BatchPolicy | None = None

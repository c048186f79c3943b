"""Row normalization for drill import.

Turns one raw spreadsheet row (a dict keyed by header text) into either a
``CandidateDrill`` or a ``RowError``. Pure functions, no database access.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from planner.imports.schemas import RowError

# Expected column names (case-insensitive, surrounding whitespace ignored)
COLUMN_MAPPINGS: dict[str, list[str]] = {
    "category": ["category", "drill category"],
    "name": ["name", "drill", "drill name"],
    "minutes": ["minutes", "minute", "mins", "min", "duration"],
    "notes": ["notes", "note", "description"],
    "media_links": ["media links", "media_links", "media link", "media", "links"],
}

MISSING_BOTH = "Category and name are required"
MISSING_CATEGORY = "Category is required"
MISSING_NAME = "Name is required"
INVALID_MINUTES = "Minutes must be a non-negative number"

# Characters that show up when UTF-8 text was decoded as Windows-1252
_MOJIBAKE_MARKERS = ("Ã", "Â", "â")


@dataclass
class CandidateDrill:
    """A validated drill that has not been persisted yet.

    Attributes:
        row: 1-based row number in the input.
        category_name: Trimmed category name, original casing.
        name: Trimmed drill name, original casing.
        minutes: Duration in minutes.
        notes: Trimmed notes or None.
        media_links: Trimmed media links or None.
    """

    row: int
    category_name: str
    name: str
    minutes: int = 0
    notes: str | None = None
    media_links: str | None = None


def normalize_column_name(col: Any) -> str | None:
    """Normalize a column name to a standard field name.

    Args:
        col: Column name from the file.

    Returns:
        str | None: Field name or None if not recognized.
    """
    if col is None:
        return None
    col_lower = str(col).lower().strip()
    for field, aliases in COLUMN_MAPPINGS.items():
        if col_lower in aliases:
            return field
    return None


def map_columns(row: Mapping[Any, Any]) -> dict[str, Any]:
    """Re-key a raw row by field name, dropping unrecognized columns.

    When two headers map to the same field the first non-empty value wins.

    Args:
        row: Raw row keyed by header text.

    Returns:
        dict: Values keyed by field name.
    """
    mapped: dict[str, Any] = {}
    for col, value in row.items():
        field = normalize_column_name(col)
        if field is None:
            continue
        if mapped.get(field) in (None, ""):
            mapped[field] = value
    return mapped


def fix_encoding(text: str) -> str:
    """Repair text that was UTF-8 encoded but decoded as Windows-1252.

    Legacy spreadsheet exports turn "—" into "â€”" and "é" into "Ã©". Strings
    without such artifacts, or that don't round-trip, are returned unchanged.

    Args:
        text: Possibly garbled text.

    Returns:
        str: Repaired text.
    """
    if not any(marker in text for marker in _MOJIBAKE_MARKERS):
        return text
    try:
        return text.encode("cp1252").decode("utf-8")
    except UnicodeError:
        return text


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def clean_text(value: Any) -> str | None:
    """Convert a cell to trimmed text, mapping empty cells to None.

    Args:
        value: Cell value (str, number or None).

    Returns:
        str | None: Trimmed text or None.
    """
    if _is_missing(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = fix_encoding(str(value)).strip()
    return text or None


def parse_minutes(value: Any) -> int:
    """Parse a minutes cell.

    Absent or blank cells mean 0. Strings must hold a decimal number;
    fractional minutes are truncated.

    Args:
        value: Cell value.

    Returns:
        int: Minutes.

    Raises:
        ValueError: If the value is not a finite, non-negative number.
    """
    if _is_missing(value):
        return 0
    if isinstance(value, bool):
        raise ValueError(INVALID_MINUTES)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            number = float(text)
        except ValueError:
            raise ValueError(INVALID_MINUTES) from None
    elif isinstance(value, (int, float)):
        number = value
    else:
        raise ValueError(INVALID_MINUTES)

    if isinstance(number, float) and not math.isfinite(number):
        raise ValueError(INVALID_MINUTES)
    if number < 0:
        raise ValueError(INVALID_MINUTES)
    return int(number)


def normalize_row(raw_row: Mapping[Any, Any], row_number: int) -> CandidateDrill | RowError:
    """Validate and normalize one raw row.

    Args:
        raw_row: Row keyed by header text.
        row_number: 1-based row number for error reporting.

    Returns:
        CandidateDrill | RowError: Normalized drill or the reason it was rejected.
    """
    row = map_columns(raw_row)
    category = clean_text(row.get("category"))
    name = clean_text(row.get("name"))

    if not category and not name:
        return RowError(row=row_number, error=MISSING_BOTH)
    if not category:
        return RowError(row=row_number, error=MISSING_CATEGORY)
    if not name:
        return RowError(row=row_number, error=MISSING_NAME)

    try:
        minutes = parse_minutes(row.get("minutes"))
    except ValueError as e:
        return RowError(row=row_number, error=str(e))

    return CandidateDrill(
        row=row_number,
        category_name=category,
        name=name,
        minutes=minutes,
        notes=clean_text(row.get("notes")),
        media_links=clean_text(row.get("media_links")),
    )


def normalize_rows(rows: list[Mapping[Any, Any]]) -> list[CandidateDrill | RowError]:
    """Normalize every row, numbering them from 1 in input order.

    Args:
        rows: Raw rows.

    Returns:
        list: One CandidateDrill or RowError per input row.
    """
    return [normalize_row(row, index) for index, row in enumerate(rows, start=1)]

"""Imports module for CSV/Excel drill import."""

from planner.imports.categories import CategoryResolver
from planner.imports.duplicates import DuplicateFilter, name_key
from planner.imports.exceptions import (
    CategoryResolutionError,
    ImportAbortedError,
    SpreadsheetParseError,
    UnsupportedFileError,
)
from planner.imports.normalizer import CandidateDrill, normalize_row, normalize_rows
from planner.imports.parsers import (
    generate_template,
    parse_csv_rows,
    parse_excel_rows,
    parse_upload,
)
from planner.imports.router import router
from planner.imports.schemas import (
    BatchPolicy,
    ImportConfirmRequest,
    ImportPreview,
    ImportResult,
    RowError,
)
from planner.imports.service import DrillImportService, get_import_service

__all__ = [
    "router",
    "DrillImportService",
    "get_import_service",
    "CategoryResolver",
    "DuplicateFilter",
    "name_key",
    "CandidateDrill",
    "normalize_row",
    "normalize_rows",
    "parse_csv_rows",
    "parse_excel_rows",
    "parse_upload",
    "generate_template",
    "BatchPolicy",
    "ImportConfirmRequest",
    "ImportPreview",
    "ImportResult",
    "RowError",
    # Exceptions
    "CategoryResolutionError",
    "ImportAbortedError",
    "SpreadsheetParseError",
    "UnsupportedFileError",
]

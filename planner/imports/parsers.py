"""CSV and Excel parsing utilities for drill import."""

import csv
import io
from typing import Any

import pandas as pd

from planner.imports.exceptions import SpreadsheetParseError, UnsupportedFileError
from planner.imports.schemas import TemplateFormat

TEMPLATE_COLUMNS = ["Category", "Name", "Minutes", "Notes", "Media Links"]

TEMPLATE_EXAMPLE_ROWS = [
    ["Ball Handling", "Cone Weave", 10, "Weave through 6 cones, both hands", ""],
    ["Shooting", "Form Shooting", 15, "Close range, one hand", "https://youtu.be/example"],
    ["Conditioning", "Suicides", 5, "", ""],
]

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _is_blank(row: dict[str, Any]) -> bool:
    return all(
        value is None or (isinstance(value, str) and not value.strip()) for value in row.values()
    )


def _decode_csv(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")  # Handle BOM
    except UnicodeDecodeError:
        pass
    # Older spreadsheet exports are Windows-1252
    try:
        return content.decode("cp1252")
    except UnicodeDecodeError as e:
        raise SpreadsheetParseError("Could not decode CSV file; save it as UTF-8") from e


def parse_csv_rows(content: bytes) -> list[dict[str, Any]]:
    """Parse CSV content into raw row dictionaries.

    Header names are trimmed and blank lines are dropped; cell values are
    left as text for the normalizer.

    Args:
        content: Raw file bytes.

    Returns:
        list[dict]: Rows in file order.

    Raises:
        SpreadsheetParseError: If the content is not readable CSV.
    """
    text = _decode_csv(content)
    try:
        reader = csv.DictReader(io.StringIO(text))
        rows = []
        for raw in reader:
            row = {
                (key or "").strip(): value
                for key, value in raw.items()
                if key is not None
            }
            if not _is_blank(row):
                rows.append(row)
    except csv.Error as e:
        raise SpreadsheetParseError(f"Could not read CSV file: {e}") from e
    return rows


def parse_excel_rows(content: bytes) -> list[dict[str, Any]]:
    """Parse the first sheet of an .xlsx workbook into raw row dictionaries.

    Args:
        content: Raw file bytes.

    Returns:
        list[dict]: Rows in sheet order, empty cells as None.

    Raises:
        SpreadsheetParseError: If the workbook cannot be read.
    """
    try:
        df = pd.read_excel(io.BytesIO(content), engine="openpyxl", dtype=object)
    except Exception as e:
        raise SpreadsheetParseError(f"Could not read Excel file: {e}") from e

    columns = [str(c).strip() for c in df.columns]

    # Convert to list of dicts, handling NaN values
    rows = []
    for values in df.itertuples(index=False, name=None):
        row_dict = {}
        for col, value in zip(columns, values):
            if pd.isna(value):
                row_dict[col] = None
            elif isinstance(value, str):
                row_dict[col] = value.strip()
            else:
                row_dict[col] = value
        if not _is_blank(row_dict):
            rows.append(row_dict)
    return rows


def parse_upload(filename: str, content: bytes) -> list[dict[str, Any]]:
    """Parse an uploaded spreadsheet by its file extension.

    Args:
        filename: Original file name.
        content: Raw file bytes.

    Returns:
        list[dict]: Raw rows in file order.

    Raises:
        UnsupportedFileError: If the file is not .csv or .xlsx.
        SpreadsheetParseError: If the content cannot be decoded.
    """
    name = (filename or "").lower()
    if name.endswith(".csv"):
        return parse_csv_rows(content)
    if name.endswith(".xlsx"):
        return parse_excel_rows(content)
    if name.endswith(".xls"):
        raise UnsupportedFileError(
            "Legacy .xls files are not supported. Re-save the file as .xlsx or .csv"
        )
    raise UnsupportedFileError("Unsupported file format. Use CSV or Excel (.xlsx)")


def generate_template(fmt: TemplateFormat = TemplateFormat.CSV) -> bytes:
    """Generate an import template with example rows.

    Args:
        fmt: Output format.

    Returns:
        bytes: File content.
    """
    if fmt == TemplateFormat.XLSX:
        df = pd.DataFrame(TEMPLATE_EXAMPLE_ROWS, columns=TEMPLATE_COLUMNS)
        output = io.BytesIO()
        df.to_excel(output, index=False, sheet_name="Drills", engine="openpyxl")
        return output.getvalue()

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(TEMPLATE_COLUMNS)
    for row in TEMPLATE_EXAMPLE_ROWS:
        writer.writerow(row)
    return output.getvalue().encode("utf-8")

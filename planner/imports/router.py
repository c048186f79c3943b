"""Drill import API routes."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from planner.config import Settings, get_settings
from planner.dependencies import CurrentUserId, get_db
from planner.imports.exceptions import (
    ImportAbortedError,
    SpreadsheetParseError,
    UnsupportedFileError,
)
from planner.imports.parsers import XLSX_CONTENT_TYPE, generate_template, parse_upload
from planner.imports.schemas import (
    BatchPolicy,
    ImportConfirmRequest,
    ImportPreview,
    ImportResult,
    TemplateFormat,
)
from planner.imports.service import DrillImportService, get_import_service

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_upload(file: UploadFile, max_bytes: int) -> list[dict[str, Any]]:
    """Read and parse an uploaded spreadsheet.

    Args:
        file: Uploaded file.
        max_bytes: Size limit.

    Returns:
        list[dict]: Raw rows in file order.

    Raises:
        HTTPException: 400 for unsupported or oversized files, 422 when the
            file cannot be decoded or holds no data rows.
    """
    content = await file.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File is too large (limit {max_bytes // (1024 * 1024)} MB)",
        )

    try:
        rows = parse_upload(file.filename or "", content)
    except UnsupportedFileError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except SpreadsheetParseError as e:
        logger.info("Rejected unreadable upload %r: %s", file.filename, e)
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    if not rows:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="No data rows in file",
        )
    return rows


def _build_service(
    db: Session,
    user_id: str,
    settings: Settings,
    policy: BatchPolicy | None = None,
) -> DrillImportService:
    return get_import_service(
        db,
        user_id,
        policy=policy or BatchPolicy(settings.import_batch_policy),
        chunk_size=settings.import_chunk_size,
    )


def _run_import(service: DrillImportService, rows: list[dict[str, Any]]) -> ImportResult:
    try:
        return service.run(rows)
    except ImportAbortedError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


@router.get("/template")
async def download_template(
    fmt: TemplateFormat = Query(TemplateFormat.CSV, alias="format", description="csv or xlsx"),
):
    """Download the drill import template.

    Args:
        fmt: Template file format.

    Returns:
        Response: Template file.
    """
    content = generate_template(fmt)
    media_type = "text/csv" if fmt == TemplateFormat.CSV else XLSX_CONTENT_TYPE
    filename = f"drill_import_template.{fmt.value}"

    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.post("/preview", response_model=ImportPreview)
async def preview_import(
    file: Annotated[UploadFile, File(description="CSV or Excel file")],
    db: Annotated[Session, Depends(get_db)],
    user_id: CurrentUserId,
    settings: Annotated[Settings, Depends(get_settings)],
) -> ImportPreview:
    """Preview an import file without writing anything.

    Args:
        file: Uploaded CSV or Excel file.
        db: Database session.
        user_id: Current user ID.
        settings: Application settings.

    Returns:
        ImportPreview: Rows that would be imported, errors and duplicates.
    """
    rows = await _read_upload(file, settings.max_upload_bytes)
    service = _build_service(db, user_id, settings)
    try:
        return service.preview(rows)
    except ImportAbortedError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


@router.post("/confirm", response_model=ImportResult)
async def confirm_import(
    data: ImportConfirmRequest,
    db: Annotated[Session, Depends(get_db)],
    user_id: CurrentUserId,
    settings: Annotated[Settings, Depends(get_settings)],
) -> ImportResult:
    """Import rows that were already reviewed in a preview.

    Args:
        data: Rows and optional batch policy.
        db: Database session.
        user_id: Current user ID.
        settings: Application settings.

    Returns:
        ImportResult: Counts and row errors.
    """
    service = _build_service(db, user_id, settings, data.batch_policy)
    return _run_import(service, data.rows)


@router.post("", response_model=ImportResult)
async def import_drills(
    file: Annotated[UploadFile, File(description="CSV or Excel file")],
    db: Annotated[Session, Depends(get_db)],
    user_id: CurrentUserId,
    settings: Annotated[Settings, Depends(get_settings)],
    batch_policy: Annotated[
        BatchPolicy | None,
        Form(description="atomic or per_row; defaults to the configured policy"),
    ] = None,
) -> ImportResult:
    """Import drills from a CSV or Excel file.

    Args:
        file: Uploaded CSV or Excel file.
        db: Database session.
        user_id: Current user ID.
        settings: Application settings.
        batch_policy: Overrides the configured batch policy.

    Returns:
        ImportResult: Counts and row errors.

    Raises:
        HTTPException: If the file is rejected or the library is unreachable.
    """
    rows = await _read_upload(file, settings.max_upload_bytes)
    service = _build_service(db, user_id, settings, batch_policy)
    return _run_import(service, rows)

"""Drills API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from planner.dependencies import CurrentUserId, get_db
from planner.drills.schemas import DeleteAllResponse, DrillCreate, DrillResponse, DrillUpdate
from planner.drills.service import (
    CategoryNotFoundError,
    DrillService,
    DuplicateDrillError,
    get_drill_service,
)

router = APIRouter()


def get_service(
    db: Annotated[Session, Depends(get_db)],
    user_id: CurrentUserId,
) -> DrillService:
    """Get drill service dependency."""
    return get_drill_service(db, user_id)


@router.get("", response_model=list[DrillResponse])
async def list_drills(
    service: Annotated[DrillService, Depends(get_service)],
    category_id: str | None = Query(None, description="Filter by category ID"),
    query: str | None = Query(None, description="Search drill names"),
) -> list[DrillResponse]:
    """List the current user's drills.

    Args:
        service: Drill service.
        category_id: Filter by category ID.
        query: Case-insensitive name search.

    Returns:
        list[DrillResponse]: Drills ordered by category, then name.
    """
    drills = service.list_drills(category_id=category_id, query=query)
    return [service.to_response(d) for d in drills]


@router.post("", response_model=DrillResponse, status_code=status.HTTP_201_CREATED)
async def create_drill(
    data: DrillCreate,
    service: Annotated[DrillService, Depends(get_service)],
) -> DrillResponse:
    """Create a drill.

    Args:
        data: Drill creation data.
        service: Drill service.

    Returns:
        DrillResponse: Created drill.

    Raises:
        HTTPException: If the category is unknown or the name is taken.
    """
    try:
        drill = service.create_drill(data)
    except DuplicateDrillError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A drill with this name already exists",
        )
    except CategoryNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found or access denied",
        )
    return service.to_response(drill)


@router.delete("", response_model=DeleteAllResponse)
async def delete_all_drills(
    service: Annotated[DrillService, Depends(get_service)],
) -> DeleteAllResponse:
    """Delete every drill in the current user's library."""
    return DeleteAllResponse(deleted=service.delete_all())


@router.get("/{drill_id}", response_model=DrillResponse)
async def get_drill(
    drill_id: str,
    service: Annotated[DrillService, Depends(get_service)],
) -> DrillResponse:
    """Get a single drill.

    Raises:
        HTTPException: If the drill is not found.
    """
    drill = service.get_drill(drill_id)
    if not drill:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Drill not found",
        )
    return service.to_response(drill)


@router.patch("/{drill_id}", response_model=DrillResponse)
async def update_drill(
    drill_id: str,
    data: DrillUpdate,
    service: Annotated[DrillService, Depends(get_service)],
) -> DrillResponse:
    """Update a drill.

    Args:
        drill_id: Drill ID.
        data: Fields to update.
        service: Drill service.

    Returns:
        DrillResponse: Updated drill.

    Raises:
        HTTPException: If not found, the category is unknown or the name is taken.
    """
    try:
        drill = service.update_drill(drill_id, data)
    except DuplicateDrillError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A drill with this name already exists",
        )
    except CategoryNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found or access denied",
        )

    if not drill:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Drill not found",
        )
    return service.to_response(drill)


@router.delete("/{drill_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_drill(
    drill_id: str,
    service: Annotated[DrillService, Depends(get_service)],
) -> None:
    """Delete a drill.

    Raises:
        HTTPException: If the drill is not found.
    """
    if not service.delete_drill(drill_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Drill not found",
        )

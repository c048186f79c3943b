"""Categories API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from planner.categories.schemas import CategoryCreate, CategoryResponse, CategoryWithCount
from planner.categories.service import (
    CategoryInUseError,
    CategoryService,
    DuplicateCategoryError,
    get_category_service,
)
from planner.dependencies import CurrentUserId, get_db

router = APIRouter()


def get_service(
    db: Annotated[Session, Depends(get_db)],
    user_id: CurrentUserId,
) -> CategoryService:
    """Get category service dependency."""
    return get_category_service(db, user_id)


@router.get("", response_model=list[CategoryWithCount])
async def list_categories(
    service: Annotated[CategoryService, Depends(get_service)],
) -> list[CategoryWithCount]:
    """List the current user's categories with drill counts."""
    return service.list_categories()


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreate,
    service: Annotated[CategoryService, Depends(get_service)],
) -> CategoryResponse:
    """Create a category.

    Args:
        data: Category creation data.
        service: Category service.

    Returns:
        CategoryResponse: Created category.

    Raises:
        HTTPException: If a category with this name already exists.
    """
    try:
        category = service.create_category(data)
    except DuplicateCategoryError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A category with this name already exists",
        )
    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str,
    service: Annotated[CategoryService, Depends(get_service)],
) -> None:
    """Delete a category that no drill uses.

    Args:
        category_id: Category ID.
        service: Category service.

    Raises:
        HTTPException: If not found or still in use.
    """
    try:
        deleted = service.delete_category(category_id)
    except CategoryInUseError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )

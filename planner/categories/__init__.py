"""Categories module for grouping drills."""

from planner.categories.router import router
from planner.categories.schemas import CategoryCreate, CategoryResponse, CategoryWithCount
from planner.categories.service import (
    CategoryInUseError,
    CategoryService,
    DuplicateCategoryError,
    get_category_service,
)

__all__ = [
    "router",
    "CategoryCreate",
    "CategoryResponse",
    "CategoryWithCount",
    "CategoryService",
    "CategoryInUseError",
    "DuplicateCategoryError",
    "get_category_service",
]

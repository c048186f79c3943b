"""Pydantic schemas for categories."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class CategoryCreate(BaseModel):
    """Schema for creating a category."""

    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        """Strip whitespace and reject blank names."""
        v = v.strip()
        if not v:
            raise ValueError("Category name is required")
        return v


class CategoryResponse(BaseModel):
    """Schema for category response."""

    id: str
    name: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class CategoryWithCount(CategoryResponse):
    """Schema for category with drill count."""

    drill_count: int = 0

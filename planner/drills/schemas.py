"""Pydantic schemas for drills."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


def _blank_to_none(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    return v or None


class DrillCreate(BaseModel):
    """Schema for creating a drill.

    Attributes:
        category_id: Category owned by the same user.
        name: Drill name (unique per user, case-insensitive).
        minutes: Duration in minutes.
        notes: Optional notes.
        media_links: Optional media links.
    """

    category_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    minutes: int = Field(0, ge=0)
    notes: str | None = None
    media_links: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        """Strip whitespace and reject blank names."""
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("notes", "media_links")
    @classmethod
    def strip_optional(cls, v: str | None) -> str | None:
        """Normalize blank optional text to None."""
        return _blank_to_none(v)


class DrillUpdate(BaseModel):
    """Schema for a partial drill update."""

    category_id: str | None = None
    name: str | None = Field(None, min_length=1, max_length=255)
    minutes: int | None = Field(None, ge=0)
    notes: str | None = None
    media_links: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str | None:
        """Strip whitespace and reject blank names."""
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("notes", "media_links")
    @classmethod
    def strip_optional(cls, v: str | None) -> str | None:
        """Normalize blank optional text to None."""
        return _blank_to_none(v)


class DrillResponse(BaseModel):
    """Schema for drill response."""

    id: str
    category_id: str
    category_name: str | None = None
    name: str
    minutes: int
    notes: str | None = None
    media_links: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class DeleteAllResponse(BaseModel):
    """Result of deleting every drill in the library."""

    deleted: int

"""SQLAlchemy database models."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.mysql import CHAR
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship, validates
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def generate_uuid() -> str:
    """Generate a UUID string for primary keys.

    Returns:
        str: UUID as 36-character string.
    """
    return str(uuid4())


def name_key(name: str) -> str:
    """Comparison key for drill and category names (trimmed, lowercased).

    Computed in Python rather than with SQL `lower()`, which only folds ASCII
    on SQLite.
    """
    return name.strip().lower()


class User(Base):
    """User model.

    Every category and drill is owned by exactly one user.

    Attributes:
        id: Primary key UUID.
        email: User email (unique).
        password_hash: Hashed password.
        full_name: User's full name.
        is_active: Whether the user is active.
        created_at: Creation timestamp.
        last_login: Last login timestamp.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    last_login: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    categories: Mapped[list["Category"]] = relationship(
        "Category", back_populates="user", cascade="all, delete-orphan"
    )
    drills: Mapped[list["Drill"]] = relationship(
        "Drill", back_populates="user", cascade="all, delete-orphan"
    )


class Category(Base):
    """User-owned drill category.

    Attributes:
        id: Primary key UUID.
        user_id: FK to the owning user.
        name: Category name (unique per user, case-insensitive).
        name_key: Lowercased, trimmed name used for lookups and uniqueness.
        created_at: Creation timestamp.
    """

    __tablename__ = "categories"
    __table_args__ = (Index("ix_categories_user_id", "user_id"),)

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        CHAR(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    name_key: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="categories")
    drills: Mapped[list["Drill"]] = relationship("Drill", back_populates="category")

    @validates("name")
    def _set_name_key(self, key, name):
        self.name_key = name_key(name) if name is not None else None
        return name


class Drill(Base):
    """Drill (exercise) in a user's library.

    Attributes:
        id: Primary key UUID.
        user_id: FK to the owning user.
        category_id: FK to a category owned by the same user.
        name: Drill name (unique per user, case-insensitive).
        name_key: Lowercased, trimmed name used for lookups and uniqueness.
        minutes: Duration in minutes.
        notes: Free-text notes.
        media_links: Free-text media links (URLs).
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
    """

    __tablename__ = "drills"
    __table_args__ = (
        Index("ix_drills_user_id", "user_id"),
        Index("ix_drills_category_id", "category_id"),
    )

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        CHAR(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    category_id: Mapped[str] = mapped_column(
        CHAR(36), ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    name_key: Mapped[str] = mapped_column(String(255), nullable=False)
    minutes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    media_links: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="drills")
    category: Mapped["Category"] = relationship("Category", back_populates="drills")

    @validates("name")
    def _set_name_key(self, key, name):
        self.name_key = name_key(name) if name is not None else None
        return name


# Case-insensitive uniqueness per owner; the import pipeline relies on these
# to detect concurrent creations.
Index("uq_categories_user_name_key", Category.user_id, Category.name_key, unique=True)
Index("uq_drills_user_name_key", Drill.user_id, Drill.name_key, unique=True)

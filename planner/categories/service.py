"""Category service layer."""

import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from planner.categories.schemas import CategoryCreate, CategoryWithCount
from planner.db.errors import classify_db_error
from planner.db.models import Category, Drill, name_key

logger = logging.getLogger(__name__)


class DuplicateCategoryError(ValueError):
    """A category with the same name (case-insensitive) already exists."""


class CategoryInUseError(ValueError):
    """The category still has drills attached."""


class CategoryService:
    """Service class for category operations."""

    def __init__(self, db: Session, user_id: str):
        """Initialize category service.

        Args:
            db: Database session.
            user_id: Owner of the categories.
        """
        self.db = db
        self.user_id = user_id

    def list_categories(self) -> list[CategoryWithCount]:
        """List the user's categories with drill counts, ordered by name.

        Returns:
            list[CategoryWithCount]: Categories with drill counts.
        """
        results = (
            self.db.query(
                Category,
                func.count(Drill.id).label("drill_count"),
            )
            .outerjoin(Drill, Drill.category_id == Category.id)
            .filter(Category.user_id == self.user_id)
            .group_by(Category.id)
            .order_by(Category.name)
            .all()
        )

        return [
            CategoryWithCount(
                id=category.id,
                name=category.name,
                created_at=category.created_at,
                drill_count=count,
            )
            for category, count in results
        ]

    def get_category(self, category_id: str) -> Category | None:
        """Get one of the user's categories by ID.

        Args:
            category_id: Category UUID.

        Returns:
            Category | None: Category if found and owned by the user.
        """
        return (
            self.db.query(Category)
            .filter(Category.id == category_id, Category.user_id == self.user_id)
            .first()
        )

    def find_by_name(self, name: str) -> Category | None:
        """Find a category by name, ignoring case and surrounding whitespace.

        Args:
            name: Category name.

        Returns:
            Category | None: Matching category.
        """
        return (
            self.db.query(Category)
            .filter(
                Category.user_id == self.user_id,
                Category.name_key == name_key(name),
            )
            .first()
        )

    def create_category(self, data: CategoryCreate) -> Category:
        """Create a new category.

        Args:
            data: Category creation data.

        Returns:
            Category: Created category.

        Raises:
            DuplicateCategoryError: If the name is already used by this user.
        """
        if self.find_by_name(data.name):
            raise DuplicateCategoryError(f"Category '{data.name}' already exists")

        category = Category(user_id=self.user_id, name=data.name)
        self.db.add(category)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            error = classify_db_error(e)
            if error.is_unique_violation:
                raise DuplicateCategoryError(f"Category '{data.name}' already exists") from e
            raise
        self.db.refresh(category)
        return category

    def delete_category(self, category_id: str) -> bool:
        """Delete an unused category.

        Args:
            category_id: Category UUID.

        Returns:
            bool: True if deleted, False if not found.

        Raises:
            CategoryInUseError: If drills still reference the category.
        """
        category = self.get_category(category_id)
        if not category:
            return False

        in_use = (
            self.db.query(func.count(Drill.id)).filter(Drill.category_id == category_id).scalar()
        )
        if in_use:
            raise CategoryInUseError(
                f"Category '{category.name}' is used by {in_use} drill(s)"
            )

        self.db.delete(category)
        self.db.commit()
        logger.info("Deleted category %s for user %s", category_id, self.user_id)
        return True


def get_category_service(db: Session, user_id: str) -> CategoryService:
    """Factory function for CategoryService.

    Args:
        db: Database session.
        user_id: Owner ID.

    Returns:
        CategoryService: Category service instance.
    """
    return CategoryService(db, user_id)

"""Category resolution for drill import."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from planner.db.errors import PersistenceError, classify_db_error
from planner.db.models import Category, generate_uuid, name_key
from planner.imports.exceptions import CategoryResolutionError

logger = logging.getLogger(__name__)


class CategoryResolver:
    """Maps category names to the owner's category IDs, creating missing ones.

    One resolver serves one import run. It caches resolved IDs (and failures)
    by case-insensitive name so each category is looked up at most once.

    Attributes:
        created: Names of categories created by this resolver, in order.
    """

    def __init__(self, db: Session, user_id: str):
        """Initialize the resolver.

        Args:
            db: Database session.
            user_id: Owner of the categories.
        """
        self.db = db
        self.user_id = user_id
        self.created: list[str] = []
        self._cache: dict[str, str] = {}
        self._failures: dict[str, str] = {}

    def resolve(self, name: str) -> str:
        """Get the category ID for a name, creating the category if needed.

        Args:
            name: Category name from the row.

        Returns:
            str: Category ID.

        Raises:
            CategoryResolutionError: If the lookup or creation failed.
        """
        key = name_key(name)
        if key in self._cache:
            return self._cache[key]
        if key in self._failures:
            raise CategoryResolutionError(name, self._failures[key])

        try:
            category_id = self._lookup(key) or self._create(name.strip())
        except PersistenceError as e:
            message = f"Could not resolve category '{name.strip()}': {e}"
            self._failures[key] = message
            logger.warning("Category resolution failed for user %s: %s", self.user_id, e)
            raise CategoryResolutionError(name, message) from e

        self._cache[key] = category_id
        return category_id

    def _lookup(self, key: str) -> str | None:
        try:
            row = (
                self.db.query(Category.id)
                .filter(Category.user_id == self.user_id, Category.name_key == key)
                .first()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise classify_db_error(e) from e
        return row[0] if row else None

    def _create(self, name: str) -> str:
        category = Category(id=generate_uuid(), user_id=self.user_id, name=name)
        category_id = category.id
        self.db.add(category)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            error = classify_db_error(e)
            if not error.is_unique_violation:
                raise error from e

            # Another request created it between our lookup and insert
            winner = self._lookup(name_key(name))
            if winner is None:
                raise error from e
            logger.warning(
                "Category '%s' was created concurrently for user %s; using existing row",
                name,
                self.user_id,
            )
            return winner

        self.created.append(name)
        return category_id

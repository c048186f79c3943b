"""Drill service layer."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from planner.db.errors import classify_db_error
from planner.db.models import Category, Drill, name_key
from planner.drills.schemas import DrillCreate, DrillResponse, DrillUpdate

logger = logging.getLogger(__name__)


class DuplicateDrillError(ValueError):
    """A drill with the same name (case-insensitive) already exists."""


class CategoryNotFoundError(ValueError):
    """The category does not exist or belongs to another user."""


class DrillService:
    """Service class for drill operations."""

    def __init__(self, db: Session, user_id: str):
        """Initialize drill service.

        Args:
            db: Database session.
            user_id: Owner of the drills.
        """
        self.db = db
        self.user_id = user_id

    def to_response(self, drill: Drill) -> DrillResponse:
        """Convert drill model to response schema.

        Args:
            drill: Drill model.

        Returns:
            DrillResponse: Drill response schema.
        """
        response = DrillResponse.model_validate(drill)
        response.category_name = drill.category.name if drill.category else None
        return response

    def list_drills(
        self,
        category_id: str | None = None,
        query: str | None = None,
    ) -> list[Drill]:
        """List the user's drills ordered by category name, then drill name.

        Args:
            category_id: Only drills in this category.
            query: Case-insensitive substring of the drill name.

        Returns:
            list[Drill]: Matching drills.
        """
        q = (
            self.db.query(Drill)
            .join(Category, Drill.category_id == Category.id)
            .options(joinedload(Drill.category))
            .filter(Drill.user_id == self.user_id)
        )
        if category_id:
            q = q.filter(Drill.category_id == category_id)
        if query:
            q = q.filter(Drill.name_key.contains(name_key(query)))

        return q.order_by(Category.name, Drill.name).all()

    def get_drill(self, drill_id: str) -> Drill | None:
        """Get one of the user's drills.

        Args:
            drill_id: Drill UUID.

        Returns:
            Drill | None: Drill if found and owned by the user.
        """
        return (
            self.db.query(Drill)
            .options(joinedload(Drill.category))
            .filter(Drill.id == drill_id, Drill.user_id == self.user_id)
            .first()
        )

    def find_by_name(self, name: str, exclude_id: str | None = None) -> Drill | None:
        """Find a drill by name, ignoring case and surrounding whitespace.

        Args:
            name: Drill name.
            exclude_id: Drill ID to ignore (for renames).

        Returns:
            Drill | None: Matching drill.
        """
        q = self.db.query(Drill).filter(
            Drill.user_id == self.user_id,
            Drill.name_key == name_key(name),
        )
        if exclude_id:
            q = q.filter(Drill.id != exclude_id)
        return q.first()

    def existing_names(self) -> set[str]:
        """Get the user's drill names, trimmed and lowercased.

        Returns:
            set[str]: Normalized drill names.
        """
        rows = self.db.query(Drill.name_key).filter(Drill.user_id == self.user_id).all()
        return {key for (key,) in rows}

    def _require_category(self, category_id: str) -> Category:
        category = (
            self.db.query(Category)
            .filter(Category.id == category_id, Category.user_id == self.user_id)
            .first()
        )
        if not category:
            raise CategoryNotFoundError("Category not found")
        return category

    def _commit(self, name: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            if classify_db_error(e).is_unique_violation:
                raise DuplicateDrillError(f"Drill '{name}' already exists") from e
            raise

    def create_drill(self, data: DrillCreate) -> Drill:
        """Create a new drill.

        Args:
            data: Drill creation data.

        Returns:
            Drill: Created drill.

        Raises:
            DuplicateDrillError: If the name is already in the library.
            CategoryNotFoundError: If the category is not the user's.
        """
        if self.find_by_name(data.name):
            raise DuplicateDrillError(f"Drill '{data.name}' already exists")

        self._require_category(data.category_id)

        drill = Drill(
            user_id=self.user_id,
            category_id=data.category_id,
            name=data.name,
            minutes=data.minutes,
            notes=data.notes,
            media_links=data.media_links,
        )
        self.db.add(drill)
        self._commit(data.name)
        self.db.refresh(drill)
        return drill

    def update_drill(self, drill_id: str, data: DrillUpdate) -> Drill | None:
        """Update a drill.

        Args:
            drill_id: Drill UUID.
            data: Fields to change; unset fields are left alone.

        Returns:
            Drill | None: Updated drill, or None if not found.

        Raises:
            DuplicateDrillError: If renaming onto an existing name.
            CategoryNotFoundError: If the new category is not the user's.
        """
        drill = self.get_drill(drill_id)
        if not drill:
            return None

        updates = data.model_dump(exclude_unset=True)

        if updates.get("name") and self.find_by_name(updates["name"], exclude_id=drill_id):
            raise DuplicateDrillError(f"Drill '{updates['name']}' already exists")

        if updates.get("category_id"):
            self._require_category(updates["category_id"])

        for field, value in updates.items():
            if field in ("name", "category_id", "minutes") and value is None:
                continue
            setattr(drill, field, value)

        self._commit(drill.name)
        self.db.refresh(drill)
        return drill

    def delete_drill(self, drill_id: str) -> bool:
        """Delete a drill.

        Args:
            drill_id: Drill UUID.

        Returns:
            bool: True if deleted, False if not found.
        """
        drill = self.get_drill(drill_id)
        if not drill:
            return False

        self.db.delete(drill)
        self.db.commit()
        return True

    def delete_all(self) -> int:
        """Delete every drill in the user's library.

        Returns:
            int: Number of drills deleted.
        """
        deleted = (
            self.db.query(Drill)
            .filter(Drill.user_id == self.user_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        logger.info("Deleted %d drills for user %s", deleted, self.user_id)
        return deleted


def get_drill_service(db: Session, user_id: str) -> DrillService:
    """Factory function for DrillService.

    Args:
        db: Database session.
        user_id: Owner ID.

    Returns:
        DrillService: Drill service instance.
    """
    return DrillService(db, user_id)

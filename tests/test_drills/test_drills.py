"""Tests for the drills API."""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from planner.db.models import Category, Drill, User
from planner.drills.schemas import DrillCreate, DrillUpdate
from planner.drills.service import (
    CategoryNotFoundError,
    DuplicateDrillError,
    get_drill_service,
)


def _make_drill(db: Session, user: User, category: Category, name: str, minutes: int = 0) -> Drill:
    drill = Drill(
        id=str(uuid4()),
        user_id=user.id,
        category_id=category.id,
        name=name,
        minutes=minutes,
    )
    db.add(drill)
    db.commit()
    return drill


class TestDrillSchemas:
    """Tests for drill Pydantic schemas."""

    def test_drill_create_defaults(self):
        """Test minutes defaults to 0 and blank notes become None."""
        drill = DrillCreate(category_id="abc", name=" Cone Weave ", notes="  ")
        assert drill.name == "Cone Weave"
        assert drill.minutes == 0
        assert drill.notes is None

    def test_drill_create_negative_minutes(self):
        """Test negative minutes are rejected."""
        with pytest.raises(ValueError):
            DrillCreate(category_id="abc", name="Cone Weave", minutes=-5)

    def test_drill_update_blank_name(self):
        """Test renaming to a blank name is rejected."""
        with pytest.raises(ValueError):
            DrillUpdate(name="   ")


class TestDrillService:
    """Tests for DrillService."""

    def test_existing_names_are_normalized(
        self, db: Session, test_user: User, test_category: Category
    ):
        """Test existing names come back trimmed and lowercased."""
        _make_drill(db, test_user, test_category, "  Cone WEAVE ")
        service = get_drill_service(db, test_user.id)

        assert service.existing_names() == {"cone weave"}

    def test_existing_names_scoped_to_user(
        self, db: Session, test_user: User, other_user: User, test_drill: Drill
    ):
        """Test another user's library is not visible."""
        service = get_drill_service(db, other_user.id)

        assert service.existing_names() == set()

    def test_create_duplicate_ignores_case(
        self, db: Session, test_user: User, test_drill: Drill
    ):
        """Test a drill name differing only in case is a duplicate."""
        service = get_drill_service(db, test_user.id)

        with pytest.raises(DuplicateDrillError):
            service.create_drill(DrillCreate(category_id=test_drill.category_id, name="CONE weave"))

    def test_create_duplicate_ignores_case_of_accented_name(
        self, db: Session, test_user: User, test_category: Category
    ):
        """Test non-ASCII names differing only in case are duplicates."""
        service = get_drill_service(db, test_user.id)
        service.create_drill(DrillCreate(category_id=test_category.id, name="Élan Sprint"))

        with pytest.raises(DuplicateDrillError):
            service.create_drill(DrillCreate(category_id=test_category.id, name="élan sprint"))

        assert [d.name for d in service.list_drills()] == ["Élan Sprint"]

    def test_unique_index_folds_accented_names(
        self, db: Session, test_user: User, test_category: Category
    ):
        """Test the database rejects an accented name that differs only in case."""
        _make_drill(db, test_user, test_category, "Élan Sprint")
        service = get_drill_service(db, test_user.id)
        # Skip the pre-check so the insert reaches the unique index
        service.find_by_name = lambda name, exclude_id=None: None

        with pytest.raises(DuplicateDrillError):
            service.create_drill(DrillCreate(category_id=test_category.id, name="ÉLAN SPRINT"))

    def test_rename_updates_name_key(self, db: Session, test_user: User, test_drill: Drill):
        """Test renaming a drill keeps its lookup key in step."""
        service = get_drill_service(db, test_user.id)

        service.update_drill(test_drill.id, DrillUpdate(name="Équipe Weave"))

        assert test_drill.name_key == "équipe weave"
        assert service.find_by_name("ÉQUIPE WEAVE").id == test_drill.id
        assert service.find_by_name("Cone Weave") is None

    def test_search_accented_name(self, db: Session, test_user: User, test_category: Category):
        """Test name search ignores the case of non-ASCII letters."""
        _make_drill(db, test_user, test_category, "Élan Sprint")
        _make_drill(db, test_user, test_category, "Box Out")
        service = get_drill_service(db, test_user.id)

        assert [d.name for d in service.list_drills(query="élan")] == ["Élan Sprint"]

    def test_create_in_foreign_category(
        self, db: Session, test_user: User, other_user: User
    ):
        """Test a drill can't be filed under another user's category."""
        category = Category(id=str(uuid4()), user_id=other_user.id, name="Theirs")
        db.add(category)
        db.commit()
        service = get_drill_service(db, test_user.id)

        with pytest.raises(CategoryNotFoundError):
            service.create_drill(DrillCreate(category_id=category.id, name="Sneaky"))

    def test_rename_onto_existing_name(
        self, db: Session, test_user: User, test_category: Category, test_drill: Drill
    ):
        """Test renaming onto another drill's name fails."""
        other = _make_drill(db, test_user, test_category, "Figure Eight")
        service = get_drill_service(db, test_user.id)

        with pytest.raises(DuplicateDrillError):
            service.update_drill(other.id, DrillUpdate(name="cone weave"))

    def test_rename_same_drill_changes_case(self, db: Session, test_user: User, test_drill: Drill):
        """Test a drill can be renamed to a different casing of its own name."""
        service = get_drill_service(db, test_user.id)

        drill = service.update_drill(test_drill.id, DrillUpdate(name="CONE WEAVE"))

        assert drill.name == "CONE WEAVE"


class TestDrillsApi:
    """Tests for the drills endpoints."""

    def test_list_drills_ordered(
        self, authenticated_client: TestClient, db: Session, test_user: User, test_drill: Drill
    ):
        """Test drills are ordered by category name, then drill name."""
        agility = Category(id=str(uuid4()), user_id=test_user.id, name="Agility")
        db.add(agility)
        db.commit()
        _make_drill(db, test_user, agility, "Ladder")
        _make_drill(db, test_user, test_drill.category, "Around The World")

        response = authenticated_client.get("/api/drills")

        assert response.status_code == 200
        data = response.json()
        assert [d["name"] for d in data] == ["Ladder", "Around The World", "Cone Weave"]
        assert data[0]["category_name"] == "Agility"

    def test_list_drills_filters(
        self, authenticated_client: TestClient, db: Session, test_user: User, test_drill: Drill
    ):
        """Test category and name filters."""
        agility = Category(id=str(uuid4()), user_id=test_user.id, name="Agility")
        db.add(agility)
        db.commit()
        _make_drill(db, test_user, agility, "Cone Shuffle")

        by_category = authenticated_client.get(f"/api/drills?category_id={agility.id}")
        by_query = authenticated_client.get("/api/drills?query=CONE")

        assert [d["name"] for d in by_category.json()] == ["Cone Shuffle"]
        assert len(by_query.json()) == 2

    def test_create_drill(
        self, authenticated_client: TestClient, test_category: Category
    ):
        """Test creating a drill."""
        response = authenticated_client.post(
            "/api/drills",
            json={
                "category_id": test_category.id,
                "name": "Figure Eight",
                "minutes": 5,
                "media_links": "https://youtu.be/abc",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Figure Eight"
        assert data["minutes"] == 5
        assert data["category_name"] == "Ball Handling"

    def test_create_duplicate_drill(self, authenticated_client: TestClient, test_drill: Drill):
        """Test creating a case-insensitive duplicate fails."""
        response = authenticated_client.post(
            "/api/drills",
            json={"category_id": test_drill.category_id, "name": " cone weave "},
        )

        assert response.status_code == 409

    def test_create_drill_unknown_category(self, authenticated_client: TestClient):
        """Test an unknown category is reported as not found."""
        response = authenticated_client.post(
            "/api/drills",
            json={"category_id": str(uuid4()), "name": "Orphan"},
        )

        assert response.status_code == 404

    def test_get_other_users_drill(
        self, authenticated_client: TestClient, db: Session, other_user: User
    ):
        """Test another user's drill is not found."""
        category = Category(id=str(uuid4()), user_id=other_user.id, name="Theirs")
        db.add(category)
        db.commit()
        drill = _make_drill(db, other_user, category, "Hidden")

        response = authenticated_client.get(f"/api/drills/{drill.id}")

        assert response.status_code == 404

    def test_update_drill(self, authenticated_client: TestClient, test_drill: Drill):
        """Test partial update leaves unset fields alone."""
        response = authenticated_client.patch(
            f"/api/drills/{test_drill.id}",
            json={"minutes": 12},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["minutes"] == 12
        assert data["name"] == "Cone Weave"
        assert data["notes"] == "Both hands"

    def test_delete_drill(self, authenticated_client: TestClient, db: Session, test_drill: Drill):
        """Test deleting a drill."""
        response = authenticated_client.delete(f"/api/drills/{test_drill.id}")

        assert response.status_code == 204
        assert db.query(Drill).count() == 0

    def test_delete_all_drills(
        self,
        authenticated_client: TestClient,
        db: Session,
        test_user: User,
        other_user: User,
        test_category: Category,
        test_drill: Drill,
    ):
        """Test delete-all only removes the current user's drills."""
        _make_drill(db, test_user, test_category, "Figure Eight")
        theirs = Category(id=str(uuid4()), user_id=other_user.id, name="Theirs")
        db.add(theirs)
        db.commit()
        _make_drill(db, other_user, theirs, "Untouched")

        response = authenticated_client.delete("/api/drills")

        assert response.status_code == 200
        assert response.json() == {"deleted": 2}
        assert db.query(Drill).count() == 1

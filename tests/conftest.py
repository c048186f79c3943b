"""Pytest configuration and fixtures."""

import os
from collections.abc import Generator
from uuid import uuid4

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["DEBUG"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from planner.auth.utils import get_password_hash
from planner.db.models import Base, Category, Drill, User

# Use in-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""
    # Import here to ensure env vars are set
    from planner.dependencies import get_db
    from planner.main import app

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def test_user(db: Session) -> User:
    """Create a test user."""
    user = User(
        id=str(uuid4()),
        email="coach@example.com",
        password_hash=get_password_hash("testpassword123"),
        full_name="Test Coach",
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def other_user(db: Session) -> User:
    """Create a second user whose data must stay invisible to test_user."""
    user = User(
        id=str(uuid4()),
        email="other@example.com",
        password_hash=get_password_hash("otherpassword123"),
        full_name="Other Coach",
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def authenticated_client(client: TestClient, test_user: User) -> TestClient:
    """Create an authenticated test client."""
    from planner.dependencies import get_current_user
    from planner.main import app

    def override_get_current_user():
        return test_user

    app.dependency_overrides[get_current_user] = override_get_current_user
    yield client
    if get_current_user in app.dependency_overrides:
        del app.dependency_overrides[get_current_user]


@pytest.fixture
def test_category(db: Session, test_user: User) -> Category:
    """Create a test category."""
    category = Category(
        id=str(uuid4()),
        user_id=test_user.id,
        name="Ball Handling",
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def test_drill(db: Session, test_user: User, test_category: Category) -> Drill:
    """Create a test drill."""
    drill = Drill(
        id=str(uuid4()),
        user_id=test_user.id,
        category_id=test_category.id,
        name="Cone Weave",
        minutes=10,
        notes="Both hands",
    )
    db.add(drill)
    db.commit()
    db.refresh(drill)
    return drill

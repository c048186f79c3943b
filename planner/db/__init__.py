"""Database module."""

from planner.db.database import SessionLocal, engine, get_db, init_db
from planner.db.errors import (
    PersistenceError,
    PersistenceErrorKind,
    classify_db_error,
    is_unique_violation,
)
from planner.db.models import Base, Category, Drill, User

__all__ = [
    "SessionLocal",
    "engine",
    "get_db",
    "init_db",
    "Base",
    "User",
    "Category",
    "Drill",
    "PersistenceError",
    "PersistenceErrorKind",
    "classify_db_error",
    "is_unique_violation",
]

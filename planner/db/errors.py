"""Tagged persistence errors.

Services catch SQLAlchemy exceptions at the write boundary and turn them into a
``PersistenceError`` so callers can branch on the kind of failure (a unique
constraint violation vs. anything else) without inspecting messages.
"""

import enum

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

# Driver error codes for unique constraint violations.
POSTGRES_UNIQUE_VIOLATION = "23505"
SQLITE_CONSTRAINT_UNIQUE = 2067
SQLITE_CONSTRAINT_PRIMARYKEY = 1555
MYSQL_DUPLICATE_ENTRY = 1062


class PersistenceErrorKind(str, enum.Enum):
    """Kinds of persistence failure."""

    UNIQUE_VIOLATION = "unique_violation"
    OTHER = "other"


class PersistenceError(Exception):
    """A database failure tagged with its kind.

    Attributes:
        kind: Failure kind.
        cause: The original SQLAlchemy exception.
    """

    def __init__(self, kind: PersistenceErrorKind, cause: Exception):
        self.kind = kind
        self.cause = cause
        # The DBAPI error reads better than SQLAlchemy's message with the SQL attached
        super().__init__(str(getattr(cause, "orig", None) or cause))

    @property
    def is_unique_violation(self) -> bool:
        """Whether the failure was a unique constraint violation."""
        return self.kind == PersistenceErrorKind.UNIQUE_VIOLATION


def is_unique_violation(exc: SQLAlchemyError) -> bool:
    """Check whether a DBAPI error is a unique constraint violation.

    Looks at the driver error code: SQLSTATE for PostgreSQL drivers, the
    extended result code for sqlite3 and the error number for MySQL drivers.

    Args:
        exc: SQLAlchemy exception wrapping a DBAPI error.

    Returns:
        bool: True for unique/primary key violations.
    """
    if not isinstance(exc, IntegrityError):
        return False

    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == POSTGRES_UNIQUE_VIOLATION

    sqlite_code = getattr(orig, "sqlite_errorcode", None)
    if sqlite_code is not None:
        return sqlite_code in (SQLITE_CONSTRAINT_UNIQUE, SQLITE_CONSTRAINT_PRIMARYKEY)

    args = getattr(orig, "args", ())
    if args and isinstance(args[0], int):
        return args[0] == MYSQL_DUPLICATE_ENTRY

    return False


def classify_db_error(exc: SQLAlchemyError) -> PersistenceError:
    """Wrap a SQLAlchemy exception into a tagged PersistenceError.

    Args:
        exc: Exception raised by a flush/commit/query.

    Returns:
        PersistenceError: Tagged error.
    """
    kind = (
        PersistenceErrorKind.UNIQUE_VIOLATION
        if is_unique_violation(exc)
        else PersistenceErrorKind.OTHER
    )
    return PersistenceError(kind, exc)

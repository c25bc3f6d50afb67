"""
Persistence-layer errors.

Repositories never leak SQLAlchemy exceptions; they raise one of these instead
so callers can switch on the kind of failure:

    PersistenceError          any other database fault
    ├── UniqueViolationError  a unique constraint rejected the write
    └── RecordNotFoundError   the targeted row does not exist
"""

from sqlalchemy.exc import IntegrityError

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION_SQLSTATE = "23505"


class PersistenceError(Exception):
    """Base class for data-access failures."""


class UniqueViolationError(PersistenceError):
    """Insert/update collided with an existing unique value."""


class RecordNotFoundError(PersistenceError):
    """The row addressed by a write does not exist."""

    def __init__(self, model: str, key: str):
        super().__init__(f"{model} {key!r} not found")
        self.model = model
        self.key = key


def is_unique_violation(exc: IntegrityError) -> bool:
    """Detect unique-constraint failures across asyncpg and sqlite drivers."""
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return code == UNIQUE_VIOLATION_SQLSTATE
    return "unique constraint" in str(orig).lower()

"""
Jersey Catalog API - Data Access Exceptions

    SchemaError      - table or column missing from the catalog; fatal for that table
    ConflictError    - uniqueness / composite-key violation, or a broken foreign-key reference
    PersistenceError - any other database failure (rolled back when in a transaction)
"""


class RepositoryError(Exception):
    """Base class for data access failures."""
    pass


class SchemaError(RepositoryError):
    """Raised when table or column metadata cannot be found."""

    def __init__(self, message: str, table: str = None):
        super().__init__(message)
        self.table = table


class ConflictError(RepositoryError):
    """Raised when a write violates a unique or primary key constraint."""

    def __init__(self, message: str, table: str = None, key=None):
        super().__init__(message)
        self.table = table
        self.key = key


class PersistenceError(RepositoryError):
    """Raised for database execution failures that are not conflicts."""

    def __init__(self, message: str, table: str = None):
        super().__init__(message)
        self.table = table


# MySQL: duplicate entry, row still referenced, referenced row missing
CONFLICT_ERROR_CODES = frozenset({1062, 1451, 1452})

# SQLite carries no numeric code on the exception, only the message
CONFLICT_MESSAGES = ("UNIQUE constraint failed", "FOREIGN KEY constraint failed")


def is_conflict(error) -> bool:
    """
    Tell a uniqueness or foreign-key violation from other constraint failures.

    Args:
        error: sqlalchemy.exc.DBAPIError wrapping the driver exception

    Returns:
        True for duplicate keys and broken references; NOT NULL, CHECK and
        data errors return False
    """
    orig = getattr(error, "orig", None)
    args = getattr(orig, "args", ())
    if args and isinstance(args[0], int):
        return args[0] in CONFLICT_ERROR_CODES
    message = str(orig if orig is not None else error)
    return any(marker in message for marker in CONFLICT_MESSAGES)

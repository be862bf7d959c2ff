"""
Database Exception Classes
"""

from typing import Optional


class DatabaseError(Exception):
    """Base exception for wiki database operations.

    Attributes:
        engine_message: Message reported by the SQLite engine, if any.
    """

    def __init__(self, message: str, engine_message: Optional[str] = None):
        self.message = message
        self.engine_message = engine_message
        super().__init__(message if not engine_message else f"{message}: {engine_message}")


class PermissionDenied(DatabaseError):
    """Raised when the data directory or database file is not writable"""


class OpenFailed(DatabaseError):
    """Raised when the database file cannot be opened for another reason"""


class QueryFailed(DatabaseError):
    """Raised when a statement fails to execute"""

    def __init__(self, message: str, query: str, engine_message: Optional[str] = None):
        self.query = query
        super().__init__(message, engine_message)


class TransactionError(DatabaseError):
    """Raised when commit() is called without a matching begin()"""

"""
Database module for the wiki.

Provides the SQLite connection wrapper, typed errors and the registry of
Python functions callable from SQL.

Usage:
    db = Database(settings=Settings.from_env())
    db.create_function("title_case", str.title, 1)
    if not db.is_table("page"):
        db.exec("CREATE TABLE page (name TEXT PRIMARY KEY, body TEXT)")
    db.close()
"""

from .connection import Database
from .exceptions import (
    DatabaseError,
    OpenFailed,
    PermissionDenied,
    QueryFailed,
    TransactionError,
)
from .functions import DISPATCHER_NAME, FunctionRegistry, RegisteredFunction

__all__ = [
    "Database",
    "DatabaseError",
    "OpenFailed",
    "PermissionDenied",
    "QueryFailed",
    "TransactionError",
    "DISPATCHER_NAME",
    "FunctionRegistry",
    "RegisteredFunction",
]

# hideable-db - persistence helpers for the Hideable wiki
#
# Binary-safe escaping codec for SQL string literals, plus an owned
# SQLite connection wrapper that applies it at the query boundary.

__version__ = "0.3.0"
__description__ = "Binary-safe SQLite persistence helpers for the Hideable wiki"

from .codec import (
    MalformedEncoding,
    decode_binary,
    encode_binary,
    escape_for_literal,
    unescape_from_literal,
)
from .config import Settings
from .db import (
    Database,
    DatabaseError,
    FunctionRegistry,
    OpenFailed,
    PermissionDenied,
    QueryFailed,
    TransactionError,
)

__all__ = [
    "__version__",
    "MalformedEncoding",
    "decode_binary",
    "encode_binary",
    "escape_for_literal",
    "unescape_from_literal",
    "Settings",
    "Database",
    "DatabaseError",
    "FunctionRegistry",
    "OpenFailed",
    "PermissionDenied",
    "QueryFailed",
    "TransactionError",
]

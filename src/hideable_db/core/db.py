# Core Module — Central SQLite Connection Helper
#
# Every wiki database connection is opened through `connect()` instead of
# raw `sqlite3.connect()`. This ensures:
#
#   - read-write-create open mode
#   - busy_timeout to avoid SQLITE_BUSY while another process holds a lock
#   - foreign_keys enforcement on every connection
#   - autocommit mode, so BEGIN/COMMIT are issued explicitly by the caller
#
# WAL journal mode is on by default so readers are not blocked while the
# wiki is being edited.

import sqlite3
from pathlib import Path
from typing import Union

DEFAULT_BUSY_TIMEOUT_MS = 5000


def connect(
    db_path: Union[str, Path],
    *,
    busy_timeout_ms: int = DEFAULT_BUSY_TIMEOUT_MS,
    wal: bool = True,
    row_factory: bool = False,
    check_same_thread: bool = True,
) -> sqlite3.Connection:
    """Open a SQLite connection with safe PRAGMAs and no implicit transactions.

    Args:
        db_path: Path to the database file (or ":memory:").
        busy_timeout_ms: How long to wait on a locked database.
        wal: If True, switch the journal to WAL mode.
        row_factory: If True, set conn.row_factory = sqlite3.Row.
        check_same_thread: Passed to sqlite3.connect().

    Returns:
        sqlite3.Connection in autocommit mode (isolation_level=None).
    """
    conn = sqlite3.connect(
        str(db_path),
        check_same_thread=check_same_thread,
        isolation_level=None,
    )
    try:
        if wal:
            conn.execute("PRAGMA journal_mode=WAL")
        conn.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")
        conn.execute("PRAGMA foreign_keys=ON")
    except sqlite3.Error:
        conn.close()
        raise
    if row_factory:
        conn.row_factory = sqlite3.Row
    return conn

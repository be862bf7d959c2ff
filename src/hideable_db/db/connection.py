"""
Wiki database connection.

Wraps a single sqlite3 connection and translates driver failures into
typed DatabaseError subclasses. Callers construct a Database explicitly
and pass it to whatever needs it; there is no process-wide instance.

Usage:
    with Database(settings=Settings.from_env()) as db:
        db.begin()
        db.exec(f"INSERT INTO page (name, body) VALUES ({db.literal(name)}, {db.literal(body)})")
        db.commit()

        row = db.fetch(db.query("SELECT body FROM page WHERE name = " + db.literal(name)))
        body = db.unescape(row["body"])
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Type, Union

import structlog

from ..codec import (
    SENTINEL,
    MalformedEncoding,
    double_quotes,
    encode,
    escape_for_literal,
    unescape_from_literal,
)
from ..config import Settings
from ..core.db import DEFAULT_BUSY_TIMEOUT_MS, connect
from .exceptions import (
    DatabaseError,
    OpenFailed,
    PermissionDenied,
    QueryFailed,
    TransactionError,
)
from .functions import FunctionRegistry

logger = structlog.get_logger(__name__)

_SENTINEL_CHAR = chr(SENTINEL)


class Database:
    """
    Owned SQLite connection for one wiki.

    Attributes:
        path: Database file path
        functions: Registry of Python functions callable from SQL
        transaction_depth: Nesting level of begin() calls not yet committed
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        *,
        settings: Optional[Settings] = None,
        functions: Optional[FunctionRegistry] = None,
        wal: bool = True,
    ):
        """
        Open (creating if needed) the wiki database.

        Args:
            path: Database file. Defaults to settings.db_path.
            settings: Source of the default path and busy timeout.
            functions: SQL function registry to install (a new one if None).
            wal: Use WAL journal mode.

        Raises:
            PermissionDenied: if the data directory or the file is not writable
            OpenFailed: if the file cannot be opened for any other reason
        """
        if path is None:
            settings = settings or Settings.from_env()
            path = settings.db_path
        busy_timeout_ms = settings.busy_timeout_ms if settings else DEFAULT_BUSY_TIMEOUT_MS

        self.path = Path(path)
        self.functions = functions if functions is not None else FunctionRegistry()
        self.transaction_depth = 0
        self._conn: Optional[sqlite3.Connection] = None

        try:
            conn = connect(
                self.path,
                busy_timeout_ms=busy_timeout_ms,
                wal=wal,
                row_factory=True,
            )
        except sqlite3.Error as exc:
            raise self._open_error(exc) from exc

        try:
            self.functions.install(conn)
        except sqlite3.Error as exc:
            conn.close()
            raise OpenFailed("Could not register SQL functions", str(exc)) from exc

        self._conn = conn
        logger.info("database_opened", path=str(self.path))

    def _permission_problem(self) -> Optional[str]:
        """Describe why the wiki cannot write its database, if it cannot."""
        if str(self.path) == ":memory:":
            return None
        if not os.access(self.path.parent, os.W_OK):
            return "Cannot write to the data directory"
        if self.path.exists() and not os.access(self.path, os.W_OK):
            return "Cannot write to the database file"
        return None

    def _open_error(self, exc: sqlite3.Error) -> DatabaseError:
        if not self.path.parent.is_dir():
            err: DatabaseError = OpenFailed("Data directory does not exist", str(exc))
        else:
            problem = self._permission_problem()
            if problem:
                err = PermissionDenied(problem, str(exc))
            else:
                err = OpenFailed("Could not open the database file", str(exc))
        logger.error("open_failed", path=str(self.path), reason=err.message, engine=str(exc))
        return err

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._conn is None

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise DatabaseError("Database is closed")
        return self._conn

    def close(self) -> None:
        """Roll back any open transaction and close the connection."""
        if self._conn is None:
            return
        try:
            if self.transaction_depth > 0:
                self.rollback()
        finally:
            self._conn.close()
            self._conn = None
            logger.info("database_closed", path=str(self.path))

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def query(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        """Run a statement and return its cursor.

        Raises:
            QueryFailed: if SQLite rejects the statement. The message names
                an unwritable data directory or database file when that is
                the likely cause.
        """
        conn = self.connection
        try:
            return conn.execute(sql, params)
        except (sqlite3.Error, ValueError) as exc:
            message = "Could not execute query"
            problem = self._permission_problem()
            if problem:
                message = f"{problem}. {message}"
            logger.error("query_failed", query=sql, reason=message, engine=str(exc))
            raise QueryFailed(message, sql, str(exc)) from exc

    def exec(self, sql: str, params: Sequence[Any] = ()) -> None:
        """Run a statement that returns no rows."""
        self.query(sql, params).close()

    def changes(self) -> int:
        """Rows modified by the most recent INSERT, UPDATE or DELETE."""
        return self.connection.execute("SELECT changes()").fetchone()[0]

    # ------------------------------------------------------------------
    # Escaping
    # ------------------------------------------------------------------

    def escape(self, value: Union[str, bytes]) -> str:
        """Escape a value for use inside a single-quoted SQL literal.

        Plain text is only quote-doubled. Text containing NUL or starting
        with the sentinel byte, and bytes that are not valid UTF-8, are
        binary-encoded and carried one character per byte.
        """
        if isinstance(value, str):
            raw = value.encode("utf-8")
            text = True
        else:
            raw = bytes(value)
            try:
                raw.decode("utf-8")
                text = True
            except UnicodeDecodeError:
                text = False

        if not raw:
            return ""
        escaped = escape_for_literal(raw) if text else double_quotes(encode(raw))
        if escaped[:1] == bytes((SENTINEL,)):
            return escaped.decode("latin-1")
        return escaped.decode("utf-8")

    def literal(self, value: Union[str, bytes]) -> str:
        """Return a complete quoted SQL literal for the value."""
        return "'" + self.escape(value) + "'"

    def unescape(self, value: Any, *, binary: bool = False) -> Any:
        """Restore a value read back from a column written with escape().

        Args:
            value: Column value as returned by the driver. NULL (None) and
                numeric values are returned unchanged.
            binary: Return bytes instead of decoding as UTF-8.

        Raises:
            MalformedEncoding: if a sentinel-prefixed value is not valid codec output
        """
        if isinstance(value, bytes):
            raw = unescape_from_literal(value)
        elif not isinstance(value, str):
            return value
        elif value[:1] == _SENTINEL_CHAR:
            try:
                encoded = value.encode("latin-1")
            except UnicodeEncodeError as exc:
                raise MalformedEncoding("character outside the byte range", exc.start) from exc
            raw = unescape_from_literal(encoded)
        elif binary:
            return value.encode("utf-8")
        else:
            return value
        return raw if binary else raw.decode("utf-8")

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def begin(self) -> None:
        """Start a transaction; nested calls only bump the counter."""
        if self.transaction_depth == 0:
            self.exec("BEGIN TRANSACTION")
            logger.debug("transaction_begin", path=str(self.path))
        self.transaction_depth += 1

    def commit(self) -> None:
        """Commit once the outermost begin() is matched.

        Raises:
            TransactionError: if there is no open transaction
        """
        if self.transaction_depth == 0:
            raise TransactionError("commit() without a matching begin()")
        if self.transaction_depth == 1:
            try:
                self.exec("COMMIT")
            except QueryFailed:
                # A failed COMMIT (e.g. a deferred constraint) leaves the
                # transaction open in SQLite.
                self.rollback()
                raise
            logger.debug("transaction_commit", path=str(self.path))
        self.transaction_depth -= 1

    def rollback(self) -> None:
        """Abandon the whole transaction, however deeply nested."""
        if self.transaction_depth == 0:
            return
        self.transaction_depth = 0
        if self.connection.in_transaction:
            self.exec("ROLLBACK")
        logger.debug("transaction_rollback", path=str(self.path))

    @contextmanager
    def transaction(self) -> Iterator["Database"]:
        """begin() on entry; commit() on success, rollback() on error.

        A failing commit() rolls back before re-raising.
        """
        self.begin()
        try:
            yield self
        except BaseException:
            self.rollback()
            raise
        else:
            self.commit()

    # ------------------------------------------------------------------
    # Schema and functions
    # ------------------------------------------------------------------

    def is_table(self, table: str) -> bool:
        """True if a table (persistent or temporary) with this name exists."""
        sql = (
            "SELECT name FROM ("
            "SELECT name FROM sqlite_master WHERE type='table' "
            "UNION ALL "
            "SELECT name FROM sqlite_temp_master WHERE type='table'"
            f") WHERE name = {self.literal(table)}"
        )
        return self.fetch(self.query(sql)) is not None

    def create_function(self, name: str, func, num_args: int = -1) -> None:
        """Expose a Python callable to SQL under the given name."""
        self.functions.register(name, func, num_args)
        self.connection.create_function(name, num_args, func)

    def create_aggregate(self, name: str, aggregate_class: Type, num_args: int = -1) -> None:
        """Register an aggregate (a class with step() and finalize())."""
        self.connection.create_aggregate(name, num_args, aggregate_class)

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    @staticmethod
    def fetch(cursor: sqlite3.Cursor) -> Optional[Dict[str, Any]]:
        """Next row as a dict, or None when the result set is exhausted."""
        row = cursor.fetchone()
        if row is None:
            return None
        return dict(row)

    @staticmethod
    def fetchall(cursor: sqlite3.Cursor) -> List[Dict[str, Any]]:
        return [dict(row) for row in cursor.fetchall()]

    @staticmethod
    def fetch_single_array(cursor: sqlite3.Cursor) -> List[Any]:
        """First column of every remaining row."""
        return [row[0] for row in cursor.fetchall()]

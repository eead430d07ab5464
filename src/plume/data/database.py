"""Synchronous SQLite access over one shared connection.

SQL in, plain row dicts out. Not an ORM.

Connection URL format::

    sqlite:///path/to/db.sqlite    # SQLite file
    sqlite:///:memory:             # In-memory SQLite

The ``Database`` is handed explicitly to whatever needs it (the app,
then each request's controller, then each model). There is no
process-wide accessor.

Thread safety:
    Requests run in a worker thread, so the connection is opened with
    ``check_same_thread=False`` and every statement runs under a
    ``threading.Lock``.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
import time
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from plume.data.errors import DataError, QueryError

logger = logging.getLogger("plume.data")

Row = dict[str, Any]


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    """Database connection configuration."""

    url: str
    echo: bool = False


class Database:
    """Shared SQLite connection with a small, parameter-binding query API.

    Usage::

        db = Database("sqlite:///app.db")
        db.connect()

        # Fetch all
        articles = db.fetch("SELECT * FROM articles ORDER BY id DESC")

        # Fetch one (None when nothing matches)
        article = db.fetch_one("SELECT * FROM articles WHERE id = ?", 42)

        # Execute (INSERT/UPDATE/DELETE)
        db.execute("INSERT INTO articles (title, content) VALUES (?, ?)", "Hi", "...")

        db.disconnect()

    Values are always passed separately from the SQL and bound by the
    driver; nothing here formats user input into a statement.
    """

    __slots__ = ("_config", "_conn", "_lock", "_path")

    def __init__(self, url: str, /, *, echo: bool = False) -> None:
        self._config = DatabaseConfig(url=url, echo=echo)
        self._path = _parse_sqlite_path(url)
        self._lock = threading.Lock()
        self._conn: sqlite3.Connection | None = None

    @property
    def url(self) -> str:
        return self._config.url

    @property
    def connected(self) -> bool:
        return self._conn is not None

    # -- Lifecycle --

    def connect(self) -> None:
        """Open the connection. Calling it twice is a no-op."""
        with self._lock:
            if self._conn is not None:
                return
            try:
                conn = sqlite3.connect(self._path, autocommit=True, check_same_thread=False)
            except sqlite3.Error as exc:
                msg = f"Cannot open database {self._config.url!r}: {exc}"
                raise DataError(msg) from exc
            conn.row_factory = _dict_factory
            conn.execute("PRAGMA foreign_keys=ON")
            self._conn = conn
            logger.debug("Connected to %s", self._config.url)

    def disconnect(self) -> None:
        """Close the connection. Calling it twice is a no-op."""
        with self._lock:
            if self._conn is None:
                return
            self._conn.close()
            self._conn = None
            logger.debug("Disconnected from %s", self._config.url)

    def __enter__(self) -> Database:
        self.connect()
        return self

    def __exit__(self, *_: Any) -> None:
        self.disconnect()

    # -- Query API --

    def fetch(self, sql: str, /, *params: Any) -> list[Row]:
        """Execute a query and return every row as a dict."""
        with self._statement(sql, params) as conn:
            return conn.execute(sql, params).fetchall()

    def fetch_one(self, sql: str, /, *params: Any) -> Row | None:
        """Execute a query and return the first row, or ``None``."""
        with self._statement(sql, params) as conn:
            return conn.execute(sql, params).fetchone()

    def fetch_val(self, sql: str, /, *params: Any) -> Any:
        """Execute a query and return the first column of the first row.

        Useful for COUNT, SUM, MAX, etc.
        """
        row = self.fetch_one(sql, *params)
        if row is None:
            return None
        return next(iter(row.values()))

    def execute(self, sql: str, /, *params: Any) -> int:
        """Execute a statement (INSERT/UPDATE/DELETE) and return rows affected."""
        with self._statement(sql, params) as conn:
            return conn.execute(sql, params).rowcount

    def execute_script(self, sql: str, /) -> None:
        """Execute several ``;``-separated statements at once (migrations)."""
        with self._statement(sql, ()) as conn:
            conn.executescript(sql)

    # -- Internal --

    @contextmanager
    def _statement(self, sql: str, params: Sequence[Any]) -> Iterator[sqlite3.Connection]:
        """Serialize access to the connection and normalize driver errors."""
        t0 = time.perf_counter()
        with self._lock:
            if self._conn is None:
                msg = f"Database {self._config.url!r} is not connected. Call connect() first."
                raise DataError(msg)
            try:
                yield self._conn
            except sqlite3.Error as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, params, time.perf_counter() - t0)

    def _log_query(self, sql: str, params: Sequence[Any], elapsed: float) -> None:
        if not self._config.echo:
            return
        param_str = f"  params={tuple(params)!r}" if params else ""
        logger.info("%6.1fms  %s%s", elapsed * 1000, sql, param_str)


def _dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> Row:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def _parse_sqlite_path(url: str) -> str:
    """Extract the file path from a sqlite:// URL."""
    # sqlite:///path/to/db  ->  path/to/db
    # sqlite:///:memory:    ->  :memory:
    prefix = "sqlite:///"
    if url.startswith(prefix):
        return url[len(prefix) :]
    prefix_short = "sqlite://"
    if url.startswith(prefix_short):
        return url[len(prefix_short) :]
    msg = f"Unsupported database URL: {url!r}. Supported: sqlite:///path, sqlite:///:memory:"
    raise DataError(msg)

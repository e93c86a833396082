"""SQLite connection factory and transaction scope.

Usage::

    from backend.db.connection import get_connection, init_db, transaction

    conn = get_connection()
    with transaction(conn):
        conn.execute("DELETE FROM pages WHERE id = ?", (page_id,))

One connection is shared by every crawler worker thread.  Writes are
serialised by the connection's re-entrant lock: only the outermost
``transaction()`` commits, so store helpers can be composed into a larger
atomic unit (e.g. "insert page + index its lemmas").
"""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from backend.config import settings


class LockedConnection(sqlite3.Connection):
    """A :class:`sqlite3.Connection` carrying a write lock and nesting depth."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.lock = threading.RLock()
        self.depth = 0


def get_connection(db_path: Optional[Path] = None) -> LockedConnection:
    """Open and configure a SQLite connection.

    Steps performed on every new connection:
    1. Enable ``PRAGMA foreign_keys = ON``.
    2. Switch to WAL journal mode for concurrent readers.

    Args:
        db_path: Override the DB path.  Defaults to ``settings.db_path``.

    Returns:
        A configured :class:`LockedConnection` with ``row_factory`` set to
        :class:`sqlite3.Row` so columns can be accessed by name.
    """
    path = db_path or settings.db_path

    # Create parent directory if needed (no-op for `:memory:`)
    if str(path) != ":memory:":
        settings.ensure_workspace()

    conn = sqlite3.connect(
        str(path), check_same_thread=False, factory=LockedConnection
    )
    conn.row_factory = sqlite3.Row

    conn.execute("PRAGMA foreign_keys = ON")
    conn.execute("PRAGMA journal_mode = WAL")

    return conn  # type: ignore[return-value]


@contextmanager
def transaction(conn: LockedConnection) -> Iterator[LockedConnection]:
    """Run the enclosed statements as one atomic unit.

    The outermost scope commits on success and rolls back on any exception;
    nested scopes simply join the enclosing transaction.
    """
    with conn.lock:
        conn.depth += 1
        try:
            if conn.depth > 1:
                yield conn
            else:
                with conn:
                    yield conn
        finally:
            conn.depth -= 1


def init_db(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes from ``schema.sql``.

    Every DDL statement uses ``IF NOT EXISTS``, so this is safe to call on an
    existing database.
    """
    conn.executescript(settings.schema_path.read_text(encoding="utf-8"))

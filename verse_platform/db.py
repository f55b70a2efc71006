from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator
from urllib.parse import urlparse

from verse_platform.errors import StoreError
from verse_platform.schema import get_schema_sql


def _debug(msg: str) -> None:
    print(f"[db] {msg}")


def _sqlite_path(dsn: str) -> str:
    """Return the filesystem path for a SQLite DSN.

    Accepts a plain path or sqlite:///path. Anything with another scheme is
    rejected up front rather than being treated as a file name.
    """
    s = (dsn or "").strip()
    if not s:
        raise StoreError("database_dsn_blank")
    if s.lower().startswith("sqlite:///"):
        return s[len("sqlite:///") :]
    scheme = urlparse(s).scheme.lower()
    # Windows drive letters parse as a one-letter scheme.
    if scheme and len(scheme) > 1:
        raise StoreError(f"unsupported_database_scheme: {scheme}")
    return s


@contextmanager
def connect(db_dsn: str, *, immediate: bool = False) -> Iterator[Any]:
    """Open a SQLite connection with sensible defaults.

    - WAL + NORMAL sync, 5s busy timeout (safe for several API workers).
    - Rows are sqlite3.Row, so they behave like dicts.
    - Commits on success, rolls back on any error.
    - immediate=True opens the transaction with BEGIN IMMEDIATE, taking the
      write lock before the first read. Concurrent writers wait on each other.

    Any sqlite3.Error (including failing to open the file) is re-raised as
    StoreError so callers can tell a broken store from an empty result.
    """
    path = _sqlite_path(db_dsn)

    try:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(path, timeout=30, check_same_thread=False)
    except (OSError, sqlite3.Error) as e:
        raise StoreError(str(e)) from e

    conn.row_factory = sqlite3.Row
    try:
        # Concurrency / performance pragmas
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        conn.execute("PRAGMA busy_timeout=5000;")  # 5s
        conn.execute("PRAGMA foreign_keys = ON;")
        if immediate:
            conn.execute("BEGIN IMMEDIATE")
        yield conn
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        raise StoreError(str(e)) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_dsn: str) -> None:
    """Create all tables (idempotent)."""
    _debug(f"Initializing DB at {db_dsn}")
    with connect(db_dsn) as conn:
        conn.executescript(get_schema_sql())

"""Likes and per-verse counts.

Each function is one parameterized statement, except `toggle_like`, which
composes find/delete/insert and expects the caller's connection to hold the
write lock (`connect(..., immediate=True)`).
"""

from __future__ import annotations

from typing import Any

from verse_platform.util.time import utcnow_iso


def find_like(conn: Any, verse_id: str, user_id: str) -> bool:
    row = conn.execute(
        "SELECT 1 FROM likes WHERE verse_id=? AND user_id=?",
        (verse_id, user_id),
    ).fetchone()
    return row is not None


def insert_like(conn: Any, verse_id: str, user_id: str) -> bool:
    """Insert the like. Returns False if it already existed (no duplicate row)."""
    cur = conn.execute(
        """
        INSERT INTO likes (verse_id, user_id, created_at) VALUES (?, ?, ?)
        ON CONFLICT(verse_id, user_id) DO NOTHING
        """,
        (verse_id, user_id, utcnow_iso()),
    )
    return cur.rowcount > 0


def delete_like(conn: Any, verse_id: str, user_id: str) -> bool:
    cur = conn.execute(
        "DELETE FROM likes WHERE verse_id=? AND user_id=?",
        (verse_id, user_id),
    )
    return cur.rowcount > 0


def toggle_like(conn: Any, verse_id: str, user_id: str) -> bool:
    """Flip the like for (verse_id, user_id). Returns True if it is now liked.

    Run inside `connect(dsn, immediate=True)`: the read and the write then
    share one write-locked transaction, so two concurrent toggles apply one
    after the other instead of both seeing the same starting state.
    """
    if find_like(conn, verse_id, user_id):
        delete_like(conn, verse_id, user_id)
        return False
    insert_like(conn, verse_id, user_id)
    return True


def count_likes(conn: Any, verse_id: str) -> int:
    row = conn.execute(
        "SELECT COUNT(*) AS n FROM likes WHERE verse_id=?",
        (verse_id,),
    ).fetchone()
    return int(row["n"])


def count_comments(conn: Any, verse_id: str) -> int:
    row = conn.execute(
        "SELECT COUNT(*) AS n FROM comments WHERE verse_id=?",
        (verse_id,),
    ).fetchone()
    return int(row["n"])

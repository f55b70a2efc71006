"""Database schema for the Verse Platform.

Timestamps are ISO-8601 TEXT (UTC, with 'Z'), which sorts lexicographically
in time order.

Comments are written by another service; this backend only counts them, but
the table is created here so a fresh database can answer verse reads.
"""

from __future__ import annotations


DEFAULT_BIO = "Loves the Word of God."


SCHEMA_SQLITE = r"""
PRAGMA foreign_keys = ON;

-- Users / Auth
-- id is a server-generated uuid4 string. password_hash is never the plaintext.
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    email TEXT NOT NULL UNIQUE,
    username TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    bio TEXT NOT NULL DEFAULT 'Loves the Word of God.',
    created_at TEXT NOT NULL
);

-- One row per (verse, user): existence is the "liked" flag.
-- user_id is the token subject; it is not re-checked against users.
CREATE TABLE IF NOT EXISTS likes (
    verse_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    created_at TEXT NOT NULL,
    PRIMARY KEY (verse_id, user_id)
);
CREATE INDEX IF NOT EXISTS idx_likes_verse ON likes (verse_id);

CREATE TABLE IF NOT EXISTS comments (
    id TEXT PRIMARY KEY,
    verse_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    body TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_comments_verse ON comments (verse_id, created_at);
"""


def get_schema_sql() -> str:
    return SCHEMA_SQLITE

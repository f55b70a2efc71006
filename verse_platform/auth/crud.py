from __future__ import annotations

import sqlite3
import uuid
from typing import Any, Optional

from passlib.context import CryptContext

from verse_platform.errors import ConflictError, StoreError
from verse_platform.models import User
from verse_platform.schema import DEFAULT_BIO
from verse_platform.util.time import utcnow_iso

from .security import hash_password, needs_rehash, verify_password


def get_user_by_email(conn: Any, email: str) -> Optional[User]:
    # Emails are matched exactly as stored (no case folding).
    if not email:
        return None
    row = conn.execute(
        "SELECT * FROM users WHERE email=?",
        (email,),
    ).fetchone()
    return User.from_row(row) if row is not None else None


def get_user_by_id(conn: Any, user_id: str) -> Optional[User]:
    row = conn.execute(
        "SELECT * FROM users WHERE id=?",
        (str(user_id),),
    ).fetchone()
    return User.from_row(row) if row is not None else None


def insert_user(
    conn: Any,
    *,
    user_id: str,
    email: str,
    username: str,
    password_hash: str,
    bio: str = DEFAULT_BIO,
) -> None:
    """Insert one user row.

    The UNIQUE constraints on email/username are the uniqueness check: a
    duplicate fails the single INSERT and nothing is written.
    """
    try:
        conn.execute(
            """
            INSERT INTO users (id, email, username, password_hash, bio, created_at)
            VALUES (?,?,?,?,?,?)
            """,
            (user_id, email, username, password_hash, bio, utcnow_iso()),
        )
    except sqlite3.IntegrityError as e:
        if "UNIQUE constraint failed" in str(e):
            raise ConflictError("Email or username already exists") from e
        raise StoreError(str(e)) from e


def create_user(
    conn: Any,
    *,
    email: str,
    username: str,
    password: str,
    bio: str = DEFAULT_BIO,
    ctx: CryptContext | None = None,
) -> User:
    user_id = str(uuid.uuid4())
    insert_user(
        conn,
        user_id=user_id,
        email=email,
        username=username,
        password_hash=hash_password(password, ctx=ctx),
        bio=bio,
    )
    user = get_user_by_id(conn, user_id)
    assert user is not None
    return user


def update_password_hash(conn: Any, user_id: str, password_hash: str) -> None:
    conn.execute(
        "UPDATE users SET password_hash=? WHERE id=?",
        (password_hash, str(user_id)),
    )


def verify_user_credentials(
    conn: Any,
    email: str,
    password: str,
    *,
    ctx: CryptContext | None = None,
) -> Optional[User]:
    """Return the user if email/password match, else None.

    Unknown email and wrong password are indistinguishable to the caller.
    On success, a hash stored under a deprecated scheme is replaced.
    """
    user = get_user_by_email(conn, email)
    if user is None:
        return None
    if not verify_password(password, user.password_hash, ctx=ctx):
        return None
    if needs_rehash(user.password_hash, ctx=ctx):
        update_password_hash(conn, user.id, hash_password(password, ctx=ctx))
    return user

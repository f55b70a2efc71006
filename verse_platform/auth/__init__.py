"""Authentication / authorization helpers.

Auth is intentionally lightweight:

- users table (email/username/password hash)
- JWT access tokens (HS256, 24h), no server-side session store

Clients send `Authorization: Bearer <token>`. Protected routes list their
guards explicitly (see `AUTH_GUARDS`); a failing guard ends the request with
a 401 before the handler runs.
"""

from .deps import AUTH_GUARDS, bearer_token, get_current_user_id
from .crud import create_user, get_user_by_email, verify_user_credentials

__all__ = [
    "AUTH_GUARDS",
    "bearer_token",
    "get_current_user_id",
    "create_user",
    "get_user_by_email",
    "verify_user_credentials",
]

from __future__ import annotations

from typing import Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from verse_platform.errors import BearerAuthError, InternalError

from .security import decode_access_token


_bearer = HTTPBearer(auto_error=False)

MISSING_HEADER = "Missing or invalid authorization header"
INVALID_TOKEN = "Invalid token"


def _unauthorized(message: str) -> BearerAuthError:
    return BearerAuthError(message, headers={"WWW-Authenticate": "Bearer"})


def bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> str:
    """First guard: an `Authorization: Bearer <token>` header must be present.

    HTTPBearer (auto_error=False) yields None for a missing header, a non-Bearer
    scheme, or an empty token; all three are the same rejection.
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized(MISSING_HEADER)
    return credentials.credentials


def get_current_user_id(request: Request, token: str = Depends(bearer_token)) -> str:
    """Second guard: the token must verify against the configured secret.

    Attaches the subject to `request.state.user_id` and returns it. Never reads
    the users table; a valid signature is the whole check.
    """
    cfg = getattr(request.app.state, "cfg", None)
    if cfg is None or not cfg.AUTH_JWT_SECRET:
        raise InternalError("JWT_SECRET not configured")

    try:
        payload = decode_access_token(
            token=token,
            secret=cfg.AUTH_JWT_SECRET,
            leeway=cfg.AUTH_TOKEN_LEEWAY_SECONDS,
        )
    except jwt.InvalidTokenError:
        raise _unauthorized(INVALID_TOKEN)

    sub = payload.get("sub")
    if not sub or not isinstance(sub, str):
        raise _unauthorized(INVALID_TOKEN)

    request.state.user_id = sub
    return sub


# Ordered guard chain for routes that need a logged-in user. Each guard either
# returns or raises; the handler only runs when all of them pass.
AUTH_GUARDS = [Depends(bearer_token), Depends(get_current_user_id)]

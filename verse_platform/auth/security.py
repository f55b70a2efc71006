from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict

import jwt
from passlib.context import CryptContext

from verse_platform.util.time import utcnow


_JWT_ALG = "HS256"
TOKEN_TTL = timedelta(hours=24)

# hex_sha256 is a bare, unsalted SHA-256 hex digest. It is what the existing
# users table holds, so it stays the default until AUTH_PASSWORD_SCHEME says
# otherwise.
PASSWORD_SCHEMES = ("hex_sha256", "pbkdf2_sha256")
DEFAULT_PASSWORD_SCHEME = "hex_sha256"


def password_context(scheme: str = DEFAULT_PASSWORD_SCHEME) -> CryptContext:
    """Build the passlib context for new hashes.

    Every known scheme still verifies. When the default is upgraded away from
    hex_sha256, hex digests are marked deprecated so `needs_rehash` flags them.
    """
    if scheme not in PASSWORD_SCHEMES:
        raise ValueError(f"unknown_password_scheme: {scheme}")
    deprecated = ["hex_sha256"] if scheme != "hex_sha256" else []
    return CryptContext(schemes=list(PASSWORD_SCHEMES), default=scheme, deprecated=deprecated)


_pwd = password_context()


def hash_password(password: str, *, ctx: CryptContext | None = None) -> str:
    if not password:
        raise ValueError("password_blank")
    return (ctx or _pwd).hash(password)


def verify_password(password: str, password_hash: str, *, ctx: CryptContext | None = None) -> bool:
    if not password or not password_hash:
        return False
    try:
        return (ctx or _pwd).verify(password, password_hash)
    except (ValueError, TypeError):
        # Unrecognized hash format.
        return False


def needs_rehash(password_hash: str, *, ctx: CryptContext | None = None) -> bool:
    try:
        return (ctx or _pwd).needs_update(password_hash)
    except (ValueError, TypeError):
        return False


def create_access_token(
    *,
    secret: str,
    user_id: str,
    now: datetime | None = None,
) -> str:
    """Issue a signed access token for `user_id`, valid for 24 hours."""
    if not secret:
        raise ValueError("jwt_secret_blank")
    if not user_id:
        raise ValueError("user_id_blank")

    issued = now or utcnow()
    exp = issued + TOKEN_TTL

    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "iat": int(issued.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=_JWT_ALG)


def decode_access_token(*, token: str, secret: str, leeway: int = 0) -> Dict[str, Any]:
    """Verify signature and expiry and return the claims.

    Raises jwt.InvalidTokenError (or a subclass: ExpiredSignatureError,
    DecodeError, MissingRequiredClaimError, ...) on any rejection.
    """
    if not token:
        raise jwt.InvalidTokenError("token_blank")
    if not secret:
        raise ValueError("jwt_secret_blank")
    return jwt.decode(
        token,
        secret,
        algorithms=[_JWT_ALG],
        leeway=max(0, int(leeway)),
        options={"require": ["sub", "iat", "exp"]},
    )

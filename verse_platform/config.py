import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load a local .env file if present (no-op otherwise).
load_dotenv()


def _env_bool(name: str, default: Optional[bool] = None) -> Optional[bool]:
    """Parse a boolean environment variable.

    Returns:
      - True/False if the env var is set to a recognizable value
      - default if unset or unrecognized

    Accepted truthy: 1, true, yes, y, on
    Accepted falsy:  0, false, no, n, off
    """

    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in ("1", "true", "yes", "y", "on"):
        return True
    if v in ("0", "false", "no", "n", "off"):
        return False
    return default


def _env_int(name: str, default: int) -> int:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    return int(raw)


@dataclass(frozen=True)
class Config:
    """Runtime configuration.

    IMPORTANT: Provide the JWT secret via environment variables or a .env file.
    Do not hardcode secrets in source code.
    """

    # -----------------
    # Core
    # -----------------
    # SQLite path (or sqlite:///path). VERSE_DATABASE_URL wins over DATABASE_URL.
    DB_DSN: str = (
        os.environ.get("VERSE_DATABASE_URL")
        or os.environ.get("DATABASE_URL")
        or os.environ.get("VERSE_DB_PATH", "./verse_platform.sqlite")
    )

    API_TITLE: str = os.environ.get("API_TITLE", "Verse Platform")

    # -----------------
    # Auth (JWT)
    # -----------------
    # No default. Without a secret the API answers every request with a 500.
    AUTH_JWT_SECRET: str | None = (
        os.environ.get("JWT_SECRET") or os.environ.get("AUTH_JWT_SECRET") or ""
    ).strip() or None

    # Clock skew tolerance when checking exp/iat. 0 = strict.
    AUTH_TOKEN_LEEWAY_SECONDS: int = _env_int("AUTH_TOKEN_LEEWAY_SECONDS", 0)

    # hex_sha256 (unsalted, matches hashes already stored by the app) or
    # pbkdf2_sha256 (salted; legacy hex hashes are upgraded on next login).
    AUTH_PASSWORD_SCHEME: str = os.environ.get("AUTH_PASSWORD_SCHEME", "hex_sha256")

    # -----------------
    # CORS (development)
    # -----------------
    # Comma-separated origins. Empty = no CORS middleware (same-origin deploy).
    CORS_ALLOW_ORIGINS: str = os.environ.get("CORS_ALLOW_ORIGINS", "")
    CORS_ALLOW_CREDENTIALS: bool = _env_bool("CORS_ALLOW_CREDENTIALS", False) is True


def load_config() -> Config:
    return Config()

"""Error taxonomy shared by the store adapters, auth guards and API handlers.

Every error the API knows how to classify is an ``ApiError``. The server
installs one exception handler that turns it into a response: a short plain
text body by default, or ``{"error": message}`` JSON for guard rejections.
Anything that is not an ``ApiError`` ends up as a generic 500.
"""

from __future__ import annotations

from typing import Dict, Optional


class ApiError(Exception):
    status_code: int = 500
    json_body: bool = False

    def __init__(self, message: str, *, headers: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.headers = headers


class ValidationError(ApiError):
    status_code = 400


class ConflictError(ApiError):
    status_code = 409


class AuthError(ApiError):
    """Bad credentials. Messages are deliberately uninformative."""

    status_code = 401


class BearerAuthError(AuthError):
    """Rejected by the bearer-token guard (rendered as JSON)."""

    json_body = True


class NotFoundError(ApiError):
    status_code = 404


class InternalError(ApiError):
    status_code = 500


class StoreError(InternalError):
    """The database failed (as opposed to "no row found")."""

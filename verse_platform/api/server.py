from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from passlib.context import CryptContext
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from verse_platform import __version__
from verse_platform.auth import AUTH_GUARDS, create_user, verify_user_credentials
from verse_platform.auth.security import create_access_token, password_context
from verse_platform.config import Config, load_config
from verse_platform.db import connect, init_db
from verse_platform.errors import ApiError, AuthError, NotFoundError, ValidationError
from verse_platform.models import VerseRef
from verse_platform.verses.crud import count_comments, count_likes, toggle_like


def _debug(msg: str) -> None:
    print(f"[api] {msg}")


router = APIRouter()


def get_config(request: Request) -> Config:
    return request.app.state.cfg


def get_password_context(request: Request) -> CryptContext:
    return request.app.state.pwd


# -----------------------------
# Auth
# -----------------------------


class RegisterRequest(BaseModel):
    # Optional so a missing field is our 400 message, not a schema error.
    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


@router.post("/api/register", status_code=201)
def register(
    payload: RegisterRequest,
    cfg: Config = Depends(get_config),
    pwd: CryptContext = Depends(get_password_context),
) -> Dict[str, Any]:
    """Create an account. Does not log the user in."""
    if not (payload.email and payload.username and payload.password):
        raise ValidationError("Email, username, and password are required")

    with connect(cfg.DB_DSN) as conn:
        create_user(
            conn,
            email=payload.email,
            username=payload.username,
            password=payload.password,
            ctx=pwd,
        )
    return {"message": "User created successfully"}


@router.post("/api/login")
def login(
    payload: LoginRequest,
    cfg: Config = Depends(get_config),
    pwd: CryptContext = Depends(get_password_context),
) -> Dict[str, Any]:
    if not (payload.email and payload.password):
        raise ValidationError("Email and password are required")

    with connect(cfg.DB_DSN) as conn:
        user = verify_user_credentials(conn, payload.email, payload.password, ctx=pwd)

    if user is None:
        raise AuthError("Invalid credentials")

    token = create_access_token(secret=cfg.AUTH_JWT_SECRET or "", user_id=user.id)
    return {"token": token}


# -----------------------------
# Verses
# -----------------------------


def _count(dsn: str, counter: Callable[[Any, str], int], verse_id: str) -> int:
    with connect(dsn) as conn:
        return counter(conn, verse_id)


@router.get("/api/verse/{book}/{chapter}/{verse}")
async def verse_interactions(
    book: str,
    chapter: str,
    verse: str,
    cfg: Config = Depends(get_config),
) -> Dict[str, Any]:
    """Like and comment counts for one verse (public)."""
    verse_id = VerseRef(book, chapter, verse).verse_id
    likes, comments = await asyncio.gather(
        run_in_threadpool(_count, cfg.DB_DSN, count_likes, verse_id),
        run_in_threadpool(_count, cfg.DB_DSN, count_comments, verse_id),
    )
    return {"likes": likes, "comments": comments}


@router.post("/api/verse/{book}/{chapter}/{verse}/like", dependencies=AUTH_GUARDS)
def toggle_verse_like(
    book: str,
    chapter: str,
    verse: str,
    request: Request,
    cfg: Config = Depends(get_config),
) -> Any:
    """Like the verse if the caller hasn't yet, otherwise unlike it."""
    verse_id = VerseRef(book, chapter, verse).verse_id
    user_id = request.state.user_id

    with connect(cfg.DB_DSN, immediate=True) as conn:
        liked = toggle_like(conn, verse_id, user_id)

    if liked:
        return JSONResponse({"message": "Liked"}, status_code=201)
    return {"message": "Unliked"}


# -----------------------------
# App
# -----------------------------


def _render_error(request: Request, exc: ApiError) -> Response:
    if exc.status_code >= 500:
        _debug(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    if exc.json_body:
        return JSONResponse({"error": exc.message}, status_code=exc.status_code, headers=exc.headers)
    return PlainTextResponse(exc.message, status_code=exc.status_code, headers=exc.headers)


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def _api_error(request: Request, exc: ApiError) -> Response:
        return _render_error(request, exc)

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(request: Request, exc: RequestValidationError) -> Response:
        return _render_error(request, ValidationError("Invalid request body"))

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> Response:
        # Unknown path or unsupported method on a known path: same fallback.
        if exc.status_code in (404, 405):
            return _render_error(request, NotFoundError("Not Found."))
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> Response:
        _debug(f"{request.method} {request.url.path} -> 500: {type(exc).__name__}: {exc}")
        return PlainTextResponse("Internal Server Error", status_code=500)


def create_app(cfg: Config | None = None) -> FastAPI:
    cfg = cfg or load_config()

    @asynccontextmanager
    async def _lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if not cfg.AUTH_JWT_SECRET:
            _debug("JWT_SECRET is not set; every request will be answered with 500")
        # Ensure schema exists.
        init_db(cfg.DB_DSN)
        yield

    app = FastAPI(title=cfg.API_TITLE, version=__version__, lifespan=_lifespan)
    # Read-only after this point.
    app.state.cfg = cfg
    app.state.pwd = password_context(cfg.AUTH_PASSWORD_SCHEME)

    _cors_origins = [o.strip() for o in (cfg.CORS_ALLOW_ORIGINS or "").split(",") if o.strip()]
    if _cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=_cors_origins,
            allow_credentials=cfg.CORS_ALLOW_CREDENTIALS,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def _require_signing_secret(request: Request, call_next: Any) -> Response:
        # Fail closed: no secret, no service.
        if not cfg.AUTH_JWT_SECRET:
            return PlainTextResponse("JWT_SECRET not configured", status_code=500)
        return await call_next(request)

    _install_error_handlers(app)
    app.include_router(router)
    return app


app = create_app()

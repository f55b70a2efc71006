"""
API tests for the HTTP surface (verse_platform.api.server).

Covers:
- POST /api/register, POST /api/login
- GET /api/verse/{book}/{chapter}/{verse}
- POST /api/verse/{book}/{chapter}/{verse}/like (bearer-protected)
- 404 fallback and the missing-secret kill switch
"""

from fastapi.testclient import TestClient

from verse_platform.api.server import create_app
from verse_platform.auth.security import decode_access_token
from verse_platform.db import connect

from tests.conftest import TEST_SECRET, auth_header, login, make_config, register


def _user_id(cfg, email="a@b.com"):
    with connect(cfg.DB_DSN) as conn:
        return conn.execute("SELECT id FROM users WHERE email=?", (email,)).fetchone()["id"]


# =============================================================================
# Registration
# =============================================================================


class TestRegister:
    def test_created(self, client, cfg):
        resp = register(client)
        assert resp.status_code == 201
        assert resp.json() == {"message": "User created successfully"}
        # No auto-login.
        assert "token" not in resp.json()
        assert _user_id(cfg)

    def test_missing_fields(self, client):
        for body in (
            {"username": "alice", "password": "hunter22"},
            {"email": "a@b.com", "password": "hunter22"},
            {"email": "a@b.com", "username": "alice"},
            {"email": "", "username": "alice", "password": "hunter22"},
            {},
        ):
            resp = client.post("/api/register", json=body)
            assert resp.status_code == 400
            assert resp.text == "Email, username, and password are required"

    def test_body_not_json(self, client):
        resp = client.post("/api/register", content=b"email=a@b.com", headers={"Content-Type": "application/json"})
        assert resp.status_code == 400

    def test_duplicate_email(self, client):
        assert register(client).status_code == 201
        resp = register(client, username="alice2")
        assert resp.status_code == 409
        assert resp.text == "Email or username already exists"
        # The original account is untouched.
        assert login(client).status_code == 200

    def test_duplicate_username(self, client):
        assert register(client).status_code == 201
        resp = register(client, email="c@d.com")
        assert resp.status_code == 409

    def test_store_error_surfaces_as_500(self, client, cfg):
        with connect(cfg.DB_DSN) as conn:
            conn.execute("DROP TABLE users")
        resp = register(client)
        assert resp.status_code == 500
        assert "no such table" in resp.text


# =============================================================================
# Login
# =============================================================================


class TestLogin:
    def test_success_returns_verifiable_token(self, client, cfg):
        register(client)
        resp = login(client)
        assert resp.status_code == 200
        token = resp.json()["token"]
        claims = decode_access_token(token=token, secret=TEST_SECRET)
        assert claims["sub"] == _user_id(cfg)

    def test_wrong_password(self, client):
        register(client)
        resp = login(client, password="not-it")
        assert resp.status_code == 401
        assert resp.text == "Invalid credentials"

    def test_unknown_email_same_message(self, client):
        register(client)
        resp = login(client, email="nobody@b.com")
        assert resp.status_code == 401
        assert resp.text == "Invalid credentials"

    def test_missing_fields(self, client):
        resp = client.post("/api/login", json={"email": "a@b.com"})
        assert resp.status_code == 400
        assert resp.text == "Email and password are required"

    def test_login_with_pbkdf2_scheme(self, tmp_path):
        cfg = make_config(tmp_path, AUTH_PASSWORD_SCHEME="pbkdf2_sha256")
        with TestClient(create_app(cfg)) as client:
            assert register(client).status_code == 201
            assert login(client).status_code == 200
        with connect(cfg.DB_DSN) as conn:
            stored = conn.execute("SELECT password_hash FROM users").fetchone()["password_hash"]
        assert stored.startswith("$pbkdf2-sha256$")


# =============================================================================
# Verses
# =============================================================================


class TestVerseInteractions:
    def test_empty_counts(self, client):
        resp = client.get("/api/verse/john/3/16")
        assert resp.status_code == 200
        assert resp.json() == {"likes": 0, "comments": 0}

    def test_counts(self, client, cfg):
        with connect(cfg.DB_DSN) as conn:
            conn.execute(
                "INSERT INTO likes (verse_id, user_id, created_at) VALUES (?,?,?)",
                ("john-3-16", "u1", "2026-01-01T00:00:00Z"),
            )
            conn.execute(
                "INSERT INTO comments (id, verse_id, user_id, body, created_at) VALUES (?,?,?,?,?)",
                ("c1", "john-3-16", "u1", "Amen", "2026-01-01T00:00:00Z"),
            )
            conn.execute(
                "INSERT INTO comments (id, verse_id, user_id, body, created_at) VALUES (?,?,?,?,?)",
                ("c2", "john-3-16", "u2", "So good", "2026-01-01T00:00:00Z"),
            )
        resp = client.get("/api/verse/john/3/16")
        assert resp.json() == {"likes": 1, "comments": 2}
        assert client.get("/api/verse/john/3/17").json() == {"likes": 0, "comments": 0}


class TestToggleLike:
    def _token(self, client):
        register(client)
        return login(client).json()["token"]

    def test_like_unlike_flow(self, client):
        token = self._token(client)

        first = client.post("/api/verse/gen/1/1/like", headers=auth_header(token))
        assert first.status_code == 201
        assert first.json() == {"message": "Liked"}
        assert client.get("/api/verse/gen/1/1").json()["likes"] == 1

        second = client.post("/api/verse/gen/1/1/like", headers=auth_header(token))
        assert second.status_code == 200
        assert second.json() == {"message": "Unliked"}
        assert client.get("/api/verse/gen/1/1").json()["likes"] == 0

        third = client.post("/api/verse/gen/1/1/like")
        assert third.status_code == 401
        assert third.json() == {"error": "Missing or invalid authorization header"}
        assert client.get("/api/verse/gen/1/1").json()["likes"] == 0

    def test_invalid_token(self, client):
        resp = client.post("/api/verse/gen/1/1/like", headers=auth_header("abc.def.ghi"))
        assert resp.status_code == 401
        assert resp.json() == {"error": "Invalid token"}
        assert client.get("/api/verse/gen/1/1").json()["likes"] == 0

    def test_likes_are_per_user(self, client):
        token_a = self._token(client)
        register(client, email="c@d.com", username="carol")
        token_c = login(client, email="c@d.com").json()["token"]

        assert client.post("/api/verse/john/3/16/like", headers=auth_header(token_a)).status_code == 201
        assert client.post("/api/verse/john/3/16/like", headers=auth_header(token_c)).status_code == 201
        assert client.get("/api/verse/john/3/16").json()["likes"] == 2


# =============================================================================
# Fallback / boot
# =============================================================================


class TestFallback:
    def test_unknown_path(self, client):
        resp = client.get("/api/nope")
        assert resp.status_code == 404
        assert resp.text == "Not Found."

    def test_wrong_method(self, client):
        resp = client.get("/api/register")
        assert resp.status_code == 404
        assert resp.text == "Not Found."


class TestMissingSecret:
    def test_every_route_fails_closed(self, tmp_path):
        cfg = make_config(tmp_path, AUTH_JWT_SECRET=None)
        with TestClient(create_app(cfg)) as client:
            for method, path in (
                ("POST", "/api/register"),
                ("POST", "/api/login"),
                ("GET", "/api/verse/john/3/16"),
                ("POST", "/api/verse/john/3/16/like"),
                ("GET", "/anything"),
            ):
                resp = client.request(method, path, json={})
                assert resp.status_code == 500
                assert resp.text == "JWT_SECRET not configured"

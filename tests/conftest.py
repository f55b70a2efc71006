"""
Shared pytest fixtures for Verse Platform tests.

- cfg: a Config pointing at a throwaway SQLite file with a test secret
- db: the same DSN with the schema created
- client: FastAPI TestClient over a fresh app (startup hooks run)
"""

import os
import sys
from typing import Dict, Iterator

import pytest
from fastapi.testclient import TestClient

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from verse_platform.api.server import create_app
from verse_platform.config import Config
from verse_platform.db import init_db

# Test-only secret; production reads JWT_SECRET from the environment.
TEST_SECRET = "test-secret-key-that-is-at-least-32-characters-long"
OTHER_SECRET = "another-secret-key-that-is-at-least-32-characters"


def make_config(tmp_path, **overrides) -> Config:
    values = {
        "DB_DSN": str(tmp_path / "verse.sqlite"),
        "AUTH_JWT_SECRET": TEST_SECRET,
        "AUTH_TOKEN_LEEWAY_SECONDS": 0,
        "AUTH_PASSWORD_SCHEME": "hex_sha256",
        "CORS_ALLOW_ORIGINS": "",
    }
    values.update(overrides)
    return Config(**values)


@pytest.fixture
def cfg(tmp_path) -> Config:
    return make_config(tmp_path)


@pytest.fixture
def db(cfg: Config) -> str:
    init_db(cfg.DB_DSN)
    return cfg.DB_DSN


@pytest.fixture
def client(cfg: Config) -> Iterator[TestClient]:
    with TestClient(create_app(cfg)) as c:
        yield c


def register(client: TestClient, email: str = "a@b.com", username: str = "alice", password: str = "hunter22"):
    return client.post(
        "/api/register",
        json={"email": email, "username": username, "password": password},
    )


def login(client: TestClient, email: str = "a@b.com", password: str = "hunter22"):
    return client.post("/api/login", json={"email": email, "password": password})


def auth_header(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}

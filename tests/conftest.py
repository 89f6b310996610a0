# tests/conftest.py
"""
Shared fixtures: a fresh SQLite file per test and a TestClient that runs
the app lifespan (table creation / engine disposal) around each test.
"""
from __future__ import annotations

import os

# must happen before `config` is imported anywhere
os.environ.setdefault("ENV_NAME", "test")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-the-recipe-book-suite")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

import services.db as db_module
from config import settings
from main import app


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setattr(db_module, "_ENGINE", None)
    monkeypatch.setattr(db_module, "_SESSIONMAKER", None)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register(client):
    """register(name, email=..., password=...) -> auth response dict"""

    def _register(name: str = "Alice", email: str | None = None, password: str = "secret123"):
        email = email or f"{name.lower()}@example.com"
        r = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert r.status_code == 201, r.text
        return r.json()

    return _register


def bearer(auth: dict) -> dict[str, str]:
    return {"Authorization": f"Bearer {auth['token']}"}


@pytest.fixture
def alice(register):
    return register("Alice")


@pytest.fixture
def bob(register):
    return register("Bob")


@pytest.fixture
def admin(client, register):
    """A registered user promoted to admin straight in the database."""
    auth = register("Root", email="root@example.com")

    async def _promote() -> None:
        async with (await db_module.sessionmaker())() as db:
            user = await db.get(db_module.User, auth["id"])
            user.role = "admin"
            await db.commit()

    client.portal.call(_promote)
    auth["role"] = "admin"
    return auth


@pytest.fixture
def make_recipe(client):
    def _make(auth: dict, title: str = "Pancakes", **fields):
        r = client.post("/api/recipes", json={"title": title, **fields}, headers=bearer(auth))
        assert r.status_code == 201, r.text
        return r.json()

    return _make

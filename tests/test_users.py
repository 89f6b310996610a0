from __future__ import annotations

from conftest import bearer


def test_get_profile_on_both_paths(client, alice):
    for path in ("/api/users/profile", "/users/profile"):
        r = client.get(path, headers=bearer(alice))
        assert r.status_code == 200
        assert r.json()["name"] == "Alice"


def test_profile_requires_auth(client):
    assert client.get("/users/profile").status_code == 401


def test_update_profile_fields(client, alice):
    r = client.put(
        "/api/users/profile",
        json={"name": "Alice Liddell", "bio": "Loves tea", "avatar_url": "https://img/a.png"},
        headers=bearer(alice),
    )
    assert r.status_code == 200
    data = r.json()
    assert data["name"] == "Alice Liddell"
    assert data["bio"] == "Loves tea"
    assert data["token"]

    again = client.get("/api/users/profile", headers=bearer(alice)).json()
    assert again["avatar_url"] == "https://img/a.png"


def test_clear_bio_with_null(client, alice):
    client.put("/api/users/profile", json={"bio": "x"}, headers=bearer(alice))
    r = client.put("/api/users/profile", json={"bio": None}, headers=bearer(alice))
    assert r.status_code == 200
    assert r.json()["bio"] is None


def test_change_email_conflict(client, alice, bob):
    r = client.put(
        "/api/users/profile", json={"email": "bob@example.com"}, headers=bearer(alice)
    )
    assert r.status_code == 409


def test_change_email(client, alice):
    r = client.put(
        "/api/users/profile", json={"email": "New@Example.com"}, headers=bearer(alice)
    )
    assert r.status_code == 200
    assert r.json()["email"] == "new@example.com"
    login = client.post("/login", json={"email": "new@example.com", "password": "secret123"})
    assert login.status_code == 200


def test_change_password_needs_current_password(client, alice):
    r = client.put(
        "/api/users/profile", json={"password": "brandnew1"}, headers=bearer(alice)
    )
    assert r.status_code == 400

    r = client.put(
        "/api/users/profile",
        json={"password": "brandnew1", "current_password": "wrong"},
        headers=bearer(alice),
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Current password is incorrect"


def test_change_password(client, alice):
    r = client.put(
        "/api/users/profile",
        json={"password": "brandnew1", "current_password": "secret123"},
        headers=bearer(alice),
    )
    assert r.status_code == 200

    old = client.post("/login", json={"email": "alice@example.com", "password": "secret123"})
    new = client.post("/login", json={"email": "alice@example.com", "password": "brandnew1"})
    assert old.status_code == 401
    assert new.status_code == 200


def test_change_email_race(client, alice, bob, monkeypatch):
    async def _nobody(db, email):
        return None

    monkeypatch.setattr("api.users.get_user_by_email", _nobody)
    r = client.put(
        "/api/users/profile", json={"email": "bob@example.com"}, headers=bearer(alice)
    )
    assert r.status_code == 409
    assert r.json()["message"] == "Email is already in use"

    # the failed update left the session usable and the profile unchanged
    assert client.get("/api/users/profile", headers=bearer(alice)).json()["email"] == "alice@example.com"


def test_change_email_rejects_malformed(client, alice):
    r = client.put("/api/users/profile", json={"email": "a@b..c"}, headers=bearer(alice))
    assert r.status_code == 400

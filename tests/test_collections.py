from __future__ import annotations

from conftest import bearer


def _create(client, auth, name="Weeknight", **extra):
    r = client.post("/api/collections", json={"name": name, **extra}, headers=bearer(auth))
    assert r.status_code == 201, r.text
    return r.json()


def test_crud(client, alice):
    col = _create(client, alice, description="fast dinners")
    assert col["recipes"] == []
    assert col["owner_id"] == alice["id"]

    r = client.put(
        f"/api/collections/{col['id']}",
        json={"name": "Weeknight Dinners", "description": None},
        headers=bearer(alice),
    )
    assert r.status_code == 200
    assert r.json()["name"] == "Weeknight Dinners"
    assert r.json()["description"] is None

    _create(client, alice, name="Baking")
    names = [c["name"] for c in client.get("/collections", headers=bearer(alice)).json()]
    assert names == ["Baking", "Weeknight Dinners"]

    r = client.delete(f"/api/collections/{col['id']}", headers=bearer(alice))
    assert r.status_code == 200
    assert client.get(f"/api/collections/{col['id']}", headers=bearer(alice)).status_code == 404


def test_add_and_remove_recipes(client, alice, bob, make_recipe):
    col = _create(client, alice)
    mine = make_recipe(alice, "Tacos", calories=450)
    theirs = make_recipe(bob, "Arepas", is_public=True)

    r = client.post(f"/api/collections/{col['id']}/recipes/{mine['id']}", headers=bearer(alice))
    assert r.status_code == 201
    r = client.post(f"/api/collections/{col['id']}/recipes/{theirs['id']}", headers=bearer(alice))
    assert [x["title"] for x in r.json()["recipes"]] == ["Arepas", "Tacos"]

    dup = client.post(f"/api/collections/{col['id']}/recipes/{mine['id']}", headers=bearer(alice))
    assert dup.status_code == 409

    r = client.delete(f"/api/collections/{col['id']}/recipes/{mine['id']}", headers=bearer(alice))
    assert r.status_code == 200
    assert [x["title"] for x in r.json()["recipes"]] == ["Arepas"]

    again = client.delete(
        f"/api/collections/{col['id']}/recipes/{mine['id']}", headers=bearer(alice)
    )
    assert again.status_code == 404


def test_private_recipe_of_others_rejected(client, alice, bob, make_recipe):
    col = _create(client, alice)
    hidden = make_recipe(bob, "Hidden")
    r = client.post(f"/api/collections/{col['id']}/recipes/{hidden['id']}", headers=bearer(alice))
    assert r.status_code == 403


def test_other_users_collection_is_not_found(client, alice, bob):
    col = _create(client, alice)
    assert client.get(f"/api/collections/{col['id']}", headers=bearer(bob)).status_code == 404
    assert (
        client.put(f"/api/collections/{col['id']}", json={"name": "x"}, headers=bearer(bob)).status_code
        == 404
    )
    assert client.get("/api/collections", headers=bearer(bob)).json() == []

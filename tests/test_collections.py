from app.models import Comparison, SavedSearch

from conftest import make_property, make_user


# ----------------------------------------------------------------------------
# Favorites
# ----------------------------------------------------------------------------


def test_anonymous_lists_are_empty(client, prop):
    for path in ("/api/favorites", "/api/comparisons", "/api/saved-searches"):
        res = client.get(path)
        assert res.status_code == 200
        assert res.json() == [], path


def test_anonymous_writes_are_unauthorized(client, prop):
    assert client.post("/api/favorites", json={"propertyId": prop.id}).status_code == 401
    assert client.post("/api/comparisons", json={"propertyId": prop.id}).status_code == 401
    assert client.post("/api/saved-searches", json={"name": "x"}).status_code == 401


def test_favorite_add_is_idempotent_and_removable(client, prop, user, sign_in):
    sign_in(user)

    client.post("/api/favorites", json={"propertyId": prop.id})
    client.post("/api/favorites", json={"propertyId": prop.id})
    favorites = client.get("/api/favorites").json()

    assert [f["propertyId"] for f in favorites] == [prop.id]

    assert client.delete(f"/api/favorites/{prop.id}").json() == {"success": True}
    assert client.get("/api/favorites").json() == []


def test_favorites_are_per_user(client, db, prop, user, sign_in):
    other = make_user(db, "google-other")
    sign_in(other)
    client.post("/api/favorites", json={"propertyId": prop.id})

    sign_in(user)

    assert client.get("/api/favorites").json() == []


# ----------------------------------------------------------------------------
# Comparisons
# ----------------------------------------------------------------------------


def test_comparison_keeps_insertion_order_and_caps_at_five(client, db, user, sign_in):
    props = [make_property(db, title=f"Listing {n}") for n in range(7)]
    sign_in(user)

    for p in props:
        client.post("/api/comparisons", json={"propertyId": p.id})
    client.post("/api/comparisons", json={"propertyId": props[0].id})

    res = client.get("/api/comparisons")

    assert [p["title"] for p in res.json()] == [f"Listing {n}" for n in range(5)]


def test_removing_last_comparison_deletes_row(client, db, prop, user, sign_in):
    sign_in(user)
    client.post("/api/comparisons", json={"propertyId": prop.id})

    client.delete(f"/api/comparisons/{prop.id}")

    assert db.query(Comparison).count() == 0
    assert client.get("/api/comparisons").json() == []


def test_clear_comparison(client, db, user, sign_in):
    first = make_property(db, title="One")
    second = make_property(db, title="Two")
    sign_in(user)
    client.post("/api/comparisons", json={"propertyId": first.id})
    client.post("/api/comparisons", json={"propertyId": second.id})

    assert client.delete("/api/comparisons").json() == {"success": True}
    assert client.get("/api/comparisons").json() == []


# ----------------------------------------------------------------------------
# Saved searches
# ----------------------------------------------------------------------------


def test_saved_search_lifecycle(client, user, sign_in):
    sign_in(user)

    created = client.post(
        "/api/saved-searches",
        json={"name": "Family homes", "minPrice": 300000, "bedrooms": 3, "amenities": ["garden"]},
    )
    assert created.status_code == 201, created.text
    search_id = created.json()["id"]

    updated = client.patch(f"/api/saved-searches/{search_id}", json={"name": "Big family homes"})
    assert updated.json()["name"] == "Big family homes"
    assert updated.json()["bedrooms"] == 3

    assert client.get(f"/api/saved-searches/{search_id}").json()["minPrice"] == 300000
    assert len(client.get("/api/saved-searches").json()) == 1

    client.delete(f"/api/saved-searches/{search_id}")
    assert client.get(f"/api/saved-searches/{search_id}").status_code == 404


def test_saved_search_name_is_required(client, user, sign_in):
    sign_in(user)

    assert client.post("/api/saved-searches", json={"name": ""}).status_code == 422


def test_other_users_saved_search_is_invisible(client, db, user, sign_in):
    owner = make_user(db, "google-owner-of-search")
    sign_in(owner)
    search_id = client.post("/api/saved-searches", json={"name": "Mine"}).json()["id"]

    sign_in(user)

    assert client.get(f"/api/saved-searches/{search_id}").status_code == 404
    assert client.patch(f"/api/saved-searches/{search_id}", json={"name": "Stolen"}).status_code == 404
    assert client.delete(f"/api/saved-searches/{search_id}").status_code == 200
    db.expire_all()
    assert db.query(SavedSearch).filter(SavedSearch.id == search_id).one().name == "Mine"

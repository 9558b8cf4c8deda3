from app.domain.properties.repository import PropertyRepository
from app.models import Favorite, Inquiry, Property, PropertyImage
from app.models_viewing import Viewing
from app.shared.amenities import AMENITIES

from conftest import make_property, make_viewing

NEW_LISTING = {
    "title": "Harbor View Condo",
    "price": 625000,
    "propertyType": "condo",
    "bedrooms": 2,
    "bathrooms": 2,
    "squareFeet": 1100,
    "address": "8 Pier Road",
    "city": "Portland",
    "state": "ME",
    "zipCode": "04101",
    "latitude": 43.6591,
    "longitude": -70.2568,
    "amenities": "pool, gym , ",
}


def titles(res):
    return [p["title"] for p in res.json()]


def test_list_returns_first_twelve_with_primary_image(client, db):
    for n in range(14):
        make_property(db, title=f"Listing {n}")
    first = db.query(Property).order_by(Property.id).first()
    db.add(PropertyImage(property_id=first.id, image_url="https://img/1.jpg", display_order=1))
    db.commit()

    res = client.get("/api/properties")

    assert res.status_code == 200
    assert len(res.json()) == 12
    assert res.json()[0]["primaryImageUrl"] == "https://img/1.jpg"
    assert res.json()[1]["primaryImageUrl"] is None


def test_featured_only(client, db):
    make_property(db, title="Plain")
    make_property(db, title="Star", featured=True)

    assert titles(client.get("/api/properties/featured")) == ["Star"]


def test_search_filters(client, db):
    make_property(db, title="Cheap House", price=200000, bedrooms=2)
    make_property(db, title="Big House", price=900000, bedrooms=5)
    make_property(db, title="Flat", price=300000, property_type="apartment", bedrooms=2)

    res = client.get(
        "/api/properties/search",
        params={"maxPrice": 500000, "bedrooms": 2, "propertyType": "house"},
    )

    assert titles(res) == ["Cheap House"]


def test_search_requires_every_amenity(client, db):
    make_property(db, title="Pool Only", amenities=["Pool"])
    make_property(db, title="Pool And Gym", amenities=["pool", "gym"])
    make_property(db, title="Nothing", amenities=[])

    res = client.get("/api/properties/search", params=[("amenities", "POOL"), ("amenities", "gym")])

    assert titles(res) == ["Pool And Gym"]


def test_search_paginates(client, db):
    for n in range(5):
        make_property(db, title=f"Listing {n}")

    res = client.get("/api/properties/search", params={"limit": 2, "offset": 2})

    assert titles(res) == ["Listing 2", "Listing 3"]


def test_get_property_detail_and_missing(client, prop):
    assert client.get(f"/api/properties/{prop.id}").json()["zipCode"] == "62701"
    assert client.get(f"/api/properties/{prop.id + 1}").status_code == 404


def test_create_requires_admin(client, user, sign_in, db):
    sign_in(user)

    res = client.post("/api/properties", json=NEW_LISTING)

    assert res.status_code == 403
    assert db.query(Property).count() == 0


def test_admin_creates_listing_with_normalized_amenities(client, admin, sign_in):
    sign_in(admin)

    res = client.post("/api/properties", json=NEW_LISTING)

    assert res.status_code == 201, res.text
    body = res.json()
    assert body["amenities"] == ["pool", "gym"]
    assert body["status"] == "available"
    assert body["featured"] is False


def test_admin_updates_listing(client, prop, admin, sign_in):
    sign_in(admin)

    res = client.patch(f"/api/properties/{prop.id}", json={"price": 430000, "status": "pending"})

    assert res.status_code == 200
    assert res.json()["price"] == 430000
    assert res.json()["status"] == "pending"


def test_empty_update_is_bad_request(client, prop, admin, sign_in):
    sign_in(admin)

    assert client.patch(f"/api/properties/{prop.id}", json={}).status_code == 400


def test_delete_removes_dependents(client, db, prop, user, admin, sign_in):
    make_viewing(db, prop, user)
    db.add_all(
        [
            PropertyImage(property_id=prop.id, image_url="https://img/1.jpg", display_order=1),
            Favorite(user_id=user.id, property_id=prop.id),
            Inquiry(property_id=prop.id, name="Q", email="q@example.com", message="Hi", status="new"),
        ]
    )
    db.commit()
    sign_in(admin)

    res = client.delete(f"/api/properties/{prop.id}")

    assert res.status_code == 200
    db.expire_all()
    for model in (Property, PropertyImage, Viewing, Favorite, Inquiry):
        assert db.query(model).count() == 0, model.__name__


def test_amenity_catalogue(client):
    res = client.get("/api/amenities")

    assert res.status_code == 200
    assert len(res.json()) == len(AMENITIES)
    assert res.json()[0] == {"id": "pool", "label": "Swimming Pool", "icon": "🏊"}


def test_repository_pages_listings_by_id(db):
    for n in range(4):
        make_property(db, title=f"Listing {n}")

    page = PropertyRepository.list_page(db, limit=2, offset=1)

    assert [p.title for p in page] == ["Listing 1", "Listing 2"]

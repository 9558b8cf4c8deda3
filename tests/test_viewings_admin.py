from datetime import datetime

import pytest

from app.models_viewing import Viewing

from conftest import OWNER_OPEN_ID, make_property, make_user, make_viewing


@pytest.fixture
def viewings(db, prop, user):
    other_prop = make_property(db, title="City Loft", property_type="apartment")
    return [
        make_viewing(db, prop, user, visitor_name="Alice", viewing_date=datetime(2027, 2, 1, 9)),
        make_viewing(
            db,
            prop,
            user,
            visitor_name="Bob",
            visitor_email="bob@example.com",
            visitor_phone="555-7777",
            viewing_date=datetime(2027, 2, 3, 9),
            status="confirmed",
        ),
        make_viewing(db, other_prop, user, visitor_name="Carol", viewing_date=datetime(2027, 2, 5, 9)),
    ]


def statuses(db):
    db.expire_all()
    return {v.id: v.status for v in db.query(Viewing).all()}


# ----------------------------------------------------------------------------
# Authorization gate
# ----------------------------------------------------------------------------


def test_anonymous_caller_is_unauthorized(client, viewings):
    assert client.get("/api/admin-viewings").status_code == 401


@pytest.mark.parametrize(
    "method,path,body",
    [
        ("get", "/api/admin-viewings", None),
        ("patch", "/api/admin-viewings/{id}/status", {"status": "cancelled"}),
        ("post", "/api/admin-viewings/bulk-status", {"ids": ["{id}"], "status": "cancelled"}),
        ("delete", "/api/admin-viewings/{id}", None),
    ],
)
def test_non_admin_is_rejected_without_side_effects(
    client, db, user, sign_in, viewings, dispatcher, method, path, body
):
    target = viewings[0].id
    before = statuses(db)
    sign_in(user)

    kwargs = {}
    if body is not None:
        if "ids" in body:
            body = {**body, "ids": [target]}
        kwargs["json"] = body
    res = client.request(method.upper(), path.format(id=target), **kwargs)

    assert res.status_code == 403
    assert res.json()["detail"] == "Unauthorized: Admin access required"
    assert statuses(db) == before
    assert dispatcher.sent == []


# ----------------------------------------------------------------------------
# Listing and filters
# ----------------------------------------------------------------------------


def test_list_all_orders_by_date(client, admin, sign_in, viewings):
    sign_in(admin)

    res = client.get("/api/admin-viewings")

    assert res.status_code == 200
    assert [v["visitorName"] for v in res.json()] == ["Alice", "Bob", "Carol"]


def test_filter_by_status_and_property(client, admin, sign_in, viewings, prop):
    sign_in(admin)

    confirmed = client.get("/api/admin-viewings", params={"status": "confirmed"}).json()
    by_property = client.get("/api/admin-viewings", params={"propertyId": prop.id}).json()

    assert [v["visitorName"] for v in confirmed] == ["Bob"]
    assert [v["visitorName"] for v in by_property] == ["Alice", "Bob"]


def test_date_range_is_inclusive(client, admin, sign_in, viewings):
    sign_in(admin)

    res = client.get(
        "/api/admin-viewings",
        params={"startDate": "2027-02-01T09:00:00", "endDate": "2027-02-03T09:00:00"},
    )

    assert [v["visitorName"] for v in res.json()] == ["Alice", "Bob"]


def test_search_matches_name_email_or_phone(client, admin, sign_in, viewings):
    sign_in(admin)

    for query in ("bob", "BOB@EXAMPLE", "7777"):
        res = client.get("/api/admin-viewings", params={"searchQuery": query})
        assert [v["visitorName"] for v in res.json()] == ["Bob"], query


# ----------------------------------------------------------------------------
# Status transitions
# ----------------------------------------------------------------------------


def test_cancel_sends_one_notification_and_records_reason(
    client, db, admin, sign_in, viewings, dispatcher
):
    sign_in(admin)
    target = viewings[0]

    res = client.patch(
        f"/api/admin-viewings/{target.id}/status",
        json={"status": "cancelled", "cancellationReason": "Owner unavailable"},
    )

    assert res.status_code == 200
    assert res.json() == {"success": True}
    assert dispatcher.kinds() == ["cancellation"]
    assert dispatcher.sent[0][1][:3] == ("jane@example.com", "Alice", "Sunny Family Home")
    db.expire_all()
    stored = db.get(Viewing, target.id)
    assert stored.status == "cancelled"
    assert stored.cancellation_reason == "Owner unavailable"


def test_cancel_again_does_not_notify(client, admin, sign_in, viewings, dispatcher):
    sign_in(admin)
    path = f"/api/admin-viewings/{viewings[0].id}/status"

    client.patch(path, json={"status": "cancelled"})
    client.patch(path, json={"status": "cancelled"})

    assert dispatcher.kinds() == ["cancellation"]


def test_other_transitions_do_not_notify(client, db, admin, sign_in, viewings, dispatcher):
    sign_in(admin)

    res = client.patch(f"/api/admin-viewings/{viewings[0].id}/status", json={"status": "completed"})

    assert res.status_code == 200
    assert dispatcher.sent == []
    assert statuses(db)[viewings[0].id] == "completed"


def test_any_status_may_follow_any_other(client, db, admin, sign_in, viewings):
    sign_in(admin)
    path = f"/api/admin-viewings/{viewings[0].id}/status"

    for status in ("completed", "scheduled", "cancelled", "confirmed"):
        assert client.patch(path, json={"status": status}).status_code == 200
        assert statuses(db)[viewings[0].id] == status


def test_notification_failure_still_updates_status(client, db, admin, sign_in, viewings, dispatcher):
    sign_in(admin)
    dispatcher.fail = True

    res = client.patch(f"/api/admin-viewings/{viewings[0].id}/status", json={"status": "cancelled"})

    assert res.status_code == 200
    assert statuses(db)[viewings[0].id] == "cancelled"


def test_update_missing_viewing_is_not_found(client, admin, sign_in, viewings):
    sign_in(admin)

    res = client.patch("/api/admin-viewings/9999/status", json={"status": "cancelled"})

    assert res.status_code == 404


def test_unknown_status_is_rejected(client, admin, sign_in, viewings):
    sign_in(admin)

    res = client.patch(f"/api/admin-viewings/{viewings[0].id}/status", json={"status": "archived"})

    assert res.status_code == 422


# ----------------------------------------------------------------------------
# Bulk and delete
# ----------------------------------------------------------------------------


def test_bulk_count_is_number_of_ids_submitted(client, db, admin, sign_in, viewings, dispatcher):
    sign_in(admin)
    ids = [viewings[0].id, 9999, viewings[1].id]

    res = client.post("/api/admin-viewings/bulk-status", json={"ids": ids, "status": "cancelled"})

    assert res.status_code == 200
    assert res.json() == {"success": True, "count": 3, "updated": 2, "skipped": 1}
    current = statuses(db)
    assert current[viewings[0].id] == "cancelled"
    assert current[viewings[1].id] == "cancelled"
    assert current[viewings[2].id] == "scheduled"
    assert dispatcher.kinds() == ["cancellation", "cancellation"]


def test_bulk_continues_when_notifications_fail(client, db, admin, sign_in, viewings, dispatcher):
    sign_in(admin)
    dispatcher.fail = True
    ids = [v.id for v in viewings]

    res = client.post("/api/admin-viewings/bulk-status", json={"ids": ids, "status": "cancelled"})

    assert res.json()["updated"] == 3
    assert set(statuses(db).values()) == {"cancelled"}


def test_delete_is_unconditional(client, db, admin, sign_in, viewings):
    sign_in(admin)

    assert client.delete(f"/api/admin-viewings/{viewings[0].id}").json() == {"success": True}
    assert client.delete(f"/api/admin-viewings/{viewings[0].id}").json() == {"success": True}
    assert client.delete("/api/admin-viewings/9999").json() == {"success": True}
    db.expire_all()
    assert db.query(Viewing).count() == 2


def test_owner_identity_is_admin_even_if_stored_as_user(client, db, sign_in, viewings):
    owner = make_user(db, OWNER_OPEN_ID, role="user")
    sign_in(owner)

    assert client.get("/api/admin-viewings").status_code == 200

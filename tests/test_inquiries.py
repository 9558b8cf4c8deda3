from app.models import Inquiry

INQUIRY = {
    "name": "Sam Buyer",
    "email": "sam@example.com",
    "phone": "555-1234",
    "message": "Is the garden south facing?",
}


def add_inquiry(db, property_id, name, status="new"):
    inquiry = Inquiry(
        property_id=property_id,
        name=name,
        email=f"{name.lower()}@example.com",
        message="Hello",
        status=status,
    )
    db.add(inquiry)
    db.commit()
    db.refresh(inquiry)
    return inquiry


def test_public_submission_notifies_owner(client, db, prop, dispatcher):
    res = client.post("/api/inquiries", json={"propertyId": prop.id, **INQUIRY})

    assert res.status_code == 201, res.text
    assert res.json() == {"success": True}
    stored = db.query(Inquiry).one()
    assert stored.status == "new"
    assert stored.user_id is None

    assert dispatcher.kinds() == ["owner"]
    subject, text = dispatcher.sent[0][1]
    assert subject == "New Property Inquiry"
    assert "Sunny Family Home" in text
    assert "Sam Buyer <sam@example.com>" in text


def test_signed_in_submission_records_user(client, db, prop, user, sign_in):
    sign_in(user)

    client.post("/api/inquiries", json={"propertyId": prop.id, **INQUIRY})

    assert db.query(Inquiry).one().user_id == user.id


def test_notification_failure_keeps_inquiry(client, db, prop, dispatcher):
    dispatcher.fail = True

    res = client.post("/api/inquiries", json={"propertyId": prop.id, **INQUIRY})

    assert res.status_code == 201
    assert db.query(Inquiry).count() == 1


def test_invalid_email_is_rejected(client, prop):
    res = client.post(
        "/api/inquiries", json={"propertyId": prop.id, **INQUIRY, "email": "not-an-email"}
    )

    assert res.status_code == 422


def test_list_requires_admin(client, user, sign_in):
    assert client.get("/api/inquiries").status_code == 401
    sign_in(user)
    assert client.get("/api/inquiries").status_code == 403


def test_admin_list_is_newest_first_with_title_fallback(client, db, prop, admin, sign_in):
    add_inquiry(db, prop.id, "First")
    add_inquiry(db, 9999, "Second")
    sign_in(admin)

    res = client.get("/api/inquiries")

    assert res.status_code == 200
    body = res.json()
    assert [i["name"] for i in body] == ["Second", "First"]
    assert body[0]["propertyTitle"] == "Property #9999"
    assert body[1]["propertyTitle"] == "Sunny Family Home"


def test_admin_filters_by_status(client, db, prop, admin, sign_in):
    add_inquiry(db, prop.id, "Open")
    add_inquiry(db, prop.id, "Done", status="closed")
    sign_in(admin)

    res = client.get("/api/inquiries", params={"status": "closed"})

    assert [i["name"] for i in res.json()] == ["Done"]


def test_status_update_and_missing(client, db, prop, admin, sign_in):
    inquiry = add_inquiry(db, prop.id, "Pat")
    sign_in(admin)

    res = client.patch(f"/api/inquiries/{inquiry.id}/status", json={"status": "contacted"})

    assert res.status_code == 200
    db.expire_all()
    assert db.get(Inquiry, inquiry.id).status == "contacted"
    assert client.patch("/api/inquiries/9999/status", json={"status": "closed"}).status_code == 404


def test_delete(client, db, prop, admin, sign_in):
    inquiry = add_inquiry(db, prop.id, "Pat")
    sign_in(admin)

    assert client.delete(f"/api/inquiries/{inquiry.id}").json() == {"success": True}
    db.expire_all()
    assert db.query(Inquiry).count() == 0

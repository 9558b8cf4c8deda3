from fastapi.testclient import TestClient

from app.config import LEGACY_SESSION_COOKIE_NAMES, SESSION_COOKIE_NAME
from app.domain.users.service import DEV_OPEN_ID
from app.main import create_app
from app.models import User

REGISTRATION = {
    "name": "Sam Buyer",
    "email": " Sam@Example.com ",
    "phone": "555-123-4567",
    "password": "hunter22",
}


def register(client, **overrides):
    return client.post("/api/auth/register", json={**REGISTRATION, **overrides})


def test_register_creates_local_user_and_signs_in(client, db):
    res = register(client)

    assert res.status_code == 200, res.text
    assert res.json() == {"success": True}
    assert res.headers["set-cookie"].startswith(f"{SESSION_COOKIE_NAME}=")

    user = db.query(User).filter(User.email == "sam@example.com").one()
    assert user.open_id.startswith("local:")
    assert len(user.open_id) == len("local:") + 16
    assert user.login_method == "local"
    assert user.role == "user"
    assert user.password_hash and user.password_hash != "hunter22"

    me = client.get("/api/auth/me").json()
    assert me["email"] == "sam@example.com"


def test_register_duplicate_email_conflicts(client):
    register(client)

    res = register(client, email="sam@example.com")

    assert res.status_code == 409


def test_register_rejects_short_password(client):
    res = register(client, password="123")

    assert res.status_code == 422


def test_login_with_correct_password(client):
    register(client)
    client.cookies.clear()

    res = client.post("/api/auth/login", json={"email": "SAM@example.com", "password": "hunter22"})

    assert res.status_code == 200, res.text
    assert client.get("/api/auth/me").json()["email"] == "sam@example.com"


def test_login_wrong_password_is_unauthorized(client):
    register(client)

    res = client.post("/api/auth/login", json={"email": "sam@example.com", "password": "nope"})

    assert res.status_code == 401


def test_login_unknown_account_is_not_found(client):
    res = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "x"})

    assert res.status_code == 404


def test_login_malformed_body_is_bad_request(client):
    res = client.post("/api/auth/login", json={"email": "not-an-email"})

    assert res.status_code == 400


def test_me_is_null_without_session(client):
    res = client.get("/api/auth/me")

    assert res.status_code == 200
    assert res.json() is None


def test_me_is_null_with_tampered_session(client):
    client.cookies.set(SESSION_COOKIE_NAME, "tampered.token.value")

    assert client.get("/api/auth/me").json() is None


def test_session_name_claim_is_synced(client, user, app, settings):
    token = app.state.session_codec.create_session_token(
        user.open_id, "Jane Renamed", settings.session_ttl_seconds
    )
    client.cookies.set(SESSION_COOKIE_NAME, token)

    assert client.get("/api/auth/me").json()["name"] == "Jane Renamed"


def test_dev_login_creates_admin_in_development(client, db):
    res = client.get("/api/dev-login", follow_redirects=False)

    assert res.status_code == 302
    assert res.headers["location"] == "/"
    user = db.query(User).filter(User.open_id == DEV_OPEN_ID).one()
    assert user.role == "admin"
    assert client.get("/api/auth/me").json()["openId"] == DEV_OPEN_ID


def test_dev_login_is_hidden_outside_development(settings, clock, dispatcher, storage):
    app = create_app(
        settings.model_copy(update={"environment": "production"}),
        clock=clock,
        dispatcher=dispatcher,
        image_storage=storage,
    )
    with TestClient(app) as client:
        res = client.get("/api/dev-login", follow_redirects=False)

    assert res.status_code == 404


def test_api_logout_clears_every_cookie_variant(client, user, sign_in):
    sign_in(user)

    res = client.post("/api/logout")

    assert res.status_code == 200
    assert res.json() == {"success": True}
    cleared = res.headers.get_list("set-cookie")
    names = {value.split("=", 1)[0] for value in cleared}
    assert names == {SESSION_COOKIE_NAME, *LEGACY_SESSION_COOKIE_NAMES}
    assert all("Max-Age=0" in value for value in cleared)


def test_auth_logout_returns_success(client, user, sign_in):
    sign_in(user)

    res = client.post("/api/auth/logout")

    assert res.json() == {"success": True}
    assert SESSION_COOKIE_NAME in res.headers["set-cookie"]


def test_get_logout_redirects_home(client, user, sign_in):
    sign_in(user)

    res = client.get("/logout", follow_redirects=False)

    assert res.status_code == 302
    assert res.headers["location"] == "/"
    assert len(res.headers.get_list("set-cookie")) >= 4

from datetime import datetime
from typing import Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from app.config import SESSION_COOKIE_NAME, Settings
from app.main import create_app
from app.models import Property, User
from app.models_viewing import Viewing
from app.services.image_storage import ImageStorageError
from app.services.oauth_service import GOOGLE_TOKEN_URL, GOOGLE_USERINFO_URL, OAuthClient

# 2027-01-15 08:00:00 UTC
FIXED_NOW = 1_800_000_000.0
OWNER_OPEN_ID = "google-owner"
ADMIN_TOKEN = "admin-secret"


class FixedClock:
    def __init__(self, now: float = FIXED_NOW):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingDispatcher:
    """Collects every notification; `fail` makes all sends raise"""

    def __init__(self):
        self.sent = []
        self.fail = False
        self.result = True

    async def _record(self, kind, *args):
        if self.fail:
            raise RuntimeError(f"{kind} delivery failed")
        self.sent.append((kind, args))
        return self.result

    async def send_confirmation(self, data):
        return await self._record("confirmation", data)

    async def send_cancellation(self, visitor_email, visitor_name, property_label, viewing_date):
        return await self._record(
            "cancellation", visitor_email, visitor_name, property_label, viewing_date
        )

    async def send_reminder(self, data):
        return await self._record("reminder", data)

    async def send_owner_notification(self, subject, text):
        return await self._record("owner", subject, text)

    def kinds(self):
        return [kind for kind, _ in self.sent]


class FakeImageStorage:
    def __init__(self, configured: bool = True):
        self.is_configured = configured
        self.uploads = []

    async def upload(self, data: bytes, file_name: str) -> str:
        if not self.is_configured:
            raise ImageStorageError("Cloudinary is not configured")
        self.uploads.append((file_name, data))
        return f"https://res.cloudinary.com/demo/image/upload/{file_name}"


class FakeIdentityProvider:
    """httpx MockTransport handler standing in for Google's token and userinfo endpoints"""

    def __init__(self):
        self.userinfo = {"sub": "google-123", "name": "Jane Doe", "email": "jane@example.com"}
        self.token_status = 200
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if str(request.url) == GOOGLE_TOKEN_URL:
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_grant"})
            return httpx.Response(200, json={"access_token": "access-abc", "token_type": "Bearer"})
        if str(request.url) == GOOGLE_USERINFO_URL:
            return httpx.Response(200, json=self.userinfo)
        return httpx.Response(404)


@pytest.fixture
def settings():
    return Settings(
        environment="development",
        database_url="sqlite://",
        jwt_secret="test-jwt-secret",
        google_client_id="client-id",
        google_client_secret="client-secret",
        owner_open_id=OWNER_OPEN_ID,
        admin_access_token=ADMIN_TOKEN,
        agent_name="Alex Agent",
        agent_phone="555-0100",
        agent_email="alex@example.com",
        db_log_slow_queries=False,
        upload_max_mb=1,
    )


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def storage():
    return FakeImageStorage()


@pytest.fixture
def identity_provider():
    return FakeIdentityProvider()


@pytest.fixture
def app(settings, clock, dispatcher, storage, identity_provider):
    oauth_client = OAuthClient(
        settings, httpx.AsyncClient(transport=httpx.MockTransport(identity_provider))
    )
    return create_app(
        settings,
        clock=clock,
        dispatcher=dispatcher,
        image_storage=storage,
        oauth_client=oauth_client,
    )


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(client, app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


def make_user(db, open_id: str, role: str = "user", name: Optional[str] = None, email=None) -> User:
    user = User(
        open_id=open_id,
        name=name or open_id,
        email=email or f"{open_id}@example.com",
        login_method="google",
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_property(db, **overrides) -> Property:
    fields = {
        "title": "Sunny Family Home",
        "description": "Three bedrooms near the park",
        "price": 450000,
        "property_type": "house",
        "bedrooms": 3,
        "bathrooms": 2,
        "square_feet": 1800,
        "address": "12 Oak Street",
        "city": "Springfield",
        "state": "IL",
        "zip_code": "62701",
        "amenities": ["parking", "garden"],
        "featured": False,
        "status": "available",
    }
    fields.update(overrides)
    prop = Property(**fields)
    db.add(prop)
    db.commit()
    db.refresh(prop)
    return prop


def make_viewing(db, prop: Property, user: User, **overrides) -> Viewing:
    fields = {
        "property_id": prop.id,
        "user_id": user.id,
        "visitor_name": "Jane Doe",
        "visitor_email": "jane@example.com",
        "viewing_date": datetime(2027, 2, 1, 10, 0),
        "viewing_time": "10:00",
        "duration": 30,
        "status": "scheduled",
    }
    fields.update(overrides)
    viewing = Viewing(**fields)
    db.add(viewing)
    db.commit()
    db.refresh(viewing)
    return viewing


@pytest.fixture
def sign_in(client, app, settings):
    """Put a valid session cookie for `user` into the test client's jar"""

    def _sign_in(user: User) -> str:
        token = app.state.session_codec.create_session_token(
            user.open_id, user.name, settings.session_ttl_seconds
        )
        client.cookies.set(SESSION_COOKIE_NAME, token)
        return token

    return _sign_in


@pytest.fixture
def user(db):
    return make_user(db, "google-user-1", name="Jane Doe")


@pytest.fixture
def admin(db):
    return make_user(db, OWNER_OPEN_ID, role="admin", name="Olivia Owner")


@pytest.fixture
def prop(db):
    return make_property(db)

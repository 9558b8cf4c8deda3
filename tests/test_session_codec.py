import pytest
from jose import jwt

from app.domain.users.service import UserService
from app.models import User
from app.services.session_codec import ConfigurationError, SessionClaims, SessionCodec

from conftest import FIXED_NOW, FixedClock

ONE_YEAR = 365 * 24 * 60 * 60


def make_codec(clock=None) -> SessionCodec:
    return SessionCodec("secret", app_id="client-id", clock=clock or FixedClock())


def test_empty_secret_refuses_to_build():
    with pytest.raises(ConfigurationError):
        SessionCodec("")


def test_sign_and_verify_round_trip():
    codec = make_codec()
    token = codec.sign(SessionClaims(open_id="u-1", app_id="client-id", name="Jane"), 60)

    claims = codec.verify(token)

    assert claims == SessionClaims(open_id="u-1", app_id="client-id", name="Jane")


def test_payload_uses_wire_keys_and_expiry_from_clock():
    codec = make_codec()
    token = codec.create_session_token("u-1", "Jane", ONE_YEAR)

    payload = jwt.get_unverified_claims(token)

    assert payload["openId"] == "u-1"
    assert payload["appId"] == "client-id"
    assert payload["name"] == "Jane"
    assert payload["exp"] == int(FIXED_NOW + ONE_YEAR)


def test_expired_token_is_rejected():
    clock = FixedClock()
    codec = make_codec(clock)
    token = codec.create_session_token("u-1", "Jane", 60)

    clock.advance(59)
    assert codec.verify(token) is not None

    clock.advance(1)
    assert codec.verify(token) is None


def test_token_signed_with_other_secret_is_rejected():
    token = SessionCodec("other", clock=FixedClock()).create_session_token("u-1", "Jane", 60)

    assert make_codec().verify(token) is None


@pytest.mark.parametrize("token", [None, "", "not-a-jwt"])
def test_missing_or_garbage_token_is_rejected(token):
    assert make_codec().verify(token) is None


def test_empty_claim_fields_are_rejected():
    codec = make_codec()
    token = jwt.encode(
        {"openId": "u-1", "appId": "", "name": "Jane", "exp": int(FIXED_NOW + 60)},
        "secret",
        algorithm="HS256",
    )

    assert codec.verify(token) is None


@pytest.mark.parametrize(
    "codec_app_id,override,expected",
    [("client-id", None, "client-id"), ("client-id", "local", "local"), ("", None, "local")],
)
def test_user_sessions_carry_resolved_app_id(settings, codec_app_id, override, expected):
    codec = SessionCodec("secret", app_id=codec_app_id, clock=FixedClock())
    service = UserService(None, settings, codec)

    token = service.mint_session(User(open_id="u-1", name="Jane"), app_id=override)

    assert codec.verify(token) == SessionClaims(open_id="u-1", app_id=expected, name="Jane")
    assert jwt.get_unverified_claims(token)["exp"] == int(FIXED_NOW + settings.session_ttl_seconds)

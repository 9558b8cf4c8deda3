from starlette.requests import Request

from app.config import LEGACY_SESSION_COOKIE_NAMES, SESSION_COOKIE_NAME
from app.services.cookies import (
    build_clear_cookie_variants,
    build_logout_cookie_headers,
    build_session_cookie,
    get_session_cookie_options,
    is_secure_request,
)

ONE_YEAR = 365 * 24 * 60 * 60


def make_request(scheme: str = "http", forwarded_proto: str = None) -> Request:
    headers = [(b"host", b"app.example")]
    if forwarded_proto:
        headers.append((b"x-forwarded-proto", forwarded_proto.encode()))
    return Request(
        {
            "type": "http",
            "scheme": scheme,
            "method": "GET",
            "path": "/",
            "query_string": b"",
            "headers": headers,
            "server": ("app.example", 443 if scheme == "https" else 80),
        }
    )


def test_plain_http_is_lax_and_not_secure():
    options = get_session_cookie_options(make_request("http"))

    assert options.secure is False
    assert options.samesite == "lax"
    assert options.httponly is True
    assert options.path == "/"


def test_https_is_secure_with_samesite_none():
    options = get_session_cookie_options(make_request("https"))

    assert options.secure is True
    assert options.samesite == "none"


def test_forwarded_proto_list_counts_as_secure():
    assert is_secure_request(make_request("http", "http, https")) is True
    assert is_secure_request(make_request("https", "http")) is False


def test_session_cookie_carries_one_year_max_age():
    header = build_session_cookie("tok.en.value", make_request("https"), ONE_YEAR, now=0)

    assert header.startswith(f"{SESSION_COOKIE_NAME}=tok.en.value")
    assert f"Max-Age={ONE_YEAR}" in header
    assert "Secure" in header
    assert "HttpOnly" in header
    assert "SameSite=none" in header
    assert "Path=/" in header


def test_clear_variants_over_http_are_deduplicated():
    headers = build_clear_cookie_variants(SESSION_COOKIE_NAME, make_request("http"))

    # current policy equals the lax variant, leaving two distinct headers
    assert len(headers) == 2
    assert all("Max-Age=0" in h for h in headers)
    assert all("01 Jan 1970" in h for h in headers)
    assert sum("Secure" in h for h in headers) == 1


def test_clear_variants_over_https():
    headers = build_clear_cookie_variants(SESSION_COOKIE_NAME, make_request("https"))

    assert len(headers) == 2
    assert any("SameSite=lax" in h and "Secure" not in h for h in headers)
    assert any("SameSite=none" in h and "Secure" in h for h in headers)


def test_logout_clears_every_cookie_name():
    headers = build_logout_cookie_headers(make_request("http"))

    names = {h.split("=", 1)[0] for h in headers}
    assert names == {SESSION_COOKIE_NAME, *LEGACY_SESSION_COOKIE_NAMES}
    assert len(headers) == len(set(headers))

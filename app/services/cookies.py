"""
Session cookie policy

Cookie attributes follow the request transport: behind HTTPS the session cookie is
Secure with SameSite=None (so the app can be embedded cross-site), otherwise it is
SameSite=Lax without Secure. Clearing emits every attribute combination a browser may
have stored, because only the matching one takes effect.
"""

import http.cookies
import time
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Iterable, Optional, Union

from starlette.requests import Request
from starlette.responses import Response

from ..config import LEGACY_SESSION_COOKIE_NAMES, ONE_YEAR_SECONDS, SESSION_COOKIE_NAME

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class CookieOptions:
    secure: bool
    samesite: str  # "lax" | "none" | "strict"
    httponly: bool = True
    path: str = "/"


def is_secure_request(request: Request) -> bool:
    forwarded_proto = request.headers.get("x-forwarded-proto")
    if forwarded_proto:
        return any(proto.strip().lower() == "https" for proto in forwarded_proto.split(","))
    return request.url.scheme == "https"


def get_session_cookie_options(request: Request) -> CookieOptions:
    secure = is_secure_request(request)
    return CookieOptions(secure=secure, samesite="none" if secure else "lax")


def serialize_cookie(
    name: str,
    value: str,
    options: CookieOptions,
    max_age: Optional[int] = None,
    expires: Optional[Union[datetime, str]] = None,
) -> str:
    """Render a Set-Cookie header value the way Starlette's Response.set_cookie does"""
    cookie: http.cookies.BaseCookie = http.cookies.SimpleCookie()
    cookie[name] = value
    if max_age is not None:
        cookie[name]["max-age"] = max_age
    if expires is not None:
        if isinstance(expires, datetime):
            cookie[name]["expires"] = format_datetime(expires, usegmt=True)
        else:
            cookie[name]["expires"] = expires
    cookie[name]["path"] = options.path
    if options.secure:
        cookie[name]["secure"] = True
    if options.httponly:
        cookie[name]["httponly"] = True
    cookie[name]["samesite"] = options.samesite
    return cookie.output(header="").strip()


def build_session_cookie(
    token: str, request: Request, ttl_seconds: int = ONE_YEAR_SECONDS, now: Optional[float] = None
) -> str:
    issued_at = time.time() if now is None else now
    expires = datetime.fromtimestamp(issued_at + ttl_seconds, tz=timezone.utc)
    return serialize_cookie(
        SESSION_COOKIE_NAME,
        token,
        get_session_cookie_options(request),
        max_age=ttl_seconds,
        expires=expires,
    )


def dedupe_headers(values: Iterable[str]) -> list[str]:
    """Drop repeated header values, keeping first-seen order"""
    seen: set[str] = set()
    unique = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        unique.append(value)
    return unique


def clear_cookie_option_variants(request: Request) -> list[CookieOptions]:
    """Current policy first, then the two combinations earlier releases used"""
    base = get_session_cookie_options(request)
    return [
        base,
        replace(base, secure=False, samesite="lax"),
        replace(base, secure=True, samesite="none"),
    ]


def build_clear_cookie_variants(name: str, request: Request) -> list[str]:
    headers = [
        serialize_cookie(name, "", options, max_age=0, expires=EPOCH)
        for options in clear_cookie_option_variants(request)
    ]
    return dedupe_headers(headers)


def build_logout_cookie_headers(request: Request) -> list[str]:
    """Clear headers for the session cookie and every legacy cookie name"""
    headers: list[str] = []
    for name in (SESSION_COOKIE_NAME, *LEGACY_SESSION_COOKIE_NAMES):
        headers.extend(build_clear_cookie_variants(name, request))
    return dedupe_headers(headers)


def append_set_cookie_headers(response: Response, values: Iterable[str]) -> None:
    for value in values:
        response.headers.append("set-cookie", value)

"""
Admin UI gate

Protects the /admin pages with a static access token held in a cookie.
This credential is separate from the user session and only covers the admin UI surface.
"""

import hmac
import logging
from typing import Callable, Optional
from urllib.parse import quote

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse, Response

from .config import ADMIN_COOKIE_NAME

logger = logging.getLogger(__name__)

ADMIN_PREFIX = "/admin"
ADMIN_LOGIN_PATH = "/admin/login"
ADMIN_LOGOUT_PATH = "/admin/logout"


def is_admin_path(path: str) -> bool:
    return path == ADMIN_PREFIX or path.startswith(ADMIN_PREFIX + "/")


def is_public_admin_path(path: str) -> bool:
    """Login and logout pages, matched as whole path segments"""
    return any(
        path == public or path.startswith(public + "/")
        for public in (ADMIN_LOGIN_PATH, ADMIN_LOGOUT_PATH)
    )


def admin_token_matches(candidate: Optional[str], expected: Optional[str]) -> bool:
    """An unset server token never matches"""
    if not expected or not candidate:
        return False
    return hmac.compare_digest(candidate.encode(), expected.encode())


def build_login_redirect(path: str) -> str:
    return f"{ADMIN_LOGIN_PATH}?next={quote(path, safe='/')}"


class AdminTokenMiddleware(BaseHTTPMiddleware):
    """Redirect /admin requests without a valid admin_token cookie to the login page"""

    def __init__(self, app, access_token: Optional[str] = None):
        super().__init__(app)
        self.access_token = access_token

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if not is_admin_path(path) or is_public_admin_path(path):
            return await call_next(request)

        if admin_token_matches(request.cookies.get(ADMIN_COOKIE_NAME), self.access_token):
            return await call_next(request)

        logger.warning(f"⚠️ Admin token missing or invalid for {path}")
        return RedirectResponse(url=build_login_redirect(path), status_code=307)

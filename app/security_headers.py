"""
Security Headers Middleware for FastAPI

Adds security headers to all responses:
- X-Frame-Options / frame-ancestors: Prevents clickjacking
- X-Content-Type-Options: Prevents MIME type sniffing
- Referrer-Policy: Controls referrer information leakage
- Content-Security-Policy: Restricts resource loading
- Strict-Transport-Security: Enforces HTTPS (production only)
- Permissions-Policy: Controls browser features
- Cache-Control: Prevents caching of session-bearing responses
"""

import logging
from typing import Callable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)


def get_csp_policy(frontend_origins: Optional[list[str]] = None) -> str:
    """
    Content-Security-Policy for a JSON API whose responses may be framed by the frontend.
    Listing photos are served from Cloudinary.
    """
    frame_ancestors = " ".join(["'self'"] + list(frontend_origins or []))

    directives = [
        "default-src 'self'",
        f"frame-ancestors {frame_ancestors}",
        "script-src 'self' https://accounts.google.com",
        "style-src 'self' https://fonts.googleapis.com",
        "font-src 'self' data: https://fonts.gstatic.com",
        "img-src 'self' data: blob: https://res.cloudinary.com",
        "connect-src 'self' https://accounts.google.com https://oauth2.googleapis.com",
        "base-uri 'none'",
        "form-action 'self'",
    ]

    return "; ".join(directives)


def get_permissions_policy() -> str:
    features = [
        "accelerometer=()",
        "camera=()",
        "geolocation=()",
        "gyroscope=()",
        "microphone=()",
        "payment=()",
        "usb=()",
        "interest-cohort=()",  # Disable FLoC tracking
    ]

    return ", ".join(features)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds security headers to every response outside exclude_paths"""

    def __init__(
        self,
        app,
        exclude_paths: Optional[list[str]] = None,
        frontend_origins: Optional[list[str]] = None,
        is_production: bool = False,
    ):
        super().__init__(app)
        self.exclude_paths = exclude_paths or []
        self.csp = get_csp_policy(frontend_origins)
        self.is_production = is_production

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        # Skip security headers for excluded paths (e.g., health checks)
        path = request.url.path
        if any(path.startswith(excluded) for excluded in self.exclude_paths):
            return response

        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = self.csp

        if self.is_production:
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains; preload"
            )

        response.headers["Permissions-Policy"] = get_permissions_policy()

        # Responses can carry Set-Cookie for the session
        if "Cache-Control" not in response.headers:
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"

        # same-origin-allow-popups keeps the Google sign-in popup working
        response.headers["Cross-Origin-Opener-Policy"] = "same-origin-allow-popups"

        return response

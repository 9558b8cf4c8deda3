"""
Google OAuth code exchange

The `state` query parameter carries the base64-encoded redirect URI that was sent to the
provider. It is not an anti-forgery nonce.
"""

import base64
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ..config import OAUTH_HTTP_TIMEOUT_SECONDS, Settings

logger = logging.getLogger(__name__)

GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"


class OAuthError(Exception):
    """Identity provider exchange failed"""


@dataclass(frozen=True)
class TokenResponse:
    access_token: str
    token_type: str
    expires_in: Optional[int] = None
    refresh_token: Optional[str] = None
    scope: Optional[str] = None
    id_token: Optional[str] = None


@dataclass(frozen=True)
class UserInfo:
    open_id: str
    name: str
    email: Optional[str]
    login_method: str = "google"


def build_oauth_http_client(settings: Settings) -> httpx.AsyncClient:
    """HTTP client used for all identity provider calls"""
    return httpx.AsyncClient(
        base_url=settings.oauth_server_url or "",
        timeout=OAUTH_HTTP_TIMEOUT_SECONDS,
    )


def encode_state(redirect_uri: str) -> str:
    return base64.b64encode(redirect_uri.encode("utf-8")).decode("ascii")


def decode_state(state: str) -> str:
    """Recover the redirect URI from the OAuth state parameter"""
    try:
        padded = state + "=" * (-len(state) % 4)
        return base64.b64decode(padded).decode("utf-8")
    except ValueError as e:
        raise OAuthError(f"Invalid OAuth state: {e}") from e


class OAuthClient:
    """Talks to the identity provider. Build once per process with a shared httpx client."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self.settings = settings
        self.http = http_client
        if not settings.google_client_id or not settings.google_client_secret:
            logger.warning("⚠️ GOOGLE_CLIENT_ID or GOOGLE_CLIENT_SECRET missing - OAuth login will fail")

    async def exchange_code_for_token(self, code: str, state: str) -> TokenResponse:
        redirect_uri = decode_state(state)
        payload = {
            "client_id": self.settings.app_id,
            "client_secret": self.settings.google_client_secret,
            "code": code,
            "redirect_uri": redirect_uri,
            "grant_type": "authorization_code",
        }

        try:
            response = await self.http.post(GOOGLE_TOKEN_URL, data=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"❌ OAuth token exchange failed: {e}")
            raise OAuthError(f"Token exchange failed: {e}") from e

        data = response.json()
        if not data.get("access_token"):
            raise OAuthError("Token exchange returned no access_token")

        return TokenResponse(
            access_token=data["access_token"],
            token_type=data.get("token_type", "Bearer"),
            expires_in=data.get("expires_in"),
            refresh_token=data.get("refresh_token"),
            scope=data.get("scope"),
            id_token=data.get("id_token"),
        )

    async def get_user_info(self, access_token: str) -> UserInfo:
        try:
            response = await self.http.get(
                GOOGLE_USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"❌ OAuth userinfo request failed: {e}")
            raise OAuthError(f"User info request failed: {e}") from e

        data = response.json()
        return UserInfo(
            open_id=data.get("sub") or "",
            name=data.get("name") or "",
            email=data.get("email"),
        )

    async def aclose(self) -> None:
        await self.http.aclose()

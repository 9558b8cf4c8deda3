"""
Session Token Codec
Signs and verifies the HS256 JWT carried in the session cookie
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from jose import JWTError
from jose import jwt as jose_jwt

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing"""


@dataclass(frozen=True)
class SessionClaims:
    open_id: str
    app_id: str
    name: str


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0


class SessionCodec:
    """
    Mints and checks session tokens.

    Build once per process. The clock returns epoch seconds and is injectable so
    expiry can be tested without sleeping.
    """

    def __init__(
        self,
        secret: str,
        app_id: str = "",
        clock: Callable[[], float] = time.time,
    ):
        if not secret:
            raise ConfigurationError("JWT_SECRET is not set - cannot sign or verify sessions")
        self._secret = secret
        self.app_id = app_id
        self._clock = clock

    def sign(self, claims: SessionClaims, ttl_seconds: int) -> str:
        """Produce a token for claims that expires ttl_seconds from now"""
        expires_at = int(self._clock() + ttl_seconds)
        payload = {
            "openId": claims.open_id,
            "appId": claims.app_id,
            "name": claims.name,
            "exp": expires_at,
        }
        return jose_jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def create_session_token(
        self, open_id: str, name: str, ttl_seconds: int, app_id: Optional[str] = None
    ) -> str:
        """Token for a signed-in user; app_id defaults to the codec's own"""
        claims = SessionClaims(open_id=open_id, app_id=app_id or self.app_id, name=name)
        return self.sign(claims, ttl_seconds)

    def verify(self, token: Optional[str]) -> Optional[SessionClaims]:
        """
        Return the claims for a valid, unexpired token.
        Any failure is logged and reported as None - never raised.
        """
        if not token:
            logger.warning("⚠️ Missing session cookie")
            return None

        try:
            # Expiry is checked below against the injected clock
            payload = jose_jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"verify_exp": False},
            )
        except JWTError as e:
            logger.warning(f"⚠️ Session verification failed: {e}")
            return None

        exp = payload.get("exp")
        if not isinstance(exp, (int, float)) or self._clock() >= exp:
            logger.warning("⚠️ Session token expired")
            return None

        open_id = payload.get("openId")
        app_id = payload.get("appId")
        name = payload.get("name")
        if not (
            _is_non_empty_string(open_id)
            and _is_non_empty_string(app_id)
            and _is_non_empty_string(name)
        ):
            logger.warning("⚠️ Session payload missing required fields")
            return None

        return SessionClaims(open_id=open_id, app_id=app_id, name=name)

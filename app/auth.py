import logging
from datetime import datetime
from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from .config import SESSION_COOKIE_NAME, Settings
from .database import get_db
from .dependencies import get_app_settings, get_now, get_session_codec
from .domain.users.service import UserService
from .models import User
from .services.session_codec import SessionCodec

logger = logging.getLogger(__name__)


def get_user_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    codec: SessionCodec = Depends(get_session_codec),
) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db, settings, codec)


async def get_optional_user(
    request: Request,
    now: datetime = Depends(get_now),
    codec: SessionCodec = Depends(get_session_codec),
    service: UserService = Depends(get_user_service),
) -> Optional[User]:
    """
    Resolve the caller from the session cookie.
    A missing, invalid or expired session is simply "no user" - it is never an error.
    """
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        return None

    claims = codec.verify(token)
    if not claims:
        return None

    return service.resolve_session(claims, now)


async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if not user:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Admin-only operations: role must be exactly 'admin'"""
    if user.role != "admin":
        logger.warning(f"⚠️ Non-admin user {user.id} attempted an admin operation")
        raise HTTPException(status_code=403, detail="Unauthorized: Admin access required")
    return user

"""User service - account creation, login and session resolution"""

import logging
import secrets
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from ...config import Settings
from ...models import User
from ...services.oauth_service import UserInfo
from ...services.session_codec import SessionClaims, SessionCodec
from ...shared.validators import normalize_email
from .repository import UserRepository

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

LOCAL_APP_ID = "local"
DEV_OPEN_ID = "dev-local-user"


def generate_local_open_id() -> str:
    return f"local:{secrets.token_urlsafe(12)[:16]}"


def session_display_name(user: User) -> str:
    return user.name or user.email or "User"


class UserService:
    """Service layer for user accounts"""

    def __init__(self, db: Session, settings: Settings, codec: SessionCodec):
        self.db = db
        self.settings = settings
        self.codec = codec
        self.repo = UserRepository()

    def mint_session(self, user: User, app_id: Optional[str] = None) -> str:
        return self.codec.create_session_token(
            user.open_id,
            session_display_name(user),
            self.settings.session_ttl_seconds,
            app_id=app_id or self.codec.app_id or LOCAL_APP_ID,
        )

    def resolve_session(self, claims: SessionClaims, now: datetime) -> Optional[User]:
        """
        Load the user behind verified session claims and record the sign-in.
        Unknown identities resolve to no user.
        """
        user = self.repo.get_by_open_id(self.db, claims.open_id)
        if not user:
            logger.warning(f"⚠️ Session for unknown user {claims.open_id}")
            return None

        fields = {}
        if claims.name and user.name != claims.name:
            fields["name"] = claims.name
        return self.repo.upsert(
            self.db,
            open_id=user.open_id,
            last_signed_in=now,
            owner_open_id=self.settings.owner_open_id,
            **fields,
        )

    def complete_oauth_login(self, info: UserInfo, now: datetime) -> User:
        """Upsert the local record for an identity the provider vouched for"""
        if not info.open_id:
            raise HTTPException(status_code=400, detail="openId missing from user info")

        user = self.repo.upsert(
            self.db,
            open_id=info.open_id,
            last_signed_in=now,
            owner_open_id=self.settings.owner_open_id,
            name=info.name or None,
            email=info.email,
            login_method=info.login_method,
        )
        logger.info(f"✅ OAuth login for user {user.id} (role={user.role})")
        return user

    def register_local(self, name: str, email: str, phone: str, password: str, now: datetime) -> User:
        email = normalize_email(email)
        if self.repo.get_by_email(self.db, email):
            logger.warning(f"⚠️ Registration rejected, email already in use: {email}")
            raise HTTPException(status_code=409, detail="An account with this email already exists")

        user = User(
            open_id=generate_local_open_id(),
            name=name.strip(),
            email=email,
            phone=phone.strip(),
            password_hash=pwd_context.hash(password),
            login_method="local",
            last_signed_in=now,
            role="user",
        )
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"✅ Registered local user {user.id}")
        return user

    def login_local(self, email: str, password: str, now: datetime) -> User:
        user = self.repo.get_by_email(self.db, normalize_email(email))
        if not user or not user.password_hash:
            raise HTTPException(
                status_code=404, detail="Account not found or has no password. Please register."
            )

        if not pwd_context.verify(password, user.password_hash):
            logger.warning(f"⚠️ Wrong password for user {user.id}")
            raise HTTPException(status_code=401, detail="Incorrect password")

        user.last_signed_in = now
        user.login_method = user.login_method or "local"
        self.db.commit()
        self.db.refresh(user)
        return user

    def dev_login(self, now: datetime) -> User:
        """Development-only admin account"""
        existing = self.repo.get_by_open_id(self.db, DEV_OPEN_ID)
        fields = {"name": "Dev User", "email": "dev@local", "login_method": "dev"}
        if not existing:
            fields["role"] = "admin"
        return self.repo.upsert(self.db, open_id=DEV_OPEN_ID, last_signed_in=now, **fields)

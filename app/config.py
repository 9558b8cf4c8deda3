import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

SESSION_COOKIE_NAME = "app_session_id"
# Cookie names used by earlier releases; logout clears them as well
LEGACY_SESSION_COOKIE_NAMES = (
    "authjs.session-token",
    "__Secure-authjs.session-token",
    "__Host-authjs.session-token",
)
ADMIN_COOKIE_NAME = "admin_token"

ONE_YEAR_SECONDS = 365 * 24 * 60 * 60
OAUTH_HTTP_TIMEOUT_SECONDS = 30.0


class Settings(BaseModel):
    """Process configuration, read once from the environment."""

    model_config = ConfigDict(frozen=True)

    environment: str = "development"
    database_url: str = "sqlite:///./estate.db"

    # Session signing - CRITICAL: no default, the app refuses to start without it
    jwt_secret: str = ""
    session_ttl_seconds: int = ONE_YEAR_SECONDS

    # Google OAuth
    google_client_id: str = ""
    google_client_secret: str = ""
    oauth_server_url: str = ""
    public_app_id: str = ""
    owner_open_id: Optional[str] = None

    # Static credential for the /admin UI surface
    admin_access_token: Optional[str] = None

    allowed_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    security_headers_enabled: bool = True

    # Email (Resend); without a key notifications are only logged
    resend_api_key: Optional[str] = None
    email_from_address: str = "Estate Viewings <noreply@example.com>"
    agent_name: str = "Real Estate Agent"
    agent_phone: str = ""
    agent_email: str = ""

    # Cloudinary image storage
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_api_key: Optional[str] = None
    cloudinary_api_secret: Optional[str] = None
    cloudinary_folder: str = "real-estate"
    upload_max_mb: float = 8

    # Database pool
    db_pool_size: int = 20
    db_max_overflow: int = 30
    db_pool_timeout: int = 30
    db_pool_recycle: int = 300
    db_log_slow_queries: bool = True
    db_slow_query_threshold: float = 1.0

    @property
    def app_id(self) -> str:
        return self.google_client_id or self.public_app_id

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def upload_max_bytes(self) -> int:
        if self.upload_max_mb and self.upload_max_mb > 0:
            return int(self.upload_max_mb * 1024 * 1024)
        return 8 * 1024 * 1024


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def load_settings() -> Settings:
    """Build Settings from environment variables"""
    origins = os.getenv("ALLOWED_ORIGINS")
    overrides = {}
    if origins:
        overrides["allowed_origins"] = [o.strip() for o in origins.split(",") if o.strip()]

    return Settings(
        environment=os.getenv("ENVIRONMENT", "development"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./estate.db"),
        jwt_secret=os.getenv("JWT_SECRET", ""),
        google_client_id=os.getenv("GOOGLE_CLIENT_ID", ""),
        google_client_secret=os.getenv("GOOGLE_CLIENT_SECRET", ""),
        oauth_server_url=os.getenv("OAUTH_SERVER_URL", ""),
        public_app_id=os.getenv("NEXT_PUBLIC_APP_ID", ""),
        owner_open_id=os.getenv("OWNER_OPEN_ID") or None,
        admin_access_token=os.getenv("ADMIN_ACCESS_TOKEN") or None,
        security_headers_enabled=_env_bool("SECURITY_HEADERS_ENABLED", "true"),
        resend_api_key=os.getenv("RESEND_API_KEY") or None,
        email_from_address=os.getenv(
            "EMAIL_FROM_ADDRESS", "Estate Viewings <noreply@example.com>"
        ),
        agent_name=os.getenv("AGENT_NAME", "Real Estate Agent"),
        agent_phone=os.getenv("AGENT_PHONE", ""),
        agent_email=os.getenv("AGENT_EMAIL", ""),
        cloudinary_cloud_name=os.getenv("CLOUDINARY_CLOUD_NAME") or None,
        cloudinary_api_key=os.getenv("CLOUDINARY_API_KEY") or None,
        cloudinary_api_secret=os.getenv("CLOUDINARY_API_SECRET") or None,
        cloudinary_folder=os.getenv("CLOUDINARY_FOLDER", "real-estate"),
        upload_max_mb=float(os.getenv("UPLOAD_MAX_MB", "8")),
        db_pool_size=int(os.getenv("DB_POOL_SIZE", "20")),
        db_max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "30")),
        db_pool_timeout=int(os.getenv("DB_POOL_TIMEOUT", "30")),
        db_pool_recycle=int(os.getenv("DB_POOL_RECYCLE", "300")),
        db_log_slow_queries=_env_bool("DB_LOG_SLOW_QUERIES", "true"),
        db_slow_query_threshold=float(os.getenv("DB_SLOW_QUERY_THRESHOLD", "1.0")),
        **overrides,
    )


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance for the running process"""
    return load_settings()

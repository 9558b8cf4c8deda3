import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Import all models to ensure they're registered with SQLAlchemy Base
# This is needed for relationships between models in different files
from . import (
    models,  # noqa: F401
    models_viewing,  # noqa: F401
)
from .admin_gate import AdminTokenMiddleware
from .config import Settings, get_settings
from .database import Base, build_session_factory, create_db_engine
from .domain.collections.router import (
    comparisons_router,
    favorites_router,
    saved_searches_router,
)
from .domain.images.router import router as images_router
from .domain.imports.router import router as imports_router
from .domain.inquiries.router import router as inquiries_router
from .domain.properties.router import amenities_router
from .domain.properties.router import router as properties_router
from .domain.viewings.admin_router import router as viewings_admin_router
from .domain.viewings.router import router as viewings_router
from .email_service import build_dispatcher
from .routes.admin import router as admin_router
from .routes.auth import router as auth_router
from .security_headers import SecurityHeadersMiddleware
from .services.image_storage import ImageStorage
from .services.oauth_service import OAuthClient, build_oauth_http_client
from .services.session_codec import SessionCodec

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=app.state.engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    yield

    logger.info("Application shutting down...")
    await app.state.oauth_client.aclose()
    app.state.engine.dispose()


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})


def create_app(settings: Optional[Settings] = None, **overrides) -> FastAPI:
    """
    Build the application and every process-wide client it uses.

    Overrides (all optional): clock, engine, oauth_client, dispatcher, image_storage.
    Raises ConfigurationError when JWT_SECRET is missing.
    """
    settings = settings or get_settings()
    clock = overrides.get("clock") or time.time

    engine = overrides.get("engine") or create_db_engine(settings)
    session_codec = SessionCodec(settings.jwt_secret, app_id=settings.app_id, clock=clock)
    oauth_client = overrides.get("oauth_client") or OAuthClient(
        settings, build_oauth_http_client(settings)
    )

    app = FastAPI(title="Estate Viewings API", version="1.0.0", lifespan=lifespan)

    app.state.settings = settings
    app.state.clock = clock
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.session_codec = session_codec
    app.state.oauth_client = oauth_client
    app.state.dispatcher = overrides.get("dispatcher") or build_dispatcher(settings)
    app.state.image_storage = overrides.get("image_storage") or ImageStorage.from_settings(settings)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        try:
            response = await call_next(request)
            return response
        except Exception as e:
            logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
            raise

    app.add_middleware(AdminTokenMiddleware, access_token=settings.admin_access_token)
    if not settings.admin_access_token:
        logger.warning("⚠️ ADMIN_ACCESS_TOKEN not set - /admin pages are locked")

    if settings.security_headers_enabled:
        app.add_middleware(
            SecurityHeadersMiddleware,
            exclude_paths=["/health", "/docs", "/openapi.json"],
            frontend_origins=settings.allowed_origins,
            is_production=settings.environment.lower() == "production",
        )
        logger.info("Security headers enabled")
    else:
        logger.warning("Security headers DISABLED - only use in development!")

    # CORS Configuration
    # The session travels in a cookie, so origins must be explicit
    logger.info(f"CORS allowed origins: {settings.allowed_origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
    )

    # Routes
    app.include_router(auth_router)
    app.include_router(admin_router)
    app.include_router(properties_router)
    app.include_router(amenities_router)
    app.include_router(images_router)
    app.include_router(viewings_router)
    app.include_router(viewings_admin_router)
    app.include_router(favorites_router)
    app.include_router(comparisons_router)
    app.include_router(saved_searches_router)
    app.include_router(inquiries_router)
    app.include_router(imports_router)

    @app.get("/")
    def root():
        return {"message": "Estate Viewings API is running"}

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    return app

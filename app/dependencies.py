"""
Request-scoped access to the process-wide clients built in create_app.
Every client lives on app.state; handlers receive them only through these dependencies.
"""

from datetime import datetime
from typing import Callable

from fastapi import Request

from .config import Settings
from .email_service import EmailDispatcher
from .services.image_storage import ImageStorage
from .services.oauth_service import OAuthClient
from .services.session_codec import SessionCodec
from .shared.validators import utc_from_timestamp


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_clock(request: Request) -> Callable[[], float]:
    return request.app.state.clock


def get_now(request: Request) -> datetime:
    """Current naive UTC time from the app clock"""
    return utc_from_timestamp(request.app.state.clock())


def get_session_codec(request: Request) -> SessionCodec:
    return request.app.state.session_codec


def get_oauth_client(request: Request) -> OAuthClient:
    return request.app.state.oauth_client


def get_dispatcher(request: Request) -> EmailDispatcher:
    return request.app.state.dispatcher


def get_image_storage(request: Request) -> ImageStorage:
    return request.app.state.image_storage

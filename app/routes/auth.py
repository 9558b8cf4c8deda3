"""
Authentication routes - Google OAuth callback, local accounts, logout
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel, Field, field_validator

from ..auth import get_optional_user, get_user_service
from ..config import Settings
from ..dependencies import get_app_settings, get_now, get_oauth_client
from ..domain.users.service import LOCAL_APP_ID, UserService
from ..models import User
from ..schemas import SuccessResponse, UserResponse
from ..services.cookies import (
    append_set_cookie_headers,
    build_logout_cookie_headers,
    build_session_cookie,
)
from ..services.oauth_service import OAuthClient
from ..shared.validators import validate_email

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])

class RegisterRequest(BaseModel):
    name: str = Field(min_length=2)
    email: str
    phone: str = Field(min_length=6)
    password: str = Field(min_length=6)

    @field_validator("email")
    @classmethod
    def validate_register_email(cls, v):
        return validate_email(v)


class LoginRequest(BaseModel):
    email: str
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def validate_login_email(cls, v):
        return validate_email(v)


def _session_response(response, request: Request, token: str, settings: Settings):
    cookie = build_session_cookie(
        token, request, settings.session_ttl_seconds, now=request.app.state.clock()
    )
    append_set_cookie_headers(response, [cookie])
    return response


def _logout_response(response, request: Request):
    append_set_cookie_headers(response, build_logout_cookie_headers(request))
    return response


# ============================================================================
# OAUTH
# ============================================================================


@router.get("/api/oauth/callback")
async def oauth_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    now: datetime = Depends(get_now),
    settings: Settings = Depends(get_app_settings),
    oauth: OAuthClient = Depends(get_oauth_client),
    service: UserService = Depends(get_user_service),
):
    """Exchange the authorization code, upsert the user, set the session cookie"""
    if not code or not state:
        return JSONResponse({"error": "code and state are required"}, status_code=400)

    try:
        token = await oauth.exchange_code_for_token(code, state)
        info = await oauth.get_user_info(token.access_token)

        if not info.open_id:
            return JSONResponse({"error": "openId missing from user info"}, status_code=400)

        user = service.complete_oauth_login(info, now)
        session_token = service.mint_session(user)
    except Exception as e:
        logger.error(f"❌ OAuth callback failed: {e}")
        return JSONResponse({"error": "OAuth callback failed"}, status_code=500)

    response = RedirectResponse(url="/", status_code=302)
    return _session_response(response, request, session_token, settings)


# ============================================================================
# LOCAL ACCOUNTS
# ============================================================================


@router.post("/api/auth/register", response_model=SuccessResponse)
async def register(
    data: RegisterRequest,
    request: Request,
    now: datetime = Depends(get_now),
    settings: Settings = Depends(get_app_settings),
    service: UserService = Depends(get_user_service),
):
    user = service.register_local(data.name, data.email, data.phone, data.password, now)
    token = service.mint_session(user, app_id=LOCAL_APP_ID)
    return _session_response(JSONResponse({"success": True}), request, token, settings)


@router.post("/api/auth/login", response_model=SuccessResponse)
async def login(
    request: Request,
    now: datetime = Depends(get_now),
    settings: Settings = Depends(get_app_settings),
    service: UserService = Depends(get_user_service),
):
    """Malformed input is a 400 here, not a 422"""
    try:
        data = LoginRequest.model_validate(await request.json())
    except ValueError as e:
        raise HTTPException(status_code=400, detail="Invalid email or password format") from e

    user = service.login_local(data.email, data.password, now)
    token = service.mint_session(user, app_id=LOCAL_APP_ID)
    return _session_response(JSONResponse({"success": True}), request, token, settings)


@router.get("/api/dev-login")
async def dev_login(
    request: Request,
    now: datetime = Depends(get_now),
    settings: Settings = Depends(get_app_settings),
    service: UserService = Depends(get_user_service),
):
    if not settings.is_development:
        return JSONResponse({"error": "Not found"}, status_code=404)

    user = service.dev_login(now)
    token = service.mint_session(user)
    logger.info("✅ Dev login issued")
    return _session_response(RedirectResponse(url="/", status_code=302), request, token, settings)


# ============================================================================
# SESSION
# ============================================================================


@router.get("/api/auth/me", response_model=Optional[UserResponse])
async def me(user: Optional[User] = Depends(get_optional_user)):
    return user


@router.post("/api/auth/logout", response_model=SuccessResponse)
async def auth_logout(request: Request):
    return _logout_response(JSONResponse({"success": True}), request)


@router.post("/api/logout", response_model=SuccessResponse)
async def api_logout(request: Request):
    return _logout_response(JSONResponse({"success": True}), request)


@router.get("/logout")
async def logout_redirect(request: Request):
    return _logout_response(RedirectResponse(url="/", status_code=302), request)

"""
Admin back office routes

The /admin pages are guarded by AdminTokenMiddleware. The /api/admin endpoints sit outside that
prefix and check the admin_token cookie themselves.
"""

import logging
from typing import Optional
from urllib.parse import quote, urlsplit

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy import func
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from ..admin_gate import ADMIN_LOGIN_PATH, ADMIN_PREFIX, admin_token_matches, is_admin_path
from ..config import ADMIN_COOKIE_NAME, Settings
from ..database import get_db
from ..dependencies import get_app_settings, get_clock
from ..domain.images.router import get_image_service
from ..domain.images.schemas import ImageReorderRequest, ReorderResponse
from ..domain.images.service import ImageService
from ..domain.properties.schemas import PropertyDetailResponse
from ..domain.properties.service import to_property_detail
from ..models import Inquiry, Property
from ..models_viewing import Viewing
from ..services.cookies import (
    CookieOptions,
    append_set_cookie_headers,
    is_secure_request,
    serialize_cookie,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Admin"])


def _admin_cookie_options(request: Request) -> CookieOptions:
    return CookieOptions(secure=is_secure_request(request), samesite="lax")


def safe_next_path(next_path: Optional[str]) -> str:
    """Only local /admin paths are valid post-login targets"""
    if not next_path:
        return ADMIN_PREFIX
    parts = urlsplit(next_path)
    if parts.scheme or parts.netloc or next_path.startswith("//"):
        return ADMIN_PREFIX
    if not is_admin_path(parts.path):
        return ADMIN_PREFIX
    return next_path


def require_admin_token(request: Request, settings: Settings = Depends(get_app_settings)) -> None:
    if not admin_token_matches(request.cookies.get(ADMIN_COOKIE_NAME), settings.admin_access_token):
        raise HTTPException(status_code=401, detail="Unauthorized")


# ============================================================================
# LOGIN / LOGOUT
# ============================================================================


@router.get("/admin/login")
async def admin_login_page(
    next: Optional[str] = None,
    error: Optional[str] = None,
    settings: Settings = Depends(get_app_settings),
):
    return {
        "next": safe_next_path(next),
        "error": error,
        "tokenConfigured": bool(settings.admin_access_token),
    }


@router.post("/admin/login")
async def admin_login(
    request: Request,
    token: str = Form(""),
    next: Optional[str] = Form(None),
    settings: Settings = Depends(get_app_settings),
):
    target = safe_next_path(next)
    if not admin_token_matches(token, settings.admin_access_token):
        logger.warning("⚠️ Invalid admin token submitted")
        return RedirectResponse(
            url=f"{ADMIN_LOGIN_PATH}?error=invalid&next={quote(target, safe='/')}", status_code=303
        )

    response = RedirectResponse(url=target, status_code=303)
    append_set_cookie_headers(
        response, [serialize_cookie(ADMIN_COOKIE_NAME, token, _admin_cookie_options(request))]
    )
    logger.info("✅ Admin signed in")
    return response


@router.get("/admin/logout")
async def admin_logout(request: Request):
    response = RedirectResponse(url=ADMIN_LOGIN_PATH, status_code=302)
    append_set_cookie_headers(
        response,
        [serialize_cookie(ADMIN_COOKIE_NAME, "", _admin_cookie_options(request), max_age=0)],
    )
    return response


# ============================================================================
# DASHBOARD
# ============================================================================


@router.get("/admin")
async def admin_dashboard(db: Session = Depends(get_db)):
    """Counts for the back office landing page"""
    by_status = dict(
        db.query(Viewing.status, func.count(Viewing.id)).group_by(Viewing.status).all()
    )
    return {
        "properties": db.query(func.count(Property.id)).scalar() or 0,
        "viewings": {
            "scheduled": by_status.get("scheduled", 0),
            "completed": by_status.get("completed", 0),
            "cancelled": by_status.get("cancelled", 0),
            "total": sum(by_status.values()),
        },
        "newInquiries": db.query(func.count(Inquiry.id)).filter(Inquiry.status == "new").scalar()
        or 0,
    }


@router.get("/admin/properties/{property_id}/edit", response_model=PropertyDetailResponse)
async def admin_edit_property(property_id: int, db: Session = Depends(get_db)):
    prop = db.query(Property).filter(Property.id == property_id).first()
    if not prop:
        raise HTTPException(status_code=404, detail="Property not found")
    return to_property_detail(prop)


# ============================================================================
# IMAGE UPLOAD (multipart, admin token)
# ============================================================================


@router.post("/api/admin/property-images", dependencies=[Depends(require_admin_token)])
async def upload_property_image_form(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    clock=Depends(get_clock),
    service: ImageService = Depends(get_image_service),
):
    form = await request.form()

    try:
        property_id = int(form.get("propertyId"))
    except (TypeError, ValueError):
        return JSONResponse({"error": "Invalid property id"}, status_code=400)

    file = form.get("file")
    if not isinstance(file, UploadFile):
        return JSONResponse({"error": "Missing file"}, status_code=400)

    if not (file.content_type or "").startswith("image/"):
        return JSONResponse({"error": "Invalid file type"}, status_code=415)

    data = await file.read()
    if len(data) > settings.upload_max_bytes:
        return JSONResponse({"error": "File too large"}, status_code=413)

    file_name = file.filename or f"property-{property_id}-{int(clock() * 1000)}"
    await service.add_image(property_id, data, file_name)

    return RedirectResponse(url=f"/admin/properties/{property_id}/edit", status_code=303)


@router.post(
    "/api/admin/property-images/reorder",
    response_model=ReorderResponse,
    dependencies=[Depends(require_admin_token)],
)
async def reorder_property_images(
    request: Request,
    service: ImageService = Depends(get_image_service),
):
    try:
        data = ImageReorderRequest.model_validate(await request.json())
    except ValueError:
        return JSONResponse({"error": "Invalid payload"}, status_code=400)

    service.reorder(data.property_id, data.ordered_image_ids)
    return ReorderResponse()

"""Viewing router - scheduling and owner-managed viewings"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...config import Settings
from ...database import get_db
from ...dependencies import get_app_settings, get_dispatcher, get_now
from ...email_service import EmailDispatcher
from ...models import User
from ...schemas import SuccessResponse
from .schemas import ViewingCreate, ViewingResponse, ViewingUpdate
from .service import ViewingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/viewings", tags=["Viewings"])


def get_viewing_service(
    db: Session = Depends(get_db),
    dispatcher: EmailDispatcher = Depends(get_dispatcher),
    settings: Settings = Depends(get_app_settings),
) -> ViewingService:
    """Dependency injection for ViewingService"""
    return ViewingService(db, dispatcher, settings)


@router.post("", response_model=ViewingResponse, status_code=201)
async def create_viewing(
    data: ViewingCreate,
    current_user: User = Depends(get_current_user),
    now: datetime = Depends(get_now),
    service: ViewingService = Depends(get_viewing_service),
):
    """Schedule a property viewing"""
    return await service.create(data, current_user, now)


@router.get("/mine", response_model=list[ViewingResponse])
async def list_my_viewings(
    current_user: User = Depends(get_current_user),
    service: ViewingService = Depends(get_viewing_service),
):
    return service.list_for_user(current_user)


@router.get("/property/{property_id}", response_model=list[ViewingResponse])
async def list_property_viewings(
    property_id: int,
    service: ViewingService = Depends(get_viewing_service),
):
    return service.list_for_property(property_id)


@router.get("/{viewing_id}", response_model=ViewingResponse)
async def get_viewing(
    viewing_id: int,
    service: ViewingService = Depends(get_viewing_service),
):
    return service.get(viewing_id)


@router.patch("/{viewing_id}", response_model=SuccessResponse)
async def update_my_viewing(
    viewing_id: int,
    data: ViewingUpdate,
    current_user: User = Depends(get_current_user),
    service: ViewingService = Depends(get_viewing_service),
):
    """Owner may change the status or notes of their own viewing"""
    service.update_own(viewing_id, data, current_user)
    return SuccessResponse()


@router.delete("/{viewing_id}", response_model=SuccessResponse)
async def delete_my_viewing(
    viewing_id: int,
    current_user: User = Depends(get_current_user),
    service: ViewingService = Depends(get_viewing_service),
):
    service.delete_own(viewing_id, current_user)
    return SuccessResponse()

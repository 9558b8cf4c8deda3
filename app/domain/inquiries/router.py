"""Inquiry router"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_optional_user, require_admin
from ...database import get_db
from ...dependencies import get_dispatcher
from ...email_service import EmailDispatcher
from ...models import User
from ...schemas import SuccessResponse
from .schemas import InquiryCreate, InquiryResponse, InquiryStatus, InquiryStatusUpdate
from .service import InquiryService, to_inquiry_response

router = APIRouter(prefix="/api/inquiries", tags=["Inquiries"])


def get_inquiry_service(
    db: Session = Depends(get_db),
    dispatcher: EmailDispatcher = Depends(get_dispatcher),
) -> InquiryService:
    return InquiryService(db, dispatcher)


@router.post("", response_model=SuccessResponse, status_code=201)
async def submit_inquiry(
    data: InquiryCreate,
    user: Optional[User] = Depends(get_optional_user),
    service: InquiryService = Depends(get_inquiry_service),
):
    """Public contact form for a listing"""
    await service.submit(data, user)
    return SuccessResponse()


@router.get("", response_model=list[InquiryResponse])
async def list_inquiries(
    status: Optional[InquiryStatus] = Query(None),
    search: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    admin: User = Depends(require_admin),
    service: InquiryService = Depends(get_inquiry_service),
):
    return [to_inquiry_response(i) for i in service.list_inquiries(status, search, limit, offset)]


@router.patch("/{inquiry_id}/status", response_model=SuccessResponse)
async def update_inquiry_status(
    inquiry_id: int,
    data: InquiryStatusUpdate,
    admin: User = Depends(require_admin),
    service: InquiryService = Depends(get_inquiry_service),
):
    service.update_status(inquiry_id, data.status)
    return SuccessResponse()


@router.delete("/{inquiry_id}", response_model=SuccessResponse)
async def delete_inquiry(
    inquiry_id: int,
    admin: User = Depends(require_admin),
    service: InquiryService = Depends(get_inquiry_service),
):
    service.delete(inquiry_id)
    return SuccessResponse()

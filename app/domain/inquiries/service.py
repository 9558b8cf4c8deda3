"""Inquiry service - visitor questions about a listing"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ...email_service import EmailDispatcher, new_inquiry_text
from ...models import Inquiry, User
from ...services.notification_service import dispatch_best_effort
from .schemas import InquiryCreate, InquiryResponse

logger = logging.getLogger(__name__)


def to_inquiry_response(inquiry: Inquiry) -> InquiryResponse:
    title = inquiry.property.title if inquiry.property else f"Property #{inquiry.property_id}"
    return InquiryResponse(
        id=inquiry.id,
        property_id=inquiry.property_id,
        user_id=inquiry.user_id,
        name=inquiry.name,
        email=inquiry.email,
        phone=inquiry.phone,
        message=inquiry.message,
        status=inquiry.status,
        property_title=title,
        created_at=inquiry.created_at,
        updated_at=inquiry.updated_at,
    )


class InquiryService:
    """Service layer for inquiries"""

    def __init__(self, db: Session, dispatcher: EmailDispatcher):
        self.db = db
        self.dispatcher = dispatcher

    async def submit(self, data: InquiryCreate, user: Optional[User] = None) -> Inquiry:
        inquiry = Inquiry(
            property_id=data.property_id,
            user_id=user.id if user else None,
            name=data.name,
            email=data.email,
            phone=data.phone,
            message=data.message,
            status="new",
        )
        try:
            self.db.add(inquiry)
            self.db.commit()
            self.db.refresh(inquiry)
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to store inquiry for property {data.property_id}: {e}")
            raise

        logger.info(f"✅ Inquiry {inquiry.id} received for property {data.property_id}")

        label = inquiry.property.title if inquiry.property else f"property ID {data.property_id}"
        await dispatch_best_effort(
            "new inquiry",
            self.dispatcher.send_owner_notification,
            "New Property Inquiry",
            new_inquiry_text(label, data.name, data.email, data.phone, data.message),
        )
        return inquiry

    def list_inquiries(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Inquiry]:
        """Newest first"""
        query = self.db.query(Inquiry).options(joinedload(Inquiry.property))
        if status:
            query = query.filter(Inquiry.status == status)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    Inquiry.name.ilike(pattern),
                    Inquiry.email.ilike(pattern),
                    Inquiry.phone.ilike(pattern),
                )
            )
        query = query.order_by(Inquiry.created_at.desc(), Inquiry.id.desc()).offset(offset)
        if limit:
            query = query.limit(limit)
        return query.all()

    def update_status(self, inquiry_id: int, status: str) -> Inquiry:
        inquiry = self.db.query(Inquiry).filter(Inquiry.id == inquiry_id).first()
        if not inquiry:
            raise HTTPException(status_code=404, detail="Inquiry not found")
        inquiry.status = status
        self.db.commit()
        self.db.refresh(inquiry)
        logger.info(f"✅ Inquiry {inquiry_id} marked {status}")
        return inquiry

    def delete(self, inquiry_id: int) -> None:
        self.db.query(Inquiry).filter(Inquiry.id == inquiry_id).delete(synchronize_session=False)
        self.db.commit()

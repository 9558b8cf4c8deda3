"""Viewing service - Business logic for the viewing lifecycle"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import Settings
from ...email_service import EmailDispatcher, ViewingConfirmation
from ...models import Property, User
from ...models_viewing import Viewing
from ...services.notification_service import dispatch_best_effort
from .repository import ViewingRepository
from .schemas import ViewingCreate, ViewingFilters, ViewingUpdate

logger = logging.getLogger(__name__)

DEFAULT_PROPERTY_LABEL = "Property Viewing"


@dataclass
class BulkStatusResult:
    """Outcome of a bulk status change; `count` is always the number of ids submitted"""

    count: int
    updated_ids: list[int] = field(default_factory=list)
    skipped_ids: list[int] = field(default_factory=list)


def format_property_address(prop: Property) -> str:
    return f"{prop.address}, {prop.city}, {prop.state} {prop.zip_code}"


def property_label(prop: Optional[Property]) -> str:
    return prop.title if prop and prop.title else DEFAULT_PROPERTY_LABEL


def build_confirmation(viewing: Viewing, prop: Property, settings: Settings) -> ViewingConfirmation:
    return ViewingConfirmation(
        visitor_name=viewing.visitor_name,
        visitor_email=viewing.visitor_email,
        property_title=prop.title,
        property_address=format_property_address(prop),
        viewing_date=viewing.viewing_date,
        viewing_time=viewing.viewing_time,
        duration=viewing.duration,
        agent_name=settings.agent_name,
        agent_phone=settings.agent_phone,
        agent_email=settings.agent_email,
        notes=viewing.notes,
    )


class ViewingService:
    """Service layer for viewing business logic"""

    def __init__(self, db: Session, dispatcher: EmailDispatcher, settings: Settings):
        self.db = db
        self.dispatcher = dispatcher
        self.settings = settings
        self.repo = ViewingRepository()

    # ------------------------------------------------------------------
    # Visitor operations
    # ------------------------------------------------------------------

    async def create(self, data: ViewingCreate, user: User, now: datetime) -> Viewing:
        """Schedule a viewing for the caller. Double booking is allowed."""
        if data.viewing_date < now:
            logger.warning(f"⚠️ User {user.id} tried to book a viewing in the past: {data.viewing_date}")
            raise HTTPException(status_code=400, detail="Please select a future date")

        prop = self.repo.get_property(self.db, data.property_id)
        if not prop:
            raise HTTPException(status_code=404, detail="Property not found")

        try:
            viewing = self.repo.create(
                self.db,
                property_id=data.property_id,
                user_id=user.id,
                visitor_name=data.visitor_name,
                visitor_email=data.visitor_email,
                visitor_phone=data.visitor_phone,
                viewing_date=data.viewing_date,
                viewing_time=data.viewing_time,
                duration=data.duration,
                notes=data.notes,
                status="scheduled",
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to create viewing for user {user.id}: {e}")
            raise

        logger.info(f"✅ Viewing {viewing.id} scheduled for property {prop.id}")

        await dispatch_best_effort(
            "viewing confirmation",
            self.dispatcher.send_confirmation,
            build_confirmation(viewing, prop, self.settings),
        )
        return viewing

    def get(self, viewing_id: int) -> Viewing:
        viewing = self.repo.get_by_id(self.db, viewing_id)
        if not viewing:
            raise HTTPException(status_code=404, detail="Viewing not found")
        return viewing

    def list_for_user(self, user: User) -> list[Viewing]:
        return self.repo.list_for_user(self.db, user.id)

    def list_for_property(self, property_id: int) -> list[Viewing]:
        return self.repo.list_for_property(self.db, property_id)

    def _get_owned(self, viewing_id: int, user: User) -> Viewing:
        viewing = self.repo.get_by_id(self.db, viewing_id)
        if not viewing or viewing.user_id != user.id:
            raise HTTPException(status_code=403, detail="Unauthorized")
        return viewing

    def update_own(self, viewing_id: int, data: ViewingUpdate, user: User) -> Viewing:
        viewing = self._get_owned(viewing_id, user)
        if data.status is not None:
            viewing.status = data.status
        if data.notes is not None:
            viewing.notes = data.notes
        self.db.commit()
        self.db.refresh(viewing)
        return viewing

    def delete_own(self, viewing_id: int, user: User) -> None:
        self._get_owned(viewing_id, user)
        self.repo.delete(self.db, viewing_id)
        logger.info(f"✅ Viewing {viewing_id} deleted by its owner {user.id}")

    # ------------------------------------------------------------------
    # Admin operations
    # ------------------------------------------------------------------

    def list_all(self, filters: ViewingFilters) -> list[Viewing]:
        return self.repo.list_filtered(self.db, filters)

    async def _apply_status(
        self, viewing: Viewing, status: str, cancellation_reason: Optional[str] = None
    ) -> None:
        """
        Notify first when the viewing is newly cancelled, then persist the status.
        A failed notification never blocks the status change.
        """
        if status == "cancelled" and viewing.status != "cancelled":
            await dispatch_best_effort(
                "viewing cancellation",
                self.dispatcher.send_cancellation,
                viewing.visitor_email,
                viewing.visitor_name,
                property_label(viewing.property),
                viewing.viewing_date,
            )

        viewing.status = status
        if status == "cancelled" and cancellation_reason:
            viewing.cancellation_reason = cancellation_reason

        try:
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update viewing {viewing.id}: {e}")
            raise

    async def update_status(
        self, viewing_id: int, status: str, cancellation_reason: Optional[str] = None
    ) -> Viewing:
        viewing = self.repo.get_by_id(self.db, viewing_id)
        if not viewing:
            raise HTTPException(status_code=404, detail="Viewing not found")

        previous = viewing.status
        await self._apply_status(viewing, status, cancellation_reason)
        logger.info(f"✅ Viewing {viewing_id} status {previous} -> {status}")
        return viewing

    async def bulk_update_status(self, ids: list[int], status: str) -> BulkStatusResult:
        """
        Apply a status to each id in submission order.
        Unknown ids are skipped; each item commits on its own.
        """
        result = BulkStatusResult(count=len(ids))
        for viewing_id in ids:
            viewing = self.repo.get_by_id(self.db, viewing_id)
            if not viewing:
                result.skipped_ids.append(viewing_id)
                continue
            await self._apply_status(viewing, status)
            result.updated_ids.append(viewing_id)

        if result.skipped_ids:
            logger.warning(f"⚠️ Bulk status update skipped unknown viewings: {result.skipped_ids}")
        logger.info(
            f"✅ Bulk status update to {status}: {len(result.updated_ids)} of {result.count} updated"
        )
        return result

    def delete(self, viewing_id: int) -> None:
        """Unconditional delete; a missing id is not an error"""
        deleted = self.repo.delete(self.db, viewing_id)
        logger.info(f"✅ Admin delete of viewing {viewing_id} removed {deleted} row(s)")

"""Viewing repository - Database operations for property viewings"""

from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import Property
from ...models_viewing import Viewing
from .schemas import ViewingFilters


class ViewingRepository:
    """Repository for viewing database operations"""

    @staticmethod
    def get_property(db: Session, property_id: int) -> Optional[Property]:
        return db.query(Property).filter(Property.id == property_id).first()

    @staticmethod
    def get_by_id(db: Session, viewing_id: int) -> Optional[Viewing]:
        return db.query(Viewing).filter(Viewing.id == viewing_id).first()

    @staticmethod
    def create(db: Session, **viewing_data) -> Viewing:
        viewing = Viewing(**viewing_data)
        db.add(viewing)
        db.commit()
        db.refresh(viewing)
        return viewing

    @staticmethod
    def list_for_user(db: Session, user_id: int) -> list[Viewing]:
        return (
            db.query(Viewing)
            .filter(Viewing.user_id == user_id)
            .order_by(Viewing.viewing_date)
            .all()
        )

    @staticmethod
    def list_for_property(db: Session, property_id: int) -> list[Viewing]:
        return (
            db.query(Viewing)
            .filter(Viewing.property_id == property_id)
            .order_by(Viewing.viewing_date)
            .all()
        )

    @staticmethod
    def list_filtered(db: Session, filters: ViewingFilters) -> list[Viewing]:
        query = db.query(Viewing)

        if filters.status:
            query = query.filter(Viewing.status == filters.status)
        if filters.property_id:
            query = query.filter(Viewing.property_id == filters.property_id)
        if filters.start_date:
            query = query.filter(Viewing.viewing_date >= filters.start_date)
        if filters.end_date:
            query = query.filter(Viewing.viewing_date <= filters.end_date)
        if filters.search_query:
            pattern = f"%{filters.search_query}%"
            query = query.filter(
                or_(
                    Viewing.visitor_name.ilike(pattern),
                    Viewing.visitor_email.ilike(pattern),
                    Viewing.visitor_phone.ilike(pattern),
                )
            )

        return query.order_by(Viewing.viewing_date).all()

    @staticmethod
    def list_due_for_reminder(db: Session, window_start: datetime, window_end: datetime) -> list[Viewing]:
        return (
            db.query(Viewing)
            .filter(
                Viewing.status == "scheduled",
                Viewing.reminder_sent.is_(False),
                Viewing.viewing_date >= window_start,
                Viewing.viewing_date <= window_end,
            )
            .order_by(Viewing.viewing_date)
            .all()
        )

    @staticmethod
    def delete(db: Session, viewing_id: int) -> int:
        """Delete by id; returns rows removed (0 when the id does not exist)"""
        deleted = db.query(Viewing).filter(Viewing.id == viewing_id).delete(synchronize_session=False)
        db.commit()
        return deleted

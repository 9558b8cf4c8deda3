"""Property repository - Database operations for listings"""

from typing import Optional

from sqlalchemy.orm import Session, selectinload

from ...models import Favorite, Inquiry, Property
from .schemas import PropertySearch


class PropertyRepository:
    """Repository for property database operations"""

    @staticmethod
    def list_page(db: Session, limit: int = 12, offset: int = 0) -> list[Property]:
        return (
            db.query(Property)
            .options(selectinload(Property.images))
            .order_by(Property.id)
            .offset(offset)
            .limit(limit)
            .all()
        )

    @staticmethod
    def list_featured(db: Session, limit: int = 6) -> list[Property]:
        return (
            db.query(Property)
            .options(selectinload(Property.images))
            .filter(Property.featured.is_(True))
            .order_by(Property.id)
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_by_id(db: Session, property_id: int) -> Optional[Property]:
        return db.query(Property).filter(Property.id == property_id).first()

    @staticmethod
    def get_many(db: Session, property_ids: list[int]) -> list[Property]:
        if not property_ids:
            return []
        return db.query(Property).filter(Property.id.in_(property_ids)).all()

    @staticmethod
    def search(db: Session, filters: PropertySearch) -> list[Property]:
        """
        Column filters run in SQL. Amenity matching runs in Python because amenities
        are a JSON list; pagination is applied after it.
        """
        query = db.query(Property).options(selectinload(Property.images))

        if filters.min_price is not None:
            query = query.filter(Property.price >= filters.min_price)
        if filters.max_price is not None:
            query = query.filter(Property.price <= filters.max_price)
        if filters.bedrooms is not None:
            query = query.filter(Property.bedrooms == filters.bedrooms)
        if filters.bathrooms is not None:
            query = query.filter(Property.bathrooms == filters.bathrooms)
        if filters.property_type:
            query = query.filter(Property.property_type == filters.property_type)

        query = query.order_by(Property.id)

        if not filters.amenities:
            return query.offset(filters.offset).limit(filters.limit).all()

        wanted = [a.lower() for a in filters.amenities]
        matched = [p for p in query.all() if _has_all_amenities(p.amenities, wanted)]
        return matched[filters.offset : filters.offset + filters.limit]

    @staticmethod
    def create(db: Session, **property_data) -> Property:
        prop = Property(**property_data)
        db.add(prop)
        db.commit()
        db.refresh(prop)
        return prop

    @staticmethod
    def delete(db: Session, prop: Property) -> None:
        """Remove a listing with its images, viewings, favorites and inquiries"""
        db.query(Favorite).filter(Favorite.property_id == prop.id).delete(synchronize_session=False)
        db.query(Inquiry).filter(Inquiry.property_id == prop.id).delete(synchronize_session=False)
        # Images and viewings go through the relationship cascade
        db.delete(prop)
        db.commit()


def _has_all_amenities(amenities, wanted: list[str]) -> bool:
    if not amenities:
        return False
    if isinstance(amenities, dict):
        amenities = list(amenities.values())
    have = [a.lower() for a in amenities if isinstance(a, str)]
    return all(any(w in a for a in have) for w in wanted)

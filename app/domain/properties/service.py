"""Property service - Business logic for listings"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Property
from .repository import PropertyRepository
from .schemas import (
    PropertyCreate,
    PropertyDetailResponse,
    PropertyImageResponse,
    PropertyResponse,
    PropertySearch,
    PropertyUpdate,
)

logger = logging.getLogger(__name__)


def _as_float(value):
    return float(value) if value is not None else None


def _property_fields(prop: Property) -> dict:
    return {
        "id": prop.id,
        "title": prop.title,
        "description": prop.description,
        "price": float(prop.price),
        "property_type": prop.property_type,
        "bedrooms": prop.bedrooms,
        "bathrooms": prop.bathrooms,
        "square_feet": prop.square_feet,
        "address": prop.address,
        "city": prop.city,
        "state": prop.state,
        "zip_code": prop.zip_code,
        "latitude": _as_float(prop.latitude),
        "longitude": _as_float(prop.longitude),
        "amenities": list(prop.amenities or []),
        "featured": bool(prop.featured),
        "status": prop.status,
        "primary_image_url": prop.images[0].image_url if prop.images else None,
        "created_at": prop.created_at,
        "updated_at": prop.updated_at,
    }


def to_property_response(prop: Property) -> PropertyResponse:
    return PropertyResponse(**_property_fields(prop))


def to_property_detail(prop: Property) -> PropertyDetailResponse:
    return PropertyDetailResponse(
        **_property_fields(prop),
        images=[PropertyImageResponse.model_validate(img) for img in prop.images],
    )


class PropertyService:
    """Service layer for property business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PropertyRepository()

    def list_properties(self) -> list[Property]:
        return self.repo.list_page(self.db, limit=12, offset=0)

    def list_featured(self) -> list[Property]:
        return self.repo.list_featured(self.db, limit=6)

    def search(self, filters: PropertySearch) -> list[Property]:
        return self.repo.search(self.db, filters)

    def get_property(self, property_id: int) -> Property:
        prop = self.repo.get_by_id(self.db, property_id)
        if not prop:
            raise HTTPException(status_code=404, detail="Property not found")
        return prop

    def create_property(self, data: PropertyCreate) -> Property:
        try:
            prop = self.repo.create(
                self.db,
                **data.model_dump(exclude={"amenities"}),
                amenities=data.amenities or [],
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to create property: {e}")
            raise
        logger.info(f"✅ Property {prop.id} created")
        return prop

    def update_property(self, property_id: int, data: PropertyUpdate) -> Property:
        prop = self.get_property(property_id)
        updates = data.model_dump(exclude_unset=True)
        if not updates:
            raise HTTPException(status_code=400, detail="No updates provided")

        for key, value in updates.items():
            if key == "amenities":
                value = value or []
            setattr(prop, key, value)

        try:
            self.db.commit()
            self.db.refresh(prop)
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update property {property_id}: {e}")
            raise
        logger.info(f"✅ Property {property_id} updated: {sorted(updates)}")
        return prop

    def delete_property(self, property_id: int) -> None:
        prop = self.get_property(property_id)
        try:
            self.repo.delete(self.db, prop)
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to delete property {property_id}: {e}")
            raise
        logger.info(f"✅ Property {property_id} deleted")

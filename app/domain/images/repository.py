"""Property image repository"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import PropertyImage


class ImageRepository:
    """Repository for property image database operations"""

    @staticmethod
    def list_for_property(db: Session, property_id: int) -> list[PropertyImage]:
        return (
            db.query(PropertyImage)
            .filter(PropertyImage.property_id == property_id)
            .order_by(PropertyImage.display_order)
            .all()
        )

    @staticmethod
    def get_by_id(db: Session, image_id: int) -> Optional[PropertyImage]:
        return db.query(PropertyImage).filter(PropertyImage.id == image_id).first()

    @staticmethod
    def get_by_order(db: Session, property_id: int, display_order: int) -> Optional[PropertyImage]:
        return (
            db.query(PropertyImage)
            .filter(
                PropertyImage.property_id == property_id,
                PropertyImage.display_order == display_order,
            )
            .first()
        )

    @staticmethod
    def max_display_order(db: Session, property_id: int) -> int:
        result = (
            db.query(func.max(PropertyImage.display_order))
            .filter(PropertyImage.property_id == property_id)
            .scalar()
        )
        return result or 0

    @staticmethod
    def create(db: Session, **image_data) -> PropertyImage:
        image = PropertyImage(**image_data)
        db.add(image)
        db.commit()
        db.refresh(image)
        return image

    @staticmethod
    def delete(db: Session, image: PropertyImage) -> None:
        db.delete(image)
        db.commit()

"""Image service - uploads and ordering of property photos"""

import base64
import binascii
import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Property, PropertyImage
from ...services.image_storage import ImageStorage, ImageStorageError
from .repository import ImageRepository

logger = logging.getLogger(__name__)


def decode_image_data(image_data: str) -> bytes:
    """Decode base64 image data, with or without a data: URL prefix"""
    if image_data.startswith("data:") and "," in image_data:
        image_data = image_data.split(",", 1)[1]
    try:
        data = base64.b64decode(image_data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise HTTPException(status_code=400, detail="Invalid image data") from e
    if not data:
        raise HTTPException(status_code=400, detail="Invalid image data")
    return data


class ImageService:
    """Service layer for property images"""

    def __init__(self, db: Session, storage: ImageStorage):
        self.db = db
        self.storage = storage
        self.repo = ImageRepository()

    def list_images(self, property_id: int) -> list[PropertyImage]:
        return self.repo.list_for_property(self.db, property_id)

    def _require_property(self, property_id: int) -> Property:
        prop = self.db.query(Property).filter(Property.id == property_id).first()
        if not prop:
            raise HTTPException(status_code=404, detail="Property not found")
        return prop

    async def add_image(
        self, property_id: int, data: bytes, file_name: str, caption: Optional[str] = None
    ) -> PropertyImage:
        """Upload to storage and append after the current last image"""
        self._require_property(property_id)

        try:
            url = await self.storage.upload(data, file_name)
        except ImageStorageError as e:
            logger.error(f"❌ Image upload failed for property {property_id}: {e}")
            raise HTTPException(status_code=503, detail="Image storage unavailable") from e

        next_order = self.repo.max_display_order(self.db, property_id) + 1
        try:
            image = self.repo.create(
                self.db,
                property_id=property_id,
                image_url=url,
                caption=caption,
                display_order=next_order,
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to save image for property {property_id}: {e}")
            raise

        logger.info(f"✅ Image {image.id} added to property {property_id} at position {next_order}")
        return image

    def delete_image(self, image_id: int) -> None:
        image = self.repo.get_by_id(self.db, image_id)
        if not image:
            raise HTTPException(status_code=404, detail="Image not found")
        self.repo.delete(self.db, image)
        logger.info(f"✅ Image {image_id} deleted")

    def set_display_order(self, image_id: int, display_order: int) -> PropertyImage:
        """
        Move one image to a position. The image currently holding that position takes
        the moved image's old position.
        """
        image = self.repo.get_by_id(self.db, image_id)
        if not image:
            raise HTTPException(status_code=404, detail="Image not found")

        if image.display_order == display_order:
            return image

        holder = self.repo.get_by_order(self.db, image.property_id, display_order)
        try:
            if holder:
                previous = image.display_order
                # Park the moved image so the unique (property, order) pair stays free
                image.display_order = -image.id
                self.db.flush()
                holder.display_order = previous
                self.db.flush()
            image.display_order = display_order
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to reorder image {image_id}: {e}")
            raise

        self.db.refresh(image)
        return image

    def reorder(self, property_id: int, ordered_image_ids: list[int]) -> list[PropertyImage]:
        """
        Renumber images 1..n in the given order, in one transaction.
        Images not listed keep their relative order after the listed ones.
        """
        if len(set(ordered_image_ids)) != len(ordered_image_ids):
            raise HTTPException(status_code=400, detail="Duplicate image ids")

        images = self.repo.list_for_property(self.db, property_id)
        by_id = {image.id: image for image in images}
        if any(image_id not in by_id for image_id in ordered_image_ids):
            raise HTTPException(status_code=400, detail="Invalid image selection")

        listed = [by_id[image_id] for image_id in ordered_image_ids]
        rest = [image for image in images if image.id not in set(ordered_image_ids)]
        final = listed + rest

        try:
            for index, image in enumerate(final):
                image.display_order = -(index + 1)
            self.db.flush()
            for index, image in enumerate(final):
                image.display_order = index + 1
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to reorder images for property {property_id}: {e}")
            raise

        logger.info(f"✅ Reordered {len(final)} images for property {property_id}")
        return final

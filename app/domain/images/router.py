"""Image router - property photos"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...dependencies import get_image_storage
from ...models import User
from ...schemas import SuccessResponse
from ...services.image_storage import ImageStorage
from ..properties.schemas import PropertyImageResponse
from .schemas import ImageOrderUpdate, ImageUploadRequest, ImageUploadResponse
from .service import ImageService, decode_image_data

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Images"])


def get_image_service(
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
) -> ImageService:
    """Dependency injection for ImageService"""
    return ImageService(db, storage)


@router.get("/properties/{property_id}/images", response_model=list[PropertyImageResponse])
async def list_property_images(property_id: int, service: ImageService = Depends(get_image_service)):
    """Images in display order"""
    return service.list_images(property_id)


@router.post("/properties/{property_id}/images", response_model=ImageUploadResponse, status_code=201)
async def upload_property_image(
    property_id: int,
    data: ImageUploadRequest,
    admin: User = Depends(require_admin),
    service: ImageService = Depends(get_image_service),
):
    raw = decode_image_data(data.image_data)
    image = await service.add_image(property_id, raw, data.file_name, data.caption)
    return ImageUploadResponse(url=image.image_url, image=PropertyImageResponse.model_validate(image))


@router.delete("/images/{image_id}", response_model=SuccessResponse)
async def delete_image(
    image_id: int,
    admin: User = Depends(require_admin),
    service: ImageService = Depends(get_image_service),
):
    service.delete_image(image_id)
    return SuccessResponse()


@router.patch("/images/{image_id}/order", response_model=PropertyImageResponse)
async def update_image_order(
    image_id: int,
    data: ImageOrderUpdate,
    admin: User = Depends(require_admin),
    service: ImageService = Depends(get_image_service),
):
    return service.set_display_order(image_id, data.display_order)

"""Property image schemas"""

from typing import Optional

from pydantic import Field

from ..properties.schemas import PropertyImageResponse
from ...schemas import CamelModel


class ImageUploadRequest(CamelModel):
    """Base64 upload from the admin RPC surface"""

    image_data: str
    file_name: str = Field(min_length=1)
    caption: Optional[str] = None


class ImageUploadResponse(CamelModel):
    success: bool = True
    url: str
    image: PropertyImageResponse


class ImageOrderUpdate(CamelModel):
    display_order: int = Field(ge=1)


class ImageReorderRequest(CamelModel):
    property_id: int
    ordered_image_ids: list[int]


class ReorderResponse(CamelModel):
    ok: bool = True

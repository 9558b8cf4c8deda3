"""Per-user collection schemas - favorites, comparisons, saved searches"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ...schemas import CamelModel

MAX_COMPARISON_PROPERTIES = 5


class PropertyRef(CamelModel):
    property_id: int


class FavoriteResponse(CamelModel):
    id: int
    user_id: int
    property_id: int
    created_at: Optional[datetime] = None


class SavedSearchCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    property_type: Optional[str] = None
    amenities: Optional[list[str]] = None


class SavedSearchUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    property_type: Optional[str] = None
    amenities: Optional[list[str]] = None


class SavedSearchResponse(CamelModel):
    id: int
    user_id: int
    name: str
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    property_type: Optional[str] = None
    amenities: Optional[list[str]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

"""Property domain schemas"""

from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import Field, field_validator

from ...schemas import CamelModel
from ...shared.validators import require_text

PropertyType = Literal["house", "apartment", "condo", "townhouse", "land", "commercial"]
PropertyStatus = Literal["available", "pending", "sold"]


def normalize_amenities(value: Optional[Union[list[str], str]]) -> Optional[list[str]]:
    """Accept a list or a comma-separated string; drop blanks"""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.split(",")
    return [a.strip() for a in value if a and a.strip()]


class PropertyCreate(CamelModel):
    title: str
    price: float = Field(ge=0)
    property_type: PropertyType
    bedrooms: int = Field(ge=0)
    bathrooms: int = Field(ge=0)
    square_feet: int = Field(ge=0)
    address: str
    city: str
    state: str
    zip_code: str
    latitude: float
    longitude: float
    description: Optional[str] = None
    amenities: Optional[Union[list[str], str]] = None
    featured: bool = False
    status: PropertyStatus = "available"

    @field_validator("title", "address", "city", "state", "zip_code")
    @classmethod
    def validate_required_text(cls, v, info):
        return require_text(v, info.field_name)

    @field_validator("amenities")
    @classmethod
    def validate_amenities(cls, v):
        return normalize_amenities(v)


class PropertyUpdate(CamelModel):
    title: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    property_type: Optional[PropertyType] = None
    bedrooms: Optional[int] = Field(default=None, ge=0)
    bathrooms: Optional[int] = Field(default=None, ge=0)
    square_feet: Optional[int] = Field(default=None, ge=0)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    description: Optional[str] = None
    amenities: Optional[Union[list[str], str]] = None
    featured: Optional[bool] = None
    status: Optional[PropertyStatus] = None

    @field_validator("amenities")
    @classmethod
    def validate_amenities(cls, v):
        return normalize_amenities(v)


class PropertyImageResponse(CamelModel):
    id: int
    property_id: int
    image_url: str
    caption: Optional[str] = None
    display_order: int
    created_at: Optional[datetime] = None


class PropertyResponse(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    price: float
    property_type: str
    bedrooms: int
    bathrooms: int
    square_feet: Optional[int] = None
    address: str
    city: str
    state: str
    zip_code: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    amenities: list[str] = []
    featured: bool
    status: str
    primary_image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PropertyDetailResponse(PropertyResponse):
    images: list[PropertyImageResponse] = []


class PropertySearch(CamelModel):
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    property_type: Optional[str] = None
    amenities: Optional[list[str]] = None
    limit: int = Field(default=12, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class AmenityResponse(CamelModel):
    id: str
    label: str
    icon: str

"""Property router - public listings and admin listing management"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import User
from ...schemas import SuccessResponse
from ...shared.amenities import AMENITIES
from .schemas import (
    AmenityResponse,
    PropertyCreate,
    PropertyDetailResponse,
    PropertyResponse,
    PropertySearch,
    PropertyUpdate,
)
from .service import PropertyService, to_property_detail, to_property_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/properties", tags=["Properties"])
amenities_router = APIRouter(prefix="/api/amenities", tags=["Properties"])


def get_property_service(db: Session = Depends(get_db)) -> PropertyService:
    """Dependency injection for PropertyService"""
    return PropertyService(db)


# ============================================================================
# PUBLIC
# ============================================================================


@router.get("", response_model=list[PropertyResponse])
async def list_properties(service: PropertyService = Depends(get_property_service)):
    """First page of listings"""
    return [to_property_response(p) for p in service.list_properties()]


@router.get("/featured", response_model=list[PropertyResponse])
async def list_featured_properties(service: PropertyService = Depends(get_property_service)):
    return [to_property_response(p) for p in service.list_featured()]


@router.get("/search", response_model=list[PropertyResponse])
async def search_properties(
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    bedrooms: Optional[int] = Query(None),
    bathrooms: Optional[int] = Query(None),
    property_type: Optional[str] = Query(None, alias="propertyType"),
    amenities: Optional[list[str]] = Query(None),
    limit: int = Query(12, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: PropertyService = Depends(get_property_service),
):
    """Filter listings; every requested amenity must match (case-insensitive substring)"""
    filters = PropertySearch(
        min_price=min_price,
        max_price=max_price,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        property_type=property_type,
        amenities=amenities,
        limit=limit,
        offset=offset,
    )
    return [to_property_response(p) for p in service.search(filters)]


@router.get("/{property_id}", response_model=PropertyDetailResponse)
async def get_property(property_id: int, service: PropertyService = Depends(get_property_service)):
    return to_property_detail(service.get_property(property_id))


# ============================================================================
# ADMIN
# ============================================================================


@router.post("", response_model=PropertyDetailResponse, status_code=201)
async def create_property(
    data: PropertyCreate,
    admin: User = Depends(require_admin),
    service: PropertyService = Depends(get_property_service),
):
    return to_property_detail(service.create_property(data))


@router.patch("/{property_id}", response_model=PropertyDetailResponse)
async def update_property(
    property_id: int,
    data: PropertyUpdate,
    admin: User = Depends(require_admin),
    service: PropertyService = Depends(get_property_service),
):
    return to_property_detail(service.update_property(property_id, data))


@router.delete("/{property_id}", response_model=SuccessResponse)
async def delete_property(
    property_id: int,
    admin: User = Depends(require_admin),
    service: PropertyService = Depends(get_property_service),
):
    service.delete_property(property_id)
    return SuccessResponse()


@amenities_router.get("", response_model=list[AmenityResponse])
async def list_amenities():
    return AMENITIES

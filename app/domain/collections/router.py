"""Collection routers - favorites, comparisons and saved searches"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user, get_optional_user
from ...database import get_db
from ...models import User
from ...schemas import SuccessResponse
from ..properties.schemas import PropertyResponse
from ..properties.service import to_property_response
from .schemas import (
    FavoriteResponse,
    PropertyRef,
    SavedSearchCreate,
    SavedSearchResponse,
    SavedSearchUpdate,
)
from .service import CollectionService

logger = logging.getLogger(__name__)

favorites_router = APIRouter(prefix="/api/favorites", tags=["Favorites"])
comparisons_router = APIRouter(prefix="/api/comparisons", tags=["Comparisons"])
saved_searches_router = APIRouter(prefix="/api/saved-searches", tags=["Saved Searches"])


def get_collection_service(db: Session = Depends(get_db)) -> CollectionService:
    """Dependency injection for CollectionService"""
    return CollectionService(db)


# ============================================================================
# FAVORITES
# ============================================================================


@favorites_router.get("", response_model=list[FavoriteResponse])
async def list_favorites(
    user: Optional[User] = Depends(get_optional_user),
    service: CollectionService = Depends(get_collection_service),
):
    """Anonymous callers get an empty list"""
    if not user:
        return []
    return service.list_favorites(user)


@favorites_router.post("", response_model=SuccessResponse)
async def add_favorite(
    data: PropertyRef,
    user: User = Depends(get_current_user),
    service: CollectionService = Depends(get_collection_service),
):
    service.add_favorite(user, data.property_id)
    return SuccessResponse()


@favorites_router.delete("/{property_id}", response_model=SuccessResponse)
async def remove_favorite(
    property_id: int,
    user: User = Depends(get_current_user),
    service: CollectionService = Depends(get_collection_service),
):
    service.remove_favorite(user, property_id)
    return SuccessResponse()


# ============================================================================
# COMPARISONS
# ============================================================================


@comparisons_router.get("", response_model=list[PropertyResponse])
async def list_comparison(
    user: Optional[User] = Depends(get_optional_user),
    service: CollectionService = Depends(get_collection_service),
):
    if not user:
        return []
    return [to_property_response(p) for p in service.list_comparison(user)]


@comparisons_router.post("", response_model=SuccessResponse)
async def add_to_comparison(
    data: PropertyRef,
    user: User = Depends(get_current_user),
    service: CollectionService = Depends(get_collection_service),
):
    service.add_to_comparison(user, data.property_id)
    return SuccessResponse()


@comparisons_router.delete("/{property_id}", response_model=SuccessResponse)
async def remove_from_comparison(
    property_id: int,
    user: User = Depends(get_current_user),
    service: CollectionService = Depends(get_collection_service),
):
    service.remove_from_comparison(user, property_id)
    return SuccessResponse()


@comparisons_router.delete("", response_model=SuccessResponse)
async def clear_comparison(
    user: User = Depends(get_current_user),
    service: CollectionService = Depends(get_collection_service),
):
    service.clear_comparison(user)
    return SuccessResponse()


# ============================================================================
# SAVED SEARCHES
# ============================================================================


@saved_searches_router.get("", response_model=list[SavedSearchResponse])
async def list_saved_searches(
    user: Optional[User] = Depends(get_optional_user),
    service: CollectionService = Depends(get_collection_service),
):
    if not user:
        return []
    return service.list_saved_searches(user)


@saved_searches_router.post("", response_model=SavedSearchResponse, status_code=201)
async def create_saved_search(
    data: SavedSearchCreate,
    user: User = Depends(get_current_user),
    service: CollectionService = Depends(get_collection_service),
):
    return service.create_saved_search(user, data)


@saved_searches_router.get("/{search_id}", response_model=SavedSearchResponse)
async def get_saved_search(
    search_id: int,
    user: User = Depends(get_current_user),
    service: CollectionService = Depends(get_collection_service),
):
    return service.get_saved_search(user, search_id)


@saved_searches_router.patch("/{search_id}", response_model=SavedSearchResponse)
async def update_saved_search(
    search_id: int,
    data: SavedSearchUpdate,
    user: User = Depends(get_current_user),
    service: CollectionService = Depends(get_collection_service),
):
    return service.update_saved_search(user, search_id, data)


@saved_searches_router.delete("/{search_id}", response_model=SuccessResponse)
async def delete_saved_search(
    search_id: int,
    user: User = Depends(get_current_user),
    service: CollectionService = Depends(get_collection_service),
):
    service.delete_saved_search(user, search_id)
    return SuccessResponse()

"""Admin viewing router - moderation of every viewing request"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...auth import require_admin
from ...models import User
from ...schemas import SuccessResponse
from .router import get_viewing_service
from .schemas import (
    BulkStatusRequest,
    BulkStatusResponse,
    StatusUpdateRequest,
    ViewingFilters,
    ViewingResponse,
    ViewingStatus,
)
from .service import ViewingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin-viewings", tags=["Admin Viewings"])


@router.get("", response_model=list[ViewingResponse])
async def list_all_viewings(
    status: Optional[ViewingStatus] = Query(None),
    property_id: Optional[int] = Query(None, alias="propertyId"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    search_query: Optional[str] = Query(None, alias="searchQuery"),
    admin: User = Depends(require_admin),
    service: ViewingService = Depends(get_viewing_service),
):
    """All viewings ordered by date, with optional filters"""
    filters = ViewingFilters(
        status=status,
        property_id=property_id,
        start_date=start_date,
        end_date=end_date,
        search_query=search_query,
    )
    return service.list_all(filters)


@router.post("/bulk-status", response_model=BulkStatusResponse)
async def bulk_update_status(
    data: BulkStatusRequest,
    admin: User = Depends(require_admin),
    service: ViewingService = Depends(get_viewing_service),
):
    result = await service.bulk_update_status(data.ids, data.status)
    return BulkStatusResponse(
        count=result.count,
        updated=len(result.updated_ids),
        skipped=len(result.skipped_ids),
    )


@router.patch("/{viewing_id}/status", response_model=SuccessResponse)
async def update_viewing_status(
    viewing_id: int,
    data: StatusUpdateRequest,
    admin: User = Depends(require_admin),
    service: ViewingService = Depends(get_viewing_service),
):
    await service.update_status(viewing_id, data.status, data.cancellation_reason)
    return SuccessResponse()


@router.delete("/{viewing_id}", response_model=SuccessResponse)
async def delete_viewing(
    viewing_id: int,
    admin: User = Depends(require_admin),
    service: ViewingService = Depends(get_viewing_service),
):
    service.delete(viewing_id)
    return SuccessResponse()

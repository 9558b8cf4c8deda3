"""Viewing domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...schemas import CamelModel
from ...shared.validators import (
    require_text,
    to_naive_utc,
    validate_email,
    validate_phone,
    validate_time_of_day,
)

ViewingStatus = Literal["scheduled", "confirmed", "completed", "cancelled"]


class ViewingCreate(CamelModel):
    """Schema for scheduling a viewing"""

    property_id: int
    visitor_name: str
    visitor_email: str
    visitor_phone: Optional[str] = None
    viewing_date: datetime
    viewing_time: str
    duration: int = 30
    notes: Optional[str] = None

    @field_validator("visitor_name")
    @classmethod
    def validate_visitor_name(cls, v):
        return require_text(v, "Visitor name")

    @field_validator("visitor_email")
    @classmethod
    def validate_visitor_email(cls, v):
        return validate_email(require_text(v, "Visitor email"))

    @field_validator("visitor_phone")
    @classmethod
    def validate_visitor_phone(cls, v):
        return validate_phone(v)

    @field_validator("viewing_date")
    @classmethod
    def normalize_viewing_date(cls, v):
        return to_naive_utc(v)

    @field_validator("viewing_time")
    @classmethod
    def validate_viewing_time(cls, v):
        return validate_time_of_day(v)

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v):
        if v <= 0:
            raise ValueError("Duration must be a positive number of minutes")
        return v


class ViewingUpdate(CamelModel):
    """Owner edits to their own viewing"""

    status: Optional[ViewingStatus] = None
    notes: Optional[str] = None


class ViewingResponse(CamelModel):
    id: int
    property_id: int
    user_id: int
    visitor_name: str
    visitor_email: str
    visitor_phone: Optional[str] = None
    viewing_date: datetime
    viewing_time: str
    duration: int
    notes: Optional[str] = None
    status: ViewingStatus
    cancellation_reason: Optional[str] = None
    reminder_sent: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ViewingFilters(BaseModel):
    """Admin list filters; date bounds are inclusive"""

    status: Optional[ViewingStatus] = None
    property_id: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    search_query: Optional[str] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_bounds(cls, v):
        return to_naive_utc(v) if v else v


class StatusUpdateRequest(CamelModel):
    status: ViewingStatus
    cancellation_reason: Optional[str] = None


class BulkStatusRequest(CamelModel):
    ids: list[int]
    status: ViewingStatus


class BulkStatusResponse(CamelModel):
    """
    `count` is the number of ids submitted, not the number found.
    `updated` and `skipped` report what actually happened.
    """

    success: bool = True
    count: int
    updated: int
    skipped: int

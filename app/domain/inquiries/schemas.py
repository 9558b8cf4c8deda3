"""Inquiry domain schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import field_validator

from ...schemas import CamelModel
from ...shared.validators import require_text, validate_email, validate_phone

InquiryStatus = Literal["new", "contacted", "closed"]


class InquiryCreate(CamelModel):
    property_id: int
    name: str
    email: str
    phone: Optional[str] = None
    message: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return require_text(v, "Name")

    @field_validator("email")
    @classmethod
    def validate_inquiry_email(cls, v):
        return validate_email(require_text(v, "Email"))

    @field_validator("phone")
    @classmethod
    def validate_inquiry_phone(cls, v):
        return validate_phone(v)


class InquiryStatusUpdate(CamelModel):
    status: InquiryStatus


class InquiryResponse(CamelModel):
    id: int
    property_id: int
    user_id: Optional[int] = None
    name: str
    email: str
    phone: Optional[str] = None
    message: Optional[str] = None
    status: InquiryStatus
    property_title: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

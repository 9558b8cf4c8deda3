"""Bulk listing import schemas"""

from typing import Any, Literal, Optional

from pydantic import Field, field_validator

from ...schemas import CamelModel
from ...shared.validators import require_text
from ..properties.schemas import PropertyStatus, PropertyType

ZIP_CODE_PATTERN = r"^\d{5}(-\d{4})?$"


class ImportRow(CamelModel):
    """One spreadsheet row after header normalisation; amenities and image URLs stay comma-separated"""

    title: str = Field(min_length=1, max_length=255)
    price: float = Field(gt=0)
    property_type: PropertyType
    bedrooms: int = Field(ge=0)
    bathrooms: int = Field(ge=0)
    square_feet: int = Field(gt=0)
    address: str = Field(min_length=1, max_length=255)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=2, max_length=2)
    zip_code: str = Field(pattern=ZIP_CODE_PATTERN)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    description: Optional[str] = None
    amenities: Optional[str] = None
    image_urls: Optional[str] = None
    status: PropertyStatus = "available"

    @field_validator("title", "address", "city")
    @classmethod
    def validate_required_text(cls, v, info):
        return require_text(v, info.field_name)


class ImportRowError(CamelModel):
    row_number: int
    data: dict[str, Any]
    errors: list[str]


class ParseFileRequest(CamelModel):
    file_content: str
    file_type: Literal["csv", "excel"]


class ParseFileResponse(CamelModel):
    success: bool = True
    total_rows: int
    valid_rows: int
    invalid_rows: int
    valid_data: list[ImportRow]
    errors: list[ImportRowError]


class ImportRequest(CamelModel):
    # Rows are validated one by one so a bad row fails alone
    properties: list[dict[str, Any]]


class ImportItemResult(CamelModel):
    success: bool
    property: str
    property_id: Optional[int] = None
    message: Optional[str] = None
    error: Optional[str] = None


class ImportResponse(CamelModel):
    total_imported: int
    success_count: int
    failure_count: int
    results: list[ImportItemResult]


class TemplateResponse(CamelModel):
    filename: str
    content: str
    mime_type: str = "text/csv"

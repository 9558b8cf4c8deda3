"""
Bulk listing import
Parses CSV or Excel sheets, validates each row on its own and creates listings with their images
"""

import base64
import csv
import logging
from io import BytesIO, StringIO
from typing import Any, Optional
from urllib.parse import urlparse

from fastapi import HTTPException
from openpyxl import load_workbook
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ...models import Property, PropertyImage
from ..properties.schemas import normalize_amenities
from .schemas import (
    ImportItemResult,
    ImportResponse,
    ImportRow,
    ImportRowError,
    ParseFileRequest,
    ParseFileResponse,
    TemplateResponse,
)

logger = logging.getLogger(__name__)

TEMPLATE_FILENAME = "property_import_template.csv"

TEMPLATE_HEADERS = [
    "Title",
    "Price",
    "Property Type",
    "Bedrooms",
    "Bathrooms",
    "Square Feet",
    "Address",
    "City",
    "State",
    "Zip Code",
    "Latitude",
    "Longitude",
    "Description",
    "Amenities",
    "Image URLs",
    "Status",
]

TEMPLATE_ROWS = [
    [
        "Luxury Modern Home",
        "2500000",
        "house",
        "5",
        "4",
        "5200",
        "123 Oak Street",
        "San Francisco",
        "CA",
        "94102",
        "37.7749",
        "-122.4194",
        "Stunning modern home with panoramic city views",
        "pool,theater,security,wifi",
        "https://example.com/image1.jpg,https://example.com/image2.jpg",
        "available",
    ],
    [
        "Cozy Downtown Apartment",
        "850000",
        "apartment",
        "2",
        "2",
        "1200",
        "456 Main Avenue",
        "San Francisco",
        "CA",
        "94103",
        "37.7849",
        "-122.4094",
        "Modern apartment in the heart of downtown",
        "gym,parking,concierge",
        "https://example.com/image3.jpg",
        "available",
    ],
]

# Lower-cased header -> ImportRow alias
HEADER_ALIASES = {
    "title": "title",
    "property title": "title",
    "price": "price",
    "property type": "propertyType",
    "propertytype": "propertyType",
    "type": "propertyType",
    "bedrooms": "bedrooms",
    "beds": "bedrooms",
    "bathrooms": "bathrooms",
    "baths": "bathrooms",
    "square feet": "squareFeet",
    "squarefeet": "squareFeet",
    "sqft": "squareFeet",
    "sq ft": "squareFeet",
    "address": "address",
    "city": "city",
    "state": "state",
    "zip code": "zipCode",
    "zipcode": "zipCode",
    "zip": "zipCode",
    "latitude": "latitude",
    "lat": "latitude",
    "longitude": "longitude",
    "lon": "longitude",
    "lng": "longitude",
    "description": "description",
    "amenities": "amenities",
    "image urls": "imageUrls",
    "imageurls": "imageUrls",
    "images": "imageUrls",
    "status": "status",
}


class ImportFileError(ValueError):
    """The uploaded sheet could not be read at all"""


def parse_csv(content: str) -> list[dict[str, Any]]:
    """Rows keyed by the header line; blank lines are skipped"""
    try:
        reader = csv.DictReader(StringIO(content.lstrip("\ufeff")))
        rows = []
        for row in reader:
            cleaned = {k: v for k, v in row.items() if k is not None}
            if any(isinstance(v, str) and v.strip() for v in cleaned.values()):
                rows.append(cleaned)
        return rows
    except csv.Error as e:
        raise ImportFileError(f"CSV parsing failed: {e}") from e


def _cell_text(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def parse_excel(content: str) -> list[dict[str, Any]]:
    """
    Read the first sheet of a base64 workbook (a data: URL prefix is allowed).
    Cells come back as text so both file types validate the same way.
    """
    encoded = content.split(",", 1)[1] if content.startswith("data:") else content
    try:
        workbook = load_workbook(BytesIO(base64.b64decode(encoded)), read_only=True, data_only=True)
    except Exception as e:
        # Bad base64, zipfile and openpyxl errors all mean an unreadable workbook
        raise ImportFileError(f"Excel parsing failed: {e}") from e

    try:
        if not workbook.worksheets:
            raise ImportFileError("Excel parsing failed: No sheets found in Excel file")

        values = workbook.worksheets[0].iter_rows(values_only=True)
        header = next(values, None)
        if not header:
            return []
        keys = [_cell_text(h) if h is not None else "" for h in header]

        rows = []
        for cells in values:
            row = {
                key: _cell_text(cell)
                for key, cell in zip(keys, cells)
                if key and cell is not None and _cell_text(cell)
            }
            if row:
                rows.append(row)
        return rows
    finally:
        workbook.close()


def normalize_row(row: dict[str, Any]) -> dict[str, Any]:
    """Map header variants onto field names, trim text and drop blank cells"""
    normalized = {}
    for key, value in row.items():
        if key is None:
            continue
        header = str(key).strip().lower()
        if isinstance(value, str):
            value = value.strip()
        if value is None or value == "":
            continue
        normalized[HEADER_ALIASES.get(header, header)] = value
    return normalized


def _format_errors(error: ValidationError) -> list[str]:
    messages = []
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"]) or "row"
        messages.append(f"{field}: {item['msg']}")
    return messages


def validate_property_rows(
    rows: list[dict[str, Any]],
) -> tuple[list[ImportRow], list[ImportRowError]]:
    """Row numbers count the header as row 1, as a spreadsheet shows them"""
    valid: list[ImportRow] = []
    errors: list[ImportRowError] = []
    for index, row in enumerate(rows):
        try:
            valid.append(ImportRow.model_validate(normalize_row(row)))
        except ValidationError as e:
            errors.append(ImportRowError(row_number=index + 2, data=row, errors=_format_errors(e)))
    return valid, errors


def parse_amenities(value: Optional[str]) -> list[str]:
    return normalize_amenities(value) or []


def parse_image_urls(value: Optional[str]) -> list[str]:
    """Comma-separated absolute http(s) URLs; anything else is dropped"""
    if not value:
        return []
    urls = []
    for candidate in value.split(","):
        candidate = candidate.strip()
        parsed = urlparse(candidate)
        if parsed.scheme in ("http", "https") and parsed.netloc:
            urls.append(candidate)
    return urls


def generate_csv_template() -> str:
    output = StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(TEMPLATE_HEADERS)
    writer.writerows(TEMPLATE_ROWS)
    return output.getvalue()


class ImportService:
    """Service layer for bulk listing import"""

    def __init__(self, db: Session):
        self.db = db

    def template(self) -> TemplateResponse:
        return TemplateResponse(filename=TEMPLATE_FILENAME, content=generate_csv_template())

    def parse_file(self, data: ParseFileRequest) -> ParseFileResponse:
        try:
            if data.file_type == "csv":
                rows = parse_csv(data.file_content)
            else:
                rows = parse_excel(data.file_content)
        except ImportFileError as e:
            logger.warning(f"⚠️ Import file rejected: {e}")
            raise HTTPException(status_code=400, detail=f"File parsing failed: {e}") from e

        valid, errors = validate_property_rows(rows)
        logger.info(f"📊 Parsed {len(rows)} import rows: {len(valid)} valid, {len(errors)} invalid")
        return ParseFileResponse(
            total_rows=len(rows),
            valid_rows=len(valid),
            invalid_rows=len(errors),
            valid_data=valid,
            errors=errors,
        )

    def _create_listing(self, row: ImportRow) -> Property:
        prop = Property(
            title=row.title,
            description=row.description,
            price=row.price,
            property_type=row.property_type,
            bedrooms=row.bedrooms,
            bathrooms=row.bathrooms,
            square_feet=row.square_feet,
            address=row.address,
            city=row.city,
            state=row.state,
            zip_code=row.zip_code,
            latitude=row.latitude,
            longitude=row.longitude,
            amenities=parse_amenities(row.amenities),
            featured=False,
            status=row.status,
        )
        self.db.add(prop)
        self.db.flush()

        for order, url in enumerate(parse_image_urls(row.image_urls), start=1):
            self.db.add(PropertyImage(property_id=prop.id, image_url=url, display_order=order))

        self.db.commit()
        self.db.refresh(prop)
        return prop

    def import_properties(self, rows: list[dict[str, Any]]) -> ImportResponse:
        """
        Each row is validated and committed on its own.
        A failing row is reported and the rest carry on.
        """
        results: list[ImportItemResult] = []
        valid_rows, row_errors = validate_property_rows(rows)
        invalid_by_index = {e.row_number - 2: e for e in row_errors}
        valid_iter = iter(valid_rows)

        for index, raw in enumerate(rows):
            label = str(raw.get("title") or raw.get("Title") or f"Row {index + 2}")
            if index in invalid_by_index:
                results.append(
                    ImportItemResult(
                        success=False, property=label, error="; ".join(invalid_by_index[index].errors)
                    )
                )
                continue

            row = next(valid_iter)
            try:
                prop = self._create_listing(row)
            except Exception as e:
                self.db.rollback()
                logger.error(f"❌ Failed to import listing '{row.title}': {e}")
                results.append(ImportItemResult(success=False, property=row.title, error=str(e)))
                continue

            results.append(
                ImportItemResult(
                    success=True,
                    property=row.title,
                    property_id=prop.id,
                    message="Property imported successfully",
                )
            )

        success_count = sum(1 for r in results if r.success)
        logger.info(f"✅ Import finished: {success_count} of {len(rows)} listings created")
        return ImportResponse(
            total_imported=len(rows),
            success_count=success_count,
            failure_count=len(rows) - success_count,
            results=results,
        )

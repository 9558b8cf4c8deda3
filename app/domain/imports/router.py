"""Bulk listing import router - admin only"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import User
from .schemas import (
    ImportRequest,
    ImportResponse,
    ParseFileRequest,
    ParseFileResponse,
    TemplateResponse,
)
from .service import ImportService

router = APIRouter(prefix="/api/imports", tags=["Imports"])


def get_import_service(db: Session = Depends(get_db)) -> ImportService:
    """Dependency injection for ImportService"""
    return ImportService(db)


@router.get("/template", response_model=TemplateResponse)
async def get_csv_template(
    admin: User = Depends(require_admin),
    service: ImportService = Depends(get_import_service),
):
    return service.template()


@router.get("/template/download")
async def download_csv_template(
    admin: User = Depends(require_admin),
    service: ImportService = Depends(get_import_service),
):
    template = service.template()
    return Response(
        content=template.content,
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename={template.filename}",
            "Cache-Control": "no-cache",
        },
    )


@router.post("/parse", response_model=ParseFileResponse)
async def parse_import_file(
    data: ParseFileRequest,
    admin: User = Depends(require_admin),
    service: ImportService = Depends(get_import_service),
):
    """Validate a CSV or base64 Excel sheet without saving anything"""
    return service.parse_file(data)


@router.post("/properties", response_model=ImportResponse)
async def import_properties(
    data: ImportRequest,
    admin: User = Depends(require_admin),
    service: ImportService = Depends(get_import_service),
):
    return service.import_properties(data.properties)

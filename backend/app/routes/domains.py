"""
Domain routes — domain CRUD, bulk import/delete, status edits and export.

Provides:
- GET    /domains                       – filtered, paginated list
- GET    /domains/export                – CSV export
- POST   /domains/bulk-import           – bulk import (admin/manager)
- DELETE /domains/bulk-delete-blocked   – delete every blocked domain (admin/manager)
- GET    /domains/{id}                  – one domain
- POST   /domains                       – create (admin/manager)
- PUT    /domains/{id}                  – update (admin/manager)
- PATCH  /domains/{id}/status           – manual status edit (admin)
- DELETE /domains/{id}                  – delete (admin/manager)
Version: 1.0.0
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from app.container import get_domain_service, get_import_service
from app.core.auth import get_current_user, require_admin, require_admin_or_manager
from app.core.exceptions import ValidationError
from app.schemas.domains import (
    DomainCreateRequest,
    DomainListResponse,
    DomainResponse,
    DomainStatusRequest,
    DomainUpdateRequest,
    MessageResponse,
)
from app.schemas.imports import MAX_BULK_IMPORT_SIZE, BulkImportRequest, BulkImportResponse
from app.services.domain_service import DomainService
from app.services.import_service import ImportService, rows_from_csv

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/domains", tags=["domains"])


@router.get("", response_model=DomainListResponse)
async def list_domains(
    brand: Optional[str] = Query(None, description="Brand id"),
    block_status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    current_user: dict = Depends(get_current_user),
    service: DomainService = Depends(get_domain_service),
):
    result = await service.list_domains(
        brand=brand, block_status=block_status, search=search, page=page, limit=limit
    )
    return DomainListResponse(**result)


@router.get("/export")
async def export_domains(
    current_user: dict = Depends(get_current_user),
    service: DomainService = Depends(get_domain_service),
):
    content = await service.export_csv()
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=domains.csv"},
    )


@router.post("/bulk-import", response_model=BulkImportResponse)
async def bulk_import(
    request: BulkImportRequest,
    current_user: dict = Depends(require_admin_or_manager),
    service: ImportService = Depends(get_import_service),
):
    """
    Import many domains at once.

    Always 200 with per-row detail, even when every row failed.
    """
    if request.csv_text is not None:
        rows = rows_from_csv(request.csv_text)
        if len(rows) > MAX_BULK_IMPORT_SIZE:
            raise ValidationError(f"Maximum {MAX_BULK_IMPORT_SIZE} domains per import")
    else:
        rows = [row.model_dump() for row in request.domains]

    logger.info(f"Bulk import of {len(rows)} row(s) by {current_user['user_id']}")
    outcome = await service.import_domains(rows, current_user["user_id"])
    return BulkImportResponse.from_outcome(outcome)


@router.delete("/bulk-delete-blocked", response_model=MessageResponse)
async def bulk_delete_blocked(
    current_user: dict = Depends(require_admin_or_manager),
    service: DomainService = Depends(get_domain_service),
):
    count = await service.delete_blocked()
    return MessageResponse(message=f"Deleted {count} blocked domain(s)", data={"count": count})


@router.get("/{domain_id}", response_model=DomainResponse)
async def get_domain(
    domain_id: str,
    current_user: dict = Depends(get_current_user),
    service: DomainService = Depends(get_domain_service),
):
    return DomainResponse(data=await service.get_domain(domain_id))


@router.post("", response_model=DomainResponse, status_code=201)
async def create_domain(
    request: DomainCreateRequest,
    current_user: dict = Depends(require_admin_or_manager),
    service: DomainService = Depends(get_domain_service),
):
    record = await service.create_domain(request.model_dump(), current_user["user_id"])
    return DomainResponse(data=record)


@router.put("/{domain_id}", response_model=DomainResponse)
async def update_domain(
    domain_id: str,
    request: DomainUpdateRequest,
    current_user: dict = Depends(require_admin_or_manager),
    service: DomainService = Depends(get_domain_service),
):
    record = await service.update_domain(
        domain_id, request.model_dump(exclude_unset=True), current_user["user_id"]
    )
    return DomainResponse(data=record)


@router.patch("/{domain_id}/status", response_model=DomainResponse)
async def update_domain_status(
    domain_id: str,
    request: DomainStatusRequest,
    current_user: dict = Depends(require_admin),
    service: DomainService = Depends(get_domain_service),
):
    record = await service.update_status(
        domain_id, request.model_dump(exclude_unset=True), current_user["user_id"]
    )
    return DomainResponse(data=record)


@router.delete("/{domain_id}", response_model=MessageResponse)
async def delete_domain(
    domain_id: str,
    current_user: dict = Depends(require_admin_or_manager),
    service: DomainService = Depends(get_domain_service),
):
    await service.delete_domain(domain_id, current_user["user_id"])
    return MessageResponse(message="Domain deleted successfully")

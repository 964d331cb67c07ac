"""
Checker routes — endpoints the external checking system calls, plus the
authenticated manual bulk-check proxy.

Provides:
- GET  /urls               – active domains to scan
- POST /urls/update        – one block-status observation
- POST /urls/bulk-update   – many observations, chunked
- POST /bulk-check         – manual scan through the checker (logged-in users)

The /urls endpoints require X-Checker-Key when CHECKER_INGEST_KEY is set.
Version: 1.0.0
"""
import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header

from app.container import get_checker_service, get_status_service
from app.core.auth import get_current_user
from app.core.config import settings
from app.core.exceptions import AuthenticationError, MissingFieldError
from app.schemas.checker import (
    BulkCheckRequest,
    BulkStatusRequest,
    CheckerTargetsResponse,
    StatusObservation,
)
from app.services.checker_service import CheckerService
from app.services.status_service import StatusService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["checker"])


async def verify_checker_key(x_checker_key: Optional[str] = Header(None)) -> None:
    expected = settings.checker_ingest_key
    if not expected:
        return
    if not x_checker_key or not hmac.compare_digest(x_checker_key, expected):
        logger.warning("Checker request rejected: bad or missing X-Checker-Key")
        raise AuthenticationError("Invalid checker key")


@router.get("/urls", response_model=CheckerTargetsResponse, dependencies=[Depends(verify_checker_key)])
async def list_checker_urls(service: CheckerService = Depends(get_checker_service)):
    targets = await service.list_targets()
    return CheckerTargetsResponse(count=len(targets), data=targets)


@router.post("/urls/update", dependencies=[Depends(verify_checker_key)])
async def update_checker_url(
    request: StatusObservation,
    service: StatusService = Depends(get_status_service),
):
    if not request.id:
        raise MissingFieldError("id", "Domain id is required")
    if request.scanResult is None or not request.scanResult.status:
        raise MissingFieldError("scanResult", "scanResult with status is required")

    entry = request.to_entry()
    result = await service.apply_observation(entry["id"], entry["status"], entry["marker"])
    return {"success": True, "message": "Status updated", "data": result}


@router.post("/urls/bulk-update", dependencies=[Depends(verify_checker_key)])
async def bulk_update_checker_urls(
    request: BulkStatusRequest,
    service: StatusService = Depends(get_status_service),
):
    if not request.updates:
        raise MissingFieldError("updates", "Updates array is required")

    result = await service.apply_bulk([item.to_entry() for item in request.updates])
    return {
        "success": True,
        "message": f"Bulk update completed: {result['success']} success, {result['failed']} failed",
        "data": result,
    }


@router.post("/bulk-check")
async def bulk_check(
    request: BulkCheckRequest,
    current_user: dict = Depends(get_current_user),
    service: CheckerService = Depends(get_checker_service),
):
    result = await service.manual_check(request.urls, request.mode)
    return {"success": True, "data": result}

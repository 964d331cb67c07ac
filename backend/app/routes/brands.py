"""
Brand routes — brand CRUD.

Provides:
- GET    /brands        – list brands
- GET    /brands/{id}   – brand with domain count
- POST   /brands        – create (admin/manager)
- PUT    /brands/{id}   – update (admin/manager)
- DELETE /brands/{id}   – delete, refused while domains reference it (admin/manager)
Version: 1.0.0
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.container import get_brand_service
from app.core.auth import get_current_user, require_admin_or_manager
from app.schemas.brands import (
    BrandCreateRequest,
    BrandListResponse,
    BrandResponse,
    BrandUpdateRequest,
)
from app.schemas.domains import MessageResponse
from app.services.brand_service import BrandService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/brands", tags=["brands"])


@router.get("", response_model=BrandListResponse)
async def list_brands(
    is_active: Optional[bool] = Query(None),
    current_user: dict = Depends(get_current_user),
    service: BrandService = Depends(get_brand_service),
):
    brands = await service.list_brands(is_active=is_active)
    return BrandListResponse(count=len(brands), data=brands)


@router.get("/{brand_id}", response_model=BrandResponse)
async def get_brand(
    brand_id: str,
    current_user: dict = Depends(get_current_user),
    service: BrandService = Depends(get_brand_service),
):
    return BrandResponse(data=await service.get_brand(brand_id))


@router.post("", response_model=BrandResponse, status_code=201)
async def create_brand(
    request: BrandCreateRequest,
    current_user: dict = Depends(require_admin_or_manager),
    service: BrandService = Depends(get_brand_service),
):
    brand = await service.create_brand(request.model_dump(), current_user["user_id"])
    return BrandResponse(data=brand)


@router.put("/{brand_id}", response_model=BrandResponse)
async def update_brand(
    brand_id: str,
    request: BrandUpdateRequest,
    current_user: dict = Depends(require_admin_or_manager),
    service: BrandService = Depends(get_brand_service),
):
    brand = await service.update_brand(
        brand_id, request.model_dump(exclude_unset=True), current_user["user_id"]
    )
    return BrandResponse(data=brand)


@router.delete("/{brand_id}", response_model=MessageResponse)
async def delete_brand(
    brand_id: str,
    current_user: dict = Depends(require_admin_or_manager),
    service: BrandService = Depends(get_brand_service),
):
    await service.delete_brand(brand_id)
    return MessageResponse(message="Brand deleted successfully")

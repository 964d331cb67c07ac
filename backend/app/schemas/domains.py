"""
Domain schemas — CRUD requests, manual status edits and list responses.
Version: 1.0.0
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from app.core.constants.status import BlockStatus, CdnStatus, IndexStatus, UptimeStatus


class DomainCreateRequest(BaseModel):
    domain: str = Field(..., description="Domain, with or without scheme/www/path")
    brand_id: str
    note: Optional[str] = Field(None, max_length=500)


class DomainUpdateRequest(BaseModel):
    domain: Optional[str] = None
    brand_id: Optional[str] = None
    note: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None


class DomainStatusRequest(BaseModel):
    """Any subset of the four status facets."""
    uptime_status: Optional[UptimeStatus] = None
    block_status: Optional[BlockStatus] = None
    blocked_marker: Optional[str] = None
    cdn_status: Optional[CdnStatus] = None
    index_status: Optional[IndexStatus] = None


class BrandSnapshot(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    code: Optional[str] = None
    color: Optional[str] = None


class Domain(BaseModel):
    id: str
    domain: str
    brand_id: Optional[str] = None
    brand: Optional[BrandSnapshot] = None
    note: Optional[str] = None
    uptime_status: str = UptimeStatus.UNKNOWN.value
    uptime_checked_at: Optional[Any] = None
    block_status: str = BlockStatus.UNKNOWN.value
    blocked_marker: Optional[str] = None
    block_checked_at: Optional[Any] = None
    cdn_status: str = CdnStatus.UNKNOWN.value
    cdn_checked_at: Optional[Any] = None
    index_status: str = IndexStatus.UNKNOWN.value
    index_checked_at: Optional[Any] = None
    is_active: bool = True
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[Any] = None
    updated_at: Optional[Any] = None


class DomainResponse(BaseModel):
    success: bool = True
    data: Domain


class DomainListResponse(BaseModel):
    success: bool = True
    count: int
    total: int
    total_blocked: int
    page: int
    pages: int
    data: List[Domain]


class MessageResponse(BaseModel):
    success: bool = True
    message: str
    data: Optional[Dict[str, Any]] = None

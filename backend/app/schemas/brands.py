"""
Brand schemas — create/update requests and brand responses.
Version: 1.0.0
"""
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class BrandCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    code: Optional[str] = Field(None, max_length=20)
    description: Optional[str] = Field(None, max_length=200)
    color: Optional[str] = Field(None, description="Hex color #RRGGBB")
    is_active: bool = True


class BrandUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    code: Optional[str] = Field(None, min_length=1, max_length=20)
    description: Optional[str] = Field(None, max_length=200)
    color: Optional[str] = None
    is_active: Optional[bool] = None


class Brand(BaseModel):
    id: str
    name: str
    code: str
    description: Optional[str] = None
    color: Optional[str] = None
    is_active: bool = True
    created_by: Optional[str] = None
    created_at: Optional[Any] = None
    updated_at: Optional[Any] = None
    domain_count: Optional[int] = None


class BrandResponse(BaseModel):
    success: bool = True
    data: Brand


class BrandListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[Brand]

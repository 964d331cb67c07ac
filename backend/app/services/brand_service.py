"""
Brand service — brand CRUD with name/code normalization.

Names and codes are stored trimmed and uppercased; code defaults to the
name. A brand with domains attached cannot be deleted.
Version: 1.0.0
"""
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.core.constants.status import DEFAULT_BRAND_COLOR
from app.core.exceptions import (
    BrandInUseError,
    BrandNotFoundError,
    InvalidFormatError,
    MissingFieldError,
)
from app.db.brand_store import BrandStore
from app.db.domain_store import DomainStore

logger = logging.getLogger(__name__)

COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


def _check_color(color: str) -> str:
    if not COLOR_RE.match(color):
        raise InvalidFormatError("Color must be a valid hex color (#RRGGBB)")
    return color


class BrandService:
    def __init__(self, brand_store: BrandStore, domain_store: DomainStore) -> None:
        self._brands = brand_store
        self._domains = domain_store

    async def list_brands(self, is_active: Optional[bool] = None) -> List[Dict[str, Any]]:
        return await self._brands.list_brands(is_active=is_active)

    async def get_brand(self, brand_id: str) -> Dict[str, Any]:
        """Fetch a brand with the number of domains that reference it."""
        brand = await self._brands.get_brand(brand_id)
        if brand is None:
            raise BrandNotFoundError(brand_id)
        domain_count = await self._domains.count_domains(brand_id=brand_id)
        return {**brand, "domain_count": domain_count}

    async def create_brand(self, data: Dict[str, Any], user_id: str) -> Dict[str, Any]:
        name = (data.get("name") or "").strip().upper()
        if not name:
            raise MissingFieldError("name", "Brand name is required")
        code = (data.get("code") or "").strip().upper() or name

        record = {
            "name": name,
            "code": code,
            "description": data.get("description") or f"{name} Brand",
            "color": _check_color(data.get("color") or DEFAULT_BRAND_COLOR),
            "is_active": data.get("is_active", True),
            "created_by": user_id,
        }
        brand = await self._brands.insert_brand(record)
        logger.info(f"Brand created: {name} ({code}) by {user_id}")
        return brand

    async def update_brand(self, brand_id: str, data: Dict[str, Any], user_id: str) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if data.get("name") is not None:
            name = data["name"].strip().upper()
            if not name:
                raise MissingFieldError("name", "Brand name is required")
            payload["name"] = name
        if data.get("code") is not None:
            code = data["code"].strip().upper()
            if not code:
                raise MissingFieldError("code", "Brand code is required")
            payload["code"] = code
        if data.get("description") is not None:
            payload["description"] = data["description"]
        if data.get("color") is not None:
            payload["color"] = _check_color(data["color"])
        if data.get("is_active") is not None:
            payload["is_active"] = data["is_active"]

        if not payload:
            return await self.get_brand(brand_id)

        payload["updated_by"] = user_id
        payload["updated_at"] = datetime.now(timezone.utc).isoformat()
        brand = await self._brands.update_brand(brand_id, payload)
        if brand is None:
            raise BrandNotFoundError(brand_id)
        return brand

    async def delete_brand(self, brand_id: str) -> None:
        brand = await self._brands.get_brand(brand_id)
        if brand is None:
            raise BrandNotFoundError(brand_id)

        domain_count = await self._domains.count_domains(brand_id=brand_id)
        if domain_count > 0:
            raise BrandInUseError(domain_count)

        await self._brands.delete_brand(brand_id)
        logger.info(f"Brand deleted: {brand.get('name')}")

"""
Brand store — brands table operations.

`name` and `code` are each UNIQUE and stored uppercased.
"""

import logging
from typing import Any, Dict, List, Optional

from app.db.base_store import BaseStore

logger = logging.getLogger("brand_store")

TABLE = "brands"


class BrandStore(BaseStore):
    """CRUD for the brands table."""

    async def list_brands(self, is_active: Optional[bool] = None) -> List[Dict[str, Any]]:
        """All brands (optionally filtered on is_active), newest first."""
        def build(query):
            if is_active is not None:
                query = query.eq("is_active", is_active)
            return query.order("created_at", desc=True)

        return await self._select_all(TABLE, "*", build=build)

    async def get_brand(self, brand_id: str) -> Optional[Dict[str, Any]]:
        return await self._select_one(TABLE, "*", "id", brand_id)

    async def insert_brand(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return await self._insert(TABLE, record, key=record.get("name"))

    async def update_brand(self, brand_id: str, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        rows = await self._update(TABLE, {"id": brand_id}, payload, key=payload.get("name"))
        return rows[0] if rows else None

    async def delete_brand(self, brand_id: str) -> bool:
        rows = await self._delete(TABLE, {"id": brand_id})
        return bool(rows)

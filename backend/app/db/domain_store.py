"""
Domain store — domain record reads, single/bulk writes and status columns.

Table `domains` (see scripts/schema.sql). `domain` is UNIQUE, which is the
final arbiter for the canonical-key invariant when concurrent writers race.
"""

import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from app.core.constants.status import BlockStatus
from app.db.base_store import BaseStore

logger = logging.getLogger("domain_store")

TABLE = "domains"
# Rows come back with a brand snapshot embedded under "brand"
DOMAIN_COLUMNS = "*, brand:brands(id,name,code,color)"


class DomainStore(BaseStore):
    """CRUD for the domains table."""

    async def get_domain(self, domain_id: str) -> Optional[Dict[str, Any]]:
        return await self._select_one(TABLE, DOMAIN_COLUMNS, "id", domain_id)

    async def get_domain_by_key(self, key: str) -> Optional[Dict[str, Any]]:
        return await self._select_one(TABLE, DOMAIN_COLUMNS, "domain", key)

    async def list_domain_keys(self) -> Set[str]:
        """Snapshot of every persisted canonical key."""
        rows = await self._select_all(TABLE, "domain")
        return {row["domain"] for row in rows if row.get("domain")}

    async def list_domains(
        self,
        brand_id: Optional[str] = None,
        block_status: Optional[str] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """Newest-first page of domains plus the total matching count."""
        query = self._client.table(TABLE).select(DOMAIN_COLUMNS, count="exact")
        if brand_id:
            query = query.eq("brand_id", brand_id)
        if block_status:
            query = query.eq("block_status", block_status)
        if search:
            query = query.ilike("domain", f"%{search}%")

        query = query.order("created_at", desc=True).range(offset, offset + limit - 1)
        response = await self._execute(query, TABLE)
        return response.data or [], response.count or 0

    async def list_all_domains(self) -> List[Dict[str, Any]]:
        """Every domain with its brand snapshot, ordered by key (CSV export)."""
        return await self._select_all(
            TABLE, DOMAIN_COLUMNS, build=lambda q: q.order("domain")
        )

    async def list_active_for_checker(self) -> List[Dict[str, Any]]:
        """Active domains the external checker should scan, ordered by key."""
        return await self._select_all(
            TABLE,
            "id, domain, note, brand:brands(name,code)",
            build=lambda q: q.eq("is_active", True).order("domain"),
        )

    async def count_domains(
        self, brand_id: Optional[str] = None, block_status: Optional[str] = None
    ) -> int:
        query = self._client.table(TABLE).select("id", count="exact")
        if brand_id:
            query = query.eq("brand_id", brand_id)
        if block_status:
            query = query.eq("block_status", block_status)
        response = await self._execute(query.limit(1), TABLE)
        return response.count or 0

    async def insert_domain(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert one domain.

        Raises:
            DuplicateKeyError: the canonical key is already stored
            PersistenceError: any other storage failure
        """
        return await self._insert(TABLE, record, key=record.get("domain"))

    async def bulk_insert_domains(self, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Unordered bulk insert tolerating partial success.

        Rows whose key already exists are silently skipped by the storage
        layer; only the rows actually inserted come back.
        """
        if not records:
            return []
        query = self._client.table(TABLE).upsert(
            records, on_conflict="domain", ignore_duplicates=True
        )
        response = await self._execute(query, TABLE)
        inserted = response.data or []
        logger.info("bulk insert requested=%d inserted=%d", len(records), len(inserted))
        return inserted

    async def update_domain(self, domain_id: str, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Apply a partial update; returns the updated row or None if absent."""
        rows = await self._update(TABLE, {"id": domain_id}, payload, key=payload.get("domain"))
        return rows[0] if rows else None

    async def delete_domain(self, domain_id: str) -> Optional[Dict[str, Any]]:
        rows = await self._delete(TABLE, {"id": domain_id})
        return rows[0] if rows else None

    async def delete_blocked_domains(self) -> int:
        """Delete every record whose block status is blocked; returns the count."""
        rows = await self._delete(TABLE, {"block_status": BlockStatus.BLOCKED.value})
        return len(rows)

"""
Domain service — single-record domain CRUD, manual status edits, export.

Bulk import lives in import_service and checker observations in
status_service; this module covers everything an operator does to one
record at a time, plus bulk delete of blocked records and CSV export.
Version: 1.0.0
"""
import csv
import io
import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.core.constants.events import (
    DOMAIN_CREATED,
    DOMAIN_DELETED,
    DOMAIN_UPDATED,
    DOMAINS_BULK_DELETED,
)
from app.core.constants.status import LOG_ACTION_ADD, LOG_ACTION_DELETE, BlockStatus
from app.core.exceptions import BrandNotFoundError, DomainNotFoundError
from app.db.brand_store import BrandStore
from app.db.domain_log_store import DomainLogStore
from app.db.domain_store import DomainStore
from app.services.notifier import Notifier
from app.services.status_service import scan_marker
from app.utils.domain_normalize import normalize_domain

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ["domain", "brand", "note", "uptime", "block_status", "cdn_status", "index_status"]

# facet column -> its last-checked column
STATUS_FACETS = {
    "uptime_status": "uptime_checked_at",
    "block_status": "block_checked_at",
    "cdn_status": "cdn_checked_at",
    "index_status": "index_checked_at",
}


class DomainService:
    def __init__(
        self,
        domain_store: DomainStore,
        brand_store: BrandStore,
        log_store: DomainLogStore,
        notifier: Notifier,
    ) -> None:
        self._domains = domain_store
        self._brands = brand_store
        self._logs = log_store
        self._notifier = notifier

    async def list_domains(
        self,
        brand: Optional[str] = None,
        block_status: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Dict[str, Any]:
        offset = (page - 1) * limit
        rows, total = await self._domains.list_domains(
            brand_id=brand,
            block_status=block_status,
            search=search.strip() if search else None,
            offset=offset,
            limit=limit,
        )
        total_blocked = await self._domains.count_domains(
            brand_id=brand, block_status=BlockStatus.BLOCKED.value
        )
        return {
            "count": len(rows),
            "total": total,
            "total_blocked": total_blocked,
            "page": page,
            "pages": math.ceil(total / limit) if total else 0,
            "data": rows,
        }

    async def get_domain(self, domain_id: str) -> Dict[str, Any]:
        record = await self._domains.get_domain(domain_id)
        if record is None:
            raise DomainNotFoundError(domain_id)
        return record

    async def create_domain(self, data: Dict[str, Any], user_id: str) -> Dict[str, Any]:
        key = normalize_domain(data.get("domain"))
        brand_id = data.get("brand_id")
        await self._require_brand(brand_id)

        inserted = await self._domains.insert_domain({
            "domain": key,
            "brand_id": brand_id,
            "note": data.get("note") or "",
            "created_by": user_id,
            "updated_by": user_id,
        })
        record = await self._domains.get_domain(inserted["id"]) or inserted

        await self._logs.record(key, LOG_ACTION_ADD, user_id)
        self._notifier.emit(DOMAIN_CREATED, record)
        logger.info(f"Domain created: {key} by {user_id}")
        return record

    async def update_domain(self, domain_id: str, data: Dict[str, Any], user_id: str) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if data.get("domain") is not None:
            payload["domain"] = normalize_domain(data["domain"])
        if data.get("brand_id") is not None:
            await self._require_brand(data["brand_id"])
            payload["brand_id"] = data["brand_id"]
        if data.get("note") is not None:
            payload["note"] = data["note"]
        if data.get("is_active") is not None:
            payload["is_active"] = data["is_active"]

        return await self._write(domain_id, payload, user_id)

    async def update_status(self, domain_id: str, data: Dict[str, Any], user_id: str) -> Dict[str, Any]:
        """Manually set any subset of the four status facets."""
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {}
        for facet, checked_column in STATUS_FACETS.items():
            value = data.get(facet)
            if value is None:
                continue
            payload[facet] = getattr(value, "value", value)
            payload[checked_column] = now.isoformat()

        if "block_status" in payload:
            if payload["block_status"] == BlockStatus.BLOCKED.value:
                payload["blocked_marker"] = data.get("blocked_marker") or scan_marker(now)
            else:
                payload["blocked_marker"] = None

        return await self._write(domain_id, payload, user_id)

    async def delete_domain(self, domain_id: str, user_id: str) -> None:
        record = await self._domains.get_domain(domain_id)
        if record is None:
            raise DomainNotFoundError(domain_id)

        await self._domains.delete_domain(domain_id)
        await self._logs.record(record["domain"], LOG_ACTION_DELETE, user_id)
        self._notifier.emit(DOMAIN_DELETED, {"id": domain_id})
        logger.info(f"Domain deleted: {record['domain']} by {user_id}")

    async def delete_blocked(self) -> int:
        count = await self._domains.delete_blocked_domains()
        if count > 0:
            self._notifier.emit(DOMAINS_BULK_DELETED, {"count": count})
        logger.info(f"Bulk deleted {count} blocked domain(s)")
        return count

    async def export_csv(self) -> str:
        records = await self._domains.list_all_domains()

        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(EXPORT_COLUMNS)
        for record in records:
            brand = record.get("brand") or {}
            writer.writerow([
                record.get("domain", ""),
                brand.get("name", ""),
                record.get("note") or "",
                record.get("uptime_status", ""),
                record.get("block_status", ""),
                record.get("cdn_status", ""),
                record.get("index_status", ""),
            ])
        return buffer.getvalue()

    async def _write(self, domain_id: str, payload: Dict[str, Any], user_id: str) -> Dict[str, Any]:
        if not payload:
            return await self.get_domain(domain_id)

        payload["updated_by"] = user_id
        payload["updated_at"] = datetime.now(timezone.utc).isoformat()
        updated = await self._domains.update_domain(domain_id, payload)
        if updated is None:
            raise DomainNotFoundError(domain_id)

        record = await self._domains.get_domain(domain_id) or updated
        self._notifier.emit(DOMAIN_UPDATED, record)
        return record

    async def _require_brand(self, brand_id: Optional[str]) -> None:
        if not brand_id or await self._brands.get_brand(brand_id) is None:
            raise BrandNotFoundError(brand_id or "")

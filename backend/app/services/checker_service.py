"""
Checker service — what the external checker reads from us, and manual scans.
Version: 1.0.0
"""
import logging
from typing import Any, Dict, List

from app.clients.checker_client import DEFAULT_MODE, CheckerClient
from app.core.exceptions import ValidationError
from app.db.domain_store import DomainStore

logger = logging.getLogger(__name__)


class CheckerService:
    def __init__(self, domain_store: DomainStore, checker_client: CheckerClient, max_manual_urls: int = 5) -> None:
        self._domains = domain_store
        self._client = checker_client
        self._max_manual_urls = max_manual_urls

    async def list_targets(self) -> List[Dict[str, Any]]:
        """Active domains to scan as {id, brand, domain, note}, ordered by key."""
        rows = await self._domains.list_active_for_checker()
        targets = []
        for row in rows:
            brand = row.get("brand") or {}
            targets.append({
                "id": row["id"],
                "brand": brand.get("name") or "",
                "domain": row["domain"],
                "note": row.get("note") or "",
            })
        return targets

    async def manual_check(self, urls: List[str], mode: str = DEFAULT_MODE) -> Dict[str, Any]:
        cleaned = [url.strip() for url in urls if url and url.strip()]
        if not cleaned:
            raise ValidationError("At least one URL is required")
        if len(cleaned) > self._max_manual_urls:
            raise ValidationError(f"Maximum {self._max_manual_urls} URLs allowed per check")

        logger.info(f"Manual check of {len(cleaned)} url(s) mode={mode}")
        return await self._client.bulk_check(cleaned, mode or DEFAULT_MODE)

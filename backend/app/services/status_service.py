"""
Status service — applies checker observations to domain block status.

Status update service.

Single write path for block-status observations coming from:
- POST /api/urls/update (one observation)
- POST /api/urls/bulk-update (chunks of observations, fan-out then fan-in)
- the upstream bridge (feed messages addressed by domain key)

Each applied observation is queued on the broadcast coalescer; transitions
to blocked also go out immediately as a single alert.
Version: 1.0.0
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from app.core.constants.events import (
    DOMAIN_BLOCK_STATUS_UPDATED,
    DOMAINS_BULK_CHECK_COMPLETE,
)
from app.core.constants.status import CHECKER_BLOCKED, BlockStatus
from app.core.exceptions import DashboardException, DomainNotFoundError, MissingFieldError
from app.db.domain_store import DomainStore
from app.services.broadcast_coalescer import BroadcastCoalescer
from app.services.notifier import Notifier

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 10


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def scan_marker(now: datetime) -> str:
    """Marker stamped on a blocked record when the observation carries none."""
    return f"scan_{int(now.timestamp() * 1000)}"


class StatusService:
    def __init__(
        self,
        domain_store: DomainStore,
        coalescer: BroadcastCoalescer,
        notifier: Notifier,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = domain_store
        self._coalescer = coalescer
        self._notifier = notifier
        self._chunk_size = chunk_size
        self._clock = clock

    async def apply_observation(
        self, domain_id: str, status: Optional[str], marker: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Apply one observation to the record with this id.

        Any status other than "blocked" counts as accessible.

        Raises:
            DomainNotFoundError: no record with this id
            PersistenceError: the update could not be written
        """
        record = await self._store.get_domain(domain_id)
        if record is None:
            raise DomainNotFoundError(domain_id)
        return await self._apply(record, status, marker)

    async def apply_by_key(
        self, key: str, status: Optional[str], marker: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """Apply an observation addressed by canonical key; None when the key is unknown."""
        record = await self._store.get_domain_by_key(key)
        if record is None:
            logger.info(f"Observation for unknown domain {key}, ignoring")
            return None
        return await self._apply(record, status, marker)

    async def apply_bulk(self, observations: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Apply many observations, `chunk_size` at a time.

        Within a chunk updates run concurrently; the next chunk starts only
        once the whole chunk has finished. One failing update never stops
        the others.
        """
        succeeded = 0
        errors: List[Dict[str, Any]] = []

        for start in range(0, len(observations), self._chunk_size):
            chunk = observations[start:start + self._chunk_size]
            results = await asyncio.gather(
                *(self._apply_entry(entry) for entry in chunk),
                return_exceptions=True,
            )
            for entry, result in zip(chunk, results):
                if isinstance(result, DashboardException):
                    errors.append({"id": entry.get("id"), "error": result.message})
                elif isinstance(result, Exception):
                    logger.error(f"Unexpected error updating {entry.get('id')}: {result}")
                    errors.append({"id": entry.get("id"), "error": str(result)})
                else:
                    succeeded += 1

        summary = {"success": succeeded, "failed": len(errors)}
        self._notifier.emit(DOMAINS_BULK_CHECK_COMPLETE, summary)
        logger.info(f"Bulk status update: {succeeded} success, {len(errors)} failed")
        return {**summary, "errors": errors}

    async def _apply_entry(self, entry: Dict[str, Any]) -> Dict[str, Any]:
        domain_id = entry.get("id")
        status = entry.get("status")
        if not domain_id:
            raise MissingFieldError("id")
        if not status:
            raise MissingFieldError("status")
        return await self.apply_observation(domain_id, status, entry.get("marker"))

    async def _apply(self, record: Dict[str, Any], status: Optional[str], marker: Optional[str]) -> Dict[str, Any]:
        now = self._clock()
        blocked = status == CHECKER_BLOCKED

        payload = {
            "block_status": (BlockStatus.BLOCKED if blocked else BlockStatus.NOT_BLOCKED).value,
            "blocked_marker": (marker or scan_marker(now)) if blocked else None,
            "block_checked_at": now.isoformat(),
            "updated_at": now.isoformat(),
        }
        updated = await self._store.update_domain(record["id"], payload)
        if updated is None:
            raise DomainNotFoundError(record["id"])

        notification = {
            "id": record["id"],
            "domain": record.get("domain"),
            "block_status": payload["block_status"],
            "blocked_marker": payload["blocked_marker"],
            "block_checked_at": payload["block_checked_at"],
            "brand": record.get("brand"),
        }
        self._coalescer.enqueue(notification)
        if blocked:
            self._notifier.emit(DOMAIN_BLOCK_STATUS_UPDATED, notification)

        logger.info(f"Domain {notification['domain']} -> {payload['block_status']}")
        return notification

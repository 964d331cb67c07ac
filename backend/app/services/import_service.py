"""
Import service — bulk domain ingestion with partial-failure recovery.

Import service.

Per row, in source order: normalize -> resolve brand -> dedup -> stage.
Row-level problems land in `failed` or `skipped` and never stop the run.
Staged rows are written in chunks: one bulk insert per chunk, then every
row the bulk write did not confirm is retried individually. If the bulk
write fails outright, every row in the chunk is inserted individually.

Every input row ends up in exactly one of success / failed / skipped.
Version: 1.0.0
"""
import asyncio
import csv
import io
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from app.core.constants.events import DOMAINS_BULK_IMPORTED
from app.core.constants.status import IMPORT_HEADER_ROW_OFFSET
from app.core.exceptions import (
    DashboardException,
    DuplicateKeyError,
    InvalidFormatError,
    UnknownBrandError,
    ValidationError,
)
from app.db.brand_store import BrandStore
from app.db.domain_store import DomainStore
from app.services.notifier import Notifier
from app.utils.brand_resolver import BrandResolver
from app.utils.dedup_index import DedupIndex
from app.utils.domain_normalize import normalize_import_row
from app.utils.import_lock import ImportLock

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 50
IMPORT_COLUMNS = ("domain", "brand", "note")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def empty_outcome() -> Dict[str, List[Dict[str, Any]]]:
    return {"success": [], "failed": [], "skipped": []}


def chunked(items: List[Any], size: int) -> Iterable[List[Any]]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


def rows_from_csv(text: str) -> List[Dict[str, str]]:
    """
    Parse CSV text with a header row into import rows.

    Header names are matched case-insensitively; `domain` and `brand`
    columns are required, `note` is optional, extra columns are ignored.
    """
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))
    try:
        header = next(reader)
    except StopIteration:
        raise ValidationError("CSV is empty")

    columns = {name.strip().lower(): idx for idx, name in enumerate(header)}
    missing = [name for name in ("domain", "brand") if name not in columns]
    if missing:
        raise InvalidFormatError(f"CSV header must contain columns: {', '.join(missing)}")

    rows: List[Dict[str, str]] = []
    for values in reader:
        if not any(value.strip() for value in values):
            continue
        row = {}
        for name in IMPORT_COLUMNS:
            idx = columns.get(name)
            row[name] = values[idx] if idx is not None and idx < len(values) else ""
        rows.append(row)
    return rows


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class ImportService:
    def __init__(
        self,
        domain_store: DomainStore,
        brand_store: BrandStore,
        notifier: Notifier,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        lock_factory: Optional[Callable[[], ImportLock]] = None,
    ) -> None:
        self._domains = domain_store
        self._brands = brand_store
        self._notifier = notifier
        self._chunk_size = chunk_size
        self._lock_factory = lock_factory

    async def import_domains(self, rows: List[Dict[str, Any]], user_id: str) -> Dict[str, List[Dict[str, Any]]]:
        """
        Run one bulk import.

        Raises only for structural faults (no rows, import lock held, brand
        or key snapshot unreadable); row problems go into the outcome.
        """
        if not rows:
            raise ValidationError("No domains provided")

        lock = self._lock_factory() if self._lock_factory else None
        if lock is not None:
            await asyncio.to_thread(lock.acquire, user_id)
        try:
            outcome = await self._run(rows, user_id)
        finally:
            if lock is not None:
                await asyncio.to_thread(lock.release)

        added = len(outcome["success"])
        if added > 0:
            self._notifier.emit(DOMAINS_BULK_IMPORTED, {"count": added})
        return outcome

    async def _run(self, rows: List[Dict[str, Any]], user_id: str) -> Dict[str, List[Dict[str, Any]]]:
        resolver = BrandResolver.from_brands(await self._brands.list_brands())
        dedup = DedupIndex(await self._domains.list_domain_keys())
        outcome = empty_outcome()

        staged = self._stage_rows(rows, resolver, dedup, user_id, outcome)
        logger.info(
            f"Import staged={len(staged)} failed={len(outcome['failed'])} "
            f"skipped={len(outcome['skipped'])} of {len(rows)} row(s)"
        )

        for number, chunk in enumerate(chunked(staged, self._chunk_size), start=1):
            await self._persist_chunk(chunk, outcome)
            logger.info(f"Import chunk {number}: {len(chunk)} row(s), success so far={len(outcome['success'])}")

        logger.info(
            f"Import complete: {len(outcome['success'])} success, "
            f"{len(outcome['failed'])} failed, {len(outcome['skipped'])} skipped"
        )
        return outcome

    def _stage_rows(
        self,
        rows: List[Dict[str, Any]],
        resolver: BrandResolver,
        dedup: DedupIndex,
        user_id: str,
        outcome: Dict[str, List[Dict[str, Any]]],
    ) -> List[Dict[str, Any]]:
        staged: List[Dict[str, Any]] = []

        for index, raw in enumerate(rows):
            row_number = index + IMPORT_HEADER_ROW_OFFSET
            raw = raw or {}
            raw_domain = str(raw.get("domain") or "")

            try:
                parsed = normalize_import_row(raw)
            except ValidationError as e:
                outcome["failed"].append({"row": row_number, "domain": raw_domain, "error": e.message})
                continue

            key = parsed["domain"]
            try:
                dedup.claim(key)
            except DuplicateKeyError as e:
                outcome["skipped"].append({"row": row_number, "domain": key, "reason": e.reason})
                continue

            try:
                brand_id = resolver.resolve(parsed["brand"])
            except UnknownBrandError as e:
                dedup.release(key)
                outcome["failed"].append({"row": row_number, "domain": key, "error": e.message})
                continue

            staged.append({
                "row": row_number,
                "brand": parsed["brand"],
                "record": {
                    "domain": key,
                    "brand_id": brand_id,
                    "note": parsed["note"],
                    "created_by": user_id,
                    "updated_by": user_id,
                },
            })

        return staged

    async def _persist_chunk(self, chunk: List[Dict[str, Any]], outcome: Dict[str, List[Dict[str, Any]]]) -> None:
        try:
            inserted = await self._domains.bulk_insert_domains([item["record"] for item in chunk])
        except DashboardException as e:
            logger.warning(f"Bulk insert of {len(chunk)} row(s) failed, inserting individually: {e.message}")
            inserted = []

        confirmed = {row.get("domain") for row in inserted}

        for item in chunk:
            key = item["record"]["domain"]
            if key in confirmed:
                outcome["success"].append({"row": item["row"], "domain": key, "brand": item["brand"]})
                continue
            await self._insert_one(item, outcome)

    async def _insert_one(self, item: Dict[str, Any], outcome: Dict[str, List[Dict[str, Any]]]) -> None:
        key = item["record"]["domain"]
        try:
            await self._domains.insert_domain(item["record"])
        except DuplicateKeyError as e:
            outcome["failed"].append({"row": item["row"], "domain": key, "error": e.reason})
            return
        except DashboardException as e:
            logger.warning(f"Insert failed for {key}: {e.message}")
            outcome["failed"].append({"row": item["row"], "domain": key, "error": e.message})
            return
        outcome["success"].append({"row": item["row"], "domain": key, "brand": item["brand"]})

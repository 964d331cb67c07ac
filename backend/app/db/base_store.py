"""
Base store — shared Supabase client access and error translation for all stores.

Every query runs through _execute, which moves the blocking supabase-py
call off the event loop and maps PostgREST failures onto the dashboard
exception hierarchy:
- 23505 (unique violation)   -> DuplicateKeyError
- 22P02 (malformed id value) -> NotFoundError
- anything else              -> PersistenceError
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

import httpx
from postgrest.exceptions import APIError

from app.core.config import settings
from app.core.exceptions import DuplicateKeyError, NotFoundError, PersistenceError
from app.clients.supabase_client import SupabaseClient

logger = logging.getLogger("base_store")

UNIQUE_VIOLATION = "23505"
INVALID_TEXT_REPRESENTATION = "22P02"

# PostgREST caps un-ranged selects at 1000 rows
PAGE_SIZE = 1000


class BaseStore:
    """Base class for all Supabase stores providing shared query helpers."""

    def __init__(self, supabase_client: SupabaseClient | None = None) -> None:
        self._supabase_client = supabase_client or SupabaseClient(settings)

    @property
    def _client(self):
        """Get the Supabase client instance."""
        return self._supabase_client.client

    async def _execute(self, query, table: str, key: Optional[str] = None):
        """Run a built query and translate storage errors."""
        try:
            return await asyncio.to_thread(query.execute)
        except APIError as e:
            code = getattr(e, "code", None)
            logger.info("supabase error table=%s code=%s detail=%s", table, code, str(e))
            if code == UNIQUE_VIOLATION:
                raise DuplicateKeyError(key or table, "Already exists") from e
            if code == INVALID_TEXT_REPRESENTATION:
                raise NotFoundError(f"No {table} record matches the given id") from e
            raise PersistenceError(f"Supabase query on {table} failed: {e}", table=table) from e
        except (httpx.HTTPError, OSError) as e:
            logger.warning("supabase unreachable table=%s detail=%s", table, str(e))
            raise PersistenceError(f"Supabase unreachable while querying {table}: {e}", table=table) from e

    async def _insert(self, table: str, row: Dict[str, Any], key: Optional[str] = None) -> Dict[str, Any]:
        """Insert one row and return the stored representation."""
        response = await self._execute(self._client.table(table).insert(row), table, key=key)
        return response.data[0] if response.data else row

    async def _select(
        self, table: str, columns: str = "*", filters: Dict[str, Any] | None = None
    ) -> List[Dict[str, Any]]:
        """Select rows from a table with optional equality filters."""
        query = self._client.table(table).select(columns)
        for field, value in (filters or {}).items():
            query = query.eq(field, value)
        response = await self._execute(query, table)
        return response.data or []

    async def _select_one(self, table: str, columns: str, field: str, value: Any) -> Optional[Dict[str, Any]]:
        """Fetch the first row matching field == value, or None."""
        query = self._client.table(table).select(columns).eq(field, value).limit(1)
        try:
            response = await self._execute(query, table)
        except NotFoundError:
            return None
        return response.data[0] if response.data else None

    async def _select_all(
        self,
        table: str,
        columns: str = "*",
        build: Optional[Callable[[Any], Any]] = None,
    ) -> List[Dict[str, Any]]:
        """Select every matching row, paging past the PostgREST row cap."""
        rows: List[Dict[str, Any]] = []
        offset = 0
        while True:
            query = self._client.table(table).select(columns)
            if build:
                query = build(query)
            response = await self._execute(query.range(offset, offset + PAGE_SIZE - 1), table)
            page = response.data or []
            rows.extend(page)
            if len(page) < PAGE_SIZE:
                return rows
            offset += PAGE_SIZE

    async def _update(
        self, table: str, filters: Dict[str, Any], payload: Dict[str, Any], key: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Update rows matching the filters and return them."""
        query = self._client.table(table).update(payload)
        for field, value in filters.items():
            query = query.eq(field, value)
        try:
            response = await self._execute(query, table, key=key)
        except NotFoundError:
            return []
        return response.data or []

    async def _delete(self, table: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Delete rows matching the filters and return them."""
        query = self._client.table(table).delete()
        for field, value in filters.items():
            query = query.eq(field, value)
        try:
            response = await self._execute(query, table)
        except NotFoundError:
            return []
        return response.data or []

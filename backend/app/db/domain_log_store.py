"""
Domain log store — add/delete audit trail for domain records.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from app.db.base_store import BaseStore

logger = logging.getLogger("domain_log_store")

TABLE = "domain_logs"


class DomainLogStore(BaseStore):

    async def record(self, domain: str, action: str, user_id: str) -> Dict[str, Any]:
        row = {
            "domain": domain,
            "action": action,
            "user_id": user_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        return await self._insert(TABLE, row)

    async def list_logs(self, limit: int = 500) -> List[Dict[str, Any]]:
        query = (
            self._client.table(TABLE)
            .select("*")
            .order("timestamp", desc=True)
            .limit(limit)
        )
        response = await self._execute(query, TABLE)
        return response.data or []

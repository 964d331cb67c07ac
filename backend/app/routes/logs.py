"""
Audit log routes — domain add/delete history (admin only).
"""
from fastapi import APIRouter, Depends, Query

from app.container import get_domain_log_store
from app.core.auth import require_admin
from app.db.domain_log_store import DomainLogStore

router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("")
async def list_logs(
    limit: int = Query(500, ge=1, le=5000),
    current_user: dict = Depends(require_admin),
    store: DomainLogStore = Depends(get_domain_log_store),
):
    logs = await store.list_logs(limit=limit)
    return {"success": True, "count": len(logs), "data": logs}

"""
Health routes — liveness probe with bridge and subscriber status.
Version: 1.0.0
"""
from fastapi import APIRouter, Depends

from app.container import get_notifier, get_upstream_bridge

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    bridge=Depends(get_upstream_bridge),
    notifier=Depends(get_notifier),
):
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "bridge": bridge.state.value if bridge is not None else "disabled",
        "subscribers": notifier.subscriber_count,
    }

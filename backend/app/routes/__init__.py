"""
Route aggregator — mounts all routers under /api prefix.

Health and the real-time socket are exported separately for main.py to
mount at root.
Version: 1.0.0
"""
from fastapi import APIRouter

from app.routes.auth import router as auth_router
from app.routes.brands import router as brands_router
from app.routes.domains import router as domains_router
from app.routes.checker import router as checker_router
from app.routes.logs import router as logs_router
from app.routes.health import router as health_router
from app.routes.realtime import router as realtime_router

api_router = APIRouter(prefix="/api")

api_router.include_router(auth_router)
api_router.include_router(brands_router)
api_router.include_router(domains_router)
api_router.include_router(checker_router)
api_router.include_router(logs_router)

__all__ = ["api_router", "health_router", "realtime_router"]

"""
Lazy DI container — singleton access to clients, stores, and services.

Nothing is built at import time; the first call to a getter builds the
object (and its dependencies) and caches it. Routes receive services via
Depends(get_...), so tests swap them with app.dependency_overrides.
Import individual getters to avoid circular imports.
Version: 1.0.0
"""

from functools import lru_cache

from app.core.config import settings
from app.clients.supabase_client import SupabaseClient
from app.clients.checker_client import CheckerClient
from app.db.brand_store import BrandStore
from app.db.domain_store import DomainStore
from app.db.domain_log_store import DomainLogStore
from app.services.notifier import WebSocketNotifier
from app.services.broadcast_coalescer import BroadcastCoalescer
from app.services.brand_service import BrandService
from app.services.domain_service import DomainService
from app.services.import_service import ImportService
from app.services.status_service import StatusService
from app.services.checker_service import CheckerService
from app.services.upstream_bridge import UpstreamBridge
from app.utils.import_lock import ImportLock


# -- Clients ---------------------------------------------------------------

@lru_cache(maxsize=1)
def get_supabase_client():
    return SupabaseClient(settings)


@lru_cache(maxsize=1)
def get_checker_client():
    return CheckerClient(settings)


# -- DB Stores -------------------------------------------------------------

@lru_cache(maxsize=1)
def get_brand_store():
    return BrandStore(get_supabase_client())


@lru_cache(maxsize=1)
def get_domain_store():
    return DomainStore(get_supabase_client())


@lru_cache(maxsize=1)
def get_domain_log_store():
    return DomainLogStore(get_supabase_client())


# -- Real-time -------------------------------------------------------------

@lru_cache(maxsize=1)
def get_notifier():
    return WebSocketNotifier()


@lru_cache(maxsize=1)
def get_coalescer():
    return BroadcastCoalescer(
        get_notifier(),
        flush_delay=settings.broadcast_flush_seconds,
        max_batch=settings.broadcast_max_batch,
    )


# -- Services --------------------------------------------------------------

@lru_cache(maxsize=1)
def get_brand_service():
    return BrandService(get_brand_store(), get_domain_store())


@lru_cache(maxsize=1)
def get_domain_service():
    return DomainService(
        get_domain_store(),
        get_brand_store(),
        get_domain_log_store(),
        get_notifier(),
    )


@lru_cache(maxsize=1)
def get_import_service():
    return ImportService(
        get_domain_store(),
        get_brand_store(),
        get_notifier(),
        chunk_size=settings.import_chunk_size,
        lock_factory=ImportLock if settings.import_lock_enabled else None,
    )


@lru_cache(maxsize=1)
def get_status_service():
    return StatusService(
        get_domain_store(),
        get_coalescer(),
        get_notifier(),
        chunk_size=settings.status_update_chunk_size,
    )


@lru_cache(maxsize=1)
def get_checker_service():
    return CheckerService(
        get_domain_store(),
        get_checker_client(),
        max_manual_urls=settings.max_manual_check_urls,
    )


@lru_cache(maxsize=1)
def get_upstream_bridge():
    """None when no checker feed URL is configured."""
    if not settings.checker_websocket_url:
        return None
    return UpstreamBridge(
        settings.checker_websocket_url,
        get_status_service(),
        reconnect_delay=settings.checker_reconnect_seconds,
    )

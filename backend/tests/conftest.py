"""
Pytest configuration and shared fixtures for domain dashboard tests.

Provides mock Supabase clients, stores, notifier, a manual timer factory,
a TestClient with auth/service overrides, and sample test data.
Version: 1.0.0
"""
from typing import Any, Callable, List
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient


# ---------------------------------------------------------------------------
# Timers
# ---------------------------------------------------------------------------

class ManualTimer:
    def __init__(self, scheduler: "ManualTimers", delay: float, callback: Callable[[], Any]) -> None:
        self._scheduler = scheduler
        self.delay = delay
        self.callback = callback
        self.due = scheduler.now + delay
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualTimers:
    """Timer factory driven by advance() instead of wall-clock time."""

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: List[ManualTimer] = []

    def __call__(self, delay: float, callback: Callable[[], Any]) -> ManualTimer:
        timer = ManualTimer(self, delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def active(self) -> List[ManualTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def advance(self, seconds: float) -> None:
        self.now += seconds
        for timer in sorted(self.active, key=lambda t: t.due):
            if timer.due <= self.now and not timer.cancelled:
                timer.fired = True
                timer.callback()


@pytest.fixture
def manual_timers():
    return ManualTimers()


# ---------------------------------------------------------------------------
# Auth fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def admin_user():
    return {
        "user_id": "admin-user-id",
        "username": "admin",
        "email": "admin@test.com",
        "groups": ["admin"],
        "role": "admin",
    }


@pytest.fixture
def manager_user():
    return {
        "user_id": "manager-user-id",
        "username": "manager",
        "email": "manager@test.com",
        "groups": ["manager"],
        "role": "manager",
    }


@pytest.fixture
def viewer_user():
    return {
        "user_id": "viewer-user-id",
        "username": "viewer",
        "email": "viewer@test.com",
        "groups": [],
        "role": "user",
    }


# ---------------------------------------------------------------------------
# Clients (mocked)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_table():
    """Chained PostgREST query builder; every builder call returns itself."""
    table = MagicMock()
    for method in (
        "select", "insert", "upsert", "update", "delete",
        "eq", "ilike", "order", "range", "limit",
    ):
        getattr(table, method).return_value = table
    table.execute.return_value = MagicMock(data=[], count=0)
    return table


@pytest.fixture
def mock_supabase_client(mock_table):
    """Mocked SupabaseClient whose .client.table() returns mock_table."""
    client = MagicMock()
    client.client.table.return_value = mock_table
    return client


# ---------------------------------------------------------------------------
# DB Stores (mocked)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_domain_store():
    store = MagicMock()
    store.get_domain = AsyncMock(return_value=None)
    store.get_domain_by_key = AsyncMock(return_value=None)
    store.list_domain_keys = AsyncMock(return_value=set())
    store.list_domains = AsyncMock(return_value=([], 0))
    store.list_all_domains = AsyncMock(return_value=[])
    store.list_active_for_checker = AsyncMock(return_value=[])
    store.count_domains = AsyncMock(return_value=0)
    store.insert_domain = AsyncMock(side_effect=lambda record: {"id": f"id-{record['domain']}", **record})
    store.bulk_insert_domains = AsyncMock(side_effect=lambda records: [dict(r) for r in records])
    store.update_domain = AsyncMock(side_effect=lambda domain_id, payload: {"id": domain_id, **payload})
    store.delete_domain = AsyncMock(return_value={"id": "deleted"})
    store.delete_blocked_domains = AsyncMock(return_value=0)
    return store


@pytest.fixture
def mock_brand_store(sample_brands):
    store = MagicMock()
    store.list_brands = AsyncMock(return_value=sample_brands)
    store.get_brand = AsyncMock(return_value=sample_brands[0])
    store.insert_brand = AsyncMock(side_effect=lambda record: {"id": "brand-new", **record})
    store.update_brand = AsyncMock(side_effect=lambda brand_id, payload: {**sample_brands[0], "id": brand_id, **payload})
    store.delete_brand = AsyncMock(return_value=True)
    return store


@pytest.fixture
def mock_log_store():
    store = MagicMock()
    store.record = AsyncMock(return_value={})
    store.list_logs = AsyncMock(return_value=[])
    return store


# ---------------------------------------------------------------------------
# Real-time (mocked)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_notifier():
    """Notifier capturing emitted events in call order."""
    notifier = MagicMock()
    notifier.subscriber_count = 0
    return notifier


@pytest.fixture
def mock_coalescer():
    coalescer = MagicMock()
    return coalescer


# ---------------------------------------------------------------------------
# FastAPI test client
# ---------------------------------------------------------------------------

@pytest.fixture
def app():
    from app.main import app as fastapi_app
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def make_client(app):
    """
    Build a TestClient acting as the given user (None = unauthenticated),
    with container getters replaced by the given overrides.
    """
    from app.core.auth import get_current_user

    def _provide(value):
        return lambda: value

    def _make(user=None, overrides=None):
        app.dependency_overrides.clear()
        if user is not None:
            app.dependency_overrides[get_current_user] = _provide(user)
        for getter, value in (overrides or {}).items():
            app.dependency_overrides[getter] = _provide(value)
        return TestClient(app, raise_server_exceptions=False)

    with patch("app.main.get_upstream_bridge", return_value=None):
        yield _make


# ---------------------------------------------------------------------------
# Sample test data
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_brands():
    return [
        {"id": "brand-a200m", "name": "A200M", "code": "A200M", "color": "#3B82F6", "is_active": True},
        {"id": "brand-acme", "name": "ACME CORP", "code": "ACMECO", "color": "#FF0000", "is_active": True},
        {"id": "brand-old", "name": "LEGACY", "code": "LGC", "color": "#00FF00", "is_active": False},
    ]


@pytest.fixture
def sample_domain():
    return {
        "id": "dom-1",
        "domain": "example.com/promo",
        "brand_id": "brand-a200m",
        "brand": {"id": "brand-a200m", "name": "A200M", "code": "A200M", "color": "#3B82F6"},
        "note": "",
        "uptime_status": "up",
        "block_status": "not_blocked",
        "blocked_marker": None,
        "cdn_status": "unknown",
        "index_status": "indexed",
        "is_active": True,
        "created_by": "admin-user-id",
        "updated_by": "admin-user-id",
        "created_at": "2026-01-15T10:00:00+00:00",
        "updated_at": "2026-01-15T10:00:00+00:00",
    }

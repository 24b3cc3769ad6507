# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - FakeDatabase: a SupabaseClient whose query builders return queued rows
#   and record every chained call, so tests can assert on filters
# - A TestClient wired to the fake through dependency_overrides
# =============================================================================

import os
from collections import defaultdict, deque
from types import SimpleNamespace

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("ADMIN_SYNC_KEY", "test-admin-key")
os.environ.setdefault("CRON_SECRET_KEY", "test-cron-secret")
os.environ.setdefault("CLERK_WEBHOOK_SECRET", "whsec_dGVzdC13ZWJob29rLXNlY3JldA==")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from lib.supabase_client import SupabaseClient


# =============================================================================
# Fake Supabase
# =============================================================================

class FakeQuery:
    """
    Stand-in for a supabase-py query builder.

    Every builder method (select, eq, order, range, ...) is recorded and
    returns the same query, so chains work unchanged. execute() returns
    the rows it was created with, or raises the queued error.
    """

    def __init__(self, name: str, data=None, count=None, error: Exception | None = None):
        self.name = name
        self.calls: list[tuple[str, tuple, dict]] = []
        self._data = data if data is not None else []
        self._count = count
        self._error = error

    def __getattr__(self, method):
        if method.startswith("_"):
            raise AttributeError(method)

        def record(*args, **kwargs):
            self.calls.append((method, args, kwargs))
            return self

        return record

    def execute(self):
        if self._error is not None:
            raise self._error
        return SimpleNamespace(data=self._data, count=self._count)

    def called(self, method: str) -> list[tuple]:
        """Arguments of every call to a builder method, in order."""
        return [args for name, args, _ in self.calls if name == method]

    def kwargs_of(self, method: str) -> list[dict]:
        return [kwargs for name, _, kwargs in self.calls if name == method]


class FakeClient:
    """Hands out FakeQuery objects from per-table queues."""

    def __init__(self):
        self.responses: dict[str, deque] = defaultdict(deque)
        self.queries: list[FakeQuery] = []

    def _next(self, name: str) -> FakeQuery:
        queued = self.responses[name].popleft() if self.responses[name] else {}
        query = FakeQuery(name, **queued)
        self.queries.append(query)
        return query

    def table(self, name: str) -> FakeQuery:
        return self._next(name)

    def rpc(self, function: str, params: dict) -> FakeQuery:
        return self._next(f"rpc:{function}")


class FakeDatabase(SupabaseClient):
    """
    SupabaseClient backed by FakeClient.

    Example:
        db.queue("dollar_rates", [{"date": "2024-05-02", ...}])
        DollarService(db).get_latest("BLUE")
        db.queries_for("dollar_rates")[0].called("eq")
    """

    def __init__(self):
        super().__init__("https://test-project.supabase.co", "test-service-role-key")
        self.fake = FakeClient()

    def get_client(self):
        return self.fake

    def queue(self, name: str, data=None, count=None, error: Exception | None = None) -> None:
        """Queue the result of the next query on a table (or "rpc:<name>")."""
        self.fake.responses[name].append({"data": data, "count": count, "error": error})

    def queries_for(self, name: str) -> list[FakeQuery]:
        return [query for query in self.fake.queries if query.name == name]


class InMemoryFavoritesDatabase(FakeDatabase):
    """FakeDatabase with a real user table and favorites set."""

    def __init__(self, users: dict[str, str] | None = None):
        super().__init__()
        self.users = users or {}
        self.favorites: dict[tuple, dict] = {}

    def fetch_user_id(self, clerk_user_id):
        return self.users.get(clerk_user_id)

    def list_favorites(self, user_id):
        return [row for key, row in self.favorites.items() if key[0] == user_id]

    def find_favorite(self, user_id, indicator_type, indicator_id):
        return self.favorites.get((user_id, indicator_type, indicator_id))

    def insert_favorite(self, user_id, indicator_type, indicator_id):
        key = (user_id, indicator_type, indicator_id)
        if key in self.favorites:
            return None
        self.favorites[key] = {
            "id": len(self.favorites) + 1,
            "indicator_type": indicator_type,
            "indicator_id": indicator_id,
            "created_at": "2024-06-01T12:00:00",
        }
        return self.favorites[key]

    def delete_favorite(self, user_id, indicator_type, indicator_id):
        self.favorites.pop((user_id, indicator_type, indicator_id), None)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def db():
    """Empty fake database; queue rows per test."""
    return FakeDatabase()


@pytest.fixture
def app_instance():
    """The FastAPI app with overrides cleared after each test."""
    from app.main import app

    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app_instance, db):
    """TestClient whose routes read from the `db` fixture."""
    from app.dependencies import get_database

    app_instance.dependency_overrides[get_database] = lambda: db
    return TestClient(app_instance)


@pytest.fixture
def sample_emae_rows():
    """General EMAE rows as returned by emae_with_variations."""
    return [
        {
            "date": "2024-03-01",
            "sector": "Nivel general",
            "sector_code": "GENERAL",
            "original_value": 148.2,
            "seasonally_adjusted_value": 145.1,
            "cycle_trend_value": 144.9,
            "monthly_pct_change": -1.4,
            "yearly_pct_change": -8.4,
        },
        {
            "date": "2024-02-01",
            "sector": "Nivel general",
            "sector_code": "GENERAL",
            "original_value": 139.7,
            "seasonally_adjusted_value": 147.2,
            "cycle_trend_value": 146.0,
            "monthly_pct_change": -0.2,
            "yearly_pct_change": -3.2,
        },
    ]


@pytest.fixture
def sample_risk_rows():
    """Country risk closings, newest first."""
    return [
        {"closing_date": "2024-06-05", "closing_value": 1400.0, "change_percentage": 2.0},
        {"closing_date": "2024-06-04", "closing_value": 1372.0, "change_percentage": -1.0},
        {"closing_date": "2024-06-03", "closing_value": 1386.0, "change_percentage": 0.5},
        {"closing_date": "2024-06-02", "closing_value": 1200.0, "change_percentage": None},
    ]

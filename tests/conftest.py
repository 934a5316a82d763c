"""Pytest configuration and fixtures."""

import pytest
import tempfile
from pathlib import Path

from repcycle.clients.strava.client import RegisterInstallResponse
from repcycle.data.catalog import build_exercise_catalog, seed_exercises
from repcycle.db.kv import MemoryKeyValueStore
from repcycle.db.repositories import PreferencesRepository, StravaOutboxRepository
from repcycle.db.store import PlanStore
from repcycle.errors import StravaSyncApiError
from repcycle.services.context import build_context


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
def catalog():
    """The seeded exercise library with ids 1..N."""
    return build_exercise_catalog()


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
async def store(kv):
    """An initialized in-memory store with the exercise library seeded."""
    plan_store = PlanStore(kv)
    await plan_store.init()
    await seed_exercises(plan_store)
    return plan_store


@pytest.fixture
def preferences(kv):
    return PreferencesRepository(kv)


@pytest.fixture
def outbox(kv):
    return StravaOutboxRepository(kv)


class FakeSyncClient:
    """Records relay calls and fails on demand."""

    def __init__(self):
        self.posted = []
        self.fail_keys: set[str] = set()
        self.fail_all = False
        self.connected = True
        self.disconnected = False

    @property
    def is_configured(self) -> bool:
        return True

    async def register_install(self, install_id, return_to=None):
        return RegisterInstallResponse(
            connect_url=f"https://relay.test/connect?install_id={install_id}",
            sync_token="token-123",
        )

    async def get_connection_status(self, install_id, sync_token):
        return self.connected

    async def post_session_sync(self, sync_token, payload):
        if self.fail_all or payload.idempotency_key in self.fail_keys:
            raise StravaSyncApiError("relay unavailable", 503)
        self.posted.append(payload)

    async def disconnect_install(self, install_id, sync_token):
        self.disconnected = True


@pytest.fixture
def fake_client():
    return FakeSyncClient()


@pytest.fixture
async def context(kv, fake_client):
    """Fully wired services over an in-memory store."""
    app_context = await build_context(kv, fake_client)
    await seed_exercises(app_context.store)
    return app_context


@pytest.fixture
async def connected(context):
    """Context with Strava connected and auto-sync on."""
    await context.preferences.set_connection_state(
        connected=True, install_id="install-1", sync_token="token-123"
    )
    await context.preferences.set_strava_sync_enabled(True)
    return context

"""Wiring of store, repositories and services for one data directory."""

from dataclasses import dataclass
from pathlib import Path

from ..clients.strava.client import StravaSyncClient
from ..db.engine import get_db_path, init_db
from ..db.kv import KeyValueStore, SqliteKeyValueStore
from ..db.repositories import PreferencesRepository, StravaOutboxRepository
from ..db.store import PlanStore
from .strava_sync import StravaSyncService
from .workouts import WorkoutService


@dataclass
class AppContext:
    """Everything a command or request handler needs."""

    store: PlanStore
    preferences: PreferencesRepository
    outbox: StravaOutboxRepository
    sync: StravaSyncService
    workouts: WorkoutService


async def build_context(
    kv: KeyValueStore, client: StravaSyncClient | None = None
) -> AppContext:
    """Initialize a store over ``kv`` and build services on top of it."""
    store = PlanStore(kv)
    await store.init()
    preferences = PreferencesRepository(kv)
    outbox = StravaOutboxRepository(kv)
    sync = StravaSyncService(store, preferences, outbox, client)
    return AppContext(
        store=store,
        preferences=preferences,
        outbox=outbox,
        sync=sync,
        workouts=WorkoutService(store, sync),
    )


async def open_context(
    db_path: Path | None = None, client: StravaSyncClient | None = None
) -> AppContext:
    """Open the SQLite-backed context, creating the schema if needed."""
    if db_path is None:
        db_path = get_db_path()
    await init_db(db_path)
    return await build_context(SqliteKeyValueStore(db_path), client)

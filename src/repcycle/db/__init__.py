"""Persistence layer for repcycle."""

from .engine import get_db_path, init_db, open_store
from .kv import KeyValueStore, MemoryKeyValueStore, SqliteKeyValueStore
from .repositories import PreferencesRepository, StravaOutboxRepository
from .store import IdCounters, PlanStore

__all__ = [
    "get_db_path",
    "IdCounters",
    "init_db",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "open_store",
    "PlanStore",
    "PreferencesRepository",
    "SqliteKeyValueStore",
    "StravaOutboxRepository",
]

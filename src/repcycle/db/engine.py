"""Database engine setup and initialization."""

from pathlib import Path

import aiosqlite

from ..config import get_settings
from .kv import SqliteKeyValueStore
from .store import PlanStore


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path."""
    settings = get_settings()
    if data_dir is None:
        data_dir = settings.data_dir
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / settings.db_filename


async def init_db(db_path: Path | None = None) -> None:
    """Initialize the database schema."""
    if db_path is None:
        db_path = get_db_path()

    async with aiosqlite.connect(db_path) as db:
        await db.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)
        await db.commit()


async def open_store(db_path: Path | None = None) -> PlanStore:
    """Create the schema if needed and return an initialized plan store."""
    if db_path is None:
        db_path = get_db_path()

    await init_db(db_path)
    store = PlanStore(SqliteKeyValueStore(db_path))
    await store.init()
    return store

"""Key-value persistence backends."""

from pathlib import Path
from typing import Protocol

import aiosqlite


class KeyValueStore(Protocol):
    """String key to string value persistence."""

    async def get(self, key: str) -> str | None: ...

    async def get_many(self, keys: list[str]) -> dict[str, str | None]: ...

    async def set_many(self, items: dict[str, str]) -> None: ...

    async def remove(self, key: str) -> None: ...


class SqliteKeyValueStore:
    """Key-value store backed by a single SQLite table."""

    def __init__(self, db_path: Path):
        self.db_path = db_path

    async def get(self, key: str) -> str | None:
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            )
            row = await cursor.fetchone()
            return row[0] if row else None

    async def get_many(self, keys: list[str]) -> dict[str, str | None]:
        result: dict[str, str | None] = {key: None for key in keys}
        if not keys:
            return result

        placeholders = ", ".join("?" for _ in keys)
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                f"SELECT key, value FROM kv_store WHERE key IN ({placeholders})",
                tuple(keys),
            )
            for key, value in await cursor.fetchall():
                result[key] = value
        return result

    async def set_many(self, items: dict[str, str]) -> None:
        async with aiosqlite.connect(self.db_path) as db:
            await db.executemany(
                """
                INSERT INTO kv_store (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                list(items.items()),
            )
            await db.commit()

    async def remove(self, key: str) -> None:
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            await db.commit()


class MemoryKeyValueStore:
    """In-process key-value store for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def get_many(self, keys: list[str]) -> dict[str, str | None]:
        return {key: self.data.get(key) for key in keys}

    async def set_many(self, items: dict[str, str]) -> None:
        self.data.update(items)

    async def remove(self, key: str) -> None:
        self.data.pop(key, None)

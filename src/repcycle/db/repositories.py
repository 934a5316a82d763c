"""Data access for preferences and the Strava sync outbox."""

import asyncio
import json

import structlog

from ..models.sync import OutboxItem, StravaConnectionState, StravaSyncPayload
from ..utils.dates import to_iso, utc_now
from .kv import KeyValueStore

logger = structlog.get_logger(__name__)

UNIT_CHOICES = ("lbs", "kg")


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset()


class PreferencesRepository:
    """Repository for user preferences and the Strava connection."""

    KEYS = {
        "unit_preference": "repcycle:unit_preference",
        "strava_sync_enabled": "repcycle:strava_sync_enabled",
        "strava_connected": "repcycle:strava_connected",
        "strava_install_id": "repcycle:strava_install_id",
        "strava_sync_token": "repcycle:strava_sync_token",
        "strava_last_sync_at": "repcycle:strava_last_sync_at",
        "strava_last_sync_error": "repcycle:strava_last_sync_error",
    }

    _CONNECTION_FIELDS = {
        "install_id": "strava_install_id",
        "sync_token": "strava_sync_token",
        "last_sync_at": "strava_last_sync_at",
        "last_sync_error": "strava_last_sync_error",
    }

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    async def get_unit_preference(self) -> str:
        value = await self.kv.get(self.KEYS["unit_preference"])
        return value if value in UNIT_CHOICES else "lbs"

    async def set_unit_preference(self, unit: str) -> None:
        if unit not in UNIT_CHOICES:
            raise ValueError(f"Unit must be one of {', '.join(UNIT_CHOICES)}")
        await self.kv.set_many({self.KEYS["unit_preference"]: unit})

    async def get_strava_sync_enabled(self) -> bool:
        return await self.kv.get(self.KEYS["strava_sync_enabled"]) == "true"

    async def set_strava_sync_enabled(self, enabled: bool) -> None:
        await self.kv.set_many(
            {self.KEYS["strava_sync_enabled"]: "true" if enabled else "false"}
        )

    async def get_connection_state(self) -> StravaConnectionState:
        """Read the stored connection, defaulting to disconnected."""
        keys = [self.KEYS["strava_connected"]] + [
            self.KEYS[name] for name in self._CONNECTION_FIELDS.values()
        ]
        values = await self.kv.get_many(keys)
        state = StravaConnectionState(
            connected=values[self.KEYS["strava_connected"]] == "true"
        )
        for attr, name in self._CONNECTION_FIELDS.items():
            setattr(state, attr, values[self.KEYS[name]])
        return state

    async def set_connection_state(
        self,
        *,
        connected=UNSET,
        install_id=UNSET,
        sync_token=UNSET,
        last_sync_at=UNSET,
        last_sync_error=UNSET,
    ) -> None:
        """Update only the given fields. ``None`` removes a stored value."""
        updates: dict[str, str] = {}
        if connected is not UNSET:
            updates[self.KEYS["strava_connected"]] = "true" if connected else "false"

        given = {
            "install_id": install_id,
            "sync_token": sync_token,
            "last_sync_at": last_sync_at,
            "last_sync_error": last_sync_error,
        }
        for attr, value in given.items():
            if value is UNSET:
                continue
            key = self.KEYS[self._CONNECTION_FIELDS[attr]]
            if value is None:
                await self.kv.remove(key)
            else:
                updates[key] = value

        if updates:
            await self.kv.set_many(updates)

    async def clear_connection_state(self) -> None:
        """Forget the connection and its credentials."""
        await self.kv.remove(self.KEYS["strava_connected"])
        for name in self._CONNECTION_FIELDS.values():
            await self.kv.remove(self.KEYS[name])


class StravaOutboxRepository:
    """Durable FIFO of failed sync payloads keyed by idempotency key."""

    KEY = "repcycle:strava_sync_outbox"

    def __init__(self, kv: KeyValueStore):
        self.kv = kv
        self._lock = asyncio.Lock()

    async def _read(self) -> list[OutboxItem]:
        raw = await self.kv.get(self.KEY)
        if not raw:
            return []

        parsed = json.loads(raw)
        if not isinstance(parsed, list):
            return []

        items = []
        for entry in parsed:
            try:
                items.append(OutboxItem.from_dict(entry))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("outbox_item_dropped", error=str(e))
        return items

    async def _write(self, items: list[OutboxItem]) -> None:
        await self.kv.set_many({self.KEY: json.dumps([item.to_dict() for item in items])})

    async def list_items(self) -> list[OutboxItem]:
        """Pending items in enqueue order."""
        async with self._lock:
            return await self._read()

    async def enqueue(self, payload: StravaSyncPayload, last_error: str) -> None:
        """Add a payload, replacing any entry with the same idempotency key."""
        async with self._lock:
            items = [
                item
                for item in await self._read()
                if item.idempotency_key != payload.idempotency_key
            ]
            items.append(
                OutboxItem(
                    payload=payload,
                    created_at_iso=to_iso(utc_now()),
                    last_error=last_error,
                )
            )
            await self._write(items)

    async def update_error(self, idempotency_key: str, last_error: str) -> None:
        """Record a new failure on an item without moving it."""
        async with self._lock:
            items = await self._read()
            for item in items:
                if item.idempotency_key == idempotency_key:
                    item.last_error = last_error
            await self._write(items)

    async def remove(self, idempotency_key: str) -> None:
        async with self._lock:
            items = [
                item
                for item in await self._read()
                if item.idempotency_key != idempotency_key
            ]
            await self._write(items)

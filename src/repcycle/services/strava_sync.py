"""Mirror completed sessions to Strava through the sync relay.

A completed session is posted once. If the post fails for any reason the
payload goes to the outbox and ``retry_pending`` delivers it later. The
idempotency key lets the relay drop duplicates, so a payload that was
actually delivered before a timeout is harmless to resend.
"""

import uuid
from collections.abc import Callable
from dataclasses import dataclass

import httpx
import structlog

from ..clients.strava.client import RegisterInstallResponse, StravaSyncClient
from ..clients.strava.time import (
    build_strava_idempotency_key,
    calculate_strava_session_timing,
    format_workout_activity_name,
)
from ..db.repositories import PreferencesRepository, StravaOutboxRepository
from ..db.store import PlanStore
from ..errors import StravaSyncError
from ..models.sync import (
    ActivityType,
    StravaConnectionState,
    StravaSyncPayload,
    SyncCompletedSessionInput,
    SyncResult,
)
from ..utils.dates import to_iso, utc_now

logger = structlog.get_logger(__name__)

UNKNOWN_ERROR = "Unknown Strava sync error"

# Errors that mean "try again later", never a crash
SYNC_FAILURES = (StravaSyncError, httpx.HTTPError)


@dataclass
class SyncProgress:
    """Progress of a bulk sync after each session."""

    processed: int
    total: int
    succeeded: int


@dataclass
class _Credentials:
    install_id: str
    sync_token: str


def _error_message(error: Exception) -> str:
    return str(error) or UNKNOWN_ERROR


class StravaSyncService:
    """Coordinates preferences, outbox and relay client."""

    def __init__(
        self,
        store: PlanStore,
        preferences: PreferencesRepository,
        outbox: StravaOutboxRepository,
        client: StravaSyncClient | None = None,
    ):
        self.store = store
        self.preferences = preferences
        self.outbox = outbox
        self.client = client or StravaSyncClient()

    async def _credentials(self, require_auto_sync: bool) -> _Credentials | None:
        if require_auto_sync and not await self.preferences.get_strava_sync_enabled():
            return None
        connection = await self.preferences.get_connection_state()
        if not connection.has_credentials:
            return None
        return _Credentials(connection.install_id, connection.sync_token)

    def build_payload(
        self, sync_input: SyncCompletedSessionInput, install_id: str
    ) -> StravaSyncPayload:
        """Turn a completed session into the relay's payload."""
        timing = calculate_strava_session_timing(
            sync_input.completed_at_iso, sync_input.completed_set_count
        )
        return StravaSyncPayload(
            install_id=install_id,
            idempotency_key=build_strava_idempotency_key(
                sync_input.completed_session_id, sync_input.completed_at_iso
            ),
            activity_name=format_workout_activity_name(sync_input.completed_at_iso),
            activity_type=ActivityType(sync_input.activity_type),
            start_time_iso=timing.start_time_iso,
            end_time_iso=timing.end_time_iso,
            elapsed_seconds=timing.elapsed_seconds,
        )

    async def _post(self, sync_token: str, payload: StravaSyncPayload) -> str | None:
        """Post a payload and record the outcome. Returns the error message on failure."""
        try:
            await self.client.post_session_sync(sync_token, payload)
        except SYNC_FAILURES as e:
            message = _error_message(e)
            logger.warning(
                "strava_sync_failed",
                idempotency_key=payload.idempotency_key,
                error=message,
            )
            await self.preferences.set_connection_state(last_sync_error=message)
            return message

        await self.preferences.set_connection_state(
            last_sync_at=to_iso(utc_now()), last_sync_error=None
        )
        logger.info("strava_sync_succeeded", idempotency_key=payload.idempotency_key)
        return None

    async def _sync_one(
        self, sync_input: SyncCompletedSessionInput, credentials: _Credentials
    ) -> bool:
        payload = self.build_payload(sync_input, credentials.install_id)
        error = await self._post(credentials.sync_token, payload)
        if error is not None:
            await self.outbox.enqueue(payload, error)
            return False
        return True

    async def sync_completed_session(self, sync_input: SyncCompletedSessionInput) -> bool:
        """Post one completed session if auto-sync is on and connected.

        Failures are queued for retry and never raised.

        Returns:
            True if the relay accepted the session
        """
        credentials = await self._credentials(require_auto_sync=True)
        if credentials is None:
            return False
        return await self._sync_one(sync_input, credentials)

    async def sync_all_completed_sessions(
        self, on_progress: Callable[[SyncProgress], None] | None = None
    ) -> SyncResult:
        """Post every completed session, whether or not auto-sync is on."""
        result = SyncResult()
        credentials = await self._credentials(require_auto_sync=False)
        if credentials is None:
            return result

        completed = [
            s for s in self.store.get_all_completed_sessions() if s.completed_at is not None
        ]
        for session in completed:
            sync_input = SyncCompletedSessionInput(
                completed_session_id=session.id,
                completed_at_iso=session.completed_at,
                completed_set_count=len(self.store.get_completed_sets_by_session_id(session.id)),
                activity_type=ActivityType.from_session_type(session.session_type),
            )
            succeeded = await self._sync_one(sync_input, credentials)
            result.attempted += 1
            if succeeded:
                result.succeeded += 1
            if on_progress is not None:
                on_progress(SyncProgress(result.attempted, len(completed), result.succeeded))

        logger.info("strava_bulk_sync_finished", attempted=result.attempted, succeeded=result.succeeded)
        return result

    async def retry_pending(self) -> SyncResult:
        """Try every outbox item once, oldest first.

        Delivered items leave the outbox. Failed ones stay with their new
        error and the pass moves on to the next item.
        """
        result = SyncResult()
        if not await self.preferences.get_strava_sync_enabled():
            return result
        connection = await self.preferences.get_connection_state()
        if not connection.connected or not connection.sync_token:
            return result

        pending = await self.outbox.list_items()
        for item in pending:
            result.attempted += 1
            error = await self._post(connection.sync_token, item.payload)
            if error is None:
                await self.outbox.remove(item.idempotency_key)
                result.succeeded += 1
            else:
                await self.outbox.update_error(item.idempotency_key, error)

        if pending:
            logger.info("strava_retry_finished", attempted=result.attempted, succeeded=result.succeeded)
        return result

    async def get_connection_state(self) -> StravaConnectionState:
        return await self.preferences.get_connection_state()

    async def register(self, return_to: str | None = None) -> RegisterInstallResponse:
        """Register a fresh install id and store its token.

        The install counts as connected only once the user has finished the
        OAuth flow at the returned URL; see ``refresh_connection_status``.
        """
        install_id = str(uuid.uuid4())
        response = await self.client.register_install(install_id, return_to)
        await self.preferences.set_connection_state(
            connected=False,
            install_id=install_id,
            sync_token=response.sync_token,
            last_sync_error=None,
        )
        logger.info("strava_install_registered", install_id=install_id)
        return response

    async def refresh_connection_status(self) -> StravaConnectionState:
        """Ask the relay whether the OAuth flow has completed."""
        connection = await self.preferences.get_connection_state()
        if not connection.install_id or not connection.sync_token:
            return connection

        connected = await self.client.get_connection_status(
            connection.install_id, connection.sync_token
        )
        await self.preferences.set_connection_state(connected=connected)
        connection.connected = connected
        return connection

    async def disconnect(self) -> None:
        """Unlink on the relay, then forget credentials and turn auto-sync off.

        Relay errors propagate and leave local state untouched.
        """
        connection = await self.preferences.get_connection_state()
        if connection.install_id and connection.sync_token:
            await self.client.disconnect_install(connection.install_id, connection.sync_token)
        await self.preferences.clear_connection_state()
        await self.preferences.set_strava_sync_enabled(False)
        logger.info("strava_disconnected")

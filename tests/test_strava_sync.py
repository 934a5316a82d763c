"""Tests for Strava sync and the retry outbox."""

import json

import httpx
import pytest

from repcycle.clients.strava.client import StravaSyncClient
from repcycle.config import Settings
from repcycle.data.catalog import seed_exercises
from repcycle.errors import StravaSyncApiError
from repcycle.models.plan import WorkoutPlan
from repcycle.models.program import Focus
from repcycle.models.sync import ActivityType, StravaSyncPayload, SyncCompletedSessionInput
from repcycle.services.context import build_context


def make_payload(key: str) -> StravaSyncPayload:
    return StravaSyncPayload(
        install_id="install-1",
        idempotency_key=key,
        activity_name="Training 02-21",
        activity_type=ActivityType.PLAN,
        start_time_iso="2026-02-21T13:48:00.000Z",
        end_time_iso="2026-02-21T14:00:00.000Z",
        elapsed_seconds=720,
    )


async def finish_session(context, sets: int = 3, completed_at="2026-02-21T14:00:00.000Z"):
    """Log a single-exercise session with some sets and complete it."""
    plan = await _plan(context)
    started = await context.workouts.start_single_exercise_session(
        plan, 1, started_at="2026-02-21T13:30:00.000Z"
    )
    for i in range(sets):
        await context.workouts.log_set(
            started.id, 1, 100, 5, completed_at=f"2026-02-21T13:{40 + i}:00.000Z"
        )
    await context.workouts.complete_session(started.id, completed_at=completed_at)
    return started


async def relay_context(kv, handler):
    """Connected context talking to a mocked relay through the real client."""
    client = StravaSyncClient(
        base_url="https://relay.test",
        transport=httpx.MockTransport(handler),
        settings=Settings(),
    )
    context = await build_context(kv, client)
    await seed_exercises(context.store)
    await context.preferences.set_connection_state(
        connected=True, install_id="install-1", sync_token="token-123"
    )
    await context.preferences.set_strava_sync_enabled(True)
    return context


async def _plan(context) -> int:
    plans = context.store.get_all_workout_plans()
    if plans:
        return plans[0].id
    return await context.store.insert_workout_plan(
        WorkoutPlan(
            name="Plan",
            weekly_frequency=3,
            duration_weeks=8,
            focus=Focus.BALANCED,
            created_at="2026-02-01T00:00:00.000Z",
        )
    )


class TestOutbox:
    """Tests for the outbox repository."""

    async def test_enqueue_dedupes_by_key(self, outbox):
        await outbox.enqueue(make_payload("session-1"), "first")
        await outbox.enqueue(make_payload("session-1"), "second")

        items = await outbox.list_items()
        assert len(items) == 1
        assert items[0].last_error == "second"

    async def test_fifo_and_update_error_keeps_position(self, outbox):
        for key in ("a", "b", "c"):
            await outbox.enqueue(make_payload(key), "boom")

        await outbox.update_error("a", "still failing")
        await outbox.remove("b")

        items = await outbox.list_items()
        assert [i.idempotency_key for i in items] == ["a", "c"]
        assert items[0].last_error == "still failing"

    async def test_corrupt_entries_are_dropped(self, kv, outbox):
        kv.data[outbox.KEY] = '[{"payload": {}}, {"bad": true}]'
        assert await outbox.list_items() == []


class TestAutoSync:
    """Tests for syncing on session completion."""

    async def test_disabled_is_a_no_op(self, context, fake_client):
        await context.preferences.set_connection_state(
            connected=True, install_id="install-1", sync_token="token-123"
        )
        await finish_session(context)

        assert fake_client.posted == []
        assert await context.outbox.list_items() == []

    async def test_not_connected_is_a_no_op(self, context, fake_client):
        await context.preferences.set_strava_sync_enabled(True)
        await finish_session(context)
        assert fake_client.posted == []

    async def test_successful_sync(self, connected, fake_client):
        started = await finish_session(connected, sets=3)

        assert len(fake_client.posted) == 1
        payload = fake_client.posted[0]
        assert payload.idempotency_key == f"session-{started.id}-2026-02-21T14:00:00.000Z"
        assert payload.activity_type is ActivityType.SINGLE
        assert payload.elapsed_seconds == 720
        assert payload.start_time_iso == "2026-02-21T13:48:00.000Z"
        assert payload.install_id == "install-1"

        state = await connected.sync.get_connection_state()
        assert state.last_sync_at is not None
        assert state.last_sync_error is None

    async def test_failure_is_queued_not_raised(self, connected, fake_client):
        fake_client.fail_all = True
        started = await finish_session(connected)

        assert connected.store.get_completed_session_by_id(started.id).completed_at is not None
        items = await connected.outbox.list_items()
        assert len(items) == 1
        assert items[0].last_error == "relay unavailable"

        state = await connected.sync.get_connection_state()
        assert state.last_sync_error == "relay unavailable"

    async def test_completing_twice_does_not_resend(self, connected, fake_client):
        started = await finish_session(connected)
        await connected.workouts.complete_session(started.id)
        assert len(fake_client.posted) == 1

    async def test_repeated_failure_keeps_one_outbox_item(self, connected, fake_client):
        fake_client.fail_all = True
        sync_input = SyncCompletedSessionInput(7, "2026-02-21T14:00:00.000Z", 3)

        assert await connected.sync.sync_completed_session(sync_input) is False
        assert await connected.sync.sync_completed_session(sync_input) is False

        items = await connected.outbox.list_items()
        assert [i.idempotency_key for i in items] == ["session-7-2026-02-21T14:00:00.000Z"]
        assert items[0].last_error == "relay unavailable"


class TestRetry:
    """Tests for retrying the outbox."""

    async def test_retry_in_order_and_continues_after_failure(self, connected, fake_client):
        for key in ("a", "b", "c"):
            await connected.outbox.enqueue(make_payload(key), "boom")
        fake_client.fail_keys = {"b"}

        result = await connected.sync.retry_pending()

        assert [p.idempotency_key for p in fake_client.posted] == ["a", "c"]
        assert (result.attempted, result.succeeded, result.failed) == (3, 2, 1)
        remaining = await connected.outbox.list_items()
        assert [i.idempotency_key for i in remaining] == ["b"]
        assert remaining[0].last_error == "relay unavailable"

    async def test_retry_requires_enabled(self, connected, fake_client):
        await connected.outbox.enqueue(make_payload("a"), "boom")
        await connected.preferences.set_strava_sync_enabled(False)

        result = await connected.sync.retry_pending()

        assert result.attempted == 0
        assert len(await connected.outbox.list_items()) == 1

    async def test_next_completion_flushes_outbox(self, connected, fake_client):
        await connected.outbox.enqueue(make_payload("old"), "boom")
        await finish_session(connected)

        assert fake_client.posted[-1].idempotency_key == "old"
        assert await connected.outbox.list_items() == []


class TestBulkSync:
    """Tests for syncing all completed sessions."""

    async def test_ignores_enabled_flag(self, connected, fake_client):
        await finish_session(connected, completed_at="2026-02-21T14:00:00.000Z")
        await finish_session(connected, completed_at="2026-02-22T14:00:00.000Z")
        await connected.preferences.set_strava_sync_enabled(False)
        fake_client.posted.clear()
        progress = []

        result = await connected.sync.sync_all_completed_sessions(on_progress=progress.append)

        assert result.succeeded == 2
        assert len(fake_client.posted) == 2
        assert [p.processed for p in progress] == [1, 2]
        assert progress[-1].total == 2

    async def test_requires_credentials(self, context, fake_client):
        await finish_session(context)
        result = await context.sync.sync_all_completed_sessions()
        assert result.attempted == 0


class TestConnection:
    """Tests for register, status and disconnect."""

    async def test_register_stores_token_but_not_connected(self, context):
        response = await context.sync.register("app://done")

        state = await context.sync.get_connection_state()
        assert not state.connected
        assert state.sync_token == "token-123"
        assert state.install_id in response.connect_url

    async def test_refresh_marks_connected(self, context, fake_client):
        await context.sync.register()
        state = await context.sync.refresh_connection_status()
        assert state.connected
        assert (await context.sync.get_connection_state()).connected

    async def test_disconnect_clears_state(self, connected, fake_client):
        await connected.sync.disconnect()

        assert fake_client.disconnected
        state = await connected.sync.get_connection_state()
        assert not state.connected
        assert state.sync_token is None
        assert not await connected.preferences.get_strava_sync_enabled()

    async def test_disconnect_failure_keeps_state(self, connected, fake_client):
        async def failing(install_id, sync_token):
            raise StravaSyncApiError("nope", 500)

        fake_client.disconnect_install = failing

        with pytest.raises(StravaSyncApiError):
            await connected.sync.disconnect()
        assert (await connected.sync.get_connection_state()).connected


class TestRelayResponses:
    """Tests for unexpected relay answers reaching the sync service."""

    async def test_non_json_success_is_queued_not_raised(self, kv):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="OK")

        context = await relay_context(kv, handler)
        sync_input = SyncCompletedSessionInput(7, "2026-02-21T14:00:00.000Z", 3)

        assert await context.sync.sync_completed_session(sync_input) is False

        items = await context.outbox.list_items()
        assert [i.idempotency_key for i in items] == ["session-7-2026-02-21T14:00:00.000Z"]
        state = await context.sync.get_connection_state()
        assert state.last_sync_error == "Strava sync API returned an invalid response"

    async def test_completion_survives_non_json_success(self, kv):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="OK")

        context = await relay_context(kv, handler)
        started = await finish_session(context)

        assert context.store.get_completed_session_by_id(started.id).completed_at is not None
        assert len(await context.outbox.list_items()) == 1

    async def test_retry_continues_past_bad_body(self, kv):
        posted = []

        def handler(request: httpx.Request) -> httpx.Response:
            key = json.loads(request.content)["idempotencyKey"]
            posted.append(key)
            if key == "b":
                return httpx.Response(200, text="OK")
            return httpx.Response(204)

        context = await relay_context(kv, handler)
        for key in ("a", "b", "c"):
            await context.outbox.enqueue(make_payload(key), "boom")

        result = await context.sync.retry_pending()

        assert posted == ["a", "b", "c"]
        assert (result.attempted, result.succeeded, result.failed) == (3, 2, 1)
        remaining = await context.outbox.list_items()
        assert [i.idempotency_key for i in remaining] == ["b"]
        assert remaining[0].last_error == "Strava sync API returned an invalid response"

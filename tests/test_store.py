"""Tests for the plan store and key-value backends."""

import json

import pytest

from repcycle.data.catalog import EXERCISES
from repcycle.db.engine import init_db, open_store
from repcycle.db.kv import MemoryKeyValueStore, SqliteKeyValueStore
from repcycle.db.store import STORAGE_KEYS, PlanStore
from repcycle.errors import StorageNotInitializedError
from repcycle.models.history import CompletedSet, PlanSession
from repcycle.models.plan import WorkoutPlan
from repcycle.models.program import Focus


def make_plan(created_at="2026-01-01T00:00:00.000Z", name="Plan") -> WorkoutPlan:
    return WorkoutPlan(
        name=name,
        weekly_frequency=3,
        duration_weeks=8,
        focus=Focus.BALANCED,
        created_at=created_at,
    )


class TestPlanStore:
    """Tests for PlanStore."""

    async def test_requires_init(self):
        store = PlanStore(MemoryKeyValueStore())
        assert not store.is_initialized

        with pytest.raises(StorageNotInitializedError, match="Call init"):
            store.get_all_exercises()
        with pytest.raises(StorageNotInitializedError):
            await store.insert_workout_plan(make_plan())

    async def test_init_is_idempotent(self, store):
        assert store.is_initialized
        before = len(store.get_all_exercises())
        await store.init()
        assert len(store.get_all_exercises()) == before

    async def test_seeded_catalog_in_insertion_order(self, store):
        exercises = store.get_all_exercises()

        assert [e.name for e in exercises] == [e.name for e in EXERCISES]
        assert [e.id for e in exercises] == list(range(1, len(EXERCISES) + 1))

    async def test_ids_are_unique_per_collection(self, store):
        ids = [await store.insert_workout_plan(make_plan()) for _ in range(5)]
        assert ids == [1, 2, 3, 4, 5]

    async def test_writes_through_to_backend(self, kv, store):
        plan_id = await store.insert_workout_plan(make_plan(name="Persisted"))

        reloaded = PlanStore(kv)
        await reloaded.init()
        assert reloaded.get_workout_plan_by_id(plan_id).name == "Persisted"
        assert json.loads(kv.data[STORAGE_KEYS["idCounters"]])["workoutPlans"] == 1

    async def test_failed_write_does_not_keep_record(self, kv, store):
        async def failing(items):
            raise OSError("disk full")

        kv.set_many = failing
        with pytest.raises(OSError, match="disk full"):
            await store.insert_workout_plan(make_plan(name="Lost"))
        assert store.get_all_workout_plans() == []

        del kv.set_many
        plan_id = await store.insert_workout_plan(make_plan(name="Kept"))
        assert [p.name for p in store.get_all_workout_plans()] == ["Kept"]
        stored = json.loads(kv.data[STORAGE_KEYS["workoutPlans"]])
        assert [p["id"] for p in stored] == [plan_id]

    async def test_plans_newest_first_and_active(self, store):
        old_id = await store.insert_workout_plan(make_plan("2026-01-01T00:00:00.000Z"))
        new_id = await store.insert_workout_plan(make_plan("2026-02-01T00:00:00.000Z"))

        assert [p.id for p in store.get_all_workout_plans()] == [new_id, old_id]

        await store.deactivate_all_workout_plans()
        assert store.get_active_workout_plan() is None
        await store.update_workout_plan_active_status(old_id, True)
        assert store.get_active_workout_plan().id == old_id

    async def test_last_completed_set_skips_warmups(self, store):
        plan_id = await store.insert_workout_plan(make_plan())
        session_id = await store.insert_completed_session(
            PlanSession(
                workout_plan_id=plan_id,
                session_template_id=1,
                started_at="2026-02-21T13:00:00.000Z",
            )
        )
        for number, (weight, warmup, at) in enumerate(
            [
                (100.0, False, "2026-02-21T13:05:00.000Z"),
                (60.0, True, "2026-02-21T13:10:00.000Z"),
            ],
            start=1,
        ):
            await store.insert_completed_set(
                CompletedSet(
                    completed_session_id=session_id,
                    exercise_id=1,
                    set_number=number,
                    weight=weight,
                    reps=5,
                    is_warmup=warmup,
                    completed_at=at,
                )
            )

        assert store.get_completed_sets_by_exercise_id(1)[0].weight == 60.0
        assert store.get_last_completed_set_for_exercise(1).weight == 100.0
        assert store.get_last_completed_set_for_exercise(2) is None

    async def test_replace_all_round_trip(self, store):
        await store.insert_workout_plan(make_plan())
        snapshot = store.get_all_data()

        other = PlanStore(MemoryKeyValueStore())
        await other.init()
        await other.replace_all(snapshot)

        assert other.get_all_data() == snapshot
        assert await other.insert_workout_plan(make_plan()) == 2

    async def test_replace_all_bumps_counters(self, store):
        snapshot = store.get_all_data()
        snapshot["idCounters"] = {}

        await store.replace_all(snapshot)

        next_id = await store.insert_workout_plan(make_plan())
        assert next_id == 1
        assert store.get_all_data()["idCounters"]["exercises"] == len(EXERCISES)

    async def test_replace_all_leaves_store_on_bad_record(self, store):
        snapshot = store.get_all_data()
        snapshot["workoutPlans"] = [{"name": "missing fields"}]

        with pytest.raises(KeyError):
            await store.replace_all(snapshot)
        assert len(store.get_all_exercises()) == len(EXERCISES)

    async def test_reset(self, store):
        await store.reset()
        assert store.get_all_exercises() == []
        assert store.get_all_data()["idCounters"]["exercises"] == 0


class TestSqliteBackend:
    """Tests for the SQLite key-value store."""

    async def test_get_set_remove(self, temp_db_path):
        await init_db(temp_db_path)
        kv = SqliteKeyValueStore(temp_db_path)

        await kv.set_many({"a": "1", "b": "2"})
        await kv.set_many({"a": "3"})

        assert await kv.get("a") == "3"
        assert await kv.get_many(["a", "b", "c"]) == {"a": "3", "b": "2", "c": None}

        await kv.remove("a")
        assert await kv.get("a") is None

    async def test_open_store_persists_across_instances(self, temp_db_path):
        store = await open_store(temp_db_path)
        await store.insert_workout_plan(make_plan(name="On disk"))

        reopened = await open_store(temp_db_path)
        assert reopened.get_all_workout_plans()[0].name == "On disk"

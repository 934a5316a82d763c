"""Tests for workout logging."""

import pytest

from repcycle.generators import generate_workout_program, save_workout_program
from repcycle.models.exercises import Equipment
from repcycle.models.program import GenerationInput


@pytest.fixture
async def plan_id(context):
    store = context.store
    program = generate_workout_program(
        GenerationInput(frequency=2, equipment=[Equipment.BARBELL]),
        store.get_all_exercises(),
    )
    return await save_workout_program(store, program)


class TestWorkoutService:
    """Tests for WorkoutService."""

    async def test_start_rejects_foreign_template(self, context, plan_id):
        assert await context.workouts.start_plan_session(plan_id, 999) is None
        assert await context.workouts.start_plan_session(999, 1) is None

    async def test_set_numbers_count_per_exercise(self, context, plan_id):
        template = context.store.get_session_templates_by_plan_id(plan_id)[0]
        session = await context.workouts.start_plan_session(plan_id, template.id)

        first = await context.workouts.log_set(session.id, 1, 60, 10, is_warmup=True)
        second = await context.workouts.log_set(session.id, 1, 100, 5)
        other = await context.workouts.log_set(session.id, 2, 50, 8)

        assert (first.set_number, second.set_number, other.set_number) == (1, 2, 1)

    async def test_log_set_validation(self, context, plan_id):
        template = context.store.get_session_templates_by_plan_id(plan_id)[0]
        session = await context.workouts.start_plan_session(plan_id, template.id)

        with pytest.raises(ValueError):
            await context.workouts.log_set(session.id, 1, -5, 5)
        assert await context.workouts.log_set(999, 1, 100, 5) is None

    async def test_complete_and_summarize(self, context, plan_id):
        template = context.store.get_session_templates_by_plan_id(plan_id)[0]
        session = await context.workouts.start_plan_session(plan_id, template.id)
        await context.workouts.log_set(session.id, 1, 60, 10, is_warmup=True)
        await context.workouts.log_set(session.id, 1, 100, 5)

        finished = await context.workouts.complete_session(
            session.id, notes="felt strong", completed_at="2026-02-21T15:00:00+01:00"
        )

        assert finished.completed_at == "2026-02-21T14:00:00.000Z"
        assert finished.notes == "felt strong"
        summary = context.workouts.get_session_summary(session.id)
        assert summary.total_volume == 500
        assert summary.to_dict()["sets"][0]["is_warmup"] is True

    async def test_complete_twice_keeps_first_time(self, context, plan_id):
        template = context.store.get_session_templates_by_plan_id(plan_id)[0]
        session = await context.workouts.start_plan_session(plan_id, template.id)
        await context.workouts.complete_session(session.id, completed_at="2026-02-21T14:00:00.000Z")

        again = await context.workouts.complete_session(
            session.id, completed_at="2026-02-22T14:00:00.000Z"
        )
        assert again.completed_at == "2026-02-21T14:00:00.000Z"

    async def test_history_excludes_in_progress(self, context, plan_id):
        templates = context.store.get_session_templates_by_plan_id(plan_id)
        done = await context.workouts.start_plan_session(plan_id, templates[0].id)
        await context.workouts.complete_session(done.id)
        await context.workouts.start_plan_session(plan_id, templates[1].id)

        history = context.workouts.get_history(plan_id)
        assert [s.session.id for s in history] == [done.id]

    async def test_activate_plan_is_exclusive(self, context, plan_id):
        program = generate_workout_program(
            GenerationInput(frequency=3, equipment=[]), context.store.get_all_exercises()
        )
        await save_workout_program(context.store, program)

        assert await context.workouts.activate_plan(plan_id)
        active = [p.id for p in context.store.get_all_workout_plans() if p.is_active]
        assert active == [plan_id]
        assert not await context.workouts.activate_plan(999)

"""Tests for session cycle scheduling."""

import pytest

from repcycle.generators import generate_workout_program, save_workout_program
from repcycle.models.exercises import Equipment
from repcycle.models.program import GenerationInput
from repcycle.services.session_cycle import (
    calculate_plan_progress,
    count_completed_sessions,
    get_completed_session_for_template_week,
    get_completion_count_for_template,
    get_current_week,
    get_in_progress_session,
    get_next_session_template,
    get_unique_exercises_for_plan,
    select_next_template,
)
from repcycle.services.workouts import WorkoutService


@pytest.fixture
async def plan_id(store):
    """A saved three session full body plan."""
    program = generate_workout_program(
        GenerationInput(frequency=3, equipment=[Equipment.BARBELL, Equipment.DUMBBELL]),
        store.get_all_exercises(),
    )
    return await save_workout_program(store, program)


@pytest.fixture
def workouts(store):
    return WorkoutService(store)


async def train(workouts, plan_id, template, day):
    """Start and finish one session of a template on a given day of February."""
    started = await workouts.start_plan_session(
        plan_id, template.id, started_at=f"2026-02-{day:02d}T10:00:00.000Z"
    )
    await workouts.complete_session(
        started.id, completed_at=f"2026-02-{day:02d}T11:00:00.000Z"
    )
    return started


class TestNextSession:
    """Tests for picking the next template."""

    async def test_cycles_through_templates(self, store, workouts, plan_id):
        """Test 1, 2, 3, then back to 1."""
        seen = []
        for day in range(1, 5):
            template = get_next_session_template(store, plan_id)
            seen.append(template.sequence_order)
            await train(workouts, plan_id, template, day)

        assert seen == [1, 2, 3, 1]

    async def test_least_completed_wins(self, store, workouts, plan_id):
        """Test that out-of-order training still fills the gap."""
        templates = store.get_session_templates_by_plan_id(plan_id)
        await train(workouts, plan_id, templates[2], 1)
        await train(workouts, plan_id, templates[0], 2)

        assert get_next_session_template(store, plan_id).id == templates[1].id

    async def test_in_progress_is_not_counted(self, store, workouts, plan_id):
        templates = store.get_session_templates_by_plan_id(plan_id)
        started = await workouts.start_plan_session(plan_id, templates[0].id)

        assert get_next_session_template(store, plan_id).id == templates[0].id
        assert get_in_progress_session(store, plan_id).id == started.id
        assert get_completion_count_for_template(store, templates[0].id) == 0

    async def test_plan_without_templates(self, store):
        assert get_next_session_template(store, 999) is None

    def test_select_next_template_pure(self, store):
        assert select_next_template([], {}) is None


class TestTemplateWeeks:
    """Tests for per-week lookup of a template's completions."""

    async def test_nth_completion(self, store, workouts, plan_id):
        template = store.get_session_templates_by_plan_id(plan_id)[0]
        first = await train(workouts, plan_id, template, 3)
        second = await train(workouts, plan_id, template, 10)

        assert get_completed_session_for_template_week(store, template.id, 1).id == first.id
        assert get_completed_session_for_template_week(store, template.id, 2).id == second.id
        assert get_completed_session_for_template_week(store, template.id, 3) is None

    @pytest.mark.parametrize("week", [0, -1])
    async def test_invalid_week(self, store, workouts, plan_id, week):
        template = store.get_session_templates_by_plan_id(plan_id)[0]
        await train(workouts, plan_id, template, 3)
        assert get_completed_session_for_template_week(store, template.id, week) is None


class TestProgress:
    """Tests for plan progress figures."""

    async def test_progress_counts_finished_sessions(self, store, workouts, plan_id):
        plan = store.get_workout_plan_by_id(plan_id)
        for day in range(1, 5):
            await train(workouts, plan_id, get_next_session_template(store, plan_id), day)
        await workouts.start_plan_session(plan_id, get_next_session_template(store, plan_id).id)

        done = count_completed_sessions(store, plan_id)
        assert done == 4
        assert get_current_week(plan, done) == 2
        assert calculate_plan_progress(plan, done) == 17

    async def test_week_is_capped_at_duration(self, store, plan_id):
        plan = store.get_workout_plan_by_id(plan_id)
        assert get_current_week(plan, 0) == 1
        assert get_current_week(plan, 1000) == plan.duration_weeks

    async def test_unique_exercises(self, store, plan_id):
        unique = get_unique_exercises_for_plan(store, plan_id)
        ids = [e.id for e in unique]
        assert len(ids) == len(set(ids))
        assert ids

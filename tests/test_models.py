"""Tests for data models."""

import json

import pytest

from repcycle.data.catalog import (
    get_compound_exercise_count,
    get_exercise_count_by_muscle_group,
    seed_exercises,
)
from repcycle.errors import ProgramValidationError
from repcycle.models.exercises import Equipment, Exercise, MuscleGroup, PriorityTier
from repcycle.models.history import (
    CompletedSession,
    CompletedSet,
    PlanSession,
    SingleExerciseSession,
)
from repcycle.models.plan import SessionTemplate, WorkoutPlan
from repcycle.models.program import Focus, GenerationInput
from repcycle.models.sync import ActivityType, OutboxItem, StravaSyncPayload


class TestExercise:
    """Tests for Exercise model."""

    def test_primary_group_leads_muscle_groups(self):
        """Test that the primary muscle group is always first."""
        exercise = Exercise(
            name="Deadlift",
            muscle_group=MuscleGroup.BACK,
            equipment_required=Equipment.BARBELL,
            is_compound=True,
            muscle_groups=[MuscleGroup.LEGS, MuscleGroup.BACK],
        )
        assert exercise.muscle_groups == [MuscleGroup.BACK, MuscleGroup.LEGS]

    def test_defaults_muscle_groups_to_primary(self):
        exercise = Exercise(name="Curl", muscle_group=MuscleGroup.ARMS, equipment_required=None)
        assert exercise.muscle_groups == [MuscleGroup.ARMS]

    def test_priority_and_bodyweight(self):
        """Test derived priority tier and bodyweight flag."""
        compound = Exercise("Push-ups", MuscleGroup.CHEST, Equipment.BODYWEIGHT, True)
        isolation = Exercise("Cable Flyes", MuscleGroup.CHEST, Equipment.CABLES)
        no_equipment = Exercise("Plank", MuscleGroup.CORE, None)

        assert compound.priority == PriorityTier.COMPOUND
        assert isolation.priority == PriorityTier.ISOLATION
        assert compound.is_bodyweight
        assert no_equipment.is_bodyweight
        assert not isolation.is_bodyweight

    def test_exercise_dict_round_trip(self):
        """Test exercise serialization."""
        exercise = Exercise(
            name="Bench Press",
            muscle_group=MuscleGroup.CHEST,
            equipment_required=Equipment.BARBELL,
            is_compound=True,
            muscle_groups=[MuscleGroup.CHEST, MuscleGroup.ARMS],
            id=1,
        )
        data = exercise.to_dict()

        assert data["muscle_group"] == "Chest"
        assert data["equipment_required"] == "Barbell"
        assert Exercise.from_dict(data) == exercise


class TestGenerationInput:
    """Tests for generation input validation."""

    def test_coerces_strings(self):
        validated = GenerationInput(frequency=3, equipment=["Barbell"], focus="Strength").validate()
        assert validated.focus is Focus.STRENGTH
        assert validated.equipment == [Equipment.BARBELL]

    def test_unknown_focus(self):
        with pytest.raises(ProgramValidationError, match="Unknown focus"):
            GenerationInput(frequency=3, equipment=[], focus="Power").validate()

    def test_unknown_equipment(self):
        with pytest.raises(ProgramValidationError, match="Unknown equipment"):
            GenerationInput(frequency=3, equipment=["Kettlebell"]).validate()

    def test_non_integer_frequency(self):
        with pytest.raises(ProgramValidationError):
            GenerationInput(frequency="3", equipment=[]).validate()


class TestWorkoutPlan:
    """Tests for persisted plans."""

    def test_legacy_record_recovers_focus(self):
        """Test that records without focus take it from the description."""
        plan = WorkoutPlan.from_dict({
            "id": 4,
            "name": "Old",
            "description": "Strength training program",
            "weekly_frequency": 3,
            "duration_weeks": 8,
            "created_at": "2025-01-01T00:00:00.000Z",
            "is_active": 1,
        })
        assert plan.focus is Focus.STRENGTH
        assert plan.equipment_used == []
        assert plan.is_active is True

    def test_session_template_muscle_groups(self):
        template = SessionTemplate(
            workout_plan_id=1,
            sequence_order=1,
            name="Upper Body A",
            target_muscle_groups=json.dumps(["Chest", "Back"]),
        )
        assert template.muscle_groups == [MuscleGroup.CHEST, MuscleGroup.BACK]


class TestCompletedSession:
    """Tests for the completed session variants."""

    def test_plan_session_from_dict(self):
        session = CompletedSession.from_dict({
            "id": 1,
            "workout_plan_id": 2,
            "session_template_id": 3,
            "started_at": "2026-02-21T13:00:00.000Z",
        })
        assert isinstance(session, PlanSession)
        assert session.is_in_progress

    def test_single_session_persists_marker(self):
        """Test that single-exercise sessions store the -1 template marker."""
        session = SingleExerciseSession(
            id=5,
            workout_plan_id=2,
            exercise_id=9,
            started_at="2026-02-21T13:00:00.000Z",
            completed_at="2026-02-21T13:30:00.000Z",
        )
        data = session.to_dict()

        assert data["session_template_id"] == -1
        assert data["session_type"] == "single"
        restored = CompletedSession.from_dict(data)
        assert isinstance(restored, SingleExerciseSession)
        assert restored.exercise_id == 9

    @pytest.mark.parametrize("session_type", ["plan", None])
    def test_plan_record_with_marker_rejected(self, session_type):
        with pytest.raises(ValueError):
            CompletedSession.from_dict({
                "id": 1,
                "workout_plan_id": 2,
                "session_template_id": -1,
                "session_type": session_type,
                "started_at": "2026-02-21T13:00:00.000Z",
            })

    def test_single_record_without_exercise_rejected(self):
        with pytest.raises(ValueError):
            CompletedSession.from_dict({
                "id": 1,
                "workout_plan_id": 2,
                "session_template_id": -1,
                "session_type": "single",
                "started_at": "2026-02-21T13:00:00.000Z",
            })

    def test_base_session_is_abstract(self):
        with pytest.raises(TypeError):
            CompletedSession(workout_plan_id=1, started_at="2026-02-21T13:00:00.000Z")

    def test_completed_set_round_trip(self):
        completed = CompletedSet(
            completed_session_id=1,
            exercise_id=2,
            set_number=1,
            weight=100.0,
            reps=5,
            completed_at="2026-02-21T13:05:00.000Z",
            id=7,
        )
        assert CompletedSet.from_dict(completed.to_dict()) == completed


class TestSyncModels:
    """Tests for Strava sync wire models."""

    def test_payload_uses_camel_case(self):
        payload = StravaSyncPayload(
            install_id="abc",
            idempotency_key="session-1-2026-02-21T14:00:00.000Z",
            activity_name="Training 02-21",
            activity_type=ActivityType.PLAN,
            start_time_iso="2026-02-21T13:48:00.000Z",
            end_time_iso="2026-02-21T14:00:00.000Z",
            elapsed_seconds=720,
        )
        data = payload.to_dict()

        assert data["installId"] == "abc"
        assert data["sportType"] == "WeightTraining"
        assert data["activityType"] == "plan"
        assert data["elapsedSeconds"] == 720

        item = OutboxItem(payload, "2026-02-21T14:00:01.000Z", "boom")
        assert OutboxItem.from_dict(item.to_dict()) == item

    def test_activity_type_from_session_type(self):
        assert ActivityType.from_session_type("single") is ActivityType.SINGLE
        assert ActivityType.from_session_type(None) is ActivityType.PLAN


class TestCatalog:
    """Tests for the seeded exercise library."""

    def test_every_group_has_a_compound(self, catalog):
        for group in MuscleGroup:
            assert any(e.is_compound for e in catalog if e.muscle_group == group), group

    def test_upper_body_and_core_work_without_equipment(self, catalog):
        bodyweight = {e.muscle_group for e in catalog if e.is_bodyweight}
        assert bodyweight == set(MuscleGroup) - {MuscleGroup.LEGS}

    def test_counts(self, catalog):
        counts = get_exercise_count_by_muscle_group()

        assert sum(counts.values()) == len(catalog) == 51
        assert counts["Core"] == 8
        assert get_compound_exercise_count() == sum(1 for e in catalog if e.is_compound)

    def test_names_are_unique(self, catalog):
        names = [e.name for e in catalog]
        assert len(names) == len(set(names))

    async def test_seeding_is_idempotent(self, store):
        assert await seed_exercises(store) == 0
        assert len(store.get_all_exercises()) == 51

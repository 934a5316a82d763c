"""Workout program generation.

Generation is pure: it only reads the exercises passed in and returns a
``WorkoutProgram``. Nothing is stored until ``save_workout_program`` is
called after the user accepts the program.
"""

import json
import math

import structlog

from ..db.store import PlanStore
from ..errors import ProgramValidationError
from ..models.exercises import Equipment, Exercise, MuscleGroup
from ..models.plan import ExerciseTemplate, SessionTemplate, WorkoutPlan
from ..models.program import (
    Focus,
    GenerationInput,
    ProgramExercise,
    ProgramSession,
    SetsRepsScheme,
    WorkoutProgram,
)
from ..utils.dates import to_iso, utc_now
from .exercise_selector import (
    filter_exercises_by_equipment,
    order_exercises,
    select_exercises_for_muscles,
)
from .muscle_groups import SessionSlot, distribute_muscle_groups, get_muscle_groups_for_frequency

logger = structlog.get_logger(__name__)

MAX_EXERCISES_PER_SESSION = 5
MAX_CUSTOM_EXERCISES_PER_SESSION = 7
DEFAULT_DURATION_WEEKS = 8
DEFAULT_SESSION_MINUTES = 60

SETS_REPS_SCHEMES = {
    Focus.BALANCED: SetsRepsScheme(sets=3, reps_min=8, reps_max=12),
    Focus.STRENGTH: SetsRepsScheme(sets=5, reps_min=3, reps_max=5),
    Focus.ENDURANCE: SetsRepsScheme(sets=3, reps_min=15, reps_max=20),
}


def get_sets_reps_scheme(focus: Focus) -> SetsRepsScheme:
    """Sets and rep range for a training focus."""
    return SETS_REPS_SCHEMES[Focus(focus)]


def generate_workout_program(
    generation_input: GenerationInput, exercises: list[Exercise]
) -> WorkoutProgram:
    """Build a program automatically from the exercise catalog.

    Args:
        generation_input: Frequency, equipment and focus chosen by the user
        exercises: The full catalog

    Returns:
        An unsaved program
    """
    generation_input.validate()
    available = filter_exercises_by_equipment(exercises, generation_input.equipment)
    scheme = get_sets_reps_scheme(generation_input.focus)

    sessions = []
    for slot in distribute_muscle_groups(generation_input.frequency):
        count_per_muscle = math.ceil(MAX_EXERCISES_PER_SESSION / len(slot.muscles))
        selected = select_exercises_for_muscles(available, slot.muscles, count_per_muscle)
        selected = selected[:MAX_EXERCISES_PER_SESSION]
        sessions.append(_build_session(slot, order_exercises(selected), scheme))

    return _build_program(generation_input.focus, sessions)


def generate_workout_program_from_custom_exercises(
    generation_input: GenerationInput, custom_exercises: list[Exercise]
) -> WorkoutProgram:
    """Build a program from exercises the user picked.

    Every session takes the picked exercises that work any of its target
    muscles. Primary-muscle matches come first, then compounds.

    Raises:
        ProgramValidationError: If the input is invalid or nothing was picked
    """
    generation_input.validate()
    if not custom_exercises:
        raise ProgramValidationError("Select at least one exercise")

    validate_muscle_group_coverage(custom_exercises, generation_input.frequency)
    scheme = get_sets_reps_scheme(generation_input.focus)

    sessions = []
    for slot in distribute_muscle_groups(generation_input.frequency):
        targets = set(slot.muscles)
        matching = [
            exercise
            for exercise in custom_exercises
            if targets.intersection(exercise.muscle_groups)
        ]
        # Stable sort: primary match, then compound
        matching.sort(
            key=lambda e: (e.muscle_groups[0] not in targets, not e.is_compound)
        )
        limited = matching[:MAX_CUSTOM_EXERCISES_PER_SESSION]
        sessions.append(_build_session(slot, order_exercises(limited), scheme))

    return _build_program(generation_input.focus, sessions)


def validate_muscle_group_coverage(
    exercises: list[Exercise], frequency: int
) -> list[MuscleGroup]:
    """Return the trained muscle groups no exercise covers, logging a warning."""
    covered = {mg for exercise in exercises for mg in exercise.muscle_groups}
    missing = [mg for mg in get_muscle_groups_for_frequency(frequency) if mg not in covered]
    if missing:
        logger.warning(
            "muscle_group_coverage_missing",
            missing=[mg.value for mg in missing],
        )
    return missing


def _build_session(
    slot: SessionSlot, exercises: list[Exercise], scheme: SetsRepsScheme
) -> ProgramSession:
    return ProgramSession(
        name=slot.name,
        day_of_week=slot.day_of_week,
        primary_muscles=slot.muscles,
        exercises=[
            ProgramExercise(
                exercise=exercise,
                sets=scheme.sets,
                reps_min=scheme.reps_min,
                reps_max=scheme.reps_max,
                order=i,
            )
            for i, exercise in enumerate(exercises, start=1)
        ],
    )


def _build_program(focus: Focus, sessions: list[ProgramSession]) -> WorkoutProgram:
    focus = Focus(focus)
    return WorkoutProgram(
        name=f"{focus.value} Program ({len(sessions)}x/week)",
        focus=focus,
        duration_weeks=DEFAULT_DURATION_WEEKS,
        sessions_per_week=len(sessions),
        sessions=sessions,
    )


async def save_workout_program(
    store: PlanStore,
    program: WorkoutProgram,
    equipment: list[Equipment] | None = None,
) -> int:
    """Persist an accepted program as a plan with its templates.

    Only call this from an explicit user confirmation.

    Returns:
        The new plan id
    """
    for session in program.sessions:
        for program_exercise in session.exercises:
            if program_exercise.exercise.id is None:
                raise ProgramValidationError(
                    f"Exercise '{program_exercise.exercise.name}' is not in the store"
                )

    plan_id = await store.insert_workout_plan(
        WorkoutPlan(
            name=program.name,
            description=f"{program.focus.value} training program",
            weekly_frequency=program.sessions_per_week,
            duration_weeks=program.duration_weeks,
            focus=program.focus,
            equipment_used=list(equipment or []),
            estimated_duration_minutes=DEFAULT_SESSION_MINUTES,
            created_at=to_iso(utc_now()),
            is_active=True,
        )
    )

    for index, session in enumerate(program.sessions):
        template_id = await store.insert_session_template(
            SessionTemplate(
                workout_plan_id=plan_id,
                sequence_order=index + 1,
                name=session.name,
                target_muscle_groups=json.dumps([mg.value for mg in session.primary_muscles]),
                estimated_duration_minutes=DEFAULT_SESSION_MINUTES,
            )
        )
        for program_exercise in session.exercises:
            await store.insert_exercise_template(
                ExerciseTemplate(
                    session_template_id=template_id,
                    exercise_id=program_exercise.exercise.id,
                    exercise_order=program_exercise.order,
                    sets=program_exercise.sets,
                    reps=program_exercise.reps_max,
                    is_warmup=False,
                )
            )

    logger.info(
        "workout_plan_saved",
        plan_id=plan_id,
        name=program.name,
        sessions=len(program.sessions),
    )
    return plan_id

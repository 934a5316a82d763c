"""Program generation."""

from .engine import (
    generate_workout_program,
    generate_workout_program_from_custom_exercises,
    get_sets_reps_scheme,
    save_workout_program,
    validate_muscle_group_coverage,
)
from .exercise_selector import (
    filter_exercises_by_equipment,
    filter_exercises_by_muscle_group,
    order_exercises,
    select_exercises_for_muscles,
    select_initial_exercises_by_muscle_group,
)
from .muscle_groups import (
    SessionSlot,
    calculate_session_volume,
    distribute_muscle_groups,
    get_muscle_groups_for_frequency,
    get_split_type,
)

__all__ = [
    "calculate_session_volume",
    "distribute_muscle_groups",
    "filter_exercises_by_equipment",
    "filter_exercises_by_muscle_group",
    "generate_workout_program",
    "generate_workout_program_from_custom_exercises",
    "get_muscle_groups_for_frequency",
    "get_sets_reps_scheme",
    "get_split_type",
    "order_exercises",
    "save_workout_program",
    "select_exercises_for_muscles",
    "select_initial_exercises_by_muscle_group",
    "SessionSlot",
    "validate_muscle_group_coverage",
]

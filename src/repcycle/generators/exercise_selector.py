"""Exercise filtering and selection."""

from ..models.exercises import ALL_MUSCLE_GROUPS, Equipment, Exercise, MuscleGroup

INITIAL_EXERCISES_PER_MUSCLE = 3


def filter_exercises_by_equipment(
    exercises: list[Exercise], available: list[Equipment]
) -> list[Exercise]:
    """Keep exercises the user can do. Bodyweight work is always available."""
    available = set(available)
    return [
        exercise
        for exercise in exercises
        if exercise.is_bodyweight or exercise.equipment_required in available
    ]


def filter_exercises_by_muscle_group(
    exercises: list[Exercise], muscle_group: MuscleGroup
) -> list[Exercise]:
    """Exercises whose primary muscle group matches."""
    return [exercise for exercise in exercises if exercise.muscle_group == muscle_group]


def order_exercises(exercises: list[Exercise]) -> list[Exercise]:
    """Compound exercises first, keeping relative order within each tier."""
    return sorted(exercises, key=lambda exercise: exercise.priority)


def select_exercises_for_muscles(
    exercises: list[Exercise],
    muscles: list[MuscleGroup],
    count_per_muscle: int,
) -> list[Exercise]:
    """Pick up to ``count_per_muscle`` exercises for each muscle in turn.

    Args:
        exercises: Candidate pool, already filtered by equipment
        muscles: Target muscles, in the order results should appear
        count_per_muscle: Upper bound per muscle

    Returns:
        Concatenated picks, compound first within each muscle
    """
    selected: list[Exercise] = []
    for muscle in muscles:
        candidates = order_exercises(filter_exercises_by_muscle_group(exercises, muscle))
        selected.extend(candidates[: max(count_per_muscle, 0)])
    return selected


def select_initial_exercises_by_muscle_group(
    exercises: list[Exercise], equipment: list[Equipment]
) -> dict[MuscleGroup, list[Exercise]]:
    """Pre-select a few exercises per muscle group for the user to review."""
    eligible = filter_exercises_by_equipment(exercises, equipment)
    return {
        muscle: order_exercises(filter_exercises_by_muscle_group(eligible, muscle))[
            :INITIAL_EXERCISES_PER_MUSCLE
        ]
        for muscle in ALL_MUSCLE_GROUPS
    }

"""Seeded exercise library."""

from typing import TYPE_CHECKING

import structlog

from ..models.exercises import Equipment, Exercise, MuscleGroup

if TYPE_CHECKING:
    from ..db.store import PlanStore

logger = structlog.get_logger(__name__)

MG = MuscleGroup
EQ = Equipment

# Order matters: selection is stable, so earlier entries win ties.
EXERCISES: list[Exercise] = [
    # Chest
    Exercise(
        name="Bench Press",
        muscle_group=MG.CHEST,
        muscle_groups=[MG.CHEST, MG.SHOULDERS, MG.ARMS],
        equipment_required=EQ.BARBELL,
        is_compound=True,
        description="Classic compound chest exercise performed lying on a flat bench",
    ),
    Exercise(
        name="Incline Bench Press",
        muscle_group=MG.CHEST,
        muscle_groups=[MG.CHEST, MG.SHOULDERS, MG.ARMS],
        equipment_required=EQ.BARBELL,
        is_compound=True,
        description="Bench press variation targeting upper chest",
    ),
    Exercise(
        name="Dumbbell Bench Press",
        muscle_group=MG.CHEST,
        muscle_groups=[MG.CHEST, MG.SHOULDERS, MG.ARMS],
        equipment_required=EQ.DUMBBELL,
        is_compound=True,
        description="Chest press with dumbbells for greater range of motion",
    ),
    Exercise(
        name="Incline Dumbbell Press",
        muscle_group=MG.CHEST,
        muscle_groups=[MG.CHEST, MG.SHOULDERS],
        equipment_required=EQ.DUMBBELL,
        is_compound=True,
        description="Dumbbell press on incline bench for upper chest emphasis",
    ),
    Exercise(
        name="Push-ups",
        muscle_group=MG.CHEST,
        muscle_groups=[MG.CHEST, MG.ARMS, MG.CORE],
        equipment_required=EQ.BODYWEIGHT,
        is_compound=True,
        description="Bodyweight chest exercise that can be done anywhere",
    ),
    Exercise(
        name="Dumbbell Flyes",
        muscle_group=MG.CHEST,
        equipment_required=EQ.DUMBBELL,
        description="Isolation exercise for chest stretch and contraction",
    ),
    Exercise(
        name="Cable Flyes",
        muscle_group=MG.CHEST,
        equipment_required=EQ.CABLES,
        description="Cable variation of flyes for constant tension",
    ),
    Exercise(
        name="Chest Dips",
        muscle_group=MG.CHEST,
        muscle_groups=[MG.CHEST, MG.ARMS],
        equipment_required=EQ.BODYWEIGHT,
        is_compound=True,
        description="Bodyweight exercise emphasizing lower chest",
    ),
    # Back
    Exercise(
        name="Deadlift",
        muscle_group=MG.BACK,
        muscle_groups=[MG.BACK, MG.LEGS, MG.CORE],
        equipment_required=EQ.BARBELL,
        is_compound=True,
        description="Works the entire posterior chain",
    ),
    Exercise(
        name="Barbell Row",
        muscle_group=MG.BACK,
        muscle_groups=[MG.BACK, MG.ARMS],
        equipment_required=EQ.BARBELL,
        is_compound=True,
        description="Bent-over row for mid-back thickness",
    ),
    Exercise(
        name="Pull-ups",
        muscle_group=MG.BACK,
        muscle_groups=[MG.BACK, MG.ARMS],
        equipment_required=EQ.BODYWEIGHT,
        is_compound=True,
        description="Bodyweight vertical pull for back width",
    ),
    Exercise(
        name="Chin-ups",
        muscle_group=MG.BACK,
        muscle_groups=[MG.BACK, MG.ARMS],
        equipment_required=EQ.BODYWEIGHT,
        is_compound=True,
        description="Underhand grip pull-up variation",
    ),
    Exercise(
        name="Lat Pulldown",
        muscle_group=MG.BACK,
        muscle_groups=[MG.BACK, MG.ARMS],
        equipment_required=EQ.CABLES,
        is_compound=True,
        description="Cable machine exercise for back width",
    ),
    Exercise(
        name="Dumbbell Row",
        muscle_group=MG.BACK,
        muscle_groups=[MG.BACK, MG.ARMS],
        equipment_required=EQ.DUMBBELL,
        is_compound=True,
        description="Single-arm row for unilateral back development",
    ),
    Exercise(
        name="Seated Cable Row",
        muscle_group=MG.BACK,
        muscle_groups=[MG.BACK, MG.ARMS],
        equipment_required=EQ.CABLES,
        is_compound=True,
        description="Horizontal cable pull for mid-back",
    ),
    Exercise(
        name="Face Pulls",
        muscle_group=MG.BACK,
        muscle_groups=[MG.BACK, MG.SHOULDERS],
        equipment_required=EQ.CABLES,
        description="Rear delt and upper back isolation",
    ),
    Exercise(
        name="T-Bar Row",
        muscle_group=MG.BACK,
        muscle_groups=[MG.BACK, MG.ARMS],
        equipment_required=EQ.BARBELL,
        is_compound=True,
        description="Supported row variation for back thickness",
    ),
    # Legs
    Exercise(
        name="Squat",
        muscle_group=MG.LEGS,
        muscle_groups=[MG.LEGS, MG.CORE],
        equipment_required=EQ.BARBELL,
        is_compound=True,
        description="Back squat, the primary lower body strength movement",
    ),
    Exercise(
        name="Front Squat",
        muscle_group=MG.LEGS,
        muscle_groups=[MG.LEGS, MG.CORE],
        equipment_required=EQ.BARBELL,
        is_compound=True,
        description="Quad-dominant squat with the bar in the front rack",
    ),
    Exercise(
        name="Romanian Deadlift",
        muscle_group=MG.LEGS,
        muscle_groups=[MG.LEGS, MG.BACK],
        equipment_required=EQ.BARBELL,
        is_compound=True,
        description="Hip hinge for hamstrings and glutes",
    ),
    Exercise(
        name="Leg Press",
        muscle_group=MG.LEGS,
        equipment_required=EQ.MACHINES,
        is_compound=True,
        description="Machine press for overall leg development",
    ),
    Exercise(
        name="Lunges",
        muscle_group=MG.LEGS,
        equipment_required=EQ.DUMBBELL,
        is_compound=True,
        description="Walking or stationary lunges holding dumbbells",
    ),
    Exercise(
        name="Bulgarian Split Squat",
        muscle_group=MG.LEGS,
        equipment_required=EQ.DUMBBELL,
        is_compound=True,
        description="Rear-foot elevated single leg squat",
    ),
    Exercise(
        name="Leg Extension",
        muscle_group=MG.LEGS,
        equipment_required=EQ.MACHINES,
        description="Quad isolation on the machine",
    ),
    Exercise(
        name="Leg Curl",
        muscle_group=MG.LEGS,
        equipment_required=EQ.MACHINES,
        description="Hamstring isolation on the machine",
    ),
    Exercise(
        name="Calf Raises",
        muscle_group=MG.LEGS,
        equipment_required=EQ.MACHINES,
        description="Standing calf raise",
    ),
    # Shoulders
    Exercise(
        name="Overhead Press",
        muscle_group=MG.SHOULDERS,
        muscle_groups=[MG.SHOULDERS, MG.ARMS, MG.CORE],
        equipment_required=EQ.BARBELL,
        is_compound=True,
        description="Standing barbell press overhead",
    ),
    Exercise(
        name="Dumbbell Shoulder Press",
        muscle_group=MG.SHOULDERS,
        muscle_groups=[MG.SHOULDERS, MG.ARMS],
        equipment_required=EQ.DUMBBELL,
        is_compound=True,
        description="Seated or standing dumbbell press",
    ),
    Exercise(
        name="Arnold Press",
        muscle_group=MG.SHOULDERS,
        muscle_groups=[MG.SHOULDERS, MG.ARMS],
        equipment_required=EQ.DUMBBELL,
        is_compound=True,
        description="Rotating dumbbell press hitting all three delt heads",
    ),
    Exercise(
        name="Lateral Raises",
        muscle_group=MG.SHOULDERS,
        equipment_required=EQ.DUMBBELL,
        description="Side delt isolation",
    ),
    Exercise(
        name="Front Raises",
        muscle_group=MG.SHOULDERS,
        equipment_required=EQ.DUMBBELL,
        description="Front delt isolation",
    ),
    Exercise(
        name="Rear Delt Flyes",
        muscle_group=MG.SHOULDERS,
        equipment_required=EQ.DUMBBELL,
        description="Bent-over flyes for the rear delts",
    ),
    Exercise(
        name="Upright Row",
        muscle_group=MG.SHOULDERS,
        muscle_groups=[MG.SHOULDERS, MG.BACK],
        equipment_required=EQ.BARBELL,
        is_compound=True,
        description="Vertical pull to the chin for delts and traps",
    ),
    Exercise(
        name="Pike Push-ups",
        muscle_group=MG.SHOULDERS,
        muscle_groups=[MG.SHOULDERS, MG.ARMS],
        equipment_required=EQ.BODYWEIGHT,
        is_compound=True,
        description="Bodyweight vertical press",
    ),
    # Arms
    Exercise(
        name="Barbell Curl",
        muscle_group=MG.ARMS,
        equipment_required=EQ.BARBELL,
        description="Standing biceps curl with a barbell",
    ),
    Exercise(
        name="Dumbbell Curl",
        muscle_group=MG.ARMS,
        equipment_required=EQ.DUMBBELL,
        description="Alternating or simultaneous dumbbell curl",
    ),
    Exercise(
        name="Hammer Curl",
        muscle_group=MG.ARMS,
        equipment_required=EQ.DUMBBELL,
        description="Neutral grip curl for brachialis and forearms",
    ),
    Exercise(
        name="Tricep Dips",
        muscle_group=MG.ARMS,
        muscle_groups=[MG.ARMS, MG.CHEST],
        equipment_required=EQ.BODYWEIGHT,
        is_compound=True,
        description="Upright dips emphasizing the triceps",
    ),
    Exercise(
        name="Close-Grip Bench Press",
        muscle_group=MG.ARMS,
        muscle_groups=[MG.ARMS, MG.CHEST],
        equipment_required=EQ.BARBELL,
        is_compound=True,
        description="Narrow grip bench press for triceps",
    ),
    Exercise(
        name="Skull Crushers",
        muscle_group=MG.ARMS,
        equipment_required=EQ.BARBELL,
        description="Lying triceps extension",
    ),
    Exercise(
        name="Tricep Pushdown",
        muscle_group=MG.ARMS,
        equipment_required=EQ.CABLES,
        description="Cable pushdown for triceps",
    ),
    Exercise(
        name="Overhead Tricep Extension",
        muscle_group=MG.ARMS,
        equipment_required=EQ.DUMBBELL,
        description="Long head triceps stretch under load",
    ),
    Exercise(
        name="Preacher Curl",
        muscle_group=MG.ARMS,
        equipment_required=EQ.BARBELL,
        description="Supported curl that removes momentum",
    ),
    # Core
    Exercise(
        name="Plank",
        muscle_group=MG.CORE,
        equipment_required=EQ.BODYWEIGHT,
        is_compound=True,
        description="Isometric hold for the whole trunk",
    ),
    Exercise(
        name="Crunches",
        muscle_group=MG.CORE,
        equipment_required=EQ.BODYWEIGHT,
        description="Basic abdominal flexion",
    ),
    Exercise(
        name="Hanging Leg Raises",
        muscle_group=MG.CORE,
        equipment_required=EQ.BODYWEIGHT,
        is_compound=True,
        description="Hanging from a bar, raise the legs to hip height or higher",
    ),
    Exercise(
        name="Russian Twists",
        muscle_group=MG.CORE,
        equipment_required=EQ.BODYWEIGHT,
        description="Seated rotation for the obliques",
    ),
    Exercise(
        name="Cable Crunches",
        muscle_group=MG.CORE,
        equipment_required=EQ.CABLES,
        description="Kneeling crunch against cable resistance",
    ),
    Exercise(
        name="Ab Wheel Rollout",
        muscle_group=MG.CORE,
        equipment_required=EQ.BODYWEIGHT,
        is_compound=True,
        description="Anti-extension rollout",
    ),
    Exercise(
        name="Mountain Climbers",
        muscle_group=MG.CORE,
        equipment_required=EQ.BODYWEIGHT,
        is_compound=True,
        description="Dynamic plank with alternating knee drives",
    ),
    Exercise(
        name="Dead Bug",
        muscle_group=MG.CORE,
        equipment_required=EQ.BODYWEIGHT,
        description="Controlled anti-extension drill lying on the back",
    ),
]


def build_exercise_catalog() -> list[Exercise]:
    """Return a fresh copy of the library with ids assigned 1..N.

    Used where no store is available (previews, tests).
    """
    catalog = []
    for index, exercise in enumerate(EXERCISES, start=1):
        data = exercise.to_dict()
        data["id"] = index
        catalog.append(Exercise.from_dict(data))
    return catalog


def get_exercise_count_by_muscle_group() -> dict[str, int]:
    """Count seeded exercises per primary muscle group."""
    counts: dict[str, int] = {}
    for exercise in EXERCISES:
        key = exercise.muscle_group.value
        counts[key] = counts.get(key, 0) + 1
    return counts


def get_compound_exercise_count() -> int:
    """Count seeded compound exercises."""
    return sum(1 for exercise in EXERCISES if exercise.is_compound)


async def seed_exercises(store: "PlanStore") -> int:
    """Insert catalog exercises whose name is not in the store yet.

    Returns:
        Number of exercises inserted
    """
    existing = {exercise.name for exercise in store.get_all_exercises()}
    inserted = 0
    for exercise in EXERCISES:
        if exercise.name in existing:
            continue
        await store.insert_exercise(Exercise.from_dict({**exercise.to_dict(), "id": None}))
        inserted += 1

    if inserted:
        logger.info("exercises_seeded", count=inserted)
    else:
        logger.debug("exercises_already_seeded")
    return inserted

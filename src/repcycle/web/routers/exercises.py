"""Exercise library routes."""

from fastapi import APIRouter

from ...models.exercises import Equipment, MuscleGroup
from ..dependencies import Context

router = APIRouter(prefix="/exercises", tags=["exercises"])


@router.get("")
async def list_exercises(
    context: Context,
    muscle_group: MuscleGroup | None = None,
    equipment: Equipment | None = None,
):
    """The exercise library in catalog order, optionally filtered."""
    store = context.store
    if muscle_group is not None:
        exercises = store.get_exercises_by_muscle_group(muscle_group)
    elif equipment is not None:
        exercises = store.get_exercises_by_equipment(equipment)
    else:
        exercises = store.get_all_exercises()

    if muscle_group is not None and equipment is not None:
        exercises = [e for e in exercises if e.equipment_required == equipment]
    return [e.to_dict() for e in exercises]

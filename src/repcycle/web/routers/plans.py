"""Plan generation and browsing routes."""

from fastapi import APIRouter, HTTPException, status

from ...errors import ProgramValidationError
from ...generators import (
    generate_workout_program,
    generate_workout_program_from_custom_exercises,
    save_workout_program,
    validate_muscle_group_coverage,
)
from ...models.program import WorkoutProgram
from ...services.context import AppContext
from ...services.session_cycle import (
    calculate_plan_progress,
    count_completed_sessions,
    get_completion_count_for_template,
    get_current_week,
    get_in_progress_session,
    get_next_session_template,
)
from ..dependencies import Context
from ..schemas import CreatePlanRequest, GenerateRequest

router = APIRouter(prefix="/plans", tags=["plans"])


def _generate(context: AppContext, request: GenerateRequest) -> WorkoutProgram:
    generation_input = request.to_input()
    if request.exercise_ids is None:
        return generate_workout_program(generation_input, context.store.get_all_exercises())

    picks = []
    for exercise_id in request.exercise_ids:
        exercise = context.store.get_exercise_by_id(exercise_id)
        if exercise is None:
            raise ProgramValidationError(f"Exercise ID {exercise_id} not found")
        picks.append(exercise)
    return generate_workout_program_from_custom_exercises(generation_input, picks)


def _get_plan_or_404(context: AppContext, plan_id: int):
    plan = context.store.get_workout_plan_by_id(plan_id)
    if plan is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Plan not found")
    return plan


def _template_detail(context: AppContext, template) -> dict:
    store = context.store
    exercises = []
    for slot in store.get_exercise_templates_by_session_id(template.id):
        exercise = store.get_exercise_by_id(slot.exercise_id)
        last = context.workouts.get_last_working_set(slot.exercise_id)
        exercises.append({
            **slot.to_dict(),
            "exercise_name": exercise.name if exercise else None,
            "last_set": last.to_dict() if last else None,
        })
    return {
        **template.to_dict(),
        "muscle_groups": [mg.value for mg in template.muscle_groups],
        "completions": get_completion_count_for_template(store, template.id),
        "exercises": exercises,
    }


@router.post("/preview")
async def preview_plan(request: GenerateRequest, context: Context):
    """Generate a plan without saving it."""
    program = _generate(context, request)
    used = [pe.exercise for s in program.sessions for pe in s.exercises]
    missing = validate_muscle_group_coverage(used, request.frequency)
    return {
        "program": program.to_dict(),
        "missing_muscle_groups": [mg.value for mg in missing],
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_plan(request: CreatePlanRequest, context: Context):
    """Generate a plan and save it."""
    program = _generate(context, request)
    plan_id = await save_workout_program(context.store, program, list(request.equipment))
    if request.activate:
        await context.workouts.activate_plan(plan_id)
    return {"id": plan_id, "program": program.to_dict()}


@router.get("")
async def list_plans(context: Context):
    """List saved plans, newest first."""
    result = []
    for plan in context.store.get_all_workout_plans():
        done = count_completed_sessions(context.store, plan.id)
        result.append({
            **plan.to_dict(),
            "completed_sessions": done,
            "progress_percent": calculate_plan_progress(plan, done),
        })
    return result


@router.get("/{plan_id}")
async def get_plan(plan_id: int, context: Context):
    """Plan with its session templates."""
    plan = _get_plan_or_404(context, plan_id)
    done = count_completed_sessions(context.store, plan_id)
    return {
        **plan.to_dict(),
        "completed_sessions": done,
        "current_week": get_current_week(plan, done),
        "progress_percent": calculate_plan_progress(plan, done),
        "sessions": [
            _template_detail(context, t)
            for t in context.store.get_session_templates_by_plan_id(plan_id)
        ],
    }


@router.post("/{plan_id}/activate")
async def activate_plan(plan_id: int, context: Context):
    if not await context.workouts.activate_plan(plan_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Plan not found")
    return {"id": plan_id, "is_active": True}


@router.get("/{plan_id}/next")
async def next_session(plan_id: int, context: Context):
    """The template to train next, plus any unfinished session."""
    _get_plan_or_404(context, plan_id)
    template = get_next_session_template(context.store, plan_id)
    in_progress = get_in_progress_session(context.store, plan_id)
    return {
        "next": _template_detail(context, template) if template else None,
        "in_progress": in_progress.to_dict() if in_progress else None,
    }

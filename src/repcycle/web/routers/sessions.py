"""Workout session routes."""

from fastapi import APIRouter, HTTPException, status

from ...services.session_cycle import get_next_session_template
from ..dependencies import Context
from ..schemas import CompleteSessionRequest, LogSetRequest, StartSessionRequest

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


@router.get("")
async def list_sessions(context: Context, plan_id: int | None = None, limit: int | None = None):
    """Finished sessions, newest first."""
    return [s.to_dict() for s in context.workouts.get_history(plan_id, limit)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def start_session(request: StartSessionRequest, context: Context):
    """Start a plan session (the next one by default) or a single-exercise session."""
    if context.store.get_workout_plan_by_id(request.plan_id) is None:
        raise _not_found("Plan not found")
    if request.template_id is not None and request.exercise_id is not None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Use either template_id or exercise_id, not both",
        )

    if request.exercise_id is not None:
        started = await context.workouts.start_single_exercise_session(
            request.plan_id, request.exercise_id, request.started_at
        )
        if started is None:
            raise _not_found("Exercise not found")
        return started.to_dict()

    template_id = request.template_id
    if template_id is None:
        template = get_next_session_template(context.store, request.plan_id)
        if template is None:
            raise _not_found("Plan has no session templates")
        template_id = template.id

    started = await context.workouts.start_plan_session(
        request.plan_id, template_id, request.started_at
    )
    if started is None:
        raise _not_found("Session template not found in plan")
    return started.to_dict()


@router.get("/{session_id}")
async def get_session(session_id: int, context: Context):
    summary = context.workouts.get_session_summary(session_id)
    if summary is None:
        raise _not_found("Session not found")
    return summary.to_dict()


@router.post("/{session_id}/sets", status_code=status.HTTP_201_CREATED)
async def log_set(session_id: int, request: LogSetRequest, context: Context):
    """Record a set in a session."""
    if context.store.get_exercise_by_id(request.exercise_id) is None:
        raise _not_found("Exercise not found")
    logged = await context.workouts.log_set(
        session_id,
        request.exercise_id,
        request.weight,
        request.reps,
        is_warmup=request.is_warmup,
        completed_at=request.completed_at,
    )
    if logged is None:
        raise _not_found("Session not found")
    return logged.to_dict()


@router.post("/{session_id}/complete")
async def complete_session(session_id: int, request: CompleteSessionRequest, context: Context):
    """Finish a session. Strava delivery failures are queued, never returned."""
    finished = await context.workouts.complete_session(
        session_id, request.notes, request.completed_at
    )
    if finished is None:
        raise _not_found("Session not found")
    return context.workouts.get_session_summary(session_id).to_dict()

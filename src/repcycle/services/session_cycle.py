"""Session cycle scheduling.

A plan's session templates repeat in sequence order. The next session is
the template completed the fewest times; ties go to the lowest
sequence order. With no history that is template 1, and once every
template has been done equally often the cycle starts again at 1.
"""

from ..db.store import PlanStore
from ..models.exercises import Exercise
from ..models.history import CompletedSession, PlanSession
from ..models.plan import SessionTemplate, WorkoutPlan
from ..utils.dates import parse_iso


def count_completions(
    templates: list[SessionTemplate], sessions: list[CompletedSession]
) -> dict[int, int]:
    """Completed session count per template id. In-progress sessions are ignored."""
    counts = {template.id: 0 for template in templates}
    for session in sessions:
        if not isinstance(session, PlanSession) or session.is_in_progress:
            continue
        if session.session_template_id in counts:
            counts[session.session_template_id] += 1
    return counts


def select_next_template(
    templates: list[SessionTemplate], counts: dict[int, int]
) -> SessionTemplate | None:
    """Lowest sequence order among the least-completed templates."""
    if not templates:
        return None

    min_count = min(counts.get(t.id, 0) for t in templates)
    candidates = [t for t in templates if counts.get(t.id, 0) == min_count]
    return min(candidates, key=lambda t: t.sequence_order)


def _completed_for_template(store: PlanStore, template_id: int) -> list[PlanSession]:
    template = store.get_session_template_by_id(template_id)
    if template is None:
        return []
    return [
        session
        for session in store.get_completed_sessions_by_plan_id(template.workout_plan_id)
        if isinstance(session, PlanSession)
        and session.session_template_id == template_id
        and not session.is_in_progress
    ]


def get_completion_count_for_template(store: PlanStore, template_id: int) -> int:
    """How many times a template has been completed."""
    return len(_completed_for_template(store, template_id))


def get_completed_session_for_template_week(
    store: PlanStore, template_id: int, week: int
) -> PlanSession | None:
    """The n-th completion of a template (1-based, oldest first)."""
    if week < 1:
        return None

    completed = sorted(
        _completed_for_template(store, template_id),
        key=lambda s: parse_iso(s.started_at),
    )
    if week > len(completed):
        return None
    return completed[week - 1]


def get_next_session_template(store: PlanStore, plan_id: int) -> SessionTemplate | None:
    """The template to train next for a plan, or None if it has none."""
    templates = store.get_session_templates_by_plan_id(plan_id)
    sessions = store.get_completed_sessions_by_plan_id(plan_id)
    return select_next_template(templates, count_completions(templates, sessions))


def get_in_progress_session(store: PlanStore, plan_id: int) -> PlanSession | None:
    """The most recently started unfinished plan session, if any."""
    return next(
        (
            session
            for session in store.get_completed_sessions_by_plan_id(plan_id)
            if isinstance(session, PlanSession) and session.is_in_progress
        ),
        None,
    )


def get_unique_exercises_for_plan(store: PlanStore, plan_id: int) -> list[Exercise]:
    """Distinct exercises across all of a plan's sessions, first-seen order."""
    seen: set[int] = set()
    exercises = []
    for template in store.get_session_templates_by_plan_id(plan_id):
        for slot in store.get_exercise_templates_by_session_id(template.id):
            if slot.exercise_id in seen:
                continue
            seen.add(slot.exercise_id)
            exercise = store.get_exercise_by_id(slot.exercise_id)
            if exercise is not None:
                exercises.append(exercise)
    return exercises


def count_completed_sessions(store: PlanStore, plan_id: int) -> int:
    """Finished sessions of any type logged against a plan."""
    return sum(
        1
        for session in store.get_completed_sessions_by_plan_id(plan_id)
        if not session.is_in_progress
    )


def get_current_week(plan: WorkoutPlan, completed_count: int) -> int:
    """Training week implied by the number of completed sessions."""
    if completed_count <= 0 or plan.weekly_frequency <= 0:
        return 1
    week = completed_count // plan.weekly_frequency + 1
    return min(week, plan.duration_weeks)


def calculate_plan_progress(plan: WorkoutPlan, completed_count: int) -> int:
    """Percent of the plan's scheduled sessions that are done."""
    total = plan.weekly_frequency * plan.duration_weeks
    if total <= 0:
        return 0
    return round(completed_count / total * 100)

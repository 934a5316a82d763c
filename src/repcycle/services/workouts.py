"""Workout logging: sessions, sets and plan activation."""

from dataclasses import dataclass

import structlog

from ..db.store import PlanStore
from ..models.history import (
    CompletedSession,
    CompletedSet,
    PlanSession,
    SingleExerciseSession,
)
from ..models.sync import ActivityType, SyncCompletedSessionInput
from ..utils.dates import normalize_iso, to_iso, utc_now
from .strava_sync import StravaSyncService

logger = structlog.get_logger(__name__)


@dataclass
class SessionSummary:
    """A completed session with its logged sets."""

    session: CompletedSession
    sets: list[CompletedSet]

    @property
    def total_volume(self) -> float:
        return sum(s.weight * s.reps for s in self.sets if not s.is_warmup)

    def to_dict(self) -> dict:
        return {
            **self.session.to_dict(),
            "sets": [s.to_dict() for s in self.sets],
            "total_volume": self.total_volume,
        }


class WorkoutService:
    """Records training sessions against the plan store.

    Lookups that miss return ``None`` rather than raising.
    """

    def __init__(self, store: PlanStore, sync_service: StravaSyncService | None = None):
        self.store = store
        self.sync_service = sync_service

    async def start_plan_session(
        self, plan_id: int, template_id: int, started_at: str | None = None
    ) -> PlanSession | None:
        """Begin a session of one of the plan's templates."""
        template = self.store.get_session_template_by_id(template_id)
        if template is None or template.workout_plan_id != plan_id:
            return None

        session = PlanSession(
            workout_plan_id=plan_id,
            session_template_id=template_id,
            started_at=normalize_iso(started_at) if started_at else to_iso(utc_now()),
        )
        await self.store.insert_completed_session(session)
        logger.info("session_started", session_id=session.id, template_id=template_id)
        return session

    async def start_single_exercise_session(
        self, plan_id: int, exercise_id: int, started_at: str | None = None
    ) -> SingleExerciseSession | None:
        """Begin an ad-hoc session for a single exercise."""
        if self.store.get_workout_plan_by_id(plan_id) is None:
            return None
        if self.store.get_exercise_by_id(exercise_id) is None:
            return None

        session = SingleExerciseSession(
            workout_plan_id=plan_id,
            exercise_id=exercise_id,
            started_at=normalize_iso(started_at) if started_at else to_iso(utc_now()),
        )
        await self.store.insert_completed_session(session)
        logger.info("single_session_started", session_id=session.id, exercise_id=exercise_id)
        return session

    async def log_set(
        self,
        session_id: int,
        exercise_id: int,
        weight: float,
        reps: int,
        is_warmup: bool = False,
        completed_at: str | None = None,
    ) -> CompletedSet | None:
        """Record one set. Set numbers count up per exercise within the session."""
        if self.store.get_completed_session_by_id(session_id) is None:
            return None
        if weight < 0 or reps < 0:
            raise ValueError("Weight and reps must not be negative")

        previous = [
            s
            for s in self.store.get_completed_sets_by_session_id(session_id)
            if s.exercise_id == exercise_id
        ]
        completed_set = CompletedSet(
            completed_session_id=session_id,
            exercise_id=exercise_id,
            set_number=len(previous) + 1,
            weight=weight,
            reps=reps,
            is_warmup=is_warmup,
            completed_at=normalize_iso(completed_at) if completed_at else to_iso(utc_now()),
        )
        await self.store.insert_completed_set(completed_set)
        return completed_set

    async def complete_session(
        self,
        session_id: int,
        notes: str | None = None,
        completed_at: str | None = None,
    ) -> CompletedSession | None:
        """Finish a session, then hand it to Strava sync if configured.

        Sync never fails the completion. Pending outbox items get a retry
        pass afterwards.
        """
        session = self.store.get_completed_session_by_id(session_id)
        if session is None:
            return None
        if not session.is_in_progress:
            return session

        finished_at = normalize_iso(completed_at) if completed_at else to_iso(utc_now())
        await self.store.update_completed_session(session_id, finished_at, notes)
        logger.info("session_completed", session_id=session_id)

        if self.sync_service is not None:
            await self.sync_service.sync_completed_session(
                SyncCompletedSessionInput(
                    completed_session_id=session_id,
                    completed_at_iso=finished_at,
                    completed_set_count=len(self.store.get_completed_sets_by_session_id(session_id)),
                    activity_type=ActivityType.from_session_type(session.session_type),
                )
            )
            await self.sync_service.retry_pending()

        return session

    async def activate_plan(self, plan_id: int) -> bool:
        """Make one plan the only active plan."""
        if self.store.get_workout_plan_by_id(plan_id) is None:
            return False
        await self.store.deactivate_all_workout_plans()
        await self.store.update_workout_plan_active_status(plan_id, True)
        logger.info("plan_activated", plan_id=plan_id)
        return True

    def get_session_summary(self, session_id: int) -> SessionSummary | None:
        session = self.store.get_completed_session_by_id(session_id)
        if session is None:
            return None
        return SessionSummary(session, self.store.get_completed_sets_by_session_id(session_id))

    def get_history(self, plan_id: int | None = None, limit: int | None = None) -> list[SessionSummary]:
        """Finished sessions, newest first."""
        if plan_id is None:
            sessions = self.store.get_all_completed_sessions()
        else:
            sessions = self.store.get_completed_sessions_by_plan_id(plan_id)
        finished = [s for s in sessions if not s.is_in_progress]
        if limit is not None:
            finished = finished[:limit]
        return [
            SessionSummary(s, self.store.get_completed_sets_by_session_id(s.id))
            for s in finished
        ]

    def get_exercise_history(self, exercise_id: int) -> list[CompletedSet]:
        """All sets ever logged for an exercise, newest first."""
        return self.store.get_completed_sets_by_exercise_id(exercise_id)

    def get_last_working_set(self, exercise_id: int) -> CompletedSet | None:
        return self.store.get_last_completed_set_for_exercise(exercise_id)
